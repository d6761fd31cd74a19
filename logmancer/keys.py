"""Keyboard, focus and mouse-wheel rules of the log panes."""

from __future__ import annotations

import enum
import math

SCROLL_RATIO = 0.15
DEBOUNCE_MS = 200
MIN_JUMP = 2

ARROW_UP = "ArrowUp"
ARROW_DOWN = "ArrowDown"
PAGE_UP = "PageUp"
PAGE_DOWN = "PageDown"

DOM_DELTA_PIXEL = 0

_HANDLED_KEYS = frozenset({ARROW_DOWN, ARROW_UP, PAGE_DOWN, PAGE_UP, "g", "G", "f", "F"})
_EDITABLE_TAGS = frozenset({"INPUT", "TEXTAREA", "SELECT"})

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class SelectionSource(enum.Enum):
    """Which pane a selection or key press comes from."""

    MAIN = "main"
    FILTER = "filter"


def is_handled_key(key: str) -> bool:
    """True for the keys the panes act on."""
    return key in _HANDLED_KEYS


def is_editable_target(tag_name: str | None, content_editable: bool) -> bool:
    """True if the focused element takes text input."""
    if content_editable:
        return True
    return tag_name in _EDITABLE_TAGS


def should_restore_focus(
    is_active_panel: bool, active_tag_name: str | None, content_editable: bool
) -> bool:
    """Focus goes back to the pane only if it is active and no text input has focus."""
    return is_active_panel and not is_editable_target(active_tag_name, content_editable)


def can_auto_enable_global_follow(selection_source: SelectionSource) -> bool:
    """Only the main pane may switch following on by reaching the end."""
    return selection_source is SelectionSource.MAIN


def can_mutate_global_follow_state(selection_source: SelectionSource) -> bool:
    """Only the main pane may change the tail and follow state."""
    return selection_source is SelectionSource.MAIN


def _to_i32(value: float) -> int:
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


def wheel_lines_to_jump(delta_y: float, delta_mode: int, page_size: int) -> int:
    """Signed number of lines one wheel event moves the view.

    Pixel deltas move by a share of the delta, line or page deltas by a share
    of the page; either way at least MIN_JUMP lines. Negative scrolls up.
    """
    if math.isnan(delta_y):
        signum = 0
    else:
        signum = int(math.copysign(1.0, delta_y))
    if delta_mode == DOM_DELTA_PIXEL:
        lines_to_jump = max(MIN_JUMP, _to_i32(abs(delta_y) * SCROLL_RATIO))
    else:
        lines_to_jump = max(MIN_JUMP, _to_i32(page_size * SCROLL_RATIO))
    return lines_to_jump * signum