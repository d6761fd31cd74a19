"""Virtual scrollbar geometry for views of very long files."""

from __future__ import annotations

import math

LOG_LINE_HEIGHT_PX = 15.0
VIRTUAL_SCROLL_BASE_LINES = 10_000.0
VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX = 10_000_000.0


def calculate_spacer_height(lines: int) -> int:
    """Height in pixels of the spacer that stands in for ``lines`` lines.

    Grows linearly up to VIRTUAL_SCROLL_BASE_LINES lines, logarithmically
    beyond, and never exceeds VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX.
    """
    count = float(lines)
    if count <= VIRTUAL_SCROLL_BASE_LINES:
        height = count * LOG_LINE_HEIGHT_PX
    else:
        height = (
            VIRTUAL_SCROLL_BASE_LINES * LOG_LINE_HEIGHT_PX
            + math.log(count / VIRTUAL_SCROLL_BASE_LINES)
            * VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX
            / 2.0
        )
    return int(max(min(height, VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX), 0.0))


def scroll_position(start_line: int, total_lines: int, spacer_height: int) -> int:
    """Scroll offset that places the scrollbar at ``start_line``."""
    if total_lines <= 0:
        return 0
    ratio = start_line / total_lines
    return max(math.ceil(ratio * spacer_height), 0)


def approx_line_from_scroll(total_lines: int, scroll_top: float, scroll_height: float) -> int:
    """Line that a scroll offset points at."""
    if scroll_height <= 0:
        return 0
    ratio = total_lines * scroll_top / scroll_height
    return max(math.floor(ratio), 0)