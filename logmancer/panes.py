"""Helpers behind the log view panes: trace flags and line revealing."""

from __future__ import annotations

from collections.abc import Iterable

SCROLL_TRACE_FLAGS = ("scroll_trace", "scrollTrace", "debug_scroll")
ENABLED_VALUES = frozenset({"", "1", "true", "yes", "on"})


def query_flag_enabled(search: str, flags: Iterable[str]) -> bool:
    """True if a query string turns on any of ``flags``.

    A bare flag counts as enabled.
    """
    wanted = set(flags)
    for pair in search.lstrip("?").split("&"):
        key, separator, value = pair.partition("=")
        if not separator:
            value = "true"
        if key in wanted and value in ENABLED_VALUES:
            return True
    return False


def scroll_trace_enabled(search: str | None = None) -> bool:
    """Whether scroll tracing is requested by the page's query string."""
    if search is None:
        return False
    return query_flag_enabled(search, SCROLL_TRACE_FLAGS)


def reveal_start_line_for_selected_line(selected_original_line: int, page_size: int) -> int:
    """First line of a page that centres the selected 1-based line."""
    if selected_original_line == 0:
        return 0
    selected_zero_based = max(selected_original_line - 1, 0)
    return max(selected_zero_based - page_size // 2, 0)