import pytest

from logmancer.panes import (
    query_flag_enabled,
    reveal_start_line_for_selected_line,
    scroll_trace_enabled,
)


@pytest.mark.parametrize(
    "search",
    ["?scroll_trace", "?scroll_trace=1", "?scroll_trace=true", "?foo=bar&scroll_trace=on"],
)
def test_query_flag_accepts_enabled_values(search):
    assert query_flag_enabled(search, ["scroll_trace"]) is True


@pytest.mark.parametrize("search", ["?foo=bar", "?scroll_trace=0", "?scroll_trace=false"])
def test_query_flag_rejects_missing_or_disabled_values(search):
    assert query_flag_enabled(search, ["scroll_trace"]) is False


def test_scroll_trace_enabled_uses_known_flags():
    assert scroll_trace_enabled("?scrollTrace=yes") is True
    assert scroll_trace_enabled("?debug_scroll") is True
    assert scroll_trace_enabled("?debug_scroll=off") is False


def test_scroll_trace_disabled_without_query():
    assert scroll_trace_enabled() is False
    assert scroll_trace_enabled("") is False


def test_reveal_line_at_top_clamps_to_zero():
    assert reveal_start_line_for_selected_line(1, 50) == 0


def test_reveal_center_for_middle_line():
    assert reveal_start_line_for_selected_line(101, 50) == 75


def test_reveal_handles_even_page_size_off_by_one():
    assert reveal_start_line_for_selected_line(26, 50) == 0
    assert reveal_start_line_for_selected_line(27, 50) == 1


def test_reveal_line_zero():
    assert reveal_start_line_for_selected_line(0, 50) == 0