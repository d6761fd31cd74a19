import pytest

from logmancer.scrolling import (
    VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX,
    approx_line_from_scroll,
    calculate_spacer_height,
    scroll_position,
)


def test_spacer_height_of_nothing_is_zero():
    assert calculate_spacer_height(0) == 0


@pytest.mark.parametrize("lines", [1, 10, 123, 5000])
def test_spacer_height_is_linear_for_small_files(lines):
    assert calculate_spacer_height(2 * lines) == 2 * calculate_spacer_height(lines)


def test_spacer_height_is_capped():
    assert calculate_spacer_height(10**12) == int(VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX)


def test_spacer_height_is_monotonic():
    samples = [0, 1, 9_999, 10_000, 10_001, 50_000, 500_000, 1_000_000, 10**9]
    heights = [calculate_spacer_height(n) for n in samples]
    assert heights == sorted(heights)
    assert all(h <= VIRTUAL_SCROLL_MAX_SPACER_HEIGHT_PX for h in heights)


def test_spacer_height_grows_past_linear_threshold():
    assert calculate_spacer_height(20_000) > calculate_spacer_height(10_000)


def test_scroll_position_at_edges():
    height = calculate_spacer_height(200)
    assert scroll_position(0, 200, height) == 0
    assert scroll_position(200, 200, height) == height


def test_scroll_position_empty_file():
    assert scroll_position(0, 0, 0) == 0


@pytest.mark.parametrize("start", [0, 1, 7, 50, 99])
def test_scroll_round_trip_in_linear_range(start):
    total = 100
    height = calculate_spacer_height(total)
    position = scroll_position(start, total, height)
    assert approx_line_from_scroll(total, position, height) == start


def test_approx_line_at_top_and_zero_height():
    assert approx_line_from_scroll(1000, 0, 500) == 0
    assert approx_line_from_scroll(1000, 10, 0) == 0