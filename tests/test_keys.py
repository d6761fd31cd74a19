import pytest

from logmancer.keys import (
    MIN_JUMP,
    SelectionSource,
    can_auto_enable_global_follow,
    can_mutate_global_follow_state,
    is_editable_target,
    is_handled_key,
    should_restore_focus,
    wheel_lines_to_jump,
)


def test_handled_keys_include_navigation_and_commands():
    assert is_handled_key("ArrowUp")
    assert is_handled_key("PageDown")
    assert is_handled_key("g")
    assert is_handled_key("G")
    assert is_handled_key("f")
    assert is_handled_key("F")


def test_handled_keys_exclude_unrelated_keys():
    assert not is_handled_key("Enter")
    assert not is_handled_key("a")


def test_editable_targets_are_detected():
    assert is_editable_target("INPUT", False)
    assert is_editable_target("TEXTAREA", False)
    assert is_editable_target("DIV", True)


def test_non_editable_targets_are_rejected():
    assert not is_editable_target("DIV", False)
    assert not is_editable_target(None, False)


def test_restore_focus_only_for_active_non_editable_target():
    assert should_restore_focus(True, "DIV", False)
    assert not should_restore_focus(False, "DIV", False)
    assert not should_restore_focus(True, "INPUT", False)


def test_auto_follow_is_only_enabled_for_main_pane():
    assert can_auto_enable_global_follow(SelectionSource.MAIN)
    assert not can_auto_enable_global_follow(SelectionSource.FILTER)


def test_global_follow_state_mutation_is_only_allowed_for_main_pane():
    assert can_mutate_global_follow_state(SelectionSource.MAIN)
    assert not can_mutate_global_follow_state(SelectionSource.FILTER)


@pytest.mark.parametrize(
    "delta_y, delta_mode, page_size, expected",
    [
        (110.0, 0, 50, 16),
        (-110.0, 0, 50, -16),
        (5.0, 0, 50, 2),
        (-5.0, 0, 50, -2),
        (3.0, 1, 50, 7),
        (-3.0, 1, 50, -7),
        (3.0, 1, 10, 2),
        (0.0, 0, 50, 2),
    ],
)
def test_wheel_lines_to_jump(delta_y, delta_mode, page_size, expected):
    assert wheel_lines_to_jump(delta_y, delta_mode, page_size) == expected


def test_wheel_jump_never_below_minimum():
    for delta in (0.1, 1.0, 10.0, 13.0):
        assert abs(wheel_lines_to_jump(delta, 0, 50)) >= MIN_JUMP


def test_wheel_jump_page_mode_ignores_delta_size():
    assert wheel_lines_to_jump(1.0, 2, 100) == wheel_lines_to_jump(500.0, 2, 100)
    assert wheel_lines_to_jump(1.0, 2, 100) == 15


def test_wheel_jump_nan_delta_moves_nothing():
    assert wheel_lines_to_jump(float("nan"), 0, 50) == 0