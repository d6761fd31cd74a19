import logging

import pytest

from logmancer.tui import (
    KEY_DOWN,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_UP,
    NavigationState,
    format_header,
    main,
    setup_logging,
    trunc_str,
)


@pytest.fixture
def isolated_logging(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield tmp_path
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_quit_key_stops():
    state = NavigationState()
    assert state.apply_key("q", 10) is False


def test_follow_toggles_back_and_forth():
    state = NavigationState()
    assert state.apply_key("f", 10) is True
    assert state.follow_mode is True
    state.apply_key("F", 10)
    assert state.follow_mode is False


def test_down_moves_one_line_unless_at_end():
    state = NavigationState(page_first_line=5)
    state.apply_key(KEY_DOWN, 10)
    assert state.page_first_line == 5 + 1
    state.end_reached = True
    state.apply_key(KEY_DOWN, 10)
    assert state.page_first_line == 5 + 1


def test_page_down_moves_a_page_unless_at_end():
    state = NavigationState(page_first_line=3)
    state.apply_key(KEY_PAGE_DOWN, 20)
    assert state.page_first_line == 3 + 20
    state.end_reached = True
    state.apply_key(KEY_PAGE_DOWN, 20)
    assert state.page_first_line == 3 + 20


def test_up_keys_leave_end_and_saturate_at_zero():
    state = NavigationState(page_first_line=0, end_reached=True)
    state.apply_key(KEY_UP, 10)
    assert state.page_first_line == 0
    assert state.end_reached is False

    state = NavigationState(page_first_line=4, end_reached=True)
    state.apply_key(KEY_PAGE_UP, 10)
    assert state.page_first_line == 0
    assert state.end_reached is False


def test_g_goes_to_top_and_capital_g_to_end():
    state = NavigationState(page_first_line=50)
    state.apply_key("G", 10)
    assert state.end_reached is True
    state.apply_key("g", 10)
    assert state.end_reached is False
    assert state.page_first_line == 0


def test_unknown_key_changes_nothing():
    state = NavigationState(page_first_line=7, end_reached=False, follow_mode=True)
    assert state.apply_key("x", 10) is True
    assert state == NavigationState(page_first_line=7, end_reached=False, follow_mode=True)


def test_trunc_str_keeps_short_strings():
    text = "short"
    assert trunc_str(text, 10) is text
    assert trunc_str(text, len(text)) == text


def test_trunc_str_cuts_long_strings_to_prefix():
    text = "a long line of log output"
    result = trunc_str(text, 6)
    assert len(result) == 6
    assert text.startswith(result)


def test_trunc_str_counts_characters_not_bytes():
    text = "ñandú ñandú"
    result = trunc_str(text, 4)
    assert len(result) == 4
    assert text.startswith(result)


def test_header_without_pending_indexing():
    header = format_header("app.log", False, 12, 1.0)
    assert header == "File: app.log | Follow Mode: OFF | Total Lines: 12"


def test_header_shows_indexing_progress():
    header = format_header("app.log", True, 12, 0.5)
    assert header.startswith("File: app.log | Follow Mode: ON | Total Lines: 12 (")
    assert header.endswith("% indexed)")
    assert "50.00" in header


def test_setup_logging_writes_to_log_file(isolated_logging):
    handler = setup_logging()
    handler.flush()
    content = (isolated_logging / "logmancer.log").read_text(encoding="utf-8")
    assert "Log initialized" in content
    assert setup_logging() is handler


def test_main_without_arguments_fails(isolated_logging, capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_with_missing_file_fails(isolated_logging):
    missing = isolated_logging / "does-not-exist.log"
    assert main([str(missing)]) == 1