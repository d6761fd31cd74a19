from logmancer.api_models import ServerBrowserEntry
from logmancer.spotlight import filter_entries, first_focus_target, parent_path


def mk_entry(name: str, path: str, entry_type: str) -> ServerBrowserEntry:
    return ServerBrowserEntry(name=name, path=path, entry_type=entry_type, size=None, modified=None)


def test_filter_entries_only_applies_to_loaded_current_directory_entries():
    entries = [
        mk_entry("app.log", "app.log", "file"),
        mk_entry("infra", "infra", "directory"),
        mk_entry("error.log", "error.log", "file"),
    ]

    filtered = filter_entries(entries, "log")
    assert len(filtered) == 2
    assert filtered[0].name == "app.log"
    assert filtered[1].name == "error.log"


def test_filter_entries_is_case_insensitive_and_returns_all_for_empty_query():
    entries = [
        mk_entry("API.LOG", "API.LOG", "file"),
        mk_entry("docs", "docs", "directory"),
    ]

    filtered = filter_entries(entries, "api")
    assert len(filtered) == 1
    assert filtered[0].name == "API.LOG"

    unfiltered = filter_entries(entries, "   ")
    assert len(unfiltered) == 2


def test_filter_entries_trims_query():
    entries = [mk_entry("app.log", "app.log", "file"), mk_entry("docs", "docs", "directory")]
    assert filter_entries(entries, "  DOCS  ") == [entries[1]]


def test_filter_entries_returns_new_list():
    entries = [mk_entry("app.log", "app.log", "file")]
    result = filter_entries(entries, "")
    assert result == entries
    assert result is not entries


def test_parent_path_stays_at_root_and_moves_up_one_level():
    assert parent_path("") == ""
    assert parent_path("service") == ""
    assert parent_path("service/api") == "service"


def test_parent_path_ignores_surrounding_slashes():
    assert parent_path("/service/api/") == "service"
    assert parent_path("/") == ""


def test_first_focus_target_selects_first_entry_with_file_flag():
    entries = [
        mk_entry("app.log", "logs/app.log", "file"),
        mk_entry("archive", "logs/archive", "directory"),
    ]

    assert first_focus_target(entries) == ("logs/app.log", True)
    assert first_focus_target([]) is None


def test_first_focus_target_reports_directory():
    entries = [mk_entry("archive", "logs/archive", "directory")]
    assert first_focus_target(entries) == ("logs/archive", False)