import pytest

from logmancer.models import FileInfo, LogFile, PageLine, PageResult


def test_file_info_to_dict():
    info = FileInfo(path="a.log", total_lines=3, indexing_progress=0.5)
    assert info.to_dict() == {"path": "a.log", "total_lines": 3, "indexing_progress": 0.5}


def test_page_result_equality_ignores_lines_and_progress():
    first = PageResult([PageLine(1, "a")], start_line=4, total_lines=9, indexing_progress=0.1)
    second = PageResult([], start_line=4, total_lines=9, indexing_progress=1.0)
    assert first == second


def test_page_result_differs_on_start_or_total():
    base = PageResult([], start_line=4, total_lines=9, indexing_progress=1.0)
    assert not base == PageResult([], start_line=5, total_lines=9, indexing_progress=1.0)
    assert not base == PageResult([], start_line=4, total_lines=10, indexing_progress=1.0)


def test_page_result_round_trip():
    page = PageResult(
        [PageLine(2, "one"), PageLine(3, "two")],
        start_line=1,
        total_lines=7,
        indexing_progress=0.25,
    )
    restored = PageResult.from_dict(page.to_dict())
    assert restored == page
    assert restored.lines == page.lines
    assert restored.indexing_progress == page.indexing_progress


def test_page_result_dict_holds_plain_lines():
    page = PageResult([PageLine(1, "x")], start_line=0, total_lines=1, indexing_progress=1.0)
    assert page.to_dict()["lines"] == [{"number": 1, "text": "x"}]


def test_page_line_equality_uses_fields():
    assert PageLine(2, "two") == PageLine(2, "two")
    assert not PageLine(2, "two") == PageLine(3, "two")


def test_log_file_open_starts_unindexed(tmp_path):
    data = b"first\nsecond\n"
    path = tmp_path / "app.log"
    path.write_bytes(data)

    log_file = LogFile.open(path)

    assert log_file.path == str(path)
    assert log_file.index == [0]
    assert log_file.filter == []
    assert log_file.regex is None
    assert log_file.size == len(data)
    assert bytes(log_file.content[:]) == data


def test_log_file_open_empty_file(tmp_path):
    path = tmp_path / "empty.log"
    path.write_bytes(b"")
    log_file = LogFile.open(path)
    assert log_file.size == 0
    assert len(log_file.content) == 0


def test_log_file_open_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        LogFile.open(tmp_path / "missing.log")