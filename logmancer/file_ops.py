"""Reading and indexing operations over a shared LogFile."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from itertools import pairwise

from logmancer.models import LogFile

LINE_MAX_BYTES = 10 * 1024
INDEX_MAX_BYTES = 1024 * 1024
INDEX_MAX_LINES = 1000


class FileChangedError(OSError):
    """The file got smaller since it was mapped."""


class FileReader:
    """Read-only view of a LogFile.

    Each call takes the file's lock; used as a context manager it holds the
    lock for the whole block, so several calls see one consistent state.
    """

    def __init__(self, log_file: LogFile) -> None:
        self._log_file = log_file

    def __enter__(self) -> FileReader:
        self._log_file.lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._log_file.lock.release()

    def file_path(self) -> str:
        return self._log_file.path

    def read_line(self, line_number: int) -> str:
        """Return line ``line_number`` (from 0), capped at LINE_MAX_BYTES."""
        log_file = self._log_file
        with log_file.lock:
            index = log_file.index
            if not 0 <= line_number < len(index):
                raise EOFError("Unexpected end of file")
            length = len(log_file.content)
            start = index[line_number]
            following = length if line_number + 1 == len(index) else index[line_number + 1]
            line_size = max(following - start, 0)
            end = min(start + min(line_size, LINE_MAX_BYTES), length)
            raw = log_file.content[start:end]
        return raw.decode("utf-8", errors="replace").rstrip()

    def read_filter_line(self, line_number: int) -> str | None:
        """Return the line if it matched the filter, else None."""
        log_file = self._log_file
        with log_file.lock:
            if not 0 <= line_number < len(log_file.filter):
                raise IndexError(f"line {line_number} has not been processed by the filter")
            if not log_file.filter[line_number]:
                return None
            return self.read_line(line_number)

    def total_lines(self) -> int:
        """Lines indexed so far."""
        with self._log_file.lock:
            return len(self._log_file.index)

    def filtered_lines(self) -> int:
        """Matches found so far."""
        with self._log_file.lock:
            return sum(self._log_file.filter)

    def processed_filter_lines(self) -> int:
        """Source lines the filter has looked at."""
        with self._log_file.lock:
            return len(self._log_file.filter)

    def indexing_progress(self) -> float:
        log_file = self._log_file
        with log_file.lock:
            size = len(log_file.content)
            if size == 0:
                return 1.0
            return log_file.index[-1] / size

    def filter_indexing_progress(self) -> float:
        log_file = self._log_file
        with log_file.lock:
            size = len(log_file.content)
            if size == 0:
                return 1.0
            return log_file.index[len(log_file.filter)] / size


def _newline_offsets(chunk: bytes) -> Iterator[int]:
    position = chunk.find(b"\n")
    while position != -1:
        yield position
        position = chunk.find(b"\n", position + 1)


class FileWriter:
    """Mutating operations on a LogFile: remapping and indexing."""

    def __init__(self, log_file: LogFile) -> None:
        self._log_file = log_file

    def reload(self) -> None:
        """Remap the file if it grew; raise FileChangedError if it shrank."""
        log_file = self._log_file
        with log_file.lock:
            current_size = os.stat(log_file.path).st_size
            if current_size > log_file.size:
                fresh = LogFile.open(log_file.path)
                log_file.content = fresh.content
                log_file.size = fresh.size
            elif current_size < log_file.size:
                raise FileChangedError("File changed")

    def index_lines(self) -> bool:
        """Index up to INDEX_MAX_BYTES more bytes; True once the end is reached."""
        log_file = self._log_file
        with log_file.lock:
            start = log_file.index[-1]
            length = len(log_file.content)
            end = min(length, start + INDEX_MAX_BYTES)
            end_reached = length <= start + INDEX_MAX_BYTES
            chunk = log_file.content[start:end]

        offsets = [start + offset + 1 for offset in _newline_offsets(chunk)]

        with log_file.lock:
            if log_file.index[-1] != start:
                return False
            log_file.index.extend(offsets)
            return end_reached

    def filter(self, pattern: str | None) -> None:
        """Set a new pattern and restart filtering; None keeps the current one."""
        if pattern is None:
            return
        with self._log_file.lock:
            self._log_file.regex = pattern
            self._log_file.filter.clear()

    def index_filter(self) -> bool:
        """Match up to INDEX_MAX_LINES more lines; True once all indexed lines are done."""
        log_file = self._log_file
        with log_file.lock:
            if log_file.regex is None:
                return True
            try:
                compiled = re.compile(log_file.regex)
            except re.error as error:
                raise ValueError(f"invalid filter pattern: {error}") from error

            start_line = len(log_file.filter)
            last_line = len(log_file.index) - 1
            end_line = min(last_line, start_line + INDEX_MAX_LINES)

            bounds = log_file.index[start_line:end_line + 1]
            for begin, finish in pairwise(bounds):
                raw = log_file.content[begin:finish]
                try:
                    text = raw.decode("utf-8")
                except UnicodeDecodeError:
                    matched = False
                else:
                    matched = compiled.search(text) is not None
                log_file.filter.append(matched)

            return end_line == last_line