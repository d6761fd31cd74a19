"""Data types shared by the log reading layer."""

from __future__ import annotations

import mmap
import os
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Union

Content = Union[mmap.mmap, bytes]


@dataclass
class FileInfo:
    """Summary of an open file."""

    path: str
    total_lines: int
    indexing_progress: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PageLine:
    """One line of a page, numbered from 1 as in the source file."""

    number: int
    text: str


@dataclass(eq=False)
class PageResult:
    """A page of lines plus the indexing state it was read under.

    Two results are equal when they start at the same line and see the
    same total, whatever lines they carry.
    """

    lines: list[PageLine]
    start_line: int
    total_lines: int
    indexing_progress: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PageResult):
            return NotImplemented
        return (
            self.start_line == other.start_line
            and self.total_lines == other.total_lines
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lines": [asdict(line) for line in self.lines],
            "start_line": self.start_line,
            "total_lines": self.total_lines,
            "indexing_progress": self.indexing_progress,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PageResult:
        return cls(
            lines=[PageLine(int(line["number"]), str(line["text"])) for line in data["lines"]],
            start_line=int(data["start_line"]),
            total_lines=int(data["total_lines"]),
            indexing_progress=float(data["indexing_progress"]),
        )


def _map_file(path: str) -> Content:
    with open(path, "rb") as handle:
        if os.fstat(handle.fileno()).st_size == 0:
            return b""
        return mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)


@dataclass
class LogFile:
    """Mapped contents of a file with its line index and filter state.

    Every access must hold ``lock``.
    """

    path: str
    content: Content
    size: int
    index: list[int] = field(default_factory=lambda: [0])
    filter: list[bool] = field(default_factory=list)
    regex: str | None = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> LogFile:
        """Map the file at ``path``; nothing is indexed yet."""
        path_str = os.fspath(path)
        content = _map_file(path_str)
        return cls(path=path_str, content=content, size=len(content))