"""Paged reading of a log file that is indexed in the background."""

from __future__ import annotations

import logging
import os

from logmancer.handler import LogFileHandler
from logmancer.models import FileInfo, PageLine, PageResult

logger = logging.getLogger(__name__)


class LogReader:
    """Reads pages, tails and filtered views of one log file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._handler = LogFileHandler(path)

    def file_info(self) -> FileInfo:
        """Path, indexed line count and indexing progress of the file."""
        with self._handler.read_ops() as ops:
            info = FileInfo(
                path=ops.file_path(),
                total_lines=ops.total_lines(),
                indexing_progress=ops.indexing_progress(),
            )
        logger.debug("%r", info)
        return info

    def read_page(self, start_line: int, max_lines: int) -> PageResult:
        """Read up to ``max_lines`` lines from ``start_line``.

        Near the end of the index the page is shifted back so that it stays full.
        """
        logger.debug("Reading from line %d to max %d", start_line, max_lines)
        with self._handler.read_ops() as ops:
            total = ops.total_lines()
            to_line = min(start_line + max_lines, total)
            from_line = max(to_line - max_lines, 0)
            lines = [
                PageLine(number=line + 1, text=ops.read_line(line))
                for line in range(from_line, to_line)
            ]
            return PageResult(
                lines=lines,
                start_line=from_line,
                total_lines=ops.total_lines(),
                indexing_progress=ops.indexing_progress(),
            )

    def tail(self, max_lines: int, follow: bool) -> PageResult:
        """Read the last ``max_lines`` lines, reloading the file first if ``follow``."""
        logger.debug("Reading last %d lines to the end", max_lines)
        if follow:
            self._handler.reload()
        with self._handler.read_ops() as ops:
            total = ops.total_lines()
            start_line = max(total - max_lines, 0)
            lines = [
                PageLine(number=line + 1, text=ops.read_line(line))
                for line in range(start_line, total)
            ]
            return PageResult(
                lines=lines,
                start_line=start_line,
                total_lines=total,
                indexing_progress=ops.indexing_progress(),
            )

    def filter(self, regex: str) -> None:
        """Start filtering the file with ``regex``."""
        self._handler.filter(regex)

    def read_filter(self, start_line: int, max_lines: int) -> PageResult:
        """Read up to ``max_lines`` matches, skipping the first ``start_line`` matches.

        ``total_lines`` of the result is the number of matches found so far.
        """
        logger.debug("Reading filter from line %d to max %d", start_line, max_lines)
        with self._handler.read_ops() as ops:
            total = ops.filtered_lines()
            processed = ops.processed_filter_lines()
            lines: list[PageLine] = []
            matched = 0
            for line in range(processed):
                if len(lines) >= max_lines:
                    break
                text = ops.read_filter_line(line)
                if text is None:
                    continue
                if matched >= start_line:
                    lines.append(PageLine(number=line + 1, text=text))
                matched += 1
            return PageResult(
                lines=lines,
                start_line=start_line,
                total_lines=total,
                indexing_progress=ops.filter_indexing_progress(),
            )

    def tail_filter(self, max_lines: int, follow: bool) -> PageResult:
        """Read the last ``max_lines`` matches found so far.

        With ``follow`` the filter is first asked to catch up with the index.
        """
        logger.debug("Reading last %d filtered lines to the end", max_lines)
        if follow:
            self._handler.filter(None)
        with self._handler.read_ops() as ops:
            lines: list[PageLine] = []
            current_line = ops.processed_filter_lines()
            while len(lines) < max_lines and current_line > 0:
                current_line -= 1
                text = ops.read_filter_line(current_line)
                if text is not None:
                    lines.append(PageLine(number=current_line + 1, text=text))
            lines.reverse()
            return PageResult(
                lines=lines,
                start_line=current_line,
                total_lines=ops.total_lines(),
                indexing_progress=ops.filter_indexing_progress(),
            )