"""Terminal pager for large log files."""

from __future__ import annotations

import curses
import logging
import os
import sys
from dataclasses import dataclass

from logmancer.models import PageLine, PageResult
from logmancer.reader import LogReader

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "logmancer.log"
DEFAULT_PAGE_SIZE = 20
POLL_TIMEOUT_MS = 1000

KEY_UP = "Up"
KEY_DOWN = "Down"
KEY_PAGE_UP = "PageUp"
KEY_PAGE_DOWN = "PageDown"

_CURSES_KEYS = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_PPAGE: KEY_PAGE_UP,
    curses.KEY_NPAGE: KEY_PAGE_DOWN,
}

_log_handler: logging.Handler | None = None


@dataclass
class NavigationState:
    """Where the pager is in the file and whether it follows new lines."""

    page_first_line: int = 0
    end_reached: bool = False
    follow_mode: bool = False

    def apply_key(self, key: str, page_size: int) -> bool:
        """Update the state for a key press; False means quit."""
        if key == "q":
            return False
        if key in ("f", "F"):
            self.follow_mode = not self.follow_mode
        elif key == "g":
            self.end_reached = False
            self.page_first_line = 0
        elif key == "G":
            self.end_reached = True
        elif key == KEY_DOWN and not self.end_reached:
            self.page_first_line += 1
        elif key == KEY_UP:
            self.end_reached = False
            self.page_first_line = max(self.page_first_line - 1, 0)
        elif key == KEY_PAGE_DOWN and not self.end_reached:
            self.page_first_line += page_size
        elif key == KEY_PAGE_UP:
            self.end_reached = False
            self.page_first_line = max(self.page_first_line - page_size, 0)
        return True


def trunc_str(s: str, max_len: int) -> str:
    """Cut ``s`` to ``max_len`` characters; at least one is kept when cutting."""
    if len(s) > max_len:
        return s[: max(max_len, 1)]
    return s


def format_header(path: str, follow_mode: bool, total_lines: int, indexing_progress: float) -> str:
    """Status line; ``indexing_progress`` is a fraction between 0 and 1."""
    percent = indexing_progress * 100.0
    indexed = f" ({percent:.2f}% indexed)" if percent < 100.0 else ""
    follow = "ON" if follow_mode else "OFF"
    return f"File: {path} | Follow Mode: {follow} | Total Lines: {total_lines}{indexed}"


def _format_line(line: PageLine, left_offset: int, columns: int) -> str:
    width = max(columns - left_offset - 2, 0)
    return f"{line.number:<{left_offset}}| {trunc_str(line.text.rstrip(), width)}"


def setup_logging() -> logging.Handler:
    """Send debug logging to logmancer.log in the working directory."""
    global _log_handler
    root = logging.getLogger()
    if _log_handler is not None and _log_handler in root.handlers:
        return _log_handler
    handler = logging.FileHandler(os.path.abspath(LOG_FILE_NAME), mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter("[%(asctime)s %(levelname)s %(name)s] %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    _log_handler = handler
    logger.debug("Log initialized")
    return handler


def _key_name(code: int) -> str | None:
    if code in _CURSES_KEYS:
        return _CURSES_KEYS[code]
    if 0 <= code < 256:
        return chr(code)
    return None


def _put_row(screen: curses.window, row: int, text: str, columns: int) -> None:
    try:
        screen.move(row, 0)
        screen.clrtoeol()
        screen.addnstr(row, 0, text, columns)
    except curses.error:
        pass


def _draw(
    screen: curses.window, path: str, state: NavigationState, page: PageResult,
    page_size: int, columns: int,
) -> None:
    screen.erase()
    header = format_header(path, state.follow_mode, page.total_lines, page.indexing_progress)
    _put_row(screen, 0, header, columns)
    _put_row(screen, 1, "-" * columns, columns)
    last_line = page.lines[-1].number if page.lines else page.start_line + page_size
    left_offset = len(str(last_line)) + 1
    for row, line in enumerate(page.lines, start=2):
        _put_row(screen, row, _format_line(line, left_offset, columns), columns)


def _run(screen: curses.window, reader: LogReader, path: str) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    screen.keypad(True)

    state = NavigationState()
    page_size = DEFAULT_PAGE_SIZE
    last_page: PageResult | None = None
    last_dimensions = (0, 0)

    while True:
        rows, columns = screen.getmaxyx()
        if rows <= 2 or columns <= 8:
            screen.timeout(100)
            screen.getch()
            continue

        dimensions_changed = (columns, rows) != last_dimensions
        if dimensions_changed:
            page_size = rows - 2
            last_dimensions = (columns, rows)

        try:
            if state.end_reached:
                page = reader.tail(page_size, state.follow_mode)
            else:
                page = reader.read_page(state.page_first_line, page_size)
        except (OSError, EOFError, IndexError) as error:
            logger.error("Error reading file: %s", error)
            break

        state.page_first_line = page.start_line
        state.end_reached = state.page_first_line + page_size >= page.total_lines
        progress = page.indexing_progress * 100.0

        if last_page is None or last_page != page or dimensions_changed:
            _draw(screen, path, state, page, page_size, columns)
            last_page = page
        screen.refresh()

        polling = (state.end_reached and state.follow_mode) or progress < 100.0
        screen.timeout(POLL_TIMEOUT_MS if polling else -1)
        code = screen.getch()
        if code == -1:
            continue
        name = _key_name(code)
        if name is not None and not state.apply_key(name, page_size):
            break


def main(argv: list[str] | None = None) -> int:
    """Page through the file named on the command line."""
    args = sys.argv[1:] if argv is None else argv
    setup_logging()
    if not args:
        print("Usage: logmancer-tui <file path>", file=sys.stderr)
        return 1
    path = args[0]

    try:
        reader = LogReader(path)
    except OSError as error:
        logger.error("Error opening file: %s", error)
        return 1

    curses.wrapper(_run, reader, path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())