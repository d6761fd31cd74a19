"""Background threads that keep the line index and filter up to date."""

from __future__ import annotations

import queue
import threading
import time

from logmancer.file_ops import FileWriter

_CHUNK_PAUSE_SECONDS = 0.001


def _reload_loop(
    writer: FileWriter,
    reload_queue: queue.Queue[None],
    filter_queue: queue.Queue[str | None],
) -> None:
    while True:
        reload_queue.get()
        try:
            writer.reload()
        except OSError as error:
            raise RuntimeError(f"Error reloading file: {error}") from error
        while True:
            try:
                end_reached = writer.index_lines()
            except OSError as error:
                raise RuntimeError(f"Error indexing file: {error}") from error
            filter_queue.put(None)
            if end_reached:
                break
            time.sleep(_CHUNK_PAUSE_SECONDS)


def _filter_loop(writer: FileWriter, filter_queue: queue.Queue[str | None]) -> None:
    while True:
        pattern = filter_queue.get()
        writer.filter(pattern)
        while True:
            try:
                end_reached = writer.index_filter()
            except (OSError, ValueError) as error:
                raise RuntimeError(f"Error indexing filtered lines: {error}") from error
            if end_reached:
                break
            time.sleep(_CHUNK_PAUSE_SECONDS)


def spawn_reload_worker(
    writer: FileWriter,
    reload_queue: queue.Queue[None],
    filter_queue: queue.Queue[str | None],
) -> threading.Thread:
    """Start a thread that reloads and indexes the file on each request.

    After every indexed chunk it asks the filter thread to catch up.
    """
    thread = threading.Thread(
        target=_reload_loop,
        args=(writer, reload_queue, filter_queue),
        name="logmancer-reload",
        daemon=True,
    )
    thread.start()
    return thread


def spawn_filter_worker(
    writer: FileWriter, filter_queue: queue.Queue[str | None]
) -> threading.Thread:
    """Start a thread that applies patterns (None means continue) to the index."""
    thread = threading.Thread(
        target=_filter_loop,
        args=(writer, filter_queue),
        name="logmancer-filter",
        daemon=True,
    )
    thread.start()
    return thread