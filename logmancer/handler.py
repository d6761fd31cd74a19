"""Owns a mapped log file and the threads that index it."""

from __future__ import annotations

import logging
import os
import queue
import time

from logmancer.file_ops import FileReader, FileWriter
from logmancer.models import LogFile
from logmancer.worker import spawn_filter_worker, spawn_reload_worker

logger = logging.getLogger(__name__)

_SETTLE_SECONDS = 0.5


class LogFileHandler:
    """Opens a file and keeps its index and filter updated in the background."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._reload_queue: queue.Queue[None] = queue.Queue()
        self._filter_queue: queue.Queue[str | None] = queue.Queue()
        self._log_file = LogFile.open(path)
        logger.info("File %s loaded", self._log_file.path)

        spawn_reload_worker(FileWriter(self._log_file), self._reload_queue, self._filter_queue)
        spawn_filter_worker(FileWriter(self._log_file), self._filter_queue)

        self._reload_queue.put(None)

    def reload(self) -> None:
        """Ask for a reload and give the worker a moment to start on it."""
        self._reload_queue.put(None)
        time.sleep(_SETTLE_SECONDS)

    def filter(self, regex: str | None) -> None:
        """Apply a new pattern, or with None continue the current one."""
        self._filter_queue.put(regex)
        time.sleep(_SETTLE_SECONDS)

    def read_ops(self) -> FileReader:
        return FileReader(self._log_file)