"""Registry of open log files keyed by generated identifiers."""

from __future__ import annotations

import threading
import uuid

from logmancer.reader import LogReader


class LogRegistry:
    """Thread-safe map from file ids to open readers."""

    def __init__(self) -> None:
        self._open_files: dict[uuid.UUID, LogReader] = {}
        self._lock = threading.Lock()

    def open_file(self, path: str) -> str:
        """Open ``path`` and return the id it is registered under."""
        file_id = uuid.uuid4()
        reader = LogReader(path)
        with self._lock:
            self._open_files[file_id] = reader
        return str(file_id)

    def get_reader(self, file_id: str) -> LogReader | None:
        """Reader registered under ``file_id``, or None if unknown or malformed."""
        try:
            key = uuid.UUID(file_id)
        except (ValueError, TypeError, AttributeError):
            return None
        with self._lock:
            return self._open_files.get(key)