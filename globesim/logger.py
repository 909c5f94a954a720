"""In-memory application log with levels and a bounded history."""

from __future__ import annotations

import inspect
import os
import threading
from datetime import datetime
from enum import IntEnum

from globesim.capped_deque import CappedDeque

DEFAULT_CAPACITY = 500


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_PREFIXES = {
    LogLevel.DEBUG: "D",
    LogLevel.INFO: "I",
    LogLevel.WARN: "W",
    LogLevel.ERROR: "E",
}


def format_timestamp(moment: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS.mmm``."""
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"


def level_name(value: int) -> str:
    """Name of a log level, or ``"Unknown"``."""
    try:
        return LogLevel(value).name
    except ValueError:
        return "Unknown"


class Logger:
    """Thread-safe log keeping the most recent entries, newest first."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, level: LogLevel = LogLevel.INFO) -> None:
        self._lock = threading.Lock()
        self._entries: CappedDeque[str] = CappedDeque(capacity)
        self._level = LogLevel(level)
        self.display = False

    @property
    def level(self) -> LogLevel:
        return self._level

    def log(
        self,
        level: LogLevel,
        message: str,
        file_name: str | None = None,
        line_number: int | None = None,
    ) -> str | None:
        """Record a message; returns the stored entry, or None if filtered out.

        File name and line default to the caller's location.
        """
        if file_name is None or line_number is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            if caller is not None:
                if file_name is None:
                    file_name = os.path.basename(caller.f_code.co_filename)
                if line_number is None:
                    line_number = caller.f_lineno
            del frame, caller

        with self._lock:
            if level < self._level:
                return None
            entry = (
                f"{format_timestamp(datetime.now())} - {file_name}:{line_number} : {message}"
            )
            prefix = _PREFIXES.get(level)
            if prefix is not None:
                entry = prefix + entry
            self._entries.push_front(entry)
            return entry

    def entries(self) -> list[str]:
        """Stored entries, newest first."""
        with self._lock:
            return self._entries.items()

    def set_level(self, level: LogLevel) -> None:
        with self._lock:
            self._level = LogLevel(level)

    def set_capacity(self, capacity: int) -> None:
        with self._lock:
            self._entries.update_capacity(capacity)

    def toggle_display(self) -> bool:
        """Flip whether the log view is shown; returns the new state."""
        with self._lock:
            self.display = not self.display
            return self.display