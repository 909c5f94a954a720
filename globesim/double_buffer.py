"""A pair of buffers: one is written while the other is read."""

from __future__ import annotations

import threading
from typing import Any


class DoubleBuffer:
    """Two equally sized lists swapped between a writer and a reader.

    The writer fills ``inactive()`` and calls ``swap()``. The reader always
    sees the last completed buffer through ``active()``.
    """

    def __init__(self, size: int) -> None:
        self._first: list[Any] = [None] * size
        self._second: list[Any] = [None] * size
        self._active = self._first
        self._last_complete = self._first
        self._lock = threading.Lock()
        self._ready = threading.Event()

    def active(self) -> list[Any]:
        """The most recently completed buffer."""
        return self._last_complete

    def inactive(self) -> list[Any]:
        """The buffer that is free to be filled."""
        with self._lock:
            return self._other(self._active)

    def swap(self) -> None:
        """Publish the inactive buffer and mark new data as ready."""
        with self._lock:
            target = self._other(self._active)
            self._active = target
            self._last_complete = target
            self._ready.set()

    def data_ready(self) -> bool:
        """Whether a swap has happened since the flag was last cleared."""
        return self._ready.is_set()

    def clear_data_ready(self) -> None:
        self._ready.clear()

    def _other(self, buffer: list[Any]) -> list[Any]:
        return self._second if buffer is self._first else self._first