"""A single background thread that can be started once at a time."""

from __future__ import annotations

import threading
from typing import Any, Callable

from globesim.logger import Logger, LogLevel


class ThreadWrapper:
    """Starts a function on a thread and joins it on request."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Run ``func(*args, **kwargs)`` on a new thread.

        Raises RuntimeError if a thread started earlier has not been joined.
        """
        if self._running:
            raise RuntimeError("Thread is already running")
        if self._logger is not None:
            self._logger.log(LogLevel.INFO, "Starting thread!")
        self._thread = threading.Thread(target=func, args=args, kwargs=kwargs)
        self._thread.start()
        self._running = True

    def join(self) -> None:
        """Wait for the thread to finish, if one is running."""
        if self._running and self._thread is not None:
            self._thread.join()
            self._running = False

    def stop(self) -> None:
        """Wait for the thread to finish and mark it stopped."""
        self.join()

    def is_running(self) -> bool:
        """True from ``start`` until the thread has been joined."""
        return self._running