"""A dictionary whose entries are each guarded by their own lock."""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LockedMap(Generic[K, V]):
    """Map where threads touching different keys never block each other."""

    def __init__(self, default_factory: Callable[[], V] | None = None) -> None:
        self._default_factory = default_factory
        self._values: dict[K, V] = {}
        self._locks: dict[K, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: K) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def write(self, key: K, value: V) -> None:
        with self._lock_for(key):
            self._values[key] = value

    def read(self, key: K) -> V:
        """Value for ``key``; a missing key is filled from the default factory.

        Raises KeyError for a missing key when there is no default factory.
        """
        with self._lock_for(key):
            if key not in self._values:
                if self._default_factory is None:
                    raise KeyError(key)
                self._values[key] = self._default_factory()
            return self._values[key]

    def get(self, key: K) -> Any:
        """The stored object for ``key``; raises KeyError if it is missing."""
        with self._lock_for(key):
            return self._values[key]