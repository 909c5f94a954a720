"""A deque that drops its oldest items once it reaches a capacity."""

from __future__ import annotations

from collections import deque
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class CappedDeque(Generic[T]):
    """Newest items sit at the front; the back is dropped when full."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._items: deque[T] = deque()

    def push_front(self, value: T) -> None:
        """Add ``value`` at the front, dropping the oldest items if over capacity."""
        while len(self._items) > self.capacity:
            self._items.pop()
        if self._items and len(self._items) == self.capacity:
            self._items.pop()
        self._items.appendleft(value)

    def update_capacity(self, capacity: int) -> None:
        """Change the capacity; excess items are dropped on the next push."""
        self.capacity = capacity

    def items(self) -> list[T]:
        """The items from newest to oldest."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))