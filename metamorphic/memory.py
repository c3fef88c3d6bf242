"""Containers that hold instances of a common base type."""

from __future__ import annotations

from collections import deque
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


def _check(base: type, item: object, kind: str) -> None:
    if not isinstance(item, base):
        raise TypeError(
            f"{kind} item of type {type(item).__name__} is not derived from {base.__name__}"
        )


class BaseQueue(Generic[T]):
    """FIFO queue accepting any instance of ``base`` or of its subclasses."""

    def __init__(self, base: type) -> None:
        self.base = base
        self._items: deque = deque()

    def push(self, item: T) -> T:
        """Append ``item`` to the back of the queue and return it."""
        _check(self.base, item, "Queue")
        self._items.append(item)
        return item

    def pop(self) -> Optional[T]:
        """Remove and return the front item, or ``None`` if the queue is empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def clear(self) -> None:
        """Drop every queued item."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        """Iterate front to back without removing anything."""
        return iter(list(self._items))


class BaseStack(Generic[T]):
    """LIFO stack accepting any instance of ``base`` or of its subclasses."""

    def __init__(self, base: type) -> None:
        self.base = base
        self._items: list = []

    def push(self, item: T) -> T:
        """Push ``item`` onto the stack and return it."""
        _check(self.base, item, "Stack")
        self._items.append(item)
        return item

    def pop(self) -> Optional[T]:
        """Remove and return the top item, or ``None`` if the stack is empty."""
        if not self._items:
            return None
        return self._items.pop()

    def top(self) -> Optional[T]:
        """Return the top item without removing it, or ``None`` if empty."""
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        """Drop every item on the stack."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)