"""
Stack containers for the MSCode stack plane.

ListStack grows without bound. RingStack has a fixed capacity and, once
full, overwrites the oldest entry still present (like a UART FIFO that
keeps the newest bytes). pop() on an empty stack returns None.
"""

from __future__ import annotations

from typing import Generic, Iterable, TypeVar

import numpy as np

T = TypeVar("T")


class Stack(Generic[T]):
    """LIFO interface shared by both stack kinds."""

    def push(self, item: T):
        raise NotImplementedError

    def pop(self) -> T | None:
        raise NotImplementedError

    def items(self) -> list[T]:
        """Current contents, bottom first."""
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.items()!r})"


class ListStack(Stack[T]):
    """Unbounded stack."""

    def __init__(self, items: Iterable[T] = ()):
        self._items: list[T] = list(items)

    def push(self, item: T):
        self._items.append(item)

    def pop(self) -> T | None:
        return self._items.pop() if self._items else None

    def extend(self, items: Iterable[T]):
        self._items.extend(items)

    def items(self) -> list[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class RingStack(Stack[T]):
    """Fixed-capacity circular stack.

    After `capacity` pushes without pops, each further push overwrites the
    oldest value still held. Popping past the surviving values yields None.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"stack capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.slots = np.full(capacity, None, dtype=object)
        self.head = 0   # next slot to write

    def push(self, item: T):
        self.slots[self.head] = item
        self.head = (self.head + 1) % self.capacity

    def pop(self) -> T | None:
        self.head = (self.head - 1) % self.capacity
        item = self.slots[self.head]
        self.slots[self.head] = None
        return item

    def items(self) -> list[T]:
        out = []
        for offset in range(1, self.capacity + 1):
            item = self.slots[(self.head - offset) % self.capacity]
            if item is None:
                break
            out.append(item)
        out.reverse()
        return out
