"""
Planes: 2D containers addressed by (x, y) pointers.

Used both for the instruction grid and for the coarser grid of stacks.
Reads and writes outside [0, width) x [0, height) are rejected: get()
returns None and set() returns False.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterator, TypeVar

import numpy as np

T = TypeVar("T")

Pointer = tuple[int, int]


class Plane(Generic[T]):
    """Common interface of ListPlane and ArrayPlane."""

    width: int
    height: int

    def contains(self, pointer: Pointer) -> bool:
        x, y = pointer
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pointer: Pointer) -> T | None:
        raise NotImplementedError

    def set(self, pointer: Pointer, item: T) -> bool:
        raise NotImplementedError

    def cells(self) -> Iterator[tuple[Pointer, T]]:
        """Every in-bounds cell, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y), self.get((x, y))

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


class ListPlane(Plane[T]):
    """Growable plane over a list of rows.

    Rows may be ragged: a read inside the bounds that falls past the end of
    a short (or missing) row yields `default`.
    """

    def __init__(self, rows: list[list[T]], default: T,
                 width: int | None = None):
        self.rows = rows
        self.default = default
        self.width = max((len(row) for row in rows), default=0) if width is None else width
        self.height = len(rows)

    @classmethod
    def from_rows(cls, rows: list[list[T]], default: T) -> "ListPlane[T]":
        """Build a plane as wide as the longest row, padding the rest."""
        width = max((len(row) for row in rows), default=0)
        for row in rows:
            row.extend([default] * (width - len(row)))
        return cls(rows, default, width)

    @classmethod
    def filled(cls, width: int, height: int,
               factory: Callable[[], T]) -> "ListPlane[T]":
        """Full-width plane with a fresh `factory()` item in every cell."""
        rows = [[factory() for _ in range(width)] for _ in range(height)]
        return cls(rows, None, width)

    def get(self, pointer: Pointer) -> T | None:
        if not self.contains(pointer):
            return None
        x, y = pointer
        row = self.rows[y]
        return row[x] if x < len(row) else self.default

    def set(self, pointer: Pointer, item: T) -> bool:
        if not self.contains(pointer):
            return False
        x, y = pointer
        row = self.rows[y]
        if x >= len(row):
            row.extend([self.default] * (x + 1 - len(row)))
        row[x] = item
        return True


class ArrayPlane(Plane[T]):
    """Fixed-capacity plane, preallocated as a numpy object array."""

    def __init__(self, width: int, height: int, factory: Callable[[], T]):
        if width < 0 or height < 0:
            raise ValueError(f"plane size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        self.grid = np.empty((height, width), dtype=object)
        for y in range(height):
            for x in range(width):
                self.grid[y, x] = factory()

    def get(self, pointer: Pointer) -> T | None:
        if not self.contains(pointer):
            return None
        x, y = pointer
        return self.grid[y, x]

    def set(self, pointer: Pointer, item: T) -> bool:
        if not self.contains(pointer):
            return False
        x, y = pointer
        self.grid[y, x] = item
        return True
