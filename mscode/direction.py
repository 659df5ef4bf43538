"""
Cursor directions and pointer arithmetic.

A direction is two bits: bit 1 selects the axis (0 horizontal, 1 vertical),
bit 0 selects the sign (0 increasing, 1 decreasing).
"""

from __future__ import annotations

from enum import IntEnum

from .plane import Pointer

AXIS_BIT = 0b10
SIGN_BIT = 0b01

# Pointer components are 64-bit unsigned; stepping below 0 wraps to the max
POINTER_BITS = 64
POINTER_MAX = (1 << POINTER_BITS) - 1


class Direction(IntEnum):
    RIGHT = 0b00
    LEFT  = 0b01
    DOWN  = 0b10
    UP    = 0b11

    @property
    def vertical(self) -> bool:
        return bool(self & AXIS_BIT)

    @property
    def decreasing(self) -> bool:
        return bool(self & SIGN_BIT)

    def clockwise(self) -> "Direction":
        """right -> down -> left -> up -> right"""
        return Direction(self ^ AXIS_BIT ^ ((self >> 1) & SIGN_BIT))

    def counter_clockwise(self) -> "Direction":
        """right -> up -> left -> down -> right"""
        return Direction(self ^ AXIS_BIT ^ SIGN_BIT ^ ((self >> 1) & SIGN_BIT))


def advance(direction: Direction, pointer: Pointer) -> Pointer:
    """Move one cell along `direction`, wrapping each component at 64 bits."""
    x, y = pointer
    delta = -1 if direction.decreasing else 1
    if direction.vertical:
        y = (y + delta) & POINTER_MAX
    else:
        x = (x + delta) & POINTER_MAX
    return (x, y)
