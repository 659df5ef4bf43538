"""
Numeric types for the MSCode machine.

The machine never assumes a width or signedness. Everything it needs from a
value type is bundled in a NumberType: the ZERO and ONE constants, a text
parser, and a conversion to array indices.

Stock types:
  INTEGER        unbounded Python int (floor division)
  I8 .. I64      two's-complement wrapping integers (truncating division)
  U8 .. U64      unsigned wrapping integers
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Number(Protocol):
    """What a register/stack value must support."""

    def __lt__(self, other): ...
    def __add__(self, other): ...
    def __sub__(self, other): ...
    def __mul__(self, other): ...
    def __floordiv__(self, other): ...
    def __invert__(self): ...
    def __or__(self, other): ...
    def __and__(self, other): ...
    def __xor__(self, other): ...


# Plain ASCII decimal: optional sign, digits only (no "_", no other scripts)
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_decimal(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"invalid decimal literal: {text!r}")
    return int(text)


# ---------------------------------------------------------------------------
# Wrapping integers
# ---------------------------------------------------------------------------

@functools.total_ordering
class Wrapping:
    """Fixed-width integer that wraps on overflow.

    Subclasses set BITS and SIGNED. Operands of a binary operation may be
    another value of the same class or a plain int.
    """

    BITS = 32
    SIGNED = True

    __slots__ = ("value",)

    def __init__(self, value: int = 0):
        self.value = self._wrap(int(value))

    @classmethod
    def _wrap(cls, raw: int) -> int:
        raw &= (1 << cls.BITS) - 1
        if cls.SIGNED and raw >> (cls.BITS - 1):
            raw -= 1 << cls.BITS
        return raw

    @classmethod
    def min_value(cls) -> int:
        return -(1 << (cls.BITS - 1)) if cls.SIGNED else 0

    @classmethod
    def max_value(cls) -> int:
        return (1 << (cls.BITS - 1)) - 1 if cls.SIGNED else (1 << cls.BITS) - 1

    @classmethod
    def parse(cls, text: str) -> "Wrapping":
        """Parse decimal text. Out-of-range literals are rejected, not wrapped."""
        raw = parse_decimal(text)
        if not cls.min_value() <= raw <= cls.max_value():
            raise ValueError(
                f"{text!r} out of range for {cls.__name__} "
                f"({cls.min_value()}..{cls.max_value()})")
        return cls(raw)

    def _other(self, other) -> int:
        if isinstance(other, Wrapping):
            if type(other) is not type(self):
                raise TypeError(
                    f"cannot mix {type(self).__name__} and {type(other).__name__}")
            return other.value
        if isinstance(other, int):
            return other
        return NotImplemented

    def _binary(self, other, op):
        rhs = self._other(other)
        if rhs is NotImplemented:
            return NotImplemented
        return type(self)(op(self.value, rhs))

    def __add__(self, other):
        return self._binary(other, lambda a, b: a + b)

    def __sub__(self, other):
        return self._binary(other, lambda a, b: a - b)

    def __mul__(self, other):
        return self._binary(other, lambda a, b: a * b)

    def __floordiv__(self, other):
        # Truncates toward zero, MIN // -1 wraps back to MIN
        def div(a: int, b: int) -> int:
            q = abs(a) // abs(b)
            return q if (a < 0) == (b < 0) else -q
        return self._binary(other, div)

    def __or__(self, other):
        return self._binary(other, lambda a, b: a | b)

    def __and__(self, other):
        return self._binary(other, lambda a, b: a & b)

    def __xor__(self, other):
        return self._binary(other, lambda a, b: a ^ b)

    def __invert__(self):
        return type(self)(~self.value)

    def __neg__(self):
        return type(self)(-self.value)

    def __eq__(self, other):
        rhs = self._other(other)
        if rhs is NotImplemented:
            return NotImplemented
        return self.value == rhs

    def __lt__(self, other):
        rhs = self._other(other)
        if rhs is NotImplemented:
            return NotImplemented
        return self.value < rhs

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value))

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"


class I8(Wrapping):
    BITS, SIGNED = 8, True


class I16(Wrapping):
    BITS, SIGNED = 16, True


class I32(Wrapping):
    BITS, SIGNED = 32, True


class I64(Wrapping):
    BITS, SIGNED = 64, True


class U8(Wrapping):
    BITS, SIGNED = 8, False


class U16(Wrapping):
    BITS, SIGNED = 16, False


class U32(Wrapping):
    BITS, SIGNED = 32, False


class U64(Wrapping):
    BITS, SIGNED = 64, False


# ---------------------------------------------------------------------------
# Number type descriptors
# ---------------------------------------------------------------------------

def _to_index(value) -> int:
    index = int(value)
    if index < 0:
        raise ValueError(f"negative index: {index}")
    return index


@dataclass(frozen=True)
class NumberType:
    """The constants and conversions a value type plugs into the machine."""
    name: str
    zero: Number
    one: Number
    parse: Callable[[str], Number]
    to_index: Callable[[Number], int] = _to_index

    def __str__(self) -> str:
        return self.name


def wrapping_type(cls: type[Wrapping]) -> NumberType:
    return NumberType(cls.__name__.lower(), cls(0), cls(1), cls.parse)


INTEGER = NumberType("int", 0, 1, parse_decimal)

NUMBER_TYPES: dict[str, NumberType] = {"int": INTEGER}
for _cls in (I8, I16, I32, I64, U8, U16, U32, U64):
    NUMBER_TYPES[_cls.__name__.lower()] = wrapping_type(_cls)

DEFAULT_TYPE = "i32"
