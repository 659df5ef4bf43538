"""
MSCode instruction set.

Each family is an Enum whose member values are the source characters, so
decoding and encoding are the same table read in both directions:

  Blank       ' '
  Deflector   > < v ^ o / \\
  Operator    , . d + - * ~ ! | & :
  Comparator  z c
  IO          p i

Every family has a pure `apply`; the machine picks the family and hands it
the pieces of state it is allowed to touch.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from .direction import AXIS_BIT, SIGN_BIT, Direction
from .errors import UnknownInstructionError
from .number import Number, NumberType
from .stack import Stack


class Blank(Enum):
    SPACE = " "


class Deflector(Enum):
    RIGHT_ARROW    = ">"
    LEFT_ARROW     = "<"
    DOWN_ARROW     = "v"
    UP_ARROW       = "^"
    OMNI_MIRROR    = "o"
    FORWARD_MIRROR = "/"
    BACK_MIRROR    = "\\"

    def apply(self, direction: Direction) -> Direction:
        if self is Deflector.RIGHT_ARROW:
            return Direction.RIGHT
        if self is Deflector.LEFT_ARROW:
            return Direction.LEFT
        if self is Deflector.DOWN_ARROW:
            return Direction.DOWN
        if self is Deflector.UP_ARROW:
            return Direction.UP
        if self is Deflector.OMNI_MIRROR:
            return Direction(direction ^ SIGN_BIT)
        if self is Deflector.BACK_MIRROR:
            return Direction(direction ^ AXIS_BIT)
        # FORWARD_MIRROR
        return Direction(direction ^ AXIS_BIT ^ SIGN_BIT)


def _or(value, default):
    return default if value is None else value


class Operator(Enum):
    PUSH      = ","
    POP       = "."
    DUPLICATE = "d"
    ADD       = "+"
    SUBTRACT  = "-"
    MULTIPLY  = "*"
    DIVIDE    = "~"
    NOT       = "!"
    OR        = "|"
    AND       = "&"
    XOR       = ":"

    def apply(self, register: Number, stack: Stack, numbers: NumberType) -> Number:
        """Run the operator, returning the new register value."""
        zero, one = numbers.zero, numbers.one

        if self is Operator.PUSH:
            stack.push(register)
            return register
        if self is Operator.POP:
            return _or(stack.pop(), zero)
        if self is Operator.DUPLICATE:
            # Empty stack: a single ZERO is pushed, not two
            value = stack.pop()
            if value is None:
                value = zero
            else:
                stack.push(value)
            stack.push(value)
            return register
        if self is Operator.NOT:
            return ~register

        if self is Operator.ADD:
            return register + _or(stack.pop(), zero)
        if self is Operator.SUBTRACT:
            return register - _or(stack.pop(), zero)
        if self is Operator.MULTIPLY:
            return register * _or(stack.pop(), one)
        if self is Operator.DIVIDE:
            divisor = _or(stack.pop(), one)
            if divisor == zero:
                divisor = one
            return register // divisor
        if self is Operator.OR:
            return register | _or(stack.pop(), zero)
        if self is Operator.AND:
            return register & _or(stack.pop(), zero)
        # XOR
        return register ^ _or(stack.pop(), zero)


class Comparator(Enum):
    ZERO  = "z"
    STACK = "c"

    def apply(self, register: Number, stack: Stack, direction: Direction,
              numbers: NumberType) -> Direction:
        """Turn right if the register is smaller, left if larger."""
        if self is Comparator.ZERO:
            other = numbers.zero
        else:
            other = _or(stack.pop(), numbers.zero)

        if register < other:
            return direction.clockwise()
        if other < register:
            return direction.counter_clockwise()
        return direction


class IO(Enum):
    PRINT = "p"
    INPUT = "i"

    def apply(self, register: Number) -> tuple[Number | None, bool]:
        """Returns (output, wait_for_input)."""
        if self is IO.PRINT:
            return register, False
        return None, True


Instruction = Union[Blank, Deflector, Operator, Comparator, IO]

BLANK = Blank.SPACE

FAMILIES = (Blank, Deflector, Operator, Comparator, IO)

_DECODE: dict[str, Instruction] = {
    member.value: member for family in FAMILIES for member in family
}


def from_char(char: str) -> Instruction:
    try:
        return _DECODE[char]
    except KeyError:
        raise UnknownInstructionError(char) from None


def to_char(instruction: Instruction) -> str:
    return instruction.value
