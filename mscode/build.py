"""
Build MSCode programs into fixed-size grids.

The instruction grid is `width` x `height` whatever the program text
contains, and every stack is a RingStack of `stack_capacity` values. All
storage is allocated up front, so a built machine never grows. Use this
when the grid size is part of the deployment (embedded targets, sandboxed
runs); use load.py otherwise.
"""

from __future__ import annotations

from typing import Callable

from .errors import InstructionOutOfRangeError, StackPointerOutOfRangeError
from .instruction import BLANK, Instruction, from_char
from .load import parse_declaration, split_lines
from .machine import Machine, stack_plane_size
from .number import INTEGER, Number, NumberType
from .plane import ArrayPlane
from .stack import RingStack


def from_str(source: str, width: int, height: int, stack_capacity: int,
             number_type: NumberType = INTEGER, *,
             parse: Callable[[str], Number] | None = None,
             to_index: Callable[[Number], int] | None = None) -> Machine:
    """Build a fixed-size machine from source text.

    Raises InstructionOutOfRangeError if a row is longer than `width` or
    there are more than `height` rows.
    """
    parse = parse or number_type.parse
    to_index = to_index or number_type.to_index

    instructions: ArrayPlane[Instruction] = ArrayPlane(width, height, lambda: BLANK)
    stack_width, stack_height = stack_plane_size(width, height)
    stacks = ArrayPlane(stack_width, stack_height,
                        lambda: RingStack(stack_capacity))

    y = 0
    for line in split_lines(source):
        if line.startswith("#"):
            continue

        if line.startswith("s"):
            pointer, values = parse_declaration(line, parse, to_index)
            stack = stacks.get(pointer)
            if stack is None:
                raise StackPointerOutOfRangeError(pointer)
            for value in values:
                stack.push(value)
            continue

        # Column by column, so the first bad column decides the error
        for x, char in enumerate(line):
            if char == "#":
                break
            instruction = from_char(char)
            if not instructions.set((x, y), instruction):
                raise InstructionOutOfRangeError((x + 1, y), instruction.value)
        y += 1

    return Machine(instructions, stacks, number_type)
