"""
MSCode machine: a cursor walking a 2D grid of instructions.

The machine owns an instruction plane, a stack plane (one stack per 4x4
block of instructions), a register, a cursor and a direction. It is driven
from outside: call step() until the state leaves RUNNING, and input() to
answer INPUT_WAITING.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .direction import Direction, advance
from .errors import MachineFault
from .instruction import IO, Blank, Comparator, Deflector, Instruction, Operator
from .number import INTEGER, Number, NumberType
from .plane import Plane, Pointer
from .stack import Stack

# Each stack is shared by a STACK_BLOCK x STACK_BLOCK block of instructions
STACK_BLOCK = 4


def stack_plane_size(width: int, height: int) -> tuple[int, int]:
    """Stack plane dimensions for an instruction plane of width x height."""
    return (-(-width // STACK_BLOCK), -(-height // STACK_BLOCK))


class State(Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    INPUT_WAITING = "input_waiting"


class Machine:
    """Steps an MSCode program one instruction at a time."""

    def __init__(self, instructions: Plane[Instruction], stacks: Plane[Stack],
                 number_type: NumberType = INTEGER):
        expected = stack_plane_size(instructions.width, instructions.height)
        if stacks.size != expected:
            raise ValueError(
                f"stack plane is {stacks.width}x{stacks.height}, "
                f"expected {expected[0]}x{expected[1]} for a "
                f"{instructions.width}x{instructions.height} program")

        self.instructions = instructions
        self.stacks = stacks
        self.number_type = number_type

        self.state = State.RUNNING
        self.register: Number = number_type.zero
        self.pointer: Pointer = (0, 0)
        self.direction = Direction.RIGHT

        # --- Counters ---
        self.steps = 0
        self.outputs = 0
        self.inputs = 0

    # -------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------

    def current_stack(self) -> Stack:
        x, y = self.pointer
        stack = self.stacks.get((x // STACK_BLOCK, y // STACK_BLOCK))
        if stack is None:
            raise MachineFault(f"no stack for pointer {self.pointer}")
        return stack

    def step(self) -> Number | None:
        """Execute one instruction. Returns the printed value, if any."""
        if self.state is not State.RUNNING:
            return None

        instruction = self.instructions.get(self.pointer)
        if instruction is None:
            self.state = State.STOPPED
            return None

        self.steps += 1
        output = None

        if isinstance(instruction, Blank):
            pass
        elif isinstance(instruction, Deflector):
            self.direction = instruction.apply(self.direction)
        elif isinstance(instruction, Operator):
            self.register = instruction.apply(
                self.register, self.current_stack(), self.number_type)
        elif isinstance(instruction, Comparator):
            self.direction = instruction.apply(
                self.register, self.current_stack(), self.direction, self.number_type)
        elif isinstance(instruction, IO):
            output, wait = instruction.apply(self.register)
            if wait:
                self.state = State.INPUT_WAITING
            if output is not None:
                self.outputs += 1
        else:
            raise MachineFault(f"not an instruction: {instruction!r}")

        self.pointer = advance(self.direction, self.pointer)
        return output

    def input(self, value: Number):
        """Answer an input request. Ignored unless INPUT_WAITING."""
        if self.state is State.INPUT_WAITING:
            self.register = value
            self.state = State.RUNNING
            self.inputs += 1

    def run(self, inputs: Iterable[Number] = (),
            max_steps: int | None = None) -> list[Number]:
        """Step until STOPPED, feeding `inputs` to input requests.

        Returns early, still INPUT_WAITING, when input is requested and
        `inputs` is exhausted, or once `max_steps` steps have executed.
        """
        pending = iter(inputs)
        outputs: list[Number] = []
        executed = 0
        while self.state is not State.STOPPED:
            if self.state is State.INPUT_WAITING:
                value = next(pending, None)
                if value is None:
                    break
                self.input(value)
                continue
            if max_steps is not None and executed >= max_steps:
                break
            value = self.step()
            executed += 1
            if value is not None:
                outputs.append(value)
        return outputs

    # -------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------

    def get_state(self) -> State:
        return self.state

    def get_register(self) -> Number:
        return self.register

    def get_pointer(self) -> Pointer:
        return self.pointer

    def stats(self) -> dict:
        return {
            "steps": self.steps,
            "outputs": self.outputs,
            "inputs": self.inputs,
            "state": self.state.value,
            "width": self.instructions.width,
            "height": self.instructions.height,
        }
