"""
MSCode exceptions.

Load errors subclass ValueError, so callers that only care about "bad
program text" can catch that. MachineFault marks an internal inconsistency
(a stack plane that does not cover the instruction plane), never bad input.
"""

from __future__ import annotations

from .plane import Pointer


class MSCodeError(Exception):
    """Base class for MSCode errors."""


class LoadError(MSCodeError, ValueError):
    """Raised when program text cannot be turned into a machine."""


class UnknownInstructionError(LoadError):
    def __init__(self, char: str):
        super().__init__(f"unknown instruction: {char!r}")
        self.char = char


class InstructionOutOfRangeError(LoadError):
    def __init__(self, pointer: Pointer, char: str):
        super().__init__(f"instruction {char!r} out of range: {pointer}")
        self.pointer = pointer
        self.char = char


class InvalidNumberError(LoadError):
    def __init__(self, text: str):
        super().__init__(f"invalid number: {text!r}")
        self.text = text


class InvalidCoordinateError(LoadError):
    def __init__(self, text: str):
        super().__init__(f"invalid stack coordinate: {text!r}")
        self.text = text


class StackPointerOutOfRangeError(LoadError):
    def __init__(self, pointer: Pointer):
        super().__init__(f"stack pointer out of range: {pointer}")
        self.pointer = pointer


class MissingStackPointerError(LoadError):
    def __init__(self, line: str):
        super().__init__(f"stack line missing pointer: {line!r}")
        self.line = line


class InvalidEncodingError(LoadError):
    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: program text is not valid UTF-8 ({reason})")
        self.source = source


class MachineFault(MSCodeError, RuntimeError):
    """The stack plane has no stack for the cursor's coarse cell."""


class InteractiveInputError(MSCodeError):
    """Input was requested but cannot be read interactively."""
