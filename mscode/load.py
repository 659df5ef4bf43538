"""
Load MSCode programs into growable, list-backed grids.

Program text is line oriented:
  - '#' as the first character: comment line, skipped
  - 's' as the first character: stack declaration (see directive.py)
  - anything else: one row of instructions; a '#' ends the row early

The grid is as wide as the longest row; shorter rows read as blanks. Stack
declarations are applied once every row is known, so they may appear
anywhere in the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from .directive import parse_directive
from .errors import (
    InvalidCoordinateError, InvalidEncodingError, InvalidNumberError,
    MissingStackPointerError, StackPointerOutOfRangeError,
)
from .instruction import BLANK, Instruction, from_char
from .machine import Machine, stack_plane_size
from .number import INTEGER, Number, NumberType
from .plane import ListPlane, Plane, Pointer
from .stack import ListStack

Declaration = tuple[Pointer, list[Number]]


# ---------------------------------------------------------------------------
# Shared line helpers (also used by build.py)
# ---------------------------------------------------------------------------

def split_lines(source: str) -> list[str]:
    """Split on '\\n', dropping one trailing '\\r' per line and a final empty line."""
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def decode_row(line: str) -> list[Instruction]:
    """Decode one instruction row, stopping at a trailing '#' comment."""
    row = []
    for char in line:
        if char == "#":
            break
        row.append(from_char(char))
    return row


def parse_number(text: str, parse: Callable[[str], Number]) -> Number:
    try:
        return parse(text)
    except (ValueError, TypeError, ArithmeticError) as exc:
        raise InvalidNumberError(text) from exc


def parse_coordinate(text: str, parse: Callable[[str], Number],
                     to_index: Callable[[Number], int]) -> int:
    try:
        return to_index(parse(text))
    except (ValueError, TypeError, ArithmeticError) as exc:
        raise InvalidCoordinateError(text) from exc


def parse_declaration(line: str, parse: Callable[[str], Number],
                      to_index: Callable[[Number], int]) -> Declaration:
    """Parse an 's x y n...' line into ((x, y), [n...])."""
    tokens = parse_directive(line[1:])
    if len(tokens) < 2:
        raise MissingStackPointerError(line)
    x = parse_coordinate(tokens[0], parse, to_index)
    y = parse_coordinate(tokens[1], parse, to_index)
    values = [parse_number(token, parse) for token in tokens[2:]]
    return (x, y), values


# ---------------------------------------------------------------------------
# Growable loading
# ---------------------------------------------------------------------------

def parse_line(line: str, rows: list[list[Instruction]],
               declarations: list[Declaration],
               parse: Callable[[str], Number],
               to_index: Callable[[Number], int]):
    """Fold one source line into `rows` or `declarations`."""
    if line.startswith("#"):
        return
    if line.startswith("s"):
        declarations.append(parse_declaration(line, parse, to_index))
        return
    rows.append(decode_row(line))


def create_stacks(declarations: Iterable[Declaration],
                  instructions: Plane[Instruction]) -> ListPlane[ListStack]:
    """Blank stack plane sized for `instructions`, seeded from declarations."""
    width, height = stack_plane_size(instructions.width, instructions.height)
    stacks = ListPlane.filled(width, height, ListStack)
    for pointer, values in declarations:
        stack = stacks.get(pointer)
        if stack is None:
            raise StackPointerOutOfRangeError(pointer)
        stack.extend(values)
    return stacks


def from_lines(lines: Iterable[str], number_type: NumberType = INTEGER, *,
               parse: Callable[[str], Number] | None = None,
               to_index: Callable[[Number], int] | None = None) -> Machine:
    """Load a program from an iterable of lines (e.g. an open file or stdin)."""
    parse = parse or number_type.parse
    to_index = to_index or number_type.to_index
    rows: list[list[Instruction]] = []
    declarations: list[Declaration] = []

    try:
        for line in lines:
            parse_line(line.rstrip("\r\n"), rows, declarations, parse, to_index)
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(getattr(lines, "name", "<input>"), exc.reason) from exc

    instructions = ListPlane.from_rows(rows, BLANK)
    stacks = create_stacks(declarations, instructions)
    return Machine(instructions, stacks, number_type)


def from_str(source: str, number_type: NumberType = INTEGER, *,
             parse: Callable[[str], Number] | None = None,
             to_index: Callable[[Number], int] | None = None) -> Machine:
    """Load a program from source text."""
    return from_lines(split_lines(source), number_type,
                      parse=parse, to_index=to_index)


def read_source(path: str | Path) -> str:
    """Read a program file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(str(path), exc.reason) from exc


def from_file(path: str | Path, number_type: NumberType = INTEGER, **kwargs) -> Machine:
    text = read_source(path)
    return from_str(text, number_type, **kwargs)
