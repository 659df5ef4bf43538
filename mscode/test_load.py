"""
Loader tests: the growable loader (load.py), the fixed-size builder
(build.py) and the stack declaration grammar they share.
"""

from __future__ import annotations

import io
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mscode import build, load
from mscode.directive import parse_directive
from mscode.errors import (
    InstructionOutOfRangeError, InvalidCoordinateError, InvalidEncodingError,
    InvalidNumberError,
    LoadError, MissingStackPointerError, StackPointerOutOfRangeError,
    UnknownInstructionError,
)
from mscode.instruction import BLANK, IO, Deflector, Operator
from mscode.machine import State
from mscode.number import I8, NUMBER_TYPES
from mscode.plane import ArrayPlane, ListPlane
from mscode.stack import ListStack, RingStack


# ---------------------------------------------------------------------------
# Stack declaration grammar
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("body, tokens", [
    (" 0 0 5 10", ["0", "0", "5", "10"]),
    ("  1\t2   3 ", ["1", "2", "3"]),
    (" 0 0 5 # ten is gone 10", ["0", "0", "5"]),
    (" 0 0 5#10", ["0", "0", "5"]),
    (" 0 0 #5", ["0", "0"]),
    ("#", []),
    ("", []),
    ("5 6", ["5", "6"]),
    (" -3 +4 x", ["-3", "+4", "x"]),
])
def test_parse_directive(body, tokens):
    assert parse_directive(body) == tokens


# ---------------------------------------------------------------------------
# Growable loader
# ---------------------------------------------------------------------------

def test_rows_and_padding():
    m = load.from_str("p\n>vo\n\n,")
    grid = m.instructions
    assert isinstance(grid, ListPlane)
    assert grid.size == (3, 4)
    assert grid.get((0, 0)) is IO.PRINT
    assert grid.get((1, 0)) is BLANK
    assert grid.get((1, 1)) is Deflector.DOWN_ARROW
    assert grid.get((0, 2)) is BLANK
    assert grid.get((0, 3)) is Operator.PUSH
    assert grid.get((3, 0)) is None


def test_comment_lines_do_not_consume_rows():
    m = load.from_str("# header\np\n# middle\n,")
    assert m.instructions.size == (1, 2)
    assert m.instructions.get((0, 1)) is Operator.PUSH


def test_trailing_comment_in_row():
    m = load.from_str("p, # print then push")
    assert m.instructions.size == (3, 1)
    assert m.instructions.get((2, 0)) is BLANK


def test_crlf_and_final_newline():
    m = load.from_str("p\r\n,\r\n")
    assert m.instructions.size == (1, 2)


def test_stack_plane_derived_from_grid():
    m = load.from_str("\n".join([" " * 9] * 5))
    assert m.instructions.size == (9, 5)
    assert m.stacks.size == (3, 2)
    assert isinstance(m.stacks.get((2, 1)), ListStack)


def test_stack_declaration_order_and_concatenation():
    m = load.from_str("s 0 0 1 2\ns 0 0 3\n.")
    assert m.stacks.get((0, 0)).items() == [1, 2, 3]


def test_stack_declaration_may_precede_rows():
    m = load.from_str("s 1 0 4\n     .p")
    assert m.run() == [4]


def test_stack_declaration_with_comment():
    m = load.from_str("s 0 0 5 # 10\n.p")
    assert m.run() == [5]


def test_custom_number_type():
    m = load.from_str("s 0 0 100 100\n.+p", NUMBER_TYPES["i8"])
    assert m.run() == [I8(-56)]


def test_custom_parse_function():
    m = load.from_str("s 0 0 ff\n.p", parse=lambda text: int(text, 16))
    assert m.run() == [255]


def test_from_lines_strips_newlines():
    m = load.from_lines(iter(["s 0 0 3\n", ".p\n"]))
    assert m.run() == [3]


def test_from_file(tmp_path):
    path = tmp_path / "prog.msc"
    path.write_text("s 0 0 9\n.p\n", encoding="utf-8")
    assert load.from_file(path).run() == [9]


# ---------------------------------------------------------------------------
# Load errors
# ---------------------------------------------------------------------------

def test_unknown_instruction():
    with pytest.raises(UnknownInstructionError) as info:
        load.from_str("p\npx")
    assert info.value.char == "x"


def test_invalid_number():
    with pytest.raises(InvalidNumberError) as info:
        load.from_str("s 0 0 1 two\np")
    assert info.value.text == "two"
    assert isinstance(info.value.__cause__, ValueError)


def test_number_out_of_type_range():
    with pytest.raises(InvalidNumberError):
        load.from_str("s 0 0 300\np", NUMBER_TYPES["u8"])


@pytest.mark.parametrize("line", ["s a 0", "s 0 -1", "s 0.5 0"])
def test_invalid_coordinate(line):
    with pytest.raises(InvalidCoordinateError):
        load.from_str(line + "\np")


def test_underscored_number_rejected():
    with pytest.raises(InvalidNumberError):
        load.from_str("s 0 0 1_000\np")
    with pytest.raises(InvalidCoordinateError):
        load.from_str("s 0_0 0 1\np")


def test_file_not_utf8(tmp_path):
    path = tmp_path / "prog.msc"
    path.write_bytes(b"p\xff\n")
    with pytest.raises(InvalidEncodingError) as info:
        load.from_file(path)
    assert info.value.source == str(path)
    assert isinstance(info.value.__cause__, UnicodeDecodeError)


def test_stream_not_utf8():
    stream = io.TextIOWrapper(io.BytesIO(b"s 0 0 1\n.\xffp\n"), encoding="utf-8")
    with pytest.raises(InvalidEncodingError):
        load.from_lines(stream)


@pytest.mark.parametrize("line", ["s", "s 0", "s 0 # 0", "s#"])
def test_missing_stack_pointer(line):
    with pytest.raises(MissingStackPointerError) as info:
        load.from_str(line + "\np")
    assert info.value.line == line


def test_stack_pointer_out_of_range():
    with pytest.raises(StackPointerOutOfRangeError) as info:
        load.from_str("s 1 0 5\npppp")
    assert info.value.pointer == (1, 0)


def test_load_errors_are_value_errors():
    with pytest.raises(ValueError):
        load.from_str("?")
    with pytest.raises(LoadError):
        load.from_str("s 0")


# ---------------------------------------------------------------------------
# Fixed-size builder
# ---------------------------------------------------------------------------

def test_build_fixed_grid():
    m = build.from_str("p", 8, 6, 4)
    assert isinstance(m.instructions, ArrayPlane)
    assert m.instructions.size == (8, 6)
    assert m.stacks.size == (2, 2)
    assert isinstance(m.stacks.get((1, 1)), RingStack)
    assert m.instructions.get((7, 5)) is BLANK


def test_build_runs_program():
    m = build.from_str("# comment\ns 0 0 5 10\n.p", 4, 4, 8)
    assert m.step() is None
    assert m.get_register() == 10
    # Walks the blank remainder of the 4-wide row, then falls off
    assert m.run() == [10]
    assert m.get_state() is State.STOPPED
    assert m.steps == 4


def test_build_blank_lines_consume_rows():
    m = build.from_str("\n\np", 1, 3, 1)
    assert m.instructions.get((0, 2)) is IO.PRINT


def test_build_row_too_wide():
    with pytest.raises(InstructionOutOfRangeError) as info:
        build.from_str("pppp\nppppp", 4, 4, 1)
    assert info.value.pointer == (5, 1)
    assert info.value.char == "p"


def test_build_too_many_rows():
    with pytest.raises(InstructionOutOfRangeError) as info:
        build.from_str("p\np\np", 4, 2, 1)
    assert info.value.pointer == (1, 2)


def test_build_first_bad_column_decides_error():
    with pytest.raises(InstructionOutOfRangeError) as info:
        build.from_str("pppx", 2, 1, 1)
    assert info.value.pointer == (3, 0)
    assert info.value.char == "p"


def test_build_unknown_instruction_reported_first():
    with pytest.raises(UnknownInstructionError):
        build.from_str("ppx", 2, 1, 1)


def test_build_stack_overflow_wraps():
    m = build.from_str("s 0 0 1 2 3 4\n....p", 8, 1, 3)
    # Capacity 3 keeps [2, 3, 4]; the fourth pop finds nothing
    assert m.stacks.get((0, 0)).items() == [2, 3, 4]
    assert m.run() == [0]


def test_build_stack_pointer_out_of_range():
    with pytest.raises(StackPointerOutOfRangeError):
        build.from_str("s 2 0 1\np", 8, 4, 2)


def test_build_custom_converters():
    m = build.from_str("s 1 0 17\n    .p", 8, 4, 2,
                       parse=lambda text: int(text, 8), to_index=int)
    assert m.run() == [15]


def test_build_missing_stack_pointer():
    with pytest.raises(MissingStackPointerError):
        build.from_str("s 0\np", 4, 4, 2)
