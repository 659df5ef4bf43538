"""
MSCode command-line interpreter.

Usage:
    mscode program.msc                 # run one or more program files
    cat program.msc | mscode           # run a program piped on stdin
    mscode -t u8 program.msc           # pick the register type
    python -m mscode --help
"""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from typing import TextIO

from . import load
from .errors import InteractiveInputError, MSCodeError
from .machine import Machine, State
from .number import NUMBER_TYPES, DEFAULT_TYPE, NumberType

AUTHOR_TEXT = """\
https://github.com/tomboddaert/msc
MSCode was created by:

  Tom Boddaert
    https://tomboddaert.com/
"""

PROMPT = "> "


def version() -> str:
    try:
        return metadata.version("mscode")
    except metadata.PackageNotFoundError:
        return "unknown"


def run_machine(machine: Machine, number_type: NumberType, *,
                using_stdin: bool = False, suppress: bool = False,
                max_steps: int | None = None,
                stdin: TextIO | None = None, stdout: TextIO | None = None):
    """Drive `machine` to completion, printing outputs and reading inputs."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    steps = 0

    while machine.state is not State.STOPPED:
        if machine.state is State.RUNNING:
            if max_steps is not None and steps >= max_steps:
                if not suppress:
                    print(f"Stopped after {steps} steps (--max-steps).",
                          file=sys.stderr, flush=True)
                return
            value = machine.step()
            steps += 1
            if value is not None:
                print(value, file=stdout, flush=True)
            continue

        # INPUT_WAITING
        if not suppress:
            print(PROMPT, end="", file=stdout, flush=True)
        line = stdin.readline()
        text = line.strip()

        # A program piped in on stdin leaves nothing to answer inputs with
        if not text and using_stdin:
            raise InteractiveInputError(
                "Inputs cannot be used when the program is piped into the interpreter!\n"
                "Run the program by passing the file path as an argument.")
        if not line:
            raise InteractiveInputError("Input requested but the input stream is closed.")

        try:
            value = number_type.parse(text)
        except ValueError as e:
            print(repr(text), file=stdout)
            print(e, file=stdout, flush=True)
            continue
        machine.input(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mscode",
        description="MSCode interpreter: runs 2D stack-based programs.",
    )
    parser.add_argument("files", nargs="*", help="Program files to run in order")
    parser.add_argument("-s", "--suppress", action="store_true",
                        help="Suppress errors and input prompts")
    parser.add_argument("-S", "--stdin", dest="force_stdin", action="store_true",
                        help="Force reading the program from stdin")
    parser.add_argument("-v", "--version", action="store_true",
                        help="Print the version")
    parser.add_argument("-a", "--author", action="store_true",
                        help="Information about the author")
    parser.add_argument("-t", "--type", dest="number_type", default=DEFAULT_TYPE,
                        choices=sorted(NUMBER_TYPES),
                        help=f"Register and stack value type (default: {DEFAULT_TYPE})")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop each program after this many steps")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version or args.author:
        print("-- MSCode Interpreter --")
        if args.version:
            print(f"MSCode version {version()}")
        if args.author:
            if args.version:
                print()
            print(AUTHOR_TEXT, end="")
        if args.suppress or args.force_stdin or args.files:
            print("Other arguments provided with --version or --author! Ignoring.",
                  file=sys.stderr)
        return 0

    number_type = NUMBER_TYPES[args.number_type]

    def report(err: Exception) -> int:
        if not args.suppress:
            print(err, file=sys.stderr, flush=True)
        return 1

    if not args.files or args.force_stdin:
        try:
            machine = load.from_lines(sys.stdin, number_type)
            run_machine(machine, number_type, using_stdin=True,
                        suppress=args.suppress, max_steps=args.max_steps)
        except (MSCodeError, OSError) as e:
            return report(e)
        return 0

    for path in args.files:
        try:
            machine = load.from_file(path, number_type)
            run_machine(machine, number_type, suppress=args.suppress,
                        max_steps=args.max_steps)
        except (MSCodeError, OSError) as e:
            return report(e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
