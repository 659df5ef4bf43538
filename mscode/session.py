"""
session: step-by-step control of one loaded program.

Wraps a Machine with the bookkeeping the debugger needs: where the program
came from, the printed output so far, and a phase label.
"""

from __future__ import annotations

from pathlib import Path

from . import load
from .machine import Machine, State
from .number import NUMBER_TYPES, DEFAULT_TYPE, NumberType


class Session:
    """One program, its machine, and everything it has printed."""

    def __init__(self, number_type: NumberType | None = None):
        self.number_type = number_type or NUMBER_TYPES[DEFAULT_TYPE]
        self.machine: Machine | None = None
        self.source_lines: list[str] = []
        self.name = "<none>"
        self.output_lines: list[str] = []
        self.phase: str = "idle"  # "idle" | "running" | "input" | "done"

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------

    def load_file(self, path: str | Path):
        path = Path(path)
        self.load_text(load.read_source(path), name=str(path))

    def load_text(self, text: str, name: str = "<string>"):
        self.machine = load.from_str(text, self.number_type)
        self.source_lines = load.split_lines(text)
        self.name = name
        self.output_lines = []
        self.phase = "running"

    # -------------------------------------------------------------------
    # Execution control
    # -------------------------------------------------------------------

    def tick(self) -> bool:
        """Execute one step. Returns True while the machine can keep stepping."""
        if self.machine is None:
            return False
        value = self.machine.step()
        if value is not None:
            self.output_lines.append(str(value))
        self._update_phase()
        return self.phase == "running"

    def provide_input(self, text: str):
        """Parse `text` with the session's number type and feed it to the machine.

        Raises ValueError on malformed text; the machine is left waiting.
        """
        if self.machine is None or self.machine.state is not State.INPUT_WAITING:
            return
        self.machine.input(self.number_type.parse(text.strip()))
        self._update_phase()

    def _update_phase(self):
        state = self.machine.state
        if state is State.STOPPED:
            self.phase = "done"
        elif state is State.INPUT_WAITING:
            self.phase = "input"
        else:
            self.phase = "running"
