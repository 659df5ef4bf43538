"""
Textual TUI debugger for MSCode programs.

Step-by-step debugger that loads a program, runs it on the machine, and
displays the grid, the cursor, the register and every non-empty stack.

Usage:
    python -m mscode.debugger examples/countdown.msc
    python -m mscode.debugger --run -t u8 examples/countdown.msc
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.widgets import Footer, Input, RichLog, Static

from mscode.errors import MSCodeError
from mscode.machine import STACK_BLOCK, State
from mscode.number import NUMBER_TYPES, DEFAULT_TYPE
from mscode.session import Session

# Refresh the panels every this many steps while running in the background
REFRESH_EVERY = 500


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------

DEBUGGER_CSS = """
Screen {
    layout: grid;
    grid-size: 2 3;
    grid-columns: 2fr 1fr;
    grid-rows: 2fr 1fr auto;
}

.panel {
    border: solid $accent;
    border-title-align: left;
    overflow-y: auto;
    height: 100%;
}

#input-box {
    column-span: 2;
}

Footer {
    column-span: 2;
}
"""


# ---------------------------------------------------------------------------
# Panel widgets
# ---------------------------------------------------------------------------

class GridPanel(ScrollableContainer):
    """Instruction grid with the cursor highlighted."""
    BORDER_TITLE = "Grid"

    def compose(self) -> ComposeResult:
        yield Static("", id="grid-content")


class StatePanel(ScrollableContainer):
    """Register, cursor, direction, counters."""
    BORDER_TITLE = "Machine State"

    def compose(self) -> ComposeResult:
        yield Static("", id="state-content")


class StackPanel(ScrollableContainer):
    """Non-empty stacks, top first."""
    BORDER_TITLE = "Stacks"

    def compose(self) -> ComposeResult:
        yield Static("", id="stack-content")


class OutputPanel(ScrollableContainer):
    """Accumulated program output."""
    BORDER_TITLE = "Output"

    def compose(self) -> ComposeResult:
        yield RichLog(id="output-log", markup=False, wrap=True)


# ---------------------------------------------------------------------------
# Main debugger app
# ---------------------------------------------------------------------------

class MSCodeDebugger(App):
    """Textual TUI debugger for the MSCode machine."""

    CSS = DEBUGGER_CSS
    TITLE = "MSCode Debugger"

    BINDINGS = [
        Binding("s", "step_1", "Step"),
        Binding("space", "step_1", "Step", show=False),
        Binding("n", "step_10", "x10"),
        Binding("f", "step_100", "x100"),
        Binding("r", "run_to_end", "Run"),
        Binding("p", "run_to_print", "→Print"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, session: Session, auto_run: bool = False):
        super().__init__()
        self.session = session
        self.auto_run = auto_run
        self._output_line_count = 0

    def compose(self) -> ComposeResult:
        yield GridPanel(id="grid-panel", classes="panel")
        yield StatePanel(id="state-panel", classes="panel")
        yield StackPanel(id="stack-panel", classes="panel")
        yield OutputPanel(id="output-panel", classes="panel")
        yield Input(placeholder="input value (when the machine waits)",
                    id="input-box", disabled=True)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self.session.name
        self.refresh_panels()
        if self.auto_run:
            self.action_run_to_end()

    # -------------------------------------------------------------------
    # Panel refresh
    # -------------------------------------------------------------------

    def refresh_panels(self) -> None:
        self._refresh_grid()
        self._refresh_state()
        self._refresh_stacks()
        self._refresh_output()
        self._refresh_input()

    def _refresh_grid(self) -> None:
        m = self.session.machine
        grid = m.instructions
        text = Text()
        for y in range(grid.height):
            text.append(f"{y:3d}│ ", style="dim")
            for x in range(grid.width):
                char = grid.get((x, y)).value
                if (x, y) == m.pointer:
                    text.append(char if char != " " else "·", style="bold reverse")
                elif x % STACK_BLOCK == 0 and y % STACK_BLOCK == 0 and char == " ":
                    text.append("·", style="dim")
                else:
                    text.append(char)
            text.append("\n")
        content = self.query_one("#grid-content", Static)
        content.update(text if grid.height else "(empty program)")

    def _refresh_state(self) -> None:
        m = self.session.machine
        x, y = m.pointer
        in_grid = m.instructions.contains(m.pointer)
        pointer = f"({x}, {y})" if in_grid else f"({x}, {y}) [outside]"
        text = (
            f"State:     {m.state.value}\n"
            f"Register:  {m.register}\n"
            f"Pointer:   {pointer}\n"
            f"Direction: {m.direction.name}\n"
            f"Steps:     {m.steps}\n"
            f"Type:      {self.session.number_type}\n"
            f"Grid:      {m.instructions.width}x{m.instructions.height}  "
            f"Stacks: {m.stacks.width}x{m.stacks.height}"
        )
        content = self.query_one("#state-content", Static)
        content.update(Text(text))

    def _refresh_stacks(self) -> None:
        m = self.session.machine
        x, y = m.pointer
        current = (x // STACK_BLOCK, y // STACK_BLOCK)
        lines = []
        for pointer, stack in m.stacks.cells():
            items = stack.items()
            if not items and pointer != current:
                continue
            marker = "▸" if pointer == current else " "
            values = " ".join(str(v) for v in reversed(items)) or "(empty)"
            lines.append(f"{marker} {pointer}: {values}")
        content = self.query_one("#stack-content", Static)
        content.update(Text("\n".join(lines) if lines else "(all empty)"))

    def _refresh_output(self) -> None:
        log = self.query_one("#output-log", RichLog)
        while self._output_line_count < len(self.session.output_lines):
            log.write(self.session.output_lines[self._output_line_count])
            self._output_line_count += 1

    def _refresh_input(self) -> None:
        box = self.query_one("#input-box", Input)
        waiting = self.session.machine.state is State.INPUT_WAITING
        box.disabled = not waiting
        if waiting:
            box.focus()

    # -------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------

    def _report_error(self, err: Exception) -> None:
        """Show an error in the output panel."""
        self.session.output_lines.append(f"[ERROR] {err}")
        self.refresh_panels()

    def _do_steps(self, count: int) -> None:
        try:
            for _ in range(count):
                if not self.session.tick():
                    break
        except MSCodeError as e:
            self._report_error(e)
            return
        self.refresh_panels()

    def action_step_1(self) -> None:
        self._do_steps(1)

    def action_step_10(self) -> None:
        self._do_steps(10)

    def action_step_100(self) -> None:
        self._do_steps(100)

    @work(thread=True)
    def action_run_to_end(self) -> None:
        """Run until the machine stops or waits for input, in a background thread."""
        try:
            count = 0
            while self.session.tick():
                count += 1
                if count % REFRESH_EVERY == 0:
                    self.call_from_thread(self.refresh_panels)
        except MSCodeError as e:
            self.call_from_thread(self._report_error, e)
            return
        self.call_from_thread(self.refresh_panels)

    @work(thread=True)
    def action_run_to_print(self) -> None:
        """Run until the next value is printed."""
        try:
            printed = len(self.session.output_lines)
            while self.session.tick():
                if len(self.session.output_lines) > printed:
                    break
        except MSCodeError as e:
            self.call_from_thread(self._report_error, e)
            return
        self.call_from_thread(self.refresh_panels)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            self.session.provide_input(event.value)
        except ValueError as e:
            self._report_error(e)
            return
        event.input.value = ""
        self.refresh_panels()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="MSCode TUI debugger",
        prog="python -m mscode.debugger",
    )
    parser.add_argument("file", help="Path to the program file")
    parser.add_argument("--run", action="store_true",
                        help="Run to completion immediately (auto-run mode)")
    parser.add_argument("-t", "--type", dest="number_type", default=DEFAULT_TYPE,
                        choices=sorted(NUMBER_TYPES),
                        help=f"Register and stack value type (default: {DEFAULT_TYPE})")
    args = parser.parse_args()

    session = Session(NUMBER_TYPES[args.number_type])
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        session.load_file(path)
    except MSCodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = MSCodeDebugger(session, auto_run=args.run)
    app.run()


if __name__ == "__main__":
    main()
