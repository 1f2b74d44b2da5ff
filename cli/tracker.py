#!/usr/bin/env python3
"""Selvit command line: daily intake targets, logging, and a Textual TUI."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, TypeVar

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Footer, Header, Label
from textual.widgets import Input as TextInput

from selvit import (
    ConfigurationError,
    Input,
    SaveResult,
    StoreError,
    Unit,
    get_user_timezone,
    load_inputs,
    load_logs,
    log_quantity,
    logical_day_of,
    refresh_inputs,
    render_day,
    report_days,
    save_input,
    set_valid_after,
    summarize_day,
    unit_bounds,
    workspace_root,
)

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ── Prompts ────────────────────────────────────────────────────


def get_input(prompt: str) -> str | None:
    """Ask for one line; an empty answer (or EOF) means abort."""
    print()
    try:
        answer = input(f"{prompt}: ")
    except EOFError:
        return None
    answer = answer.strip()
    return answer or None


def typed_input(prompt: str, cast: Callable[[str], T]) -> T | None:
    """Ask until the answer parses with `cast`; None if the user aborts."""
    while True:
        answer = get_input(prompt)
        if answer is None:
            return None
        try:
            return cast(answer)
        except ValueError:
            continue


# ── Commands ───────────────────────────────────────────────────


def _print_saved(kind: str, result: SaveResult) -> None:
    if result.created:
        print(f"saved and pushed {kind}" if result.pushed else f"saved {kind}")
    else:
        print(f"updated and pushed {kind}" if result.pushed else f"updated {kind}")


def cmd_show(root: Path, mode: str) -> int:
    user_tz = get_user_timezone(root)
    now = datetime.now(user_tz)
    inputs = load_inputs(root)
    logs = load_logs(root)

    days = report_days(logical_day_of(now, user_tz), mode)
    for day in days:
        print(render_day(summarize_day(inputs, day, logs, user_tz, now.time())))
        if len(days) > 1:
            print()
            print()
    return 0


def cmd_booladd(root: Path, name: str | None) -> int:
    name = name or get_input("name")
    if name is None:
        return 1
    _print_saved("new input", save_input(Input.new_boolean(name), root))
    return 0


def cmd_add(root: Path, name: str | None) -> int:
    name = name or get_input("name")
    if name is None:
        return 1
    unit_name = get_input("unit name (plural, e.g., grams/minutes)")
    if unit_name is None:
        return 1
    min_dose = typed_input(f"minimum dose of {unit_name} {name}", float)
    if min_dose is None:
        return 1
    max_dose = typed_input(f"max dose of {unit_name} {name}", float)
    if max_dose is None:
        return 1
    source_name = get_input("source name")
    if source_name is None:
        return 1
    dose = typed_input(f"how much {unit_name} in one {source_name}?", float)
    if dose is None:
        return 1

    try:
        item = Input.new_dosage(name, unit_name, min_dose, max_dose, [Unit(name=source_name, dose=dose)])
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if unit_bounds(item.dosage) is None:
        print(
            f"error: no whole number of {source_name} gives {min_dose:g}-{max_dose:g} {unit_name}",
            file=sys.stderr,
        )
        return 1

    print("new input added!")
    _print_saved("new input", save_input(item, root))
    return 0


def cmd_log(root: Path, index: int, quantity: int, hours_ago: float | None) -> int:
    if quantity < 0:
        print("error: quantity must not be negative", file=sys.stderr)
        return 1
    try:
        _, result = log_quantity(index, quantity, hours_ago, root)
    except (IndexError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print("saved and pushed log" if result.pushed else "saved log")
    return 0


def cmd_after(root: Path, index: int, hour: int | None) -> int:
    if hour is not None and not 0 <= hour <= 23:
        print("error: hour must be between 0 and 23", file=sys.stderr)
        return 1
    try:
        item = set_valid_after(index, hour, root)
    except IndexError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if item.valid_after is None:
        print(f"{item.name}: always shown")
    else:
        print(f"{item.name}: shown after {item.valid_after.strftime('%H:%M')}")
    return 0


def cmd_refresh(root: Path) -> int:
    print("refreshing inputs")
    inputs = refresh_inputs(root)
    print(f"rewrote {len(inputs)} inputs")
    return 0


def cmd_tui(root: Path) -> int:
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set SELVIT_ROOT or add an input first.")
        return 1
    TrackerApp(root).run()
    return 0


# ── Textual UI ─────────────────────────────────────────────────


CSS = """
Screen {
    layout: vertical;
}

#day-label {
    padding: 0 1;
    text-style: bold;
    color: $accent;
}

#summary-table {
    height: 1fr;
}

#log-line {
    dock: bottom;
    margin: 0 1 1 1;
}
"""


def parse_log_line(text: str) -> tuple[int, int, float | None]:
    """Parse 'IDX QTY [HOURS_AGO]' from the TUI log line."""
    parts = text.split()
    if len(parts) not in (2, 3):
        raise ValueError("expected: IDX QTY [HOURS_AGO]")
    index, quantity = int(parts[0]), int(parts[1])
    if quantity < 0:
        raise ValueError("quantity must not be negative")
    hours_ago = float(parts[2]) if len(parts) == 3 else None
    return index, quantity, hours_ago


class TrackerApp(App):
    """Selvit: today's targets and consumption, with quick logging."""

    TITLE = "Selvit"
    CSS = CSS
    AUTO_FOCUS = "#summary-table"

    BINDINGS = [
        Binding("p", "prev_day", "Prev day"),
        Binding("n", "next_day", "Next day"),
        Binding("t", "today", "Today"),
        Binding("r", "reload", "Reload"),
        Binding("l", "focus_log", "Log"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, root: Path) -> None:
        super().__init__()
        self._root = root
        self._tz = get_user_timezone(root)
        self._day: date = logical_day_of(datetime.now(self._tz), self._tz)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Label(id="day-label"),
            DataTable(id="summary-table", cursor_type="row"),
        )
        yield TextInput(placeholder="IDX QTY [HOURS_AGO] then Enter to log", id="log-line")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#summary-table", DataTable)
        table.add_columns("#", "Name", "Done", "Consumed", "Target", "Unit")
        self._load_data()

    def _load_data(self) -> None:
        """Recompute the summary for the selected day and fill the table."""
        table = self.query_one("#summary-table", DataTable)
        table.clear()
        now = datetime.now(self._tz)
        label = self._day.isoformat()
        if self._day == logical_day_of(now, self._tz):
            label += " (today)"
        self.query_one("#day-label", Label).update(label)

        try:
            summary = summarize_day(
                load_inputs(self._root), self._day, load_logs(self._root), self._tz, now.time()
            )
        except (ConfigurationError, StoreError) as e:
            self.notify(str(e), title="Error", severity="error")
            return

        for row in summary.rows:
            if row.consumed is None:
                table.add_row(str(row.index), row.input.name, "", "", "yes" if row.target else "no", "")
            else:
                table.add_row(
                    str(row.index),
                    row.input.name,
                    "✅" if row.completed else "",
                    str(row.consumed),
                    str(row.target),
                    row.unit or "",
                )

    def action_prev_day(self) -> None:
        self._day -= timedelta(days=1)
        self._load_data()

    def action_next_day(self) -> None:
        self._day += timedelta(days=1)
        self._load_data()

    def action_today(self) -> None:
        self._day = logical_day_of(datetime.now(self._tz), self._tz)
        self._load_data()

    def action_reload(self) -> None:
        self._load_data()

    def action_focus_log(self) -> None:
        self.query_one("#log-line", TextInput).focus()

    def action_blur_focus(self) -> None:
        self.query_one("#summary-table", DataTable).focus()

    @on(TextInput.Submitted, "#log-line")
    def _on_log_submitted(self, event: TextInput.Submitted) -> None:
        try:
            index, quantity, hours_ago = parse_log_line(event.value)
        except ValueError as e:
            self.notify(str(e), title="Invalid log", severity="warning")
            return
        event.input.value = ""
        self._save_log(index, quantity, hours_ago)

    @work(thread=True)
    def _save_log(self, index: int, quantity: int, hours_ago: float | None) -> None:
        """Save in a worker thread; the git push can take a while."""
        try:
            entry, result = log_quantity(index, quantity, hours_ago, self._root)
        except (IndexError, ValueError, StoreError) as e:
            self.call_from_thread(self.notify, str(e), title="Error", severity="error")
            return
        msg = f"logged {entry.quantity}" + (" and pushed" if result.pushed else "")
        self.call_from_thread(self.notify, msg, title="Saved")
        self.call_from_thread(self._load_data)


# ── Entry point ────────────────────────────────────────────────


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="selvit",
        description="Deterministic daily intake targets and consumption log.",
    )
    parser.add_argument("--root", help="Workspace directory (default: $SELVIT_ROOT or ~/.local/share/selvit).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("today", help="Show today's targets (default).")
    sub.add_parser("around", aliases=["3"], help="Show yesterday, today and tomorrow.")
    sub.add_parser("week", aliases=["w"], help="Show the next 7 days.")
    sub.add_parser("month", aliases=["m"], help="Show the next 30 days.")

    p = sub.add_parser("add", help="Add a dosage input (prompts for the rest).")
    p.add_argument("name", nargs="?")
    p = sub.add_parser("booladd", help="Add a yes/no input.")
    p.add_argument("name", nargs="?")

    p = sub.add_parser("log", help="Log units consumed for an input.")
    p.add_argument("index", type=int)
    p.add_argument("quantity", type=int)
    p.add_argument("hours_ago", type=float, nargs="?")

    p = sub.add_parser("after", help="Only show an input after HOUR:00 (omit HOUR to clear).")
    p.add_argument("index", type=int)
    p.add_argument("hour", type=int, nargs="?")

    sub.add_parser("refresh", help="Rewrite all input files.")
    sub.add_parser("tui", help="Interactive terminal UI.")
    return parser.parse_args(argv)


SHOW_MODES = {
    None: "today",
    "today": "today",
    "around": "around",
    "3": "around",
    "week": "week",
    "w": "week",
    "month": "month",
    "m": "month",
}


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.WARNING, format=LOG_FORMAT)
    root = Path(ns.root).expanduser().resolve() if ns.root else workspace_root()

    try:
        if ns.command in SHOW_MODES:
            return cmd_show(root, SHOW_MODES[ns.command])
        if ns.command == "add":
            return cmd_add(root, ns.name)
        if ns.command == "booladd":
            return cmd_booladd(root, ns.name)
        if ns.command == "log":
            return cmd_log(root, ns.index, ns.quantity, ns.hours_ago)
        if ns.command == "after":
            return cmd_after(root, ns.index, ns.hour)
        if ns.command == "refresh":
            return cmd_refresh(root)
        if ns.command == "tui":
            return cmd_tui(root)
    except ConfigurationError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2
    except StoreError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
