"""Daily summaries: targets vs. consumption, ordered for display."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta, tzinfo
from typing import Any, Sequence

from selvit.logs import sum_for_day
from selvit.models import Input, LogEntry
from selvit.targets import target_for_input

REPORT_SPANS = {
    "today": (0, 1),
    "around": (-1, 3),
    "week": (0, 7),
    "month": (0, 30),
}

DONE_MARK = "✅"


def order_inputs(inputs: Sequence[Input]) -> list[Input]:
    """Dosage inputs by name, then boolean inputs by name."""
    doses = sorted((i for i in inputs if not i.is_bool), key=lambda i: i.name)
    bools = sorted((i for i in inputs if i.is_bool), key=lambda i: i.name)
    return doses + bools


@dataclass
class InputStatus:
    index: int
    input: Input
    target: bool | int
    consumed: int | None = None
    completed: bool = False

    @property
    def unit(self) -> str | None:
        if self.input.dosage is None:
            return None
        return self.input.dosage.primary_unit.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "id": str(self.input.id),
            "name": self.input.name,
            "type": self.input.kind,
            "target": self.target,
            "consumed": self.consumed,
            "completed": self.completed,
            "unit": self.unit,
        }


@dataclass
class DaySummary:
    day: date
    rows: list[InputStatus] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day.isoformat(), "rows": [r.to_dict() for r in self.rows]}


def summarize_input(
    index: int,
    item: Input,
    day: date,
    logs: Sequence[LogEntry],
    tz: tzinfo,
) -> InputStatus:
    target = target_for_input(item, day)
    if item.dosage is None:
        return InputStatus(index=index, input=item, target=target)
    consumed = sum_for_day(day, item.dosage.primary_unit.id, logs, tz)
    return InputStatus(
        index=index,
        input=item,
        target=target,
        consumed=consumed,
        completed=consumed >= target,
    )


def summarize_day(
    inputs: Sequence[Input],
    day: date,
    logs: Sequence[LogEntry],
    tz: tzinfo,
    now: time | None = None,
) -> DaySummary:
    """Status of every input for `day`.

    `inputs` must already be in display order: row indices are positions in
    that list, so inputs hidden by their valid_after gate leave gaps.
    `logs` must be sorted by time. When `now` is None nothing is gated.
    """
    summary = DaySummary(day=day)
    for idx, item in enumerate(inputs):
        if now is not None and item.valid_after is not None and now < item.valid_after:
            continue
        summary.rows.append(summarize_input(idx, item, day, logs, tz))
    return summary


def summarize_days(
    inputs: Sequence[Input],
    days: Sequence[date],
    logs: Sequence[LogEntry],
    tz: tzinfo,
    now: time | None = None,
) -> list[DaySummary]:
    return [summarize_day(inputs, day, logs, tz, now) for day in days]


def report_days(today: date, mode: str = "today") -> list[date]:
    """Days covered by a named report span (today, around, week, month)."""
    if mode not in REPORT_SPANS:
        raise ValueError(f"Unknown report span: {mode!r}")
    offset, count = REPORT_SPANS[mode]
    first = today + timedelta(days=offset)
    return [first + timedelta(days=i) for i in range(count)]


def render_day(summary: DaySummary) -> str:
    """Plain-text block for one day, as printed by the CLI."""
    lines = [f"dosages on date: {summary.day.isoformat()}", ""]
    width = max((len(r.input.name) for r in summary.rows), default=0)
    for row in summary.rows:
        idx = f"{row.index:>2}"
        name = row.input.name.ljust(width)
        if row.consumed is None:
            answer = "yes" if row.target else "no"
            lines.append(f"{idx}:   {name} {answer}")
        else:
            mark = DONE_MARK if row.completed else "  "
            lines.append(f"{idx}: {mark}{name} {row.consumed}/{row.target} {row.unit}")
    return "\n".join(lines)
