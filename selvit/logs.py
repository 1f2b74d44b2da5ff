"""Day-bucketed aggregation of logged consumption."""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date, tzinfo
from typing import Iterable

from selvit.dayclock import day_window
from selvit.models import LogEntry


def logs_for_day(
    day: date,
    logs: Iterable[LogEntry],
    tz: tzinfo,
    assume_sorted: bool = True,
) -> list[LogEntry]:
    """Entries whose timestamp falls inside the logical day.

    With assume_sorted the scan stops at the first entry past the window;
    pass False for streams in arbitrary order.
    """
    start, end = day_window(day, tz)
    out = []
    for log in logs:
        if log.time >= end:
            if assume_sorted:
                break
            continue
        if log.time >= start:
            out.append(log)
    return out


def sum_for_day(
    day: date,
    unit_id: uuid.UUID,
    logs: Iterable[LogEntry],
    tz: tzinfo,
    assume_sorted: bool = True,
) -> int:
    """Total quantity logged against `unit_id` during the logical day."""
    return sum(
        log.quantity
        for log in logs_for_day(day, logs, tz, assume_sorted)
        if log.source == unit_id
    )


def totals_for_day(
    day: date,
    logs: Iterable[LogEntry],
    tz: tzinfo,
    assume_sorted: bool = True,
) -> dict[uuid.UUID, int]:
    totals: dict[uuid.UUID, int] = defaultdict(int)
    for log in logs_for_day(day, logs, tz, assume_sorted):
        totals[log.source] += log.quantity
    return dict(totals)
