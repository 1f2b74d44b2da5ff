"""Logical day boundaries.

A logical day runs from 03:00 local time to 03:00 the next calendar day,
so late-night events count towards the day that is ending.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo

DAY_START = time(3, 0)


def logical_day_start(day: date, tz: tzinfo) -> datetime:
    """Aware instant at which `day` begins (03:00 wall time in `tz`)."""
    return datetime.combine(day, DAY_START, tzinfo=tz)


def logical_day_end(day: date, tz: tzinfo) -> datetime:
    return logical_day_start(day + timedelta(days=1), tz)


def day_window(day: date, tz: tzinfo) -> tuple[int, int]:
    """Half-open [start, end) window of `day` in unix seconds."""
    start = logical_day_start(day, tz)
    end = logical_day_end(day, tz)
    return int(start.timestamp()), int(end.timestamp())


def logical_day_of(instant: datetime, tz: tzinfo) -> date:
    """Logical day containing an aware instant."""
    local = instant.astimezone(tz)
    day = local.date()
    if instant.timestamp() < logical_day_start(day, tz).timestamp():
        day -= timedelta(days=1)
    return day
