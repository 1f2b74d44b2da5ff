"""Tests for selvit/logs.py: logical-day aggregation."""

import uuid
from datetime import date
from zoneinfo import ZoneInfo

from selvit.dayclock import day_window
from selvit.logs import logs_for_day, sum_for_day, totals_for_day
from selvit.models import LogEntry

UTC = ZoneInfo("UTC")
DAY = date(2026, 2, 11)
U = uuid.UUID("1a2b3c4d-0000-4000-8000-000000000001")
V = uuid.UUID("1a2b3c4d-0000-4000-8000-000000000002")
HOUR = 3600


def _scenario() -> list[LogEntry]:
    start, _ = day_window(DAY, UTC)
    logs = [
        LogEntry(source=U, quantity=3, time=start + 1 * HOUR),
        LogEntry(source=U, quantity=2, time=start + 20 * HOUR),
        LogEntry(source=V, quantity=100, time=start + 2 * HOUR),
    ]
    return sorted(logs, key=lambda log: log.time)


def test_sum_per_source():
    logs = _scenario()
    assert sum_for_day(DAY, U, logs, UTC) == 5
    assert sum_for_day(DAY, V, logs, UTC) == 100


def test_unknown_source_sums_to_zero():
    assert sum_for_day(DAY, uuid.uuid4(), _scenario(), UTC) == 0


def test_window_is_half_open():
    start, end = day_window(DAY, UTC)
    logs = [
        LogEntry(source=U, quantity=1, time=start - 1),
        LogEntry(source=U, quantity=10, time=start),
        LogEntry(source=U, quantity=100, time=end - 1),
        LogEntry(source=U, quantity=1000, time=end),
    ]
    assert sum_for_day(DAY, U, logs, UTC) == 110
    assert [log.quantity for log in logs_for_day(DAY, logs, UTC)] == [10, 100]


def test_sorted_scan_stops_after_window():
    start, end = day_window(DAY, UTC)
    out_of_order = [
        LogEntry(source=U, quantity=7, time=end + HOUR),
        LogEntry(source=U, quantity=3, time=start + HOUR),
    ]
    assert sum_for_day(DAY, U, out_of_order, UTC) == 0
    assert sum_for_day(DAY, U, out_of_order, UTC, assume_sorted=False) == 3


def test_totals_for_day():
    assert totals_for_day(DAY, _scenario(), UTC) == {U: 5, V: 100}


def test_empty_stream():
    assert sum_for_day(DAY, U, [], UTC) == 0
    assert totals_for_day(DAY, [], UTC) == {}
