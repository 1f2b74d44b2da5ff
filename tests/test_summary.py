"""Tests for selvit/summary.py: ordering, gating and rendering."""

import uuid
from datetime import date, time
from zoneinfo import ZoneInfo

import pytest

from selvit.dayclock import day_window
from selvit.models import Dosage, Input, LogEntry, Unit
from selvit.summary import (
    DONE_MARK,
    order_inputs,
    render_day,
    report_days,
    summarize_day,
    summarize_days,
)
from selvit.targets import ConfigurationError

UTC = ZoneInfo("UTC")
DAY = date(2026, 2, 11)


def _dosage_input(name: str, lo: float, hi: float, dose: float, unit: str = "pill") -> Input:
    return Input(
        id=uuid.uuid4(),
        name=name,
        dosage=Dosage(min=lo, max=hi, unit_name="mg", units=[Unit(name=unit, dose=dose)]),
    )


def _bool_input(name: str, valid_after: time | None = None) -> Input:
    return Input(id=uuid.uuid4(), name=name, valid_after=valid_after)


def test_order_dosage_first_then_boolean():
    inputs = [
        _bool_input("Walk"),
        _dosage_input("Zinc", 10, 20, 10),
        _bool_input("Floss"),
        _dosage_input("Creatine", 3, 5, 1),
        _dosage_input("Magnesium", 200, 400, 100),
    ]
    names = [i.name for i in order_inputs(inputs)]
    assert names == ["Creatine", "Magnesium", "Zinc", "Floss", "Walk"]


def test_dosage_row_consumed_and_completed():
    item = _dosage_input("Creatine", 3, 5, 1)
    start, _ = day_window(DAY, UTC)
    logs = [LogEntry(source=item.dosage.primary_unit.id, quantity=5, time=start + 60)]

    row = summarize_day([item], DAY, logs, UTC).rows[0]
    assert row.consumed == 5
    assert 3 <= row.target <= 5
    assert row.completed is True
    assert row.unit == "pill"


def test_dosage_row_not_completed_without_logs():
    item = _dosage_input("Magnesium", 200, 400, 100)
    row = summarize_day([item], DAY, [], UTC).rows[0]
    assert row.consumed == 0
    assert row.completed is False


def test_logs_against_other_units_do_not_count():
    item = _dosage_input("Creatine", 3, 5, 1)
    start, _ = day_window(DAY, UTC)
    logs = [LogEntry(source=uuid.uuid4(), quantity=50, time=start + 60)]
    assert summarize_day([item], DAY, logs, UTC).rows[0].consumed == 0


def test_boolean_row_has_no_consumed():
    row = summarize_day([_bool_input("Stretch")], DAY, [], UTC).rows[0]
    assert row.consumed is None
    assert row.completed is False
    assert row.unit is None
    assert isinstance(row.target, bool)


def test_valid_after_gates_rows_and_keeps_indices():
    inputs = order_inputs([
        _dosage_input("Creatine", 3, 5, 1),
        _bool_input("Meditate", valid_after=time(18, 0)),
        _bool_input("Stretch"),
    ])
    morning = summarize_day(inputs, DAY, [], UTC, now=time(9, 0))
    assert [(r.index, r.input.name) for r in morning.rows] == [(0, "Creatine"), (2, "Stretch")]

    evening = summarize_day(inputs, DAY, [], UTC, now=time(18, 0))
    assert [r.index for r in evening.rows] == [0, 1, 2]

    ungated = summarize_day(inputs, DAY, [], UTC)
    assert len(ungated.rows) == 3


def test_summarize_days_one_per_day():
    days = report_days(DAY, "week")
    summaries = summarize_days([_bool_input("Stretch")], days, [], UTC)
    assert [s.day for s in summaries] == days


def test_configuration_error_propagates():
    with pytest.raises(ConfigurationError):
        summarize_day([_dosage_input("Iron", 1, 4, 5)], DAY, [], UTC)


def test_report_days():
    assert report_days(DAY) == [DAY]
    assert report_days(DAY, "around") == [date(2026, 2, 10), DAY, date(2026, 2, 12)]
    assert len(report_days(DAY, "week")) == 7
    assert report_days(DAY, "month")[-1] == date(2026, 3, 12)


def test_report_days_unknown_mode():
    with pytest.raises(ValueError, match="Unknown report span"):
        report_days(DAY, "year")


def test_render_day():
    creatine = _dosage_input("Creatine", 3, 5, 1, unit="scoop")
    stretch = _bool_input("Stretch")
    start, _ = day_window(DAY, UTC)
    logs = [LogEntry(source=creatine.dosage.primary_unit.id, quantity=9, time=start + 60)]

    summary = summarize_day([creatine, stretch], DAY, logs, UTC)
    lines = render_day(summary).splitlines()
    target = summary.rows[0].target
    answer = "yes" if summary.rows[1].target else "no"

    assert lines[0] == "dosages on date: 2026-02-11"
    assert lines[1] == ""
    assert lines[2] == f" 0: {DONE_MARK}Creatine 9/{target} scoop"
    assert lines[3] == f" 1:   Stretch  {answer}"


def test_to_dict():
    summary = summarize_day([_bool_input("Stretch")], DAY, [], UTC)
    d = summary.to_dict()
    assert d["day"] == "2026-02-11"
    assert d["rows"][0]["name"] == "Stretch"
    assert d["rows"][0]["type"] == "boolean"
    assert d["rows"][0]["consumed"] is None
