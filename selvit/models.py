"""Typed dataclasses for the Selvit data model.

All models use from_dict/to_dict for YAML serialization.
Unknown keys are ignored; missing optional keys use defaults.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any

BOOLEAN = "boolean"
DOSAGE = "dosage"


def _parse_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def _parse_time(value: Any) -> time | None:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    if isinstance(value, int):
        # YAML 1.1 reads unquoted 18:00 and 18:00:00 as sexagesimal ints:
        # below one day of minutes it is HH:MM, otherwise HH:MM:SS
        if value < 24 * 60:
            return time(value // 60, value % 60)
        return time(value // 3600 % 24, value // 60 % 60, value % 60)
    return time.fromisoformat(str(value))


# ── Units & dosage ────────────────────────────────────────────


@dataclass
class Unit:
    """A conversion source: one unit holds `dose` of the dosage quantity."""

    name: str
    dose: float
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Unit:
        raw_id = d.get("id")
        return cls(
            name=str(d.get("name", "")),
            dose=float(d.get("dose", 0.0)),
            id=_parse_uuid(raw_id) if raw_id else uuid.uuid4(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "id": str(self.id), "dose": self.dose}


@dataclass
class Dosage:
    """Bounded daily range of some quantity, measured through one or more units."""

    min: float
    max: float
    unit_name: str
    units: list[Unit]

    def __post_init__(self) -> None:
        if not self.units:
            raise ValueError("A dosage needs at least one unit")
        if self.min > self.max:
            raise ValueError(f"Dosage min ({self.min}) is greater than max ({self.max})")

    @property
    def primary_unit(self) -> Unit:
        return self.units[0]

    def find_unit(self, unit_id: uuid.UUID) -> Unit | None:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None


# ── Inputs ────────────────────────────────────────────────────


@dataclass
class Input:
    id: uuid.UUID
    name: str
    dosage: Dosage | None = None  # None: yes/no habit
    valid_after: time | None = None

    @property
    def kind(self) -> str:
        return BOOLEAN if self.dosage is None else DOSAGE

    @property
    def is_bool(self) -> bool:
        return self.dosage is None

    @classmethod
    def new_boolean(cls, name: str) -> Input:
        return cls(id=uuid.uuid4(), name=name)

    @classmethod
    def new_dosage(
        cls,
        name: str,
        unit_name: str,
        min: float,
        max: float,
        units: list[Unit],
    ) -> Input:
        return cls(
            id=uuid.uuid4(),
            name=name,
            dosage=Dosage(min=min, max=max, unit_name=unit_name, units=list(units)),
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Input:
        kind = str(d.get("type", BOOLEAN)).lower()
        dosage = None
        if kind == DOSAGE:
            dosage = Dosage(
                min=float(d.get("min", 0.0)),
                max=float(d.get("max", 0.0)),
                unit_name=str(d.get("unit_name", "")),
                units=[Unit.from_dict(u) for u in (d.get("units") or [])],
            )
        elif kind != BOOLEAN:
            raise ValueError(f"Unknown input type: {kind!r}")
        return cls(
            id=_parse_uuid(d["id"]),
            name=str(d.get("name", "")),
            dosage=dosage,
            valid_after=_parse_time(d.get("valid_after")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": str(self.id),
            "name": self.name,
            "type": self.kind,
            "valid_after": self.valid_after.strftime("%H:%M:%S") if self.valid_after else None,
        }
        if self.dosage is not None:
            d["min"] = self.dosage.min
            d["max"] = self.dosage.max
            d["unit_name"] = self.dosage.unit_name
            d["units"] = [u.to_dict() for u in self.dosage.units]
        return d


# ── Logs ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class LogEntry:
    """One consumption event, logged against a unit (not an input)."""

    source: uuid.UUID
    time: int  # unix seconds
    quantity: int

    @classmethod
    def new(cls, source: uuid.UUID, quantity: int, when: datetime) -> LogEntry:
        return cls(source=source, time=int(when.timestamp()), quantity=quantity)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LogEntry:
        return cls(
            source=_parse_uuid(d["source"]),
            time=int(d["time"]),
            quantity=int(d.get("quantity", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"source": str(self.source), "time": self.time, "quantity": self.quantity}
