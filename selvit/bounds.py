"""Unit bounds: which whole numbers of a unit satisfy a dosage range."""

from __future__ import annotations

import math

from selvit.models import Dosage, Unit


def compute_bounds(min_quantity: float, max_quantity: float, unit_dose: float) -> tuple[int, int] | None:
    """Return the (min_units, max_units) range of whole units within bounds.

    None when the unit is unusable (dose <= 0) or no whole number of units
    lands inside [min_quantity, max_quantity]. Unit counts never go below 0.
    """
    if unit_dose <= 0:
        return None
    min_units = max(0, math.ceil(min_quantity / unit_dose))
    max_units = max(0, math.floor(max_quantity / unit_dose))
    if min_units > max_units:
        return None
    return min_units, max_units


def unit_bounds(dosage: Dosage, unit: Unit | None = None) -> tuple[int, int] | None:
    """Bounds of `unit` (the primary unit by default) for a dosage range."""
    if unit is None:
        unit = dosage.primary_unit
    return compute_bounds(dosage.min, dosage.max, unit.dose)
