"""Deterministic daily targets.

Each (input identity, calendar day) pair maps to exactly one target:
a yes/no answer for boolean inputs, or a whole number of primary units
for dosage inputs. The value is reproducible forever because the PRNG
seed is derived from the identity and the day count alone.

Seed derivation:
    high  = first 64 bits of the 128-bit identity
    days  = signed days between 2000-01-01 and the day
    seed  = (high + days) mod 2**64

The seed feeds random.Random (Mersenne Twister, integer seeding), whose
output sequence for a given seed is stable across Python releases.
"""

from __future__ import annotations

import random
import uuid
from datetime import date

from selvit.bounds import unit_bounds
from selvit.models import Dosage, Input

SEED_EPOCH = date(2000, 1, 1)
_MASK64 = (1 << 64) - 1


class ConfigurationError(ValueError):
    """A dosage input whose primary unit admits no valid whole-unit range."""

    def __init__(self, message: str, input_name: str | None = None) -> None:
        super().__init__(message)
        self.input_name = input_name


def derive_seed(identity: uuid.UUID, day: date) -> int:
    high = identity.int >> 64
    days_since = (day - SEED_EPOCH).days
    return (high + (days_since & _MASK64)) & _MASK64


def compute_target(identity: uuid.UUID, day: date, dosage: Dosage | None) -> bool | int:
    """Target for one input on one day.

    Boolean inputs (dosage is None) get a bool. Dosage inputs get an int in
    the primary unit's bounds; ConfigurationError if there are none.
    """
    rng = random.Random(derive_seed(identity, day))
    if dosage is None:
        return rng.getrandbits(1) == 1

    bounds = unit_bounds(dosage)
    if bounds is None:
        unit = dosage.primary_unit
        raise ConfigurationError(
            f"No whole number of {unit.name!r} (dose {unit.dose:g}) fits "
            f"{dosage.min:g}-{dosage.max:g} {dosage.unit_name}"
        )
    lo, hi = bounds
    return lo + rng.getrandbits(32) % (hi - lo + 1)


def target_for_input(item: Input, day: date) -> bool | int:
    try:
        return compute_target(item.id, day, item.dosage)
    except ConfigurationError as e:
        raise ConfigurationError(f"{item.name}: {e}", input_name=item.name) from e
