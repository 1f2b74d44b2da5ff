"""Shared test fixtures for Selvit tests."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

VITAMIN_D_ID = "6f1c3a52-8e0b-4b8e-9a55-0d6f7f1e2a01"
PILL_ID = "1a2b3c4d-0000-4000-8000-000000000001"
CREATINE_ID = "0b7e9f10-3c1d-4f6a-8d2e-5a4b3c2d1e02"
SCOOP_ID = "1a2b3c4d-0000-4000-8000-000000000002"
MAGNESIUM_ID = "a3d2c1b0-9f8e-4d7c-8b6a-1f2e3d4c5b03"
TABLET_ID = "1a2b3c4d-0000-4000-8000-000000000003"
STRETCH_ID = "c4b5a697-8877-4655-9443-322110ff0e04"
MEDITATE_ID = "d5c6b7a8-9988-4766-a554-433221100f05"


def _ts(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


def _write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace: UTC, git sync off, logs around 2026-02-11."""
    root = tmp_path / "selvit"
    root.mkdir()

    _write(root / "config.yaml", {"timezone": "UTC", "sync": False})

    # Inputs
    _write(root / "inputs" / "Vitamin D.yaml", {
        "id": VITAMIN_D_ID,
        "name": "Vitamin D",
        "type": "dosage",
        "valid_after": None,
        "min": 1000.0,
        "max": 2000.0,
        "unit_name": "IU",
        "units": [{"name": "pill", "id": PILL_ID, "dose": 1000.0}],
    })
    _write(root / "inputs" / "Creatine.yaml", {
        "id": CREATINE_ID,
        "name": "Creatine",
        "type": "dosage",
        "min": 3.0,
        "max": 5.0,
        "unit_name": "grams",
        "units": [{"name": "scoop", "id": SCOOP_ID, "dose": 1.0}],
    })
    _write(root / "inputs" / "Magnesium.yaml", {
        "id": MAGNESIUM_ID,
        "name": "Magnesium",
        "type": "dosage",
        "min": 200.0,
        "max": 400.0,
        "unit_name": "mg",
        "units": [{"name": "tablet", "id": TABLET_ID, "dose": 100.0}],
    })
    _write(root / "inputs" / "Stretch.yaml", {
        "id": STRETCH_ID,
        "name": "Stretch",
        "type": "boolean",
    })
    _write(root / "inputs" / "Meditate.yaml", {
        "id": MEDITATE_ID,
        "name": "Meditate",
        "type": "boolean",
        "valid_after": "18:00:00",
    })

    # Logs: logical day 2026-02-11 runs 2026-02-11T03:00Z .. 2026-02-12T03:00Z
    logs = [
        (PILL_ID, _ts(2026, 2, 11, 2, 0), 2),     # belongs to 2026-02-10
        (PILL_ID, _ts(2026, 2, 11, 8, 0), 1),
        (SCOOP_ID, _ts(2026, 2, 11, 12, 0), 5),
        (PILL_ID, _ts(2026, 2, 12, 1, 30), 1),    # after midnight, still 2026-02-11
        (PILL_ID, _ts(2026, 2, 12, 3, 30), 1),    # 2026-02-12
    ]
    for source, ts, qty in logs:
        _write(root / "log" / f"{ts}-{source[:8]}.yaml", {"source": source, "time": ts, "quantity": qty})

    # Set env var
    os.environ["SELVIT_ROOT"] = str(root)
    yield root
    # Cleanup
    if "SELVIT_ROOT" in os.environ:
        del os.environ["SELVIT_ROOT"]
