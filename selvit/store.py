"""YAML flat-file persistence for inputs and logs.

Layout under the workspace root:
    inputs/<name>.yaml            one file per input
    log/<unix-time>-<unit>.yaml   one file per consumption event (-1, -2 ... on a clash)

Every write is followed by a git push (see selvit.sync) unless disabled
in config.yaml.
"""

from __future__ import annotations

import itertools
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path

import yaml

from selvit.fileio import read_yaml, write_yaml_atomic, write_yaml_new
from selvit.logs import logs_for_day
from selvit.models import Input, LogEntry, Unit
from selvit.summary import order_inputs
from selvit.sync import (
    SyncError,
    log_message,
    new_input_message,
    push_changes,
    update_input_message,
)
from selvit.workspace import (
    get_user_timezone,
    inputs_dir,
    load_settings,
    log_dir,
    workspace_root,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A stored record is malformed, or a referenced unit does not exist."""


@dataclass
class SaveResult:
    created: bool
    pushed: bool


def _record_files(directory: Path) -> list[Path]:
    if not directory.exists():
        return []
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix == ".yaml" and not p.name.startswith(".")
    )


def _load_record(path: Path) -> dict:
    try:
        return read_yaml(path)
    except (yaml.YAMLError, ValueError, OSError) as e:
        raise StoreError(f"Cannot read {path}: {e}") from e


def _input_filename(name: str) -> str:
    return re.sub(r"[/\\]", "_", name).strip(".") + ".yaml"


def _sync(message: str, root: Path) -> bool:
    settings = load_settings(root)
    if not settings.sync:
        return False
    try:
        push_changes(message, root, timeout=settings.sync_timeout)
    except SyncError as e:
        logger.warning("Saved locally but not pushed: %s", e)
        return False
    return True


# ── Inputs ────────────────────────────────────────────────────


def _load_input_files(root: Path) -> list[tuple[Path, Input]]:
    out = []
    for path in _record_files(inputs_dir(root)):
        data = _load_record(path)
        try:
            out.append((path, Input.from_dict(data)))
        except (KeyError, ValueError, TypeError) as e:
            raise StoreError(f"Invalid input record {path}: {e}") from e
    return out


def load_inputs(root: Path | None = None) -> list[Input]:
    """All inputs in display order (dosage by name, then boolean by name)."""
    if root is None:
        root = workspace_root()
    return order_inputs([item for _, item in _load_input_files(root)])


def get_input(index: int, root: Path | None = None) -> Input:
    """Input at a display index; IndexError when out of range."""
    inputs = load_inputs(root)
    if index < 0 or index >= len(inputs):
        raise IndexError(f"No input at index {index} ({len(inputs)} inputs)")
    return inputs[index]


def _write_input(item: Input, root: Path) -> bool:
    target = inputs_dir(root) / _input_filename(item.name)
    files = _load_input_files(root)
    for path, existing in files:
        if path.name == target.name and existing.id != item.id:
            raise StoreError(f"{target.name} already belongs to input {existing.name!r}")

    created = True
    for path, existing in files:
        if existing.id == item.id:
            path.unlink()
            created = False
    write_yaml_atomic(target, item.to_dict())
    return created


def save_input(item: Input, root: Path | None = None) -> SaveResult:
    """Create or update an input; an existing file with the same id is replaced.

    Raises StoreError when the name maps to a file owned by another input.
    """
    if root is None:
        root = workspace_root()
    created = _write_input(item, root)
    logger.debug("%s input %s (%s)", "Created" if created else "Updated", item.name, item.id)
    message = new_input_message(item.name) if created else update_input_message(item.name)
    return SaveResult(created=created, pushed=_sync(message, root))


def refresh_inputs(root: Path | None = None) -> list[Input]:
    """Rewrite every input file under its current name."""
    if root is None:
        root = workspace_root()
    inputs = load_inputs(root)
    seen: dict[str, Input] = {}
    for item in inputs:
        filename = _input_filename(item.name)
        if filename in seen:
            raise StoreError(f"Inputs {seen[filename].name!r} and {item.name!r} both map to {filename}")
        seen[filename] = item
    for path in _record_files(inputs_dir(root)):
        path.unlink()
    for item in inputs:
        write_yaml_atomic(inputs_dir(root) / _input_filename(item.name), item.to_dict())
    _sync(f"refresh {len(inputs)} inputs", root)
    return inputs


def set_valid_after(index: int, hour: int | None, root: Path | None = None) -> Input:
    """Hide the input at `index` from reports until hour:00 (None clears)."""
    item = get_input(index, root)
    item.valid_after = time(hour, 0) if hour is not None else None
    save_input(item, root)
    return item


def find_unit(source: uuid.UUID, inputs: list[Input]) -> Unit:
    return input_for_unit(source, inputs).dosage.find_unit(source)


def input_for_unit(source: uuid.UUID, inputs: list[Input]) -> Input:
    for item in inputs:
        if item.dosage is not None and item.dosage.find_unit(source) is not None:
            return item
    raise StoreError(f"No input owns unit {source}")


# ── Logs ──────────────────────────────────────────────────────


def load_logs(root: Path | None = None) -> list[LogEntry]:
    """All logs sorted ascending by time."""
    if root is None:
        root = workspace_root()
    out = []
    for path in _record_files(log_dir(root)):
        data = _load_record(path)
        try:
            out.append(LogEntry.from_dict(data))
        except (KeyError, ValueError, TypeError) as e:
            raise StoreError(f"Invalid log record {path}: {e}") from e
    out.sort(key=lambda log: log.time)
    return out


def load_logs_for_day(day: date, root: Path | None = None, tz: tzinfo | None = None) -> list[LogEntry]:
    if tz is None:
        tz = get_user_timezone(root)
    return logs_for_day(day, load_logs(root), tz)


def save_log(entry: LogEntry, root: Path | None = None) -> SaveResult:
    if root is None:
        root = workspace_root()
    inputs = load_inputs(root)
    item = input_for_unit(entry.source, inputs)
    unit = find_unit(entry.source, inputs)

    stem = f"{entry.time}-{entry.source.hex[:8]}"
    path = log_dir(root) / f"{stem}.yaml"
    for n in itertools.count(1):
        try:
            write_yaml_new(path, entry.to_dict())
            break
        except FileExistsError:
            # same unit logged twice within one second
            path = log_dir(root) / f"{stem}-{n}.yaml"
    logger.debug("Logged %d %s for %s at %d", entry.quantity, unit.name, item.name, entry.time)
    return SaveResult(created=True, pushed=_sync(log_message(item.name, unit.name, entry.quantity), root))


def log_quantity(
    index: int,
    quantity: int,
    hours_ago: float | None = None,
    root: Path | None = None,
    now: datetime | None = None,
) -> tuple[LogEntry, SaveResult]:
    """Log `quantity` primary units for the dosage input at `index`."""
    if root is None:
        root = workspace_root()
    if quantity < 0:
        raise ValueError("quantity must not be negative")
    item = get_input(index, root)
    if item.dosage is None:
        raise ValueError(f"{item.name} is a yes/no input; nothing to log")
    if now is None:
        now = datetime.now(get_user_timezone(root))
    if hours_ago:
        now -= timedelta(seconds=int(hours_ago * 3600))
    entry = LogEntry.new(item.dosage.primary_unit.id, quantity, now)
    return entry, save_log(entry, root)
