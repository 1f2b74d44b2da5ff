"""YAML record files for the Selvit workspace.

Inputs live in inputs/<name>.yaml and consumption events in
log/<unix-time>-<unit>.yaml. Every record is written to a hidden temp
file in the same directory (flocked and fsynced) and only then moved
into place, so readers never see a half-written record. Hidden files are
skipped when listing records.
"""

from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning empty dict if missing or empty.

    Raises yaml.YAMLError on malformed content and ValueError when the
    document is not a mapping.
    """
    text = read_text(path)
    if not text.strip():
        return {}
    result = yaml.safe_load(text)
    if not isinstance(result, dict):
        raise ValueError(f"{path}: expected a YAML mapping, got {type(result).__name__}")
    return result


def _dump(data: dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def _write_temp(directory: Path, content: str) -> str:
    """Write `content` to a flocked, fsynced temp file in `directory`."""
    directory.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".tmp_", suffix=".yaml")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except Exception:
        os.unlink(temp_path)
        raise
    return temp_path


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Write a record, replacing any file already at `path`."""
    temp_path = _write_temp(path.parent, _dump(data))
    try:
        os.rename(temp_path, path)
    except Exception:
        os.unlink(temp_path)
        raise


def write_yaml_new(path: Path, data: dict[str, Any]) -> None:
    """Write a record that must not exist yet.

    Raises FileExistsError (leaving the existing file untouched) when
    `path` is already taken.
    """
    temp_path = _write_temp(path.parent, _dump(data))
    try:
        os.link(temp_path, path)
    finally:
        os.unlink(temp_path)
