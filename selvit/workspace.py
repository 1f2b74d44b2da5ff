"""Workspace root, settings, timezone and path helpers for Selvit."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz

from selvit.dayclock import logical_day_of
from selvit.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_SYNC_TIMEOUT = 30


def workspace_root() -> Path:
    """Get the workspace root directory (contains inputs/ and log/)."""
    env = os.environ.get("SELVIT_ROOT")
    if env:
        return Path(env).expanduser().resolve()
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return (Path(data_home).expanduser() / "selvit").resolve()


@dataclass
class Settings:
    timezone: str | None = None
    sync: bool = True
    sync_timeout: int = DEFAULT_SYNC_TIMEOUT

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        zone = d.get("timezone")
        return cls(
            timezone=str(zone) if zone else None,
            sync=bool(d.get("sync", True)),
            sync_timeout=int(d.get("sync_timeout", DEFAULT_SYNC_TIMEOUT)),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"sync": self.sync, "sync_timeout": self.sync_timeout}
        if self.timezone:
            d["timezone"] = self.timezone
        return d


def load_settings(root: Path | None = None) -> Settings:
    """Read config.yaml from the workspace; missing file means defaults."""
    if root is None:
        root = workspace_root()
    return Settings.from_dict(read_yaml(config_path(root)))


def get_user_timezone(root: Path | None = None) -> tzinfo:
    """Timezone from config.yaml, defaulting to the system local zone."""
    settings = load_settings(root)
    if settings.timezone:
        try:
            return ZoneInfo(settings.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r in config.yaml, using local time", settings.timezone)
    return tz.tzlocal()


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def logical_today(root: Path | None = None) -> date:
    """The logical day (03:00 cutover) that contains the current instant."""
    user_tz = get_user_timezone(root)
    return logical_day_of(datetime.now(user_tz), user_tz)


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def inputs_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "inputs"


def log_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "log"
