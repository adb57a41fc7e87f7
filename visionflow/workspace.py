"""Workspace root, clocks, calendar and path helpers for VisionFlow."""

from __future__ import annotations

import os
from datetime import date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo


def workspace_root() -> Path:
    """Get the workspace root directory (holds visionflow.yaml and artifacts/)."""
    return Path(
        os.environ.get("VISIONFLOW_ROOT", str(Path.home() / "visionflow"))
    ).expanduser().resolve()


# ── Clocks ────────────────────────────────────────────────────


class Clock:
    """Source of the current local time."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def __init__(self, tz: ZoneInfo | str = "UTC") -> None:
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """A clock that only moves when told to. Used by tests and replays."""

    def __init__(self, at: datetime) -> None:
        self._at = at

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = at

    def advance(self, **kwargs: float) -> datetime:
        self._at = self._at + timedelta(**kwargs)
        return self._at


def today_str(clock: Clock | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) according to *clock*."""
    if clock is None:
        clock = SystemClock()
    return clock.now().date().isoformat()


def next_day_str(date_str: str) -> str:
    """Return the calendar day after *date_str*.

    Anchored at noon so a DST transition can never push the result
    onto the same day or two days ahead.
    """
    anchored = datetime.combine(date.fromisoformat(date_str), time(12, 0))
    return (anchored + timedelta(days=1)).date().isoformat()


def is_date_str(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


# ── Path helpers ──────────────────────────────────────────────


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "visionflow.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def documents_root(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "artifacts"
