"""Typed dataclasses for the VisionFlow data model.

All models use from_dict/to_dict for document serialization.
camelCase in stored documents is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

STATUS_NOT_STARTED = "Not Started"
STATUS_DONE = "Done"
VALID_STATUSES = {STATUS_NOT_STARTED, STATUS_DONE}

PRIORITIES = ["High", "Medium", "Low"]

THEME_COUNT = 3


def parse_minutes(value: Any) -> int:
    """Read an estimated-minutes value the way older documents stored it.

    Accepts ints, floats and strings with a leading integer ("30", "45 min").
    Anything else counts as 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        m = re.match(r"^\s*(-?\d+)", value)
        if m:
            return int(m.group(1))
    return 0


def to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ── Vision ────────────────────────────────────────────────────


@dataclass
class Vision:
    life: str = "To live a balanced, purposeful life..."
    annual: str = "Build a sustainable foundation for..."
    themes: list[str] = field(default_factory=lambda: ["Health", "Wealth", "Wisdom"])
    core_values: str = "Integrity, Growth, Compassion"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Vision:
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()
        if isinstance(d.get("themes"), list):
            themes = [str(t) for t in d["themes"]][:THEME_COUNT]
            themes += [""] * (THEME_COUNT - len(themes))
        else:
            themes = defaults.themes
        return cls(
            life=str(d.get("life", defaults.life)),
            annual=str(d.get("annual", defaults.annual)),
            themes=themes,
            core_values=str(d.get("coreValues", defaults.core_values)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "life": self.life,
            "annual": self.annual,
            "themes": list(self.themes),
            "coreValues": self.core_values,
        }


# ── Goals ─────────────────────────────────────────────────────


@dataclass
class Goal:
    id: str = ""
    title: str = ""
    description: str = ""
    priority: str = "High"
    annual_tag: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Goal:
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "") or ""),
            description=str(d.get("description", "") or ""),
            priority=str(d.get("priority", "High") or "High"),
            annual_tag=str(d.get("annualTag", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "annualTag": self.annual_tag,
        }


@dataclass
class WeeklyFocus:
    text: str = ""
    week_of: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeeklyFocus:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(text=str(d.get("text", "") or ""), week_of=str(d.get("weekOf", "") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "weekOf": self.week_of}


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    date: str = ""  # YYYY-MM-DD
    title: str = ""
    category: str = ""
    sub_category: str = ""
    est_time: int = 0  # minutes
    status: str = STATUS_NOT_STARTED

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=str(d.get("id", "")),
            date=str(d.get("date", "")),
            title=str(d.get("title", "") or ""),
            category=str(d.get("category", "") or ""),
            sub_category=str(d.get("subCategory", "") or ""),
            est_time=parse_minutes(d.get("estTime")),
            status=str(d.get("status", STATUS_NOT_STARTED) or STATUS_NOT_STARTED),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "category": self.category,
            "subCategory": self.sub_category,
            "estTime": self.est_time,
            "status": self.status,
        }

    @property
    def done(self) -> bool:
        return self.status == STATUS_DONE


# ── Reflections ───────────────────────────────────────────────


@dataclass
class Reflection:
    id: str = ""
    date: str = ""
    completion: int = 0  # 0-100
    mood: int = 5  # 1-10
    overloaded: bool = False
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Reflection:
        return cls(
            id=str(d.get("id", "")),
            date=str(d.get("date", "")),
            completion=to_int(d.get("completion"), 0),
            mood=to_int(d.get("mood"), 5),
            overloaded=d.get("overloaded") is True,
            notes=str(d.get("notes", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "completion": self.completion,
            "mood": self.mood,
            "overloaded": self.overloaded,
            "notes": self.notes,
        }


# ── Derived ───────────────────────────────────────────────────


@dataclass
class OverloadStats:
    total_minutes: int = 0
    total_hours: float = 0.0
    task_count: int = 0
    is_overloaded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMins": self.total_minutes,
            "totalHours": self.total_hours,
            "totalTasks": self.task_count,
            "isOverloaded": self.is_overloaded,
        }


@dataclass
class CategoryShare:
    category: str = ""
    minutes: int = 0
    percent: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "minutes": self.minutes, "percent": self.percent}


@dataclass
class DashboardSummary:
    avg_completion: int = 0
    overload_count: int = 0
    reflections_counted: int = 0
    mood_trend: list[int] = field(default_factory=list)
    weekly_distribution: list[CategoryShare] = field(default_factory=list)
    weekly_total_minutes: int = 0
    top_subcategories: list[CategoryShare] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "avgCompletion": self.avg_completion,
            "overloadCount": self.overload_count,
            "reflectionsCounted": self.reflections_counted,
            "moodTrend": list(self.mood_trend),
            "weeklyDistribution": [s.to_dict() for s in self.weekly_distribution],
            "weeklyTotalMinutes": self.weekly_total_minutes,
            "topSubcategories": [s.to_dict() for s in self.top_subcategories],
        }


def records(cls: Any, values: Any) -> list[Any]:
    """from_dict over a stored list, skipping entries that are not objects."""
    if not isinstance(values, list):
        return []
    return [cls.from_dict(v) for v in values if isinstance(v, dict)]
