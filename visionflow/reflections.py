"""Evening reflections: at most one per date."""

from __future__ import annotations

from typing import Any

from visionflow.models import Reflection, to_int
from visionflow.tasks import new_id
from visionflow.workspace import Clock, is_date_str


def validate_reflection(data: dict[str, Any]) -> list[str]:
    errors = []
    completion = data.get("completion")
    if completion is None or not 0 <= to_int(completion, -1) <= 100:
        errors.append("completion must be an integer 0-100")
    mood = data.get("mood")
    if mood is None or not 1 <= to_int(mood, 0) <= 10:
        errors.append("mood must be an integer 1-10")
    if not isinstance(data.get("overloaded", False), bool):
        errors.append("overloaded must be true or false")
    return errors


def build_reflection(
    data: dict[str, Any],
    day: str,
    clock: Clock,
    existing: list[Reflection] | None = None,
) -> tuple[Reflection, list[str]]:
    """Build a reflection for *day* from form data. Returns (reflection, errors)."""
    errors = validate_reflection(data)
    if not is_date_str(day):
        errors.append(f"Invalid date: {day!r}")
    if errors:
        return Reflection(), errors
    reflection = Reflection(
        id=new_id(clock, [r.id for r in (existing or [])]),
        date=day,
        completion=to_int(data["completion"], 0),
        mood=to_int(data["mood"], 5),
        overloaded=data.get("overloaded") is True,
        notes=str(data.get("notes", "") or ""),
    )
    return reflection, []


def save_reflection(reflections: list[Reflection], new: Reflection) -> list[Reflection]:
    """Replace any reflection on the same date with *new*."""
    kept = [r for r in reflections if r.date != new.date]
    kept.append(new)
    return kept


def reflection_for_date(reflections: list[Reflection], day: str) -> Reflection | None:
    for r in reflections:
        if r.date == day:
            return r
    return None


def recent_reflections(reflections: list[Reflection], n: int = 7) -> list[Reflection]:
    """The last *n* reflections, oldest first."""
    ordered = sorted(reflections, key=lambda r: r.date)
    return ordered[-n:] if n > 0 else []
