"""Quarterly goals: an append-only list."""

from __future__ import annotations

from typing import Any

from visionflow.models import PRIORITIES, Goal
from visionflow.tasks import new_id
from visionflow.workspace import Clock


def validate_goal(goal: dict[str, Any]) -> list[str]:
    errors = []
    if not str(goal.get("title", "") or "").strip():
        errors.append("Missing required field: title")
    priority = goal.get("priority", "High")
    if priority not in PRIORITIES:
        errors.append(f"Invalid priority: {priority} (expected one of {', '.join(PRIORITIES)})")
    return errors


def create_goal(goals: list[Goal], goal_data: dict[str, Any], clock: Clock) -> tuple[Goal, list[str]]:
    """Create and append a goal. Returns (goal, errors)."""
    errors = validate_goal(goal_data)
    if errors:
        return Goal(), errors
    goal = Goal(
        id=new_id(clock, [g.id for g in goals]),
        title=str(goal_data["title"]).strip(),
        description=str(goal_data.get("description", "") or ""),
        priority=goal_data.get("priority", "High"),
        annual_tag=str(goal_data.get("annualTag", "") or ""),
    )
    goals.append(goal)
    return goal, []
