"""Main categories and their sub-verticals."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from visionflow.models import Task

DEFAULT_CATEGORIES: dict[str, list[str]] = {
    "Work": ["Career Coaching", "Life Coaching", "Social Media"],
    "Wellness": ["Social", "Physical", "Spiritual"],
    "Learning": ["Reading", "Courses"],
    "Household": ["General Chores", "Admin"],
}

# Tasks written before category became required render under this column.
FALLBACK_DISPLAY_CATEGORY = "Household"


def add_subcategory(
    categories: dict[str, list[str]], main: str, sub: str
) -> tuple[dict[str, list[str]], bool]:
    """Return (categories, added). *sub* is appended once per main category.

    Unknown main categories are left alone.
    """
    if main not in categories or not sub or sub in categories[main]:
        return categories, False
    updated = copy.deepcopy(categories)
    updated[main].append(sub)
    return updated, True


def display_category(task: Task) -> str:
    return task.category or FALLBACK_DISPLAY_CATEGORY


def tasks_by_category(tasks: list[Task], categories: dict[str, list[str]]) -> dict[str, list[Task]]:
    """Group tasks under each main category, in category order."""
    return {
        cat: [t for t in tasks if display_category(t) == cat]
        for cat in categories
    }
