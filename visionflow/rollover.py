"""Moving unfinished tasks to the next day when a day is closed."""

from __future__ import annotations

from visionflow.models import Task
from visionflow.workspace import next_day_str


def unfinished_tasks(tasks: list[Task], day: str) -> list[Task]:
    return [t for t in tasks if t.date == day and not t.done]


def default_selections(tasks: list[Task], day: str) -> dict[str, bool]:
    """Every unfinished task of *day* starts out selected."""
    return {t.id: True for t in unfinished_tasks(tasks, day)}


def rollover_tasks(
    tasks: list[Task], day: str, selections: dict[str, bool]
) -> tuple[list[Task], int, str]:
    """Re-date selected unfinished tasks of *day* to the following day.

    A task missing from *selections* is treated as not selected.
    Returns (tasks, rolled_over_count, next_day).
    """
    next_day = next_day_str(day)
    count = 0
    for task in tasks:
        if task.date == day and not task.done and selections.get(task.id) is True:
            task.date = next_day
            count += 1
    return tasks, count, next_day
