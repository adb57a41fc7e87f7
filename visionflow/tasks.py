"""Task creation, validation and status changes for VisionFlow."""

from __future__ import annotations

from typing import Any

from visionflow.models import STATUS_DONE, STATUS_NOT_STARTED, VALID_STATUSES, Task
from visionflow.workspace import Clock, is_date_str

DEFAULT_SUBCATEGORY = "General"


# ── Validation ────────────────────────────────────────────────


def validate_task(task: dict[str, Any], categories: dict[str, list[str]]) -> list[str]:
    """Validate a task form and return list of errors (empty if valid)."""
    errors = []
    if not str(task.get("title", "") or "").strip():
        errors.append("Missing required field: title")

    category = task.get("category")
    if not category:
        errors.append("Missing required field: category")
    elif category not in categories:
        errors.append(f"Unknown category: {category}")

    est = task.get("estTime")
    if isinstance(est, str) and est.strip().isdigit():
        est = int(est)
    if isinstance(est, bool) or not isinstance(est, int) or est <= 0:
        errors.append("estTime must be a positive integer (minutes)")

    if not is_date_str(task.get("date")):
        errors.append(f"Invalid date: {task.get('date')!r}")

    if "status" in task and task["status"] not in VALID_STATUSES:
        errors.append(f"Invalid status: {task['status']}")

    return errors


# ── CRUD ──────────────────────────────────────────────────────


def new_id(clock: Clock, existing: set[str] | list[str]) -> str:
    """Millisecond timestamp from *clock*, bumped until it is unused."""
    taken = set(existing)
    ms = int(clock.now().timestamp() * 1000)
    while str(ms) in taken:
        ms += 1
    return str(ms)


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    for t in tasks:
        if t.id == task_id:
            return t
    return None


def create_task(
    tasks: list[Task],
    categories: dict[str, list[str]],
    task_data: dict[str, Any],
    clock: Clock,
) -> tuple[Task, list[str]]:
    """Create and append a new task. Returns (task, errors)."""
    errors = validate_task(task_data, categories)
    if errors:
        return Task(), errors

    task = Task(
        id=new_id(clock, [t.id for t in tasks]),
        date=task_data["date"],
        title=str(task_data["title"]).strip(),
        category=task_data["category"],
        sub_category=str(task_data.get("subCategory") or "").strip() or DEFAULT_SUBCATEGORY,
        est_time=int(task_data["estTime"]),
        status=STATUS_NOT_STARTED,
    )
    tasks.append(task)
    return task, []


def toggle_task_status(tasks: list[Task], task_id: str) -> Task | None:
    """Flip a task between Done and Not Started. Returns the task, or None."""
    task = find_task(tasks, task_id)
    if task is None:
        return None
    task.status = STATUS_NOT_STARTED if task.status == STATUS_DONE else STATUS_DONE
    return task


def viewed_tasks(tasks: list[Task], selected_date: str) -> list[Task]:
    """Tasks dated on *selected_date*, original order kept."""
    return [t for t in tasks if t.date == selected_date]
