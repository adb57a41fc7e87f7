"""Closing a day: save the reflection, then roll unfinished tasks forward.

The close-day pipeline:
1. Validate & build the reflection
2. Replace any reflection already saved for the day
3. Roll selected unfinished tasks over to the next day
4. Run hooks
5. Report what happened

Steps 2 and 3 are separate writes. If the task write fails after the
reflection write succeeded the day is only partially closed; the
tasks binding is then left diverged until its next snapshot.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from visionflow.hooks import run_hooks
from visionflow.models import Reflection, Task, records
from visionflow.reflections import build_reflection, save_reflection
from visionflow.rollover import default_selections, rollover_tasks
from visionflow.sync import Collections
from visionflow.workspace import Clock, today_str


def close_day(
    collections: Collections,
    day: str,
    form: dict[str, Any],
    clock: Clock,
    selections: dict[str, bool] | None = None,
    root: Path | None = None,
) -> dict[str, Any]:
    """Save the reflection for *day* and roll over the selected tasks.

    *selections* maps task id -> rollover checkbox. When omitted every
    unfinished task of the day is rolled over.
    """
    reflections = records(Reflection, collections.reflections.value)

    # 1. Validate & build
    reflection, errors = build_reflection(form, day, clock, existing=reflections)
    if errors:
        return {"ok": False, "reason": "invalid-reflection", "errors": errors, "day": day}

    # 2. Replace-on-date write
    updated = save_reflection(reflections, reflection)
    collections.reflections.set([r.to_dict() for r in updated])

    # 3. Rollover
    tasks = records(Task, collections.tasks.value)
    if selections is None:
        selections = default_selections(tasks, day)
    tasks, rolled_over, next_day = rollover_tasks(tasks, day, selections)
    if rolled_over > 0:
        collections.tasks.set([t.to_dict() for t in tasks])

    # 4. Hooks
    if root is not None:
        run_hooks("on_reflection_saved", {"day": day, "reflection": reflection.to_dict()}, root)
        if rolled_over > 0:
            run_hooks("post_rollover", {"day": day, "next_day": next_day, "rolled_over": rolled_over}, root)

    # 5. Report
    if rolled_over > 0:
        target = "tomorrow" if day == today_str(clock) else "the next day"
        message = f"Reflection saved! Rolled over {rolled_over} tasks to {target}."
    else:
        message = "Reflection saved successfully."

    return {
        "ok": True,
        "day": day,
        "next_day": next_day,
        "rolled_over": rolled_over,
        "reflection": reflection.to_dict(),
        "message": message,
    }
