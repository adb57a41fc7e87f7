"""Planner: one user's collections plus the operations the views call."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from visionflow.analytics import dashboard_summary, overload_stats
from visionflow.categories import add_subcategory, tasks_by_category
from visionflow.config import DEFAULT_APP_ID, Settings
from visionflow.finalize import close_day
from visionflow.goals import create_goal
from visionflow.hooks import run_hooks
from visionflow.models import DashboardSummary, Goal, Reflection, Task, Vision, WeeklyFocus, records
from visionflow.reflections import reflection_for_date
from visionflow.reminders import reminders
from visionflow.rollover import unfinished_tasks
from visionflow.store import DocumentStore, open_store
from visionflow.sync import Collections
from visionflow.tasks import create_task, toggle_task_status, viewed_tasks
from visionflow.vision import set_theme, update_vision, update_weekly_focus
from visionflow.workspace import Clock, SystemClock, today_str


class Planner:
    """Owns the six sync bindings for *user_id* on *store*.

    With store=None the planner runs on in-memory defaults and nothing
    is persisted.
    """

    def __init__(
        self,
        store: DocumentStore | None,
        user_id: str | None,
        clock: Clock | None = None,
        app_id: str = DEFAULT_APP_ID,
        root: Path | None = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.root = root
        self.user_id = user_id
        self.collections = Collections(store, app_id, today=today_str(self.clock))
        self.collections.activate(user_id)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        root: Path | None = None,
        user_id: str | None = None,
        store: DocumentStore | None = None,
    ) -> Planner:
        if store is None:
            store = open_store(settings, root)
        return cls(
            store,
            user_id or settings.user_id,
            clock=settings.clock(),
            app_id=settings.app_id,
            root=root,
        )

    @property
    def ready(self) -> bool:
        return self.collections.all_initialized

    def today(self) -> str:
        return today_str(self.clock)

    # ── Typed views of the collections ───────────────────────

    @property
    def vision(self) -> Vision:
        return Vision.from_dict(self.collections.vision.value)

    @property
    def categories(self) -> dict[str, list[str]]:
        return copy.deepcopy(self.collections.categories.value or {})

    @property
    def goals(self) -> list[Goal]:
        return records(Goal, self.collections.goals.value)

    @property
    def weekly_focus(self) -> WeeklyFocus:
        return WeeklyFocus.from_dict(self.collections.weekly_focus.value)

    @property
    def tasks(self) -> list[Task]:
        return records(Task, self.collections.tasks.value)

    @property
    def reflections(self) -> list[Reflection]:
        return records(Reflection, self.collections.reflections.value)

    # ── Operations ───────────────────────────────────────────

    def add_task(self, task_data: dict[str, Any], day: str | None = None) -> tuple[Task, list[str]]:
        """Create a task on *day* (default: the form's date, else today).

        A sub-category the main category does not list yet is added to it.
        """
        form = dict(task_data)
        form["date"] = day or form.get("date") or self.today()
        categories = self.categories
        tasks = self.tasks
        task, errors = create_task(tasks, categories, form, self.clock)
        if errors:
            return task, errors

        grown, added = add_subcategory(categories, task.category, task.sub_category)
        if added:
            self.collections.categories.set(grown)
        self.collections.tasks.set([t.to_dict() for t in tasks])
        self._hook("on_task_added", {"task": task.to_dict()})
        return task, []

    def toggle_task(self, task_id: str) -> Task | None:
        tasks = self.tasks
        task = toggle_task_status(tasks, task_id)
        if task is None:
            return None
        self.collections.tasks.set([t.to_dict() for t in tasks])
        if task.done:
            self._hook("on_task_complete", {"task": task.to_dict()})
        return task

    def add_goal(self, goal_data: dict[str, Any]) -> tuple[Goal, list[str]]:
        goals = self.goals
        goal, errors = create_goal(goals, goal_data, self.clock)
        if errors:
            return goal, errors
        self.collections.goals.set([g.to_dict() for g in goals])
        return goal, []

    def edit_vision(self, **fields: str) -> Vision:
        vision = update_vision(self.vision, **fields)
        self.collections.vision.set(vision.to_dict())
        return vision

    def set_theme(self, index: int, text: str) -> Vision:
        vision = set_theme(self.vision, index, text)
        self.collections.vision.set(vision.to_dict())
        return vision

    def set_weekly_focus(self, text: str, week_of: str | None = None) -> WeeklyFocus:
        focus = update_weekly_focus(self.weekly_focus, text, week_of)
        self.collections.weekly_focus.set(focus.to_dict())
        return focus

    def close_day(
        self,
        form: dict[str, Any],
        selections: dict[str, bool] | None = None,
        day: str | None = None,
    ) -> dict[str, Any]:
        return close_day(
            self.collections,
            day or self.today(),
            form,
            self.clock,
            selections=selections,
            root=self.root,
        )

    # ── Views ────────────────────────────────────────────────

    def daily(self, day: str | None = None) -> dict[str, Any]:
        day = day or self.today()
        viewed = viewed_tasks(self.tasks, day)
        reflection = reflection_for_date(self.reflections, day)
        return {
            "date": day,
            "today": self.today(),
            "tasks": [t.to_dict() for t in viewed],
            "byCategory": {
                cat: [t.to_dict() for t in group]
                for cat, group in tasks_by_category(viewed, self.categories).items()
            },
            "overload": overload_stats(viewed).to_dict(),
            "unfinished": [t.to_dict() for t in unfinished_tasks(viewed, day)],
            "reminders": reminders(self.clock, day),
            "reflection": reflection.to_dict() if reflection else None,
            "weeklyFocus": self.weekly_focus.to_dict(),
        }

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(self.tasks, self.reflections, self.categories, self.today())

    def close(self) -> None:
        self.collections.close()

    def _hook(self, hook_point: str, context: dict[str, Any]) -> None:
        if self.root is not None:
            run_hooks(hook_point, context, self.root)
