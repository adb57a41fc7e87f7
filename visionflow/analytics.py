"""Derived statistics for the daily and dashboard views.

Everything here is a pure function of the current collections; nothing
is cached. Callers recompute on every render.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, timedelta

from visionflow.models import CategoryShare, DashboardSummary, OverloadStats, Reflection, Task
from visionflow.reflections import recent_reflections
from visionflow.tasks import viewed_tasks

OVERLOAD_MINUTES = 480
OVERLOAD_TASK_COUNT = 6

TRAILING_DAYS = 7
MOOD_POINTS = 7
NEUTRAL_MOOD = 5
TOP_SUBCATEGORIES = 5

UNCATEGORIZED_BUCKET = "Other"

__all__ = [
    "viewed_tasks",
    "overload_stats",
    "weekly_time_distribution",
    "subcategory_allocation",
    "mood_trend",
    "dashboard_summary",
]


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def overload_stats(tasks: list[Task]) -> OverloadStats:
    """Load of one day's tasks. Either threshold alone flags overload."""
    total = sum(t.est_time for t in tasks)
    return OverloadStats(
        total_minutes=total,
        total_hours=round(total / 60, 1),
        task_count=len(tasks),
        is_overloaded=total > OVERLOAD_MINUTES or len(tasks) > OVERLOAD_TASK_COUNT,
    )


def weekly_time_distribution(
    tasks: list[Task],
    categories: dict[str, list[str]],
    today: str,
) -> tuple[list[CategoryShare], int]:
    """Minutes per main category over tasks dated from today - 7 days on.

    Every known category gets a bucket, even when empty. Tasks with no
    category land in "Other". Returns (shares, total_minutes).
    """
    cutoff = date.fromisoformat(today) - timedelta(days=TRAILING_DAYS)
    buckets: dict[str, int] = {cat: 0 for cat in categories}
    for task in tasks:
        try:
            task_date = date.fromisoformat(task.date)
        except ValueError:
            continue
        if task_date < cutoff:
            continue
        cat = task.category or UNCATEGORIZED_BUCKET
        buckets[cat] = buckets.get(cat, 0) + task.est_time

    total = sum(buckets.values())
    denom = total or 1
    shares = [
        CategoryShare(category=cat, minutes=mins, percent=round(mins / denom * 100, 1))
        for cat, mins in buckets.items()
    ]
    return shares, total


def subcategory_allocation(tasks: list[Task], limit: int = TOP_SUBCATEGORIES) -> list[CategoryShare]:
    """All-time minutes per "category - sub-category", largest first."""
    buckets: dict[str, int] = defaultdict(int)
    for task in tasks:
        if task.sub_category:
            key = f"{task.category} - {task.sub_category}"
        else:
            key = task.category or "Uncategorized"
        buckets[key] += task.est_time

    denom = sum(buckets.values()) or 1
    ranked = sorted(buckets.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return [
        CategoryShare(category=key, minutes=mins, percent=_round_half_up(mins / denom * 100))
        for key, mins in ranked
    ]


def mood_trend(reflections: list[Reflection]) -> list[int]:
    """Moods of the last 7 reflections, oldest first, left-padded with 5."""
    moods = [r.mood for r in recent_reflections(reflections, MOOD_POINTS)]
    return [NEUTRAL_MOOD] * (MOOD_POINTS - len(moods)) + moods


def dashboard_summary(
    tasks: list[Task],
    reflections: list[Reflection],
    categories: dict[str, list[str]],
    today: str,
) -> DashboardSummary:
    recent = recent_reflections(reflections, MOOD_POINTS)
    summary = DashboardSummary()
    summary.reflections_counted = len(recent)
    if recent:
        summary.avg_completion = _round_half_up(sum(r.completion for r in recent) / len(recent))
    summary.overload_count = sum(1 for r in recent if r.overloaded)
    summary.mood_trend = mood_trend(reflections)
    summary.weekly_distribution, summary.weekly_total_minutes = weekly_time_distribution(
        tasks, categories, today
    )
    summary.top_subcategories = subcategory_allocation(tasks)
    return summary
