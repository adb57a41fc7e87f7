"""Tests for visionflow/analytics.py — overload, distributions, mood trend."""

from visionflow.analytics import (
    dashboard_summary,
    mood_trend,
    overload_stats,
    subcategory_allocation,
    weekly_time_distribution,
)
from visionflow.categories import DEFAULT_CATEGORIES
from visionflow.models import Reflection, Task

TODAY = "2024-03-31"


def _task(date=TODAY, category="Work", sub="", minutes=30):
    return Task(id=f"{date}-{category}-{sub}-{minutes}", date=date, category=category,
                sub_category=sub, est_time=minutes)


# ── Overload ──────────────────────────────────────────────────


def test_overload_by_minutes():
    assert overload_stats([_task(minutes=240), _task(minutes=240)]).is_overloaded is False
    stats = overload_stats([_task(minutes=240), _task(minutes=241)])
    assert stats.is_overloaded is True
    assert stats.total_minutes == 481
    assert stats.total_hours == 8.0


def test_overload_by_count():
    assert overload_stats([_task(minutes=1)] * 6).is_overloaded is False
    stats = overload_stats([_task(minutes=1)] * 7)
    assert stats.is_overloaded is True
    assert stats.to_dict() == {"totalMins": 7, "totalHours": 0.1, "totalTasks": 7, "isOverloaded": True}


def test_overload_empty_day():
    stats = overload_stats([])
    assert stats.total_minutes == 0
    assert stats.is_overloaded is False


# ── Weekly distribution ───────────────────────────────────────


def test_weekly_distribution_window_and_buckets():
    tasks = [
        _task(date="2024-03-24", category="Work", minutes=60),
        _task(date="2024-03-23", category="Work", minutes=500),
        _task(date="2024-04-02", category="Wellness", minutes=30),
        _task(category="", minutes=30),
        _task(date="garbage", minutes=999),
    ]
    shares, total = weekly_time_distribution(tasks, DEFAULT_CATEGORIES, TODAY)
    by_cat = {s.category: s for s in shares}

    assert total == 120
    assert [s.category for s in shares] == ["Work", "Wellness", "Learning", "Household", "Other"]
    assert by_cat["Work"].minutes == 60
    assert by_cat["Work"].percent == 50.0
    assert by_cat["Wellness"].percent == 25.0
    assert by_cat["Other"].minutes == 30
    assert by_cat["Learning"].minutes == 0
    assert by_cat["Learning"].percent == 0.0


def test_weekly_distribution_empty():
    shares, total = weekly_time_distribution([], DEFAULT_CATEGORIES, TODAY)
    assert total == 0
    assert all(s.minutes == 0 and s.percent == 0.0 for s in shares)
    assert len(shares) == len(DEFAULT_CATEGORIES)


def test_weekly_distribution_one_decimal():
    tasks = [_task(category="Work", minutes=1), _task(category="Learning", minutes=2)]
    shares, _ = weekly_time_distribution(tasks, DEFAULT_CATEGORIES, TODAY)
    by_cat = {s.category: s.percent for s in shares}
    assert by_cat["Work"] == 33.3
    assert by_cat["Learning"] == 66.7


# ── Sub-verticals ─────────────────────────────────────────────


def test_subcategory_keys_and_half_up_rounding():
    tasks = [
        _task(category="Work", sub="Admin", minutes=7),
        _task(category="Learning", sub="", minutes=1),
    ]
    top = subcategory_allocation(tasks)
    assert [(s.category, s.minutes, s.percent) for s in top] == [
        ("Work - Admin", 7, 88),
        ("Learning", 1, 13),
    ]


def test_subcategory_uncategorized_and_all_time():
    tasks = [_task(date="2020-01-01", category="", sub="", minutes=10)]
    assert subcategory_allocation(tasks)[0].category == "Uncategorized"


def test_subcategory_top_five():
    tasks = [_task(sub=f"S{i}", minutes=10 + i) for i in range(7)]
    top = subcategory_allocation(tasks)
    assert len(top) == 5
    assert top[0].category == "Work - S6"
    assert [s.minutes for s in top] == sorted((s.minutes for s in top), reverse=True)


def test_subcategory_empty():
    assert subcategory_allocation([]) == []


# ── Mood & dashboard ──────────────────────────────────────────


def _refl(day, mood=5, completion=50, overloaded=False):
    return Reflection(id=str(day), date=f"2024-03-{day:02d}", mood=mood, completion=completion,
                      overloaded=overloaded)


def test_mood_trend_padding():
    assert mood_trend([]) == [5] * 7
    assert mood_trend([_refl(3, mood=9), _refl(1, mood=2)]) == [5, 5, 5, 5, 5, 2, 9]


def test_mood_trend_last_seven():
    refls = [_refl(d, mood=d) for d in range(1, 10)]
    assert mood_trend(refls) == [3, 4, 5, 6, 7, 8, 9]


def test_dashboard_summary():
    refls = [_refl(30, completion=80, overloaded=True), _refl(31, completion=85)]
    tasks = [_task(category="Work", sub="Admin", minutes=60)]
    summary = dashboard_summary(tasks, refls, DEFAULT_CATEGORIES, TODAY)

    assert summary.avg_completion == 83
    assert summary.overload_count == 1
    assert summary.reflections_counted == 2
    assert summary.weekly_total_minutes == 60
    assert summary.top_subcategories[0].category == "Work - Admin"
    d = summary.to_dict()
    assert d["moodTrend"] == [5] * 7
    assert d["weeklyDistribution"][0] == {"category": "Work", "minutes": 60, "percent": 100.0}


def test_dashboard_summary_no_reflections():
    summary = dashboard_summary([], [], DEFAULT_CATEGORIES, TODAY)
    assert summary.avg_completion == 0
    assert summary.overload_count == 0
