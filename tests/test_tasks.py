"""Tests for visionflow/tasks.py — creation, validation, status changes."""

from visionflow.categories import DEFAULT_CATEGORIES
from visionflow.models import STATUS_DONE, STATUS_NOT_STARTED, Task
from visionflow.tasks import (
    create_task,
    find_task,
    new_id,
    toggle_task_status,
    validate_task,
    viewed_tasks,
)


def _form(**overrides):
    form = {
        "title": "Write report",
        "category": "Work",
        "subCategory": "Social Media",
        "estTime": 45,
        "date": "2024-03-31",
    }
    form.update(overrides)
    return form


def test_validate_task_valid():
    assert validate_task(_form(), DEFAULT_CATEGORIES) == []


def test_validate_task_missing_title():
    errors = validate_task(_form(title="   "), DEFAULT_CATEGORIES)
    assert any("title" in e for e in errors)


def test_validate_task_missing_category():
    errors = validate_task(_form(category=""), DEFAULT_CATEGORIES)
    assert any("category" in e for e in errors)


def test_validate_task_unknown_category():
    errors = validate_task(_form(category="Hobbies"), DEFAULT_CATEGORIES)
    assert any("Unknown category" in e for e in errors)


def test_validate_task_est_time():
    assert validate_task(_form(estTime="30"), DEFAULT_CATEGORIES) == []
    for bad in (0, -5, "abc", None, True, 1.5):
        errors = validate_task(_form(estTime=bad), DEFAULT_CATEGORIES)
        assert any("estTime" in e for e in errors), bad


def test_validate_task_bad_date():
    errors = validate_task(_form(date="2024-02-30"), DEFAULT_CATEGORIES)
    assert any("date" in e for e in errors)


def test_validate_task_bad_status():
    errors = validate_task(_form(status="Blocked"), DEFAULT_CATEGORIES)
    assert any("status" in e for e in errors)


def test_new_id_is_unique(clock):
    first = new_id(clock, [])
    second = new_id(clock, [first])
    assert first == str(int(clock.now().timestamp() * 1000))
    assert int(second) == int(first) + 1


def test_create_task(clock):
    tasks = []
    task, errors = create_task(tasks, DEFAULT_CATEGORIES, _form(estTime="30"), clock)
    assert errors == []
    assert task.est_time == 30
    assert task.status == STATUS_NOT_STARTED
    assert task.sub_category == "Social Media"
    assert tasks == [task]


def test_create_task_defaults_subcategory(clock):
    tasks = []
    task, _ = create_task(tasks, DEFAULT_CATEGORIES, _form(subCategory="  "), clock)
    assert task.sub_category == "General"


def test_create_task_invalid_leaves_list_alone(clock):
    tasks = []
    _, errors = create_task(tasks, DEFAULT_CATEGORIES, _form(title=""), clock)
    assert errors
    assert tasks == []


def test_create_tasks_same_instant_get_distinct_ids(clock):
    tasks = []
    a, _ = create_task(tasks, DEFAULT_CATEGORIES, _form(), clock)
    b, _ = create_task(tasks, DEFAULT_CATEGORIES, _form(), clock)
    assert a.id != b.id


def test_find_task():
    tasks = [Task(id="a", title="A"), Task(id="b", title="B")]
    assert find_task(tasks, "a").title == "A"
    assert find_task(tasks, "c") is None


def test_toggle_task_status():
    tasks = [Task(id="a")]
    assert toggle_task_status(tasks, "a").status == STATUS_DONE
    assert toggle_task_status(tasks, "a").status == STATUS_NOT_STARTED
    assert toggle_task_status(tasks, "missing") is None


def test_viewed_tasks_keeps_order():
    tasks = [
        Task(id="1", date="2024-03-31"),
        Task(id="2", date="2024-04-01"),
        Task(id="3", date="2024-03-31"),
    ]
    assert [t.id for t in viewed_tasks(tasks, "2024-03-31")] == ["1", "3"]
    assert viewed_tasks(tasks, "2024-01-01") == []
