from __future__ import annotations

import logging
import os
import secrets
import sys
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from visionflow import (
    DocumentStore,
    FileDocumentStore,
    Planner,
    load_settings,
    open_store,
    workspace_root,
)
from visionflow.workspace import is_date_str

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("visionflow.ui")


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="VisionFlow UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("VISIONFLOW_USERNAME", "")
    expected_password = os.environ.get("VISIONFLOW_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Per-user planners ─────────────────────────────────────────

_store_cache: dict[str, DocumentStore | None] = {}
_planners: dict[str, Planner] = {}


def _shared_store() -> DocumentStore | None:
    if "store" not in _store_cache:
        root = workspace_root()
        _store_cache["store"] = open_store(load_settings(root), root)
    return _store_cache["store"]


def get_planner(username: str = Depends(get_current_user)) -> Planner:
    store = _shared_store()
    if isinstance(store, FileDocumentStore):
        # pick up writes made by other sessions (e.g. the terminal UI)
        store.poll()

    planner = _planners.get(username)
    if planner is None:
        root = workspace_root()
        planner = Planner.from_settings(load_settings(root), root=root, user_id=username, store=store)
        _planners[username] = planner
        logger.info("Opened planner for %s", username)

    if not planner.ready:
        logger.warning("Planner for %s is not ready yet", username)
        raise HTTPException(status_code=503, detail="Planner data is still loading")
    return planner


def _check_date(day: str | None) -> str | None:
    if day is not None and not is_date_str(day):
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")
    return day


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(
    day: str | None = Query(default=None, alias="date"),
    planner: Planner = Depends(get_planner),
) -> HTMLResponse:
    daily = planner.daily(_check_date(day))
    overload = daily["overload"]

    banners = []
    if daily["reminders"]["morningReview"]:
        banners.append('<div class="banner">Morning review: check today\'s plan against your weekly focus.</div>')
    if daily["reminders"]["eveningReflection"]:
        banners.append('<div class="banner">Evening reflection: close the day.</div>')
    if overload["isOverloaded"]:
        banners.append(
            f'<div class="banner warn">You may be overloaded today. You have scheduled '
            f'<b>{overload["totalHours"]} hours</b> ({overload["totalTasks"]} tasks). '
            f'Consider deferring some items.</div>'
        )

    columns = []
    for cat, tasks in daily["byCategory"].items():
        rows = "".join(
            f'<li class="{"done" if t["status"] == "Done" else ""}">'
            f'{_escape(t["title"])} <span class="muted">{_escape(t["subCategory"])} · {t["estTime"]}m</span></li>'
            for t in tasks
        ) or '<li class="muted">No tasks</li>'
        columns.append(f"<section><h3>{_escape(cat)}</h3><ul>{rows}</ul></section>")

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>VisionFlow</title>
</head>
<body>
  <header>
    <h1>VisionFlow</h1>
    <div class="muted">{_escape(daily["date"])}</div>
  </header>
  {''.join(banners)}
  <p><b>Weekly focus:</b> {_escape(daily["weeklyFocus"]["text"] or "(not set)")}</p>
  <div class="columns">{''.join(columns)}</div>
</body>
</html>"""
    return HTMLResponse(html)


# ── Vision & weekly focus ─────────────────────────────────────

@app.get("/api/vision")
def api_get_vision(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return planner.vision.to_dict()


@app.put("/api/vision")
def api_update_vision(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    """Edit life / annual / coreValues text."""
    wire_to_field = {"life": "life", "annual": "annual", "coreValues": "core_values"}
    unknown = set(payload) - set(wire_to_field)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown vision field(s): {', '.join(sorted(unknown))}")
    vision = planner.edit_vision(**{wire_to_field[k]: str(v) for k, v in payload.items()})
    return {"ok": True, "vision": vision.to_dict()}


@app.put("/api/vision/themes/{index}")
def api_set_theme(index: int, payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    try:
        vision = planner.set_theme(index, str(payload.get("text", "")))
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "vision": vision.to_dict()}


@app.get("/api/weekly_focus")
def api_get_weekly_focus(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return planner.weekly_focus.to_dict()


@app.put("/api/weekly_focus")
def api_set_weekly_focus(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    week_of = _check_date(payload.get("weekOf"))
    focus = planner.set_weekly_focus(str(payload.get("text", "")), week_of)
    return {"ok": True, "weeklyFocus": focus.to_dict()}


# ── Categories & goals ────────────────────────────────────────

@app.get("/api/categories")
def api_categories(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return {"categories": planner.categories}


@app.get("/api/goals")
def api_list_goals(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return {"goals": [g.to_dict() for g in planner.goals]}


@app.post("/api/goals")
def api_create_goal(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    goal, errors = planner.add_goal(payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "goal": goal.to_dict()}


# ── Tasks ─────────────────────────────────────────────────────

@app.get("/api/tasks")
def api_list_tasks(
    day: str | None = Query(default=None, alias="date"),
    planner: Planner = Depends(get_planner),
) -> dict[str, Any]:
    """Tasks of one day (default today)."""
    daily = planner.daily(_check_date(day))
    return {"date": daily["date"], "tasks": daily["tasks"]}


@app.post("/api/tasks")
def api_create_task(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    task, errors = planner.add_task(payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "task": task.to_dict()}


@app.post("/api/tasks/{task_id}/toggle")
def api_toggle_task(task_id: str, planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    task = planner.toggle_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"ok": True, "task": task.to_dict()}


# ── Daily, reflection & dashboard ─────────────────────────────

@app.get("/api/daily")
def api_daily(
    day: str | None = Query(default=None, alias="date"),
    planner: Planner = Depends(get_planner),
) -> dict[str, Any]:
    return planner.daily(_check_date(day))


@app.get("/api/reflections")
def api_list_reflections(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    reflections = sorted(planner.reflections, key=lambda r: r.date, reverse=True)
    return {"reflections": [r.to_dict() for r in reflections]}


@app.post("/api/reflections")
def api_close_day(payload: dict[str, Any] = Body(...), planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    """Save the reflection for a day and roll over the selected tasks.

    Body: {"date"?, "completion", "mood", "overloaded"?, "notes"?,
    "rollover"?: {task_id: bool}}. Without "rollover" all unfinished
    tasks of the day move to the next day.
    """
    day = _check_date(payload.get("date"))
    selections = payload.get("rollover")
    if selections is not None and (
        not isinstance(selections, dict) or not all(isinstance(v, bool) for v in selections.values())
    ):
        raise HTTPException(status_code=400, detail="rollover must map task ids to booleans")
    result = planner.close_day(
        payload,
        selections={str(k): v for k, v in selections.items()} if selections is not None else None,
        day=day,
    )
    if not result["ok"]:
        raise HTTPException(status_code=400, detail="; ".join(result["errors"]))
    return result


@app.get("/api/dashboard")
def api_dashboard(planner: Planner = Depends(get_planner)) -> dict[str, Any]:
    return planner.dashboard().to_dict()
