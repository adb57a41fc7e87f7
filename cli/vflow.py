#!/usr/bin/env python3
"""VisionFlow TUI — the daily view in a terminal, powered by Textual."""

from __future__ import annotations

import logging
import sys
from datetime import date, timedelta

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from visionflow import FileDocumentStore, Planner, init_settings, workspace_root

POLL_SECONDS = 2.0


def parse_task_line(line: str) -> dict[str, str]:
    """'Write report | Work/Admin | 45' -> task form fields."""
    parts = [p.strip() for p in line.split("|")]
    form = {"title": parts[0] if parts else ""}
    if len(parts) > 1:
        main, _, sub = parts[1].partition("/")
        form["category"] = main.strip()
        form["subCategory"] = sub.strip()
    if len(parts) > 2:
        form["estTime"] = parts[2]
    return form


def parse_reflection_line(line: str) -> dict[str, object]:
    """'80 7 good day' -> completion 80, mood 7, notes 'good day'.

    A trailing '!' on the mood marks the day as overloaded ('80 4! long day').
    """
    parts = line.split(maxsplit=2)
    form: dict[str, object] = {"notes": parts[2] if len(parts) > 2 else ""}
    if parts:
        form["completion"] = parts[0]
    if len(parts) > 1:
        form["overloaded"] = parts[1].endswith("!")
        form["mood"] = parts[1].rstrip("!")
    return form


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#banner {
    height: auto;
    padding: 0 1;
    color: $warning;
    text-style: bold;
}

#focus-line {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#tasks-table {
    height: 1fr;
}

#task-input, #reflection-input {
    margin: 0 1;
}

#reflection-input {
    display: none;
}

#dashboard {
    display: none;
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}
"""


class VisionFlowApp(App):
    """VisionFlow: daily tasks, overload warning and close-day."""

    TITLE = "VisionFlow"
    CSS = CSS
    AUTO_FOCUS = "#tasks-table"

    BINDINGS = [
        Binding("space", "toggle_task", "Done/Undo"),
        Binding("left_square_bracket", "prev_day", "Prev day"),
        Binding("right_square_bracket", "next_day", "Next day"),
        Binding("t", "go_today", "Today"),
        Binding("a", "focus_add", "Add task"),
        Binding("c", "close_day", "Close day"),
        Binding("d", "toggle_dashboard", "Dashboard"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, planner: Planner) -> None:
        super().__init__()
        self.planner = planner
        self.selected_date = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Static(id="banner"),
            Static(id="focus-line"),
            Label("Tasks", classes="section-title", id="tasks-title"),
            DataTable(id="tasks-table", cursor_type="row"),
            Input(placeholder="Title | Category/Sub | minutes", id="task-input"),
            Input(placeholder="completion% mood[!] notes, e.g. 80 7 solid day", id="reflection-input"),
            Static(id="dashboard"),
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#tasks-table", DataTable)
        table.add_columns("Status", "Title", "Category", "Sub", "Min")
        self._set_date(self.planner.today())
        if isinstance(self.planner.collections.tasks.store, FileDocumentStore):
            self.set_interval(POLL_SECONDS, self._poll_store)

    def _set_date(self, day: str) -> None:
        self.selected_date = day
        self._refresh_view()

    def _poll_store(self) -> None:
        store = self.planner.collections.tasks.store
        if isinstance(store, FileDocumentStore) and store.poll():
            self._refresh_view()

    def _refresh_view(self) -> None:
        daily = self.planner.daily(self.selected_date)
        overload = daily["overload"]

        self.sub_title = daily["date"] + ("" if daily["date"] == daily["today"] else "  (not today)")

        banners = []
        if daily["reminders"]["morningReview"]:
            banners.append("Morning review time.")
        if daily["reminders"]["eveningReflection"]:
            banners.append("Evening reflection time, press c to close the day.")
        if overload["isOverloaded"]:
            banners.append(
                f"You may be overloaded: {overload['totalHours']} hours across "
                f"{overload['totalTasks']} tasks."
            )
        diverged = self.planner.collections.diverged
        if diverged:
            banners.append(f"Not saved: {', '.join(diverged)}")
        self.query_one("#banner", Static).update("\n".join(banners))

        focus = daily["weeklyFocus"]["text"] or "(no weekly focus set)"
        self.query_one("#focus-line", Static).update(f"This week: {focus}")
        self.query_one("#tasks-title", Label).update(
            f"Tasks: {overload['totalTasks']} tasks, {overload['totalHours']}h"
        )

        table = self.query_one("#tasks-table", DataTable)
        table.clear()
        for t in daily["tasks"]:
            table.add_row(
                "✔" if t["status"] == "Done" else "·",
                t["title"],
                t["category"],
                t["subCategory"],
                str(t["estTime"]),
                key=t["id"],
            )

        dashboard = self.query_one("#dashboard", Static)
        if dashboard.display:
            dashboard.update(self._dashboard_text())

    def _dashboard_text(self) -> str:
        summary = self.planner.dashboard()
        lines = [
            f"Avg completion (last {summary.reflections_counted}): {summary.avg_completion}%",
            f"Overloaded days: {summary.overload_count}",
            "Mood: " + " ".join(str(m) for m in summary.mood_trend),
            "",
            f"This week ({summary.weekly_total_minutes} min):",
        ]
        for share in summary.weekly_distribution:
            if share.minutes > 0:
                lines.append(f"  {share.category:<12} {share.minutes:>5}m  {share.percent:>5}%")
        lines += ["", "Top sub-verticals:"]
        for share in summary.top_subcategories:
            lines.append(f"  {share.category:<30} {share.minutes:>5}m  {share.percent:>3}%")
        return "\n".join(lines)

    # ── Actions ────────────────────────────────────────────────

    def action_toggle_task(self) -> None:
        table = self.query_one("#tasks-table", DataTable)
        if table.row_count == 0:
            return
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        self.planner.toggle_task(str(row_key.value))
        self._refresh_view()

    def _shift_day(self, days: int) -> None:
        self._set_date((date.fromisoformat(self.selected_date) + timedelta(days=days)).isoformat())

    def action_prev_day(self) -> None:
        self._shift_day(-1)

    def action_next_day(self) -> None:
        self._shift_day(1)

    def action_go_today(self) -> None:
        self._set_date(self.planner.today())

    def action_focus_add(self) -> None:
        self.query_one("#task-input", Input).focus()

    def action_close_day(self) -> None:
        field = self.query_one("#reflection-input", Input)
        field.display = True
        field.focus()

    def action_toggle_dashboard(self) -> None:
        dashboard = self.query_one("#dashboard", Static)
        dashboard.display = not dashboard.display
        if dashboard.display:
            dashboard.update(self._dashboard_text())

    def action_blur_focus(self) -> None:
        self.query_one("#reflection-input", Input).display = False
        self.query_one("#tasks-table", DataTable).focus()

    # ── Input handlers ─────────────────────────────────────────

    @on(Input.Submitted, "#task-input")
    def _on_task_submitted(self, event: Input.Submitted) -> None:
        form = parse_task_line(event.value)
        form.setdefault("category", next(iter(self.planner.categories), ""))
        _task, errors = self.planner.add_task(form, day=self.selected_date)
        if errors:
            self.notify("; ".join(errors), title="Task not added", severity="warning")
            return
        event.input.value = ""
        self._refresh_view()

    @on(Input.Submitted, "#reflection-input")
    def _on_reflection_submitted(self, event: Input.Submitted) -> None:
        result = self.planner.close_day(parse_reflection_line(event.value), day=self.selected_date)
        if not result["ok"]:
            self.notify("; ".join(result["errors"]), title="Reflection not saved", severity="warning")
            return
        event.input.value = ""
        event.input.display = False
        self.notify(result["message"], title="Day closed", severity="information")
        self.query_one("#tasks-table", DataTable).focus()
        self._refresh_view()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    planner = Planner.from_settings(init_settings(root), root=root)
    if not planner.ready:
        print("Could not load planner data; see log output above.")
        sys.exit(1)

    app = VisionFlowApp(planner)
    try:
        app.run()
    finally:
        planner.close()


if __name__ == "__main__":
    main()
