"""Vision statement and weekly focus edits."""

from __future__ import annotations

import dataclasses

from visionflow.models import THEME_COUNT, Vision, WeeklyFocus

EDITABLE_FIELDS = {"life", "annual", "core_values"}


def update_vision(vision: Vision, **fields: str) -> Vision:
    """Return a copy of *vision* with the given text fields replaced."""
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown vision field(s): {', '.join(sorted(unknown))}")
    return dataclasses.replace(vision, themes=list(vision.themes), **{k: str(v) for k, v in fields.items()})


def set_theme(vision: Vision, index: int, text: str) -> Vision:
    if not 0 <= index < THEME_COUNT:
        raise IndexError(f"Theme index must be 0-{THEME_COUNT - 1}, got {index}")
    themes = list(vision.themes)
    themes[index] = text
    return dataclasses.replace(vision, themes=themes)


def update_weekly_focus(focus: WeeklyFocus, text: str, week_of: str | None = None) -> WeeklyFocus:
    """Overwrite the weekly focus text; the week anchor is kept unless given."""
    return WeeklyFocus(text=text, week_of=week_of if week_of is not None else focus.week_of)
