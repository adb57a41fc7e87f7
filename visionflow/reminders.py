"""Time-of-day reminder windows. Evaluated at render time, never scheduled."""

from __future__ import annotations

from datetime import time

from visionflow.workspace import Clock, today_str

MORNING_REVIEW_START = time(9, 30)
MORNING_REVIEW_END = time(12, 0)
EVENING_REFLECTION_START = time(22, 0)


def is_morning_review_time(clock: Clock) -> bool:
    """09:30 up to (not including) 12:00 local."""
    now = clock.now().time()
    return MORNING_REVIEW_START <= now < MORNING_REVIEW_END


def is_evening_reflection_time(clock: Clock) -> bool:
    """22:00 local until midnight."""
    return clock.now().time() >= EVENING_REFLECTION_START


def reminders(clock: Clock, selected_date: str) -> dict[str, bool]:
    """Which reminder banners to show for the selected day."""
    return {
        "morningReview": is_morning_review_time(clock) and selected_date == today_str(clock),
        "eveningReflection": is_evening_reflection_time(clock),
    }
