"""Sync bindings: a local copy of one collection mirrored against one document.

Consistency contract:
- set() applies locally first, then writes the whole value with a
  replace-merge. The local value is never rolled back.
- A failed write leaves ``diverged`` true until the next successful write
  or incoming snapshot. Nothing is retried.
- Every snapshot, including the echo of our own write, replaces the local
  value. Last writer wins for the whole value.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

from visionflow.categories import DEFAULT_CATEGORIES
from visionflow.config import DEFAULT_APP_ID
from visionflow.models import Vision, WeeklyFocus
from visionflow.store import DocumentRef, DocumentStore, Snapshot, StoreError

logger = logging.getLogger(__name__)

VISION = "vision"
CATEGORIES = "categories_v2"
GOALS = "goals"
WEEKLY_FOCUS = "weeklyFocus"
TASKS = "tasks"
REFLECTIONS = "reflections"

COLLECTION_NAMES = (VISION, CATEGORIES, GOALS, WEEKLY_FOCUS, TASKS, REFLECTIONS)


def default_documents(today: str = "") -> dict[str, Any]:
    """Initial value of every collection for a brand-new user."""
    return {
        VISION: Vision().to_dict(),
        CATEGORIES: copy.deepcopy(DEFAULT_CATEGORIES),
        GOALS: [],
        WEEKLY_FOCUS: WeeklyFocus(text="", week_of=today).to_dict(),
        TASKS: [],
        REFLECTIONS: [],
    }


class SyncBinding:
    def __init__(
        self,
        store: DocumentStore | None,
        name: str,
        default: Any,
        app_id: str = DEFAULT_APP_ID,
    ) -> None:
        self.store = store
        self.name = name
        self.app_id = app_id
        self.default = copy.deepcopy(default)
        self.user_id: str | None = None
        self.initialized = False
        self.diverged = False
        self.last_error: Exception | None = None
        self._value: Any = copy.deepcopy(default)
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def value(self) -> Any:
        return self._value

    @property
    def ref(self) -> DocumentRef | None:
        if self.user_id is None:
            return None
        return DocumentRef(self.app_id, self.user_id, self.name)

    def activate(self, user_id: str | None) -> None:
        """Start mirroring for *user_id*. Does nothing until a user is known."""
        if not user_id:
            return
        if user_id == self.user_id and (self._unsubscribe is not None or self.store is None):
            return
        self.close()
        self.user_id = user_id
        if self.store is None:
            self.initialized = True
            return
        try:
            self._unsubscribe = self.store.subscribe(self.ref, self._on_snapshot, self._on_error)
        except StoreError as e:
            self._on_error(e)

    def set(self, new_value: Any) -> Any:
        """Replace the value, or derive it from the previous one if callable."""
        to_save = new_value(self._value) if callable(new_value) else new_value
        self._value = to_save
        if self.store is not None and self.user_id is not None:
            self._push(to_save)
        return to_save

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _push(self, value: Any) -> None:
        try:
            self.store.set(self.ref, {"value": value}, merge=True)
        except StoreError as e:
            logger.error("Write failed for %s: %s", self.ref, e)
            self.last_error = e
            self.diverged = True
        else:
            self.diverged = False

    def _on_snapshot(self, snap: Snapshot) -> None:
        self.diverged = False
        if snap.exists and snap.value is not None:
            self._value = snap.value
        else:
            # first time setup for this document
            self._value = copy.deepcopy(self.default)
            self._push(self._value)
        self.initialized = True

    def _on_error(self, err: Exception) -> None:
        logger.error("Snapshot error for %s: %s", self.ref, err)
        self.last_error = err
        if not self.initialized:
            self._value = copy.deepcopy(self.default)
        self.initialized = True


class Collections:
    """The six bindings that make up one user's planner."""

    def __init__(
        self,
        store: DocumentStore | None,
        app_id: str = DEFAULT_APP_ID,
        today: str = "",
    ) -> None:
        defaults = default_documents(today)
        self.vision = SyncBinding(store, VISION, defaults[VISION], app_id)
        self.categories = SyncBinding(store, CATEGORIES, defaults[CATEGORIES], app_id)
        self.goals = SyncBinding(store, GOALS, defaults[GOALS], app_id)
        self.weekly_focus = SyncBinding(store, WEEKLY_FOCUS, defaults[WEEKLY_FOCUS], app_id)
        self.tasks = SyncBinding(store, TASKS, defaults[TASKS], app_id)
        self.reflections = SyncBinding(store, REFLECTIONS, defaults[REFLECTIONS], app_id)

    def bindings(self) -> dict[str, SyncBinding]:
        return {
            VISION: self.vision,
            CATEGORIES: self.categories,
            GOALS: self.goals,
            WEEKLY_FOCUS: self.weekly_focus,
            TASKS: self.tasks,
            REFLECTIONS: self.reflections,
        }

    def activate(self, user_id: str | None) -> None:
        for binding in self.bindings().values():
            binding.activate(user_id)

    @property
    def all_initialized(self) -> bool:
        return all(b.initialized for b in self.bindings().values())

    @property
    def diverged(self) -> list[str]:
        return [name for name, b in self.bindings().items() if b.diverged]

    def close(self) -> None:
        for binding in self.bindings().values():
            binding.close()
