"""Document store boundary for VisionFlow.

One document per (app id, user, collection name), addressed like
``artifacts/<app_id>/users/<user_id>/appData/<name>``. A store supports
get, set (optionally replace-merge) and subscribe. Subscribing delivers
the current snapshot right away and then one snapshot per write,
including writes made by the subscriber itself.
"""

from __future__ import annotations

import copy
import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from visionflow.config import STORE_BACKENDS, Settings
from visionflow.fileio import read_json, write_json_atomic
from visionflow.workspace import documents_root

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A document could not be read or written."""


@dataclass(frozen=True)
class DocumentRef:
    app_id: str
    user_id: str
    name: str

    @property
    def path(self) -> tuple[str, ...]:
        return ("artifacts", self.app_id, "users", self.user_id, "appData", self.name)

    def __str__(self) -> str:
        return "/".join(self.path)


@dataclass
class Snapshot:
    ref: DocumentRef
    data: dict[str, Any] | None = None

    @property
    def exists(self) -> bool:
        return self.data is not None

    @property
    def value(self) -> Any:
        return self.data.get("value") if self.data is not None else None


OnNext = Callable[[Snapshot], None]
OnError = Callable[[Exception], None]


class _Subscription:
    def __init__(self, on_next: OnNext, on_error: OnError | None) -> None:
        self.on_next = on_next
        self.on_error = on_error


class DocumentStore:
    """Base class: subscription fan-out on top of _read/_write."""

    def __init__(self) -> None:
        self._subscriptions: dict[DocumentRef, list[_Subscription]] = defaultdict(list)

    def _read(self, ref: DocumentRef) -> dict[str, Any] | None:
        raise NotImplementedError

    def _write(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        raise NotImplementedError

    def get(self, ref: DocumentRef) -> Snapshot:
        return Snapshot(ref, copy.deepcopy(self._read(ref)))

    def set(self, ref: DocumentRef, data: dict[str, Any], merge: bool = False) -> None:
        """Write a document. With merge=True, top-level fields of *data*
        replace the same fields of the existing document and the rest is kept.
        """
        payload = copy.deepcopy(data)
        if merge:
            merged = dict(self._read(ref) or {})
            merged.update(payload)
            payload = merged
        self._write(ref, payload)
        self._notify(ref)

    def subscribe(
        self,
        ref: DocumentRef,
        on_next: OnNext,
        on_error: OnError | None = None,
    ) -> Callable[[], None]:
        """Register for snapshots of *ref*. Returns an unsubscribe callable."""
        sub = _Subscription(on_next, on_error)
        self._subscriptions[ref].append(sub)
        self._deliver(ref, sub)

        def unsubscribe() -> None:
            subs = self._subscriptions.get(ref, [])
            for i, s in enumerate(subs):
                if s is sub:
                    subs.pop(i)
                    break

        return unsubscribe

    def subscriber_count(self, ref: DocumentRef) -> int:
        return len(self._subscriptions.get(ref, []))

    def _notify(self, ref: DocumentRef) -> None:
        for sub in list(self._subscriptions.get(ref, [])):
            self._deliver(ref, sub)

    def _deliver(self, ref: DocumentRef, sub: _Subscription) -> None:
        try:
            snap = self.get(ref)
        except StoreError as e:
            if sub.on_error is not None:
                sub.on_error(e)
            else:
                logger.error("Snapshot error for %s: %s", ref, e)
            return
        sub.on_next(snap)


class MemoryDocumentStore(DocumentStore):
    """In-process store. Failure switches let tests open the consistency window."""

    def __init__(self) -> None:
        super().__init__()
        self._docs: dict[DocumentRef, dict[str, Any]] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0

    def _read(self, ref: DocumentRef) -> dict[str, Any] | None:
        if self.fail_reads:
            raise StoreError(f"read failed: {ref}")
        return self._docs.get(ref)

    def _write(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        if self.fail_writes:
            raise StoreError(f"write failed: {ref}")
        self._docs[ref] = data
        self.write_count += 1


class FileDocumentStore(DocumentStore):
    """JSON file per document under *base* (normally <workspace>/artifacts).

    Writes from other processes are picked up by poll().
    """

    def __init__(self, base: Path) -> None:
        super().__init__()
        self.base = base
        self._mtimes: dict[DocumentRef, int | None] = {}

    def path_for(self, ref: DocumentRef) -> Path:
        for part in (ref.app_id, ref.user_id, ref.name):
            if not part or "/" in part or "\\" in part or part in {".", ".."}:
                raise StoreError(f"Invalid document path segment: {part!r}")
        return self.base / ref.app_id / "users" / ref.user_id / "appData" / f"{ref.name}.json"

    def _mtime(self, path: Path) -> int | None:
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def _read(self, ref: DocumentRef) -> dict[str, Any] | None:
        path = self.path_for(ref)
        try:
            data = read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"read failed: {ref}: {e}") from e
        self._mtimes[ref] = self._mtime(path)
        return data

    def _write(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        path = self.path_for(ref)
        try:
            write_json_atomic(path, data)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"write failed: {ref}: {e}") from e
        self._mtimes[ref] = self._mtime(path)

    def poll(self) -> int:
        """Notify subscribers of documents changed on disk since last seen.

        Returns the number of documents that changed.
        """
        changed = 0
        for ref, subs in list(self._subscriptions.items()):
            if not subs:
                continue
            try:
                current = self._mtime(self.path_for(ref))
            except StoreError:
                continue
            if current != self._mtimes.get(ref):
                changed += 1
                self._notify(ref)
        return changed


def open_store(settings: Settings, root: Path | None = None) -> DocumentStore | None:
    """Build the configured store.

    Returns None when the store cannot be set up; callers then run on
    in-memory defaults for the rest of the session.
    """
    backend = settings.store
    if backend not in STORE_BACKENDS:
        logger.error(
            "Store init error: unknown backend %r (expected one of %s); running without persistence",
            backend,
            ", ".join(sorted(STORE_BACKENDS)),
        )
        return None
    if backend == "memory":
        return MemoryDocumentStore()
    base = documents_root(root)
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Store init error (%s): %s; running without persistence", base, e)
        return None
    return FileDocumentStore(base)
