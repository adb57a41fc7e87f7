"""Shared test fixtures for VisionFlow tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from visionflow.config import ENV_OVERRIDES
from visionflow.planner import Planner
from visionflow.store import MemoryDocumentStore
from visionflow.workspace import FixedClock

TODAY = "2024-03-31"


@pytest.fixture
def clock() -> FixedClock:
    """Sunday 2024-03-31, 20:00 UTC: the last day of a month."""
    return FixedClock(datetime(2024, 3, 31, 20, 0, tzinfo=ZoneInfo("UTC")))


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary workspace with a settings file."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {
        "app_id": "test-app",
        "store": "file",
        "timezone": "UTC",
        "user_id": "tester",
    }
    (root / "visionflow.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    for env_name in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv("VISIONFLOW_ROOT", str(root))
    return root


@pytest.fixture
def planner(store: MemoryDocumentStore, clock: FixedClock):
    p = Planner(store, "user-1", clock=clock, app_id="test-app")
    yield p
    p.close()
