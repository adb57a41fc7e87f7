"""Settings for VisionFlow: visionflow.yaml plus environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from visionflow.fileio import read_yaml, write_yaml_atomic
from visionflow.workspace import SystemClock, settings_path, workspace_root

logger = logging.getLogger(__name__)

DEFAULT_APP_ID = "default-app-id"
STORE_BACKENDS = {"file", "memory"}

ENV_OVERRIDES = {
    "app_id": "VISIONFLOW_APP_ID",
    "store": "VISIONFLOW_STORE",
    "timezone": "VISIONFLOW_TIMEZONE",
    "user_id": "VISIONFLOW_USER",
}


@dataclass
class Settings:
    app_id: str = DEFAULT_APP_ID
    store: str = "file"
    timezone: str = "UTC"
    user_id: str = "local"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            app_id=str(d.get("app_id", DEFAULT_APP_ID) or DEFAULT_APP_ID),
            store=str(d.get("store", "file")).strip().lower(),
            timezone=str(d.get("timezone", "UTC")),
            user_id=str(d.get("user_id", "local") or "local"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "app_id": self.app_id,
            "store": self.store,
            "timezone": self.timezone,
            "user_id": self.user_id,
        }

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.error("Unknown timezone %r, using UTC", self.timezone)
            return ZoneInfo("UTC")

    def clock(self) -> SystemClock:
        return SystemClock(self.tzinfo())


def load_settings(root: Path | None = None) -> Settings:
    """Load visionflow.yaml and apply VISIONFLOW_* environment overrides."""
    if root is None:
        root = workspace_root()
    try:
        data = read_yaml(settings_path(root))
    except yaml.YAMLError as e:
        logger.error("Malformed settings file %s: %s", settings_path(root), e)
        data = {}
    for key, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = value
    return Settings.from_dict(data)


def save_settings(settings: Settings, root: Path | None = None) -> Path:
    """Write *settings* to visionflow.yaml and return the path."""
    path = settings_path(root)
    write_yaml_atomic(path, settings.to_dict())
    return path


def init_settings(root: Path | None = None) -> Settings:
    """Create visionflow.yaml with defaults on first run, then load settings.

    Environment overrides apply to the loaded settings only and are never
    written to the file.
    """
    if root is None:
        root = workspace_root()
    if not settings_path(root).exists():
        save_settings(Settings(), root)
    return load_settings(root)
