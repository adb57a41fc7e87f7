"""Tests for visionflow/config.py — settings file and environment overrides."""

import logging
from zoneinfo import ZoneInfo

import pytest

from visionflow.config import (
    DEFAULT_APP_ID,
    ENV_OVERRIDES,
    Settings,
    init_settings,
    load_settings,
    save_settings,
)
from visionflow.workspace import workspace_root


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for env_name in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)


def test_load_settings(workspace):
    settings = load_settings(workspace)
    assert settings.app_id == "test-app"
    assert settings.store == "file"
    assert settings.user_id == "tester"


def test_load_settings_missing_file(tmp_path):
    settings = load_settings(tmp_path)
    assert settings == Settings()
    assert settings.app_id == DEFAULT_APP_ID


def test_load_settings_env_overrides(workspace, monkeypatch):
    monkeypatch.setenv("VISIONFLOW_STORE", "memory")
    monkeypatch.setenv("VISIONFLOW_USER", "someone")
    settings = load_settings(workspace)
    assert settings.store == "memory"
    assert settings.user_id == "someone"
    assert settings.app_id == "test-app"


def test_load_settings_malformed(workspace, caplog):
    (workspace / "visionflow.yaml").write_text("app_id: [unclosed", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="visionflow.config"):
        settings = load_settings(workspace)
    assert settings.app_id == DEFAULT_APP_ID
    assert "Malformed settings" in caplog.text


def test_unknown_timezone_falls_back_to_utc(caplog):
    with caplog.at_level(logging.ERROR, logger="visionflow.config"):
        tz = Settings(timezone="Mars/Olympus").tzinfo()
    assert tz == ZoneInfo("UTC")
    assert "Unknown timezone" in caplog.text


def test_settings_clock_uses_timezone():
    clock = Settings(timezone="Asia/Tokyo").clock()
    assert clock.now().tzinfo == ZoneInfo("Asia/Tokyo")


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_save_settings_round_trip(tmp_path):
    path = save_settings(Settings(app_id="mine", timezone="Europe/Paris"), tmp_path)
    assert path == tmp_path / "visionflow.yaml"
    assert load_settings(tmp_path).to_dict() == {
        "app_id": "mine",
        "store": "file",
        "timezone": "Europe/Paris",
        "user_id": "local",
    }


def test_init_settings_writes_defaults_not_env(tmp_path, monkeypatch):
    monkeypatch.setenv("VISIONFLOW_USER", "someone")
    monkeypatch.setenv("VISIONFLOW_STORE", "memory")

    settings = init_settings(tmp_path)
    assert settings.user_id == "someone"
    assert settings.store == "memory"

    monkeypatch.delenv("VISIONFLOW_USER")
    monkeypatch.delenv("VISIONFLOW_STORE")
    assert load_settings(tmp_path) == Settings()


def test_init_settings_keeps_existing_file(workspace):
    assert init_settings(workspace).app_id == "test-app"
