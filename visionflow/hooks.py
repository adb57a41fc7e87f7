"""Lifecycle hooks for VisionFlow.

Hooks are shell commands listed per hook point in <root>/hooks.yaml:

    on_task_complete:
      - notify-send "done"
    post_rollover:
      - command: ./sync-calendar.sh
        timeout: 10

Each command gets the event context as JSON on stdin and the hook point in
VISIONFLOW_HOOK. A failing hook is reported in its result and logged; it
never fails the operation that triggered it.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any

import yaml

from visionflow.fileio import read_yaml
from visionflow.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_task_added",
    "on_task_complete",
    "on_reflection_saved",
    "post_rollover",
}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    path = hooks_config_path(root or workspace_root())
    try:
        return read_yaml(path)
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed %s: %s", path, e)
        return {}


def _hook_entries(config: dict[str, Any], hook_point: str) -> list[tuple[str, float]]:
    """(command, timeout) pairs for *hook_point*; blank or odd entries are skipped."""
    entries = config.get(hook_point)
    if not isinstance(entries, list):
        return []
    parsed = []
    for entry in entries:
        if isinstance(entry, str):
            command, timeout = entry, DEFAULT_TIMEOUT
        elif isinstance(entry, dict):
            command, timeout = entry.get("command", ""), entry.get("timeout", DEFAULT_TIMEOUT)
        else:
            continue
        if command:
            parsed.append((str(command), timeout))
    return parsed


def _run_one(hook_point: str, command: str, timeout: float, stdin: str, root: Path) -> dict[str, Any]:
    result: dict[str, Any] = {"command": command, "hook_point": hook_point}
    try:
        proc = subprocess.run(
            command,
            shell=True,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(root),
            env={**os.environ, "VISIONFLOW_HOOK": hook_point},
        )
    except subprocess.TimeoutExpired:
        result.update(exit_code=-1, error=f"Hook timed out after {timeout}s")
        logger.warning("Hook %s (%s) timed out after %ss", hook_point, command, timeout)
        return result
    except OSError as e:
        result.update(exit_code=-1, error=str(e))
        logger.warning("Hook %s (%s) failed: %s", hook_point, command, e)
        return result

    result.update(
        exit_code=proc.returncode,
        stdout=proc.stdout[:OUTPUT_CAP],
        stderr=proc.stderr[:OUTPUT_CAP],
    )
    if proc.returncode != 0:
        logger.warning("Hook %s (%s) exited %d", hook_point, command, proc.returncode)
    return result


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*, in order.

    Returns one result dict per command with exit_code and either
    stdout/stderr or an error message. Unknown hook points run nothing.
    """
    if hook_point not in VALID_HOOK_POINTS:
        return []
    root = root or workspace_root()
    entries = _hook_entries(load_hooks_config(root), hook_point)
    if not entries:
        return []
    stdin = json.dumps(context, ensure_ascii=False)
    return [_run_one(hook_point, command, timeout, stdin, root) for command, timeout in entries]
