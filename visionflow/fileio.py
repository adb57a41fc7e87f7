"""File I/O for VisionFlow documents and settings.

Readers treat a missing or blank file as "no content". Writers go through
a locked temp file in the target directory that is renamed into place, so
a concurrent reader sees either the old document or the new one.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

import yaml


def read_text(path: Path) -> str:
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_json(path: Path) -> dict[str, Any] | None:
    """Parse a JSON document. None when the file is absent, blank or not an object."""
    text = read_text(path)
    if not text.strip():
        return None
    data = json.loads(text)
    return data if isinstance(data, dict) else None


def read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML mapping; {} when absent, blank or not a mapping."""
    text = read_text(path)
    if not text.strip():
        return {}
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


@contextmanager
def _replacing(path: Path, suffix: str) -> Iterator[IO[str]]:
    """Yield a locked temp file that replaces *path* on clean exit."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                yield f
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    # a serialization error must not touch disk
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    with _replacing(path, ".json") as f:
        f.write(text)


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    with _replacing(path, ".yaml") as f:
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
