"""Atomic JSON/YAML persistence for the Routinely workspace."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from routinely.errors import StorageError

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Cannot read {path}: {e}") from e


def read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object, returning empty dict if the file is missing or blank."""
    text = read_text(path)
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Corrupt JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise StorageError(f"Expected a JSON object in {path}")
    return data


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning empty dict if missing or empty."""
    text = read_text(path)
    if not text.strip():
        return {}
    try:
        result = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise StorageError(f"Corrupt YAML in {path}: {e}") from e
    return result if isinstance(result, dict) else {}


def _atomic_write(path: Path, content: str, suffix: str = ".tmp") -> None:
    """Atomic write with file locking: temp file + flock + rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.rename(temp_path, path)
    except OSError as e:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise StorageError(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %s (%d bytes)", path, len(content))


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic JSON write."""
    _atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n", suffix=".json")


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic YAML write."""
    content = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    _atomic_write(path, content, suffix=".yaml")
