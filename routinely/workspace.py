"""Workspace root, settings, timezone and path helpers for Routinely."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from routinely.fileio import read_yaml
from routinely.models import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def workspace_root() -> Path:
    """Get the workspace root directory (holds settings.yaml, routines.yaml, ...)."""
    return Path(
        os.environ.get("ROUTINELY_ROOT", str(Path.home() / "routinely"))
    ).expanduser().resolve()


def load_settings(root: Path | None = None) -> Settings:
    return Settings.from_dict(read_yaml(settings_path(root)))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    name = load_settings(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings, using UTC", name)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_local(root: Path | None = None) -> date:
    return now_local(root).date()


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    return today_local(root).isoformat()


def configure_logging(level: str | int | None = None, root: Path | None = None) -> None:
    """Set up root logging once; level defaults to settings.yaml's log_level."""
    if level is None:
        level = load_settings(root).log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def routines_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "routines.yaml"


def completions_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "completions.json"


def analytics_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "analytics.json"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"
