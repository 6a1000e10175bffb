"""Shared test fixtures for Routinely tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with two routines and a little history."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    # Settings
    settings = {"timezone": "UTC", "user_name": "Sam", "log_level": "DEBUG"}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    # Routines
    routines = {
        "routines": [
            {
                "id": "r1",
                "title": "Morning Meditation",
                "startTime": "06:00",
                "endTime": "06:15",
                "category": "Mindfulness",
                "required": True,
                "order": 0,
            },
            {
                "id": "r2",
                "title": "Night Reading",
                "startTime": "21:00",
                "endTime": "21:30",
                "category": "Growth",
                "required": True,
                "order": 1,
            },
        ]
    }
    (root / "routines.yaml").write_text(
        yaml.dump(routines, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    # Completions
    completions = {
        "completions": [
            {"date": "2026-03-08", "routineId": "r1", "completed": True, "timestamp": 100},
            {"date": "2026-03-08", "routineId": "r2", "completed": True, "timestamp": 110},
            {"date": "2026-03-09", "routineId": "r1", "completed": True, "timestamp": 200},
            {"date": "2026-03-09", "routineId": "r2", "completed": False, "timestamp": 210},
        ]
    }
    (root / "completions.json").write_text(
        json.dumps(completions, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["ROUTINELY_ROOT"] = str(root)
    yield root
    # Cleanup
    if "ROUTINELY_ROOT" in os.environ:
        del os.environ["ROUTINELY_ROOT"]


@pytest.fixture
def write_hooks(workspace: Path):
    """Write a hooks.yaml into the workspace."""

    def _write(config: dict) -> Path:
        path = workspace / "hooks.yaml"
        path.write_text(yaml.dump(config), encoding="utf-8")
        return path

    return _write
