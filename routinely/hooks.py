"""Lifecycle hooks for Routinely.

Hooks run shell commands when routines or history change. Configured via
hooks.yaml in the workspace, keyed by hook point:

    on_routine_complete:
      - notify-send "Done!"
      - {command: ./sync.sh, timeout: 10}

Hook points:
- on_routine_toggle, on_routine_complete
- on_routine_create, on_routine_delete
- post_clear_history, post_reset_routines
- post_analytics_refresh
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from routinely.fileio import read_yaml
from routinely.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_routine_toggle",
    "on_routine_complete",
    "on_routine_create",
    "on_routine_delete",
    "post_clear_history",
    "post_reset_routines",
    "post_analytics_refresh",
}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks configuration from hooks.yaml."""
    return read_yaml(hooks_config_path(root))


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run all hooks registered for a given hook point.

    Context is passed as JSON via stdin to each hook subprocess.
    Returns list of results with stdout/stderr and exit codes; a failing
    hook is reported in its result and never raised.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.debug("Ignoring unknown hook point %r", hook_point)
        return []

    if root is None:
        root = workspace_root()

    hooks = load_hooks_config(root).get(hook_point, [])
    if not hooks or not isinstance(hooks, list):
        return []

    results = []
    payload = json.dumps({"hookPoint": hook_point, **context}, ensure_ascii=False)

    for hook in hooks:
        if isinstance(hook, str):
            command, timeout = hook, DEFAULT_TIMEOUT
        elif isinstance(hook, dict):
            command = hook.get("command", "")
            timeout = hook.get("timeout", DEFAULT_TIMEOUT)
        else:
            continue
        if not command:
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=payload,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:OUTPUT_CAP]
            result["stderr"] = proc.stderr[:OUTPUT_CAP]
            if proc.returncode != 0:
                logger.warning("Hook %r for %s exited with %d", command, hook_point, proc.returncode)
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout}s"
            logger.warning("Hook %r for %s timed out after %ss", command, hook_point, timeout)
        except OSError as e:
            result["exit_code"] = -1
            result["error"] = str(e)
            logger.warning("Hook %r for %s failed: %s", command, hook_point, e)

        results.append(result)

    return results
