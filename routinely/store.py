"""File-backed routine store with an explicit apply/rollback cache.

The store keeps routines and completion records in memory. Every mutation
runs inside ``transaction()``: the cache is snapshotted, the change is
applied in memory, and the touched files are written atomically. If
validation or persistence fails, the snapshot is restored so callers never
observe a half-applied change.

Files (relative to the workspace root):
    routines.yaml     {"routines": [RoutineItem, ...]}
    completions.json  {"completions": [CompletionRecord, ...]}
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterator

from routinely import routines as catalogue
from routinely.dates import is_iso_date
from routinely.errors import RoutineNotFoundError, StorageError, ValidationError
from routinely.fileio import read_json, read_yaml, write_json_atomic, write_yaml_atomic
from routinely.hooks import run_hooks
from routinely.models import CompletionRecord, RoutineItem
from routinely.seed import default_routines, generate_demo_completions
from routinely.workspace import completions_path, routines_path, today_local, workspace_root

logger = logging.getLogger(__name__)

ROUTINES = "routines"
COMPLETIONS = "completions"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class RoutineStore:
    """In-memory cache of routines + completions, written through to disk."""

    def __init__(
        self,
        root: Path | None = None,
        routines: list[RoutineItem] | None = None,
        completions: list[CompletionRecord] | None = None,
        clock: Callable[[], int] = _epoch_ms,
        run_hooks_enabled: bool = True,
    ) -> None:
        self.root = root if root is not None else workspace_root()
        self._routines: list[RoutineItem] = list(routines or [])
        self._completions: dict[tuple[str, str], CompletionRecord] = {}
        for record in completions or []:
            self._put_record(record)
        self._clock = clock
        self._run_hooks_enabled = run_hooks_enabled
        self._pending_hooks: list[tuple[str, dict[str, Any]]] = []
        self._depth = 0
        self._lock = threading.RLock()

    # ── Loading & persistence ─────────────────────────────────

    @classmethod
    def load(cls, root: Path | None = None, **kwargs: Any) -> RoutineStore:
        """Read routines.yaml and completions.json into a new store."""
        if root is None:
            root = workspace_root()
        routine_data = read_yaml(routines_path(root)).get(ROUTINES) or []
        completion_data = read_json(completions_path(root)).get(COMPLETIONS) or []
        routines = [RoutineItem.from_dict(r) for r in routine_data if isinstance(r, dict)]
        routines.sort(key=lambda r: r.order)
        completions = [CompletionRecord.from_dict(c) for c in completion_data if isinstance(c, dict)]
        store = cls(root=root, routines=routines, completions=completions, **kwargs)
        if len(store._completions) != len(completions):
            logger.warning(
                "Collapsed %d duplicate completion records in %s",
                len(completions) - len(store._completions),
                completions_path(root),
            )
        logger.debug("Loaded %d routines, %d completions", len(routines), len(store._completions))
        return store

    def _write(self, what: str) -> None:
        if what == ROUTINES:
            write_yaml_atomic(routines_path(self.root), {ROUTINES: [r.to_dict() for r in self._routines]})
        else:
            write_json_atomic(completions_path(self.root), {COMPLETIONS: [c.to_dict() for c in self.completions]})

    def save(self) -> None:
        self._write(ROUTINES)
        self._write(COMPLETIONS)

    # ── Cache snapshot / rollback ─────────────────────────────

    def snapshot(self) -> tuple[list[RoutineItem], dict[tuple[str, str], CompletionRecord]]:
        return copy.deepcopy(self._routines), copy.deepcopy(self._completions)

    def restore(self, snap: tuple[list[RoutineItem], dict[tuple[str, str], CompletionRecord]]) -> None:
        self._routines, self._completions = copy.deepcopy(snap[0]), copy.deepcopy(snap[1])

    @contextmanager
    def transaction(self, *touches: str) -> Iterator[RoutineStore]:
        """Apply changes in memory, persist the touched files, or roll back.

        Transactions from different threads run one at a time. A transaction
        opened inside another on the same thread joins the outermost one.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snap = self.snapshot()
            written: list[str] = []
            self._depth = 1
            try:
                yield self
                for what in touches:
                    self._write(what)
                    written.append(what)
            except Exception:
                self.restore(snap)
                self._pending_hooks.clear()
                logger.warning("Rolled back store change (touched: %s)", ", ".join(touches) or "none")
                for what in written:
                    try:
                        self._write(what)
                    except StorageError as e:
                        logger.error("Could not restore %s after rollback: %s", what, e)
                raise
            finally:
                self._depth = 0
            pending, self._pending_hooks = self._pending_hooks, []
        self._fire_hooks(pending)

    def _fire_hooks(self, pending: list[tuple[str, dict[str, Any]]]) -> None:
        if not self._run_hooks_enabled:
            return
        for hook_point, context in pending:
            run_hooks(hook_point, context, self.root)

    # ── Read access ───────────────────────────────────────────

    @property
    def routines(self) -> list[RoutineItem]:
        with self._lock:
            return list(self._routines)

    @property
    def completions(self) -> list[CompletionRecord]:
        with self._lock:
            return sorted(self._completions.values(), key=lambda c: (c.date, c.routine_id))

    def get_routine(self, routine_id: str) -> RoutineItem:
        with self._lock:
            routine = catalogue.find_routine(self._routines, routine_id)
        if routine is None:
            raise RoutineNotFoundError(routine_id)
        return routine

    def completions_for(self, day: str) -> list[CompletionRecord]:
        return [c for c in self.completions if c.date == day]

    def _put_record(self, record: CompletionRecord) -> None:
        existing = self._completions.get(record.key)
        if existing is None or record.timestamp >= existing.timestamp:
            self._completions[record.key] = record

    def _today(self) -> date:
        return today_local(self.root)

    # ── Mutations ─────────────────────────────────────────────

    def toggle_task(self, routine_id: str, day: str | None = None) -> CompletionRecord:
        """Flip a routine's completion for *day* (default: today).

        A missing record is created as completed.
        """
        if day is None:
            day = self._today().isoformat()
        if not is_iso_date(day):
            raise ValidationError([f"Invalid date: {day!r} (expected YYYY-MM-DD)"])

        with self.transaction(COMPLETIONS):
            self.get_routine(routine_id)
            existing = self._completions.get((day, routine_id))
            if existing is not None:
                record = CompletionRecord(day, routine_id, not existing.completed, self._clock())
            else:
                record = CompletionRecord(day, routine_id, True, self._clock())
            self._completions[record.key] = record
            logger.debug("Toggled %s on %s -> %s", routine_id, day, record.completed)
            context = {"routine": routine_id, "date": day, "completed": record.completed}
            self._pending_hooks.append(("on_routine_toggle", context))
            if record.completed:
                self._pending_hooks.append(("on_routine_complete", context))
        return record

    def add_routine(self, data: dict[str, Any]) -> RoutineItem:
        with self.transaction(ROUTINES):
            routine, errors = catalogue.create_routine(self._routines, data)
            if errors:
                raise ValidationError(errors)
            logger.debug("Added routine %s (%s)", routine.id, routine.title)
            self._pending_hooks.append(("on_routine_create", {"routine": routine.to_dict()}))
        return routine

    def update_routine(self, routine_id: str, updates: dict[str, Any]) -> RoutineItem:
        with self.transaction(ROUTINES):
            self.get_routine(routine_id)
            updated, errors = catalogue.update_routine(self._routines, routine_id, updates)
            if errors:
                raise ValidationError(errors)
            logger.debug("Updated routine %s: %s", routine_id, sorted(updates))
        return updated

    def delete_routine(self, routine_id: str) -> None:
        """Remove a routine together with all of its completion records."""
        with self.transaction(ROUTINES, COMPLETIONS):
            routine = self.get_routine(routine_id)
            catalogue.delete_routine(self._routines, routine_id)
            dropped = [k for k in self._completions if k[1] == routine_id]
            for key in dropped:
                del self._completions[key]
            logger.debug("Deleted routine %s and %d records", routine_id, len(dropped))
            self._pending_hooks.append(("on_routine_delete", {"routine": routine.to_dict()}))

    def reorder_routines(self, ordered_ids: list[str]) -> list[RoutineItem]:
        with self.transaction(ROUTINES):
            errors = catalogue.reorder_routines(self._routines, ordered_ids)
            if errors:
                raise ValidationError(errors)
        return self.routines

    def toggle_required(self, routine_id: str) -> RoutineItem:
        with self.transaction(ROUTINES):
            routine = self.get_routine(routine_id)
            return self.update_routine(routine_id, {"required": not routine.required})

    def reset_routines(self) -> list[RoutineItem]:
        """Replace the routine list with the defaults. History is kept."""
        with self.transaction(ROUTINES):
            self._routines = default_routines()
            self._pending_hooks.append(("post_reset_routines", {"count": len(self._routines)}))
        return self.routines

    def clear_history(self) -> int:
        """Delete every completion record. Returns how many were removed."""
        with self.transaction(COMPLETIONS):
            removed = len(self._completions)
            self._completions = {}
            logger.debug("Cleared %d completion records", removed)
            self._pending_hooks.append(("post_clear_history", {"removed": removed}))
        return removed

    def seed_demo(self, days: int = 30, seed: int = 42) -> None:
        """Reset to the default routines and fill in *days* of demo history."""
        with self.transaction(ROUTINES, COMPLETIONS):
            self._routines = default_routines()
            self._completions = {}
            for record in generate_demo_completions(self._routines, self._today(), days=days, seed=seed):
                self._put_record(record)
