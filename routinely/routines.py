"""Routine CRUD and validation for Routinely."""

from __future__ import annotations

import time
from typing import Any

from routinely.models import ALL_DAY, RoutineItem
from routinely.timeutils import parse_hhmm


# ── Validation ────────────────────────────────────────────────


VALID_CATEGORIES = ("Mindfulness", "Work", "Fitness", "Wellness", "Health", "Growth", "Mind")
EDITABLE_FIELDS = {"title", "startTime", "endTime", "category", "required"}


def validate_routine(routine: dict[str, Any]) -> list[str]:
    """Validate routine fields and return list of errors (empty if valid)."""
    errors = []
    title = routine.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append("Missing required field: title")

    if "category" in routine and routine["category"] not in VALID_CATEGORIES:
        errors.append(f"Invalid category: {routine['category']}")

    start = routine.get("startTime", "00:00")
    end = routine.get("endTime", "")
    if start != ALL_DAY and parse_hhmm(str(start)) is None:
        errors.append(f"Invalid startTime: {start!r} (expected HH:MM or {ALL_DAY!r})")
    if end and parse_hhmm(str(end)) is None:
        errors.append(f"Invalid endTime: {end!r} (expected HH:MM)")
    elif end and start != ALL_DAY and parse_hhmm(str(start)) is not None:
        if parse_hhmm(str(end)) < parse_hhmm(str(start)):
            errors.append("endTime must not be earlier than startTime")

    if "required" in routine and not isinstance(routine["required"], bool):
        errors.append("required must be a boolean")

    return errors


def new_routine_id() -> str:
    return f"r_{int(time.time() * 1000)}"


# ── CRUD ──────────────────────────────────────────────────────


def find_routine(routines: list[RoutineItem], routine_id: str) -> RoutineItem | None:
    for r in routines:
        if r.id == routine_id:
            return r
    return None


def create_routine(routines: list[RoutineItem], data: dict[str, Any]) -> tuple[RoutineItem, list[str]]:
    """Validate and append a new routine. Returns (routine, errors)."""
    data = dict(data)
    if isinstance(data.get("title"), str):
        data["title"] = data["title"].strip()
    data.setdefault("startTime", "00:00")
    data.setdefault("category", "Work")
    errors = validate_routine(data)
    if errors:
        return RoutineItem(), errors

    routine_id = str(data.get("id") or new_routine_id())
    if find_routine(routines, routine_id):
        return RoutineItem(), [f"Routine ID already exists: {routine_id}"]

    data["id"] = routine_id
    data["order"] = len(routines)
    routine = RoutineItem.from_dict(data)
    routines.append(routine)
    return routine, []


def update_routine(
    routines: list[RoutineItem], routine_id: str, updates: dict[str, Any]
) -> tuple[RoutineItem | None, list[str]]:
    """Apply editable field updates. Returns (updated_routine, errors)."""
    routine = find_routine(routines, routine_id)
    if not routine:
        return None, [f"Routine not found: {routine_id}"]

    unknown = sorted(set(updates) - EDITABLE_FIELDS)
    if unknown:
        return None, [f"Field cannot be updated: {name}" for name in unknown]

    merged = routine.to_dict()
    merged.update(updates)
    if isinstance(merged.get("title"), str):
        merged["title"] = merged["title"].strip()
    errors = validate_routine(merged)
    if errors:
        return None, errors

    updated = RoutineItem.from_dict(merged)
    for i, r in enumerate(routines):
        if r.id == routine_id:
            routines[i] = updated
            break
    return updated, []


def delete_routine(routines: list[RoutineItem], routine_id: str) -> bool:
    """Remove a routine and renumber the remaining order values."""
    for i, r in enumerate(routines):
        if r.id == routine_id:
            routines.pop(i)
            for n, rest in enumerate(routines):
                rest.order = n
            return True
    return False


def reorder_routines(routines: list[RoutineItem], ordered_ids: list[str]) -> list[str]:
    """Rearrange in place to match *ordered_ids*. Returns errors (empty if applied)."""
    current = [r.id for r in routines]
    if sorted(current) != sorted(ordered_ids):
        return ["Reorder must list every routine id exactly once"]
    by_id = {r.id: r for r in routines}
    routines[:] = [by_id[i] for i in ordered_ids]
    for n, r in enumerate(routines):
        r.order = n
    return []
