"""Default routines and reproducible demo history."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Sequence

from routinely.dates import is_weekend
from routinely.models import CompletionRecord, RoutineItem

DEFAULT_ROUTINES: tuple[RoutineItem, ...] = (
    RoutineItem("r1", "Morning Meditation", "06:00", "06:15", "Mindfulness", True, 0),
    RoutineItem("r2", "Exercise Routine", "06:30", "07:15", "Fitness", True, 1),
    RoutineItem("r3", "Healthy Breakfast", "07:30", "08:00", "Health", True, 2),
    RoutineItem("r4", "Deep Work Block", "09:00", "11:00", "Work", True, 3),
    RoutineItem("r5", "Reading", "12:00", "12:30", "Growth", True, 4),
    RoutineItem("r6", "Journaling", "20:00", "20:30", "Mind", True, 5),
    RoutineItem("r7", "Evening Walk", "18:00", "18:45", "Wellness", True, 6),
    RoutineItem("r8", "Skill Practice", "21:00", "22:00", "Growth", False, 7),
)

BASE_PROBABILITIES = {
    "r1": 0.80,
    "r2": 0.65,
    "r3": 0.75,
    "r4": 0.70,
    "r5": 0.55,
    "r6": 0.75,
    "r7": 0.40,
    "r8": 0.35,
}
DEFAULT_PROBABILITY = 0.5
WEEKEND_FACTOR = 0.6

_MODULUS = 2147483647
_MULTIPLIER = 16807


def default_routines() -> list[RoutineItem]:
    """Fresh copies, safe to mutate."""
    return [RoutineItem(**vars(r)) for r in DEFAULT_ROUTINES]


def lehmer(seed: int) -> Iterator[float]:
    """Park-Miller minimal standard generator yielding floats in (0, 1)."""
    state = seed % _MODULUS or 1
    while True:
        state = state * _MULTIPLIER % _MODULUS
        yield state / _MODULUS


def generate_demo_completions(
    routines: Sequence[RoutineItem],
    today: date,
    days: int = 30,
    seed: int = 42,
) -> list[CompletionRecord]:
    """One record per routine per day for the last *days* days.

    Weekend probabilities are scaled by WEEKEND_FACTOR so the demo data
    shows a weekend drop-off.
    """
    rng = lehmer(seed)
    records = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        midnight = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
        base_ms = int(midnight.timestamp() * 1000)
        for routine in routines:
            prob = BASE_PROBABILITIES.get(routine.id, DEFAULT_PROBABILITY)
            if is_weekend(day):
                prob *= WEEKEND_FACTOR
            completed = next(rng) < prob
            records.append(
                CompletionRecord(
                    date=day.isoformat(),
                    routine_id=routine.id,
                    completed=completed,
                    timestamp=base_ms + (8 * 3600 * 1000 if completed else 0),
                )
            )
    return records
