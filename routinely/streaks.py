"""Streak calculation over completion records.

A day is "successful" when at least SUCCESS_THRESHOLD of the routines were
completed. Pure functions; nothing here touches the workspace.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Sequence

from routinely.models import CompletionRecord, RoutineItem, StreakData

SUCCESS_THRESHOLD = 0.7
MAX_LOOKBACK_DAYS = 365


def completed_by_date(completions: Iterable[CompletionRecord]) -> dict[str, int]:
    """Map each date that has any record to its number of completed records."""
    counts: dict[str, int] = defaultdict(int)
    for c in completions:
        counts[c.date] += 1 if c.completed else 0
    return dict(counts)


def day_completion_rate(
    day: str,
    completions: Iterable[CompletionRecord],
    routines: Sequence[RoutineItem],
) -> float:
    """Completed records on *day* over the total routine count (0 when undefined)."""
    counts = completed_by_date(c for c in completions if c.date == day)
    return _rate(counts, day, len(routines))


def _rate(counts: dict[str, int], day: str, total: int) -> float:
    if day not in counts or total <= 0:
        return 0.0
    return counts[day] / total


def qualifies(rate: float) -> bool:
    return rate >= SUCCESS_THRESHOLD


def calculate_current_streak(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date | None = None,
) -> int:
    """Consecutive qualifying days ending today.

    Walks backwards one calendar day at a time and stops at the first day
    that misses the threshold or has no records at all.
    """
    if today is None:
        today = date.today()
    counts = completed_by_date(completions)
    total = len(routines)

    streak = 0
    for i in range(MAX_LOOKBACK_DAYS):
        day = (today - timedelta(days=i)).isoformat()
        if not qualifies(_rate(counts, day, total)):
            break
        streak += 1
    return streak


def calculate_best_streak(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    calendar_gaps_break: bool = False,
) -> int:
    """Longest run of qualifying days in the history.

    Runs are counted over the sorted list of dates that have any record.
    By default a stretch of days with no records between two qualifying
    dates does not end the run; with calendar_gaps_break=True the dates
    must also be adjacent on the calendar.
    """
    counts = completed_by_date(completions)
    if not counts:
        return 0
    total = len(routines)

    best = 0
    run = 0
    prev: date | None = None
    for day in sorted(counts):
        if not qualifies(_rate(counts, day, total)):
            run = 0
            prev = None
            continue
        current = date.fromisoformat(day) if calendar_gaps_break else None
        if calendar_gaps_break and prev is not None and current - prev != timedelta(days=1):
            run = 0
        run += 1
        prev = current
        best = max(best, run)
    return best


def calculate_streaks(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date | None = None,
) -> StreakData:
    return StreakData(
        current_streak=calculate_current_streak(completions, routines, today),
        best_streak=calculate_best_streak(completions, routines),
    )
