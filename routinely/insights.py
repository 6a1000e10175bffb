"""Heuristic insights over the last 30 days of completion data.

Rules run in a fixed order and the list is cut to MAX_INSIGHTS, so later
rules only show up when earlier ones stay quiet:

1. weekend drop-off (weekday rate beats weekend rate by > 15 points)
2. best day of the week (average above 50%)
3. per-routine struggle (first routine whose own rate is below 40%)
4. high performer (30-day average above 80%)
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from routinely.dates import DAY_NAMES, day_index, is_weekend, last_n_days
from routinely.models import CompletionRecord, Insight, RoutineItem
from routinely.streaks import completed_by_date

WINDOW_DAYS = 30
MAX_INSIGHTS = 3

WEEKEND_DROP_GAP = 0.15
BEST_DAY_MIN = 0.5
STRUGGLE_MAX = 0.4
HIGH_PERFORMER_MIN = 0.8

WEEKEND_DROP = "weekend_drop"
BEST_DAY = "best_day"
TIME_OPTIMIZATION = "time_optimization"
LOW_COMPLETION = "low_completion"
HIGH_PERFORMER = "high_performer"


def _pct(rate: float) -> int:
    # round half up
    return int(rate * 100 + 0.5)


def average_rate(dates: Sequence[str], counts: dict[str, int], total_routines: int) -> float:
    """Mean of daily completion rates across *dates*; days without data count as 0."""
    if not dates or total_routines <= 0:
        return 0.0
    return sum(counts.get(d, 0) / total_routines for d in dates) / len(dates)


def _weekend_drop(window: list[str], counts: dict[str, int], total: int) -> Insight | None:
    weekdays = [d for d in window if not is_weekend(d)]
    weekends = [d for d in window if is_weekend(d)]
    gap = average_rate(weekdays, counts, total) - average_rate(weekends, counts, total)
    if gap <= WEEKEND_DROP_GAP:
        return None
    return Insight(
        id="weekend-drop",
        icon="lightbulb",
        title="Productivity Trend",
        description=(
            f"Your completion rate drops by {_pct(gap)}% on weekends. "
            "Try setting easier goals for Saturdays."
        ),
        type="warning",
        category=WEEKEND_DROP,
    )


def _best_day(window: list[str], counts: dict[str, int], total: int) -> Insight | None:
    if total <= 0:
        return None
    sums = [0.0] * 7
    occurrences = [0] * 7
    for d in window:
        idx = day_index(d)
        sums[idx] += counts.get(d, 0) / total
        occurrences[idx] += 1

    best_idx, best_avg = 0, 0.0
    for idx in range(7):
        avg = sums[idx] / occurrences[idx] if occurrences[idx] else 0.0
        if avg > best_avg:
            best_idx, best_avg = idx, avg

    if best_avg <= BEST_DAY_MIN:
        return None
    return Insight(
        id="best-day",
        icon="calendar_month",
        title="Best Day",
        description=(
            f"You are most consistent on {DAY_NAMES[best_idx]}s, "
            f"averaging {_pct(best_avg)}% completion."
        ),
        type="info",
        category=BEST_DAY,
    )


def routine_completion_rate(routine_id: str, completions: Sequence[CompletionRecord], window: set[str]) -> float:
    """Completed / recorded days for one routine inside *window*; 1.0 with no records."""
    records = [c for c in completions if c.routine_id == routine_id and c.date in window]
    if not records:
        return 1.0
    return sum(1 for c in records if c.completed) / len(records)


def _struggle(window: list[str], completions: Sequence[CompletionRecord], routines: Sequence[RoutineItem]) -> Insight | None:
    """The first routine in list order whose own rate is below STRUGGLE_MAX."""
    in_window = set(window)
    for routine in routines:
        rate = routine_completion_rate(routine.id, completions, in_window)
        if rate >= STRUGGLE_MAX:
            continue
        if "night" in routine.title.lower():
            return Insight(
                id=f"struggle-{routine.id}",
                icon="schedule",
                title="Time Optimization",
                description=(
                    f'You miss "{routine.title}" {_pct(1 - rate)}% of the time. '
                    "Consider moving it to an earlier slot."
                ),
                type="warning",
                category=TIME_OPTIMIZATION,
            )
        return Insight(
            id=f"struggle-{routine.id}",
            icon="trending_down",
            title="Low Completion",
            description=(
                f'"{routine.title}" has only {_pct(rate)}% weekly completion. '
                "Try shorter sessions."
            ),
            type="info",
            category=LOW_COMPLETION,
        )
    return None


def _high_performer(window: list[str], counts: dict[str, int], total: int) -> Insight | None:
    overall = average_rate(window, counts, total)
    if overall <= HIGH_PERFORMER_MIN:
        return None
    return Insight(
        id="high-performer",
        icon="emoji_events",
        title="Great Work!",
        description=(
            f"You're averaging {_pct(overall)}% completion over 30 days. "
            "Keep the momentum going!"
        ),
        type="info",
        category=HIGH_PERFORMER,
    )


def generate_insights(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date | None = None,
) -> list[Insight]:
    """Up to MAX_INSIGHTS insights from the WINDOW_DAYS ending at *today*."""
    if today is None:
        today = date.today()
    window = last_n_days(WINDOW_DAYS, today)
    in_window = set(window)
    counts = completed_by_date(c for c in completions if c.date in in_window)
    total = len(routines)

    insights: list[Insight] = []
    for found in (
        _weekend_drop(window, counts, total),
        _best_day(window, counts, total),
        _struggle(window, completions, routines),
        _high_performer(window, counts, total),
    ):
        if found is not None:
            insights.append(found)

    return insights[:MAX_INSIGHTS]
