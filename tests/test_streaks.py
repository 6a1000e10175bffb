"""Tests for routinely/streaks.py: current and best streak rules."""

from datetime import date, timedelta

from routinely.models import CompletionRecord, RoutineItem
from routinely.streaks import (
    MAX_LOOKBACK_DAYS,
    calculate_best_streak,
    calculate_current_streak,
    calculate_streaks,
    day_completion_rate,
)

TODAY = date(2026, 3, 15)


def _routines(n):
    return [RoutineItem(id=f"r{i}", title=f"Routine {i}") for i in range(n)]


def _day(offset, done, total):
    """Records for TODAY - offset with *done* of *total* routines completed."""
    day = (TODAY - timedelta(days=offset)).isoformat()
    return [CompletionRecord(day, f"r{i}", i < done, 0) for i in range(total)]


def test_no_records_means_no_streak():
    assert calculate_current_streak([], _routines(3), TODAY) == 0
    assert calculate_best_streak([], _routines(3)) == 0


def test_zero_routines_never_qualifies():
    records = _day(0, 1, 1)
    assert day_completion_rate(TODAY.isoformat(), records, []) == 0.0
    assert calculate_current_streak(records, [], TODAY) == 0


def test_two_routines_today_full_yesterday_half():
    completions = _day(0, 2, 2) + _day(1, 1, 2)
    assert calculate_current_streak(completions, _routines(2), TODAY) == 1


def test_threshold_is_inclusive():
    routines = _routines(10)
    assert calculate_current_streak(_day(0, 7, 10), routines, TODAY) == 1
    assert calculate_current_streak(_day(0, 6, 10), routines, TODAY) == 0


def test_current_streak_counts_back_from_today():
    completions = _day(0, 3, 3) + _day(1, 3, 3) + _day(2, 3, 3) + _day(4, 3, 3)
    assert calculate_current_streak(completions, _routines(3), TODAY) == 3


def test_missing_today_breaks_current_streak():
    completions = _day(1, 3, 3) + _day(2, 3, 3)
    assert calculate_current_streak(completions, _routines(3), TODAY) == 0


def test_best_streak_ignores_calendar_gaps_by_default():
    completions = _day(0, 2, 2) + _day(2, 2, 2) + _day(5, 2, 2)
    assert calculate_best_streak(completions, _routines(2)) == 3
    assert calculate_best_streak(completions, _routines(2), calendar_gaps_break=True) == 1


def test_best_streak_resets_on_failed_day():
    completions = _day(5, 2, 2) + _day(4, 2, 2) + _day(3, 0, 2) + _day(2, 2, 2)
    assert calculate_best_streak(completions, _routines(2)) == 2


def test_best_is_at_least_current():
    completions = _day(0, 2, 2) + _day(1, 2, 2) + _day(3, 2, 2)
    streaks = calculate_streaks(completions, _routines(2), TODAY)
    assert streaks.current_streak == 2
    assert streaks.best_streak >= streaks.current_streak
    assert streaks.to_dict() == {"currentStreak": 2, "bestStreak": 3}


def test_current_streak_stops_at_lookback_limit():
    routines = _routines(1)
    completions = []
    for offset in range(MAX_LOOKBACK_DAYS + 1):
        completions.extend(_day(offset, 1, 1))
    assert calculate_current_streak(completions, routines, TODAY) == MAX_LOOKBACK_DAYS
    assert calculate_best_streak(completions, routines) == MAX_LOOKBACK_DAYS + 1
