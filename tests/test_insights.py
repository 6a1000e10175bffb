"""Tests for routinely/insights.py: rule order, wording and limits."""

from datetime import date, timedelta

from routinely.dates import is_weekend, last_n_days
import routinely.insights as insights_module
from routinely.insights import (
    HIGH_PERFORMER,
    LOW_COMPLETION,
    MAX_INSIGHTS,
    TIME_OPTIMIZATION,
    generate_insights,
)
from routinely.models import CompletionRecord, RoutineItem
from routinely.seed import default_routines, generate_demo_completions

TODAY = date(2026, 3, 15)  # a Sunday


def _routines(n):
    return [RoutineItem(id=f"r{i}", title=f"Routine {i}") for i in range(n)]


def test_no_data_no_insights():
    assert generate_insights([], _routines(3), TODAY) == []


def test_weekend_drop_gap():
    routines = _routines(10)
    completions = []
    for day in last_n_days(30, TODAY):
        done = 3 if is_weekend(day) else 9
        completions.extend(CompletionRecord(day, f"r{i}", True, 0) for i in range(done))

    insights = generate_insights(completions, routines, TODAY)
    assert insights[0].id == "weekend-drop"
    assert insights[0].type == "warning"
    assert "drops by 60% on weekends" in insights[0].description
    # ties between weekdays go to the earliest in the week
    assert insights[1].id == "best-day"
    assert "Mondays" in insights[1].description


def test_perfect_month():
    routines = _routines(2)
    completions = [
        CompletionRecord(day, r.id, True, 0) for day in last_n_days(30, TODAY) for r in routines
    ]
    insights = generate_insights(completions, routines, TODAY)
    assert [i.id for i in insights] == ["best-day", "high-performer"]
    assert "Sundays, averaging 100%" in insights[0].description
    assert insights[1].category == HIGH_PERFORMER
    assert "100% completion over 30 days" in insights[1].description


def test_only_first_struggling_routine_reported():
    routines = [
        RoutineItem(id="night", title="Night Reading"),
        RoutineItem(id="gym", title="Gym"),
        RoutineItem(id="yoga", title="Yoga"),
    ]
    completions = []
    for offset in range(5):
        day = (TODAY - timedelta(days=offset)).isoformat()
        completions.append(CompletionRecord(day, "night", offset == 0, 0))
        completions.append(CompletionRecord(day, "gym", False, 0))
        completions.append(CompletionRecord(day, "yoga", False, 0))

    insights = generate_insights(completions, routines, TODAY)
    assert [i.id for i in insights] == ["struggle-night"]
    assert insights[0].category == TIME_OPTIMIZATION
    assert 'You miss "Night Reading" 80% of the time.' in insights[0].description

    insights = generate_insights(completions, routines[1:] + routines[:1], TODAY)
    assert [i.id for i in insights] == ["struggle-gym"]
    assert insights[0].category == LOW_COMPLETION
    assert '"Gym" has only 0% weekly completion.' in insights[0].description


def test_routine_without_records_does_not_struggle():
    routines = [RoutineItem(id="a", title="A"), RoutineItem(id="b", title="B")]
    completions = [CompletionRecord(TODAY.isoformat(), "a", True, 0)]
    assert all(not i.id.startswith("struggle") for i in generate_insights(completions, routines, TODAY))


def test_records_outside_window_are_ignored():
    routines = _routines(1)
    old = (TODAY - timedelta(days=40)).isoformat()
    assert generate_insights([CompletionRecord(old, "r0", False, 0)], routines, TODAY) == []


def test_demo_data_capped():
    routines = default_routines()
    completions = generate_demo_completions(routines, TODAY)
    insights = generate_insights(completions, routines, TODAY)
    assert 0 < len(insights) <= MAX_INSIGHTS
    assert len({i.category for i in insights}) == len(insights)


def test_thresholds_are_strict():
    friday, saturday = "2026-03-13", "2026-03-14"
    # weekday 3/20 = 0.15 against an empty weekend
    assert insights_module._weekend_drop([friday, saturday], {friday: 3}, 20) is None
    assert insights_module._weekend_drop([friday, saturday], {friday: 4}, 20) is not None
    assert insights_module._best_day([friday], {friday: 1}, 2) is None
    assert insights_module._best_day([friday], {friday: 2}, 3) is not None
    assert insights_module._high_performer([friday], {friday: 4}, 5) is None
    assert insights_module._high_performer([friday], {friday: 5}, 5) is not None


def test_struggle_threshold_is_strict():
    routines = [RoutineItem(id="gym", title="Gym")]
    days = last_n_days(5, TODAY)
    two_of_five = [CompletionRecord(d, "gym", i < 2, 0) for i, d in enumerate(days)]
    assert not any(i.id == "struggle-gym" for i in generate_insights(two_of_five, routines, TODAY))
    one_of_five = [CompletionRecord(d, "gym", i < 1, 0) for i, d in enumerate(days)]
    assert any(i.id == "struggle-gym" for i in generate_insights(one_of_five, routines, TODAY))


def test_cap_drops_high_performer(monkeypatch):
    routines = _routines(10)
    completions = []
    for day in last_n_days(30, TODAY):
        done = 7 if is_weekend(day) else 9
        completions.extend(CompletionRecord(day, f"r{i}", i < done, 0) for i in range(10))

    insights = generate_insights(completions, routines, TODAY)
    assert [i.id for i in insights] == ["weekend-drop", "best-day", "struggle-r9"]

    monkeypatch.setattr(insights_module, "MAX_INSIGHTS", 4)
    insights = generate_insights(completions, routines, TODAY)
    assert insights[-1].id == "high-performer"
