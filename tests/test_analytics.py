"""Tests for routinely/analytics.py: daily stats and the cached snapshot."""

import json
from datetime import date, datetime

from routinely.analytics import (
    build_snapshot,
    heatmap,
    load_analytics,
    refresh_analytics,
    status_text,
    today_summary,
    weekly_stats,
)
from routinely.models import CompletionRecord, RoutineItem

TODAY = date(2026, 3, 15)

ROUTINES = [
    RoutineItem(id="late", title="Evening Walk", start_time="18:00", end_time="18:45", order=0),
    RoutineItem(id="early", title="Morning Meditation", start_time="06:00", end_time="06:15", order=1),
]


def test_status_text_bands():
    assert status_text(100) == "Great work!"
    assert status_text(80) == "Great work!"
    assert status_text(50) == "Almost there"
    assert status_text(25) == "Good start"
    assert status_text(0) == "Keep going!"


def test_today_summary():
    completions = [
        CompletionRecord("2026-03-15", "early", True, 1),
        CompletionRecord("2026-03-15", "late", False, 2),
        CompletionRecord("2026-03-14", "late", True, 3),
    ]
    summary = today_summary(completions, ROUTINES, TODAY)
    assert summary.completed == 1
    assert summary.total == 2
    assert summary.percentage == 50
    assert summary.status_text == "Almost there"
    assert [i["id"] for i in summary.items] == ["early", "late"]
    assert summary.items[0]["isCompleted"] is True
    assert summary.items[0]["timeRange"] == "6:00 AM - 6:15 AM"


def test_today_summary_no_routines():
    summary = today_summary([], [], TODAY)
    assert summary.percentage == 0
    assert summary.items == []


def test_weekly_and_heatmap_windows():
    completions = [CompletionRecord("2026-03-09", "early", True, 0)]
    weekly = weekly_stats(completions, ROUTINES, TODAY)
    assert [d.date for d in weekly][0] == "2026-03-09"
    assert weekly[-1].date == "2026-03-15"
    assert weekly[0].percentage == 0.5
    assert weekly[0].to_dict()["completed"] == 1

    cells = heatmap(completions, ROUTINES, TODAY)
    assert len(cells) == 28
    assert cells[-7] == 0.5
    assert cells[-1] == 0.0


def test_build_snapshot_to_dict():
    completions = [CompletionRecord("2026-03-15", r.id, True, 0) for r in ROUTINES]
    snap = build_snapshot(completions, ROUTINES, TODAY, datetime(2026, 3, 15, 9, 30))
    data = snap.to_dict()
    assert data["generatedAt"] == "2026-03-15T09:30:00"
    assert data["today"]["percentage"] == 100
    assert data["streaks"] == {"currentStreak": 1, "bestStreak": 1}
    assert len(data["weekly"]) == 7
    assert len(data["heatmap"]) == 28
    assert len(data["insights"]) <= 3


def test_refresh_writes_cache(workspace):
    snap = refresh_analytics(workspace)
    cached = json.loads((workspace / "analytics.json").read_text(encoding="utf-8"))
    assert cached["today"]["total"] == 2
    loaded = load_analytics(workspace)
    assert loaded is not None
    assert loaded.streaks == snap.streaks
    assert loaded.today.total == 2


def test_load_analytics_missing(workspace):
    assert load_analytics(workspace) is None
