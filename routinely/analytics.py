"""Daily statistics and the cached analytics snapshot.

Builds the numbers behind the dashboards (today's progress, the weekly bar
chart, the 28-day heatmap) on top of the streak and insight engines, and
caches the combined snapshot in analytics.json.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Sequence

from routinely.dates import last_n_days
from routinely.fileio import read_json, write_json_atomic
from routinely.hooks import run_hooks
from routinely.insights import generate_insights
from routinely.models import (
    AnalyticsSnapshot,
    CompletionRecord,
    DayStats,
    RoutineItem,
    TodaySummary,
)
from routinely.store import RoutineStore
from routinely.streaks import calculate_streaks, completed_by_date
from routinely.timeutils import format_time_range, sort_key
from routinely.workspace import analytics_path, now_local, workspace_root

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
HEATMAP_DAYS = 28


# ── Daily statistics ──────────────────────────────────────────


def status_text(percentage: int) -> str:
    if percentage >= 80:
        return "Great work!"
    if percentage >= 50:
        return "Almost there"
    if percentage >= 25:
        return "Good start"
    return "Keep going!"


def today_items(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date,
) -> list[dict[str, Any]]:
    """Routines sorted by start time, each flagged with today's completion."""
    day = today.isoformat()
    done = {c.routine_id: c.completed for c in completions if c.date == day}
    items = []
    for r in sorted(routines, key=sort_key):
        item = r.to_dict()
        item["isCompleted"] = done.get(r.id, False)
        item["timeRange"] = format_time_range(r.start_time, r.end_time)
        items.append(item)
    return items


def today_summary(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date,
) -> TodaySummary:
    items = today_items(completions, routines, today)
    completed = sum(1 for i in items if i["isCompleted"])
    total = len(routines)
    pct = int(completed / total * 100 + 0.5) if total > 0 else 0
    return TodaySummary(
        date=today.isoformat(),
        completed=completed,
        total=total,
        percentage=pct,
        status_text=status_text(pct),
        items=items,
    )


def day_stats(
    days: Sequence[str],
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
) -> list[DayStats]:
    counts = completed_by_date(completions)
    total = len(routines)
    return [
        DayStats(
            date=d,
            completed=counts.get(d, 0),
            total=total,
            percentage=counts.get(d, 0) / total if total > 0 else 0.0,
        )
        for d in days
    ]


def weekly_stats(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date,
) -> list[DayStats]:
    """Per-day stats for the last 7 days, oldest first."""
    return day_stats(last_n_days(WEEK_DAYS, today), completions, routines)


def heatmap(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date,
) -> list[float]:
    """Daily completion rates for the last 28 days, oldest first."""
    return [s.percentage for s in day_stats(last_n_days(HEATMAP_DAYS, today), completions, routines)]


def build_snapshot(
    completions: Sequence[CompletionRecord],
    routines: Sequence[RoutineItem],
    today: date,
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    """Everything the analytics dashboard shows, computed in one pass."""
    return AnalyticsSnapshot(
        generated_at=(now or datetime.now()).isoformat(timespec="seconds"),
        today=today_summary(completions, routines, today),
        streaks=calculate_streaks(completions, routines, today),
        weekly=weekly_stats(completions, routines, today),
        heatmap=heatmap(completions, routines, today),
        insights=generate_insights(completions, routines, today),
    )


# ── Storage & Refresh ─────────────────────────────────────────


def refresh_analytics(root: Path | None = None) -> AnalyticsSnapshot:
    """Recompute analytics from the store and save to analytics.json."""
    if root is None:
        root = workspace_root()

    store = RoutineStore.load(root)
    now = now_local(root)
    snapshot = build_snapshot(store.completions, store.routines, now.date(), now)
    write_json_atomic(analytics_path(root), snapshot.to_dict())
    logger.debug(
        "Refreshed analytics: streak %d/%d, %d insights",
        snapshot.streaks.current_streak,
        snapshot.streaks.best_streak,
        len(snapshot.insights),
    )
    run_hooks("post_analytics_refresh", {"analytics": snapshot.to_dict()}, root)
    return snapshot


def load_analytics(root: Path | None = None) -> AnalyticsSnapshot | None:
    """Load cached analytics from analytics.json."""
    data = read_json(analytics_path(root))
    if not data:
        return None
    return AnalyticsSnapshot.from_dict(data)
