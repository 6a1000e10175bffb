"""Typed dataclasses for the Routinely data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


ALL_DAY = "All Day"


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = "UTC"
    user_name: str = "there"
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone") or "UTC"),
            user_name=str(d.get("user_name") or "there"),
            log_level=str(d.get("log_level") or "WARNING").upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "user_name": self.user_name,
            "log_level": self.log_level,
        }


# ── Routines ──────────────────────────────────────────────────


@dataclass
class RoutineItem:
    """Routine template: the blueprint for a recurring daily task."""

    id: str = ""
    title: str = ""
    start_time: str = "00:00"
    end_time: str = ""
    category: str = "Work"
    required: bool = True
    order: int = 0

    @property
    def is_all_day(self) -> bool:
        return self.start_time == ALL_DAY

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> RoutineItem:
        return cls(
            id=str(d.get("id", d.get("routineId", ""))),
            title=str(d.get("title", "")),
            start_time=str(d.get("startTime", d.get("start_time", "00:00")) or "00:00"),
            end_time=str(d.get("endTime", d.get("end_time", "")) or ""),
            category=str(d.get("category", "Work")),
            required=bool(d.get("required", True)),
            order=int(d.get("order", 0) or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "category": self.category,
            "required": self.required,
            "order": self.order,
        }


@dataclass
class CompletionRecord:
    """One routine on one day. At most one record per (date, routine_id)."""

    date: str = ""
    routine_id: str = ""
    completed: bool = False
    timestamp: int = 0  # epoch ms of the last toggle

    @property
    def key(self) -> tuple[str, str]:
        return (self.date, self.routine_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CompletionRecord:
        return cls(
            date=str(d.get("date", "")),
            routine_id=str(d.get("routineId", d.get("routine_id", ""))),
            completed=bool(d.get("completed", False)),
            timestamp=int(d.get("timestamp", 0) or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "routineId": self.routine_id,
            "completed": self.completed,
            "timestamp": self.timestamp,
        }


# ── Analytics ─────────────────────────────────────────────────


@dataclass
class Insight:
    id: str = ""
    icon: str = ""
    title: str = ""
    description: str = ""
    type: str = "info"  # warning, info
    category: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "icon": self.icon,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "category": self.category,
        }


@dataclass
class StreakData:
    current_streak: int = 0
    best_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"currentStreak": self.current_streak, "bestStreak": self.best_streak}


@dataclass
class DayStats:
    date: str = ""
    completed: int = 0
    total: int = 0
    percentage: float = 0.0  # 0..1

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "completed": self.completed,
            "total": self.total,
            "percentage": round(self.percentage, 3),
        }


@dataclass
class TodaySummary:
    date: str = ""
    completed: int = 0
    total: int = 0
    percentage: int = 0  # 0..100
    status_text: str = "Keep going!"
    items: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
            "statusText": self.status_text,
            "items": self.items,
        }


@dataclass
class AnalyticsSnapshot:
    generated_at: str = ""
    today: TodaySummary = field(default_factory=TodaySummary)
    streaks: StreakData = field(default_factory=StreakData)
    weekly: list[DayStats] = field(default_factory=list)
    heatmap: list[float] = field(default_factory=list)
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "today": self.today.to_dict(),
            "streaks": self.streaks.to_dict(),
            "weekly": [d.to_dict() for d in self.weekly],
            "heatmap": [round(r, 3) for r in self.heatmap],
            "insights": [i.to_dict() for i in self.insights],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AnalyticsSnapshot:
        if not d or not isinstance(d, dict):
            return cls()
        today = d.get("today") or {}
        streaks = d.get("streaks") or {}
        return cls(
            generated_at=str(d.get("generatedAt", "")),
            today=TodaySummary(
                date=str(today.get("date", "")),
                completed=int(today.get("completed", 0)),
                total=int(today.get("total", 0)),
                percentage=int(today.get("percentage", 0)),
                status_text=str(today.get("statusText", "Keep going!")),
                items=list(today.get("items") or []),
            ),
            streaks=StreakData(
                current_streak=int(streaks.get("currentStreak", 0)),
                best_streak=int(streaks.get("bestStreak", 0)),
            ),
            weekly=[
                DayStats(
                    date=str(w.get("date", "")),
                    completed=int(w.get("completed", 0)),
                    total=int(w.get("total", 0)),
                    percentage=float(w.get("percentage", 0.0)),
                )
                for w in (d.get("weekly") or [])
            ],
            heatmap=[float(r) for r in (d.get("heatmap") or [])],
            insights=[
                Insight(
                    id=str(i.get("id", "")),
                    icon=str(i.get("icon", "")),
                    title=str(i.get("title", "")),
                    description=str(i.get("description", "")),
                    type=str(i.get("type", "info")),
                    category=str(i.get("category", "")),
                )
                for i in (d.get("insights") or [])
            ],
        )
