"""Time-of-day conversions between 24h storage and 12h display."""

from __future__ import annotations

import re
from typing import Iterable

from routinely.models import ALL_DAY, RoutineItem

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)


def parse_hhmm(value: str) -> tuple[int, int] | None:
    """Return (hour, minute) for a valid 'HH:MM', else None."""
    m = _HHMM_RE.match((value or "").strip())
    if not m:
        return None
    h, mins = int(m.group(1)), int(m.group(2))
    if h > 23 or mins > 59:
        return None
    return h, mins


def to_12_hour(time24: str) -> str:
    """'14:30' -> '2:30 PM', '06:00' -> '6:00 AM'."""
    if not time24 or time24 == ALL_DAY:
        return time24
    parsed = parse_hhmm(time24)
    if parsed is None:
        return time24
    h, m = parsed
    period = "PM" if h >= 12 else "AM"
    hours12 = 12 if h == 0 else h - 12 if h > 12 else h
    return f"{hours12}:{m:02d} {period}"


def to_24_hour(time12: str) -> str:
    """'2:30 PM' -> '14:30', '12:05 AM' -> '00:05'."""
    if not time12 or time12 == ALL_DAY:
        return time12
    m = _12H_RE.match(time12.strip())
    if not m:
        return time12
    h = int(m.group(1))
    mins = int(m.group(2))
    period = m.group(3).upper()
    if not 1 <= h <= 12 or mins > 59:
        return time12
    if period == "PM" and h != 12:
        h += 12
    if period == "AM" and h == 12:
        h = 0
    return f"{h:02d}:{mins:02d}"


def format_time_range(start_time: str, end_time: str) -> str:
    """'6:00 AM - 7:15 AM'; just the start when there is no end."""
    start = to_12_hour(start_time)
    if not end_time:
        return start
    return f"{start} - {to_12_hour(end_time)}"


def duration_minutes(start_time: str, end_time: str) -> int:
    """Minutes between two 'HH:MM' values; 0 for all-day or malformed input."""
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start is None or end is None:
        return 0
    return max(0, (end[0] * 60 + end[1]) - (start[0] * 60 + start[1]))


def total_scheduled_minutes(routines: Iterable[RoutineItem]) -> int:
    return sum(
        duration_minutes(r.start_time, r.end_time)
        for r in routines
        if not r.is_all_day and r.end_time
    )


def format_duration(minutes: int) -> str:
    hours, mins = divmod(max(0, minutes), 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def sort_key(routine: RoutineItem) -> str:
    """Order routines by start time; 'All Day' sorts after the clock times."""
    return routine.start_time.replace(":", "")
