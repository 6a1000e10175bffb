"""Calendar helpers shared by the analytics engine and the UIs."""

from __future__ import annotations

from datetime import date, timedelta

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_ABBRS = ["S", "M", "T", "W", "T", "F", "S"]
MONTH_ABBRS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def parse_date(s: str) -> date:
    """Parse 'YYYY-MM-DD'. Raises ValueError on anything else."""
    return date.fromisoformat(s)


def last_n_days(n: int, today: date) -> list[str]:
    """ISO dates for the last *n* days, oldest first, inclusive of *today*."""
    return [(today - timedelta(days=i)).isoformat() for i in range(n - 1, -1, -1)]


def day_index(d: date | str) -> int:
    """Day of week with Sunday = 0 .. Saturday = 6."""
    if isinstance(d, str):
        d = parse_date(d)
    return (d.weekday() + 1) % 7


def is_weekend(d: date | str) -> bool:
    return day_index(d) in (0, 6)


def day_abbr(d: date | str) -> str:
    return DAY_ABBRS[day_index(d)]


def format_date_display(d: date) -> str:
    """'Tuesday, Nov 14'."""
    return f"{DAY_NAMES[day_index(d)]}, {MONTH_ABBRS[d.month - 1]} {d.day}"


def greeting(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def is_iso_date(value: object) -> bool:
    """True only for a canonical 'YYYY-MM-DD' string."""
    if not isinstance(value, str):
        return False
    try:
        return parse_date(value).isoformat() == value
    except ValueError:
        return False
