from datetime import date, timedelta

from ..config import DATE_FORMAT


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (end - start).days


def is_before(d: date, other: date) -> bool:
    return d < other


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)
