from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Naive local wall-clock time."""

    return datetime.now()


def date_key(value: date | datetime) -> str:
    """Return the zero-padded local calendar day ``YYYY-MM-DD``."""

    if isinstance(value, datetime):
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date_key(key: str) -> date:
    return date.fromisoformat(key)


def add_days(value: date | datetime, days: int) -> date:
    """Shift a calendar day by ``days`` without any timezone conversion."""

    if isinstance(value, datetime):
        value = value.date()
    return value + timedelta(days=days)


__all__ = ["Clock", "add_days", "date_key", "local_now", "parse_date_key"]
