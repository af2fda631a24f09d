from __future__ import annotations

from datetime import date, datetime
from typing import Mapping

from ecolife_coach.clock import add_days, date_key
from ecolife_coach.constants import KEEP_DAYS


def retained_keys(today: date | datetime, keep_days: int = KEEP_DAYS) -> set[str]:
    """Day keys of the ``keep_days`` calendar days ending at ``today``."""

    return {date_key(add_days(today, -offset)) for offset in range(max(0, keep_days))}


def prune_log(log: Mapping[str, bool], today: date | datetime, keep_days: int = KEEP_DAYS) -> dict[str, bool]:
    window = retained_keys(today, keep_days)
    return {key: bool(value) for key, value in log.items() if key in window}


def record_today(
    log: Mapping[str, bool],
    completed_today: bool,
    today: date | datetime,
    keep_days: int = KEEP_DAYS,
) -> dict[str, bool]:
    """Return a copy of ``log`` with today's outcome set and old days dropped."""

    updated = dict(log)
    updated[date_key(today)] = bool(completed_today)
    return prune_log(updated, today, keep_days)


def day_completed(completed_count: int, threshold: int) -> bool:
    return completed_count >= threshold


__all__ = ["day_completed", "prune_log", "record_today", "retained_keys"]
