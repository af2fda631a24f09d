from __future__ import annotations

from datetime import date, datetime
from typing import Mapping

from ecolife_coach.clock import add_days, date_key


def compute_streak(log: Mapping[str, bool], today: date | datetime) -> int:
    """Count consecutive qualifying days ending today or, if today is still open, yesterday.

    An unfinished today neither counts nor breaks the streak.
    """

    cursor = today.date() if isinstance(today, datetime) else today
    streak = 0
    if log.get(date_key(cursor)) is True:
        streak += 1
    cursor = add_days(cursor, -1)

    while log.get(date_key(cursor)) is True:
        streak += 1
        cursor = add_days(cursor, -1)
    return streak


__all__ = ["compute_streak"]
