"""Logical storage keys and engine defaults."""

from __future__ import annotations

from typing import Sequence, TypeVar

KEY_HEALTH_TASKS: str = "health-tasks"
KEY_ECO_TASKS: str = "eco-tasks"
KEY_DAILY_LOG: str = "daily-log"
KEY_LAST_OPEN_DAY: str = "last-open-day"
KEY_RECENT_HEALTH: str = "recent-health"
KEY_RECENT_ECO: str = "recent-eco"
KEY_MODE_HEALTH: str = "mode-health"
KEY_MODE_ECO: str = "mode-eco"
KEY_ENTRIES_HISTORY: str = "entries-history"
KEY_NOTIFICATIONS: str = "notifications"

DEFAULT_NAMESPACE: str = "ecolife"
BASE_POINTS: int = 240
KEEP_DAYS: int = 60
ENTRIES_LIMIT: int = 180
RECENT_LIMIT: int = 5
COMPLETION_THRESHOLD: int = 1
NOTIFICATIONS_LIMIT: int = 50

ROLLOVER_ACTION: str = "rollover"

SS_ENGINE: str = "ecolife_engine"
SS_NOTIFICATIONS: str = "ecolife_notifications"

T = TypeVar("T")


def cap_list_head(items: Sequence[T], limit: int) -> list[T]:
    """Keep the first ``limit`` items of a newest-first list."""

    if limit <= 0:
        return []
    return list(items[:limit])
