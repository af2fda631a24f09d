from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ecolife_coach.constants import ENTRIES_LIMIT, cap_list_head
from ecolife_coach.models import DayEntry, DayTotals, SnapshotAction, Task
from ecolife_coach.tasks import snapshot_tasks


def build_day_entry(
    *,
    day: str,
    timestamp: datetime,
    health: Sequence[Task],
    eco: Sequence[Task],
    base_points: int,
    action: Optional[SnapshotAction] = None,
) -> DayEntry:
    """Freeze both sections into a DayEntry.

    Callers pass the acting section's tasks as of the triggering action and the
    other section's current tasks, so one entry shows the whole day.
    """

    health_completed = sum(1 for task in health if task.completed)
    eco_completed = sum(1 for task in eco if task.completed)
    earned = sum(task.points for task in health if task.completed) + sum(
        task.points for task in eco if task.completed
    )
    totals = DayTotals(
        points=base_points + earned,
        completed_count=health_completed + eco_completed,
        health_completed=health_completed,
        eco_completed=eco_completed,
    )
    return DayEntry(
        date=day,
        timestamp=timestamp,
        totals=totals,
        health=snapshot_tasks(health),
        eco=snapshot_tasks(eco),
        action=action,
    )


class SnapshotHistory:
    """Newest-first, capped log of DayEntry snapshots."""

    def __init__(self, entries: Iterable[DayEntry] = (), *, limit: int = ENTRIES_LIMIT) -> None:
        self.limit = limit
        self._entries: tuple[DayEntry, ...] = tuple(cap_list_head(list(entries), limit))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[DayEntry, ...]:
        return self._entries

    def append(self, entry: DayEntry) -> DayEntry:
        self._entries = tuple(cap_list_head([entry, *self._entries], self.limit))
        return entry

    def replace(self, entries: Iterable[DayEntry]) -> None:
        self._entries = tuple(cap_list_head(list(entries), self.limit))


__all__ = ["SnapshotHistory", "build_day_entry"]
