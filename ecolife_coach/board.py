from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ecolife_coach.history import SnapshotHistory
from ecolife_coach.models import Section
from ecolife_coach.navigation import NavigationCursor
from ecolife_coach.tasks import TaskCollection


@dataclass
class DashboardState:
    """In-memory state owned by one engine instance."""

    collections: dict[Section, TaskCollection]
    cursors: dict[Section, NavigationCursor]
    recent: dict[Section, list[str]]
    history: SnapshotHistory
    daily_log: dict[str, bool] = field(default_factory=dict)
    last_open_day: Optional[str] = None

    def collection(self, section: Section) -> TaskCollection:
        return self.collections[section]

    def cursor(self, section: Section) -> NavigationCursor:
        return self.cursors[section]

    def other(self, section: Section) -> Section:
        return Section.ECO if section is Section.HEALTH else Section.HEALTH

    def completed_total(self) -> int:
        return sum(collection.completed_count() for collection in self.collections.values())


__all__ = ["DashboardState"]
