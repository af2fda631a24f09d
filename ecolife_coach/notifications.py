from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ecolife_coach.clock import Clock, local_now
from ecolife_coach.constants import KEY_NOTIFICATIONS, NOTIFICATIONS_LIMIT, cap_list_head
from ecolife_coach.engine import TaskEngine
from ecolife_coach.models import CompletionNotice, NotificationItem
from ecolife_coach.persistence import PersistenceBridge, parse_notifications


def default_notifications(now: datetime) -> list[NotificationItem]:
    return [
        NotificationItem(
            id="n-1",
            title="Streak alive!",
            description="Nice work, you completed at least one task today. +25 pts",
            timestamp=now,
            level="success",
        ),
        NotificationItem(
            id="n-2",
            title="New eco tip",
            description="Try a 5-minute shower to save water and energy.",
            timestamp=now - timedelta(minutes=45),
            level="info",
        ),
    ]


class NotificationCenter:
    """Persisted, newest-first inbox fed by engine completion notices."""

    def __init__(
        self,
        persistence: PersistenceBridge,
        *,
        limit: int = NOTIFICATIONS_LIMIT,
        clock: Optional[Clock] = None,
    ) -> None:
        self.persistence = persistence
        self.limit = limit
        self.clock: Clock = clock or local_now
        self.items: list[NotificationItem] = cap_list_head(
            persistence.load(KEY_NOTIFICATIONS, parse_notifications, default_notifications(self.clock())),
            limit,
        )

    @classmethod
    def for_engine(cls, engine: TaskEngine) -> "NotificationCenter":
        """Create a center sharing the engine's storage and subscribe it to completion notices."""

        center = cls(engine.persistence, limit=engine.config.notifications_limit, clock=engine.clock)
        engine.add_listener(center.push)
        return center

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.items if item.unread)

    def push(self, notice: CompletionNotice) -> NotificationItem:
        item = NotificationItem(
            title=notice.title or "Notification",
            description=notice.description or None,
            timestamp=self.clock(),
            href=notice.href,
            level=notice.level,
        )
        self.items = cap_list_head([item, *self.items], self.limit)
        self._save()
        return item

    def mark_read(self, notification_id: str) -> bool:
        for index, item in enumerate(self.items):
            if item.id != notification_id:
                continue
            if item.unread:
                self.items[index] = item.model_copy(update={"unread": False})
                self._save()
            return True
        return False

    def mark_all_read(self) -> None:
        if not self.unread_count:
            return
        self.items = [item.model_copy(update={"unread": False}) for item in self.items]
        self._save()

    def _save(self) -> None:
        self.persistence.save(KEY_NOTIFICATIONS, [item.model_dump(mode="json") for item in self.items])


__all__ = ["NotificationCenter", "default_notifications"]
