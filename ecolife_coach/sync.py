"""Message passing between engine instances.

Two channels mirror how browser tabs talk to each other: ``storage`` messages
reach every *other* context after a durable write, ``local`` messages reach the
sibling instances mounted in the *same* context. Messages are queued per
subscriber and applied when the subscriber drains its inbox, so a context only
ever mutates its own state on its own turn.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

LOGGER = logging.getLogger(__name__)


class SyncChannel(str, Enum):
    STORAGE = "storage"
    LOCAL = "local"


class SyncMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: SyncChannel
    key: str
    value: Optional[str] = None
    origin_context: str
    origin_instance: str


class SyncSubscription:
    """Inbox of one engine instance."""

    def __init__(self, hub: "SyncHub", context_id: str) -> None:
        self.hub = hub
        self.context_id = context_id
        self.instance_id = uuid4().hex
        self._inbox: deque[SyncMessage] = deque()
        self.closed = False

    def deliver(self, message: SyncMessage) -> None:
        if not self.closed:
            self._inbox.append(message)

    def drain(self) -> list[SyncMessage]:
        messages: list[SyncMessage] = []
        while self._inbox:
            messages.append(self._inbox.popleft())
        return messages

    def pending(self) -> int:
        return len(self._inbox)

    def close(self) -> None:
        self.closed = True
        self._inbox.clear()
        self.hub.unsubscribe(self)


class SyncHub:
    """Process-wide router for sync messages."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[SyncSubscription] = []

    def subscribe(self, context_id: str) -> SyncSubscription:
        subscription = SyncSubscription(self, context_id)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: SyncSubscription) -> None:
        with self._lock:
            self._subscriptions = [item for item in self._subscriptions if item is not subscription]

    def _targets(self) -> list[SyncSubscription]:
        with self._lock:
            return list(self._subscriptions)

    def publish_storage(self, *, origin: SyncSubscription, key: str, value: Optional[str]) -> int:
        """Notify every other context that ``key`` now holds ``value``."""

        message = SyncMessage(
            channel=SyncChannel.STORAGE,
            key=key,
            value=value,
            origin_context=origin.context_id,
            origin_instance=origin.instance_id,
        )
        return self.inject(message)

    def broadcast_local(self, *, origin: SyncSubscription, key: str, value: Optional[str]) -> int:
        """Tell sibling instances of the same context about an explicit state replacement."""

        message = SyncMessage(
            channel=SyncChannel.LOCAL,
            key=key,
            value=value,
            origin_context=origin.context_id,
            origin_instance=origin.instance_id,
        )
        return self.inject(message)

    def inject(self, message: SyncMessage) -> int:
        """Queue ``message`` in every inbox its channel addresses. Also used to inject synthetic messages."""

        delivered = 0
        for subscription in self._targets():
            if message.channel is SyncChannel.STORAGE and subscription.context_id == message.origin_context:
                continue
            if message.channel is SyncChannel.LOCAL and (
                subscription.context_id != message.origin_context
                or subscription.instance_id == message.origin_instance
            ):
                continue
            subscription.deliver(message)
            delivered += 1
        LOGGER.debug("Routed %s message for %s into %d inboxes", message.channel.value, message.key, delivered)
        return delivered


__all__ = ["SyncChannel", "SyncHub", "SyncMessage", "SyncSubscription"]
