from __future__ import annotations

from ecolife_coach.sync import SyncChannel, SyncHub, SyncMessage


def test_storage_messages_reach_other_contexts_only() -> None:
    hub = SyncHub()
    sender = hub.subscribe("tab-a")
    sibling = hub.subscribe("tab-a")
    other_tab = hub.subscribe("tab-b")

    delivered = hub.publish_storage(origin=sender, key="ecolife:daily-log", value="{}")

    assert delivered == 1
    assert sender.pending() == 0
    assert sibling.pending() == 0
    [message] = other_tab.drain()
    assert message.channel is SyncChannel.STORAGE
    assert message.origin_context == "tab-a"
    assert other_tab.pending() == 0


def test_local_messages_reach_siblings_in_same_context_only() -> None:
    hub = SyncHub()
    sender = hub.subscribe("tab-a")
    sibling = hub.subscribe("tab-a")
    other_tab = hub.subscribe("tab-b")

    delivered = hub.broadcast_local(origin=sender, key="ecolife:eco-tasks", value="[]")

    assert delivered == 1
    assert sender.pending() == 0
    assert other_tab.pending() == 0
    assert sibling.drain()[0].channel is SyncChannel.LOCAL


def test_closed_subscription_receives_nothing() -> None:
    hub = SyncHub()
    sender = hub.subscribe("tab-a")
    receiver = hub.subscribe("tab-b")
    hub.publish_storage(origin=sender, key="k", value="1")

    receiver.close()

    assert receiver.pending() == 0
    assert hub.publish_storage(origin=sender, key="k", value="2") == 0


def test_inject_routes_synthetic_messages() -> None:
    hub = SyncHub()
    receiver = hub.subscribe("tab-b")
    message = SyncMessage(
        channel=SyncChannel.STORAGE,
        key="ecolife:daily-log",
        value=None,
        origin_context="elsewhere",
        origin_instance="manual",
    )

    assert hub.inject(message) == 1
    assert receiver.drain() == [message]
