from __future__ import annotations

import streamlit as st

from ecolife_coach.config import EngineConfig
from ecolife_coach.constants import SS_ENGINE, SS_NOTIFICATIONS
from ecolife_coach.models import Section
from ecolife_coach.notifications import NotificationCenter
from ecolife_coach.state import get_engine, get_notification_center, reset_engine


def test_engine_is_created_once_per_session(session_state, storage, hub) -> None:
    engine = get_engine(config=EngineConfig(), storage=storage, hub=hub)

    assert session_state[SS_ENGINE] is engine
    assert isinstance(session_state[SS_NOTIFICATIONS], NotificationCenter)
    assert get_engine(config=EngineConfig(), storage=storage, hub=hub) is engine
    assert get_notification_center() is session_state[SS_NOTIFICATIONS]


def test_sessions_share_storage_and_hub(session_state, monkeypatch, storage, hub) -> None:
    first = get_engine(config=EngineConfig(), storage=storage, hub=hub)

    other_session: dict[str, object] = {}
    monkeypatch.setattr(st, "session_state", other_session)
    second = get_engine(config=EngineConfig(), storage=storage, hub=hub)
    assert second is not first

    first.toggle(Section.ECO, 0)
    assert get_engine(config=EngineConfig(), storage=storage, hub=hub).completed_count(Section.ECO) == 1


def test_reset_engine_unmounts(session_state, storage, hub) -> None:
    engine = get_engine(config=EngineConfig(), storage=storage, hub=hub)

    reset_engine()

    assert SS_ENGINE not in session_state
    assert SS_NOTIFICATIONS not in session_state
    assert engine.sync() == 0
    assert get_engine(config=EngineConfig(), storage=storage, hub=hub) is not engine
