"""Bind one engine to each Streamlit session.

Every browser tab of the app is its own Streamlit session; the storage backend
and the sync hub are process-wide so sessions see each other's writes.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from ecolife_coach.config import EngineConfig
from ecolife_coach.constants import SS_ENGINE, SS_NOTIFICATIONS
from ecolife_coach.engine import TaskEngine, create_engine
from ecolife_coach.notifications import NotificationCenter
from ecolife_coach.storage import FileStorageBackend, StorageBackend
from ecolife_coach.sync import SyncHub


@st.cache_resource
def get_sync_hub() -> SyncHub:
    return SyncHub()


@st.cache_resource
def get_storage_backend() -> FileStorageBackend:
    return FileStorageBackend()


@st.cache_resource
def get_engine_config() -> EngineConfig:
    return EngineConfig.from_env()


def get_engine(
    *,
    config: Optional[EngineConfig] = None,
    storage: Optional[StorageBackend] = None,
    hub: Optional[SyncHub] = None,
) -> TaskEngine:
    """Return this session's engine, mounting it on first use."""

    engine = st.session_state.get(SS_ENGINE)
    if isinstance(engine, TaskEngine):
        engine.sync()
        return engine

    engine = create_engine(
        config or get_engine_config(),
        storage or get_storage_backend(),
        hub or get_sync_hub(),
    )
    st.session_state[SS_ENGINE] = engine
    st.session_state[SS_NOTIFICATIONS] = NotificationCenter.for_engine(engine)
    return engine


def get_notification_center() -> NotificationCenter:
    engine = get_engine()
    center = st.session_state.get(SS_NOTIFICATIONS)
    if not isinstance(center, NotificationCenter):
        center = NotificationCenter.for_engine(engine)
        st.session_state[SS_NOTIFICATIONS] = center
    return center


def reset_engine() -> None:
    """Unmount and forget this session's engine; the next call mounts a fresh one."""

    engine = st.session_state.get(SS_ENGINE)
    if isinstance(engine, TaskEngine):
        engine.unmount()
    for key in (SS_ENGINE, SS_NOTIFICATIONS):
        if key in st.session_state:
            del st.session_state[key]


__all__ = ["get_engine", "get_notification_center", "get_storage_backend", "get_sync_hub", "reset_engine"]
