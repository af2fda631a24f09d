from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict

import pytest
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ecolife_coach.config import EngineConfig  # noqa: E402
from ecolife_coach.engine import TaskEngine  # noqa: E402
from ecolife_coach.storage import MemoryStorageBackend  # noqa: E402
from ecolife_coach.sync import SyncHub  # noqa: E402


class FakeClock:
    """Settable wall clock for engines under test."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture()
def session_state(monkeypatch: pytest.MonkeyPatch) -> Dict[str, object]:
    state: Dict[str, object] = {}
    monkeypatch.setattr(st, "session_state", state, raising=False)
    return state


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 10, 9, 30))


@pytest.fixture()
def storage() -> MemoryStorageBackend:
    return MemoryStorageBackend()


@pytest.fixture()
def hub() -> SyncHub:
    return SyncHub()


@pytest.fixture()
def make_engine(
    storage: MemoryStorageBackend, hub: SyncHub, clock: FakeClock
) -> Callable[..., TaskEngine]:
    def _factory(*, context_id: str = "tab-a", config: EngineConfig | None = None, mount: bool = True) -> TaskEngine:
        engine = TaskEngine(config or EngineConfig(), storage, hub, context_id=context_id, clock=clock)
        if mount:
            engine.mount()
        return engine

    return _factory
