from __future__ import annotations

from datetime import datetime

from ecolife_coach.board import DashboardState
from ecolife_coach.catalog import ECO_CATALOG, HEALTH_CATALOG, fresh_tasks
from ecolife_coach.constants import ROLLOVER_ACTION
from ecolife_coach.history import SnapshotHistory
from ecolife_coach.models import Section, ViewMode
from ecolife_coach.navigation import NavigationCursor
from ecolife_coach.rollover import RolloverManager, RolloverOutcome
from ecolife_coach.tasks import TaskCollection

NOW = datetime(2024, 3, 11, 8, 0)


def _state(last_open_day: str | None) -> DashboardState:
    state = DashboardState(
        collections={
            Section.HEALTH: TaskCollection(Section.HEALTH, fresh_tasks(HEALTH_CATALOG)),
            Section.ECO: TaskCollection(Section.ECO, fresh_tasks(ECO_CATALOG)),
        },
        cursors={section: NavigationCursor(ViewMode.BROWSE, index=3) for section in Section},
        recent={Section.HEALTH: ["walk-30-minutes"], Section.ECO: []},
        history=SnapshotHistory(limit=10),
        last_open_day=last_open_day,
    )
    state.collection(Section.HEALTH).toggle(2)
    state.collection(Section.ECO).toggle(0)
    return state


def test_decide_outcomes() -> None:
    manager = RolloverManager(base_points=240)

    assert manager.decide(None, "2024-03-11") is RolloverOutcome.FIRST_RUN
    assert manager.decide("2024-03-11", "2024-03-11") is RolloverOutcome.RESUMED
    assert manager.decide("2024-03-10", "2024-03-11") is RolloverOutcome.ROLLED_OVER
    assert manager.decide("2024-03-12", "2024-03-11") is RolloverOutcome.ROLLED_OVER


def test_rollover_snapshots_previous_day_and_resets() -> None:
    state = _state("2024-03-10")
    manager = RolloverManager(base_points=240)

    outcome = manager.run(state, today="2024-03-11", now=NOW)

    assert outcome is RolloverOutcome.ROLLED_OVER
    entry = manager.snapshot
    assert entry is not None
    assert entry.date == "2024-03-10"
    assert entry.timestamp == NOW
    assert entry.action is not None and entry.action.section == ROLLOVER_ACTION
    assert entry.totals.points == 240 + 25 + 20
    assert entry.totals.completed_count == 2
    assert state.history.entries == (entry,)

    assert state.completed_total() == 0
    assert all(state.cursor(section).index == 0 for section in Section)
    assert state.recent[Section.HEALTH] == []
    assert state.last_open_day == "2024-03-11"


def test_same_day_keeps_state() -> None:
    state = _state("2024-03-11")
    manager = RolloverManager(base_points=240)

    assert manager.run(state, today="2024-03-11", now=NOW) is RolloverOutcome.RESUMED
    assert manager.snapshot is None
    assert state.completed_total() == 2
    assert len(state.history) == 0


def test_first_run_records_day_without_snapshot() -> None:
    state = _state(None)
    manager = RolloverManager(base_points=240)

    assert manager.run(state, today="2024-03-11", now=NOW) is RolloverOutcome.FIRST_RUN
    assert manager.snapshot is None
    assert state.last_open_day == "2024-03-11"
