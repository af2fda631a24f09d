from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from ecolife_coach.board import DashboardState
from ecolife_coach.constants import ROLLOVER_ACTION
from ecolife_coach.history import build_day_entry
from ecolife_coach.models import DayEntry, Section, SnapshotAction

LOGGER = logging.getLogger(__name__)


class RolloverOutcome(str, Enum):
    FIRST_RUN = "first_run"
    RESUMED = "resumed"
    ROLLED_OVER = "rolled_over"


class RolloverManager:
    """Decides once per mount whether the stored day is over and resets if so."""

    def __init__(self, *, base_points: int) -> None:
        self.base_points = base_points
        self.snapshot: Optional[DayEntry] = None

    def decide(self, last_open_day: Optional[str], today: str) -> RolloverOutcome:
        if last_open_day is None:
            return RolloverOutcome.FIRST_RUN
        if last_open_day == today:
            return RolloverOutcome.RESUMED
        return RolloverOutcome.ROLLED_OVER

    def run(self, state: DashboardState, *, today: str, now: datetime) -> RolloverOutcome:
        outcome = self.decide(state.last_open_day, today)
        LOGGER.debug("Rollover decision for %s (last open %s): %s", today, state.last_open_day, outcome.value)

        if outcome is RolloverOutcome.ROLLED_OVER:
            previous_day = state.last_open_day or today
            self.snapshot = state.history.append(
                build_day_entry(
                    day=previous_day,
                    timestamp=now,
                    health=state.collection(Section.HEALTH).tasks,
                    eco=state.collection(Section.ECO).tasks,
                    base_points=self.base_points,
                    action=SnapshotAction(section=ROLLOVER_ACTION),
                )
            )
            for section in Section:
                state.collection(section).reset_all()
                state.cursor(section).reset()
                state.recent[section] = []

        state.last_open_day = today
        return outcome


__all__ = ["RolloverManager", "RolloverOutcome"]
