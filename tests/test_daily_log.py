from __future__ import annotations

from datetime import date, timedelta

from ecolife_coach.clock import date_key
from ecolife_coach.daily_log import day_completed, prune_log, record_today

TODAY = date(2024, 3, 10)


def test_record_today_sets_value_without_mutating_input() -> None:
    log = {"2024-03-09": True}

    updated = record_today(log, True, TODAY)

    assert updated == {"2024-03-09": True, "2024-03-10": True}
    assert log == {"2024-03-09": True}


def test_record_today_keeps_only_retention_window() -> None:
    log = {date_key(TODAY - timedelta(days=offset)): True for offset in range(1, 90)}

    updated = record_today(log, False, TODAY, keep_days=60)

    assert len(updated) <= 60
    assert date_key(TODAY - timedelta(days=59)) in updated
    assert date_key(TODAY - timedelta(days=60)) not in updated
    assert updated[date_key(TODAY)] is False


def test_prune_drops_future_and_malformed_keys() -> None:
    log = {"2024-03-11": True, "garbage": True, "2024-03-10": True}

    assert prune_log(log, TODAY, keep_days=7) == {"2024-03-10": True}


def test_day_completed_uses_threshold() -> None:
    assert day_completed(0, 1) is False
    assert day_completed(1, 1) is True
    assert day_completed(2, 3) is False
