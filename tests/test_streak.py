from __future__ import annotations

from datetime import date

from ecolife_coach.streak import compute_streak

TODAY = date(2024, 3, 10)


def test_streak_counts_today_and_previous_days() -> None:
    log = {"2024-03-10": True, "2024-03-09": True, "2024-03-08": True, "2024-03-06": True}

    assert compute_streak(log, TODAY) == 3


def test_open_today_reports_streak_ending_yesterday() -> None:
    log = {"2024-03-09": True, "2024-03-08": True}

    assert compute_streak(log, TODAY) == 2
    assert compute_streak({**log, "2024-03-10": False}, TODAY) == 2


def test_completing_today_extends_streak_by_one() -> None:
    log = {"2024-03-09": True, "2024-03-08": True}

    assert compute_streak({**log, "2024-03-10": True}, TODAY) == compute_streak(log, TODAY) + 1


def test_false_day_breaks_streak() -> None:
    log = {"2024-03-10": True, "2024-03-09": False, "2024-03-08": True}

    assert compute_streak(log, TODAY) == 1


def test_streak_is_idempotent_and_zero_for_empty_log() -> None:
    log = {"2024-03-09": True}

    assert compute_streak(log, TODAY) == compute_streak(log, TODAY) == 1
    assert compute_streak({}, TODAY) == 0
