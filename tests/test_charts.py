from __future__ import annotations

from datetime import date, datetime

import plotly.graph_objects as go

from ecolife_coach.charts import (
    MISSED_COLOR,
    PRIMARY_COLOR,
    build_daily_log_figure,
    build_points_history_figure,
    latest_points_per_day,
)
from ecolife_coach.models import DayEntry, DayTotals


def _entry(day: str, hour: int, points: int) -> DayEntry:
    return DayEntry(date=day, timestamp=datetime(2024, 3, int(day[-2:]), hour), totals=DayTotals(points=points))


def test_latest_points_per_day_uses_newest_snapshot() -> None:
    entries = [_entry("2024-03-10", 18, 300), _entry("2024-03-09", 9, 250), _entry("2024-03-10", 8, 260)]

    assert latest_points_per_day(entries) == [("2024-03-09", 250), ("2024-03-10", 300)]


def test_points_history_figure() -> None:
    figure = build_points_history_figure([_entry("2024-03-10", 12, 265)])

    assert isinstance(figure, go.Figure)
    bar = figure.data[0]
    assert list(bar.x) == ["2024-03-10"]
    assert list(bar.y) == [265]


def test_daily_log_figure_highlights_completed_days() -> None:
    figure = build_daily_log_figure({"2024-03-10": True, "2024-03-09": False}, date(2024, 3, 10), days=3)

    bar = figure.data[0]
    assert list(bar.x) == ["2024-03-08", "2024-03-09", "2024-03-10"]
    assert list(bar.y) == [0, 0, 1]
    assert list(bar.marker.color) == [MISSED_COLOR, MISSED_COLOR, PRIMARY_COLOR]
    assert tuple(figure.layout.yaxis.range) == (0, 1)
