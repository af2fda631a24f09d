from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Sequence

import plotly.graph_objects as go

from ecolife_coach.clock import add_days, date_key
from ecolife_coach.models import DayEntry

PRIMARY_COLOR = "#16A34A"
MISSED_COLOR = "#CBD5E1"
FONT_COLOR = "#0F172A"
GRID_COLOR = "#E2E8F0"


def _apply_light_theme(figure: go.Figure) -> go.Figure:
    figure.update_layout(
        template="plotly_white",
        font=dict(color=FONT_COLOR),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor=GRID_COLOR, zerolinecolor=GRID_COLOR),
        yaxis=dict(gridcolor=GRID_COLOR, zerolinecolor=GRID_COLOR),
    )
    return figure


def latest_points_per_day(entries: Sequence[DayEntry]) -> list[tuple[str, int]]:
    """Total points of the newest snapshot per day, oldest day first."""

    latest: dict[str, DayEntry] = {}
    for entry in entries:
        current = latest.get(entry.date)
        if current is None or entry.timestamp > current.timestamp:
            latest[entry.date] = entry
    return [(day, latest[day].totals.points) for day in sorted(latest)]


def build_points_history_figure(entries: Sequence[DayEntry]) -> go.Figure:
    series = latest_points_per_day(entries)
    bar = go.Bar(
        x=[day for day, _ in series],
        y=[points for _, points in series],
        marker_color=PRIMARY_COLOR,
        hovertemplate="<b>%{x}</b><br>%{y} pts<extra></extra>",
    )
    figure = go.Figure(data=[bar])
    figure.update_layout(
        title_text="Points per day",
        xaxis_title="Day",
        yaxis_title="Points",
        margin=dict(t=60, r=10, b=40, l=10),
    )
    figure.update_yaxes(rangemode="tozero")
    _apply_light_theme(figure)
    return figure


def build_daily_log_figure(daily_log: Mapping[str, bool], today: date | datetime, *, days: int = 14) -> go.Figure:
    """Bar per day of the last ``days`` days; qualifying days are highlighted."""

    keys = [date_key(add_days(today, -offset)) for offset in range(days - 1, -1, -1)]
    values = [1 if daily_log.get(key) is True else 0 for key in keys]
    bar = go.Bar(
        x=keys,
        y=values,
        marker_color=[PRIMARY_COLOR if value else MISSED_COLOR for value in values],
        hovertemplate="<b>%{x}</b><extra></extra>",
    )
    figure = go.Figure(data=[bar])
    figure.update_layout(
        title_text=f"Completed days (last {days})",
        showlegend=False,
        margin=dict(t=60, r=10, b=40, l=10),
    )
    figure.update_yaxes(range=[0, 1], showticklabels=False)
    _apply_light_theme(figure)
    return figure


__all__ = ["build_daily_log_figure", "build_points_history_figure", "latest_points_per_day", "PRIMARY_COLOR"]
