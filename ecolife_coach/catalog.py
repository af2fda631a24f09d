"""Built-in task catalogs used on first run and as reference data for details."""

from __future__ import annotations

from typing import Iterable, Mapping

from ecolife_coach.models import Task, TaskDetails

HEALTH_CATALOG: tuple[Task, ...] = (
    Task(
        id="morning-meditation",
        label="Morning meditation",
        points=20,
        details=TaskDetails(
            summary="Sit quietly for a few minutes before checking your phone.",
            why="A calm start lowers stress for the rest of the day.",
            tips=("Use a timer", "Focus on slow breathing"),
            duration_minutes=10,
        ),
    ),
    Task(
        id="water-8-glasses",
        label="8 glasses of water",
        points=15,
        details=TaskDetails(
            summary="Spread eight glasses of water across the day.",
            why="Hydration keeps energy and concentration up.",
            tips=("Keep a refillable bottle on your desk",),
        ),
    ),
    Task(
        id="walk-30-minutes",
        label="30-minute walk",
        points=25,
        details=TaskDetails(
            summary="Walk at a brisk pace for half an hour.",
            why="Moderate daily movement improves heart health and mood.",
            tips=("Take the stairs", "Walk during a phone call"),
            duration_minutes=30,
        ),
    ),
    Task(
        id="healthy-breakfast",
        label="Healthy breakfast",
        points=20,
        details=TaskDetails(
            summary="Eat a breakfast with protein, fibre and fruit.",
            why="A balanced breakfast avoids the mid-morning energy dip.",
        ),
    ),
    Task(
        id="stretching-10-minutes",
        label="10 minutes stretching",
        points=15,
        details=TaskDetails(
            summary="Stretch the major muscle groups for ten minutes.",
            why="Stretching keeps you mobile and eases desk tension.",
            duration_minutes=10,
        ),
    ),
)

ECO_CATALOG: tuple[Task, ...] = (
    Task(
        id="reusable-bags",
        label="Use reusable bags",
        points=20,
        details=TaskDetails(
            summary="Bring your own bags when shopping.",
            why="Every reused bag is one less single-use plastic bag.",
            tips=("Keep a folded bag in your backpack",),
        ),
    ),
    Task(
        id="bike-instead-of-drive",
        label="Bike instead of drive",
        points=30,
        details=TaskDetails(
            summary="Replace one car trip with a bike ride.",
            why="Short car trips are the least efficient and most polluting.",
        ),
    ),
    Task(
        id="reduce-water-usage",
        label="Reduce water usage",
        points=15,
        details=TaskDetails(
            summary="Shorten your shower and turn off the tap while brushing.",
            why="Heating water is one of the largest household energy costs.",
            tips=("Try a 5-minute shower",),
            duration_minutes=5,
        ),
    ),
    Task(
        id="recycle-properly",
        label="Recycle properly",
        points=20,
        details=TaskDetails(
            summary="Sort paper, glass and plastics into the right bins.",
            why="Contaminated recycling often ends up in landfill.",
        ),
    ),
    Task(
        id="plant-based-meal",
        label="Plant-based meal",
        points=25,
        details=TaskDetails(
            summary="Choose one fully plant-based meal today.",
            why="Plant-based meals have a much smaller carbon footprint.",
        ),
    ),
)


def details_by_id(catalog: Iterable[Task]) -> Mapping[str, TaskDetails]:
    return {task.id: task.details for task in catalog if task.details is not None}


def fresh_tasks(catalog: Iterable[Task]) -> list[Task]:
    """Copy catalog entries into an all-incomplete working list."""

    return [task.model_copy(update={"completed": False}) for task in catalog]


__all__ = ["ECO_CATALOG", "HEALTH_CATALOG", "details_by_id", "fresh_tasks"]
