from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ecolife_coach.models import Section, Task, TaskSnapshot


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a single toggle: where it happened and the updated task."""

    index: int
    task: Task

    @property
    def became_completed(self) -> bool:
        return self.task.completed


class TaskCollection:
    """Ordered tasks of one section.

    Tasks are frozen models; every mutation swaps in a copy, so lists handed
    out earlier (for snapshots) never change afterwards.
    """

    def __init__(self, section: Section, tasks: Iterable[Task] = ()) -> None:
        self.section = section
        self._tasks: tuple[Task, ...] = tuple(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def replace(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)

    def index_of(self, task_id: str) -> Optional[int]:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    def toggle(self, index: int) -> Optional[ToggleResult]:
        """Flip ``completed`` at ``index``; out-of-range or empty is a no-op."""

        if not self._tasks or index < 0 or index >= len(self._tasks):
            return None

        tasks = list(self._tasks)
        current = tasks[index]
        updated = current.model_copy(update={"completed": not current.completed})
        tasks[index] = updated
        self._tasks = tuple(tasks)
        return ToggleResult(index=index, task=updated)

    def reset_all(self) -> None:
        self._tasks = tuple(
            task if not task.completed else task.model_copy(update={"completed": False}) for task in self._tasks
        )

    def completed_count(self) -> int:
        return sum(1 for task in self._tasks if task.completed)

    def all_done(self) -> bool:
        return len(self._tasks) > 0 and self.completed_count() == len(self._tasks)

    def earned_points(self) -> int:
        return sum(task.points for task in self._tasks if task.completed)


def snapshot_tasks(tasks: Iterable[Task]) -> tuple[TaskSnapshot, ...]:
    return tuple(
        TaskSnapshot(id=task.id, label=task.label, points=task.points, completed=task.completed) for task in tasks
    )


def total_points(base_points: int, collections: Iterable[TaskCollection]) -> int:
    return base_points + sum(collection.earned_points() for collection in collections)


def push_recent(recent: Sequence[str], task_id: str, limit: int) -> list[str]:
    """Move ``task_id`` to the front of a most-recent-first list, de-duplicated and capped."""

    updated = [task_id] + [existing for existing in recent if existing != task_id]
    return updated[: max(0, limit)]


__all__ = ["TaskCollection", "ToggleResult", "push_recent", "snapshot_tasks", "total_points"]
