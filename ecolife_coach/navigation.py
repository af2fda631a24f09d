from __future__ import annotations

from typing import Sequence

from ecolife_coach.models import CursorState, Task, ViewMode


def find_next_incomplete(tasks: Sequence[Task], start: int, direction: int = 1) -> int:
    """Index of the nearest incomplete task after ``start`` in ``direction``, wrapping.

    Returns ``start`` unchanged when every task is complete, and 0 for an empty list.
    """

    length = len(tasks)
    if length == 0:
        return 0

    step = 1 if direction >= 0 else -1
    position = start
    for _ in range(length + 1):
        position = (position + step) % length
        if not tasks[position].completed:
            return position
    return start


class NavigationCursor:
    """Active index and view mode of one section."""

    def __init__(self, mode: ViewMode = ViewMode.FOCUS, index: int = 0) -> None:
        self.mode = mode
        self.index = index

    def state(self) -> CursorState:
        return CursorState(index=self.index, mode=self.mode)

    def clamp(self, length: int) -> int:
        self.index = self.index % length if length > 0 else 0
        return self.index

    def next(self, length: int) -> int:
        return self.go_to(self.index + 1, length)

    def prev(self, length: int) -> int:
        return self.go_to(self.index - 1, length)

    def go_to(self, index: int, length: int) -> int:
        self.index = index % length if length > 0 else 0
        return self.index

    def go_to_by_id(self, tasks: Sequence[Task], task_id: str) -> int:
        for index, task in enumerate(tasks):
            if task.id == task_id:
                self.index = index
                return index
        self.index = 0
        return 0

    def align(self, tasks: Sequence[Task]) -> int:
        """Move off a completed task onto the nearest incomplete one, if any."""

        if not tasks:
            self.index = 0
            return 0
        self.clamp(len(tasks))
        if tasks[self.index].completed:
            self.index = find_next_incomplete(tasks, self.index, 1)
        return self.index

    def set_mode(self, mode: ViewMode, tasks: Sequence[Task]) -> int:
        entering_focus = mode is ViewMode.FOCUS and self.mode is not ViewMode.FOCUS
        self.mode = mode
        if entering_focus:
            return self.align(tasks)
        return self.clamp(len(tasks))

    def advance_past(self, tasks: Sequence[Task], index: int) -> int:
        """Jump from a just-completed task at ``index`` to the next incomplete one."""

        if not tasks:
            self.index = 0
            return 0
        self.index = find_next_incomplete(tasks, index % len(tasks), 1)
        return self.index

    def reset(self) -> None:
        self.index = 0


__all__ = ["NavigationCursor", "find_next_incomplete"]
