from __future__ import annotations

from ecolife_coach.models import Task, ViewMode
from ecolife_coach.navigation import NavigationCursor, find_next_incomplete


def _tasks(*completed: bool) -> list[Task]:
    return [Task(id=f"t{index}", label=f"T{index}", points=10, completed=flag) for index, flag in enumerate(completed)]


def test_find_next_incomplete_wraps_around() -> None:
    tasks = _tasks(False, True, True)

    assert find_next_incomplete(tasks, 2, 1) == 0


def test_find_next_incomplete_backwards() -> None:
    tasks = _tasks(False, True, False, True)

    assert find_next_incomplete(tasks, 2, -1) == 0
    assert find_next_incomplete(tasks, 0, -1) == 2


def test_find_next_incomplete_all_done_returns_start() -> None:
    tasks = _tasks(True, True, True)

    assert find_next_incomplete(tasks, 1, 1) == 1


def test_find_next_incomplete_can_return_start_when_only_it_is_open() -> None:
    tasks = _tasks(True, False, True)

    assert find_next_incomplete(tasks, 1, 1) == 1


def test_next_and_prev_wrap_sequentially_in_any_mode() -> None:
    cursor = NavigationCursor(ViewMode.FOCUS)

    assert cursor.prev(3) == 2
    assert cursor.next(3) == 0
    assert cursor.next(3) == 1
    assert cursor.go_to(7, 3) == 1


def test_switching_into_focus_aligns_to_incomplete_task() -> None:
    tasks = _tasks(True, False, True)
    cursor = NavigationCursor(ViewMode.BROWSE, index=0)

    assert cursor.set_mode(ViewMode.FOCUS, tasks) == 1
    assert cursor.mode is ViewMode.FOCUS


def test_switching_into_focus_with_all_done_stays_put() -> None:
    tasks = _tasks(True, True, True)
    cursor = NavigationCursor(ViewMode.BROWSE, index=2)

    assert cursor.set_mode(ViewMode.FOCUS, tasks) == 2


def test_switching_into_browse_does_not_move() -> None:
    tasks = _tasks(True, False)
    cursor = NavigationCursor(ViewMode.FOCUS, index=0)

    assert cursor.set_mode(ViewMode.BROWSE, tasks) == 0


def test_go_to_by_id_falls_back_to_zero() -> None:
    tasks = _tasks(False, False, False)
    cursor = NavigationCursor()

    assert cursor.go_to_by_id(tasks, "t2") == 2
    assert cursor.go_to_by_id(tasks, "missing") == 0


def test_empty_section_operations_stay_at_zero() -> None:
    cursor = NavigationCursor(index=4)

    assert cursor.next(0) == 0
    assert cursor.prev(0) == 0
    assert cursor.go_to(3, 0) == 0
    assert cursor.set_mode(ViewMode.FOCUS, []) == 0
    assert cursor.advance_past([], 2) == 0


def test_clamp_wraps_index_after_length_change() -> None:
    cursor = NavigationCursor(index=4)

    assert cursor.clamp(3) == 1
