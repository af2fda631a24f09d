from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional
from uuid import uuid4

from ecolife_coach.board import DashboardState
from ecolife_coach.catalog import fresh_tasks
from ecolife_coach.clock import Clock, date_key, local_now
from ecolife_coach.config import EngineConfig
from ecolife_coach.constants import (
    KEY_DAILY_LOG,
    KEY_ECO_TASKS,
    KEY_ENTRIES_HISTORY,
    KEY_HEALTH_TASKS,
    KEY_LAST_OPEN_DAY,
    KEY_MODE_ECO,
    KEY_MODE_HEALTH,
    KEY_RECENT_ECO,
    KEY_RECENT_HEALTH,
    cap_list_head,
)
from ecolife_coach.daily_log import day_completed, prune_log, record_today
from ecolife_coach.history import SnapshotHistory, build_day_entry
from ecolife_coach.models import (
    CompletionNotice,
    CursorState,
    DayEntry,
    Section,
    SnapshotAction,
    Task,
    ViewMode,
)
from ecolife_coach.navigation import NavigationCursor
from ecolife_coach.persistence import (
    PersistenceBridge,
    decode,
    dump_tasks,
    parse_daily_log,
    parse_day_key,
    parse_entries,
    parse_id_list,
    parse_mode,
    serialize,
    task_parser,
)
from ecolife_coach.rollover import RolloverManager, RolloverOutcome
from ecolife_coach.storage import MemoryStorageBackend, StorageBackend
from ecolife_coach.streak import compute_streak
from ecolife_coach.sync import SyncHub, SyncMessage, SyncSubscription
from ecolife_coach.tasks import TaskCollection, push_recent, total_points

LOGGER = logging.getLogger(__name__)

Listener = Callable[[CompletionNotice], None]

TASK_KEYS: dict[Section, str] = {Section.HEALTH: KEY_HEALTH_TASKS, Section.ECO: KEY_ECO_TASKS}
RECENT_KEYS: dict[Section, str] = {Section.HEALTH: KEY_RECENT_HEALTH, Section.ECO: KEY_RECENT_ECO}
MODE_KEYS: dict[Section, str] = {Section.HEALTH: KEY_MODE_HEALTH, Section.ECO: KEY_MODE_ECO}


class TaskEngine:
    """Task, streak and history state of one dashboard session.

    All mutations run synchronously on the caller's turn. Pending sync messages
    from other sessions or sibling instances are applied first, so every
    operation works on the freshest state this session has been told about.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        storage: Optional[StorageBackend] = None,
        hub: Optional[SyncHub] = None,
        *,
        context_id: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.persistence = PersistenceBridge(storage or MemoryStorageBackend(), namespace=self.config.namespace)
        self.hub = hub
        self.context_id = context_id or uuid4().hex
        self.clock: Clock = clock or local_now
        self.outcome: Optional[RolloverOutcome] = None
        self.rollover_entry: Optional[DayEntry] = None
        self._subscription: Optional[SyncSubscription] = None
        self._listeners: list[Listener] = []
        self.state = DashboardState(
            collections={
                section: TaskCollection(section, fresh_tasks(self.config.catalog(section))) for section in Section
            },
            cursors={section: NavigationCursor(self.config.default_mode) for section in Section},
            recent={section: [] for section in Section},
            history=SnapshotHistory(limit=self.config.entries_limit),
        )

    # -- lifecycle -----------------------------------------------------------------

    @property
    def mounted(self) -> bool:
        return self.outcome is not None

    def mount(self) -> RolloverOutcome:
        """Load persisted state and run the day-rollover decision exactly once."""

        if self.outcome is not None:
            return self.outcome

        if self.hub is not None:
            self._subscription = self.hub.subscribe(self.context_id)

        self._load()
        now = self.clock()
        manager = RolloverManager(base_points=self.config.base_points)
        outcome = manager.run(self.state, today=date_key(now), now=now)
        self.rollover_entry = manager.snapshot
        self.state.daily_log = prune_log(self.state.daily_log, now, self.config.keep_days)

        for section in Section:
            tasks = self.state.collection(section).tasks
            cursor = self.state.cursor(section)
            if cursor.mode is ViewMode.FOCUS:
                cursor.align(tasks)
            else:
                cursor.clamp(len(tasks))

        self.outcome = outcome
        # Only a rollover replaces state that siblings in this context already hold.
        self._commit(self._all_keys(), broadcast=outcome is RolloverOutcome.ROLLED_OVER)
        return outcome

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # -- reads ---------------------------------------------------------------------

    @property
    def today(self) -> str:
        return date_key(self.clock())

    @property
    def last_open_day(self) -> Optional[str]:
        return self.state.last_open_day

    def tasks(self, section: Section) -> tuple[Task, ...]:
        return self.state.collection(section).tasks

    def completed_count(self, section: Section) -> int:
        return self.state.collection(section).completed_count()

    def all_done(self, section: Section) -> bool:
        return self.state.collection(section).all_done()

    @property
    def total_points(self) -> int:
        return total_points(self.config.base_points, self.state.collections.values())

    @property
    def streak(self) -> int:
        return compute_streak(self.state.daily_log, self.clock())

    @property
    def daily_log(self) -> dict[str, bool]:
        return dict(self.state.daily_log)

    @property
    def history(self) -> tuple[DayEntry, ...]:
        return self.state.history.entries

    def recent(self, section: Section) -> list[str]:
        return list(self.state.recent[section])

    def recent_tasks(self, section: Section) -> list[Task]:
        lookup = {task.id: task for task in self.tasks(section)}
        return [lookup[task_id] for task_id in self.state.recent[section] if task_id in lookup]

    def cursor(self, section: Section) -> CursorState:
        return self.state.cursor(section).state()

    def current_task(self, section: Section) -> Optional[Task]:
        tasks = self.tasks(section)
        if not tasks:
            return None
        return tasks[self.state.cursor(section).clamp(len(tasks))]

    # -- task mutations --------------------------------------------------------------

    def toggle(self, section: Section, index: int) -> Optional[Task]:
        """Flip a task. Completing it records history, MRU and advances the cursor."""

        self.sync()
        collection = self.state.collection(section)
        result = collection.toggle(index)
        if result is None:
            LOGGER.debug("Ignored toggle of %s[%s]; section has %d tasks", section.value, index, len(collection))
            return None

        keys = [TASK_KEYS[section]]
        if result.became_completed:
            now = self.clock()
            self.state.recent[section] = push_recent(
                self.state.recent[section], result.task.id, self.config.recent_limit
            )
            by_section = {
                section: collection.tasks,
                self.state.other(section): self.state.collection(self.state.other(section)).tasks,
            }
            self.state.history.append(
                build_day_entry(
                    day=date_key(now),
                    timestamp=now,
                    health=by_section[Section.HEALTH],
                    eco=by_section[Section.ECO],
                    base_points=self.config.base_points,
                    action=SnapshotAction(section=section.value, task_id=result.task.id, completed=True),
                )
            )
            self.state.cursor(section).advance_past(collection.tasks, result.index)
            keys.extend([RECENT_KEYS[section], KEY_ENTRIES_HISTORY])

        day_flipped = self._record_day()
        if day_flipped is not None:
            keys.append(KEY_DAILY_LOG)

        self._commit(keys)

        if result.became_completed:
            self._emit(self._completion_notice(section, result.task))
            if day_flipped:
                self._emit(
                    CompletionNotice(
                        title="Streak alive!",
                        description=f"Nice work, you are on a {self.streak}-day streak.",
                        level="success",
                        href="/dashboard",
                    )
                )
        return result.task

    def toggle_task(self, section: Section, task_id: str) -> Optional[Task]:
        self.sync()
        index = self.state.collection(section).index_of(task_id)
        if index is None:
            return None
        return self.toggle(section, index)

    def reset_all(self, section: Section) -> None:
        self.sync()
        self.state.collection(section).reset_all()
        self.state.cursor(section).reset()
        keys = [TASK_KEYS[section]]
        if self._record_day() is not None:
            keys.append(KEY_DAILY_LOG)
        self._commit(keys)

    # -- navigation --------------------------------------------------------------------

    def next(self, section: Section) -> int:
        self.sync()
        return self.state.cursor(section).next(len(self.tasks(section)))

    def prev(self, section: Section) -> int:
        self.sync()
        return self.state.cursor(section).prev(len(self.tasks(section)))

    def go_to(self, section: Section, index: int) -> int:
        self.sync()
        return self.state.cursor(section).go_to(index, len(self.tasks(section)))

    def go_to_by_id(self, section: Section, task_id: str) -> int:
        self.sync()
        return self.state.cursor(section).go_to_by_id(self.tasks(section), task_id)

    def set_mode(self, section: Section, mode: ViewMode | str) -> CursorState:
        self.sync()
        cursor = self.state.cursor(section)
        cursor.set_mode(ViewMode(mode), self.tasks(section))
        self._commit([MODE_KEYS[section]])
        return cursor.state()

    # -- sync ----------------------------------------------------------------------------

    def sync(self) -> int:
        """Apply queued messages from other sessions and sibling instances."""

        if self._subscription is None:
            return 0

        applied = 0
        for message in self._subscription.drain():
            if self._apply(message):
                applied += 1
        return applied

    def _apply(self, message: SyncMessage) -> bool:
        prefix = f"{self.config.namespace}:"
        if not message.key.startswith(prefix):
            return False
        key = message.key[len(prefix) :]

        handler = self._handlers().get(key)
        if handler is None:
            LOGGER.debug("No handler for synced key %s", key)
            return False

        parser, fallback, apply = handler
        if message.value is None:
            value = fallback
        else:
            value = decode(message.value, parser, key=key)
            if value is None:
                return False

        apply(value)
        self.persistence.remember(key, message.value)
        LOGGER.debug("Applied %s update for %s", message.channel.value, key)
        return True

    def _handlers(self) -> dict[str, tuple[Callable[[Any], Any], Any, Callable[[Any], None]]]:
        handlers: dict[str, tuple[Callable[[Any], Any], Any, Callable[[Any], None]]] = {
            KEY_DAILY_LOG: (parse_daily_log, {}, self._replace_daily_log),
            KEY_LAST_OPEN_DAY: (parse_day_key, None, self._replace_last_open_day),
            KEY_ENTRIES_HISTORY: (parse_entries, [], self.state.history.replace),
        }
        for section in Section:
            catalog = self.config.catalog(section)
            handlers[TASK_KEYS[section]] = (
                task_parser(catalog),
                fresh_tasks(catalog),
                lambda tasks, section=section: self._replace_tasks(section, tasks),
            )
            handlers[RECENT_KEYS[section]] = (
                parse_id_list,
                [],
                lambda ids, section=section: self._replace_recent(section, ids),
            )
            handlers[MODE_KEYS[section]] = (
                parse_mode,
                self.config.default_mode,
                lambda mode, section=section: self.state.cursor(section).set_mode(mode, self.tasks(section)),
            )
        return handlers

    def _replace_tasks(self, section: Section, tasks: Iterable[Task]) -> None:
        collection = self.state.collection(section)
        collection.replace(tasks)
        cursor = self.state.cursor(section)
        if cursor.mode is ViewMode.FOCUS:
            cursor.align(collection.tasks)
        else:
            cursor.clamp(len(collection))

    def _replace_recent(self, section: Section, ids: list[str]) -> None:
        self.state.recent[section] = cap_list_head(ids, self.config.recent_limit)

    def _replace_daily_log(self, log: dict[str, bool]) -> None:
        self.state.daily_log = dict(log)

    def _replace_last_open_day(self, day: Optional[str]) -> None:
        self.state.last_open_day = day

    # -- internals -----------------------------------------------------------------------

    def _load(self) -> None:
        for section in Section:
            catalog = self.config.catalog(section)
            tasks = self.persistence.load(TASK_KEYS[section], task_parser(catalog), fresh_tasks(catalog))
            self.state.collection(section).replace(tasks)
            self._replace_recent(section, self.persistence.load(RECENT_KEYS[section], parse_id_list, []))
            self.state.cursor(section).mode = self.persistence.load(
                MODE_KEYS[section], parse_mode, self.config.default_mode
            )

        self.state.history.replace(self.persistence.load(KEY_ENTRIES_HISTORY, parse_entries, []))
        self.state.daily_log = self.persistence.load(KEY_DAILY_LOG, parse_daily_log, {})
        self.state.last_open_day = self.persistence.load(KEY_LAST_OPEN_DAY, parse_day_key, None)

    def _record_day(self) -> Optional[bool]:
        """Update today's log entry; returns the new value when it changed."""

        now = self.clock()
        completed = day_completed(self.state.completed_total(), self.config.completion_threshold)
        if self.state.daily_log.get(date_key(now)) == completed:
            return None
        self.state.daily_log = record_today(self.state.daily_log, completed, now, self.config.keep_days)
        return completed

    def _all_keys(self) -> list[str]:
        keys = [KEY_LAST_OPEN_DAY, KEY_DAILY_LOG, KEY_ENTRIES_HISTORY]
        for section in Section:
            keys.extend([TASK_KEYS[section], RECENT_KEYS[section], MODE_KEYS[section]])
        return keys

    def _value_for(self, key: str) -> object:
        if key == KEY_DAILY_LOG:
            return self.state.daily_log
        if key == KEY_LAST_OPEN_DAY:
            return self.state.last_open_day
        if key == KEY_ENTRIES_HISTORY:
            return [entry.model_dump(mode="json") for entry in self.state.history.entries]
        for section in Section:
            if key == TASK_KEYS[section]:
                return dump_tasks(self.tasks(section))
            if key == RECENT_KEYS[section]:
                return self.state.recent[section]
            if key == MODE_KEYS[section]:
                return self.state.cursor(section).mode.value
        raise KeyError(key)

    def _commit(self, keys: Iterable[str], *, broadcast: bool = True) -> None:
        """Persist ``keys``, then notify other sessions and, with ``broadcast``, sibling instances."""

        for key in dict.fromkeys(keys):
            value = self._value_for(key)
            written = self.persistence.save(key, value)
            if self.hub is None or self._subscription is None:
                continue
            storage_key = self.persistence.storage_key(key)
            if written is not None:
                self.hub.publish_storage(origin=self._subscription, key=storage_key, value=written)
            if broadcast:
                self.hub.broadcast_local(origin=self._subscription, key=storage_key, value=written or serialize(value))

    def _completion_notice(self, section: Section, task: Task) -> CompletionNotice:
        description = f"+{task.points} pts for a {section.label.lower()} task."
        if self.all_done(section):
            description += f" All {section.label.lower()} tasks are done for today."
        return CompletionNotice(
            title=f"{task.label} completed", description=description, level="success", href="/tasks"
        )

    def _emit(self, notice: CompletionNotice) -> None:
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception as exc:  # pragma: no cover - defensive logging
                LOGGER.warning("Notification listener failed: %s", exc)


def create_engine(
    config: Optional[EngineConfig] = None,
    storage: Optional[StorageBackend] = None,
    hub: Optional[SyncHub] = None,
    *,
    context_id: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> TaskEngine:
    """Build an engine and mount it."""

    engine = TaskEngine(config, storage, hub, context_id=context_id, clock=clock)
    engine.mount()
    return engine


__all__ = ["TaskEngine", "create_engine", "TASK_KEYS", "RECENT_KEYS", "MODE_KEYS"]
