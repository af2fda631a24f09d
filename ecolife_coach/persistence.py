from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from ecolife_coach.catalog import details_by_id
from ecolife_coach.clock import parse_date_key
from ecolife_coach.models import DayEntry, NotificationItem, StoredTask, Task, ViewMode
from ecolife_coach.storage import StorageBackend

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
Parser = Callable[[Any], T]

_PARSE_ERRORS = (ValidationError, ValueError, TypeError, KeyError)

_STORED_TASKS = TypeAdapter(list[StoredTask])
_DAILY_LOG = TypeAdapter(dict[str, bool])
_ID_LIST = TypeAdapter(list[str])
_ENTRIES = TypeAdapter(list[DayEntry])
_NOTIFICATIONS = TypeAdapter(list[NotificationItem])


def serialize(value: object) -> str:
    return json.dumps(value, default=to_jsonable_python, ensure_ascii=False, sort_keys=True)


class PersistenceBridge:
    """Load and save individual state values; never raises for data or storage problems."""

    def __init__(self, storage: StorageBackend, *, namespace: str) -> None:
        self.storage = storage
        self.namespace = namespace
        self._fingerprints: dict[str, str] = {}

    def storage_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def load(self, key: str, parser: Parser[T], fallback: T) -> T:
        raw = self._stored(key)
        if raw is None:
            return fallback
        parsed = decode(raw, parser, key=key)
        if parsed is None:
            return fallback
        self._fingerprints[key] = raw
        return parsed

    def save(self, key: str, value: object) -> Optional[str]:
        """Write ``value`` and return its serialized form, or ``None`` when nothing was written."""

        try:
            serialized = serialize(value)
        except (TypeError, ValueError) as exc:
            LOGGER.warning("Could not serialize %s: %s", key, exc)
            return None

        if self._fingerprints.get(key) == serialized and self._stored(key) == serialized:
            return None

        try:
            self.storage.set_item(self.storage_key(key), serialized)
        except Exception as exc:  # pragma: no cover - defensive logging
            LOGGER.warning("Failed to persist %s: %s", key, exc)
            return None

        self._fingerprints[key] = serialized
        return serialized

    def _stored(self, key: str) -> Optional[str]:
        try:
            return self.storage.get_item(self.storage_key(key))
        except Exception as exc:  # pragma: no cover - defensive logging
            LOGGER.warning("Failed to read %s: %s", key, exc)
            return None

    def remember(self, key: str, serialized: Optional[str]) -> None:
        """Record a value written elsewhere so the next identical save is skipped."""

        if serialized is None:
            self._fingerprints.pop(key, None)
        else:
            self._fingerprints[key] = serialized


def decode(raw: str, parser: Parser[T], *, key: str) -> Optional[T]:
    try:
        return parser(json.loads(raw))
    except json.JSONDecodeError as exc:
        LOGGER.warning("Ignoring malformed JSON for %s: %s", key, exc)
    except _PARSE_ERRORS as exc:
        LOGGER.warning("Rejected persisted value for %s: %s", key, exc)
    return None


def merge_tasks(raw: Any, catalog: Iterable[Task]) -> list[Task]:
    """Validate a persisted task list and join static details by id.

    Catalog entries missing from storage are not added back.
    """

    stored = _STORED_TASKS.validate_python(raw)
    seen: set[str] = set()
    for item in stored:
        if item.id in seen:
            raise ValueError(f"duplicate task id {item.id!r}")
        seen.add(item.id)

    details = details_by_id(catalog)
    return [
        Task(id=item.id, label=item.label, points=item.points, completed=item.completed, details=details.get(item.id))
        for item in stored
    ]


def dump_tasks(tasks: Iterable[Task]) -> list[dict[str, Any]]:
    return [task.model_dump(exclude={"details"}) for task in tasks]


def task_parser(catalog: Iterable[Task]) -> Parser[list[Task]]:
    frozen_catalog = tuple(catalog)
    return lambda raw: merge_tasks(raw, frozen_catalog)


def parse_daily_log(raw: Any) -> dict[str, bool]:
    return _DAILY_LOG.validate_python(raw, strict=True)


def parse_id_list(raw: Any) -> list[str]:
    return _ID_LIST.validate_python(raw, strict=True)


def parse_mode(raw: Any) -> ViewMode:
    return ViewMode(raw)


def parse_day_key(raw: Any) -> str:
    if not isinstance(raw, str):
        raise TypeError("day key must be a string")
    parse_date_key(raw)
    return raw


def parse_entries(raw: Any) -> list[DayEntry]:
    return _ENTRIES.validate_python(raw)


def parse_notifications(raw: Any) -> list[NotificationItem]:
    return _NOTIFICATIONS.validate_python(raw)


__all__ = [
    "PersistenceBridge",
    "decode",
    "dump_tasks",
    "merge_tasks",
    "parse_daily_log",
    "parse_day_key",
    "parse_entries",
    "parse_id_list",
    "parse_mode",
    "parse_notifications",
    "serialize",
    "task_parser",
]
