from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Mapping, Optional, Protocol

LOGGER = logging.getLogger(__name__)

DEFAULT_STATE_FILENAME = "ecolife_state.json"
TRACKER_FOLDER_NAME = "EcoLifeCoach"
DATA_DIR_ENV = "ECOLIFE_DATA_DIR"

_FILE_LOCK = threading.Lock()


class StorageBackend(Protocol):
    """Durable key-value store holding serialized values."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string or ``None`` when the key is absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    def remove_item(self, key: str) -> None:
        """Delete ``key`` if present."""


def resolve_tracker_directory(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> Path:
    """Resolve the data directory: explicit path, then ECOLIFE_DATA_DIR, then ``.data``."""

    if path is not None:
        explicit_path = Path(path).expanduser()
        if explicit_path.is_dir():
            return explicit_path
        return explicit_path.parent

    env_map: Mapping[str, str] = env if env is not None else os.environ
    raw_value = env_map.get(DATA_DIR_ENV)
    if raw_value:
        candidate = Path(raw_value).expanduser()
        if candidate.name.lower() == TRACKER_FOLDER_NAME.lower():
            return candidate
        return candidate / TRACKER_FOLDER_NAME

    return Path(".data") / TRACKER_FOLDER_NAME


def resolve_state_file_path(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> Path:
    if path is not None:
        explicit_path = Path(path).expanduser()
        if explicit_path.is_dir():
            return explicit_path / DEFAULT_STATE_FILENAME
        return explicit_path

    return resolve_tracker_directory(env=env) / DEFAULT_STATE_FILENAME


class MemoryStorageBackend:
    """Keep values in a dict. Shared between engines when the same instance is passed."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorageBackend:
    """Persist all keys in one JSON document on disk."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = resolve_state_file_path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as file_handle:
                payload = json.load(file_handle)
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Could not read state file %s: %s", self.path, exc)
            return {}

        if not isinstance(payload, dict):
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _write(self, items: Mapping[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        serialized = json.dumps(items, ensure_ascii=False, sort_keys=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with temp_path.open("w", encoding="utf-8") as file_handle:
            file_handle.write(serialized)
        temp_path.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        with _FILE_LOCK:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with _FILE_LOCK:
            items = self._read()
            if items.get(key) == value:
                return
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with _FILE_LOCK:
            items = self._read()
            if key not in items:
                return
            del items[key]
            self._write(items)


__all__ = [
    "DATA_DIR_ENV",
    "DEFAULT_STATE_FILENAME",
    "FileStorageBackend",
    "MemoryStorageBackend",
    "StorageBackend",
    "TRACKER_FOLDER_NAME",
    "resolve_state_file_path",
    "resolve_tracker_directory",
]
