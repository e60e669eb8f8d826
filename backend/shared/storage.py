"""
Durable key-value store.

String keys, string values, no built-in expiry. Two implementations:
- InMemoryKeyValueStore: lives for the process lifetime (tests, development)
- JsonFileKeyValueStore: persists the whole map to a single JSON file so it
  survives restarts

All failures surface as PersistenceError.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .config import Settings
from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for durable key-value storage backends."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove a key without raising if it is absent."""
        ...

    def keys(self) -> list[str]:
        """List all stored keys."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...


class InMemoryKeyValueStore:
    """
    Key-value store held in a dict.

    An optional byte quota mimics browser storage limits: a write that would
    push the total size of keys and values past the quota is rejected.
    """

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise PersistenceError(
                f"Store values must be strings, got {type(value).__name__}",
                key=key,
                operation="write",
            )
        if self._quota_bytes is not None:
            projected = self._used_bytes() - self._entry_size(key) + len(key) + len(value)
            if projected > self._quota_bytes:
                raise PersistenceError(
                    f"Storage quota exceeded writing '{key}'",
                    key=key,
                    operation="write",
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def _entry_size(self, key: str) -> int:
        if key not in self._items:
            return 0
        return len(key) + len(self._items[key])

    def _used_bytes(self) -> int:
        return sum(len(k) + len(v) for k, v in self._items.items())


class JsonFileKeyValueStore:
    """
    Key-value store persisted to a JSON file.

    The file is read once on construction and rewritten on every mutation
    through a temporary file that replaces the old file, so a crash never
    leaves a half-written store behind.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._items: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise PersistenceError(
                f"Store values must be strings, got {type(value).__name__}",
                key=key,
                operation="write",
            )
        previous = self._items.get(key)
        self._items[key] = value
        try:
            self._flush()
        except PersistenceError:
            if previous is None:
                self._items.pop(key, None)
            else:
                self._items[key] = previous
            raise

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        previous = self._items.pop(key)
        try:
            self._flush()
        except PersistenceError:
            self._items[key] = previous
            raise

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        snapshot = dict(self._items)
        self._items.clear()
        try:
            self._flush()
        except PersistenceError:
            self._items.update(snapshot)
            raise

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(
                f"Unable to read store file {self._path}: {e}",
                operation="read",
            ) from e
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise PersistenceError(
                f"Store file {self._path} does not contain a string map",
                operation="read",
            )
        return data

    def _flush(self) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(self._items, indent=2), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise PersistenceError(
                f"Unable to write store file {self._path}: {e}",
                operation="write",
            ) from e


def get_key_value_store(settings: Settings) -> KeyValueStore:
    """
    Create the durable store configured by settings.

    Uses a JSON file when STORAGE_PATH is set, memory otherwise.
    """
    if settings.storage_path is None:
        logger.debug("No storage path configured, using in-memory store")
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.storage_path)
