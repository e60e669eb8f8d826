"""
Base repository class for durable store access.

Provides a common abstraction layer for components that keep JSON documents
in the key-value store, encapsulating serialization and the mapping of
failures onto PersistenceError.
"""

import json
from typing import Any, Generic, Optional, TypeVar

from .exceptions import PersistenceError
from .storage import KeyValueStore


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for store-backed repositories.

    Provides common functionality for durable store operations:
    - Key-value store access via self._store
    - JSON read/write helpers
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific access methods and handle
    dict-to-Pydantic model mapping internally.

    Example:
        class ProfileCache(BaseRepository[User]):
            def load_user(self) -> Optional[User]:
                raw = self._read_json("user")
                return User.model_validate(raw) if raw is not None else None
    """

    def __init__(self, store: KeyValueStore) -> None:
        """
        Initialize the repository with a key-value store.

        Args:
            store: Durable store instance for all reads and writes.
        """
        self._store = store

    def _read_json(self, key: str) -> Optional[Any]:
        """
        Read and decode a JSON value.

        Returns:
            The decoded value, or None if the key is absent

        Raises:
            ValueError: If the stored value is not valid JSON
        """
        raw = self._store.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def _write_json(self, key: str, value: Any) -> None:
        """
        Encode a value as JSON and store it.

        Raises:
            PersistenceError: If the value cannot be serialized or stored
        """
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                f"Unable to serialize value for '{key}': {e}",
                key=key,
                operation="serialize",
            ) from e
        self._store.set_item(key, encoded)
