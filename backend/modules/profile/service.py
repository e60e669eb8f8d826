"""
Profile cache implementation.

Keeps the user record in the durable store next to the vault's token and
fails closed: any mismatch between the two wipes both.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.exceptions import ValidationError
from shared.repository import BaseRepository
from shared.storage import KeyValueStore
from modules.vault.interfaces import ITokenVault

from .exceptions import CorruptedSessionError, NoActiveSessionError
from .interfaces import IProfileCache
from .models import Session, User

logger = logging.getLogger(__name__)


DEFAULT_USER_KEY = "user"


class ProfileCache(BaseRepository[User], IProfileCache):
    """
    Cached user record, validated jointly with the token vault.

    Owns the ``user`` key; delegates everything token-related to the vault.
    """

    def __init__(
        self,
        store: KeyValueStore,
        vault: ITokenVault,
        user_key: str = DEFAULT_USER_KEY,
    ):
        super().__init__(store)
        self._vault = vault
        self._user_key = user_key

    def hydrate(self) -> Optional[Session]:
        try:
            return self._load_session()
        except CorruptedSessionError as e:
            logger.warning(f"Clearing stored session: {e.reason}")
            self.clear()
            return None

    def commit(self, session: Session) -> None:
        self._write_json(self._user_key, session.user.to_record())

    def merge_profile(self, partial: Mapping[str, Any]) -> User:
        session = self.hydrate()
        if session is None:
            raise NoActiveSessionError("Cannot update profile without an active session")

        merged = {**session.user.to_record(), **User.record_keys(partial)}
        try:
            user = User.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                "Profile update produced an invalid user record",
                code="INVALID_PROFILE",
                details={"errors": e.errors(include_url=False)},
            ) from e

        self._write_json(self._user_key, user.to_record())
        return user

    def peek_user_id(self) -> Optional[str]:
        try:
            raw = self._read_json(self._user_key)
        except ValueError:
            return None
        if isinstance(raw, dict) and isinstance(raw.get("id"), str):
            return raw["id"]
        return None

    def clear(self) -> None:
        try:
            self._store.remove_item(self._user_key)
        finally:
            self._vault.clear()

    def _load_session(self) -> Optional[Session]:
        """
        Read the user record and token.

        Raises:
            CorruptedSessionError: On a malformed record or partial presence
        """
        try:
            raw = self._read_json(self._user_key)
        except ValueError as e:
            raise CorruptedSessionError("user record is not valid JSON", self._user_key) from e

        token = self._vault.read()

        if raw is None and token is None:
            return None
        if raw is None:
            raise CorruptedSessionError("token present without a user record", self._user_key)
        if token is None:
            raise CorruptedSessionError("user record present without a token", self._user_key)

        try:
            user = User.model_validate(raw)
        except PydanticValidationError as e:
            raise CorruptedSessionError("user record failed validation", self._user_key) from e

        return Session(user=user, token=token)
