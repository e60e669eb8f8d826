"""
Profile cache interface.

Other modules should depend on IProfileCache, not the concrete implementation.
"""

from typing import Any, Mapping, Protocol, Optional, runtime_checkable

from .models import Session, User


@runtime_checkable
class IProfileCache(Protocol):
    """
    Interface for the cached user record.

    The record is only meaningful together with a token from the vault;
    hydrate() validates the two jointly.
    """

    def hydrate(self) -> Optional[Session]:
        """
        Rebuild the session from storage.

        Returns:
            Session if both the user record and a token are present,
            None otherwise. Partial or malformed state is cleared.
        """
        ...

    def commit(self, session: Session) -> None:
        """
        Persist the session's user record. The token is not touched.

        Raises:
            PersistenceError: If the record cannot be stored
        """
        ...

    def merge_profile(self, partial: Mapping[str, Any]) -> User:
        """
        Shallow-merge fields onto the stored user and persist the result.

        Returns:
            The updated user record

        Raises:
            NoActiveSessionError: If no session is stored
            PersistenceError: If the record cannot be stored
        """
        ...

    def peek_user_id(self) -> Optional[str]:
        """Best-effort read of the stored user ID, without validation."""
        ...

    def clear(self) -> None:
        """Remove the user record and the token from every channel."""
        ...
