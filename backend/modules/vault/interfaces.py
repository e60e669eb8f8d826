"""
Token vault interface.

Other modules should depend on ITokenVault, not the concrete implementation.
Callers never see which channel a token came from.
"""

from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class ITokenVault(Protocol):
    """
    Interface for session token storage.

    The token is held redundantly in the durable store and in the cookie
    channel so either one alone can re-establish the session.
    """

    def write(self, token: str, ttl_days: int) -> None:
        """
        Store the token in both channels.

        Args:
            token: Opaque session token
            ttl_days: Lifetime of the cookie copy, in days

        Raises:
            PersistenceError: If either channel rejects the write
        """
        ...

    def read(self) -> Optional[str]:
        """
        Read the token, preferring the durable store over the cookie.

        Returns:
            The token, or None if neither channel holds one
        """
        ...

    def clear(self) -> None:
        """Remove the token from both channels. Idempotent."""
        ...
