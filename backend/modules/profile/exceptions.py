"""
Profile module exceptions.

CorruptedSessionError never leaves the module: hydration catches it and
falls back to an absent session.
"""

from typing import Optional

from shared.exceptions import AuthenticationError


class CorruptedSessionError(AuthenticationError):
    """Raised when stored session state is malformed or only partially present."""

    def __init__(self, reason: str, key: Optional[str] = None):
        super().__init__(
            f"Stored session is corrupted: {reason}",
            code="CORRUPTED_SESSION",
            details={"key": key} if key else {},
        )
        self.reason = reason


class NoActiveSessionError(AuthenticationError):
    """Raised when an operation needs a session and none is stored."""

    def __init__(self, message: str = "No active session"):
        super().__init__(message, code="NO_ACTIVE_SESSION")
