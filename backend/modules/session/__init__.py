"""
Session module.

Composes the token vault, profile cache and preference store into the
authentication decision and the protected-view redirect policy.

Public API:
- ISessionGate: Interface for session lifecycle operations
- SessionGate: Implementation
- SessionContext: Per-process handle wiring every component together
- Result models: LoginResult, LogoutResult, GuardOutcome, DemoResetResult
- Session exceptions: DemoResetNotAllowedError, SessionStateError, NotAuthenticatedError
"""

from .interfaces import ISessionGate
from .models import (
    SessionStatus,
    LoginResult,
    LogoutResult,
    GuardState,
    GuardOutcome,
    DemoResetResult,
)
from .exceptions import (
    DemoResetNotAllowedError,
    SessionStateError,
    NotAuthenticatedError,
)
from .service import SessionGate, split_name
from .context import SessionContext

__all__ = [
    # Interface
    "ISessionGate",
    # Models
    "SessionStatus",
    "LoginResult",
    "LogoutResult",
    "GuardState",
    "GuardOutcome",
    "DemoResetResult",
    # Exceptions
    "DemoResetNotAllowedError",
    "SessionStateError",
    "NotAuthenticatedError",
    # Implementation
    "SessionGate",
    "split_name",
    "SessionContext",
]
