"""
Session gate interface.

The UI layer depends on ISessionGate for every "is someone logged in"
decision and for the protected-view redirect policy.
"""

from typing import Any, Callable, Protocol, Optional, runtime_checkable

from modules.profile.models import User

from .models import DemoResetResult, GuardOutcome, LoginResult, LogoutResult, SessionStatus


@runtime_checkable
class ISessionGate(Protocol):
    """
    Interface for session lifecycle operations.

    Login and logout are the only writers of session state; everything
    else reads it.
    """

    @property
    def status(self) -> SessionStatus:
        ...

    @property
    def user(self) -> Optional[User]:
        ...

    def initialize(self) -> SessionStatus:
        """Leave INITIALIZING based on stored state. Later calls are no-ops."""
        ...

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Verify credentials with the account service and persist the session.

        Returns:
            LoginResult; on failure nothing has been written

        Raises:
            ValidationError: If the input is blank or malformed
            SessionStateError: If a user is already authenticated
        """
        ...

    def logout(self) -> LogoutResult:
        """Clear all session and per-user state. Every step runs."""
        ...

    def is_authenticated(self) -> bool:
        ...

    def guard(self, component: Callable[..., Any]) -> Callable[..., GuardOutcome]:
        """Wrap a view so it only renders for an authenticated user."""
        ...

    async def reset_demo_account(self) -> DemoResetResult:
        """
        Reset the demo account's data.

        Raises:
            DemoResetNotAllowedError: If the user is not a demo account
            ServiceError: If the account service refuses
        """
        ...
