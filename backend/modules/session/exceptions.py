"""
Session module exceptions.

These exceptions are raised by SessionGate and can be caught by the UI
layer to show the matching message.
"""

from shared.exceptions import AuthenticationError, AuthorizationError


class DemoResetNotAllowedError(AuthorizationError):
    """Raised when a non-demo account asks for a demo reset."""

    def __init__(self):
        super().__init__(
            "Only demo accounts can reset data",
            code="DEMO_RESET_NOT_ALLOWED",
        )


class SessionStateError(AuthenticationError):
    """Raised when an operation is not valid in the current session state."""

    def __init__(self, message: str, state: str):
        super().__init__(message, code="INVALID_SESSION_STATE", details={"state": state})


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs an authenticated user."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="NOT_AUTHENTICATED")
