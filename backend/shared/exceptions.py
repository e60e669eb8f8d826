"""
Base exception classes for the Pocketbook session layer.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class PocketbookError(Exception):
    """
    Base exception for all Pocketbook errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PocketbookError):
    """Input validation failed."""

    pass


class AuthenticationError(PocketbookError):
    """Authentication failed (invalid, missing or corrupted session)."""

    pass


class AuthorizationError(PocketbookError):
    """Authorization failed (operation not permitted for this account)."""

    pass


class ExternalServiceError(PocketbookError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class PersistenceError(PocketbookError):
    """
    A durable store or cookie channel read/write failed.

    Covers quota exhaustion, I/O failures and values that cannot be
    serialized. Callers surface it as a generic retry-later message.
    """

    USER_MESSAGE = "We couldn't save your changes. Please try again later."

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        details: dict[str, Any] = {}
        if key is not None:
            details["key"] = key
        if operation is not None:
            details["operation"] = operation
        super().__init__(message, code="PERSISTENCE_ERROR", details=details)
        self.key = key
        self.operation = operation
