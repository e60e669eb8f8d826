"""
Accounts module exceptions.

ServiceError carries the message the account service returned when there
is one. The validation errors are raised before any request is made.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


GENERIC_SERVICE_MESSAGE = "Something went wrong. Please try again."


class ServiceError(ExternalServiceError):
    """Raised when an account service call fails or returns success: false."""

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(
            message or GENERIC_SERVICE_MESSAGE,
            service="account",
            code="SERVICE_ERROR",
        )
        self.status_code = status_code
        self.operation = operation
        if status_code is not None:
            self.details["status_code"] = status_code
        if operation is not None:
            self.details["operation"] = operation


class MissingFieldError(ValidationError):
    """Raised when a required input is blank."""

    def __init__(self, message: str, fields: list[str]):
        super().__init__(message, code="MISSING_FIELD", details={"fields": fields})


class InvalidEmailError(ValidationError):
    """Raised when an email address is malformed."""

    def __init__(self, email: str):
        super().__init__(
            "Please enter a valid email address",
            code="INVALID_EMAIL",
            details={"email": email},
        )


class WeakPasswordError(ValidationError):
    """Raised when a new password misses a strength requirement."""

    def __init__(self, requirement: str):
        super().__init__(requirement, code="WEAK_PASSWORD")


class PasswordMismatchError(ValidationError):
    """Raised when a new password and its confirmation differ."""

    def __init__(self):
        super().__init__("New passwords do not match", code="PASSWORD_MISMATCH")
