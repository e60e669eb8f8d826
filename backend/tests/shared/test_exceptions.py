"""Tests for the base exception hierarchy."""

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    PersistenceError,
    PocketbookError,
    ValidationError,
)


class TestPocketbookError:
    def test_code_defaults_to_class_name(self):
        """Code should default to the exception class name."""
        error = ValidationError("bad input")
        assert error.code == "ValidationError"
        assert error.message == "bad input"
        assert str(error) == "bad input"

    def test_to_dict(self):
        """to_dict should expose code, message and details."""
        error = AuthenticationError("nope", code="NOPE", details={"a": 1})
        assert error.to_dict() == {"error": "NOPE", "message": "nope", "details": {"a": 1}}

    def test_external_service_records_service(self):
        """ExternalServiceError should record the service name in details."""
        error = ExternalServiceError("down", service="account")
        assert error.service == "account"
        assert error.details["service"] == "account"
        assert isinstance(error, PocketbookError)


class TestPersistenceError:
    def test_details(self):
        """Key and operation should be kept as attributes and details."""
        error = PersistenceError("quota", key="user", operation="write")
        assert error.code == "PERSISTENCE_ERROR"
        assert error.key == "user"
        assert error.details == {"key": "user", "operation": "write"}

    def test_user_message(self):
        """The user-facing text should be a generic retry message."""
        assert "try again" in PersistenceError.USER_MESSAGE
