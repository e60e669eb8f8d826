"""Tests for account input validation."""

import pytest

from modules.accounts.exceptions import (
    InvalidEmailError,
    MissingFieldError,
    PasswordMismatchError,
    WeakPasswordError,
)
from modules.accounts.validation import (
    validate_credentials,
    validate_email,
    validate_password_change,
    validate_password_strength,
    validate_profile_draft,
)
from modules.preferences.models import ProfileSettings


class TestEmail:
    def test_trims(self):
        assert validate_email("  jane@example.com ") == "jane@example.com"

    def test_blank(self):
        with pytest.raises(MissingFieldError):
            validate_email("   ")

    @pytest.mark.parametrize("email", ["jane", "jane@example", "ja ne@example.com", "@example.com"])
    def test_malformed(self, email):
        with pytest.raises(InvalidEmailError) as exc_info:
            validate_email(email)
        assert exc_info.value.message == "Please enter a valid email address"


class TestCredentials:
    def test_missing_password(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_credentials("jane@example.com", "")
        assert exc_info.value.details["fields"] == ["password"]

    def test_returns_trimmed_email(self):
        assert validate_credentials(" jane@example.com", "x") == "jane@example.com"


class TestPasswordStrength:
    @pytest.mark.parametrize(
        "password,message",
        [
            ("Ab1!", "Password must be at least 8 characters long"),
            ("abcdefg1!", "Password must contain at least one uppercase letter"),
            ("ABCDEFG1!", "Password must contain at least one lowercase letter"),
            ("Abcdefgh!", "Password must contain at least one number"),
        ],
    )
    def test_requirements_in_order(self, password, message):
        with pytest.raises(WeakPasswordError) as exc_info:
            validate_password_strength(password)
        assert exc_info.value.message == message

    def test_special_character(self):
        with pytest.raises(WeakPasswordError) as exc_info:
            validate_password_strength("Abcdefg1")
        assert "special character" in exc_info.value.message

    def test_strong(self):
        validate_password_strength("Secret#123")


class TestPasswordChange:
    def test_missing(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_password_change("old", "", "")
        assert exc_info.value.details["fields"] == ["new", "confirm"]

    def test_mismatch(self):
        with pytest.raises(PasswordMismatchError):
            validate_password_change("old", "Secret#123", "Secret#124")

    def test_weak(self):
        with pytest.raises(WeakPasswordError):
            validate_password_change("old", "weak", "weak")


class TestProfileDraft:
    def test_requires_names(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_profile_draft(ProfileSettings(first_name=" "))
        assert exc_info.value.message == "First name and last name are required"

    def test_requires_valid_email(self):
        with pytest.raises(InvalidEmailError):
            validate_profile_draft(ProfileSettings(email="nope"))

    def test_defaults_are_valid(self):
        validate_profile_draft(ProfileSettings())
