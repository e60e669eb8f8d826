"""
Input validation for account operations.

Everything here runs before any network or storage call.
"""

import re

from modules.preferences.models import ProfileSettings

from .exceptions import (
    InvalidEmailError,
    MissingFieldError,
    PasswordMismatchError,
    WeakPasswordError,
)


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'


def validate_email(email: str) -> str:
    """Return the trimmed email, or raise if blank or malformed."""
    email = (email or "").strip()
    if not email:
        raise MissingFieldError("Email address is required", ["email"])
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError(email)
    return email


def validate_credentials(email: str, password: str) -> str:
    """Check login input. Returns the trimmed email."""
    if not (email or "").strip() or not password:
        raise MissingFieldError(
            "Email and password are required",
            [name for name, value in (("email", email), ("password", password)) if not value],
        )
    return validate_email(email)


def validate_password_strength(password: str) -> None:
    """Enforce length, upper, lower, digit and special character rules, in that order."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise WeakPasswordError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    if not re.search(r"[A-Z]", password):
        raise WeakPasswordError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise WeakPasswordError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise WeakPasswordError("Password must contain at least one number")
    if not any(ch in PASSWORD_SPECIAL_CHARS for ch in password):
        raise WeakPasswordError(
            f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARS})"
        )


def validate_password_change(current: str, new: str, confirm: str) -> None:
    missing = [
        name
        for name, value in (("current", current), ("new", new), ("confirm", confirm))
        if not value
    ]
    if missing:
        raise MissingFieldError("All password fields are required", missing)
    if new != confirm:
        raise PasswordMismatchError()
    validate_password_strength(new)


def validate_profile_draft(profile: ProfileSettings) -> None:
    """First name, last name and a well-formed email are required to save."""
    if not profile.first_name.strip() or not profile.last_name.strip():
        raise MissingFieldError(
            "First name and last name are required",
            ["firstName", "lastName"],
        )
    validate_email(profile.email)
