"""
Preferences module exceptions.

All are validation failures: they are raised before anything is written.
"""

from typing import Any, Optional

from shared.exceptions import ValidationError


class UnknownCategoryError(ValidationError):
    """Raised when a preference category is not one of the known ones."""

    def __init__(self, category: str):
        super().__init__(
            f"Unknown preference category: {category}",
            code="UNKNOWN_CATEGORY",
            details={"category": category},
        )


class UnknownCurrencyError(ValidationError):
    """Raised when a currency label or code has no lookup entry."""

    def __init__(self, currency: str, supported: Optional[list[str]] = None):
        super().__init__(
            f"Unsupported currency: {currency}",
            code="UNKNOWN_CURRENCY",
            details={"currency": currency, "supported": supported or []},
        )


class InvalidPreferenceError(ValidationError):
    """Raised when a partial update does not fit the category's schema."""

    def __init__(self, category: str, errors: list[dict[str, Any]]):
        super().__init__(
            f"Invalid {category} preferences",
            code="INVALID_PREFERENCE",
            details={"category": category, "errors": errors},
        )
