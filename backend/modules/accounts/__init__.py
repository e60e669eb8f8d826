"""
Accounts module.

The account service collaborator: credential checks, profile, password,
account deletion, demo reset and avatar upload.

Public API:
- IAccountService: Interface for account operations
- HttpAccountService: httpx client for the real service
- InMemoryAccountService: Seeded in-memory implementation
- Validation helpers run before any request
- Account exceptions: ServiceError and the validation errors
"""

from .interfaces import IAccountService
from .models import (
    ServiceResponse,
    LoginResponse,
    ProfileResponse,
    UploadResponse,
    ProfileUpdate,
)
from .exceptions import (
    GENERIC_SERVICE_MESSAGE,
    ServiceError,
    MissingFieldError,
    InvalidEmailError,
    WeakPasswordError,
    PasswordMismatchError,
)
from .validation import (
    validate_email,
    validate_credentials,
    validate_password_strength,
    validate_password_change,
    validate_profile_draft,
)
from .service import (
    HttpAccountService,
    InMemoryAccountService,
    get_account_service,
    DEMO_EMAIL,
    DEMO_PASSWORD,
)

__all__ = [
    # Interface
    "IAccountService",
    # Models
    "ServiceResponse",
    "LoginResponse",
    "ProfileResponse",
    "UploadResponse",
    "ProfileUpdate",
    # Exceptions
    "GENERIC_SERVICE_MESSAGE",
    "ServiceError",
    "MissingFieldError",
    "InvalidEmailError",
    "WeakPasswordError",
    "PasswordMismatchError",
    # Validation
    "validate_email",
    "validate_credentials",
    "validate_password_strength",
    "validate_password_change",
    "validate_profile_draft",
    # Implementations
    "HttpAccountService",
    "InMemoryAccountService",
    "get_account_service",
    "DEMO_EMAIL",
    "DEMO_PASSWORD",
]
