"""
Shared infrastructure for the Pocketbook session layer.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- storage: Durable key-value store implementations
- cookies: Cookie channel and its wire formats
- repository: Base class for store-backed repositories
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .cookies import (
    CookieJar,
    CookieOptions,
    SameSite,
    appearance_cookie_options,
    get_json_cookie,
    parse_cookie_header,
    set_json_cookie,
    user_cookie_name,
)
from .exceptions import (
    PocketbookError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    PersistenceError,
)
from .repository import BaseRepository
from .storage import (
    KeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    get_key_value_store,
)

__all__ = [
    "Settings",
    "get_settings",
    "CookieJar",
    "CookieOptions",
    "SameSite",
    "appearance_cookie_options",
    "get_json_cookie",
    "parse_cookie_header",
    "set_json_cookie",
    "user_cookie_name",
    "PocketbookError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "PersistenceError",
    "BaseRepository",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "get_key_value_store",
]
