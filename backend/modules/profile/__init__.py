"""
Profile module.

Owns the cached user record, keyed to the token vault's validity.

Public API:
- IProfileCache: Interface for the cached user record
- ProfileCache: Durable-store implementation
- User, Session: Identity models
- Profile exceptions: CorruptedSessionError, NoActiveSessionError
"""

from .interfaces import IProfileCache
from .models import User, Session
from .exceptions import CorruptedSessionError, NoActiveSessionError
from .service import ProfileCache, DEFAULT_USER_KEY

__all__ = [
    # Interface
    "IProfileCache",
    # Models
    "User",
    "Session",
    # Exceptions
    "CorruptedSessionError",
    "NoActiveSessionError",
    # Implementation
    "ProfileCache",
    "DEFAULT_USER_KEY",
]
