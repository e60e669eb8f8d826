"""
Token vault module.

Owns the raw session token across the durable store and the cookie channel.

Public API:
- ITokenVault: Interface for token storage
- TokenVault: Dual-channel implementation
- generate_token: Placeholder token factory used at login
"""

from .interfaces import ITokenVault
from .service import TokenVault, generate_token, DEFAULT_TOKEN_KEY

__all__ = [
    # Interface
    "ITokenVault",
    # Implementation
    "TokenVault",
    "generate_token",
    "DEFAULT_TOKEN_KEY",
]
