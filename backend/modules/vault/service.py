"""
Token vault implementation.

The durable store copy has no expiry of its own; the cookie copy carries
max-age so server-side request handling stops seeing it after the TTL.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from shared.config import SECONDS_PER_DAY
from shared.cookies import CookieJar, CookieOptions
from shared.exceptions import PersistenceError
from shared.storage import KeyValueStore

from .interfaces import ITokenVault

logger = logging.getLogger(__name__)


DEFAULT_TOKEN_KEY = "authToken"


def generate_token(clock: Optional[Callable[[], datetime]] = None) -> str:
    """
    Generate a placeholder session token.

    Stands in for a server-issued credential until the account service
    hands one out; nothing downstream inspects its shape.
    """
    now = (clock or (lambda: datetime.now(timezone.utc)))()
    return f"jwt-token-{int(now.timestamp() * 1000)}"


class TokenVault(ITokenVault):
    """
    Session token held in the durable store and the cookie channel.

    Reads prefer the store and fall back to the cookie; writes and clears
    always touch both.
    """

    def __init__(
        self,
        store: KeyValueStore,
        cookies: CookieJar,
        token_key: str = DEFAULT_TOKEN_KEY,
        cookie_path: str = "/",
    ):
        self._store = store
        self._cookies = cookies
        self._token_key = token_key
        self._cookie_path = cookie_path

    @property
    def token_key(self) -> str:
        return self._token_key

    def write(self, token: str, ttl_days: int) -> None:
        if not isinstance(token, str) or not token:
            raise PersistenceError(
                "Session token must be a non-empty string",
                key=self._token_key,
                operation="serialize",
            )
        self._store.set_item(self._token_key, token)
        self._cookies.set(
            self._token_key,
            token,
            CookieOptions(max_age=ttl_days * SECONDS_PER_DAY, path=self._cookie_path),
        )

    def read(self) -> Optional[str]:
        token = self._store.get_item(self._token_key)
        if token:
            return token
        token = self._cookies.get(self._token_key)
        if token:
            logger.debug("Session token recovered from cookie channel")
            return token
        return None

    def clear(self) -> None:
        try:
            self._store.remove_item(self._token_key)
        finally:
            self._cookies.delete(self._token_key, path=self._cookie_path)
