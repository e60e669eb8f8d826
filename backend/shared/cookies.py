"""
Cookie channel.

A small attribute-bearing string store that is also sent with requests, so
server-side request handling can see it. CookieJar models the client side of
the channel (what a browser holds); render_set_cookie / parse_cookie_header
are the wire formats on either side of a request.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, Field

from .config import Settings

logger = logging.getLogger(__name__)


# Expressing a cookie with this expiry forces the browser to drop it
EXPIRED_AT = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)

_SAFE_CHARS = "!*'()"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SameSite(str, Enum):
    STRICT = "strict"
    LAX = "lax"
    NONE = "none"


class CookieOptions(BaseModel):
    """Attributes attached to a cookie when it is written."""

    model_config = {"frozen": True}

    max_age: Optional[int] = Field(None, description="Lifetime in seconds")
    expires: Optional[datetime] = Field(None, description="Absolute expiry")
    path: str = Field(default="/")
    domain: Optional[str] = None
    secure: bool = False
    same_site: SameSite = SameSite.LAX


def format_http_date(value: datetime) -> str:
    """Format a datetime the way the Expires attribute expects."""
    return value.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


def render_set_cookie(name: str, value: str, options: Optional[CookieOptions] = None) -> str:
    """Render a Set-Cookie string for a name/value pair."""
    options = options or CookieOptions()
    parts = [f"{quote(name, safe=_SAFE_CHARS)}={quote(value, safe=_SAFE_CHARS)}"]
    if options.expires is not None:
        parts.append(f"expires={format_http_date(options.expires)}")
    if options.max_age is not None:
        parts.append(f"max-age={options.max_age}")
    parts.append(f"path={options.path}")
    if options.domain:
        parts.append(f"domain={options.domain}")
    if options.secure:
        parts.append("secure")
    parts.append(f"samesite={options.same_site.value}")
    return "; ".join(parts)


def render_delete_cookie(name: str, path: str = "/", domain: Optional[str] = None) -> str:
    """Render the Set-Cookie string that deletes a cookie."""
    cookie = f"{quote(name, safe=_SAFE_CHARS)}=; expires={format_http_date(EXPIRED_AT)}; path={path}"
    if domain:
        cookie += f"; domain={domain}"
    return cookie


def parse_cookie_header(header: Optional[str]) -> dict[str, str]:
    """
    Parse a request Cookie header into a name -> value mapping.

    Pairs without a name or without '=' are skipped. Later duplicates win.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for chunk in header.split(";"):
        chunk = chunk.strip()
        if "=" not in chunk:
            continue
        name, _, value = chunk.partition("=")
        if name:
            cookies[unquote(name)] = unquote(value)
    return cookies


@dataclass
class _StoredCookie:
    value: str
    options: CookieOptions
    expires_at: Optional[datetime]


class CookieJar:
    """
    In-process cookie channel.

    Honors max-age/expires against an injectable clock: a cookie past its
    expiry is invisible to get() and dropped on access. Every write is also
    recorded as its rendered Set-Cookie string in ``set_cookie_headers``.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utcnow
        self._cookies: dict[str, _StoredCookie] = {}
        self.set_cookie_headers: list[str] = []

    def set(self, name: str, value: str, options: Optional[CookieOptions] = None) -> str:
        """Write a cookie and return the rendered Set-Cookie string."""
        options = options or CookieOptions()
        header = render_set_cookie(name, value, options)
        self.set_cookie_headers.append(header)

        expires_at = self._expiry_for(options)
        if expires_at is not None and expires_at <= self._clock():
            self._cookies.pop(name, None)
        else:
            self._cookies[name] = _StoredCookie(value, options, expires_at)
        return header

    def get(self, name: str) -> Optional[str]:
        stored = self._live(name)
        return stored.value if stored else None

    def options(self, name: str) -> Optional[CookieOptions]:
        """Attributes the live cookie was written with, if any."""
        stored = self._live(name)
        return stored.options if stored else None

    def delete(self, name: str, path: str = "/", domain: Optional[str] = None) -> str:
        """Express the cookie with an expiry in the past. Idempotent."""
        header = render_delete_cookie(name, path, domain)
        self.set_cookie_headers.append(header)
        self._cookies.pop(name, None)
        return header

    def names(self) -> list[str]:
        return [name for name in list(self._cookies) if self._live(name)]

    def header(self) -> str:
        """The Cookie request header a client would send right now."""
        return "; ".join(
            f"{quote(name, safe=_SAFE_CHARS)}={quote(self._cookies[name].value, safe=_SAFE_CHARS)}"
            for name in self.names()
        )

    def _expiry_for(self, options: CookieOptions) -> Optional[datetime]:
        if options.max_age is not None:
            return self._clock() + timedelta(seconds=options.max_age)
        return options.expires

    def _live(self, name: str) -> Optional[_StoredCookie]:
        stored = self._cookies.get(name)
        if stored is None:
            return None
        if stored.expires_at is not None and stored.expires_at <= self._clock():
            del self._cookies[name]
            return None
        return stored


def set_json_cookie(
    jar: CookieJar,
    name: str,
    value: Any,
    options: Optional[CookieOptions] = None,
) -> str:
    """Serialize a value to JSON and store it as a cookie."""
    return jar.set(name, json.dumps(value, separators=(",", ":")), options)


def get_json_cookie(jar: CookieJar, name: str) -> Optional[Any]:
    """Read a JSON cookie. Malformed JSON is logged and treated as absent."""
    raw = jar.get(name)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed JSON cookie '{name}'")
        return None


def user_cookie_name(base_name: str, user_id: Optional[str] = None) -> str:
    """Generate a user-specific cookie name, or the bare name without a user."""
    if not user_id:
        return base_name
    return f"{base_name}_{user_id}"


def appearance_cookie_options(settings: Settings) -> CookieOptions:
    """Appearance cookies live a year, site-wide, Secure only in production."""
    return CookieOptions(
        max_age=settings.appearance_cookie_max_age,
        path="/",
        same_site=SameSite.LAX,
        secure=settings.secure_cookies,
    )
