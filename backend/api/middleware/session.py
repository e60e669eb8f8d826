"""
Session cookie middleware.

Redirect policy for server-side request handling. Only the presence of the
session token cookie is checked; verifying the token is the account
service's job, not this layer's.
"""

from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from shared.config import Settings, get_settings


# Requests for these are never redirected (API calls, build assets, icons)
EXCLUDED_PREFIXES = ("api", "_next/static", "_next/image", "favicon.ico")


def is_excluded(path: str) -> bool:
    return path.lstrip("/").startswith(EXCLUDED_PREFIXES)


def resolve_redirect(path: str, has_token: bool, settings: Settings) -> Optional[str]:
    """
    Decide where a request should be sent instead, if anywhere.

    Args:
        path: Request path
        has_token: Whether the request carries the session token cookie
        settings: Provides the public routes and redirect targets

    Returns:
        Redirect location, or None to let the request through
    """
    if is_excluded(path):
        return None

    if any(path.startswith(route) for route in settings.public_routes):
        # Signed-in users have no business on the login/signup pages
        if has_token and path in settings.public_routes:
            return settings.home_path
        return None

    if not has_token:
        return settings.login_path
    return None


def make_session_middleware(
    settings: Optional[Settings] = None,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """
    Build the HTTP middleware enforcing the redirect policy.

    Usage:
        app.middleware("http")(make_session_middleware(settings))
    """
    settings = settings or get_settings()

    async def session_cookie_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        has_token = bool(request.cookies.get(settings.auth_token_key))
        location = resolve_redirect(request.url.path, has_token, settings)
        if location is not None:
            return RedirectResponse(location, status_code=307)
        return await call_next(request)

    return session_cookie_middleware
