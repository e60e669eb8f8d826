"""
Session module data models.

Result objects returned to the UI layer. User-facing text travels in these
results; the UI decides how to show it.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from modules.profile.models import User


class SessionStatus(str, Enum):
    """SessionGate states. INITIALIZING is left exactly once."""

    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class LoginResult(BaseModel):
    success: bool
    user: Optional[User] = None
    message: Optional[str] = Field(None, description="Welcome text on success")
    error: Optional[str] = Field(None, description="Error text on failure")

    def __bool__(self) -> bool:
        return self.success


class LogoutResult(BaseModel):
    """Outcome of a logout. ``redirect_to`` is always the login view."""

    redirect_to: str
    user_id: Optional[str] = None
    errors: list[str] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.errors


class GuardState(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


class GuardOutcome(BaseModel):
    """What a guarded view should show right now."""

    state: GuardState
    location: Optional[str] = None
    content: Any = None


class DemoResetResult(BaseModel):
    success: bool = True
    message: str = "Demo data reset successfully"
    reload_required: bool = Field(
        default=True,
        description="In-memory state is stale until SessionGate.reload() runs",
    )
