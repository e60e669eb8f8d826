"""
Session gate implementation.

Composes the token vault, profile cache and preference store into a single
authentication decision, and drives the account operations that change
session state.
"""

import functools
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from shared.config import Settings, get_settings
from shared.exceptions import PersistenceError, ValidationError
from modules.accounts.exceptions import MissingFieldError, ServiceError
from modules.accounts.interfaces import IAccountService
from modules.accounts.models import ProfileUpdate
from modules.accounts.validation import (
    validate_credentials,
    validate_password_change,
    validate_profile_draft,
)
from modules.preferences.currency import PROFILE_CURRENCIES, format_currency
from modules.preferences.interfaces import IPreferenceStore
from modules.preferences.models import PreferenceCategory, PreferenceModel
from modules.profile.interfaces import IProfileCache
from modules.profile.models import Session, User
from modules.vault.interfaces import ITokenVault
from modules.vault.service import generate_token

from .exceptions import DemoResetNotAllowedError, NotAuthenticatedError, SessionStateError
from .interfaces import ISessionGate
from .models import (
    DemoResetResult,
    GuardOutcome,
    GuardState,
    LoginResult,
    LogoutResult,
    SessionStatus,
)

logger = logging.getLogger(__name__)


Navigator = Callable[[str], None]

DEMO_WELCOME = "Welcome to the demo!"
RETURNING_WELCOME = "Welcome back!"


def split_name(name: str) -> tuple[str, str]:
    """Split a display name into first name and the rest."""
    parts = (name or "").strip().split(" ")
    return parts[0], " ".join(parts[1:])


class SessionGate(ISessionGate):
    """
    Single source of truth for "is there an authenticated user right now".

    State machine: INITIALIZING -> AUTHENTICATED | UNAUTHENTICATED exactly
    once; AUTHENTICATED -> UNAUTHENTICATED only via logout(); the reverse
    only via a successful login(). Switching users requires a logout first.
    """

    def __init__(
        self,
        vault: ITokenVault,
        profiles: IProfileCache,
        preferences: IPreferenceStore,
        accounts: IAccountService,
        settings: Optional[Settings] = None,
        navigate: Optional[Navigator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._vault = vault
        self._profiles = profiles
        self._preferences = preferences
        self._accounts = accounts
        self._settings = settings or get_settings()
        self._navigate = navigate or (lambda location: None)
        self._clock = clock
        self._status = SessionStatus.INITIALIZING
        self._session: Optional[Session] = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_loading(self) -> bool:
        return self._status == SessionStatus.INITIALIZING

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def user(self) -> Optional[User]:
        return self._session.user if self._session else None

    @property
    def user_id(self) -> Optional[str]:
        return self._session.user.id if self._session else None

    def initialize(self) -> SessionStatus:
        if self._status != SessionStatus.INITIALIZING:
            return self._status
        try:
            session = self._profiles.hydrate()
        except PersistenceError as e:
            logger.error(f"Unable to read stored session, starting signed out: {e.message}")
            session = None
        self._resolve(session)
        logger.debug(f"Session initialized as {self._status.value}")
        return self._status

    def reload(self) -> SessionStatus:
        """
        Drop in-memory state and re-initialize from storage.

        The in-process equivalent of a full page reload.
        """
        self._session = None
        self._status = SessionStatus.INITIALIZING
        return self.initialize()

    def is_authenticated(self) -> bool:
        if self._status == SessionStatus.INITIALIZING:
            self.initialize()
        return self._status == SessionStatus.AUTHENTICATED

    async def login(self, email: str, password: str) -> LoginResult:
        self.initialize()
        if self._status == SessionStatus.AUTHENTICATED:
            raise SessionStateError(
                "Log out before signing in to another account",
                state=self._status.value,
            )
        email = validate_credentials(email, password)

        try:
            user = await self._accounts.login(email, password)
        except ServiceError as e:
            logger.info(f"Login rejected for {email}: {e.message}")
            return LoginResult(success=False, error=e.message)

        session = Session(user=user, token=generate_token(self._clock))
        try:
            self._profiles.commit(session)
            self._vault.write(session.token, self._settings.auth_token_ttl_days)
        except PersistenceError as e:
            logger.error(f"Unable to persist session for {user.id}: {e.message}")
            self._discard_partial_login()
            return LoginResult(success=False, error=PersistenceError.USER_MESSAGE)

        self._resolve(session)
        logger.info(f"User {user.id} logged in{' (demo)' if user.is_demo else ''}")
        return LoginResult(
            success=True,
            user=user,
            message=DEMO_WELCOME if user.is_demo else RETURNING_WELCOME,
        )

    def logout(self) -> LogoutResult:
        user_id = self.user_id
        if user_id is None:
            user_id = self._profiles.peek_user_id()

        steps: list[tuple[str, Callable[[], None]]] = []
        if user_id:
            steps.append(("purge preferences", lambda: self._preferences.purge_for_user(user_id)))
        steps.append(("clear session", self._profiles.clear))

        errors: list[str] = []
        for name, step in steps:
            try:
                step()
            except Exception as e:  # every step must run regardless
                logger.exception(f"Logout step '{name}' failed")
                errors.append(f"{name}: {e}")

        self._resolve(None)
        logger.info(f"User {user_id or '<none>'} logged out")
        self._navigate(self._settings.login_path)
        return LogoutResult(redirect_to=self._settings.login_path, user_id=user_id, errors=errors)

    def guard(self, component: Callable[..., Any]) -> Callable[..., GuardOutcome]:
        """
        Wrap a view so it only renders for an authenticated user.

        The wrapped component is never called unless the session is
        confirmed: while initializing the outcome is LOADING, and an
        unauthenticated visit navigates to the login view and renders nothing.
        """

        @functools.wraps(component)
        def guarded(*args: Any, **kwargs: Any) -> GuardOutcome:
            if self._status == SessionStatus.INITIALIZING:
                return GuardOutcome(state=GuardState.LOADING)
            if self._status != SessionStatus.AUTHENTICATED:
                self._navigate(self._settings.login_path)
                return GuardOutcome(state=GuardState.REDIRECT, location=self._settings.login_path)
            return GuardOutcome(state=GuardState.RENDER, content=component(*args, **kwargs))

        return guarded

    async def reset_demo_account(self) -> DemoResetResult:
        user = self.user if self.is_authenticated() else None
        if user is None or not user.is_demo:
            raise DemoResetNotAllowedError()

        await self._accounts.reset_demo(user.email)
        logger.info(f"Demo data reset for {user.id}")
        return DemoResetResult()

    async def update_profile(self, fields: Mapping[str, Any]) -> User:
        """Send profile fields to the account service and merge the result into the session."""
        user = self._require_user()
        updated = await self._accounts.update_profile(user.id, fields)
        return self._merge_user(updated.to_record())

    async def save_profile(self) -> User:
        """
        Reconcile the profile draft with the account service.

        Validates the draft, sends it, then writes the service's view of
        the user back into both the session and the draft.
        """
        user = self._require_user()
        draft = self._preferences.get(user.id, PreferenceCategory.PROFILE)
        validate_profile_draft(draft)

        update = ProfileUpdate(
            name=draft.full_name,
            email=draft.email.strip(),
            avatar=draft.profile_picture,
            phone=draft.phone,
            timezone=draft.timezone,
            language=draft.language,
            currency=draft.currency,
            currency_symbol=draft.currency_symbol,
            currency_code=draft.currency_code,
        )
        saved = await self.update_profile(update.to_payload())
        self._reconcile_draft(user.id, saved)
        return saved

    async def load_profile(self) -> PreferenceModel:
        """
        Refresh the profile draft from the account service.

        Falls back to the stored draft when the service has no record of
        the user or cannot be reached.
        """
        user = self._require_user()
        try:
            account_user = await self._accounts.get_profile(user.id)
        except ServiceError as e:
            logger.warning(f"Unable to load profile for {user.id}: {e.message}")
            account_user = None
        if account_user is None:
            return self._preferences.get(user.id, PreferenceCategory.PROFILE)
        return self._reconcile_draft(user.id, account_user)

    async def change_password(self, current: str, new: str, confirm: str) -> Optional[str]:
        validate_password_change(current, new, confirm)
        user = self._require_user()
        return await self._accounts.change_password(user.id, current, new)

    async def delete_account(self, password: str) -> LogoutResult:
        if not password:
            raise MissingFieldError("Please enter your password", ["password"])
        user = self._require_user()
        await self._accounts.delete_account(user.id, password)
        logger.info(f"Account {user.id} deleted")
        return self.logout()

    async def upload_avatar(self, filename: str, content: bytes, content_type: str) -> str:
        if not content_type.startswith("image/"):
            raise ValidationError(
                "Please choose an image file",
                code="INVALID_FILE_TYPE",
                details={"content_type": content_type},
            )
        user = self._require_user()
        url = await self._accounts.upload_avatar(user.id, filename, content, content_type)
        self._merge_user({"avatar": url})
        self._preferences.set(user.id, PreferenceCategory.PROFILE, {"profilePicture": url})
        return url

    def get_preferences(self, category: Union[PreferenceCategory, str]) -> PreferenceModel:
        """Preferences for the active user, or ephemeral defaults without one."""
        return self._preferences.get(self.user_id, category)

    def update_preferences(
        self,
        category: Union[PreferenceCategory, str],
        partial: Mapping[str, Any],
    ) -> PreferenceModel:
        return self._preferences.set(self.user_id, category, partial)

    def reset_preferences(self) -> None:
        """Return the active user's preferences to their defaults."""
        self._preferences.reset_for_user(self._require_user().id)

    def format_currency(self, amount: float) -> str:
        return format_currency(
            amount,
            self.get_preferences(PreferenceCategory.BUDGET_PREFERENCES),
        )

    def _resolve(self, session: Optional[Session]) -> None:
        self._session = session
        self._status = (
            SessionStatus.AUTHENTICATED if session is not None else SessionStatus.UNAUTHENTICATED
        )

    def _require_user(self) -> User:
        if not self.is_authenticated() or self._session is None:
            raise NotAuthenticatedError()
        return self._session.user

    def _merge_user(self, fields: Mapping[str, Any]) -> User:
        user = self._profiles.merge_profile(fields)
        self._session = Session(user=user, token=self._session.token)
        return user

    def _reconcile_draft(self, user_id: str, account_user: User) -> PreferenceModel:
        """Write the account service's view of the user into the profile draft."""
        first_name, last_name = split_name(account_user.name)
        reconciled: dict[str, Any] = {
            "firstName": first_name,
            "lastName": last_name,
            "email": account_user.email,
            "profilePicture": account_user.avatar,
        }
        extra = account_user.model_extra or {}
        for key in ("phone", "timezone", "language"):
            if extra.get(key):
                reconciled[key] = extra[key]
        currency = extra.get("currency")
        if currency in PROFILE_CURRENCIES:
            reconciled["currency"] = currency
        elif currency:
            logger.warning(f"Ignoring unsupported currency '{currency}' returned for {user_id}")
        return self._preferences.set(user_id, PreferenceCategory.PROFILE, reconciled)

    def _discard_partial_login(self) -> None:
        try:
            self._profiles.clear()
        except PersistenceError as e:
            logger.error(f"Unable to discard partial login state: {e.message}")
