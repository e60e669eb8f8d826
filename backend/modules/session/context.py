"""
Explicit session handle.

This module provides the "container" that wires together the storage
channels and every component of the session layer. One SessionContext
exists per running application process: created at startup, torn down on
exit, never shared implicitly between unrelated runs (or tests).
"""

from typing import TYPE_CHECKING, Callable, Optional

from shared.config import Settings, get_settings
from shared.cookies import CookieJar, appearance_cookie_options
from shared.storage import KeyValueStore, get_key_value_store

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.accounts.interfaces import IAccountService
    from modules.preferences.interfaces import IPreferenceStore
    from modules.profile.interfaces import IProfileCache
    from modules.vault.interfaces import ITokenVault
    from .service import SessionGate


class SessionContext:
    """
    Container for all session layer instances.

    Components are created lazily on first access and cached for the
    lifetime of the context. Pre-built store, cookie jar or account service
    instances can be injected, which is how tests supply fakes.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[KeyValueStore] = None,
        cookies: Optional[CookieJar] = None,
        accounts: "Optional[IAccountService]" = None,
        navigate: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store
        self._cookies = cookies
        self._accounts = accounts
        self._navigate = navigate
        self._vault: "ITokenVault | None" = None
        self._profiles: "IProfileCache | None" = None
        self._preferences: "IPreferenceStore | None" = None
        self._gate: "SessionGate | None" = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> KeyValueStore:
        """Get the durable store."""
        if self._store is None:
            self._store = get_key_value_store(self._settings)
        return self._store

    @property
    def cookies(self) -> CookieJar:
        """Get the cookie channel."""
        if self._cookies is None:
            self._cookies = CookieJar()
        return self._cookies

    @property
    def vault(self) -> "ITokenVault":
        """Get the token vault."""
        if self._vault is None:
            from modules.vault.service import TokenVault
            self._vault = TokenVault(
                self.store,
                self.cookies,
                token_key=self._settings.auth_token_key,
            )
        return self._vault

    @property
    def profiles(self) -> "IProfileCache":
        """Get the profile cache."""
        if self._profiles is None:
            from modules.profile.service import ProfileCache
            self._profiles = ProfileCache(
                self.store,
                self.vault,
                user_key=self._settings.user_key,
            )
        return self._profiles

    @property
    def preferences(self) -> "IPreferenceStore":
        """Get the preference store."""
        if self._preferences is None:
            from modules.preferences.service import PreferenceStore
            self._preferences = PreferenceStore(
                self.store,
                self.cookies,
                appearance_cookie_options=appearance_cookie_options(self._settings),
            )
        return self._preferences

    @property
    def accounts(self) -> "IAccountService":
        """Get the account service client."""
        if self._accounts is None:
            from modules.accounts.service import get_account_service
            self._accounts = get_account_service(self._settings)
        return self._accounts

    @property
    def gate(self) -> "SessionGate":
        """Get the session gate."""
        if self._gate is None:
            from .service import SessionGate
            self._gate = SessionGate(
                vault=self.vault,
                profiles=self.profiles,
                preferences=self.preferences,
                accounts=self.accounts,
                settings=self._settings,
                navigate=self._navigate,
            )
        return self._gate

    def start(self) -> "SessionGate":
        """Build the gate and resolve the initial session state."""
        gate = self.gate
        gate.initialize()
        return gate

    def teardown(self) -> None:
        """
        Clear every cached instance, injected ones included.

        Data already written to a file-backed store survives; the next
        access rebuilds components from settings as a fresh process would.
        """
        self._store = None
        self._cookies = None
        self._accounts = None
        self._vault = None
        self._profiles = None
        self._preferences = None
        self._gate = None
