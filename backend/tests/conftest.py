"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone

from shared.config import Settings
from shared.cookies import CookieJar
from shared.storage import InMemoryKeyValueStore
from modules.accounts.service import InMemoryAccountService
from modules.preferences.service import PreferenceStore
from modules.profile.service import ProfileCache
from modules.session.service import SessionGate
from modules.vault.service import TokenVault


class FakeClock:
    """Controllable clock for cookie expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, environment="test")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def jar(clock: FakeClock) -> CookieJar:
    return CookieJar(clock=clock)


@pytest.fixture
def vault(store, jar) -> TokenVault:
    return TokenVault(store, jar)


@pytest.fixture
def profiles(store, vault) -> ProfileCache:
    return ProfileCache(store, vault)


@pytest.fixture
def preferences(store, jar) -> PreferenceStore:
    return PreferenceStore(store, jar)


@pytest.fixture
def accounts() -> InMemoryAccountService:
    """Account service seeded with the demo account and one regular user."""
    service = InMemoryAccountService()
    service.register(
        "jane@example.com",
        "Secret#123",
        "Jane Banda",
        user_id="user-jane",
    )
    return service


@pytest.fixture
def navigations() -> list[str]:
    """Locations the gate navigated to, in order."""
    return []


@pytest.fixture
def gate(vault, profiles, preferences, accounts, settings, navigations) -> SessionGate:
    return SessionGate(
        vault=vault,
        profiles=profiles,
        preferences=preferences,
        accounts=accounts,
        settings=settings,
        navigate=navigations.append,
    )
