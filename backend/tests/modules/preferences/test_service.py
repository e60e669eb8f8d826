"""Tests for the preference store."""

import json

import pytest

from shared.exceptions import PersistenceError
from shared.storage import InMemoryKeyValueStore
from modules.preferences.exceptions import (
    InvalidPreferenceError,
    UnknownCategoryError,
    UnknownCurrencyError,
)
from modules.preferences.interfaces import IPreferenceStore
from modules.preferences.currency import format_currency
from modules.preferences.models import CurrencyPosition, PreferenceCategory, Theme
from modules.preferences.service import PreferenceStore, namespaced_key


class FailingProfileStore(InMemoryKeyValueStore):
    """Store that rejects every write of a profile document."""

    def set_item(self, key: str, value: str) -> None:
        if key.startswith("profile_"):
            raise PersistenceError("quota", key=key, operation="write")
        super().set_item(key, value)


class FailingRemovalStore(InMemoryKeyValueStore):
    """Store that refuses to remove the given keys."""

    def __init__(self, stuck: set[str]):
        super().__init__()
        self.stuck = stuck

    def remove_item(self, key: str) -> None:
        if key in self.stuck:
            raise PersistenceError("locked", key=key, operation="remove")
        super().remove_item(key)


class TestGet:
    def test_implements_interface(self, preferences):
        assert isinstance(preferences, IPreferenceStore)

    def test_defaults_on_first_read(self, preferences):
        """Categories should read as their defaults when nothing is stored."""
        appearance = preferences.get("u1", PreferenceCategory.APPEARANCE)
        assert appearance.theme == Theme.LIGHT
        assert preferences.get("u1", "budgetPreferences").currency == "ZMW"

    def test_unknown_category(self, preferences):
        with pytest.raises(UnknownCategoryError):
            preferences.get("u1", "wallpaper")

    def test_legacy_flat_key_fallback(self, preferences, store):
        """Flat keys from before namespacing should still be read."""
        store.set_item("notifications", json.dumps({"marketingEmails": True}))
        assert preferences.get("u1", PreferenceCategory.NOTIFICATIONS).marketing_emails is True

    def test_namespaced_wins_over_legacy(self, preferences, store):
        store.set_item("notifications", json.dumps({"marketingEmails": True}))
        preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"marketingEmails": False})
        assert preferences.get("u1", PreferenceCategory.NOTIFICATIONS).marketing_emails is False

    def test_malformed_value_reads_as_defaults(self, preferences, store):
        store.set_item("notifications_u1", "{oops")
        assert preferences.get("u1", PreferenceCategory.NOTIFICATIONS).marketing_emails is False

    def test_invalid_value_reads_as_defaults(self, preferences, store):
        store.set_item("budgetPreferences_u1", json.dumps({"warningThreshold": 500}))
        assert preferences.get("u1", PreferenceCategory.BUDGET_PREFERENCES).warning_threshold == 80

    def test_partial_value_merged_onto_defaults(self, preferences, store):
        store.set_item("budgetPreferences_u1", json.dumps({"warningThreshold": 60}))
        prefs = preferences.get("u1", PreferenceCategory.BUDGET_PREFERENCES)
        assert prefs.warning_threshold == 60
        assert prefs.currency == "ZMW"


class TestSet:
    def test_appearance_lives_in_cookie(self, preferences, store, jar):
        """Appearance should round-trip through the per-user cookie."""
        preferences.set("u1", PreferenceCategory.APPEARANCE, {"theme": "dark", "sidebarCollapsed": True})

        assert json.loads(jar.get("appearanceSettings_u1"))["theme"] == "dark"
        assert jar.options("appearanceSettings_u1").max_age == 365 * 24 * 60 * 60
        assert store.keys() == []

        appearance = preferences.get("u1", PreferenceCategory.APPEARANCE)
        assert appearance.theme == Theme.DARK
        assert appearance.sidebar_collapsed is True

    def test_users_are_isolated(self, preferences, store):
        """A write for one user should never be visible to another."""
        preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"marketingEmails": True})

        assert preferences.get("u1", PreferenceCategory.NOTIFICATIONS).marketing_emails is True
        assert preferences.get("u2", PreferenceCategory.NOTIFICATIONS).marketing_emails is False
        assert store.keys() == [namespaced_key(PreferenceCategory.NOTIFICATIONS, "u1")]

    def test_partial_merge(self, preferences):
        """Untouched fields should keep their current values."""
        preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"marketing_emails": True})
        prefs = preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"weeklyReports": False})
        assert prefs.marketing_emails is True
        assert prefs.weekly_reports is False

    def test_unknown_field_rejected(self, preferences, store):
        with pytest.raises(InvalidPreferenceError) as exc_info:
            preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"smsAlerts": True})
        assert exc_info.value.details["errors"][0]["loc"] == ["smsAlerts"]
        assert store.keys() == []

    def test_invalid_value_rejected(self, preferences, store):
        with pytest.raises(InvalidPreferenceError):
            preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"warningThreshold": 150})
        assert store.keys() == []

    def test_without_user_is_ephemeral(self, preferences, store, jar):
        """Writes without a user should never be persisted."""
        preferences.set(None, PreferenceCategory.APPEARANCE, {"theme": "dark"})
        assert preferences.get(None, PreferenceCategory.APPEARANCE).theme == Theme.DARK
        assert preferences.get("u1", PreferenceCategory.APPEARANCE).theme == Theme.LIGHT
        assert store.keys() == []
        assert jar.names() == []


class TestCurrencyCoupling:
    def test_profile_currency_rewrites_budget(self, preferences, store):
        """Changing the profile currency should set the budget currency and symbol."""
        preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "USD - US Dollar ($)"})
        preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "ZMW - Zambian Kwacha (ZK)"})

        budget = json.loads(store.get_item("budgetPreferences_u1"))
        assert {k: budget[k] for k in ("currency", "currencySymbol")} == {
            "currency": "ZMW",
            "currencySymbol": "K",
        }
        profile = preferences.get("u1", PreferenceCategory.PROFILE)
        assert (profile.currency_code, profile.currency_symbol) == ("ZMW", "K")

    def test_unknown_currency_writes_nothing(self, preferences, store):
        with pytest.raises(UnknownCurrencyError):
            preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "Monopoly Money"})
        assert store.keys() == []

    def test_budget_symbol_filled_in(self, preferences):
        prefs = preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"currency": "EUR"})
        assert prefs.currency_symbol == "€"

    def test_budget_position_filled_in(self, preferences):
        """Currencies written after the amount should switch the position too."""
        prefs = preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"currency": "CHF"})

        assert prefs.currency_symbol == "CHF"
        assert prefs.currency_position == CurrencyPosition.AFTER
        assert format_currency(1000, prefs) == "1,000.00CHF"

        prefs = preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"currency": "USD"})
        assert prefs.currency_position == CurrencyPosition.BEFORE

    def test_profile_code_and_symbol_follow_currency(self, preferences, store):
        """Code and symbol on the profile can only change through the currency label."""
        preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "ZMW - Zambian Kwacha (ZK)"})

        profile = preferences.set(
            "u1",
            PreferenceCategory.PROFILE,
            {"currencySymbol": "$", "currencyCode": "USD", "firstName": "Jane"},
        )

        assert profile.first_name == "Jane"
        assert (profile.currency_code, profile.currency_symbol) == ("ZMW", "K")
        budget = preferences.get("u1", PreferenceCategory.BUDGET_PREFERENCES)
        assert (budget.currency, budget.currency_symbol) == ("ZMW", "K")
        stored = json.loads(store.get_item("profile_u1"))
        assert (stored["currencyCode"], stored["currencySymbol"]) == ("ZMW", "K")

    def test_profile_code_recomputed_with_currency(self, preferences):
        profile = preferences.set(
            "u1",
            PreferenceCategory.PROFILE,
            {"currency": "USD - US Dollar ($)", "currencyCode": "EUR", "currencySymbol": "€"},
        )
        assert (profile.currency_code, profile.currency_symbol) == ("USD", "$")

    def test_failed_profile_write_rolls_back_budget(self, jar):
        """If the profile write fails the budget write should be undone."""
        store = FailingProfileStore()
        preferences = PreferenceStore(store, jar)

        with pytest.raises(PersistenceError):
            preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "USD - US Dollar ($)"})
        assert store.get_item("budgetPreferences_u1") is None

    def test_rollback_restores_previous_budget(self, jar):
        store = FailingProfileStore()
        preferences = PreferenceStore(store, jar)
        preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"currency": "EUR"})
        before = store.get_item("budgetPreferences_u1")

        with pytest.raises(PersistenceError):
            preferences.set("u1", PreferenceCategory.PROFILE, {"currency": "USD - US Dollar ($)"})
        assert store.get_item("budgetPreferences_u1") == before


class TestRemoval:
    @pytest.fixture
    def populated(self, preferences, store):
        for user_id in ("u1", "u2"):
            preferences.set(user_id, PreferenceCategory.APPEARANCE, {"theme": "dark"})
            preferences.set(user_id, PreferenceCategory.NOTIFICATIONS, {"marketingEmails": True})
            preferences.set(user_id, PreferenceCategory.BUDGET_PREFERENCES, {"currency": "USD"})
            store.set_item(f"transactions_{user_id}", "[]")
        store.set_item("settings", "{}")
        store.set_item("unrelated", "keep")
        return preferences

    def test_purge_for_user(self, populated, store, jar):
        """Purging should drop only the given user's data plus legacy keys."""
        populated.purge_for_user("u1")

        assert sorted(store.keys()) == [
            "budgetPreferences_u2",
            "notifications_u2",
            "transactions_u2",
            "unrelated",
        ]
        assert jar.get("appearanceSettings_u1") is None
        assert jar.get("appearanceSettings_u2") is not None

    def test_purge_is_idempotent(self, populated, store):
        populated.purge_for_user("u1")
        keys = sorted(store.keys())
        populated.purge_for_user("u1")
        assert sorted(store.keys()) == keys

    def test_reset_for_user(self, populated, store, jar):
        """Resetting should drop preferences but keep other per-user data."""
        populated.reset_for_user("u1")

        assert "transactions_u1" in store.keys()
        assert "notifications_u1" not in store.keys()
        assert populated.get("u1", PreferenceCategory.APPEARANCE).theme == Theme.LIGHT
        assert populated.get("u2", PreferenceCategory.APPEARANCE).theme == Theme.DARK

    def test_clear_all(self, populated, store, jar):
        populated.clear_all()
        assert store.keys() == ["unrelated"]
        assert jar.names() == []

    def test_purge_continues_past_failed_removal(self, jar):
        """One stuck key should not leave the user's other data behind."""
        store = FailingRemovalStore({"notifications_u1"})
        preferences = PreferenceStore(store, jar)
        preferences.set("u1", PreferenceCategory.APPEARANCE, {"theme": "dark"})
        preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"marketingEmails": True})
        preferences.set("u1", PreferenceCategory.PROFILE, {"firstName": "Jane"})
        store.set_item("transactions_u1", "[]")

        with pytest.raises(PersistenceError) as exc_info:
            preferences.purge_for_user("u1")

        assert "notifications_u1" in exc_info.value.message
        assert store.keys() == ["notifications_u1"]
        assert jar.get("appearanceSettings_u1") is None

    def test_reset_continues_past_failed_removal(self, jar):
        store = FailingRemovalStore({"notifications_u1"})
        preferences = PreferenceStore(store, jar)
        preferences.set("u1", PreferenceCategory.NOTIFICATIONS, {"marketingEmails": True})
        preferences.set("u1", PreferenceCategory.BUDGET_PREFERENCES, {"currency": "USD"})

        with pytest.raises(PersistenceError):
            preferences.reset_for_user("u1")

        assert store.get_item("budgetPreferences_u1") is None
