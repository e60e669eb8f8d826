"""
Preference store implementation.

Appearance lives in the cookie channel so server-rendered pages can theme
themselves; every other category lives in the durable store. Keys are
namespaced per user as ``{category}_{user_id}``. Flat keys from before
namespacing are still read as a fallback but never written.
"""

import logging
import re
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shared.cookies import CookieJar, CookieOptions, get_json_cookie, set_json_cookie, user_cookie_name
from shared.exceptions import PersistenceError
from shared.repository import BaseRepository
from shared.storage import KeyValueStore

from .currency import resolve_budget_currency, resolve_profile_currency
from .exceptions import InvalidPreferenceError, UnknownCategoryError
from .interfaces import IPreferenceStore
from .models import CATEGORY_MODELS, PreferenceCategory, PreferenceModel

logger = logging.getLogger(__name__)


APPEARANCE_COOKIE_BASE = "appearanceSettings"

COOKIE_CATEGORIES = (PreferenceCategory.APPEARANCE,)
STORE_CATEGORIES = (
    PreferenceCategory.NOTIFICATIONS,
    PreferenceCategory.PROFILE,
    PreferenceCategory.BUDGET_PREFERENCES,
)

# Per-user keys owned by other features that logout must drop as well
USER_SCOPED_KEYS = ("transactions", "settings")

# Profile fields derived from the currency label, never written directly
PROFILE_DERIVED_KEYS = ("currencyCode", "currencySymbol")

# Flat keys written before per-user namespacing
LEGACY_KEYS = ("notifications", "transactions", "settings")

_KEY_PREFIXES = sorted({c.value for c in STORE_CATEGORIES} | set(USER_SCOPED_KEYS) | set(LEGACY_KEYS))
_PREFERENCE_KEY = re.compile(r"^(?:" + "|".join(map(re.escape, _KEY_PREFIXES)) + r")(?:_.+)?$")


def namespaced_key(category: PreferenceCategory, user_id: str) -> str:
    """Durable store key for a user's category."""
    return f"{category.value}_{user_id}"


class PreferenceStore(BaseRepository[PreferenceModel], IPreferenceStore):
    """
    Namespaced per-user preferences over the durable store and cookie channel.

    Every set() is a partial merge onto the current value. Changing the
    profile currency also rewrites the budget currency/symbol pair so the
    two never disagree.
    """

    def __init__(
        self,
        store: KeyValueStore,
        cookies: CookieJar,
        appearance_cookie_options: Optional[CookieOptions] = None,
    ):
        super().__init__(store)
        self._cookies = cookies
        self._cookie_options = appearance_cookie_options or CookieOptions(
            max_age=365 * 24 * 60 * 60
        )
        # Values for a session without a user; never persisted
        self._ephemeral: dict[PreferenceCategory, PreferenceModel] = {}

    def get(
        self,
        user_id: Optional[str],
        category: Union[PreferenceCategory, str],
    ) -> PreferenceModel:
        category = self._category(category)
        model = CATEGORY_MODELS[category]

        if not user_id:
            return self._ephemeral.get(category) or model()

        raw = self._read_raw(category, user_id)
        if raw is None:
            raw = self._read_raw(category, None)
            if raw is not None:
                logger.debug(f"Read {category.value} for {user_id} from legacy flat key")
        if raw is None:
            return model()

        try:
            return model.model_validate({**model().to_record(), **raw})
        except PydanticValidationError:
            logger.warning(f"Stored {category.value} for {user_id} is invalid, using defaults")
            return model()

    def set(
        self,
        user_id: Optional[str],
        category: Union[PreferenceCategory, str],
        partial: Union[Mapping[str, Any], BaseModel],
    ) -> PreferenceModel:
        category = self._category(category)
        updates = self._normalize(category, partial)

        budget_updates: Optional[dict[str, Any]] = None
        if category == PreferenceCategory.PROFILE:
            # Code and symbol only ever follow the currency label
            for key in PROFILE_DERIVED_KEYS:
                if updates.pop(key, None) is not None and "currency" not in updates:
                    logger.debug(f"Ignoring derived profile field {key} for {user_id}")
            if "currency" in updates:
                info = resolve_profile_currency(updates["currency"])
                updates["currencyCode"] = info.code
                updates["currencySymbol"] = info.symbol
                budget_updates = {
                    "currency": info.code,
                    "currencySymbol": info.symbol,
                    "currencyPosition": info.position.value,
                }
        elif category == PreferenceCategory.BUDGET_PREFERENCES and "currency" in updates:
            info = resolve_budget_currency(updates["currency"])
            updates.setdefault("currencySymbol", info.symbol)
            updates.setdefault("currencyPosition", info.position.value)

        merged = self._merge(category, self.get(user_id, category), updates)
        budget = None
        if budget_updates is not None:
            budget = self._merge(
                PreferenceCategory.BUDGET_PREFERENCES,
                self.get(user_id, PreferenceCategory.BUDGET_PREFERENCES),
                budget_updates,
            )

        if not user_id:
            self._ephemeral[category] = merged
            if budget is not None:
                self._ephemeral[PreferenceCategory.BUDGET_PREFERENCES] = budget
            return merged

        if budget is None:
            self._write(category, user_id, merged)
        else:
            self._write_coupled(user_id, merged, budget)
        return merged

    def purge_for_user(self, user_id: str) -> None:
        keys = [namespaced_key(category, user_id) for category in STORE_CATEGORIES]
        keys += [f"{name}_{user_id}" for name in USER_SCOPED_KEYS]
        keys += _KEY_PREFIXES
        # Cookies first: the jar never fails, the store may
        self._cookies.delete(user_cookie_name(APPEARANCE_COOKIE_BASE, user_id))
        if self._cookies.get(APPEARANCE_COOKIE_BASE) is not None:
            self._cookies.delete(APPEARANCE_COOKIE_BASE)
        self._remove_all(keys, operation="purge")

    def reset_for_user(self, user_id: str) -> None:
        self._cookies.delete(user_cookie_name(APPEARANCE_COOKIE_BASE, user_id))
        self._remove_all(
            [namespaced_key(category, user_id) for category in STORE_CATEGORIES],
            operation="reset",
        )

    def clear_all(self) -> None:
        keys = [key for key in self._store.keys() if _PREFERENCE_KEY.match(key)]
        cookies = [
            name
            for name in self._cookies.names()
            if name == APPEARANCE_COOKIE_BASE or name.startswith(APPEARANCE_COOKIE_BASE + "_")
        ]
        for name in cookies:
            self._cookies.delete(name)
        self._ephemeral.clear()
        self._remove_all(keys, operation="clear")
        logger.info(f"Cleared all stored preferences ({len(keys) + len(cookies)} entries)")

    def _remove_all(self, keys: list[str], operation: str) -> None:
        """
        Remove every key, even when some removals fail.

        Raises:
            PersistenceError: Once, after all keys were tried, naming the failures
        """
        failed = []
        for key in keys:
            try:
                self._store.remove_item(key)
            except PersistenceError as e:
                logger.warning(f"Unable to remove '{key}': {e.message}")
                failed.append(key)
        if failed:
            raise PersistenceError(
                f"Unable to remove {', '.join(failed)}",
                key=failed[0],
                operation=operation,
            )

    def _category(self, category: Union[PreferenceCategory, str]) -> PreferenceCategory:
        try:
            return PreferenceCategory(category)
        except ValueError:
            raise UnknownCategoryError(str(category)) from None

    def _normalize(
        self,
        category: PreferenceCategory,
        partial: Union[Mapping[str, Any], BaseModel],
    ) -> dict[str, Any]:
        """Rename field names to stored keys and reject unknown fields."""
        if isinstance(partial, BaseModel):
            partial = partial.model_dump(mode="json", by_alias=True, exclude_unset=True)

        fields = CATEGORY_MODELS[category].model_fields
        aliases = {info.alias or name: name for name, info in fields.items()}
        updates: dict[str, Any] = {}
        unknown = []
        for key, value in partial.items():
            if key in aliases:
                updates[key] = value
            elif key in fields:
                updates[fields[key].alias or key] = value
            else:
                unknown.append(key)
        if unknown:
            raise InvalidPreferenceError(
                category.value,
                [{"loc": [key], "msg": "Unknown field", "type": "extra_forbidden"} for key in unknown],
            )
        return updates

    def _merge(
        self,
        category: PreferenceCategory,
        current: PreferenceModel,
        updates: dict[str, Any],
    ) -> PreferenceModel:
        try:
            return CATEGORY_MODELS[category].model_validate({**current.to_record(), **updates})
        except PydanticValidationError as e:
            raise InvalidPreferenceError(category.value, e.errors(include_url=False)) from e

    def _read_raw(
        self,
        category: PreferenceCategory,
        user_id: Optional[str],
    ) -> Optional[dict[str, Any]]:
        """Read the stored document; None for the legacy flat key."""
        if category in COOKIE_CATEGORIES:
            name = user_cookie_name(APPEARANCE_COOKIE_BASE, user_id)
            raw = get_json_cookie(self._cookies, name)
        else:
            name = namespaced_key(category, user_id) if user_id else category.value
            try:
                raw = self._read_json(name)
            except ValueError:
                logger.warning(f"Ignoring malformed JSON under '{name}'")
                return None

        if raw is not None and not isinstance(raw, dict):
            logger.warning(f"Ignoring non-object value under '{name}'")
            return None
        return raw

    def _write(self, category: PreferenceCategory, user_id: str, value: PreferenceModel) -> None:
        if category in COOKIE_CATEGORIES:
            set_json_cookie(
                self._cookies,
                user_cookie_name(APPEARANCE_COOKIE_BASE, user_id),
                value.to_record(),
                self._cookie_options,
            )
        else:
            self._write_json(namespaced_key(category, user_id), value.to_record())

    def _write_coupled(
        self,
        user_id: str,
        profile: PreferenceModel,
        budget: PreferenceModel,
    ) -> None:
        """Write the budget/profile pair, undoing the first if the second fails."""
        budget_key = namespaced_key(PreferenceCategory.BUDGET_PREFERENCES, user_id)
        previous = self._store.get_item(budget_key)

        self._write(PreferenceCategory.BUDGET_PREFERENCES, user_id, budget)
        try:
            self._write(PreferenceCategory.PROFILE, user_id, profile)
        except PersistenceError:
            logger.warning(f"Rolling back budget currency for {user_id} after failed profile write")
            if previous is None:
                self._store.remove_item(budget_key)
            else:
                self._store.set_item(budget_key, previous)
            raise
