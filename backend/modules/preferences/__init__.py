"""
Preferences module.

Handles per-user namespaced settings: appearance, notifications, the profile
draft and budget preferences.

Public API:
- IPreferenceStore: Interface for preference operations
- PreferenceStore: Durable store / cookie channel implementation
- Category models: AppearanceSettings, NotificationSettings, ProfileSettings, BudgetPreferences
- Currency helpers: resolve_profile_currency, resolve_budget_currency, format_currency
- Preference exceptions: UnknownCategoryError, UnknownCurrencyError, InvalidPreferenceError
"""

from .interfaces import IPreferenceStore
from .models import (
    PreferenceCategory,
    PreferenceModel,
    AppearanceSettings,
    NotificationSettings,
    NotificationKind,
    ProfileSettings,
    BudgetPreferences,
    Theme,
    ColorScheme,
    FontSize,
    Layout,
    CardStyle,
    SidebarPosition,
    BudgetPeriod,
    CurrencyPosition,
    CATEGORY_MODELS,
    NOTIFICATION_KINDS,
)
from .exceptions import (
    UnknownCategoryError,
    UnknownCurrencyError,
    InvalidPreferenceError,
)
from .currency import (
    CurrencyInfo,
    PROFILE_CURRENCIES,
    BUDGET_CURRENCIES,
    resolve_profile_currency,
    resolve_budget_currency,
    format_currency,
)
from .service import (
    PreferenceStore,
    namespaced_key,
    APPEARANCE_COOKIE_BASE,
    LEGACY_KEYS,
)

__all__ = [
    # Interface
    "IPreferenceStore",
    # Models
    "PreferenceCategory",
    "PreferenceModel",
    "AppearanceSettings",
    "NotificationSettings",
    "NotificationKind",
    "ProfileSettings",
    "BudgetPreferences",
    "Theme",
    "ColorScheme",
    "FontSize",
    "Layout",
    "CardStyle",
    "SidebarPosition",
    "BudgetPeriod",
    "CurrencyPosition",
    "CATEGORY_MODELS",
    "NOTIFICATION_KINDS",
    # Exceptions
    "UnknownCategoryError",
    "UnknownCurrencyError",
    "InvalidPreferenceError",
    # Currency
    "CurrencyInfo",
    "PROFILE_CURRENCIES",
    "BUDGET_CURRENCIES",
    "resolve_profile_currency",
    "resolve_budget_currency",
    "format_currency",
    # Implementation
    "PreferenceStore",
    "namespaced_key",
    "APPEARANCE_COOKIE_BASE",
    "LEGACY_KEYS",
]
