"""
Preferences module data models.

Each category of StoredPreferences is a Pydantic model whose defaults are
the documented first-read values. Stored documents use camelCase keys.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class PreferenceCategory(str, Enum):
    """Preference categories, each addressed per user as (user_id, category)."""

    APPEARANCE = "appearance"
    NOTIFICATIONS = "notifications"
    PROFILE = "profile"
    BUDGET_PREFERENCES = "budgetPreferences"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class ColorScheme(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    PINK = "pink"
    INDIGO = "indigo"
    TEAL = "teal"
    RED = "red"
    AMBER = "amber"
    EMERALD = "emerald"


class FontSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra-large"


class Layout(str, Enum):
    DEFAULT = "default"
    WIDE = "wide"
    CENTERED = "centered"


class CardStyle(str, Enum):
    DEFAULT = "default"
    SHARP = "sharp"
    ROUNDED = "rounded"
    PILL = "pill"


class SidebarPosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class NotificationKind(str, Enum):
    GENERAL = "general"
    BUDGET = "budget"
    REPORTS = "reports"
    MARKETING = "marketing"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class CurrencyPosition(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class PreferenceModel(BaseModel):
    """Base for all categories: camelCase storage, unknown keys dropped."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_record(self) -> dict:
        """Serialize to the stored (camelCase) representation."""
        return self.model_dump(mode="json", by_alias=True)


class AppearanceSettings(PreferenceModel):
    theme: Theme = Theme.LIGHT
    color_scheme: ColorScheme = ColorScheme.BLUE
    custom_primary_color: Optional[str] = Field(None, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")
    font_size: FontSize = FontSize.MEDIUM
    layout: Layout = Layout.DEFAULT
    card_style: CardStyle = CardStyle.DEFAULT
    compact_mode: bool = False
    animations: bool = True
    sidebar_position: SidebarPosition = SidebarPosition.LEFT
    sidebar_collapsed: bool = False


class NotificationSettings(PreferenceModel):
    """Enabled/disabled flags, each belonging to one NotificationKind."""

    email_notifications: bool = True
    push_notifications: bool = True
    budget_alerts: bool = True
    large_transactions: bool = True
    bill_reminders: bool = True
    goal_reminders: bool = False
    weekly_reports: bool = True
    monthly_reports: bool = True
    marketing_emails: bool = False
    product_updates: bool = True

    def is_kind_enabled(self, kind: NotificationKind) -> bool:
        """True when any flag of the given kind is on."""
        return any(getattr(self, flag) for flag in NOTIFICATION_KINDS[NotificationKind(kind)])


NOTIFICATION_KINDS: dict[NotificationKind, tuple[str, ...]] = {
    NotificationKind.GENERAL: ("email_notifications", "push_notifications"),
    NotificationKind.BUDGET: (
        "budget_alerts",
        "large_transactions",
        "bill_reminders",
        "goal_reminders",
    ),
    NotificationKind.REPORTS: ("weekly_reports", "monthly_reports"),
    NotificationKind.MARKETING: ("marketing_emails", "product_updates"),
}


class ProfileSettings(PreferenceModel):
    """
    Draft copy of the editable identity/contact fields.

    Distinct from the session's user record; reconciled with the account
    service on explicit save.
    """

    first_name: str = "John"
    last_name: str = "Doe"
    email: str = "john.doe@example.com"
    phone: str = "+260 "
    timezone: str = "Central Africa Time"
    language: str = "English"
    currency: str = "ZMW - Zambian Kwacha (ZK)"
    profile_picture: Optional[str] = None
    currency_symbol: str = "K"
    currency_code: str = "ZMW"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class BudgetPreferences(PreferenceModel):
    default_budget_period: BudgetPeriod = BudgetPeriod.MONTHLY
    rollover_unused: bool = True
    warning_threshold: int = Field(default=80, ge=0, le=100)
    auto_save_percentage: int = Field(default=10, ge=0, le=100)
    round_up_transactions: bool = False
    categorize_transactions: bool = True
    default_categories: list[str] = Field(
        default_factory=lambda: [
            "Food",
            "Transportation",
            "Entertainment",
            "Utilities",
            "Healthcare",
            "Shopping",
        ]
    )
    currency: str = "ZMW"
    currency_symbol: str = "K"
    currency_position: CurrencyPosition = CurrencyPosition.BEFORE
    decimal_places: int = Field(default=2, ge=0, le=4)
    thousands_separator: str = Field(default=",", pattern=r"^[,. ]$")
    decimal_separator: str = Field(default=".", pattern=r"^[.,]$")


CATEGORY_MODELS: dict[PreferenceCategory, type[PreferenceModel]] = {
    PreferenceCategory.APPEARANCE: AppearanceSettings,
    PreferenceCategory.NOTIFICATIONS: NotificationSettings,
    PreferenceCategory.PROFILE: ProfileSettings,
    PreferenceCategory.BUDGET_PREFERENCES: BudgetPreferences,
}
