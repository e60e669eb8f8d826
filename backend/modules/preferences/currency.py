"""
Currency lookup tables and formatting.

The profile draft stores a human label ("ZMW - Zambian Kwacha (ZK)"); budget
preferences store the code and display symbol derived from it. Both tables
are fixed.
"""

from dataclasses import dataclass

from .exceptions import UnknownCurrencyError
from .models import BudgetPreferences, CurrencyPosition


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    symbol: str
    name: str
    position: CurrencyPosition = CurrencyPosition.BEFORE


# Profile currency label -> (code, symbol)
PROFILE_CURRENCIES: dict[str, CurrencyInfo] = {
    "USD - US Dollar ($)": CurrencyInfo("USD", "$", "US Dollar"),
    "EUR - Euro (€)": CurrencyInfo("EUR", "€", "Euro"),
    "GBP - British Pound (£)": CurrencyInfo("GBP", "£", "British Pound"),
    "ZAR - South African Rand (R)": CurrencyInfo("ZAR", "R", "South African Rand"),
    "ZMW - Zambian Kwacha (ZK)": CurrencyInfo("ZMW", "K", "Zambian Kwacha"),
    "BWP - Botswana Pula (P)": CurrencyInfo("BWP", "P", "Botswana Pula"),
    "NAD - Namibian Dollar (N$)": CurrencyInfo("NAD", "N$", "Namibian Dollar"),
}

# Budget currency code -> display info
BUDGET_CURRENCIES: dict[str, CurrencyInfo] = {
    info.code: info
    for info in (
        CurrencyInfo("ZMW", "K", "Zambian Kwacha"),
        CurrencyInfo("USD", "$", "US Dollar"),
        CurrencyInfo("EUR", "€", "Euro"),
        CurrencyInfo("GBP", "£", "British Pound"),
        CurrencyInfo("JPY", "¥", "Japanese Yen"),
        CurrencyInfo("CAD", "C$", "Canadian Dollar"),
        CurrencyInfo("AUD", "A$", "Australian Dollar"),
        CurrencyInfo("CHF", "CHF", "Swiss Franc", CurrencyPosition.AFTER),
        CurrencyInfo("CNY", "¥", "Chinese Yuan"),
        CurrencyInfo("INR", "₹", "Indian Rupee"),
        CurrencyInfo("KRW", "₩", "South Korean Won"),
        CurrencyInfo("BRL", "R$", "Brazilian Real"),
        CurrencyInfo("MXN", "$", "Mexican Peso"),
        CurrencyInfo("RUB", "₽", "Russian Ruble", CurrencyPosition.AFTER),
        CurrencyInfo("ZAR", "R", "South African Rand"),
        CurrencyInfo("SEK", "kr", "Swedish Krona", CurrencyPosition.AFTER),
        CurrencyInfo("NOK", "kr", "Norwegian Krone", CurrencyPosition.AFTER),
        CurrencyInfo("DKK", "kr", "Danish Krone", CurrencyPosition.AFTER),
        CurrencyInfo("PLN", "zł", "Polish Zloty", CurrencyPosition.AFTER),
        CurrencyInfo("TRY", "₺", "Turkish Lira"),
        CurrencyInfo("SGD", "S$", "Singapore Dollar"),
        CurrencyInfo("BWP", "P", "Botswana Pula"),
        CurrencyInfo("NAD", "N$", "Namibian Dollar"),
    )
}


def resolve_profile_currency(label: str) -> CurrencyInfo:
    """
    Look up the code and symbol for a profile currency label.

    Raises:
        UnknownCurrencyError: If the label is not in the table
    """
    try:
        return PROFILE_CURRENCIES[label]
    except KeyError:
        raise UnknownCurrencyError(label, sorted(PROFILE_CURRENCIES)) from None


def resolve_budget_currency(code: str) -> CurrencyInfo:
    """
    Look up display info for a budget currency code.

    Raises:
        UnknownCurrencyError: If the code is not in the table
    """
    try:
        return BUDGET_CURRENCIES[code]
    except KeyError:
        raise UnknownCurrencyError(code, sorted(BUDGET_CURRENCIES)) from None


def format_currency(amount: float, preferences: BudgetPreferences) -> str:
    """
    Format an amount with the user's symbol, separators and precision.

    Negative amounts get a leading minus before the symbol.
    """
    fixed = f"{abs(amount):.{preferences.decimal_places}f}"
    whole, _, fraction = fixed.partition(".")

    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)
    formatted = preferences.thousands_separator.join(groups)
    if fraction:
        formatted += preferences.decimal_separator + fraction

    if preferences.currency_position == CurrencyPosition.BEFORE:
        formatted = preferences.currency_symbol + formatted
    else:
        formatted = formatted + preferences.currency_symbol
    return f"-{formatted}" if amount < 0 else formatted
