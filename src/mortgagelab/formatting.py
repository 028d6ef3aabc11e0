"""
Display helpers. No rounding beyond what the display needs.
"""

from __future__ import annotations

from mortgagelab.core.currency import MYR, Currency
from mortgagelab.core.utils import coerce_number

CURRENCY_SYMBOLS = {"MYR": "RM"}


def format_currency(value, currency: Currency = MYR) -> str:
    """
    Grouped amount with the currency symbol, e.g. ``RM 1,234.50``.

    Negative amounts keep the sign in front of the symbol: ``-RM 20.00``.
    """
    amount = coerce_number(value)
    symbol = CURRENCY_SYMBOLS.get(currency.code, currency.code)
    text = f"{symbol} {abs(amount):,.{currency.decimals}f}"
    return f"-{text}" if amount < 0 else text


def format_percent(ratio, decimals: int = 1) -> str:
    """Ratio as a percentage: ``0.6`` -> ``60.0%``."""
    return f"{coerce_number(ratio) * 100:.{decimals}f}%"
