"""Money / rounding / display helpers.

Centralized so the API and the HTML page render amounts, rates and update
times identically. Supported locales: pt-BR and en-US.
"""

from __future__ import annotations
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Tuple

# (thousands separator, decimal separator)
_SEPARATORS: Dict[str, Tuple[str, str]] = {
    "pt-BR": (".", ","),
    "en-US": (",", "."),
}

_SYMBOLS: Dict[str, Dict[str, str]] = {
    "pt-BR": {"BRL": "R$", "USD": "US$", "EUR": "€", "GBP": "£", "JPY": "JP¥"},
    "en-US": {"USD": "$", "BRL": "R$", "EUR": "€", "GBP": "£", "JPY": "¥"},
}

_DATE_FORMATS: Dict[str, str] = {
    "pt-BR": "%d/%m/%Y %H:%M",
    "en-US": "%m/%d/%Y %H:%M",
}


def quantize2(value: float) -> Decimal:
    """Two-decimal half-up rounding via the decimal repr, so 2.675 -> 2.68."""
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _group(value: Decimal, locale: str) -> str:
    thousands, decimal_sep = _SEPARATORS[locale]
    text = f"{abs(value):,.2f}"  # always en-style here, swapped below
    text = text.replace(",", "\0").replace(".", decimal_sep).replace("\0", thousands)
    return f"-{text}" if value < 0 else text


def format_currency(value: float, currency: str, locale: str = "pt-BR") -> str:
    """Format `value` with two decimals and the locale's currency symbol.

    >>> format_currency(1234.5, "BRL")
    'R$ 1.234,50'
    >>> format_currency(1234.5, "USD", "en-US")
    '$1,234.50'
    """
    if locale not in _SEPARATORS:
        raise ValueError(f"Unsupported locale '{locale}'")
    currency = currency.upper()
    number = _group(quantize2(value), locale)
    symbol = _SYMBOLS[locale].get(currency, currency)
    if locale == "pt-BR":
        return f"{symbol} {number}"
    if symbol == currency:
        return f"{currency} {number}"
    return f"{symbol}{number}"


def format_rate(from_currency: str, to_currency: str, rate: float) -> str:
    return f"1 {from_currency.upper()} = {rate:.4f} {to_currency.upper()}"


def format_datetime(value: datetime, locale: str = "pt-BR") -> str:
    """Render `value` as day/month (pt-BR) or month/day (en-US) with time.

    Naive datetimes are taken as UTC.
    """
    if locale not in _DATE_FORMATS:
        raise ValueError(f"Unsupported locale '{locale}'")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime(_DATE_FORMATS[locale])
