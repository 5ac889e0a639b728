'''
    File Name: formatting.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
    Description: Display helpers for amounts, percentages and dates.
'''
from typing import Any

import config
from models.validation import parse_date

MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]
MONTH_SHORT = [name[:3] for name in MONTH_NAMES]


def format_currency(amount: float, symbol: str = None) -> str:
    """'$1,234.50' / '-$20.00'."""
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def format_number(num: float) -> str:
    if float(num).is_integer():
        return f"{int(num):,}"
    return f"{num:,.2f}"


def abbreviate_number(num: float) -> str:
    """1500 -> '1.5K', 2000000 -> '2.0M'."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return f"{num:g}"


def format_date(value: Any) -> str:
    """ISO date -> DISPLAY_DATE_FORMAT; unparseable values are returned as text."""
    parsed = parse_date(value)
    if parsed is None:
        return str(value or "")
    return parsed.strftime(config.DISPLAY_DATE_FORMAT)


def month_name(month: int) -> str:
    """Full month name for 1-12."""
    return MONTH_NAMES[month - 1]


def month_short(month: int) -> str:
    return MONTH_SHORT[month - 1]


def month_label(key: str) -> str:
    """'2026-10' -> 'Oct 2026'."""
    try:
        year, month = (int(p) for p in key.split("-"))
        if not 1 <= month <= 12:
            return key
        return f"{month_short(month)} {year}"
    except (ValueError, IndexError):
        return key


def capitalize(text: str) -> str:
    if not text:
        return ""
    return text[0].upper() + text[1:].lower()
