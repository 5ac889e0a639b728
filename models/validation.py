'''
    File Name: validation.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
    Description: Field validation rules and the shared category sets.
'''
import math
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Tuple

import config

MAX_AMOUNT = 999_999_999.99
MAX_DESCRIPTION_LENGTH = 200
HISTORY_YEARS = 10


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


TRANSACTION_TYPES: Tuple[str, ...] = tuple(t.value for t in TransactionType)

# Names used by files exported from the first version of the dashboard
TYPE_ALIASES = MappingProxyType({
    "ingreso": TransactionType.INCOME.value,
    "gasto": TransactionType.EXPENSE.value,
})

# Read-only: the UI builds its selectors from this mapping
CATEGORIES = MappingProxyType({
    TransactionType.EXPENSE.value: (
        "Alimentación",
        "Transporte",
        "Vivienda",
        "Servicios",
        "Salud",
        "Educación",
        "Entretenimiento",
        "Compras",
        "Otros",
    ),
    TransactionType.INCOME.value: (
        "Salario",
        "Freelance",
        "Inversiones",
        "Regalos",
        "Otros",
    ),
})


def categories_for(tx_type: Any) -> Tuple[str, ...]:
    """Return the category set for `tx_type`, or an empty tuple if unknown."""
    return CATEGORIES.get(_type_value(tx_type), ())


def all_categories() -> list:
    """Sorted union of every category (used by filter selectors)."""
    names = set()
    for cats in CATEGORIES.values():
        names.update(cats)
    return sorted(names)


def _type_value(tx_type: Any) -> Any:
    if isinstance(tx_type, TransactionType):
        return tx_type.value
    return tx_type


def parse_amount(value: Any) -> float:
    """Convert `value` to float, returning NaN when it cannot be parsed."""
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_date(value: Any) -> Optional[date]:
    """Parse a `YYYY-MM-DD` string (or pass a date through). None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), config.DATE_FORMAT).date()
    except ValueError:
        return None


def earliest_allowed_date(today: Optional[date] = None) -> date:
    """The oldest date accepted: exactly HISTORY_YEARS before `today`."""
    today = today or date.today()
    try:
        return today.replace(year=today.year - HISTORY_YEARS)
    except ValueError:
        # 29 February in a non-leap target year
        return today.replace(year=today.year - HISTORY_YEARS, day=28)


def is_valid_amount(amount: Any) -> bool:
    num = parse_amount(amount)
    return math.isfinite(num) and 0 < num <= MAX_AMOUNT


def is_valid_date(value: Any, today: Optional[date] = None) -> bool:
    """True if `value` is a calendar date between ten years ago and today (inclusive)."""
    parsed = parse_date(value)
    if parsed is None:
        return False
    today = today or date.today()
    return earliest_allowed_date(today) <= parsed <= today


def is_valid_category(category: Any, tx_type: Any) -> bool:
    return category in categories_for(tx_type)


def is_valid_description(description: Any) -> bool:
    # Optional field
    if not description:
        return True
    if not isinstance(description, str):
        return False
    trimmed = description.strip()
    return 0 < len(trimmed) <= MAX_DESCRIPTION_LENGTH


def sanitize(text: Any) -> str:
    """Strip '<' and '>' and surrounding whitespace.

    This is a small denylist for display safety, not an escaping routine;
    it does not make arbitrary text safe for HTML.
    """
    if not text:
        return ""
    return str(text).replace("<", "").replace(">", "").strip()
