'''
    File Name: transaction.py
    Version: 3.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
    Description: Transaction data model, factory, validation and filtering.
'''
import random
import string
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.validation import (
    MAX_AMOUNT,
    MAX_DESCRIPTION_LENGTH,
    TRANSACTION_TYPES,
    is_valid_amount,
    is_valid_category,
    is_valid_date,
    is_valid_description,
    parse_amount,
    parse_date,
    sanitize,
)

_ID_ALPHABET = string.digits + string.ascii_lowercase

ERROR_TYPE = "Invalid transaction type"
ERROR_AMOUNT = f"Invalid amount (must be greater than 0 and at most {MAX_AMOUNT:,.2f})"
ERROR_DATE = "Invalid date (cannot be in the future or more than 10 years ago)"
ERROR_CATEGORY = "Invalid category for the transaction type"
ERROR_DESCRIPTION = f"Invalid description (maximum {MAX_DESCRIPTION_LENGTH} characters)"


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="milliseconds")


def generate_id() -> str:
    """Return an opaque id like 'txn_1760870400000_k3j9x0a1b'."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"txn_{int(time.time() * 1000)}_{suffix}"


@dataclass
class Transaction:
    """
    Represents a single financial movement.

    Attributes:
        id: Opaque unique identifier, never changes once assigned
        type: "income" or "expense"
        category: Category name from the set allowed for `type`
        amount: Positive amount
        date: Transaction date (YYYY-MM-DD)
        description: Optional free text
        created_at: ISO timestamp of creation, kept across updates
        updated_at: ISO timestamp of the last create/update
    """
    id: str
    type: str
    category: str
    amount: float
    date: str  # ISO format: YYYY-MM-DD
    description: str = ""
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    def to_dict(self) -> dict:
        """Convert transaction to the persisted record shape."""
        return {
            "id": self.id,
            "type": self.type,
            "category": self.category,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """Rebuild a Transaction from a persisted record without touching timestamps."""
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type", ""),
            category=data.get("category", ""),
            amount=parse_amount(data.get("amount")),
            date=data.get("date", ""),
            description=data.get("description") or "",
            created_at=data.get("createdAt") or _now_iso(),
            updated_at=data.get("updatedAt") or _now_iso(),
        )

    def __repr__(self) -> str:
        return f"Transaction(id={self.id}, type={self.type}, amount={self.amount}, date={self.date}, category='{self.category}')"


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def create_transaction(data: Mapping[str, Any]) -> Transaction:
    """Build a normalized transaction from raw form/import data.

    Missing id and timestamps are generated; `updated_at` is always refreshed.
    The result is NOT validated, call `validate_transaction` for that.
    """
    raw_date = data.get("date", "")
    parsed_date = parse_date(raw_date)
    if parsed_date is not None:
        raw_date = parsed_date.isoformat()
    now = _now_iso()
    return Transaction(
        id=data.get("id") or generate_id(),
        type=data.get("type", ""),
        category=data.get("category", ""),
        amount=parse_amount(data.get("amount")),
        date=raw_date,
        description=sanitize(data.get("description") or ""),
        created_at=data.get("created_at") or data.get("createdAt") or now,
        updated_at=now,
    )


def validate_transaction(tx: Transaction, today: Optional[date] = None) -> ValidationResult:
    """Run every rule and collect one message per failure (no short-circuit)."""
    errors = []
    if tx.type not in TRANSACTION_TYPES:
        errors.append(ERROR_TYPE)
    if not is_valid_amount(tx.amount):
        errors.append(ERROR_AMOUNT)
    if not is_valid_date(tx.date, today=today):
        errors.append(ERROR_DATE)
    if not is_valid_category(tx.category, tx.type):
        errors.append(ERROR_CATEGORY)
    if not is_valid_description(tx.description):
        errors.append(ERROR_DESCRIPTION)
    return ValidationResult(valid=not errors, errors=errors)


def compare_by_date(a: Transaction, b: Transaction) -> int:
    """Comparator putting the most recent date first.

    Unparseable dates sort after every valid one.
    """
    da, db = parse_date(a.date), parse_date(b.date)
    if da == db:
        return 0
    if da is None:
        return 1
    if db is None:
        return -1
    return (db - da).days


def sort_by_date(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Return a new list ordered most recent first (display ordering only)."""
    return sorted(transactions, key=cmp_to_key(compare_by_date))


def filter_transactions(transactions: Iterable[Transaction], filters: Optional[Mapping[str, Any]] = None) -> List[Transaction]:
    """Return the transactions matching ALL provided criteria, in input order.

    Supported filters: 'type', 'category', 'date_from' and 'date_to' (inclusive,
    YYYY-MM-DD or date) and 'search' (case-insensitive substring of the
    description or the category). Empty values are ignored. Dates are compared
    as calendar dates; with a date bound set, records whose date does not parse
    never match.
    """
    filters = filters or {}
    tx_type = filters.get("type")
    category = filters.get("category")
    date_from = parse_date(filters.get("date_from"))
    date_to = parse_date(filters.get("date_to"))
    search = (filters.get("search") or "").lower()

    result: List[Transaction] = []
    for t in transactions:
        if tx_type and t.type != tx_type:
            continue
        if category and t.category != category:
            continue
        if date_from or date_to:
            tx_date = parse_date(t.date)
            if tx_date is None:
                continue
            if date_from and tx_date < date_from:
                continue
            if date_to and tx_date > date_to:
                continue
        if search:
            in_description = search in (t.description or "").lower()
            in_category = search in (t.category or "").lower()
            if not in_description and not in_category:
                continue
        result.append(t)
    return result


def transactions_to_dicts(transactions: Iterable[Transaction]) -> List[Dict[str, Any]]:
    return [t.to_dict() for t in transactions]
