'''
    File Name: helpers.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from datetime import date, timedelta
from typing import Optional

from database.storage import MemoryStorage
from database.transaction_repository import TransactionRepository
from models.transaction import Transaction

TODAY = date.today()


def days_ago(n: int) -> str:
    return (TODAY - timedelta(days=n)).isoformat()


def sample_data(**overrides) -> dict:
    """Valid raw input for `create_transaction` / `TransactionRepository.create`."""
    data = {
        "type": "expense",
        "category": "Alimentación",
        "amount": 1500,
        "date": TODAY.isoformat(),
        "description": "Groceries",
    }
    data.update(overrides)
    return data


def make_tx(tx_type: str, category: str, amount: float, tx_date: Optional[str] = None,
            description: str = "", tx_id: Optional[str] = None) -> Transaction:
    """Build a Transaction directly, bypassing validation (for metric tests)."""
    return Transaction(
        id=tx_id or f"{tx_type}-{category}-{amount}-{tx_date}",
        type=tx_type,
        category=category,
        amount=float(amount),
        date=tx_date or TODAY.isoformat(),
        description=description,
    )


def make_repository(rows=(), storage=None) -> TransactionRepository:
    repo = TransactionRepository(storage or MemoryStorage())
    for row in rows:
        result = repo.create(row)
        assert result.success, result.errors
    return repo
