'''
    File Name: transaction_repository.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import config
from database.csv_format import parse_csv, to_csv
from database.storage import StorageBackend
from models.transaction import (
    ERROR_DATE,
    Transaction,
    create_transaction,
    filter_transactions,
    transactions_to_dicts,
    validate_transaction,
)
from models.validation import parse_date

logger = logging.getLogger(__name__)

STORAGE_ERROR = "Failed to save to storage"
NOT_FOUND_ERROR = "Transaction not found"


@dataclass
class OperationResult:
    success: bool
    transaction: Optional[Transaction] = None
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success


@dataclass
class ImportResult:
    imported: int = 0
    errors: int = 0


class TransactionRepository:
    """Owns the transaction collection and keeps it in sync with storage.

    Every mutation writes the new collection to storage first and only
    replaces the in-memory list when that write succeeds, so memory and
    storage never disagree after a failed save.
    """

    def __init__(self, storage: StorageBackend, key: Optional[str] = None):
        self.storage = storage
        self.key = key or config.TRANSACTIONS_KEY
        self._transactions: List[Transaction] = []
        self.reload()

    # --- Loading / saving ---
    def reload(self) -> List[Transaction]:
        """(Re)load the collection from storage.

        Non-object, invalid and duplicate records are dropped and logged.
        """
        data = self.storage.get(self.key)
        loaded: List[Transaction] = []
        seen = set()
        if isinstance(data, list):
            for record in data:
                if not isinstance(record, dict):
                    logger.warning("Ignoring non-object record in %s", self.key)
                    continue
                tx = Transaction.from_dict(record)
                errors = self._load_errors(tx)
                if errors:
                    logger.warning("Ignoring invalid transaction %s: %s", tx.id, errors)
                    continue
                if tx.id in seen:
                    logger.warning("Ignoring duplicate transaction id %s", tx.id)
                    continue
                seen.add(tx.id)
                loaded.append(tx)
        elif data is not None:
            logger.error("Stored value for %s is not a list; starting empty", self.key)
        self._transactions = loaded
        logger.debug("Loaded %d transactions", len(loaded))
        return self.get_all()

    @staticmethod
    def _load_errors(tx: Transaction) -> List[str]:
        """Validation errors that make a stored record unusable.

        A well-formed date outside the entry window (an old record) is kept.
        """
        errors = validate_transaction(tx).errors
        if ERROR_DATE in errors and parse_date(tx.date) is not None:
            errors.remove(ERROR_DATE)
        return errors

    def _commit(self, transactions: List[Transaction]) -> bool:
        """Persist `transactions` and adopt them as the collection on success."""
        if not self.storage.set(self.key, transactions_to_dicts(transactions)):
            logger.error("Failed persisting %d transactions", len(transactions))
            return False
        self._transactions = transactions
        return True

    # --- Queries ---
    def get_all(self) -> List[Transaction]:
        return list(self._transactions)

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        for t in self._transactions:
            if t.id == tx_id:
                return t
        return None

    def _index_of(self, tx_id: str) -> int:
        for i, t in enumerate(self._transactions):
            if t.id == tx_id:
                return i
        return -1

    def __len__(self) -> int:
        return len(self._transactions)

    def filter(self, criteria: Optional[Mapping[str, Any]] = None) -> List[Transaction]:
        return filter_transactions(self._transactions, criteria)

    # --- Transaction CRUD ---
    def create(self, data: Mapping[str, Any]) -> OperationResult:
        """Validate and insert a new transaction at the head of the collection."""
        tx = create_transaction(data)
        validation = validate_transaction(tx)
        if not validation.valid:
            return OperationResult(False, errors=validation.errors)

        if self._index_of(tx.id) != -1:
            return OperationResult(False, errors=[f"Transaction id already exists: {tx.id}"])

        if not self._commit([tx] + self._transactions):
            return OperationResult(False, errors=[STORAGE_ERROR])

        logger.info("Created transaction %s", tx.id)
        return OperationResult(True, transaction=tx)

    def update(self, tx_id: str, data: Mapping[str, Any]) -> OperationResult:
        """Rebuild the transaction `tx_id` from `data`, keeping id and creation time."""
        index = self._index_of(tx_id)
        if index == -1:
            return OperationResult(False, errors=[NOT_FOUND_ERROR])

        payload: Dict[str, Any] = dict(data)
        payload["id"] = tx_id
        payload["created_at"] = self._transactions[index].created_at
        payload.pop("createdAt", None)
        tx = create_transaction(payload)

        validation = validate_transaction(tx)
        if not validation.valid:
            return OperationResult(False, errors=validation.errors)

        updated = list(self._transactions)
        updated[index] = tx
        if not self._commit(updated):
            return OperationResult(False, errors=[STORAGE_ERROR])

        logger.info("Updated transaction %s", tx_id)
        return OperationResult(True, transaction=tx)

    def delete(self, tx_id: str) -> OperationResult:
        index = self._index_of(tx_id)
        if index == -1:
            return OperationResult(False, errors=[NOT_FOUND_ERROR])

        remaining = self._transactions[:index] + self._transactions[index + 1:]
        if not self._commit(remaining):
            return OperationResult(False, errors=[STORAGE_ERROR])

        logger.info("Deleted transaction %s", tx_id)
        return OperationResult(True)

    def clear_all(self) -> bool:
        """Remove every transaction. Returns True if the empty state was saved."""
        ok = self._commit([])
        if ok:
            logger.info("Cleared all transactions")
        return ok

    # --- Import / Export helpers ---
    def import_transactions(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        """Create each row independently; failures are counted, never raised."""
        result = ImportResult()
        for row in rows:
            outcome = self.create(row)
            if outcome.success:
                result.imported += 1
            else:
                result.errors += 1
                logger.debug("Rejected import row %s: %s", dict(row), outcome.errors)
        logger.info("Import finished: %d imported, %d errors", result.imported, result.errors)
        return result

    def import_csv(self, text: str) -> ImportResult:
        """Parse CSV text and import its rows. Malformed lines count as errors."""
        rows, malformed = parse_csv(text)
        result = self.import_transactions(rows)
        result.errors += malformed
        return result

    def export_to_csv(self) -> str:
        """The full collection (not a filtered view) as CSV text."""
        return to_csv(self._transactions)
