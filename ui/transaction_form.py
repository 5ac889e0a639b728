'''
    File Name: transaction_form.py
    Version: 2.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
import logging
from datetime import date

from PyQt6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QFormLayout,
    QLineEdit,
    QDoubleSpinBox,
    QDateEdit,
    QComboBox,
    QPushButton,
    QHBoxLayout,
    QMessageBox,
)
from PyQt6.QtCore import QDate

from models.transaction import Transaction
from models.validation import (
    MAX_AMOUNT,
    MAX_DESCRIPTION_LENGTH,
    TransactionType,
    categories_for,
    earliest_allowed_date,
)

logger = logging.getLogger(__name__)

TYPE_LABELS = [("Expense", TransactionType.EXPENSE.value), ("Income", TransactionType.INCOME.value)]


def _qdate(d: date) -> QDate:
    return QDate(d.year, d.month, d.day)


class TransactionForm(QDialog):
    """Dialog to create or edit a transaction.

    Usage:
        dlg = TransactionForm(parent, repository=repo)
        if dlg.exec():
            tx = dlg.get_transaction()

    With a `repository` the dialog saves through `create()` (or `update()`
    when editing) and stays open showing the validation messages on failure.
    Without one it only collects the form data.
    """

    def __init__(self, parent=None, repository=None, transaction=None):
        super().__init__(parent)
        self.repository = repository
        self._editing = transaction
        self._transaction = None
        self.last_errors = []

        self.setWindowTitle("Edit Transaction" if transaction else "New Transaction")
        self.setup_ui()

        if transaction:
            # populate fields for editing
            self._load_transaction(transaction)

    def setup_ui(self) -> None:
        layout = QVBoxLayout()

        form = QFormLayout()

        self.tx_type = QComboBox()
        for label, value in TYPE_LABELS:
            self.tx_type.addItem(label, value)
        form.addRow("Type:", self.tx_type)

        self.category = QComboBox()
        form.addRow("Category:", self.category)

        self.amount = QDoubleSpinBox()
        self.amount.setMinimum(0)
        self.amount.setMaximum(MAX_AMOUNT)
        self.amount.setDecimals(2)
        form.addRow("Amount:", self.amount)

        today = date.today()
        self.date = QDateEdit()
        self.date.setCalendarPopup(True)
        self.date.setDisplayFormat("yyyy-MM-dd")
        self.date.setDateRange(_qdate(earliest_allowed_date(today)), _qdate(today))
        self.date.setDate(_qdate(today))
        form.addRow("Date:", self.date)

        self.description = QLineEdit()
        self.description.setMaxLength(MAX_DESCRIPTION_LENGTH)
        self.description.setPlaceholderText("Optional")
        form.addRow("Description:", self.description)

        layout.addLayout(form)

        # Buttons
        btn_layout = QHBoxLayout()
        self.save_btn = QPushButton("Save")
        self.cancel_btn = QPushButton("Cancel")
        btn_layout.addStretch(1)
        btn_layout.addWidget(self.save_btn)
        btn_layout.addWidget(self.cancel_btn)

        layout.addLayout(btn_layout)

        self.setLayout(layout)

        # Connections
        self.tx_type.currentIndexChanged.connect(self._on_type_changed)
        self.save_btn.clicked.connect(self.save_transaction)
        self.cancel_btn.clicked.connect(self.reject)

        self._on_type_changed()

    def _current_type(self) -> str:
        return self.tx_type.currentData()

    def _on_type_changed(self, *_args) -> None:
        """Refill the category list with the categories of the selected type."""
        current = self.category.currentText()
        self.category.clear()
        for name in categories_for(self._current_type()):
            self.category.addItem(name)
        idx = self.category.findText(current)
        if idx >= 0:
            self.category.setCurrentIndex(idx)

    def _load_transaction(self, tx) -> None:
        if isinstance(tx, Transaction):
            tx = tx.to_dict()
        idx = self.tx_type.findData(tx.get("type"))
        if idx >= 0:
            self.tx_type.setCurrentIndex(idx)

        cat_idx = self.category.findText(str(tx.get("category", "")))
        if cat_idx >= 0:
            self.category.setCurrentIndex(cat_idx)

        try:
            self.amount.setValue(float(tx.get("amount", 0)))
        except (TypeError, ValueError):
            self.amount.setValue(0.0)

        qd = QDate.fromString(str(tx.get("date", "")), "yyyy-MM-dd")
        if qd.isValid():
            self.date.setDate(qd)

        self.description.setText(str(tx.get("description") or ""))

    def form_data(self) -> dict:
        """Raw field values in the shape expected by the repository."""
        return {
            "type": self._current_type(),
            "category": self.category.currentText().strip(),
            "amount": float(self.amount.value()),
            "date": self.date.date().toString("yyyy-MM-dd"),
            "description": self.description.text(),
        }

    def save_transaction(self) -> None:
        """Validate and persist through the repository, then accept the dialog."""
        data = self.form_data()

        if self.repository is None:
            self._transaction = data
            self.accept()
            return

        if self._editing is not None:
            tx_id = self._editing.id if isinstance(self._editing, Transaction) else self._editing.get("id")
            result = self.repository.update(tx_id, data)
        else:
            result = self.repository.create(data)

        if not result.success:
            self.last_errors = list(result.errors)
            logger.info("Transaction rejected: %s", result.errors)
            QMessageBox.warning(self, "Validation", "\n".join(result.errors))
            return

        # store saved transaction and close dialog as accepted
        self._transaction = result.transaction
        self.accept()

    def get_transaction(self):
        """The saved Transaction (with a repository) or the form data dict."""
        return self._transaction
