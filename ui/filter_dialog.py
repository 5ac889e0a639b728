'''
    File Name: filter_dialog.py
    Version: 2.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from typing import Mapping, Optional
from PyQt6 import QtWidgets, QtCore

from models.validation import TransactionType, all_categories


class FilterDialog(QtWidgets.QDialog):
    """Dialog to collect filter/search criteria for transactions.

    `get_filters()` returns a dict with any of 'type', 'category',
    'date_from', 'date_to' and 'search', containing only non-empty values.
    """

    def __init__(self, parent=None, filters: Optional[Mapping[str, str]] = None):
        super().__init__(parent)
        self.setWindowTitle("Filter / Search Transactions")
        self.resize(420, 220)
        filters = filters or {}

        layout = QtWidgets.QVBoxLayout()
        form = QtWidgets.QFormLayout()

        self.tx_type = QtWidgets.QComboBox()
        self.tx_type.addItem("All", "")
        self.tx_type.addItem("Income", TransactionType.INCOME.value)
        self.tx_type.addItem("Expense", TransactionType.EXPENSE.value)

        self.category = QtWidgets.QComboBox()
        self.category.addItem("")
        for c in all_categories():
            self.category.addItem(c)

        self.use_dates = QtWidgets.QCheckBox("Filter by date")
        self.use_dates.setChecked(True)

        self.start_date = QtWidgets.QDateEdit()
        self.start_date.setCalendarPopup(True)
        self.start_date.setDisplayFormat("yyyy-MM-dd")
        # default to the first day of the current month
        today = QtCore.QDate.currentDate()
        self.start_date.setDate(QtCore.QDate(today.year(), today.month(), 1))

        self.end_date = QtWidgets.QDateEdit()
        self.end_date.setCalendarPopup(True)
        self.end_date.setDisplayFormat("yyyy-MM-dd")
        self.end_date.setDate(today)

        self.search = QtWidgets.QLineEdit()
        self.search.setPlaceholderText("Description or category")

        form.addRow("Type:", self.tx_type)
        form.addRow("Category:", self.category)
        form.addRow("", self.use_dates)
        form.addRow("Start date:", self.start_date)
        form.addRow("End date:", self.end_date)
        form.addRow("Search:", self.search)

        layout.addLayout(form)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.setLayout(layout)

        self.use_dates.toggled.connect(self.start_date.setEnabled)
        self.use_dates.toggled.connect(self.end_date.setEnabled)

        self.set_filters(filters)

    def set_filters(self, filters: Mapping[str, str]) -> None:
        """Pre-fill the widgets from an existing filter dict."""
        idx = self.tx_type.findData(filters.get("type", ""))
        self.tx_type.setCurrentIndex(max(idx, 0))

        idx = self.category.findText(filters.get("category", ""))
        self.category.setCurrentIndex(max(idx, 0))

        date_from = filters.get("date_from")
        date_to = filters.get("date_to")
        if date_from or date_to:
            self.use_dates.setChecked(True)
            if date_from:
                self.start_date.setDate(QtCore.QDate.fromString(str(date_from), "yyyy-MM-dd"))
            if date_to:
                self.end_date.setDate(QtCore.QDate.fromString(str(date_to), "yyyy-MM-dd"))
        elif filters:
            self.use_dates.setChecked(False)

        self.search.setText(filters.get("search", ""))

    def get_filters(self) -> dict:
        f = {}
        tx_type = self.tx_type.currentData()
        if tx_type:
            f["type"] = tx_type

        cat = self.category.currentText().strip()
        if cat:
            f["category"] = cat

        if self.use_dates.isChecked():
            f["date_from"] = self.start_date.date().toString("yyyy-MM-dd")
            f["date_to"] = self.end_date.date().toString("yyyy-MM-dd")

        search = self.search.text().strip()
        if search:
            f["search"] = search

        return f
