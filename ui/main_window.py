'''
    File Name: main_window.py
    Version: 3.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from datetime import date
from pathlib import Path
import logging
from typing import Any, Callable, Optional

from PyQt6 import QtWidgets, QtGui, QtCore

import config
from database.csv_format import read_csv_file, write_csv_file
from database.settings_store import SettingsStore
from database.storage import JsonFileStorage
from database.transaction_repository import ImportResult, TransactionRepository
from models.budget import budget_status, create_budget, days_remaining_in_month
from models.transaction import sort_by_date
from models.validation import MAX_AMOUNT
from reports import metrics
from utils.formatting import format_currency, format_date, format_percentage

# Local UI components
from .transaction_form import TransactionForm
from .filter_dialog import FilterDialog
from .reports_view import ReportsView

logger = logging.getLogger(__name__)

INCOME_COLOR = QtGui.QColor(22, 163, 74)
EXPENSE_COLOR = QtGui.QColor(220, 38, 38)
WARNING_COLOR = "#d97706"
DANGER_COLOR = "#dc2626"


def default_filters(today: Optional[date] = None) -> dict:
    """Current month, from the 1st up to today."""
    today = today or date.today()
    return {"date_from": today.replace(day=1).isoformat(), "date_to": today.isoformat()}


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, *args, repository: Optional[TransactionRepository] = None,
                 settings_store: Optional[SettingsStore] = None, **kwargs):
        super().__init__(*args, **kwargs)

        # Ensure runtime data dir exists (safe)
        try:
            config.ensure_data_dir()
        except Exception:
            logger.exception("Failed ensuring data directory")

        self.setWindowTitle(f"{config.APP_NAME} — {config.APP_VERSION}")

        self.status = self.statusBar()
        self.status.showMessage("Ready")

        # Repository / settings may be injected by the app or tests
        if repository is None:
            repository = TransactionRepository(JsonFileStorage(config.STORAGE_PATH))
        self.repository = repository
        self.settings_store = settings_store or SettingsStore(self.repository.storage)

        self.current_filters = default_filters()
        self._visible = []

        # Thread pool for file I/O
        self._pool = QtCore.QThreadPool.globalInstance()

        self.theme = self.settings_store.load_theme()
        try:
            self._apply_stylesheet()
        except Exception:
            logger.exception("Failed to apply stylesheet")

        central_widget = QtWidgets.QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QtWidgets.QVBoxLayout()
        main_layout.setSpacing(15)
        main_layout.setContentsMargins(10, 10, 10, 10)

        main_layout.addWidget(self._build_kpi_group())

        # Transactions table (select rows to edit/delete)
        self.tx_table = QtWidgets.QTableWidget(0, 6)
        self.tx_table.setHorizontalHeaderLabels(["ID", "Date", "Type", "Category", "Description", "Amount"])
        self.tx_table.setColumnHidden(0, True)
        self.tx_table.horizontalHeader().setStretchLastSection(True)
        self.tx_table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
        self.tx_table.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.tx_table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.tx_table.verticalHeader().setVisible(False)
        self.tx_table.doubleClicked.connect(lambda _index: self.on_edit_clicked())
        main_layout.addWidget(self.tx_table, stretch=1)

        # Activity log
        self.text_display = QtWidgets.QTextEdit()
        self.text_display.setReadOnly(True)
        self.text_display.setMaximumHeight(90)
        main_layout.addWidget(self.text_display)

        # Transactions group
        transaction_group = QtWidgets.QGroupBox("Transactions")
        t_layout = QtWidgets.QHBoxLayout()
        self.add_button = QtWidgets.QPushButton("Add")
        self.edit_button = QtWidgets.QPushButton("Edit")
        self.delete_button = QtWidgets.QPushButton("Delete")
        t_layout.addWidget(self.add_button)
        t_layout.addWidget(self.edit_button)
        t_layout.addWidget(self.delete_button)
        transaction_group.setLayout(t_layout)

        # Reports / Utilities group
        report_group = QtWidgets.QGroupBox("Reports & Utilities")
        r_layout = QtWidgets.QHBoxLayout()
        self.filter_button = QtWidgets.QPushButton("Filter/Search")
        self.reset_filters_button = QtWidgets.QPushButton("Reset Filters")
        self.statistics_button = QtWidgets.QPushButton("Statistics")
        self.import_export_button = QtWidgets.QPushButton("Import/Export")
        r_layout.addWidget(self.filter_button)
        r_layout.addWidget(self.reset_filters_button)
        r_layout.addWidget(self.statistics_button)
        r_layout.addWidget(self.import_export_button)
        report_group.setLayout(r_layout)

        # Settings group
        settings_group = QtWidgets.QGroupBox("Settings")
        s_layout = QtWidgets.QHBoxLayout()
        self.budget_button = QtWidgets.QPushButton("Budget")
        self.theme_button = QtWidgets.QPushButton(self._theme_button_text())
        self.clear_button = QtWidgets.QPushButton("Clear All")
        s_layout.addWidget(self.budget_button)
        s_layout.addWidget(self.theme_button)
        s_layout.addWidget(self.clear_button)
        settings_group.setLayout(s_layout)

        groups_layout = QtWidgets.QHBoxLayout()
        groups_layout.addWidget(transaction_group)
        groups_layout.addWidget(report_group)
        groups_layout.addWidget(settings_group)
        main_layout.addLayout(groups_layout)

        # Connect buttons to their dedicated handlers
        self.add_button.clicked.connect(self.on_add_clicked)
        self.edit_button.clicked.connect(self.on_edit_clicked)
        self.delete_button.clicked.connect(self.on_delete_clicked)
        self.filter_button.clicked.connect(self.on_filter_search_clicked)
        self.reset_filters_button.clicked.connect(self.on_reset_filters_clicked)
        self.statistics_button.clicked.connect(self.on_statistics_clicked)
        self.import_export_button.clicked.connect(self.on_import_export_clicked)
        self.budget_button.clicked.connect(self.on_budget_clicked)
        self.theme_button.clicked.connect(self.on_theme_clicked)
        self.clear_button.clicked.connect(self.on_clear_all_clicked)

        central_widget.setLayout(main_layout)

        self.refresh()

        # Restore/Set initial window size (remember last state with QSettings)
        try:
            settings = QtCore.QSettings(config.ORGANIZATION, config.APP_NAME)
            geom = settings.value("geometry", None)
            if isinstance(geom, (bytes, bytearray)):
                geom = QtCore.QByteArray(bytes(geom))
            if isinstance(geom, QtCore.QByteArray) and not geom.isEmpty():
                self.restoreGeometry(geom)
            else:
                self.resize(1200, 800)
            self.setMinimumSize(800, 600)
        except Exception:
            logger.exception("Failed to restore/set window geometry")

    # --- Layout helpers ---
    def _build_kpi_group(self) -> QtWidgets.QGroupBox:
        group = QtWidgets.QGroupBox("Summary")
        grid = QtWidgets.QGridLayout()
        self.kpi_labels = {}
        captions = [
            ("income", "Income"),
            ("expenses", "Expenses"),
            ("balance", "Net balance"),
            ("savings_rate", "Savings rate"),
            ("month_change", "Expenses vs last month"),
            ("budget", "Monthly budget"),
        ]
        for col, (key, caption) in enumerate(captions):
            title = QtWidgets.QLabel(caption)
            value = QtWidgets.QLabel("-")
            value.setObjectName("kpiValue")
            grid.addWidget(title, 0, col)
            grid.addWidget(value, 1, col)
            self.kpi_labels[key] = value
        group.setLayout(grid)
        return group

    def _theme_button_text(self) -> str:
        return "Light Theme" if self.theme == "dark" else "Dark Theme"

    def _apply_stylesheet(self) -> None:
        """Load and apply the stylesheet of the current theme; skip quietly if missing."""
        path = Path(config.THEMES.get(self.theme, config.THEMES[config.DEFAULT_THEME]))
        if path.exists():
            try:
                with path.open("r", encoding="utf-8") as f:
                    self.setStyleSheet(f.read())
                logger.debug("Applied stylesheet: %s", path)
            except OSError:
                logger.exception("Error reading/applying stylesheet")
        else:
            logger.debug("Stylesheet not found at %s; skipping", path)

    def show_error(self, title: str, message: str, exc: Optional[Exception] = None) -> None:
        """Log and present a critical message box to the user."""
        if exc:
            logger.error("%s: %s", title, message, exc_info=exc)
        else:
            logger.error("%s: %s", title, message)
        QtWidgets.QMessageBox.critical(self, title, message)

    def run_db_task(self, fn: Callable[..., Any], on_done: Optional[Callable[[Any], None]] = None, *args, **kwargs) -> None:
        """
        Run a blocking function in a background thread and call on_done(result) in the main thread.
        Only file I/O goes through here; repository calls stay on the GUI thread.
        """
        class _Signals(QtCore.QObject):
            finished = QtCore.pyqtSignal(object)
            error = QtCore.pyqtSignal(object)

        class _Runner(QtCore.QRunnable):
            def __init__(self, func, a, kw):
                super().__init__()
                self.func = func
                self.args = a
                self.kwargs = kw
                self.signals = _Signals()

            @QtCore.pyqtSlot()
            def run(self):
                try:
                    res = self.func(*self.args, **self.kwargs)
                    self.signals.finished.emit(res)
                except Exception as e:
                    self.signals.error.emit(e)

        runner = _Runner(fn, args, kwargs)

        if on_done:
            # ensure callback runs in main thread
            runner.signals.finished.connect(on_done)

        def _on_err(e):
            self.show_error("Background task error", str(e), exc=e)
        runner.signals.error.connect(_on_err)

        self._pool.start(runner)

    def update_text(self, message: str):
        self.text_display.append(message)

    # --- Rendering ---
    def refresh(self) -> None:
        """Re-apply the current filters and redraw the table and KPIs."""
        self._visible = sort_by_date(self.repository.filter(self.current_filters))
        self._populate_transactions(self._visible)
        self._update_kpis(self._visible)

    def _populate_transactions(self, rows):
        """Populate the transactions table with Transaction objects."""
        self.tx_table.setRowCount(len(rows))
        for r_idx, tx in enumerate(rows):
            sign = "+" if tx.is_income else "-"
            color = INCOME_COLOR if tx.is_income else EXPENSE_COLOR
            amount_item = QtWidgets.QTableWidgetItem(f"{sign}{format_currency(tx.amount)}")
            amount_item.setForeground(QtGui.QBrush(color))
            amount_item.setTextAlignment(QtCore.Qt.AlignmentFlag.AlignRight | QtCore.Qt.AlignmentFlag.AlignVCenter)

            self.tx_table.setItem(r_idx, 0, QtWidgets.QTableWidgetItem(tx.id))
            self.tx_table.setItem(r_idx, 1, QtWidgets.QTableWidgetItem(format_date(tx.date)))
            self.tx_table.setItem(r_idx, 2, QtWidgets.QTableWidgetItem("Income" if tx.is_income else "Expense"))
            self.tx_table.setItem(r_idx, 3, QtWidgets.QTableWidgetItem(tx.category))
            self.tx_table.setItem(r_idx, 4, QtWidgets.QTableWidgetItem(tx.description))
            self.tx_table.setItem(r_idx, 5, amount_item)

        self.tx_table.resizeColumnsToContents()

    def _set_kpi(self, key: str, text: str, color: Optional[str] = None) -> None:
        label = self.kpi_labels[key]
        label.setText(text)
        label.setStyleSheet(f"color: {color};" if color else "")

    def _update_kpis(self, transactions) -> None:
        s = metrics.summary(transactions)
        self._set_kpi("income", format_currency(s["income"]))
        self._set_kpi("expenses", format_currency(s["expenses"]))

        balance = s["balance"]
        balance_color = INCOME_COLOR.name() if balance > 0 else EXPENSE_COLOR.name() if balance < 0 else None
        self._set_kpi("balance", format_currency(balance), balance_color)

        rate = s["savings_rate"]
        rate_color = INCOME_COLOR.name() if rate > 20 else EXPENSE_COLOR.name() if rate < 0 else None
        self._set_kpi("savings_rate", format_percentage(rate), rate_color)

        # Month over month uses the whole collection, not the filtered view
        today = date.today()
        everything = self.repository.get_all()
        current = metrics.transactions_in_month(everything, today.year, today.month)
        previous = metrics.transactions_in_month(everything, *metrics.previous_month(today.year, today.month))
        change = metrics.compare_periods(current, previous)["expenses"]["change_percent"]
        self._set_kpi("month_change", f"{change:+.1f}%")

        budget = self.settings_store.load_budget()
        if budget is None or budget.total_amount <= 0:
            self._set_kpi("budget", "Not set")
            return
        overall = budget_status(budget, current)["overall"]
        color = {"danger": DANGER_COLOR, "warning": WARNING_COLOR}.get(overall["alert"])
        self._set_kpi(
            "budget",
            f"{format_percentage(overall['percentage'])} of {format_currency(budget.total_amount)} "
            f"({days_remaining_in_month(today)} days left)",
            color,
        )

    # --- Selection ---
    def _get_selected_transaction_id(self) -> Optional[str]:
        """Return the transaction ID for the currently selected row, or None."""
        sel = self.tx_table.selectionModel().selectedRows()
        if not sel:
            return None
        item = self.tx_table.item(sel[0].row(), 0)
        return item.text() if item else None

    def select_transaction(self, tx_id: str) -> bool:
        for row in range(self.tx_table.rowCount()):
            item = self.tx_table.item(row, 0)
            if item and item.text() == tx_id:
                self.tx_table.selectRow(row)
                return True
        return False

    def closeEvent(self, event):
        try:
            settings = QtCore.QSettings(config.ORGANIZATION, config.APP_NAME)
            settings.setValue("geometry", self.saveGeometry())
        except Exception:
            logger.exception("Failed to save window geometry")
        super().closeEvent(event)

    # --- Handlers ---
    def on_add_clicked(self) -> None:
        """Open the transaction form and create a new entry."""
        logger.debug("on_add_clicked")
        self.status.showMessage("Adding transaction...")
        dlg = TransactionForm(self, repository=self.repository)
        if not dlg.exec():
            self.status.showMessage("Add cancelled")
            return

        tx = dlg.get_transaction()
        self.update_text(f"Transaction added: {tx.category} {format_currency(tx.amount)} ({tx.date})")
        self.status.showMessage("Transaction saved")
        self.refresh()

    def on_edit_clicked(self) -> None:
        logger.debug("on_edit_clicked")
        tx_id = self._get_selected_transaction_id()
        if tx_id is None:
            QtWidgets.QMessageBox.information(self, "Select transaction", "Please select a transaction to edit from the table.")
            self.status.showMessage("No transaction selected")
            return

        tx = self.repository.get_by_id(tx_id)
        if tx is None:
            self.show_error("Edit failed", "Transaction not found")
            self.refresh()
            return

        dlg = TransactionForm(self, repository=self.repository, transaction=tx)
        if not dlg.exec():
            self.status.showMessage("Edit cancelled")
            return

        self.update_text(f"Transaction updated: {tx_id}")
        self.status.showMessage("Transaction updated")
        self.refresh()

    def on_delete_clicked(self) -> None:
        """Delete the selected transaction after confirmation."""
        logger.debug("on_delete_clicked")
        tx_id = self._get_selected_transaction_id()
        if tx_id is None:
            QtWidgets.QMessageBox.information(self, "Select transaction", "Please select a transaction to delete from the table.")
            self.status.showMessage("No transaction selected")
            return

        reply = QtWidgets.QMessageBox.question(
            self,
            "Confirm delete",
            "Are you sure you want to delete the selected transaction?",
            QtWidgets.QMessageBox.StandardButton.Yes | QtWidgets.QMessageBox.StandardButton.No,
        )
        if reply != QtWidgets.QMessageBox.StandardButton.Yes:
            self.status.showMessage("Delete cancelled")
            return

        result = self.repository.delete(tx_id)
        if not result.success:
            self.show_error("Delete failed", "\n".join(result.errors))
            self.status.showMessage("Delete failed")
            return

        self.update_text(f"Transaction deleted: {tx_id}")
        self.status.showMessage("Transaction deleted")
        self.refresh()

    def on_filter_search_clicked(self) -> None:
        logger.debug("on_filter_search_clicked")
        dlg = FilterDialog(self, filters=self.current_filters)
        if dlg.exec():
            self.apply_filters(dlg.get_filters())

    def apply_filters(self, filters: dict) -> None:
        self.current_filters = dict(filters)
        self.refresh()
        self.status.showMessage(f"Filter applied ({len(self._visible)} transactions)")

    def on_reset_filters_clicked(self) -> None:
        self.apply_filters(default_filters())

    def on_statistics_clicked(self) -> None:
        """Show the reports view for the current filters in a dialog."""
        logger.debug("on_statistics_clicked")
        self.status.showMessage("Showing statistics...")
        try:
            dialog = QtWidgets.QDialog(self)
            dialog.setWindowTitle("Reports & Statistics")
            dialog.setGeometry(100, 100, 1000, 600)

            reports_view = ReportsView(parent=dialog, repository=self.repository, filters=self.current_filters)

            layout = QtWidgets.QVBoxLayout()
            layout.addWidget(reports_view)
            dialog.setLayout(layout)

            dialog.exec()
            self.status.showMessage("Statistics dialog closed")
        except Exception as e:
            self.show_error("Error", "Unable to open statistics view", e)

    def on_import_export_clicked(self) -> None:
        """Ask whether to import or export, then run the chosen flow."""
        logger.debug("on_import_export_clicked")
        msg_box = QtWidgets.QMessageBox(self)
        msg_box.setWindowTitle("Import or Export")
        msg_box.setText("What would you like to do?")
        msg_box.setIcon(QtWidgets.QMessageBox.Icon.Question)

        export_btn = msg_box.addButton("Export", QtWidgets.QMessageBox.ButtonRole.AcceptRole)
        import_btn = msg_box.addButton("Import", QtWidgets.QMessageBox.ButtonRole.AcceptRole)
        cancel_btn = msg_box.addButton(QtWidgets.QMessageBox.StandardButton.Cancel)

        msg_box.exec()

        clicked_btn = msg_box.clickedButton()

        if clicked_btn == cancel_btn or clicked_btn is None:
            self.status.showMessage("Import/Export cancelled")
        elif clicked_btn == export_btn:
            self._handle_export()
        elif clicked_btn == import_btn:
            self._handle_import()

    def _handle_export(self) -> None:
        if len(self.repository) == 0:
            QtWidgets.QMessageBox.information(self, "Export", "There is no data to export.")
            self.status.showMessage("Nothing to export")
            return

        file_path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Export Transactions",
            f"transactions_{date.today().isoformat()}.csv",
            "CSV Files (*.csv);;All Files (*)",
        )
        if not file_path:
            self.status.showMessage("Export cancelled")
            return
        self.export_to_file(Path(file_path))

    def export_to_file(self, path: Path) -> None:
        """Write the full collection as CSV to `path` in the background."""
        text = self.repository.export_to_csv()

        def _on_export_done(_result):
            self.update_text(f"Transactions exported to {path}")
            self.status.showMessage("Export successful")

        self.run_db_task(write_csv_file, _on_export_done, path, text)
        self.status.showMessage("Exporting transactions...")

    def _handle_import(self) -> None:
        file_path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Import Transactions",
            "",
            "CSV Files (*.csv);;All Files (*)",
        )
        if not file_path:
            self.status.showMessage("Import cancelled")
            return

        reply = QtWidgets.QMessageBox.question(
            self,
            "Confirm Import",
            f"Import transactions from:\n{file_path}\n\nThis will add transactions to your data.",
            QtWidgets.QMessageBox.StandardButton.Yes |
            QtWidgets.QMessageBox.StandardButton.No,
        )
        if reply != QtWidgets.QMessageBox.StandardButton.Yes:
            self.status.showMessage("Import cancelled")
            return

        # Read in the background, import on the GUI thread
        self.run_db_task(read_csv_file, self.import_csv_text, Path(file_path))
        self.status.showMessage("Importing transactions...")

    def import_csv_text(self, text: str) -> ImportResult:
        """Import CSV text into the repository and report the outcome."""
        result = self.repository.import_csv(text)
        self.refresh()

        if result.imported == 0 and result.errors == 0:
            self.show_error("Import warning", "No transactions were imported from the file")
            self.status.showMessage("Import completed with no rows")
        elif result.errors:
            message = f"Imported {result.imported} transaction(s) ({result.errors} error(s))"
            self.update_text(message)
            self.status.showMessage(message)
            QtWidgets.QMessageBox.warning(self, "Import finished with errors", message)
        else:
            message = f"Successfully imported {result.imported} transaction(s)"
            self.update_text(message)
            self.status.showMessage(f"Import successful ({result.imported} transactions)")
            QtWidgets.QMessageBox.information(self, "Success", message)
        return result

    def on_budget_clicked(self) -> None:
        """Set the monthly spending limit (0 removes the budget)."""
        current = self.settings_store.load_budget()
        value, ok = QtWidgets.QInputDialog.getDouble(
            self,
            "Monthly budget",
            "Spending limit for the month (0 = no budget):",
            current.total_amount if current else 0.0,
            0.0,
            MAX_AMOUNT,
            2,
        )
        if not ok:
            return
        self.set_budget(value)

    def set_budget(self, total_amount: float) -> bool:
        if total_amount <= 0:
            ok = self.settings_store.clear_budget()
        else:
            current = self.settings_store.load_budget()
            data = current.to_dict() if current else {}
            budget = create_budget({
                "id": data.get("id"),
                "total_amount": total_amount,
                "categories": data.get("categories"),
                "alerts": data.get("alerts"),
                "created_at": data.get("createdAt"),
            })
            ok = self.settings_store.save_budget(budget)

        if not ok:
            self.show_error("Budget", "Failed to save the budget")
            return False
        self.status.showMessage("Budget updated")
        self.refresh()
        return True

    def on_theme_clicked(self) -> None:
        self.theme = self.settings_store.toggle_theme()
        self.theme_button.setText(self._theme_button_text())
        self._apply_stylesheet()
        self.status.showMessage(f"Theme: {self.theme}")

    def on_clear_all_clicked(self) -> None:
        reply = QtWidgets.QMessageBox.question(
            self,
            "Clear all",
            "Delete ALL transactions? This cannot be undone.",
            QtWidgets.QMessageBox.StandardButton.Yes | QtWidgets.QMessageBox.StandardButton.No,
        )
        if reply != QtWidgets.QMessageBox.StandardButton.Yes:
            self.status.showMessage("Clear cancelled")
            return

        if not self.repository.clear_all():
            self.show_error("Clear failed", "Failed to save to storage")
            return
        self.update_text("All transactions deleted")
        self.status.showMessage("All transactions deleted")
        self.refresh()
