'''
    File Name: test_main_window.py
    Version: 3.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from datetime import date
from unittest.mock import patch

import pytest

from PyQt6 import QtWidgets

import config
from database.storage import JsonFileStorage
from database.transaction_repository import TransactionRepository
from helpers import TODAY, make_repository, sample_data
from ui.filter_dialog import FilterDialog
from ui.main_window import MainWindow, default_filters
from ui.transaction_form import TransactionForm

YES = QtWidgets.QMessageBox.StandardButton.Yes
NO = QtWidgets.QMessageBox.StandardButton.No


@pytest.fixture
def window(qtbot, repository, settings_store):
    mw = MainWindow(repository=repository, settings_store=settings_store)
    qtbot.addWidget(mw)
    return mw


def _table_descriptions(mw):
    return [mw.tx_table.item(r, 4).text() for r in range(mw.tx_table.rowCount())]


def test_window_title_and_statusbar(window):
    # Title contains app name and version
    assert config.APP_NAME in window.windowTitle()
    assert config.APP_VERSION in window.windowTitle()
    # Status bar default message
    assert window.status.currentMessage() == "Ready"


def test_default_repository_uses_configured_path(qtbot):
    mw = MainWindow()
    qtbot.addWidget(mw)
    assert mw.repository.storage.path == config.STORAGE_PATH
    assert config.DATA_DIR.exists()
    assert mw.tx_table.rowCount() == 0


def test_default_filters_cover_current_month():
    assert default_filters(date(2026, 10, 19)) == {"date_from": "2026-10-01", "date_to": "2026-10-19"}


def test_run_db_task_executes_and_calls_on_done(window, qtbot):
    results = []

    def done(res):
        results.append(res)

    # Simple background task
    window.run_db_task(lambda: 1 + 2, on_done=done)

    qtbot.waitUntil(lambda: len(results) == 1, timeout=2000)
    assert results[0] == 3


def test_run_db_task_error_is_reported(window, qtbot):
    def boom():
        raise OSError("disk gone")

    with patch.object(window, "show_error") as mock_error:
        window.run_db_task(boom)
        qtbot.waitUntil(lambda: mock_error.called, timeout=2000)
    assert "disk gone" in mock_error.call_args[0][1]


def test_table_shows_transactions_newest_first(qtbot, settings_store):
    repo = make_repository([
        sample_data(date=TODAY.replace(day=1).isoformat(), description="first of month"),
        sample_data(description="today"),
    ])
    mw = MainWindow(repository=repo, settings_store=settings_store)
    qtbot.addWidget(mw)

    assert mw.tx_table.columnCount() == 6
    assert mw.tx_table.isColumnHidden(0)
    if TODAY.day != 1:
        assert _table_descriptions(mw) == ["today", "first of month"]
    assert mw.tx_table.item(0, 2).text() == "Expense"
    assert mw.tx_table.item(0, 5).text() == "-$1,500.00"


def test_kpis_reflect_current_view(qtbot, settings_store):
    repo = make_repository([
        sample_data(type="income", category="Salario", amount=1000, description="Pay"),
        sample_data(amount=250),
    ])
    mw = MainWindow(repository=repo, settings_store=settings_store)
    qtbot.addWidget(mw)

    assert mw.kpi_labels["income"].text() == "$1,000.00"
    assert mw.kpi_labels["expenses"].text() == "$250.00"
    assert mw.kpi_labels["balance"].text() == "$750.00"
    assert mw.kpi_labels["savings_rate"].text() == "75.0%"
    assert mw.kpi_labels["budget"].text() == "Not set"


def test_add_through_form(window, monkeypatch):
    def fake_exec(dlg):
        dlg.amount.setValue(42)
        dlg.description.setText("Coffee beans")
        dlg.save_transaction()
        return dlg.result()

    monkeypatch.setattr(TransactionForm, "exec", fake_exec)
    window.on_add_clicked()

    assert len(window.repository) == 1
    assert _table_descriptions(window) == ["Coffee beans"]
    assert window.status.currentMessage() == "Transaction saved"


def test_add_cancelled(window, monkeypatch):
    monkeypatch.setattr(TransactionForm, "exec", lambda dlg: 0)
    window.on_add_clicked()
    assert len(window.repository) == 0
    assert window.status.currentMessage() == "Add cancelled"


def test_edit_selected_transaction(window, monkeypatch):
    tx = window.repository.create(sample_data()).transaction
    window.refresh()
    assert window.select_transaction(tx.id)

    def fake_exec(dlg):
        dlg.description.setText("Edited")
        dlg.save_transaction()
        return dlg.result()

    monkeypatch.setattr(TransactionForm, "exec", fake_exec)
    window.on_edit_clicked()

    assert window.repository.get_by_id(tx.id).description == "Edited"
    assert window.status.currentMessage() == "Transaction updated"


def test_edit_without_selection(window):
    with patch.object(QtWidgets.QMessageBox, "information") as mock_info:
        window.on_edit_clicked()
    mock_info.assert_called_once()
    assert window.status.currentMessage() == "No transaction selected"


def test_delete_selected_transaction(window):
    tx = window.repository.create(sample_data()).transaction
    window.refresh()
    window.select_transaction(tx.id)

    with patch.object(QtWidgets.QMessageBox, "question", return_value=YES):
        window.on_delete_clicked()

    assert len(window.repository) == 0
    assert window.tx_table.rowCount() == 0
    assert window.status.currentMessage() == "Transaction deleted"


def test_delete_cancelled(window):
    tx = window.repository.create(sample_data()).transaction
    window.refresh()
    window.select_transaction(tx.id)

    with patch.object(QtWidgets.QMessageBox, "question", return_value=NO):
        window.on_delete_clicked()

    assert len(window.repository) == 1
    assert window.status.currentMessage() == "Delete cancelled"


def test_delete_storage_failure_keeps_row(window, storage, monkeypatch):
    tx = window.repository.create(sample_data()).transaction
    window.refresh()
    window.select_transaction(tx.id)
    monkeypatch.setattr(storage, "set", lambda key, value: False)

    with patch.object(QtWidgets.QMessageBox, "question", return_value=YES), \
            patch.object(window, "show_error") as mock_error:
        window.on_delete_clicked()

    mock_error.assert_called_once()
    assert "Failed to save to storage" in mock_error.call_args[0][1]
    assert window.tx_table.rowCount() == 1


def test_apply_and_reset_filters(window):
    window.repository.create(sample_data(description="Lunch"))
    window.repository.create(sample_data(type="income", category="Salario", description="Pay"))
    window.refresh()
    assert window.tx_table.rowCount() == 2

    window.apply_filters({"type": "income"})
    assert _table_descriptions(window) == ["Pay"]
    assert window.status.currentMessage() == "Filter applied (1 transactions)"

    window.apply_filters({"search": "lun"})
    assert _table_descriptions(window) == ["Lunch"]

    window.on_reset_filters_clicked()
    assert window.current_filters == default_filters()
    assert window.tx_table.rowCount() == 2


def test_filter_dialog_result_is_applied(window, monkeypatch):
    window.repository.create(sample_data(description="Lunch"))
    monkeypatch.setattr(FilterDialog, "exec", lambda dlg: 1)
    monkeypatch.setattr(FilterDialog, "get_filters", lambda dlg: {"type": "income"})
    window.on_filter_search_clicked()
    assert window.current_filters == {"type": "income"}
    assert window.tx_table.rowCount() == 0


def test_statistics_dialog_opens(window):
    window.repository.create(sample_data())
    with patch.object(QtWidgets.QDialog, "exec", return_value=1):
        window.on_statistics_clicked()
    assert window.status.currentMessage() == "Statistics dialog closed"


def test_statistics_button_connection(window):
    with patch.object(window, "on_statistics_clicked") as mock_handler:
        window.statistics_button.clicked.emit()
        mock_handler.assert_called_once()


def test_export_to_file(window, qtbot, tmp_path):
    window.repository.create(sample_data(description="Exported"))
    path = tmp_path / "export.csv"

    window.export_to_file(path)
    qtbot.waitUntil(lambda: window.status.currentMessage() == "Export successful", timeout=2000)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Type,Category,Amount,Date,Description"
    assert lines[1].endswith('"Exported"')


def test_export_with_no_data(window):
    with patch.object(QtWidgets.QMessageBox, "information") as mock_info:
        window._handle_export()
    mock_info.assert_called_once()
    assert window.status.currentMessage() == "Nothing to export"


def test_export_file_dialog_cancelled(window):
    window.repository.create(sample_data())
    with patch.object(QtWidgets.QFileDialog, "getSaveFileName", return_value=("", "")):
        window._handle_export()
    assert "cancelled" in window.status.currentMessage()


def test_import_csv_text_success(window):
    text = (
        "Type,Category,Amount,Date,Description\n"
        f'"expense","Transporte","20","{TODAY.isoformat()}","Taxi"\n'
        f'"income","Salario","900","{TODAY.isoformat()}","Pay"\n'
    )
    with patch.object(QtWidgets.QMessageBox, "information") as mock_info:
        result = window.import_csv_text(text)

    assert (result.imported, result.errors) == (2, 0)
    mock_info.assert_called_once()
    assert window.tx_table.rowCount() == 2
    assert window.status.currentMessage() == "Import successful (2 transactions)"


def test_import_csv_text_with_errors(window):
    text = (
        "Type,Category,Amount,Date,Description\n"
        f'"expense","Transporte","20","{TODAY.isoformat()}","Taxi"\n'
        f'"expense","Transporte","0","{TODAY.isoformat()}","Zero"\n'
    )
    with patch.object(QtWidgets.QMessageBox, "warning") as mock_warning:
        result = window.import_csv_text(text)

    assert (result.imported, result.errors) == (1, 1)
    mock_warning.assert_called_once()


def test_import_csv_text_without_rows(window):
    with patch.object(window, "show_error") as mock_error:
        result = window.import_csv_text("Type,Category,Amount,Date,Description\n")
    assert result.imported == 0
    mock_error.assert_called_once()


def test_import_from_file(window, qtbot, tmp_path):
    path = tmp_path / "import.csv"
    path.write_text(
        "Type,Category,Amount,Date,Description\n"
        f'"expense","Salud","35.5","{TODAY.isoformat()}","Pharmacy"\n',
        encoding="utf-8",
    )
    with patch.object(QtWidgets.QFileDialog, "getOpenFileName", return_value=(str(path), "")), \
            patch.object(QtWidgets.QMessageBox, "question", return_value=YES), \
            patch.object(QtWidgets.QMessageBox, "information"):
        window._handle_import()
        qtbot.waitUntil(lambda: len(window.repository) == 1, timeout=2000)

    assert window.repository.get_all()[0].description == "Pharmacy"


def test_import_user_cancels_confirmation(window):
    with patch.object(QtWidgets.QFileDialog, "getOpenFileName", return_value=("/tmp/import.csv", "")), \
            patch.object(QtWidgets.QMessageBox, "question", return_value=NO):
        window._handle_import()
    assert "cancelled" in window.status.currentMessage()


def test_import_export_dialog_cancel(window):
    with patch.object(QtWidgets.QMessageBox, "exec", return_value=None), \
            patch.object(QtWidgets.QMessageBox, "clickedButton", return_value=None):
        window.on_import_export_clicked()
    assert "cancelled" in window.status.currentMessage()


def test_budget_kpi(window):
    window.repository.create(sample_data(amount=250))
    assert window.set_budget(1000)
    text = window.kpi_labels["budget"].text()
    assert text.startswith("25.0% of $1,000.00")
    assert window.settings_store.load_budget().total_amount == 1000

    assert window.set_budget(0)
    assert window.settings_store.load_budget() is None
    assert window.kpi_labels["budget"].text() == "Not set"


def test_budget_dialog(window):
    with patch.object(QtWidgets.QInputDialog, "getDouble", return_value=(500.0, True)):
        window.on_budget_clicked()
    assert window.settings_store.load_budget().total_amount == 500

    with patch.object(QtWidgets.QInputDialog, "getDouble", return_value=(0.0, False)):
        window.on_budget_clicked()
    assert window.settings_store.load_budget().total_amount == 500


def test_theme_toggle_persists_and_restyles(window, qtbot, repository, settings_store):
    assert window.theme == "light"
    window.on_theme_clicked()
    assert window.theme == "dark"
    assert settings_store.load_theme() == "dark"
    assert window.theme_button.text() == "Light Theme"
    assert "#111827" in window.styleSheet()

    reopened = MainWindow(repository=repository, settings_store=settings_store)
    qtbot.addWidget(reopened)
    assert reopened.theme == "dark"


def test_clear_all(window):
    window.repository.create(sample_data())
    window.refresh()
    with patch.object(QtWidgets.QMessageBox, "question", return_value=YES):
        window.on_clear_all_clicked()
    assert len(window.repository) == 0
    assert window.tx_table.rowCount() == 0


def test_data_survives_restart(qtbot, tmp_path):
    path = tmp_path / "store.json"
    first = MainWindow(repository=TransactionRepository(JsonFileStorage(path)))
    qtbot.addWidget(first)
    first.repository.create(sample_data(description="Persisted"))

    second = MainWindow(repository=TransactionRepository(JsonFileStorage(path)))
    qtbot.addWidget(second)
    assert _table_descriptions(second) == ["Persisted"]
