'''
    File Name: main.py
    Version: 3.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
import sys
import logging

from PyQt6 import QtWidgets

import config
from database.storage import JsonFileStorage
from database.transaction_repository import TransactionRepository
from ui.main_window import MainWindow

logging.basicConfig(**config.LOGGING_CONFIG)
logger = logging.getLogger(__name__)


def main() -> int:
    # Ensure runtime dirs exist early
    try:
        config.ensure_data_dir()
    except OSError:
        logger.exception("Failed to ensure data directory exists")

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    app.setApplicationVersion(config.APP_VERSION)

    # Friendly global exception hook that logs and shows a dialog
    def _excepthook(exc_type, exc_value, exc_tb):
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))
        try:
            QtWidgets.QMessageBox.critical(None, "Unhandled Exception", str(exc_value))
        except Exception:
            logger.debug("Could not show the error dialog")
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _excepthook

    storage = JsonFileStorage(config.STORAGE_PATH)
    repository = TransactionRepository(storage)
    logger.info("Loaded %d transactions from %s", len(repository), storage.path)

    window = MainWindow(repository=repository)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
