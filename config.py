'''
    File Name: config.py
    Version: 2.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''

from pathlib import Path
import logging

# Project paths & files
BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
STORAGE_FILENAME = "finance_dashboard.json"
STORAGE_PATH = DATA_DIR / STORAGE_FILENAME   # Path object

# Keys inside the key-value storage document
TRANSACTIONS_KEY = "finance_dashboard_data"
CONFIG_KEY = "finance_dashboard_config"
BUDGET_KEY = "finance_dashboard_budget"

# App metadata
APP_NAME = "Finance Dashboard"
APP_VERSION = "2.0.0"
ORGANIZATION = "pbm"

# UI / formatting
DEFAULT_CURRENCY = "ARS"
CURRENCY_SYMBOL = "$"
DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"
RESOURCES_DIR = BASE_DIR / "resources"
THEMES = {
    "light": RESOURCES_DIR / "light.qss",
    "dark": RESOURCES_DIR / "dark.qss",
}
DEFAULT_THEME = "light"

# Logging (simple default; modules can call logging.basicConfig(**config))
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
}

# Helpers
def ensure_data_dir():
    """
    Ensure the data directory exists. The storage document itself is created
    on first write by `database.storage.JsonFileStorage`.
    """
    DATA_DIR.mkdir(parents=True, exist_ok=True)
