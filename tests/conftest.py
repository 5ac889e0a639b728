'''
    File Name: conftest.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
import os

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

import config
from database.settings_store import SettingsStore
from database.storage import MemoryStorage
from helpers import make_repository


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path, monkeypatch):
    """Keep tests away from the real data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "STORAGE_PATH", data_dir / config.STORAGE_FILENAME)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def repository(storage):
    return make_repository(storage=storage)


@pytest.fixture
def settings_store(storage):
    return SettingsStore(storage)
