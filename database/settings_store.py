'''
    File Name: settings_store.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''

import logging
from typing import Optional

import config
from database.storage import StorageBackend
from models.budget import Budget

logger = logging.getLogger(__name__)


class SettingsStore:
    """User preferences (theme) and the budget, kept next to the transactions."""

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    # --- Theme ---
    def load_theme(self) -> str:
        cfg = self.storage.get(config.CONFIG_KEY)
        theme = cfg.get("theme") if isinstance(cfg, dict) else None
        if theme not in config.THEMES:
            return config.DEFAULT_THEME
        return theme

    def save_theme(self, theme: str) -> bool:
        if theme not in config.THEMES:
            logger.warning("Unknown theme %r; using %s", theme, config.DEFAULT_THEME)
            theme = config.DEFAULT_THEME
        cfg = self.storage.get(config.CONFIG_KEY)
        cfg = dict(cfg) if isinstance(cfg, dict) else {}
        cfg["theme"] = theme
        return self.storage.set(config.CONFIG_KEY, cfg)

    def toggle_theme(self) -> str:
        """Switch light <-> dark, persist it and return the new theme."""
        new_theme = "light" if self.load_theme() == "dark" else "dark"
        if not self.save_theme(new_theme):
            logger.error("Failed saving theme preference")
        return new_theme

    # --- Budget ---
    def load_budget(self) -> Optional[Budget]:
        data = self.storage.get(config.BUDGET_KEY)
        if not isinstance(data, dict):
            return None
        return Budget.from_dict(data)

    def save_budget(self, budget: Budget) -> bool:
        return self.storage.set(config.BUDGET_KEY, budget.to_dict())

    def clear_budget(self) -> bool:
        return self.storage.remove(config.BUDGET_KEY)
