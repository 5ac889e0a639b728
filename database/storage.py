'''
    File Name: storage.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''

from abc import ABC, abstractmethod
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any, Dict, Optional

import config

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Key-value persistence used by the repository and the settings store.

    Values are plain JSON-compatible data. Implementations never raise on
    read/write problems: `get` returns None and `set`/`remove` return False.
    """

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the stored value for `key`, or None if missing/unreadable."""

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """Store `value` under `key`. Returns True on success."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete `key`. Returns True on success (also when it did not exist)."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """True if a value is stored under `key`."""

    @abstractmethod
    def clear(self) -> bool:
        """Remove every key."""

    @abstractmethod
    def size(self) -> int:
        """Approximate storage usage in bytes."""


class MemoryStorage(StorageBackend):
    """In-process storage. Values round-trip through JSON like the file backend.

    `max_bytes` emulates a storage quota: a write that would grow the store
    past it fails and leaves the previous value in place.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.exception("Corrupt value stored under %s", key)
            return None

    def set(self, key: str, value: Any) -> bool:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed serializing value for %s", key)
            return False

        if self.max_bytes is not None:
            projected = self.size() - self._entry_size(key) + len(key) + len(raw)
            if projected > self.max_bytes:
                logger.error("Storage quota exceeded writing %s (%d > %d bytes)", key, projected, self.max_bytes)
                return False

        self._data[key] = raw
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def has(self, key: str) -> bool:
        return key in self._data

    def clear(self) -> bool:
        self._data.clear()
        return True

    def size(self) -> int:
        return sum(len(k) + len(v) for k, v in self._data.items())

    def _entry_size(self, key: str) -> int:
        raw = self._data.get(key)
        return 0 if raw is None else len(key) + len(raw)


class JsonFileStorage(StorageBackend):
    """Storage backed by a single JSON document on disk.

    The whole document is rewritten on every `set`, through a temporary file
    that replaces the original, so a failed write never truncates it.
    """

    def __init__(self, path: Optional[Path] = None):
        # prefer explicit path, otherwise config value
        if path is not None:
            self.path = Path(path)
        else:
            self.path = Path(config.STORAGE_PATH)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed reading storage file %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.error("Storage file %s does not contain an object; ignoring it", self.path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> bool:
        tmp_name = None
        try:
            payload = json.dumps(data, ensure_ascii=False, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".storage-", suffix=".json", dir=str(self.path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed writing storage file %s", self.path)
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)
            return False

    def get(self, key: str) -> Any:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> bool:
        data = self._read_all()
        data[key] = value
        ok = self._write_all(data)
        if ok:
            logger.debug("Stored %s in %s", key, self.path)
        return ok

    def remove(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return True
        del data[key]
        return self._write_all(data)

    def has(self, key: str) -> bool:
        return key in self._read_all()

    def clear(self) -> bool:
        return self._write_all({})

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0
