# quranlookup/storage.py
import os
import json
import logging
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class StorageError(OSError):
    """The backing file could not be read or written"""


class CorruptStorageError(StorageError):
    """The backing file was read but does not hold a JSON object"""


class JSONStore:
    """
    Small durable key-value store backed by one JSON file.

    Values are kept as JSON strings, so callers decide how to encode and
    decode their own payloads. With ``path=None`` the store lives only in
    memory, which is what tests and throwaway sessions use.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._lock = threading.Lock()
        self._data: Optional[Dict[str, str]] = None if path else {}

    def _load(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data
        if not os.path.exists(self.path):
            self._data = {}
            return self._data
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStorageError(f"Storage file {self.path} is corrupted: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStorageError(f"Storage file {self.path} does not hold an object")
        self._data = data
        return self._data

    def _save(self, data: Dict[str, str]):
        if not self.path:
            return
        tmp_path = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write storage file {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str):
        with self._lock:
            try:
                data = dict(self._load())
            except CorruptStorageError:
                # Corrupted file is replaced on write; read failures propagate
                logger.warning("Discarding corrupted storage file %s", self.path)
                data = {}
            data[key] = value
            self._save(data)
            self._data = data

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set_json(self, key: str, value: Any):
        self.set_item(key, json.dumps(value, ensure_ascii=False))
