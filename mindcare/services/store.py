# key-value store port for the progress engines
# values are json documents stored as strings, like browser local storage
# in-memory store for tests, json-file store for durable single-user use

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from mindcare.config import settings

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """raised when the backing store cannot be read or written"""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """dict-backed store, lost when the process exits"""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class JsonFileStore:
    """durable store kept in a single json file.

    the whole file is read on open and rewritten on every set, through a
    temp file + os.replace so a crash never leaves a half-written file.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._data: Dict[str, str] = {}
        self._loaded = False

    def open(self):
        if self._loaded:
            return
        if self.path.exists():
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as e:
                raise StoreError(f"Could not read store file {self.path}: {e}") from e
            try:
                data = json.loads(raw) if raw.strip() else {}
            except json.JSONDecodeError as e:
                raise StoreError(f"Store file {self.path} is not valid json: {e}") from e
            if not isinstance(data, dict):
                raise StoreError(f"Store file {self.path} must hold a json object")
            self._data = {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}
        logger.info(f"Opened local store at {self.path} ({len(self._data)} keys)")
        self._loaded = True

    def get(self, key: str) -> Optional[str]:
        self.open()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self.open()
        self._flush({**self._data, key: value})

    def remove(self, key: str) -> None:
        self.open()
        if key in self._data:
            data = dict(self._data)
            del data[key]
            self._flush(data)

    def keys(self):
        self.open()
        return list(self._data.keys())

    def _flush(self, data: Dict[str, str]):
        """write data to disk, and only then make it the in-memory state"""
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"Could not write store file {self.path}: {e}") from e
        self._data = data


# json helpers: corruption is recoverable, store failures are not

def read_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """read and decode a json document. malformed json is logged and
    treated as absent; errors raised by the store itself propagate."""
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Discarding malformed json under '{key}': {e}")
        return default


def read_json_list(store: KeyValueStore, key: str) -> list:
    value = read_json(store, key, [])
    if not isinstance(value, list):
        logger.warning(f"Expected a json array under '{key}', got {type(value).__name__}")
        return []
    return value


def read_json_object(store: KeyValueStore, key: str) -> dict:
    value = read_json(store, key, {})
    if not isinstance(value, dict):
        logger.warning(f"Expected a json object under '{key}', got {type(value).__name__}")
        return {}
    return value


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value))


def create_store(backend: Optional[str] = None, path: Optional[str] = None) -> KeyValueStore:
    """build the store named by settings (or the explicit arguments)"""
    backend = backend if backend is not None else settings.STORE_BACKEND
    if backend == "memory":
        return InMemoryStore()
    if backend == "file":
        store = JsonFileStore(path if path is not None else settings.STORE_PATH)
        store.open()
        return store
    raise ValueError(f"Unknown STORE_BACKEND '{backend}'. Use 'memory' or 'file'.")
