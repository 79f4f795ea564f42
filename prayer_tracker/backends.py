"""
Key-value persistence backends.

A backend maps string keys to serialized string values, the same contract
as a browser's localStorage. PrayerStorage keeps its whole collection under
one key, so a backend never needs to understand the payload.

Backends raise on I/O errors; callers decide whether to swallow them.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path.home() / ".local" / "share" / "prayer-tracker" / "storage.json"


class KeyValueStore(Protocol):
    """Minimal string key-value interface."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process backend, used by tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore:
    """
    File-backed store: one JSON object of key -> string.

    Every call re-reads the file, so separate processes see each other's
    writes, but there is no locking: the last writer wins.
    """

    def __init__(self, path: str = None):
        if path is None:
            path = str(DEFAULT_DATA_PATH)
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return raw

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Atomic write: write to temp, then rename
        tmp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
        tmp_file.replace(self.path)
        logger.debug(f"Wrote {len(items)} key(s) to {self.path}")

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)
