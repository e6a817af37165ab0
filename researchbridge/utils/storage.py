"""
Keyed Persistence Module

Small get/set/remove-by-key store for JSON-serializable values (user
profile, saved lists, applications, theme). Callers receive a store
instance instead of reaching for global state; the scoring core never
touches it.

Example Usage:
    from researchbridge.utils.storage import JsonFileStore

    store = JsonFileStore("state/profile.json")
    store.set("user", {"interests": ["genomics"]})
    user = store.get("user", default={})
    store.remove("user")
"""

import json
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any


class KeyValueStore(ABC):
    """Interface for keyed JSON persistence."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Value stored under ``key``, or ``default``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` (must be JSON-serializable) under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys."""


class InMemoryStore(KeyValueStore):
    """Process-local store, used in tests and one-shot CLI runs."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        # Round-trip so non-serializable values fail here, like on disk
        self._data[key] = json.loads(json.dumps(value))

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object file.

    The file is re-read on every access and rewritten on every change, so
    separate processes see each other's writes.
    """

    def __init__(self, path: Path | str):
        """
        Initialize JsonFileStore.

        Args:
            path: JSON file path (created on first write)
        """
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise IOError(f"Corrupted store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise IOError(f"Store file {self.path} must contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        payload = json.dumps(data, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        try:
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise IOError(f"Failed to write store file {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())
