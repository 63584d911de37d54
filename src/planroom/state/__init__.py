"""Durable key-value storage for client UI state."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from .errors import UIStateError
from .preferences import (
    EXPANDED_FOLDERS_KEY,
    VIEW_MODE_KEY,
    ExpandedFolders,
    ViewMode,
    ViewModePreference,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_UI_STATE_PATH = Path("~/.planroom/ui-state.json")


class KeyValueStore(Protocol):
    """Minimal string-keyed storage for JSON-serializable values."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store used by tests and short-lived sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Persist UI state as a single JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document; defaults to
                ``~/.planroom/ui-state.json``.
        """
        self._path = (path or DEFAULT_UI_STATE_PATH).expanduser()

    @property
    def path(self) -> Path:
        """Return the resolved state file path."""
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise UIStateError(f"Invalid UI state data: {exc}") from exc
        if not isinstance(data, dict):
            raise UIStateError("UI state file must contain a JSON object.")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        LOGGER.debug("Wrote UI state to %s", self._path)


__all__ = [
    "DEFAULT_UI_STATE_PATH",
    "EXPANDED_FOLDERS_KEY",
    "VIEW_MODE_KEY",
    "ExpandedFolders",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "UIStateError",
    "ViewMode",
    "ViewModePreference",
]
