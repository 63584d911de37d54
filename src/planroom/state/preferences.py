"""Persisted browser preferences: expanded folders and view mode."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Literal, cast

from planroom.files.paths import ancestor_paths, normalize_folder_path

if TYPE_CHECKING:
    from planroom.state import KeyValueStore

LOGGER = logging.getLogger(__name__)

EXPANDED_FOLDERS_KEY = "documents-expanded-folders"
VIEW_MODE_KEY = "documents-view-mode"

ViewMode = Literal["grid", "list"]
_VIEW_MODES = ("grid", "list")


class ExpandedFolders:
    """Per-project set of expanded folder paths, loaded once and saved on change."""

    def __init__(self, store: "KeyValueStore", project_id: str) -> None:
        self._store = store
        self._key = f"{EXPANDED_FOLDERS_KEY}-{project_id}"
        self._paths: set[str] = self._load()

    @property
    def key(self) -> str:
        """Return the storage key for this project."""
        return self._key

    @property
    def paths(self) -> frozenset[str]:
        """Return a snapshot of the expanded paths."""
        return frozenset(self._paths)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_folder_path(path) in self._paths

    def toggle(self, path: str) -> bool:
        """Flip the expansion of ``path`` and return the new state."""

        normalized = normalize_folder_path(path)
        if not normalized:
            return False
        if normalized in self._paths:
            self._paths.discard(normalized)
            expanded = False
        else:
            self._paths.add(normalized)
            expanded = True
        self._save()
        return expanded

    def expand(self, paths: Iterable[str]) -> bool:
        """Expand every path in ``paths``; persist only when something changed."""

        additions = {normalize_folder_path(path) for path in paths} - {""} - self._paths
        if not additions:
            return False
        self._paths |= additions
        self._save()
        return True

    def reveal(self, path: str) -> bool:
        """Expand every ancestor of ``path`` so the tree shows it."""

        return self.expand(ancestor_paths(path))

    def _load(self) -> set[str]:
        raw = self._store.get(self._key)
        if raw is None:
            return set()
        if not isinstance(raw, list):
            LOGGER.warning("Ignoring malformed expanded folder state under %s", self._key)
            return set()
        return {normalize_folder_path(item) for item in raw if isinstance(item, str)} - {""}

    def _save(self) -> None:
        self._store.set(self._key, sorted(self._paths))


class ViewModePreference:
    """Global grid/list preference."""

    def __init__(self, store: "KeyValueStore", default: ViewMode = "list") -> None:
        self._store = store
        self._default = default

    def get(self) -> ViewMode:
        value = self._store.get(VIEW_MODE_KEY)
        if value in _VIEW_MODES:
            return cast(ViewMode, value)
        return self._default

    def set(self, mode: str) -> None:
        if mode not in _VIEW_MODES:
            raise ValueError(f"Unsupported view mode '{mode}'; expected grid or list.")
        self._store.set(VIEW_MODE_KEY, mode)


__all__ = [
    "EXPANDED_FOLDERS_KEY",
    "VIEW_MODE_KEY",
    "ExpandedFolders",
    "ViewMode",
    "ViewModePreference",
]
