"""Sidebar tree that keeps its own copy of folders and drawing sets."""

from __future__ import annotations

import asyncio
import logging

from planroom.files.models import DrawingSet, FolderNode
from planroom.files.tree import build_folder_tree
from planroom.storage.base import StorageBackend
from planroom.storage.errors import StorageError

from .events import EventBus

LOGGER = logging.getLogger(__name__)


class SidebarModel:
    """Refetch folders and drawing sets whenever the project broadcasts a change."""

    def __init__(self, storage: StorageBackend, project_id: str, bus: EventBus) -> None:
        self._storage = storage
        self._project_id = project_id
        self.folders: tuple[str, ...] = ()
        self.drawing_sets: tuple[DrawingSet, ...] = ()
        self.fetch_count = 0
        self._unsubscribe = bus.subscribe(project_id, self._on_refresh)

    @property
    def tree(self) -> tuple[FolderNode, ...]:
        return build_folder_tree(self.folders, ())

    async def fetch(self) -> bool:
        try:
            folders, sets = await asyncio.gather(
                self._storage.list_folders(self._project_id),
                self._storage.list_drawing_sets(self._project_id),
            )
        except StorageError as exc:
            LOGGER.error("Failed to load sidebar data for project %s: %s", self._project_id, exc)
            return False
        self.folders = tuple(folders)
        self.drawing_sets = tuple(sets)
        self.fetch_count += 1
        return True

    def close(self) -> None:
        self._unsubscribe()

    async def _on_refresh(self, _project_id: str) -> None:
        await self.fetch()


__all__ = ["SidebarModel"]
