"""Project-level document collections and the mutations that refresh them."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from planroom.files.errors import InvalidFolderPathError
from planroom.files.models import ALL_CATEGORIES, DRAWINGS_CATEGORY, DrawingSet, DrawingSheet, FileRecord
from planroom.files.paths import require_folder_path
from planroom.storage.base import StorageBackend
from planroom.storage.errors import PartialBatchError, StorageError

from .events import EventBus
from .notifications import Notifier, pluralize

LOGGER = logging.getLogger(__name__)


class ProjectDocuments:
    """Hold the last fetched files, folders, drawing sets, and sheets of a project.

    Collections are only ever replaced by successful fetches, never patched
    optimistically. Refreshes are serialized with a lock; a response that
    arrives after the user navigated elsewhere is still applied.
    """

    def __init__(
        self,
        storage: StorageBackend,
        project_id: str,
        *,
        project_name: str = "",
        bus: Optional[EventBus] = None,
        notifier: Optional[Notifier] = None,
        file_limit: Optional[int] = 100,
        sheet_limit: Optional[int] = 500,
    ) -> None:
        self.storage = storage
        self.project_id = project_id
        self.project_name = project_name or project_id
        self.bus = bus or EventBus()
        self.notifier = notifier or Notifier()
        self.file_limit = file_limit
        self.sheet_limit = sheet_limit

        self.files: tuple[FileRecord, ...] = ()
        self.folders: tuple[str, ...] = ()
        self.counts: dict[str, int] = {}
        self.drawing_sets: tuple[DrawingSet, ...] = ()
        self.sheets_by_set: dict[str, tuple[DrawingSheet, ...]] = {}
        self.is_loading = False
        self.revision = 0

        self._refresh_lock = asyncio.Lock()
        self._loading_sheet_ids: set[str] = set()

    # Fetching ------------------------------------------------------------

    async def load(self) -> bool:
        """Fetch every collection for the initial render."""

        files_loaded = await self.refresh_files()
        sets_loaded = await self.refresh_drawing_sets()
        return files_loaded and sets_loaded

    async def refresh_files(self, category: str = ALL_CATEGORIES, search: str = "") -> bool:
        """Refetch files, counts, and folders for the given server-side filters.

        Returns:
            bool: False when the fetch failed, keeping the previous
            collections. The drawings view has no file listing to fetch and
            reports True without touching storage.
        """

        if category == DRAWINGS_CATEGORY:
            return True
        async with self._refresh_lock:
            self.is_loading = True
            try:
                files, counts, folders = await asyncio.gather(
                    self.storage.list_files(
                        self.project_id,
                        category=None if category == ALL_CATEGORIES else category,
                        search=search or None,
                        limit=self.file_limit,
                    ),
                    self.storage.file_counts(self.project_id),
                    self.storage.list_folders(self.project_id),
                )
            except StorageError as exc:
                LOGGER.error("Failed to refresh files for project %s: %s", self.project_id, exc)
                return False
            finally:
                self.is_loading = False
            self.files = tuple(files)
            self.counts = dict(counts)
            self.folders = tuple(folders)
            self.revision += 1
            LOGGER.debug(
                "Refreshed project %s: %d file(s), %d folder(s)",
                self.project_id,
                len(self.files),
                len(self.folders),
            )
            return True

    async def refresh_drawing_sets(self) -> bool:
        try:
            sets = await self.storage.list_drawing_sets(self.project_id)
        except StorageError as exc:
            LOGGER.error("Failed to refresh drawing sets for project %s: %s", self.project_id, exc)
            return False
        self.drawing_sets = tuple(sets)
        self.revision += 1
        return True

    async def load_sheets_for_set(self, set_id: str) -> tuple[DrawingSheet, ...]:
        """Fetch sheets of a drawing set once.

        A second call while the first is in flight returns immediately. A
        failed fetch caches an empty list so the set does not stay loading.
        """

        cached = self.sheets_by_set.get(set_id)
        if cached is not None:
            return cached
        if set_id in self._loading_sheet_ids:
            return ()
        self._loading_sheet_ids.add(set_id)
        try:
            sheets: tuple[DrawingSheet, ...] = tuple(
                await self.storage.list_sheets(set_id, limit=self.sheet_limit)
            )
        except StorageError as exc:
            LOGGER.error("Failed to load sheets for set %s: %s", set_id, exc)
            sheets = ()
        finally:
            self._loading_sheet_ids.discard(set_id)
        self.sheets_by_set[set_id] = sheets
        return sheets

    def is_loading_sheets(self, set_id: str) -> bool:
        return set_id in self._loading_sheet_ids

    def drawing_set_title(self, set_id: str) -> Optional[str]:
        for drawing_set in self.drawing_sets:
            if drawing_set.id == set_id:
                return drawing_set.title
        return None

    def has_folder(self, path: str) -> bool:
        return path in self.folders

    def find_file(self, file_id: str) -> Optional[FileRecord]:
        return next((record for record in self.files if record.id == file_id), None)

    async def notify_changed(self) -> None:
        """Broadcast that folders or sets changed so sibling views refetch."""

        await self.bus.publish(self.project_id)

    # Mutations -------------------------------------------------------------

    async def create_folder(self, raw_path: str, *, category: str = ALL_CATEGORIES, search: str = "") -> Optional[str]:
        """Declare a folder; invalid input is reported before any storage call."""

        try:
            path = require_folder_path(raw_path)
        except InvalidFolderPathError as exc:
            self.notifier.error(str(exc))
            return None
        try:
            await self.storage.create_folder(self.project_id, path)
        except StorageError as exc:
            LOGGER.error("Failed to create folder %s: %s", path, exc)
            self.notifier.error(str(exc) or "Failed to create folder")
            return None
        self.notifier.success(f"Created folder {path}")
        await self.refresh_files(category, search)
        await self.notify_changed()
        return path

    async def delete_files(
        self, file_ids: Sequence[str], *, category: str = ALL_CATEGORIES, search: str = ""
    ) -> list[str]:
        """Delete files and return the ids that were actually removed."""

        ids = list(dict.fromkeys(file_ids))
        if not ids:
            return []
        try:
            await self.storage.delete_files(ids)
        except PartialBatchError as exc:
            self.notifier.error(
                f"Deleted {len(exc.succeeded)} of {pluralize(len(ids), 'file')}; "
                f"{len(exc.failed)} failed"
            )
            deleted = exc.succeeded
        except StorageError as exc:
            LOGGER.error("Failed to delete files: %s", exc)
            self.notifier.error("Failed to delete files")
            deleted = []
        else:
            self.notifier.success(f"Deleted {pluralize(len(ids), 'file')}")
            deleted = ids
        await self.refresh_files(category, search)
        if deleted:
            await self.notify_changed()
        return deleted

    async def rename_file(
        self, file_id: str, new_name: str, *, category: str = ALL_CATEGORIES, search: str = ""
    ) -> bool:
        name = new_name.strip()
        if not name:
            self.notifier.error("File name is required")
            return False
        try:
            await self.storage.update_file(file_id, file_name=name)
        except StorageError as exc:
            LOGGER.error("Failed to rename file %s: %s", file_id, exc)
            self.notifier.error("Failed to rename file")
            return False
        self.notifier.success("File renamed")
        await self.refresh_files(category, search)
        return True

    async def update_sharing(
        self,
        file_id: str,
        *,
        share_with_clients: bool,
        share_with_subs: bool,
        category: str = ALL_CATEGORIES,
        search: str = "",
    ) -> bool:
        try:
            await self.storage.update_file(
                file_id,
                share_with_clients=share_with_clients,
                share_with_subs=share_with_subs,
            )
        except StorageError as exc:
            LOGGER.error("Failed to update sharing for %s: %s", file_id, exc)
            self.notifier.error("Failed to update sharing")
            return False
        self.notifier.success("Sharing updated")
        await self.refresh_files(category, search)
        return True


__all__ = ["ProjectDocuments"]
