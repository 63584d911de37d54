"""Turn drag gestures over folders and breadcrumbs into batched moves."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from planroom.files.paths import normalize_folder_path
from planroom.storage.errors import PartialBatchError, StorageError

from .notifications import pluralize
from .selection import SelectionManager
from .session import ProjectDocuments

LOGGER = logging.getLogger(__name__)

DRAG_MIME_TYPE = "application/x-planroom-file-id"

ROOT_LABEL = "Root"


def is_internal_file_drag(types: Iterable[str]) -> bool:
    """Return whether a drag carries a browser file id rather than OS files."""

    return DRAG_MIME_TYPE in set(types)


class DragMoveCoordinator:
    """Mediate file drags and "move to" requests against the folder hierarchy.

    Dragging a selected file drags the whole selection; dragging an
    unselected file drags only that file.
    """

    def __init__(
        self,
        documents: ProjectDocuments,
        selection: SelectionManager,
        refresh: Callable[[], Awaitable[object]],
    ) -> None:
        """Initialize the coordinator.

        Args:
            documents: Project collections and storage access.
            selection: Shared selection of the listing.
            refresh: Refetches collections with the current filters.
        """
        self._documents = documents
        self._selection = selection
        self._refresh = refresh
        self._dragged_file_id: Optional[str] = None
        self.is_moving = False

    @property
    def dragged_file_id(self) -> Optional[str]:
        return self._dragged_file_id

    @property
    def is_dragging(self) -> bool:
        return self._dragged_file_id is not None

    def start_drag(self, file_id: str) -> dict[str, str]:
        """Begin dragging ``file_id`` and return the drag payload."""

        self._dragged_file_id = file_id
        return {DRAG_MIME_TYPE: file_id}

    def end_drag(self) -> None:
        self._dragged_file_id = None

    def resolve_payload(self, primary_file_id: Optional[str] = None) -> list[str]:
        """Return the ids a drop should move."""

        file_id = primary_file_id or self._dragged_file_id
        if not file_id:
            return []
        if self._selection.has(file_id):
            return sorted(self._selection.ids)
        return [file_id]

    async def on_drop(self, target_path: Optional[str], primary_file_id: Optional[str] = None) -> bool:
        """Move the drag payload onto ``target_path``; ``None`` means the root."""

        try:
            file_ids = self.resolve_payload(primary_file_id)
            target = normalize_folder_path(target_path)
            return await self.move_files(file_ids, target or None, target or ROOT_LABEL)
        finally:
            self.end_drag()

    async def move_files(
        self,
        file_ids: Sequence[str],
        target_path: Optional[str],
        label: Optional[str] = None,
    ) -> bool:
        """Create the target folder if needed, then move ``file_ids`` in one call.

        Returns:
            bool: True when every file moved.
        """

        ids = list(dict.fromkeys(file_ids))
        if not ids:
            return False
        target = normalize_folder_path(target_path) or None
        label = label or target or ROOT_LABEL
        documents = self._documents
        notifier = documents.notifier

        self.is_moving = True
        try:
            if target is not None and not documents.has_folder(target):
                await documents.storage.create_folder(documents.project_id, target)
            await documents.storage.move_files(ids, target)
        except PartialBatchError as exc:
            notifier.error(
                f"Moved {len(exc.succeeded)} of {pluralize(len(ids), 'file')} to {label}; "
                f"{len(exc.failed)} failed"
            )
            self._selection.set_many(exc.succeeded, False)
            await self._refresh()
            if exc.succeeded:
                await documents.notify_changed()
            return False
        except StorageError as exc:
            LOGGER.error("Failed to move files to %s: %s", label, exc)
            notifier.error("Failed to move files")
            await self._refresh()
            return False
        finally:
            self.is_moving = False

        notifier.success(f"Moved {pluralize(len(ids), 'file')} to {label}")
        self._selection.clear()
        await self._refresh()
        await documents.notify_changed()
        return True


__all__ = ["DRAG_MIME_TYPE", "DragMoveCoordinator", "is_internal_file_drag"]
