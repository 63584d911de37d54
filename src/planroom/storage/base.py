"""Abstract storage collaborator consumed by the browser core."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from planroom.files.models import DrawingSet, DrawingSheet, FileRecord


class StorageBackend(Protocol):
    """Asynchronous list/create/move/delete operations for project documents.

    Bulk operations raise :class:`~planroom.storage.errors.PartialBatchError`
    when only some items could be processed, and
    :class:`~planroom.storage.errors.StorageError` for any other failure.
    """

    async def list_files(
        self,
        project_id: str,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[FileRecord]: ...

    async def list_folders(self, project_id: str) -> list[str]: ...

    async def file_counts(self, project_id: str) -> dict[str, int]: ...

    async def create_folder(self, project_id: str, path: str) -> None: ...

    async def move_files(self, file_ids: Sequence[str], target_path: Optional[str]) -> None: ...

    async def delete_files(self, file_ids: Sequence[str]) -> None: ...

    async def update_file(self, file_id: str, **changes: Any) -> FileRecord: ...

    async def list_drawing_sets(self, project_id: str) -> list[DrawingSet]: ...

    async def list_sheets(self, set_id: str, limit: Optional[int] = None) -> list[DrawingSheet]: ...


__all__ = ["StorageBackend"]
