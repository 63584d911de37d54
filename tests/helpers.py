"""Test doubles shared across the suite: file records and an async storage backend."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from planroom.files.filters import category_counts, matches_search
from planroom.files.models import DrawingSet, DrawingSheet, FileRecord
from planroom.files.paths import normalize_folder_path
from planroom.files.tree import collect_folder_paths
from planroom.storage.errors import PartialBatchError, StorageError

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_file(
    file_id: str,
    folder_path: Optional[str] = None,
    *,
    name: Optional[str] = None,
    category: Optional[str] = None,
    description: Optional[str] = None,
    tags: Sequence[str] = (),
    age: int = 0,
) -> FileRecord:
    """Return a file record; larger ``age`` means an older ``created_at``."""
    return FileRecord(
        id=file_id,
        file_name=name or f"{file_id}.pdf",
        folder_path=folder_path,
        category=category,
        description=description,
        tags=list(tags),
        created_at=_EPOCH - timedelta(minutes=age),
        updated_at=_EPOCH,
    )


class FakeStorage:
    """Async storage double that records calls and can be told to fail."""

    def __init__(
        self,
        files: Sequence[FileRecord] = (),
        folders: Sequence[str] = (),
        drawing_sets: Sequence[DrawingSet] = (),
        sheets: Sequence[DrawingSheet] = (),
    ) -> None:
        self.files: list[FileRecord] = list(files)
        self.folders: list[str] = list(folders)
        self.drawing_sets: list[DrawingSet] = list(drawing_sets)
        self.sheets: list[DrawingSheet] = list(sheets)
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: set[str] = set()
        self.unmovable: set[str] = set()

    async def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        # Yield like real I/O so concurrent callers interleave.
        await asyncio.sleep(0)
        if name in self.fail_on:
            raise StorageError(f"{name} unavailable")

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def list_files(
        self,
        project_id: str,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[FileRecord]:
        await self._record("list_files", project_id, category, search, limit)
        records = list(self.files)
        if category:
            records = [record for record in records if record.category == category]
        if search:
            records = [record for record in records if matches_search(record, search)]
        return records[:limit] if limit is not None else records

    async def list_folders(self, project_id: str) -> list[str]:
        await self._record("list_folders", project_id)
        return collect_folder_paths(self.folders, self.files)

    async def file_counts(self, project_id: str) -> dict[str, int]:
        await self._record("file_counts", project_id)
        return category_counts(self.files)

    async def create_folder(self, project_id: str, path: str) -> None:
        await self._record("create_folder", project_id, path)
        if path not in self.folders:
            self.folders.append(path)

    async def move_files(self, file_ids: Sequence[str], target_path: Optional[str]) -> None:
        await self._record("move_files", list(file_ids), target_path)
        target = normalize_folder_path(target_path) or None
        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for file_id in file_ids:
            index = self._index(file_id)
            if index is None or file_id in self.unmovable:
                failed[file_id] = "locked"
                continue
            self.files[index] = self.files[index].model_copy(update={"folder_path": target})
            succeeded.append(file_id)
        if failed:
            raise PartialBatchError("move", succeeded, failed)

    async def delete_files(self, file_ids: Sequence[str]) -> None:
        await self._record("delete_files", list(file_ids))
        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for file_id in file_ids:
            index = self._index(file_id)
            if index is None or file_id in self.unmovable:
                failed[file_id] = "locked"
                continue
            del self.files[index]
            succeeded.append(file_id)
        if failed:
            raise PartialBatchError("delete", succeeded, failed)

    async def update_file(self, file_id: str, **changes: Any) -> FileRecord:
        await self._record("update_file", file_id, changes)
        index = self._index(file_id)
        if index is None:
            raise StorageError(f"File {file_id} not found")
        self.files[index] = self.files[index].model_copy(update=changes)
        return self.files[index]

    async def list_drawing_sets(self, project_id: str) -> list[DrawingSet]:
        await self._record("list_drawing_sets", project_id)
        return list(self.drawing_sets)

    async def list_sheets(self, set_id: str, limit: Optional[int] = None) -> list[DrawingSheet]:
        await self._record("list_sheets", set_id, limit)
        sheets = [sheet for sheet in self.sheets if sheet.drawing_set_id == set_id]
        return sheets[:limit] if limit is not None else sheets

    def _index(self, file_id: str) -> Optional[int]:
        for index, record in enumerate(self.files):
            if record.id == file_id:
                return index
        return None
