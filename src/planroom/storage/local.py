"""JSON-file storage backend for local projects."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from planroom.files.filters import category_counts, matches_search
from planroom.files.models import DrawingSet, DrawingSheet, FileRecord
from planroom.files.paths import normalize_folder_path, require_folder_path
from planroom.files.tree import collect_folder_paths

from .errors import PartialBatchError, StorageError

LOGGER = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path("~/.planroom/projects.json")

_UPDATABLE_FIELDS = frozenset(
    {
        "file_name",
        "category",
        "description",
        "tags",
        "share_with_clients",
        "share_with_subs",
    }
)


class ProjectSnapshot(BaseModel):
    """Persisted documents of one project."""

    name: str = ""
    files: List[FileRecord] = Field(default_factory=list)
    folders: List[str] = Field(default_factory=list)
    drawing_sets: List[DrawingSet] = Field(default_factory=list)
    sheets: List[DrawingSheet] = Field(default_factory=list)


class WorkspaceSnapshot(BaseModel):
    """All projects stored in one document."""

    projects: Dict[str, ProjectSnapshot] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None


class LocalProjectStore:
    """Implement the storage collaborator on top of a JSON document.

    Every call reads the document, applies the change, and writes it back, so
    separate store instances pointed at the same file see each other's writes.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document; defaults to
                ``~/.planroom/projects.json``.
        """
        self._path = (path or DEFAULT_STORE_PATH).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    # Listing -----------------------------------------------------------

    async def list_projects(self) -> dict[str, str]:
        workspace = self._load()
        return {project_id: project.name for project_id, project in workspace.projects.items()}

    async def list_files(
        self,
        project_id: str,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[FileRecord]:
        project = self._load().projects.get(project_id)
        if project is None:
            return []
        records = sorted(project.files, key=lambda record: record.created_at, reverse=True)
        if category:
            records = [record for record in records if record.category == category]
        if search:
            records = [record for record in records if matches_search(record, search)]
        if limit is not None:
            records = records[:limit]
        return records

    async def list_folders(self, project_id: str) -> list[str]:
        project = self._load().projects.get(project_id)
        if project is None:
            return []
        return collect_folder_paths(project.folders, project.files)

    async def file_counts(self, project_id: str) -> dict[str, int]:
        project = self._load().projects.get(project_id)
        return category_counts(project.files if project is not None else [])

    async def list_drawing_sets(self, project_id: str) -> list[DrawingSet]:
        project = self._load().projects.get(project_id)
        if project is None:
            return []
        return sorted(project.drawing_sets, key=lambda item: item.created_at, reverse=True)

    async def list_sheets(self, set_id: str, limit: Optional[int] = None) -> list[DrawingSheet]:
        sheets = [
            sheet
            for project in self._load().projects.values()
            for sheet in project.sheets
            if sheet.drawing_set_id == set_id
        ]
        sheets.sort(key=lambda sheet: (sheet.sort_order, sheet.sheet_number))
        return sheets[:limit] if limit is not None else sheets

    # Mutations ---------------------------------------------------------

    async def create_folder(self, project_id: str, path: str) -> None:
        normalized = require_folder_path(path)
        workspace = self._load()
        project = workspace.projects.setdefault(project_id, ProjectSnapshot())
        if normalized in project.folders:
            return
        project.folders.append(normalized)
        project.folders.sort()
        self._save(workspace)
        LOGGER.info("Created folder %s in project %s", normalized, project_id)

    async def move_files(self, file_ids: Sequence[str], target_path: Optional[str]) -> None:
        target = normalize_folder_path(target_path) or None
        workspace = self._load()
        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for file_id in file_ids:
            located = self._locate(workspace, file_id)
            if located is None:
                failed[file_id] = "file not found"
                continue
            project, index = located
            project.files[index] = project.files[index].model_copy(
                update={"folder_path": target, "updated_at": datetime.now(timezone.utc)}
            )
            succeeded.append(file_id)
        if succeeded:
            self._save(workspace)
        LOGGER.info("Moved %d file(s) to %s", len(succeeded), target or "root")
        if failed:
            raise PartialBatchError("move", succeeded, failed)

    async def delete_files(self, file_ids: Sequence[str]) -> None:
        workspace = self._load()
        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for file_id in file_ids:
            located = self._locate(workspace, file_id)
            if located is None:
                failed[file_id] = "file not found"
                continue
            project, index = located
            del project.files[index]
            succeeded.append(file_id)
        if succeeded:
            self._save(workspace)
        LOGGER.info("Deleted %d file(s)", len(succeeded))
        if failed:
            raise PartialBatchError("delete", succeeded, failed)

    async def update_file(self, file_id: str, **changes: Any) -> FileRecord:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise StorageError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        workspace = self._load()
        located = self._locate(workspace, file_id)
        if located is None:
            raise StorageError(f"File {file_id} not found")
        project, index = located
        payload = project.files[index].model_dump()
        payload.update(changes)
        payload["updated_at"] = datetime.now(timezone.utc)
        try:
            updated = FileRecord.model_validate(payload)
        except ValidationError as exc:
            raise StorageError(f"Invalid file update: {exc}") from exc
        project.files[index] = updated
        self._save(workspace)
        return updated

    # Seeding helpers used by the CLI and tests --------------------------

    async def ensure_project(self, project_id: str, name: str = "") -> None:
        workspace = self._load()
        project = workspace.projects.get(project_id)
        if project is None:
            workspace.projects[project_id] = ProjectSnapshot(name=name or project_id)
        elif name and project.name != name:
            project.name = name
        else:
            return
        self._save(workspace)

    async def add_files(self, project_id: str, records: Iterable[FileRecord]) -> None:
        workspace = self._load()
        project = workspace.projects.setdefault(project_id, ProjectSnapshot(name=project_id))
        existing = {record.id for other in workspace.projects.values() for record in other.files}
        for record in records:
            if record.id in existing:
                raise StorageError(f"File {record.id} already exists")
            normalized = normalize_folder_path(record.folder_path) or None
            project.files.append(record.model_copy(update={"folder_path": normalized}))
            existing.add(record.id)
        self._save(workspace)

    async def add_drawing_set(
        self, project_id: str, drawing_set: DrawingSet, sheets: Iterable[DrawingSheet] = ()
    ) -> None:
        workspace = self._load()
        project = workspace.projects.setdefault(project_id, ProjectSnapshot(name=project_id))
        project.drawing_sets.append(drawing_set)
        project.sheets.extend(sheets)
        self._save(workspace)

    # Internal helpers ---------------------------------------------------

    def _locate(
        self, workspace: WorkspaceSnapshot, file_id: str
    ) -> tuple[ProjectSnapshot, int] | None:
        for project in workspace.projects.values():
            for index, record in enumerate(project.files):
                if record.id == file_id:
                    return project, index
        return None

    def _load(self) -> WorkspaceSnapshot:
        if not self._path.exists():
            return WorkspaceSnapshot()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StorageError(f"Invalid project store data: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Unable to read project store: {exc}") from exc
        try:
            return WorkspaceSnapshot.model_validate(data)
        except ValidationError as exc:
            raise StorageError(f"Invalid project store data: {exc}") from exc

    def _save(self, workspace: WorkspaceSnapshot) -> None:
        workspace.updated_at = datetime.now(timezone.utc)
        payload = workspace.model_dump(mode="json")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to write project store: {exc}") from exc


__all__ = [
    "DEFAULT_STORE_PATH",
    "LocalProjectStore",
    "ProjectSnapshot",
    "WorkspaceSnapshot",
]
