"""Record models for project files, folders, and drawing sets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FileCategory = Literal[
    "plans",
    "contracts",
    "permits",
    "submittals",
    "photos",
    "rfis",
    "safety",
    "financials",
    "other",
]

FILE_CATEGORIES: tuple[str, ...] = (
    "plans",
    "contracts",
    "permits",
    "submittals",
    "photos",
    "rfis",
    "safety",
    "financials",
    "other",
)

ALL_CATEGORIES = "all"
DRAWINGS_CATEGORY = "drawings"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileRecord(BaseModel):
    """Metadata describing a file stored against a project.

    Attributes:
        id: Storage identifier of the file.
        file_name: Display name shown to users.
        folder_path: Virtual folder tag; ``None`` or empty means the root.
        category: Optional category tag.
        description: Free-text description used by search.
        tags: Free-form tags used by search.
        size_bytes: File size reported by storage.
        mime_type: MIME type reported by storage.
        share_with_clients: Whether the client portal exposes the file.
        share_with_subs: Whether the subcontractor portal exposes the file.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    file_name: str
    folder_path: Optional[str] = None
    category: Optional[FileCategory] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    size_bytes: Optional[int] = None
    mime_type: Optional[str] = None
    share_with_clients: bool = False
    share_with_subs: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class DrawingSet(BaseModel):
    """A group of sheets produced from one uploaded plan PDF."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    status: Literal["processing", "ready", "failed"] = "ready"
    set_type: Optional[str] = None
    sheet_count: Optional[int] = None
    created_at: datetime = Field(default_factory=_utcnow)


class DrawingSheet(BaseModel):
    """A single sheet belonging to a drawing set."""

    model_config = ConfigDict(frozen=True)

    id: str
    drawing_set_id: str
    sheet_number: str
    sheet_title: Optional[str] = None
    discipline: Optional[str] = None
    sort_order: int = 0


@dataclass(frozen=True, slots=True)
class FolderNode:
    """Immutable node of the virtual folder tree.

    Attributes:
        name: Last segment of the path.
        path: Canonical path of the folder.
        item_count: Number of files tagged with exactly this path.
        children: Child folders in lexicographic walk order.
    """

    name: str
    path: str
    item_count: int = 0
    children: tuple["FolderNode", ...] = ()


__all__ = [
    "ALL_CATEGORIES",
    "DRAWINGS_CATEGORY",
    "FILE_CATEGORIES",
    "DrawingSet",
    "DrawingSheet",
    "FileCategory",
    "FileRecord",
    "FolderNode",
]
