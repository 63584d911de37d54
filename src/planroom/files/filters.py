"""Scope, category, and search filtering over the flat file collection."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from planroom.navigation.models import DrawingSetView, FolderView, NavigationView, RootView

from .models import (
    ALL_CATEGORIES,
    DRAWINGS_CATEGORY,
    DrawingSet,
    DrawingSheet,
    FileRecord,
    FolderNode,
)
from .paths import normalize_folder_path
from .tree import child_folders


@dataclass(frozen=True, slots=True)
class FolderItem:
    """Listing entry for a child folder."""

    path: str
    name: str
    item_count: int


@dataclass(frozen=True, slots=True)
class FileItem:
    """Listing entry for a file."""

    record: FileRecord


@dataclass(frozen=True, slots=True)
class DrawingSetItem:
    """Listing entry for a drawing set."""

    drawing_set: DrawingSet


@dataclass(frozen=True, slots=True)
class SheetItem:
    """Listing entry for a sheet of the selected drawing set."""

    sheet: DrawingSheet


DocumentItem = Union[FolderItem, FileItem, DrawingSetItem, SheetItem]


def matches_search(record: FileRecord, query: str) -> bool:
    """Return whether the name, description, or any tag contains ``query``."""

    needle = query.lower()
    if needle in record.file_name.lower():
        return True
    if record.description and needle in record.description.lower():
        return True
    return any(needle in tag.lower() for tag in record.tags)


def visible_files(
    files: Iterable[FileRecord],
    view: NavigationView,
    category: str = ALL_CATEGORIES,
    search: str = "",
) -> list[FileRecord]:
    """Return the files visible for a view, category filter, and search query.

    Scope is exact-match: a folder view never lists files of its descendants.
    Files are never listed while a drawing set is open.

    Args:
        files: Flat file collection for the project.
        view: Current navigation view.
        category: Category filter, ``"all"`` to disable it.
        search: Free-text query, empty to disable it.

    Returns:
        list[FileRecord]: Surviving files in their original order.
    """

    match view:
        case FolderView(path=path):
            scope = normalize_folder_path(path)
            result = [f for f in files if normalize_folder_path(f.folder_path) == scope]
        case RootView():
            result = [f for f in files if not normalize_folder_path(f.folder_path)]
        case DrawingSetView():
            return []
        case _:
            raise TypeError(f"Unsupported navigation view: {view!r}")

    if category and category != ALL_CATEGORIES:
        result = [f for f in result if f.category == category]

    query = search.strip()
    if query:
        result = [f for f in result if matches_search(f, query)]
    return result


def visible_sheets(sheets: Iterable[DrawingSheet], search: str = "") -> list[DrawingSheet]:
    """Return sheets ordered for display, narrowed by number or title."""

    ordered = sorted(sheets, key=lambda sheet: (sheet.sort_order, sheet.sheet_number))
    query = search.strip().lower()
    if not query:
        return ordered
    return [
        sheet
        for sheet in ordered
        if query in sheet.sheet_number.lower()
        or (sheet.sheet_title is not None and query in sheet.sheet_title.lower())
    ]


def document_items(
    tree: Sequence[FolderNode],
    files: Iterable[FileRecord],
    view: NavigationView,
    category: str = ALL_CATEGORIES,
    search: str = "",
    *,
    drawing_sets: Sequence[DrawingSet] = (),
    sheets: Sequence[DrawingSheet] = (),
) -> list[DocumentItem]:
    """Combine folders, files, drawing sets, and sheets into one listing.

    Folders come first and are hidden while searching at the root, so flat
    search results are not mixed with folder entries. Inside a folder they
    remain visible during a search.
    """

    query = search.strip()
    if isinstance(view, DrawingSetView):
        return [SheetItem(sheet=sheet) for sheet in visible_sheets(sheets, query)]

    if category == DRAWINGS_CATEGORY:
        needle = query.lower()
        return [
            DrawingSetItem(drawing_set=drawing_set)
            for drawing_set in drawing_sets
            if not needle or needle in drawing_set.title.lower()
        ]

    items: list[DocumentItem] = []
    path = view.path if isinstance(view, FolderView) else ""
    if not query or path:
        items.extend(
            FolderItem(path=node.path, name=node.name, item_count=node.item_count)
            for node in child_folders(tree, path)
        )
    items.extend(FileItem(record=record) for record in visible_files(files, view, category, query))
    return items


def category_counts(files: Iterable[FileRecord]) -> dict[str, int]:
    """Count files per category, including an ``"all"`` total."""

    counter: Counter[str] = Counter()
    total = 0
    for record in files:
        total += 1
        counter[record.category or "other"] += 1
    return {ALL_CATEGORIES: total, **dict(counter)}


__all__ = [
    "DocumentItem",
    "DrawingSetItem",
    "FileItem",
    "FolderItem",
    "SheetItem",
    "category_counts",
    "document_items",
    "matches_search",
    "visible_files",
    "visible_sheets",
]
