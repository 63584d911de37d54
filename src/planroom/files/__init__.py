"""File records, virtual folder paths, and listing filters."""

from .errors import InvalidFolderPathError
from .filters import (
    DocumentItem,
    DrawingSetItem,
    FileItem,
    FolderItem,
    SheetItem,
    category_counts,
    document_items,
    visible_files,
    visible_sheets,
)
from .models import (
    ALL_CATEGORIES,
    DRAWINGS_CATEGORY,
    FILE_CATEGORIES,
    DrawingSet,
    DrawingSheet,
    FileRecord,
    FolderNode,
)
from .paths import ancestor_paths, normalize_folder_path, require_folder_path
from .tree import build_folder_tree, child_folders, find_folder, folder_options

__all__ = [
    "ALL_CATEGORIES",
    "DRAWINGS_CATEGORY",
    "FILE_CATEGORIES",
    "DocumentItem",
    "DrawingSet",
    "DrawingSetItem",
    "DrawingSheet",
    "FileItem",
    "FileRecord",
    "FolderItem",
    "FolderNode",
    "InvalidFolderPathError",
    "SheetItem",
    "ancestor_paths",
    "build_folder_tree",
    "category_counts",
    "child_folders",
    "document_items",
    "find_folder",
    "folder_options",
    "normalize_folder_path",
    "require_folder_path",
    "visible_files",
    "visible_sheets",
]
