"""Derive the virtual folder tree from flat folder paths and file tags."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .models import FileRecord, FolderNode
from .paths import normalize_folder_path


@dataclass(slots=True)
class _ArenaEntry:
    name: str
    path: str
    children: list[str] = field(default_factory=list)


def count_files_by_folder(files: Iterable[FileRecord]) -> Counter[str]:
    """Count files per exact canonical folder path, skipping root files."""

    counts: Counter[str] = Counter()
    for record in files:
        folder = normalize_folder_path(record.folder_path)
        if folder:
            counts[folder] += 1
    return counts


def collect_folder_paths(
    folder_paths: Iterable[str | None], files: Iterable[FileRecord]
) -> list[str]:
    """Return the sorted union of declared and file-implied canonical paths."""

    union: set[str] = set()
    for raw in folder_paths:
        normalized = normalize_folder_path(raw)
        if normalized:
            union.add(normalized)
    for record in files:
        normalized = normalize_folder_path(record.folder_path)
        if normalized:
            union.add(normalized)
    return sorted(union)


def build_folder_tree(
    folder_paths: Iterable[str | None], files: Sequence[FileRecord]
) -> tuple[FolderNode, ...]:
    """Build the folder tree for a project.

    Each distinct prefix of every path becomes exactly one node. Nodes are
    memoized by canonical path, so parent/child edges only ever point from a
    node created earlier in the sorted walk to a later one.

    Args:
        folder_paths: Declared folder paths, which may have no files yet.
        files: File records whose ``folder_path`` may imply further folders.

    Returns:
        tuple[FolderNode, ...]: Top-level folders in lexicographic walk order.
    """

    counts = count_files_by_folder(files)
    arena: dict[str, _ArenaEntry] = {}
    roots: list[str] = []

    for path in collect_folder_paths(folder_paths, files):
        current = ""
        parent: Optional[_ArenaEntry] = None
        for segment in path.split("/")[1:]:
            current += f"/{segment}"
            entry = arena.get(current)
            if entry is None:
                entry = _ArenaEntry(name=segment, path=current)
                arena[current] = entry
                if parent is not None:
                    parent.children.append(current)
                else:
                    roots.append(current)
            parent = entry

    def freeze(path: str) -> FolderNode:
        entry = arena[path]
        return FolderNode(
            name=entry.name,
            path=entry.path,
            item_count=counts.get(entry.path, 0),
            children=tuple(freeze(child) for child in entry.children),
        )

    return tuple(freeze(path) for path in roots)


def find_folder(tree: Sequence[FolderNode], path: str | None) -> Optional[FolderNode]:
    """Locate the node for ``path`` by descending segment by segment."""

    target = normalize_folder_path(path)
    if not target:
        return None
    nodes: Sequence[FolderNode] = tree
    found: Optional[FolderNode] = None
    for node_path in _prefixes(target):
        found = next((node for node in nodes if node.path == node_path), None)
        if found is None:
            return None
        nodes = found.children
    return found


def child_folders(tree: Sequence[FolderNode], path: str | None) -> tuple[FolderNode, ...]:
    """Return the direct child folders of ``path`` (top-level nodes for the root)."""

    if not normalize_folder_path(path):
        return tuple(tree)
    node = find_folder(tree, path)
    if node is None:
        return ()
    return node.children


def iter_folders(tree: Sequence[FolderNode]) -> Iterable[FolderNode]:
    """Yield every node depth-first in display order."""

    for node in tree:
        yield node
        yield from iter_folders(node.children)


def folder_options(
    folder_paths: Iterable[str | None], files: Iterable[FileRecord]
) -> list[str]:
    """Return the sorted folder choices offered by a "move to" picker."""

    return collect_folder_paths(folder_paths, files)


def _prefixes(path: str) -> list[str]:
    prefixes: list[str] = []
    current = ""
    for segment in path.split("/")[1:]:
        current += f"/{segment}"
        prefixes.append(current)
    return prefixes


__all__ = [
    "build_folder_tree",
    "child_folders",
    "collect_folder_paths",
    "count_files_by_folder",
    "find_folder",
    "folder_options",
    "iter_folders",
]
