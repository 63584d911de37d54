"""Canonicalization helpers for virtual folder paths."""

from __future__ import annotations

import re

from .errors import InvalidFolderPathError

_REPEATED_SLASHES = re.compile(r"/+")
_TRAILING_NOISE = re.compile(r"[/\s]+$")

ROOT_PATH = ""


def normalize_folder_path(raw: str | None) -> str:
    """Return the canonical form of a folder path.

    Canonical paths carry a single leading slash, no repeated or trailing
    slashes, and the root is the empty string (never ``"/"``).

    Args:
        raw: User or storage supplied path, possibly ``None``.

    Returns:
        str: Canonical path, or ``""`` for the root.
    """

    if raw is None:
        return ROOT_PATH
    trimmed = str(raw).strip()
    if not trimmed:
        return ROOT_PATH
    collapsed = _REPEATED_SLASHES.sub("/", "/" + trimmed)
    return _TRAILING_NOISE.sub("", collapsed)


def require_folder_path(raw: str | None) -> str:
    """Normalize a path that must name a folder rather than the root.

    Raises:
        InvalidFolderPathError: If the path is empty after normalization.
    """

    normalized = normalize_folder_path(raw)
    if not normalized:
        raise InvalidFolderPathError("Enter a folder path like /contracts")
    return normalized


def split_segments(path: str | None) -> list[str]:
    """Return the non-empty segments of a path."""

    return [segment for segment in normalize_folder_path(path).split("/") if segment]


def ancestor_paths(path: str | None) -> list[str]:
    """Return every proper ancestor of ``path``, shallowest first.

    ``/a/b/c`` yields ``["/a", "/a/b"]``; the root and the path itself are
    excluded.
    """

    ancestors: list[str] = []
    accumulated = ""
    for segment in split_segments(path)[:-1]:
        accumulated += f"/{segment}"
        ancestors.append(accumulated)
    return ancestors


def leaf_name(path: str | None) -> str:
    """Return the last segment of ``path`` or ``""`` for the root."""

    segments = split_segments(path)
    return segments[-1] if segments else ""


__all__ = [
    "ROOT_PATH",
    "ancestor_paths",
    "leaf_name",
    "normalize_folder_path",
    "require_folder_path",
    "split_segments",
]
