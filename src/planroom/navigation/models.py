"""Navigation views for the document browser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class RootView:
    """The project root, listing unfiled documents and top-level folders."""


@dataclass(frozen=True, slots=True)
class FolderView:
    """A virtual folder identified by its canonical path."""

    path: str


@dataclass(frozen=True, slots=True)
class DrawingSetView:
    """A drawing set, listing its sheets instead of folder contents."""

    id: str
    title: str = ""


NavigationView = Union[RootView, FolderView, DrawingSetView]

ROOT = RootView()


def view_path(view: NavigationView) -> str:
    """Return the folder path of a view, ``""`` for anything but a folder."""

    if isinstance(view, FolderView):
        return view.path
    return ""


def view_key(view: NavigationView) -> str:
    """Return a stable key identifying the view for URL synchronization."""

    match view:
        case FolderView(path=path):
            return f"path:{path}"
        case DrawingSetView(id=set_id):
            return f"set:{set_id}"
        case RootView():
            return "root"
    raise TypeError(f"Unsupported navigation view: {view!r}")


__all__ = [
    "ROOT",
    "DrawingSetView",
    "FolderView",
    "NavigationView",
    "RootView",
    "view_key",
    "view_path",
]
