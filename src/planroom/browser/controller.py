"""Headless document browser composing navigation, data, selection, and drag."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from planroom.config.models import BrowserSettings
from planroom.files.filters import DocumentItem, document_items, visible_files
from planroom.files.models import DrawingSheet, FileRecord, FolderNode
from planroom.files.paths import split_segments
from planroom.files.tree import build_folder_tree, folder_options
from planroom.navigation.machine import NavigationChange, NavigationStateMachine
from planroom.navigation.models import DrawingSetView, FolderView, NavigationView
from planroom.navigation.url import Location, MemoryLocation
from planroom.state import KeyValueStore, MemoryKeyValueStore
from planroom.state.preferences import ExpandedFolders, ViewModePreference
from planroom.storage.base import StorageBackend

from .drag import DragMoveCoordinator
from .events import EventBus
from .notifications import Notifier
from .selection import SelectionManager
from .session import ProjectDocuments

LOGGER = logging.getLogger(__name__)

ROOT_BREADCRUMB_LABEL = "All files"


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    """One segment of the address bar; non-current crumbs accept drops."""

    label: str
    path: str
    is_current: bool


def breadcrumbs(path: str) -> list[Breadcrumb]:
    """Return the crumbs from the root down to ``path``."""

    segments = split_segments(path)
    crumbs = [Breadcrumb(label=ROOT_BREADCRUMB_LABEL, path="", is_current=not segments)]
    accumulated = ""
    for index, segment in enumerate(segments):
        accumulated += f"/{segment}"
        crumbs.append(
            Breadcrumb(label=segment, path=accumulated, is_current=index == len(segments) - 1)
        )
    return crumbs


class DocumentBrowser:
    """Single entry point for a project's document listing.

    Navigation transitions clear the selection; category and search changes
    keep it and trigger a server-side refresh.
    """

    def __init__(
        self,
        storage: StorageBackend,
        project_id: str,
        *,
        project_name: str = "",
        location: Optional[Location] = None,
        ui_store: Optional[KeyValueStore] = None,
        bus: Optional[EventBus] = None,
        notifier: Optional[Notifier] = None,
        settings: Optional[BrowserSettings] = None,
    ) -> None:
        settings = settings or BrowserSettings()
        ui_store = ui_store if ui_store is not None else MemoryKeyValueStore()

        self.project_id = project_id
        self.notifier = notifier or Notifier()
        self.documents = ProjectDocuments(
            storage,
            project_id,
            project_name=project_name,
            bus=bus,
            notifier=self.notifier,
            file_limit=settings.file_list_limit,
            sheet_limit=settings.sheet_list_limit,
        )
        self.bus = self.documents.bus
        self.expanded_folders = ExpandedFolders(ui_store, project_id)
        self.view_mode = ViewModePreference(ui_store, default=settings.default_view_mode)
        self.location: Location = location if location is not None else MemoryLocation()
        self.selection = SelectionManager()
        self.navigation = NavigationStateMachine(
            self.location,
            expanded=self.expanded_folders,
            title_lookup=self.documents.drawing_set_title,
        )
        self.drag = DragMoveCoordinator(self.documents, self.selection, self.refresh)

        self._tree_cache: tuple[int, tuple[FolderNode, ...]] | None = None
        self._unsubscribers = [
            self.navigation.on_change(self._on_navigation_change),
            self.location.subscribe(self.navigation.sync_from_url),
        ]

    # Lifecycle -------------------------------------------------------------

    async def load(self) -> bool:
        loaded = await self.documents.load()
        self.navigation.resolve_drawing_set_title()
        view = self.navigation.view
        if isinstance(view, DrawingSetView):
            await self.documents.load_sheets_for_set(view.id)
        return loaded

    async def refresh(self) -> bool:
        state = self.navigation.state
        return await self.documents.refresh_files(state.category, state.search)

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # Navigation -------------------------------------------------------------

    @property
    def view(self) -> NavigationView:
        return self.navigation.view

    @property
    def current_path(self) -> str:
        return self.navigation.current_path

    def navigate_to_root(self) -> None:
        self.navigation.navigate_to_root()

    def navigate_to_folder(self, path: str | None) -> None:
        self.navigation.navigate_to_folder(path)

    async def open_drawing_set(self, set_id: str, title: str | None = None) -> tuple[DrawingSheet, ...]:
        """Navigate to a drawing set and make sure its sheets are loaded."""

        resolved_title = title if title is not None else self.documents.drawing_set_title(set_id) or ""
        self.navigation.navigate_to_drawing_set(set_id, resolved_title)
        return await self.documents.load_sheets_for_set(set_id)

    async def set_category(self, category: str) -> bool:
        self.navigation.set_category(category)
        return await self.refresh()

    async def set_search(self, query: str) -> bool:
        self.navigation.set_search(query)
        return await self.refresh()

    def toggle_folder_expanded(self, path: str) -> bool:
        return self.navigation.toggle_folder_expanded(path)

    def breadcrumbs(self) -> list[Breadcrumb]:
        return breadcrumbs(self.current_path)

    # Derived listings -------------------------------------------------------

    @property
    def folder_tree(self) -> tuple[FolderNode, ...]:
        """Return the folder tree, rebuilt only when the collections changed."""

        revision = self.documents.revision
        if self._tree_cache is None or self._tree_cache[0] != revision:
            tree = build_folder_tree(self.documents.folders, self.documents.files)
            self._tree_cache = (revision, tree)
        return self._tree_cache[1]

    def folder_options(self) -> list[str]:
        return folder_options(self.documents.folders, self.documents.files)

    def visible_files(self) -> list[FileRecord]:
        state = self.navigation.state
        return visible_files(self.documents.files, state.view, state.category, state.search)

    def visible_file_ids(self) -> list[str]:
        return [record.id for record in self.visible_files()]

    def items(self) -> list[DocumentItem]:
        state = self.navigation.state
        sheets: tuple[DrawingSheet, ...] = ()
        if isinstance(state.view, DrawingSetView):
            sheets = self.documents.sheets_by_set.get(state.view.id, ())
        return document_items(
            self.folder_tree,
            self.documents.files,
            state.view,
            state.category,
            state.search,
            drawing_sets=self.documents.drawing_sets,
            sheets=sheets,
        )

    # Selection ----------------------------------------------------------------

    def toggle_selection(self, file_id: str) -> bool:
        return self.selection.toggle(file_id)

    def select_all_visible(self, selected: bool = True) -> None:
        self.selection.select_all_visible(self.visible_file_ids(), selected)

    def selected_visible_count(self) -> int:
        return self.selection.selected_visible_count(self.visible_file_ids())

    def all_visible_selected(self) -> bool:
        return self.selection.all_visible_selected(self.visible_file_ids())

    # Mutations ------------------------------------------------------------------

    async def create_folder(self, raw_path: str) -> Optional[str]:
        state = self.navigation.state
        return await self.documents.create_folder(raw_path, category=state.category, search=state.search)

    async def move_selected(self, target_path: Optional[str]) -> bool:
        return await self.drag.move_files(sorted(self.selection.ids), target_path)

    async def delete_selected(self) -> list[str]:
        return await self.delete_files(sorted(self.selection.ids))

    async def delete_files(self, file_ids: list[str]) -> list[str]:
        state = self.navigation.state
        deleted = await self.documents.delete_files(
            file_ids, category=state.category, search=state.search
        )
        self.selection.set_many(deleted, False)
        return deleted

    async def rename_file(self, file_id: str, new_name: str) -> bool:
        state = self.navigation.state
        return await self.documents.rename_file(
            file_id, new_name, category=state.category, search=state.search
        )

    async def update_sharing(self, file_id: str, *, clients: bool, subs: bool) -> bool:
        state = self.navigation.state
        return await self.documents.update_sharing(
            file_id,
            share_with_clients=clients,
            share_with_subs=subs,
            category=state.category,
            search=state.search,
        )

    def _on_navigation_change(self, change: NavigationChange) -> None:
        if not change.view_changed:
            return
        self.selection.clear()
        self.drag.end_drag()
        if isinstance(change.current.view, FolderView):
            LOGGER.debug("Opened folder %s", change.current.view.path)


__all__ = ["Breadcrumb", "DocumentBrowser", "breadcrumbs"]
