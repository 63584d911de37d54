"""Single source of navigational truth for the document browser."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Literal

from planroom.files.models import ALL_CATEGORIES, DRAWINGS_CATEGORY, FILE_CATEGORIES
from planroom.files.paths import normalize_folder_path

from .models import ROOT, DrawingSetView, FolderView, NavigationView, view_key
from .url import Location, TitleLookup, view_from_query, view_to_query

if TYPE_CHECKING:
    from planroom.state.preferences import ExpandedFolders

LOGGER = logging.getLogger(__name__)

ChangeSource = Literal["action", "url", "filter"]


@dataclass(frozen=True, slots=True)
class NavigationState:
    """Immutable snapshot of the view plus its orthogonal filters.

    Attributes:
        view: Root, folder, or drawing-set view.
        category: Category filter (``"all"``, a file category, or ``"drawings"``).
        search: Free-text search query.
    """

    view: NavigationView = ROOT
    category: str = ALL_CATEGORIES
    search: str = ""


@dataclass(frozen=True, slots=True)
class NavigationChange:
    """Notification describing one state swap."""

    previous: NavigationState
    current: NavigationState
    source: ChangeSource

    @property
    def view_changed(self) -> bool:
        """Return True for navigation transitions, False for filter-only changes."""
        return self.source != "filter"


ChangeListener = Callable[[NavigationChange], object]

_VALID_CATEGORIES = frozenset((ALL_CATEGORIES, DRAWINGS_CATEGORY, *FILE_CATEGORIES))


class NavigationStateMachine:
    """Own the current view and keep it in sync with the URL and expanded folders.

    Every transition replaces the whole :class:`NavigationState`, so a folder
    path and a drawing set are never active at the same time. Outbound URL
    pushes record a last-synced key; inbound URL events carrying that key are
    ignored, which keeps a push from being re-processed as a new navigation.
    """

    def __init__(
        self,
        location: Location,
        *,
        expanded: "ExpandedFolders | None" = None,
        title_lookup: TitleLookup | None = None,
    ) -> None:
        """Initialize the machine from the inbound URL.

        Args:
            location: Address-bar port used for reading and pushing params.
            expanded: Persisted expanded-folder set for the project.
            title_lookup: Resolves drawing-set titles for inbound ``set`` ids.
        """
        self._location = location
        self._expanded = expanded
        self._title_lookup = title_lookup
        self._listeners: list[ChangeListener] = []

        view = view_from_query(location.query(), title_lookup)
        self._state = NavigationState(view=view, category=self._category_for(view))
        self._last_synced_key = view_key(view)
        self._reveal(view)

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def view(self) -> NavigationView:
        return self._state.view

    @property
    def current_path(self) -> str:
        view = self._state.view
        return view.path if isinstance(view, FolderView) else ""

    @property
    def selected_drawing_set_id(self) -> str | None:
        view = self._state.view
        return view.id if isinstance(view, DrawingSetView) else None

    @property
    def last_synced_key(self) -> str:
        return self._last_synced_key

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` for every state swap and return an unsubscriber."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Navigation actions ----------------------------------------------

    def navigate_to_root(self) -> NavigationState:
        """Show the project root, resetting the category filter."""

        return self._navigate(ROOT, source="action", push=True)

    def navigate_to_folder(self, path: str | None) -> NavigationState:
        """Open the folder at ``path``; an empty path means the root."""

        normalized = normalize_folder_path(path)
        view: NavigationView = FolderView(path=normalized) if normalized else ROOT
        return self._navigate(view, source="action", push=True)

    def navigate_to_drawing_set(self, set_id: str, title: str = "") -> NavigationState:
        """Open a drawing set, forcing the drawings pseudo-category."""

        if not set_id:
            raise ValueError("A drawing set id is required.")
        return self._navigate(DrawingSetView(id=set_id, title=title), source="action", push=True)

    def sync_from_url(self, params: dict[str, str]) -> bool:
        """Apply an inbound URL change such as back/forward or a deep link.

        Returns:
            bool: True when the URL described a view the machine had not
            already synced, False when the event was an echo of its own push.
        """

        view = view_from_query(params, self._title_lookup)
        key = view_key(view)
        if key == self._last_synced_key:
            return False
        LOGGER.debug("Inbound navigation to %s", key)
        self._navigate(view, source="url", push=False)
        return True

    def resolve_drawing_set_title(self) -> bool:
        """Fill in the title of an open drawing set that was entered without one.

        Deep links carry only the set id; once the sets are loaded the title
        can be looked up. The swap is reported as a filter change so the
        selection survives.
        """

        view = self._state.view
        if not isinstance(view, DrawingSetView) or view.title or self._title_lookup is None:
            return False
        title = self._title_lookup(view.id)
        if not title:
            return False
        self._swap(replace(self._state, view=DrawingSetView(id=view.id, title=title)), source="filter")
        return True

    # Filters -------------------------------------------------------------

    def set_category(self, category: str) -> NavigationState:
        """Change the category filter without leaving the current folder.

        Leaving the drawings pseudo-category while a drawing set is open
        returns to the root first.
        """

        if category not in _VALID_CATEGORIES:
            raise ValueError(f"Unknown category filter '{category}'.")
        if isinstance(self._state.view, DrawingSetView) and category != DRAWINGS_CATEGORY:
            self.navigate_to_root()
        return self._swap(replace(self._state, category=category), source="filter")

    def set_search(self, query: str) -> NavigationState:
        return self._swap(replace(self._state, search=query), source="filter")

    def toggle_folder_expanded(self, path: str) -> bool:
        if self._expanded is None:
            return False
        return self._expanded.toggle(path)

    # Internals ----------------------------------------------------------

    def _navigate(self, view: NavigationView, *, source: ChangeSource, push: bool) -> NavigationState:
        state = NavigationState(
            view=view,
            category=self._category_for(view),
            search=self._state.search,
        )
        # Recorded before pushing: the location notifies subscribers synchronously.
        self._last_synced_key = view_key(view)
        if push:
            self._location.push(view_to_query(view, self._location.query()))
        self._reveal(view)
        return self._swap(state, source=source)

    def _swap(self, state: NavigationState, *, source: ChangeSource) -> NavigationState:
        previous = self._state
        self._state = state
        change = NavigationChange(previous=previous, current=state, source=source)
        for listener in list(self._listeners):
            listener(change)
        return state

    def _reveal(self, view: NavigationView) -> None:
        if self._expanded is not None and isinstance(view, FolderView):
            self._expanded.reveal(view.path)

    @staticmethod
    def _category_for(view: NavigationView) -> str:
        return DRAWINGS_CATEGORY if isinstance(view, DrawingSetView) else ALL_CATEGORIES


__all__ = [
    "ChangeListener",
    "NavigationChange",
    "NavigationState",
    "NavigationStateMachine",
]
