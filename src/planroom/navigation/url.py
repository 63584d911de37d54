"""Query-parameter encoding of navigation views and an in-memory location."""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Protocol
from urllib.parse import parse_qsl, urlencode

from planroom.files.paths import normalize_folder_path

from .models import ROOT, DrawingSetView, FolderView, NavigationView, RootView

LOGGER = logging.getLogger(__name__)

PATH_PARAM = "path"
SET_PARAM = "set"

QueryListener = Callable[[dict[str, str]], object]
TitleLookup = Callable[[str], Optional[str]]


def view_to_query(
    view: NavigationView, base: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Return ``base`` with the ``path``/``set`` parameters rewritten for ``view``.

    Unrelated parameters are preserved. A folder removes ``set``, a drawing set
    removes ``path``, and the root removes both.
    """

    params = dict(base or {})
    params.pop(PATH_PARAM, None)
    params.pop(SET_PARAM, None)
    match view:
        case FolderView(path=path):
            params[PATH_PARAM] = path
        case DrawingSetView(id=set_id):
            params[SET_PARAM] = set_id
        case RootView():
            pass
        case _:
            raise TypeError(f"Unsupported navigation view: {view!r}")
    return params


def view_from_query(
    params: Mapping[str, str], title_lookup: TitleLookup | None = None
) -> NavigationView:
    """Derive a navigation view from query parameters.

    A ``set`` parameter wins over ``path`` when both are present. Paths are
    normalized; a path that normalizes to the root yields the root view.
    """

    set_id = (params.get(SET_PARAM) or "").strip()
    if set_id:
        title = title_lookup(set_id) if title_lookup is not None else None
        return DrawingSetView(id=set_id, title=title or "")
    path = normalize_folder_path(params.get(PATH_PARAM))
    if path:
        return FolderView(path=path)
    return ROOT


def parse_query_string(query: str) -> dict[str, str]:
    """Parse ``a=1&b=2`` (with or without a leading ``?``) into a dict."""

    return dict(parse_qsl(query.lstrip("?"), keep_blank_values=False))


def to_query_string(params: Mapping[str, str]) -> str:
    """Render params as a query string, empty when there are none."""

    if not params:
        return ""
    return "?" + urlencode(sorted(params.items()))


class Location(Protocol):
    """Port to the address bar."""

    def query(self) -> dict[str, str]: ...

    def push(self, params: Mapping[str, str]) -> None: ...

    def subscribe(self, listener: QueryListener) -> Callable[[], None]: ...


class MemoryLocation:
    """History-backed location that notifies subscribers on every change.

    Programmatic pushes are observed by subscribers just like back/forward
    navigation, mirroring how a router re-renders on any search-param change.
    """

    def __init__(self, initial: Mapping[str, str] | str | None = None) -> None:
        if isinstance(initial, str):
            start = parse_query_string(initial)
        else:
            start = dict(initial or {})
        self._history: list[dict[str, str]] = [start]
        self._index = 0
        self._listeners: list[QueryListener] = []

    @property
    def history(self) -> list[dict[str, str]]:
        """Return a copy of the history stack."""
        return [dict(entry) for entry in self._history]

    def query(self) -> dict[str, str]:
        return dict(self._history[self._index])

    def query_string(self) -> str:
        return to_query_string(self._history[self._index])

    def push(self, params: Mapping[str, str]) -> None:
        del self._history[self._index + 1 :]
        self._history.append(dict(params))
        self._index += 1
        self._notify()

    def visit(self, params: Mapping[str, str] | str) -> None:
        """Simulate a deep link typed into the address bar."""

        if isinstance(params, str):
            params = parse_query_string(params)
        self.push(params)

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        if self._index >= len(self._history) - 1:
            return False
        self._index += 1
        self._notify()
        return True

    def subscribe(self, listener: QueryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        current = self.query()
        LOGGER.debug("Location changed to %s", to_query_string(current) or "/")
        for listener in list(self._listeners):
            listener(dict(current))


__all__ = [
    "PATH_PARAM",
    "SET_PARAM",
    "Location",
    "MemoryLocation",
    "parse_query_string",
    "to_query_string",
    "view_from_query",
    "view_to_query",
]
