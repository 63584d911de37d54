"""Navigation views, URL synchronization, and the navigation state machine."""

from .models import ROOT, DrawingSetView, FolderView, NavigationView, RootView, view_key
from .url import (
    PATH_PARAM,
    SET_PARAM,
    Location,
    MemoryLocation,
    view_from_query,
    view_to_query,
)
from .machine import NavigationChange, NavigationState, NavigationStateMachine

__all__ = [
    "PATH_PARAM",
    "ROOT",
    "SET_PARAM",
    "DrawingSetView",
    "FolderView",
    "Location",
    "MemoryLocation",
    "NavigationChange",
    "NavigationState",
    "NavigationStateMachine",
    "NavigationView",
    "RootView",
    "view_from_query",
    "view_key",
    "view_to_query",
]
