"""Headless document browser: data session, selection, drag-and-move, sidebar."""

from .controller import Breadcrumb, DocumentBrowser, breadcrumbs
from .drag import DRAG_MIME_TYPE, DragMoveCoordinator, is_internal_file_drag
from .events import NAV_REFRESH_EVENT, EventBus
from .notifications import Notification, Notifier, pluralize
from .selection import SelectionManager
from .session import ProjectDocuments
from .sidebar import SidebarModel

__all__ = [
    "DRAG_MIME_TYPE",
    "NAV_REFRESH_EVENT",
    "Breadcrumb",
    "DocumentBrowser",
    "DragMoveCoordinator",
    "EventBus",
    "Notification",
    "Notifier",
    "ProjectDocuments",
    "SelectionManager",
    "SidebarModel",
    "breadcrumbs",
    "is_internal_file_drag",
    "pluralize",
]
