"""Planroom: a headless document browser for construction projects.

The browser presents flat file records in a virtual folder hierarchy, keeps
navigation in sync with URL query parameters, and moves files between
folders through an asynchronous storage backend.
"""

from importlib import metadata as _metadata

from planroom.browser import DocumentBrowser
from planroom.storage import LocalProjectStore, StorageBackend

try:
    __version__ = _metadata.version("planroom")
except _metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["DocumentBrowser", "LocalProjectStore", "StorageBackend", "__version__"]
