"""Storage collaborator protocol and the local JSON implementation."""

from .base import StorageBackend
from .errors import PartialBatchError, StorageError
from .local import DEFAULT_STORE_PATH, LocalProjectStore, ProjectSnapshot, WorkspaceSnapshot

__all__ = [
    "DEFAULT_STORE_PATH",
    "LocalProjectStore",
    "PartialBatchError",
    "ProjectSnapshot",
    "StorageBackend",
    "StorageError",
    "WorkspaceSnapshot",
]
