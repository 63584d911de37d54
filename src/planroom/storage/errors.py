"""Storage collaborator errors."""

from __future__ import annotations

from typing import Mapping, Sequence


class StorageError(Exception):
    """Base exception for list/create/move/delete failures."""


class PartialBatchError(StorageError):
    """Raised when some items of a bulk operation failed.

    Attributes:
        succeeded: Identifiers that were processed.
        failed: Mapping of identifiers to failure reasons.
    """

    def __init__(
        self,
        operation: str,
        succeeded: Sequence[str],
        failed: Mapping[str, str],
    ) -> None:
        self.operation = operation
        self.succeeded = list(succeeded)
        self.failed = dict(failed)
        total = len(self.succeeded) + len(self.failed)
        super().__init__(
            f"{operation} failed for {len(self.failed)} of {total} item(s)"
        )
