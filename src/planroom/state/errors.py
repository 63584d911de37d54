"""UI state errors."""


class UIStateError(Exception):
    """Raised when persisted UI state cannot be read or written."""
