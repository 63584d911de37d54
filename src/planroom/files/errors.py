"""Input validation errors for folder paths."""


class InvalidFolderPathError(ValueError):
    """Raised when a folder path is empty after normalization."""
