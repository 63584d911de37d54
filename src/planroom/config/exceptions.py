"""Errors raised while loading or validating planroom settings."""


class ConfigError(Exception):
    """Raised when settings cannot be parsed, merged, or validated."""
