"""Project-specific exceptions."""


class DelimGenError(Exception):
    """Base exception for the project."""


class ConfigurationError(DelimGenError):
    """Raised when run parameters are missing or invalid."""
