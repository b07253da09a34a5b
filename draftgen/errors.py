"""Exceptions raised by the site builder."""


class DraftgenError(Exception):
    """Base exception for all builder errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SourceDirectoryError(DraftgenError):
    """Raised when the source document directory does not exist."""

    pass


class BuildError(DraftgenError):
    """Raised when output artifacts cannot be written."""

    pass


class DocumentNotFoundError(DraftgenError):
    """Raised when a single source document cannot be located."""

    pass


class ConfigError(DraftgenError):
    """Raised when the site config file is unreadable or malformed."""

    pass
