"""Custom exceptions for media shelf."""


class MediaShelfError(Exception):
    """Base exception for media shelf errors."""

    status_code = 500


class ValidationError(MediaShelfError):
    """Raised when input or a catalog entry invariant is invalid."""

    status_code = 400


class HydrationError(ValidationError):
    """Raised when a stored record fails validation while being loaded."""


class NotFoundError(MediaShelfError):
    """Raised when an operation targets a key that does not exist."""

    status_code = 404


class ConflictError(MediaShelfError):
    """Raised when adding an entry whose key already exists."""

    status_code = 409


class StorageConsistencyError(MediaShelfError):
    """Raised when the backing store cannot be read, written or trusted."""

    status_code = 500


class ConfigurationError(MediaShelfError):
    """Raised when there's an error in configuration."""
