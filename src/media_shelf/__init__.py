"""Media Shelf

A personal catalog of books and movies with ratings and user statuses.
"""

__version__ = "0.1.0"

from .application import Library
from .domain import CatalogEntry, EntryKind
from .exceptions import (
    ConfigurationError,
    ConflictError,
    HydrationError,
    MediaShelfError,
    NotFoundError,
    StorageConsistencyError,
    ValidationError,
)

__all__ = [
    "Library",
    "CatalogEntry",
    "EntryKind",

    # Errors
    "MediaShelfError",
    "ValidationError",
    "HydrationError",
    "NotFoundError",
    "ConflictError",
    "StorageConsistencyError",
    "ConfigurationError",
]
