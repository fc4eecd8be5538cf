"""
Catalog Context - Managing the media catalog.

This bounded context is responsible for:
- Validating catalog entries and their personal statuses
- Defining the repository contracts used by every storage backend
"""

from .entities import CatalogEntry
from .value_objects import EntryKind, Rating, StatusSet
from .repositories import CatalogRepository, StatusVocabulary

__all__ = [
    # Entities
    "CatalogEntry",
    # Value Objects
    "EntryKind",
    "Rating",
    "StatusSet",
    # Repositories
    "CatalogRepository",
    "StatusVocabulary",
]
