"""
Domain Layer - Media Shelf

This module contains the domain layer following Domain-Driven Design principles.

Bounded Contexts:
- Catalog: Catalog entries, their statuses and the repository contracts
"""

from .catalog import (
    CatalogEntry,
    CatalogRepository,
    EntryKind,
    Rating,
    StatusSet,
    StatusVocabulary,
)

__all__ = [
    "CatalogEntry",
    "CatalogRepository",
    "EntryKind",
    "Rating",
    "StatusSet",
    "StatusVocabulary",
]
