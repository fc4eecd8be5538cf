"""Infrastructure layer: storage connections, vocabularies and repositories."""

from .database import Database
from .vocabulary import SqliteStatusVocabulary, StaticStatusVocabulary
from .repositories import JsonFileCatalogRepository, SqliteCatalogRepository

__all__ = [
    "Database",
    "SqliteStatusVocabulary",
    "StaticStatusVocabulary",
    "JsonFileCatalogRepository",
    "SqliteCatalogRepository",
]
