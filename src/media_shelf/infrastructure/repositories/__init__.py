"""Repository implementations for media shelf."""

from .json_file_repository import JsonFileCatalogRepository
from .sqlite_repository import SqliteCatalogRepository

__all__ = [
    "JsonFileCatalogRepository",
    "SqliteCatalogRepository",
]
