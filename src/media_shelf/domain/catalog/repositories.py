"""Catalog Context Repository Interfaces.

This module defines repository interfaces for the Catalog bounded context.
Repositories provide abstraction over data storage and retrieval.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from .entities import CatalogEntry
from .value_objects import EntryKind

logger = logging.getLogger(__name__)

# Filter keys understood by CatalogRepository.find_all
USER_STATUS_FILTER_KEYS = ("userStatus", "user_status")


class StatusVocabulary(ABC):
    """Source of the allowed user statuses for each entry kind."""

    @abstractmethod
    def fetch_allowed_statuses(self, kind: EntryKind) -> List[str]:
        """Return the current allowed statuses for a kind.

        The result is authoritative for a single validation call only and
        must not be cached by callers.
        """
        pass


class CatalogRepository(ABC):
    """Repository for CatalogEntry entities of a single kind."""

    def __init__(self, kind: EntryKind, vocabulary: StatusVocabulary):
        self.kind = EntryKind.parse(kind)
        self.vocabulary = vocabulary

    def allowed_statuses(self) -> List[str]:
        """Fetch the allowed statuses for this repository's kind."""
        return list(self.vocabulary.fetch_allowed_statuses(self.kind))

    @abstractmethod
    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[CatalogEntry]:
        """Find all entries, optionally filtered by ``userStatus``."""
        pass

    @abstractmethod
    def find_by_key(self, key: str) -> Optional[CatalogEntry]:
        """Find an entry by its key. None means not found."""
        pass

    @abstractmethod
    def save(self, entry: CatalogEntry) -> None:
        """Insert or fully update an entry together with its statuses."""
        pass

    @abstractmethod
    def delete_by_key(self, key: str) -> bool:
        """Delete an entry and its statuses. True if a row was removed."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Get total count of entries."""
        pass

    def _status_filter(self, filters: Optional[Mapping[str, Any]]) -> Optional[str]:
        """Extract the user status filter, logging keys that are not understood."""
        if not filters:
            return None

        status = None
        for name, value in filters.items():
            if name in USER_STATUS_FILTER_KEYS:
                if value not in (None, ""):
                    status = str(value)
            else:
                logger.debug(f"Ignoring unsupported {self.kind.value} filter: {name}")
        return status
