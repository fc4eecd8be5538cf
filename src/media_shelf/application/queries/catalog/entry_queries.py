"""Catalog entry queries."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from ...queries.base import Query, QueryHandler
from ...registry import RepositoryRegistry
from ....domain.catalog.entities import CatalogEntry
from ....domain.catalog.value_objects import EntryKind
from ....exceptions import NotFoundError, ValidationError


@dataclass(frozen=True, slots=True, kw_only=True)
class ListEntriesQuery(Query):
    """Query to list the catalog, e.g. ``filters={"userStatus": "read"}``."""

    kind: Union[EntryKind, str] = EntryKind.BOOK
    filters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class GetEntryQuery(Query):
    """Query to get a single entry by key."""

    kind: Union[EntryKind, str] = EntryKind.BOOK
    key: str


@dataclass(frozen=True, slots=True, kw_only=True)
class GetAllowedStatusesQuery(Query):
    """Query to get the current status vocabulary for a kind."""

    kind: Union[EntryKind, str] = EntryKind.BOOK


class ListEntriesHandler(QueryHandler[ListEntriesQuery, List[CatalogEntry]]):
    """Handler for listing entries."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, query: ListEntriesQuery) -> List[CatalogEntry]:
        return self.repositories.get(query.kind).find_all(query.filters)

    def can_handle(self, query_type: type) -> bool:
        return query_type == ListEntriesQuery


class GetEntryHandler(QueryHandler[GetEntryQuery, CatalogEntry]):
    """Handler for getting an entry by key."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, query: GetEntryQuery) -> CatalogEntry:
        repository = self.repositories.get(query.kind)
        key = (query.key or "").strip()
        if not key:
            raise ValidationError("Key is required to look up an entry.")

        entry = repository.find_by_key(key)
        if entry is None:
            raise NotFoundError(f"{repository.kind.value.capitalize()} with key {key} not found.")
        return entry

    def can_handle(self, query_type: type) -> bool:
        return query_type == GetEntryQuery


class GetAllowedStatusesHandler(QueryHandler[GetAllowedStatusesQuery, List[str]]):
    """Handler for reading the status vocabulary."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, query: GetAllowedStatusesQuery) -> List[str]:
        return self.repositories.get(query.kind).allowed_statuses()

    def can_handle(self, query_type: type) -> bool:
        return query_type == GetAllowedStatusesQuery
