"""Catalog queries."""

from .entry_queries import (
    GetAllowedStatusesHandler,
    GetAllowedStatusesQuery,
    GetEntryHandler,
    GetEntryQuery,
    ListEntriesHandler,
    ListEntriesQuery,
)

__all__ = [
    "GetAllowedStatusesHandler",
    "GetAllowedStatusesQuery",
    "GetEntryHandler",
    "GetEntryQuery",
    "ListEntriesHandler",
    "ListEntriesQuery",
]
