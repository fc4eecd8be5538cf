"""Tests for the query bus and the catalog queries."""

import pytest

from media_shelf.application import Library
from media_shelf.application.commands.catalog import AddEntryCommand
from media_shelf.application.queries import QueryBus, QueryHandler
from media_shelf.application.queries.base import Query
from media_shelf.application.queries.catalog import (
    GetAllowedStatusesQuery,
    GetEntryQuery,
    ListEntriesQuery,
)
from media_shelf.domain.catalog.entities import CatalogEntry
from media_shelf.exceptions import StorageConsistencyError
from media_shelf.models.config import Config


class BrokenHandler(QueryHandler):
    def __init__(self, error):
        self.error = error

    def handle(self, query):
        raise self.error

    def can_handle(self, query_type):
        return query_type == Query


@pytest.fixture(params=["sqlite", "json"])
def library(request, tmp_path):
    config = Config()
    config.storage.backend = request.param
    config.storage.data_dir = tmp_path / "data"
    config.database.path = tmp_path / "library.db"

    lib = Library(config)
    lib.seed_vocabulary()
    for key, statuses, added in [("a", ["read"], 10), ("b", ["owned"], 30), ("c", ["read", "owned"], 20)]:
        lib.execute(AddEntryCommand(kind="book", entry_data={
            "key": key, "title": f"Book {key}", "userStatuses": statuses, "addedTimestamp": added,
        }))
    yield lib
    lib.close()


class TestQueryBus:
    """Test QueryBus dispatching."""

    def test_unregistered_query(self):
        """Test unregistered query."""
        result = QueryBus().dispatch(Query())
        assert not result.success
        assert result.status_code == 500

    def test_storage_error_is_server_error(self):
        """Test storage error is server error."""
        bus = QueryBus()
        bus.register(Query, BrokenHandler(StorageConsistencyError("corrupt")))

        result = bus.dispatch(Query())

        assert not result.success
        assert result.status_code == 500
        assert result.message == "corrupt"
        assert result.error_type == "StorageConsistencyError"

    def test_registered_queries(self, library):
        """Test that the library registers every catalog query."""
        assert set(library.query_bus.get_registered_queries()) == {
            ListEntriesQuery, GetEntryQuery, GetAllowedStatusesQuery,
        }

    def test_middleware_wraps_handler(self, library):
        """Test that middleware sees each query before its handler."""
        seen = []

        def recording(next_handler):
            def wrapper(query):
                seen.append(type(query).__name__)
                return next_handler(query)
            return wrapper

        library.query_bus.register_middleware(recording)
        result = library.ask(ListEntriesQuery(kind="book"))

        assert result.success
        assert result.total_count == 3
        assert seen == ["ListEntriesQuery"]

    def test_unexpected_error(self):
        """Test unexpected error."""
        bus = QueryBus()
        bus.register(Query, BrokenHandler(KeyError("x")))
        result = bus.dispatch(Query())
        assert result.status_code == 500
        assert result.message == "An unexpected error occurred."


class TestListEntriesQuery:
    """Test listing entries."""

    def test_list_newest_first(self, library):
        """Test list newest first."""
        result = library.ask(ListEntriesQuery(kind="book"))

        assert result.success
        assert [e.key for e in result.data] == ["b", "c", "a"]
        assert result.total_count == 3
        assert all(isinstance(e, CatalogEntry) for e in result.data)

    def test_list_by_status(self, library):
        """Test list by status."""
        result = library.ask(ListEntriesQuery(kind="book", filters={"userStatus": "read"}))
        assert [e.key for e in result.data] == ["c", "a"]

    def test_list_unknown_status(self, library):
        """Test list unknown status."""
        result = library.ask(ListEntriesQuery(kind="book", filters={"userStatus": "banana"}))
        assert result.success
        assert result.data == []
        assert result.total_count == 0

    def test_list_other_kind_is_empty(self, library):
        """Test list other kind is empty."""
        assert library.ask(ListEntriesQuery(kind="movie")).data == []

    def test_results_are_not_cached(self, library):
        """Test results are not cached."""
        first = library.ask(ListEntriesQuery(kind="book"))
        library.repositories.get("book").delete_by_key("b")
        second = library.ask(ListEntriesQuery(kind="book"))
        assert first.total_count == 3
        assert second.total_count == 2


class TestGetEntryQuery:
    """Test single entry lookup."""

    def test_get(self, library):
        """Test get."""
        result = library.ask(GetEntryQuery(kind="book", key="c"))
        assert result.success
        assert result.data.title == "Book c"
        assert result.total_count is None

    def test_get_missing(self, library):
        """Test get missing."""
        result = library.ask(GetEntryQuery(kind="book", key="zzz"))
        assert result.status_code == 404
        assert result.error_type == "NotFoundError"

    def test_get_empty_key(self, library):
        """Test get empty key."""
        assert library.ask(GetEntryQuery(kind="book", key="")).status_code == 400


class TestGetAllowedStatusesQuery:
    """Test vocabulary lookup."""

    def test_allowed_statuses(self, library):
        """Test allowed statuses."""
        assert library.ask(GetAllowedStatusesQuery(kind="book")).data == ["owned", "read", "reading", "wishlist"]
        assert library.ask(GetAllowedStatusesQuery(kind="movie")).data == ["owned", "watched", "watchlist"]
