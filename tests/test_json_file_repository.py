"""Tests for the JSON file catalog repository."""

import json

import pytest

from media_shelf.domain.catalog.entities import CatalogEntry
from media_shelf.domain.catalog.value_objects import EntryKind
from media_shelf.exceptions import StorageConsistencyError, ValidationError
from media_shelf.infrastructure.repositories import JsonFileCatalogRepository
from media_shelf.infrastructure.vocabulary import StaticStatusVocabulary

BOOK_STATUSES = ["owned", "read", "reading", "wishlist"]


@pytest.fixture
def vocabulary():
    return StaticStatusVocabulary({"book": BOOK_STATUSES, "movie": ["watched"]})


@pytest.fixture
def library_file(tmp_path):
    return tmp_path / "books.json"


@pytest.fixture
def repository(library_file, vocabulary):
    return JsonFileCatalogRepository(library_file, vocabulary, EntryKind.BOOK)


def make_book(key="111", title="Dune", statuses=("owned",), **kwargs):
    kwargs.setdefault("added_timestamp", 1700000000)
    return CatalogEntry(
        key, title, user_statuses=list(statuses), allowed_statuses=BOOK_STATUSES, **kwargs
    )


def read_records(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestJsonFileCatalogRepository:
    """Test cases for JsonFileCatalogRepository."""

    def test_creates_empty_file(self, repository, library_file):
        """Test creates empty file."""
        assert library_file.exists()
        assert read_records(library_file) == []
        assert repository.find_all() == []

    def test_in_directory(self, tmp_path, vocabulary):
        """Test in directory."""
        repository = JsonFileCatalogRepository.in_directory(tmp_path / "data", vocabulary, "movie")
        assert repository.file_path == tmp_path / "data" / "movies.json"
        assert repository.kind is EntryKind.MOVIE
        assert repository.file_path.exists()

    def test_save_appends_serialized_entry(self, repository, library_file):
        """Test save appends serialized entry."""
        entry = make_book(rating=3.5, statuses=["read", "owned"])
        repository.save(entry)

        assert read_records(library_file) == [entry.to_dict()]
        assert repository.find_by_key("111") == entry

    def test_save_replaces_existing_record(self, repository, library_file):
        """Test save replaces existing record."""
        entry = make_book()
        repository.save(entry)
        repository.save(make_book(key="222"))

        entry.set_user_statuses(["wishlist"], BOOK_STATUSES)
        repository.save(entry)

        records = read_records(library_file)
        assert [r["key"] for r in records] == ["111", "222"]
        assert records[0]["userStatuses"] == ["wishlist"]

    def test_save_wrong_kind(self, repository):
        """Test save wrong kind."""
        movie = CatalogEntry("tt1", "Alien", kind="movie", user_statuses=["watched"], allowed_statuses=["watched"])
        with pytest.raises(ValidationError):
            repository.save(movie)

    def test_save_status_outside_vocabulary(self, library_file, vocabulary):
        """Test that a status unknown to the vocabulary is never written."""
        repository = JsonFileCatalogRepository(library_file, StaticStatusVocabulary({"book": ["owned"]}))
        repository.save(make_book(key="keep", statuses=["owned"]))

        ghost = CatalogEntry("1", "Dune", user_statuses=["ghost"], allowed_statuses=["ghost"])
        with pytest.raises(StorageConsistencyError, match="ghost"):
            repository.save(ghost)

        assert [r["key"] for r in read_records(library_file)] == ["keep"]
        assert repository.find_by_key("1") is None

    def test_padded_record_key_matches(self, library_file, vocabulary):
        """Test that stored keys with surrounding whitespace are found and deleted."""
        library_file.write_text(json.dumps([
            {"key": " k ", "title": "Padded", "userStatuses": ["read"], "addedTimestamp": 1}
        ]))
        repository = JsonFileCatalogRepository(library_file, vocabulary)

        assert repository.find_by_key("k").title == "Padded"
        assert repository.delete_by_key("k") is True
        assert read_records(library_file) == []

    def test_no_temporary_files_left_behind(self, repository, library_file):
        """Test no temporary files left behind."""
        repository.save(make_book())
        repository.delete_by_key("111")
        assert [p.name for p in library_file.parent.iterdir()] == ["books.json"]

    def test_delete(self, repository):
        """Test delete."""
        repository.save(make_book())
        repository.save(make_book(key="222"))

        assert repository.delete_by_key("111") is True
        assert repository.delete_by_key("111") is False
        assert [e.key for e in repository.find_all()] == ["222"]

    def test_find_all_filters_and_orders(self, repository):
        """Test find all filters and orders."""
        repository.save(make_book(key="a", statuses=["read"], added_timestamp=1))
        repository.save(make_book(key="b", statuses=["owned"], added_timestamp=2))
        repository.save(make_book(key="c", statuses=["read", "owned"], added_timestamp=3))

        assert [e.key for e in repository.find_all()] == ["c", "b", "a"]
        assert [e.key for e in repository.find_all({"userStatus": "read"})] == ["c", "a"]
        assert repository.find_all({"userStatus": "unknown"}) == []

    def test_isbn_records_are_readable(self, library_file, vocabulary):
        """Test isbn records are readable."""
        library_file.write_text(json.dumps([
            {"isbn": "999", "title": "Legacy", "userStatuses": ["read"], "addedTimestamp": 10}
        ]))
        repository = JsonFileCatalogRepository(library_file, vocabulary)
        assert repository.find_by_key("999").title == "Legacy"

    def test_empty_file_is_empty_library(self, library_file, vocabulary):
        """Test empty file is empty library."""
        library_file.write_text("")
        repository = JsonFileCatalogRepository(library_file, vocabulary)
        assert repository.find_all() == []
        assert repository.count() == 0

    def test_invalid_json(self, library_file, vocabulary):
        """Test invalid json."""
        library_file.write_text("{not json")
        repository = JsonFileCatalogRepository(library_file, vocabulary)
        with pytest.raises(StorageConsistencyError, match="Error decoding JSON"):
            repository.find_all()
        with pytest.raises(StorageConsistencyError):
            repository.save(make_book())
        assert library_file.read_text() == "{not json"

    def test_non_array_document(self, library_file, vocabulary):
        """Test non array document."""
        library_file.write_text(json.dumps({"books": []}))
        repository = JsonFileCatalogRepository(library_file, vocabulary)
        with pytest.raises(StorageConsistencyError, match="JSON array"):
            repository.find_all()

    def test_corrupt_record_policy(self, library_file, vocabulary):
        """Test corrupt record policy."""
        good = make_book(key="good").to_dict()
        bad = dict(make_book(key="bad").to_dict(), rating=9)
        library_file.write_text(json.dumps([good, bad, "garbage"]))
        repository = JsonFileCatalogRepository(library_file, vocabulary)

        assert [e.key for e in repository.find_all()] == ["good"]
        with pytest.raises(StorageConsistencyError, match="inconsistent data"):
            repository.find_by_key("bad")

    def test_vocabulary_applied_on_read(self, repository, library_file):
        """Test vocabulary applied on read."""
        repository.save(make_book(statuses=["wishlist"]))

        narrowed = JsonFileCatalogRepository(
            library_file, StaticStatusVocabulary({"book": ["owned", "read"]})
        )
        assert narrowed.find_all() == []
        with pytest.raises(StorageConsistencyError):
            narrowed.find_by_key("111")
