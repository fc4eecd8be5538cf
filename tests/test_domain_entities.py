"""
Tests for catalog entities.
"""

import time

import pytest

from media_shelf.domain.catalog.entities import CatalogEntry
from media_shelf.domain.catalog.value_objects import EntryKind
from media_shelf.exceptions import ValidationError

BOOK_STATUSES = ["owned", "read", "reading", "wishlist"]
MOVIE_STATUSES = ["owned", "watched", "watchlist"]


def make_book(**overrides):
    values = {
        "key": "9780441013593",
        "title": "Dune",
        "author": "Frank Herbert",
        "user_statuses": ["owned"],
        "allowed_statuses": BOOK_STATUSES,
        "added_timestamp": 1700000000,
    }
    values.update(overrides)
    return CatalogEntry(**values)


class TestCatalogEntry:
    """Test cases for CatalogEntry entity."""

    def test_create_entry(self):
        """Test create entry."""
        entry = make_book(rating=4.5, cover_url="http://covers/dune.jpg")

        assert entry.kind is EntryKind.BOOK
        assert entry.key == "9780441013593"
        assert entry.isbn == entry.key
        assert entry.title == "Dune"
        assert entry.author == "Frank Herbert"
        assert entry.cover_url == "http://covers/dune.jpg"
        assert entry.rating == 4.5
        assert entry.user_statuses == ["owned"]
        assert entry.added_timestamp == 1700000000

    def test_default_timestamp_is_now(self):
        """Test default timestamp is now."""
        before = int(time.time())
        entry = make_book(added_timestamp=None)
        assert before <= entry.added_timestamp <= int(time.time())

    def test_key_and_title_are_stripped(self):
        """Test key and title are stripped."""
        entry = make_book(key="  123 ", title=" Dune  ")
        assert entry.key == "123"
        assert entry.title == "Dune"

    @pytest.mark.parametrize("key", ["", "   ", None])
    def test_empty_key_rejected(self, key):
        """Test empty key rejected."""
        with pytest.raises(ValidationError, match="Key cannot be empty"):
            make_book(key=key)

    @pytest.mark.parametrize("title", ["", "  ", None])
    def test_empty_title_rejected(self, title):
        """Test empty title rejected."""
        with pytest.raises(ValidationError, match="Title cannot be empty"):
            make_book(title=title)

    def test_blank_optional_fields_become_none(self):
        """Test blank optional fields become none."""
        entry = make_book(author="  ", cover_url="")
        assert entry.author is None
        assert entry.cover_url is None

    def test_invalid_rating_rejected(self):
        """Test invalid rating rejected."""
        with pytest.raises(ValidationError):
            make_book(rating=5.5)

    def test_status_outside_vocabulary_rejected(self):
        """Test status outside vocabulary rejected."""
        with pytest.raises(ValidationError, match="Invalid status: watched"):
            make_book(user_statuses=["watched"])

    def test_movie_entry_uses_movie_vocabulary(self):
        """Test movie entry uses movie vocabulary."""
        movie = CatalogEntry(
            "tt0133093",
            "The Matrix",
            kind="movie",
            user_statuses=["watched"],
            allowed_statuses=MOVIE_STATUSES,
        )
        assert movie.kind is EntryKind.MOVIE
        assert movie.has_status("watched")

    def test_set_rating(self):
        """Test set rating."""
        entry = make_book()
        entry.set_rating(3)
        assert entry.rating == 3.0
        entry.set_rating(None)
        assert entry.rating is None

    def test_set_rating_failure_keeps_previous_value(self):
        """Test set rating failure keeps previous value."""
        entry = make_book(rating=4)
        with pytest.raises(ValidationError):
            entry.set_rating(0.3)
        assert entry.rating == 4.0

    def test_set_user_statuses(self):
        """Test set user statuses."""
        entry = make_book()
        entry.set_user_statuses(["read", "owned", "read"], BOOK_STATUSES)
        assert entry.user_statuses == ["read", "owned"]

    def test_set_user_statuses_failure_keeps_previous_value(self):
        """Test set user statuses failure keeps previous value."""
        entry = make_book(user_statuses=["owned", "read"])
        with pytest.raises(ValidationError):
            entry.set_user_statuses([], BOOK_STATUSES)
        with pytest.raises(ValidationError):
            entry.set_user_statuses(["read"], ["owned"])
        assert set(entry.user_statuses) == {"owned", "read"}

    def test_set_added_timestamp(self):
        """Test set added timestamp."""
        entry = make_book()
        entry.set_added_timestamp(1800000000)
        assert entry.added_timestamp == 1800000000

    @pytest.mark.parametrize("value", [-1, "x", 1.5, True])
    def test_set_added_timestamp_rejects_invalid(self, value):
        """Test set added timestamp rejects invalid."""
        entry = make_book()
        with pytest.raises(ValidationError):
            entry.set_added_timestamp(value)
        assert entry.added_timestamp == 1700000000

    def test_display_name(self):
        """Test display name."""
        assert make_book().get_display_name() == "Frank Herbert - Dune"
        assert make_book(author=None).get_display_name() == "Dune"

    def test_equality(self):
        """Test equality."""
        first = make_book(user_statuses=["owned", "read"])
        second = make_book(user_statuses=["read", "owned"])
        assert first == second
        second.set_rating(2)
        assert first != second

    def test_not_hashable(self):
        """Test not hashable."""
        with pytest.raises(TypeError):
            hash(make_book())


class TestCatalogEntrySerialization:
    """Test cases for to_dict / from_dict."""

    def test_to_dict(self):
        """Test to dict."""
        entry = make_book(rating=4.5, user_statuses=["read", "owned"])
        assert entry.to_dict() == {
            "key": "9780441013593",
            "title": "Dune",
            "author": "Frank Herbert",
            "coverUrl": None,
            "rating": 4.5,
            "userStatuses": ["read", "owned"],
            "addedTimestamp": 1700000000,
        }

    def test_round_trip(self):
        """Test round trip."""
        entry = make_book(rating=2.5, cover_url="http://c", user_statuses=["reading", "owned"])
        assert CatalogEntry.from_dict(entry.to_dict(), BOOK_STATUSES) == entry

    def test_from_dict_accepts_isbn_and_snake_case(self):
        """Test from dict accepts isbn and snake case."""
        entry = CatalogEntry.from_dict(
            {
                "isbn": "123",
                "title": "Emma",
                "cover_url": "http://emma",
                "user_statuses": ["wishlist"],
                "added_timestamp": 5,
            },
            BOOK_STATUSES,
        )
        assert entry.key == "123"
        assert entry.cover_url == "http://emma"
        assert entry.added_timestamp == 5

    def test_from_dict_revalidates(self):
        """Test from dict revalidates."""
        data = make_book().to_dict()
        data["rating"] = 7
        with pytest.raises(ValidationError):
            CatalogEntry.from_dict(data, BOOK_STATUSES)

    def test_from_dict_missing_statuses(self):
        """Test from dict missing statuses."""
        with pytest.raises(ValidationError, match="must be a list"):
            CatalogEntry.from_dict({"key": "1", "title": "T"}, BOOK_STATUSES)

    def test_from_dict_requires_mapping(self):
        """Test from dict requires mapping."""
        with pytest.raises(ValidationError, match="must be a mapping"):
            CatalogEntry.from_dict(["key", "title"], BOOK_STATUSES)
