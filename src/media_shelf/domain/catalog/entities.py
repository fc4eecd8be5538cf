"""Catalog Context Entities.

This module defines the CatalogEntry entity shared by every media kind.
An entry never stores its allowed status vocabulary: the caller supplies it
at construction and on every mutation that needs it, because the vocabulary
is data that can change between deployments and over time.
"""

import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ...exceptions import ValidationError
from .value_objects import EntryKind, Rating, StatusSet


def _require_text(value: Any, field_name: str) -> str:
    """Return a stripped, non-empty string or raise ValidationError."""
    if value is None or not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValidationError(f"{field_name} cannot be empty.")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} cannot be empty.")
    return text


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _validate_timestamp(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Added timestamp must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError("Added timestamp cannot be negative.")
    return value


class CatalogEntry:
    """
    Represents a single book or movie in a personal catalog.

    The entry enforces its invariants on construction and on every setter:
    key and title are never empty, the rating is unset or a half-point value
    between 0.5 and 5, and the status set is non-empty and drawn from the
    allowed vocabulary passed in by the caller.
    """

    __slots__ = (
        "_kind",
        "_key",
        "_title",
        "_author",
        "_cover_url",
        "_rating",
        "_user_statuses",
        "_added_timestamp",
    )

    def __init__(
        self,
        key: str,
        title: str,
        *,
        user_statuses: Iterable[str],
        allowed_statuses: Iterable[str],
        kind: Union[EntryKind, str] = EntryKind.BOOK,
        author: Optional[str] = None,
        cover_url: Optional[str] = None,
        rating: Optional[Union[int, float, str]] = None,
        added_timestamp: Optional[int] = None,
    ) -> None:
        self._kind = EntryKind.parse(kind)
        self._key = _require_text(key, "Key")
        self._title = _require_text(title, "Title")
        self._author = _optional_text(author)
        self._cover_url = _optional_text(cover_url)
        self._rating = Rating.from_raw(rating)
        self._user_statuses = StatusSet(user_statuses, allowed_statuses)
        if added_timestamp is None:
            added_timestamp = int(time.time())
        self._added_timestamp = _validate_timestamp(added_timestamp)

    @property
    def kind(self) -> EntryKind:
        return self._kind

    @property
    def key(self) -> str:
        """Get the unique catalog key (ISBN for books)."""
        return self._key

    @property
    def isbn(self) -> str:
        """Alias of key for book entries."""
        return self._key

    @property
    def title(self) -> str:
        return self._title

    @property
    def author(self) -> Optional[str]:
        return self._author

    @property
    def cover_url(self) -> Optional[str]:
        return self._cover_url

    @property
    def rating(self) -> Optional[float]:
        """Get the rating, or None when unrated."""
        return self._rating.value if self._rating is not None else None

    @property
    def user_statuses(self) -> List[str]:
        """Get the user statuses in first-seen order."""
        return self._user_statuses.to_list()

    @property
    def status_set(self) -> StatusSet:
        return self._user_statuses

    @property
    def added_timestamp(self) -> int:
        return self._added_timestamp

    def has_status(self, status: str) -> bool:
        """Check if the entry carries a specific status."""
        return status in self._user_statuses

    def set_rating(self, rating: Optional[Union[int, float, str]]) -> None:
        """Replace the rating. None clears it."""
        self._rating = Rating.from_raw(rating)

    def set_user_statuses(self, statuses: Iterable[str], allowed_statuses: Iterable[str]) -> None:
        """Replace the status set, validating it against the given vocabulary."""
        self._user_statuses = StatusSet(statuses, allowed_statuses)

    def set_added_timestamp(self, timestamp: int) -> None:
        """Replace the added timestamp.

        Only integer epoch seconds that are not negative are accepted.
        """
        self._added_timestamp = _validate_timestamp(timestamp)

    def get_display_name(self) -> str:
        """Get human-readable display name."""
        if self._author:
            return f"{self._author} - {self._title}"
        return self._title

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to its serialized mapping."""
        return {
            "key": self._key,
            "title": self._title,
            "author": self._author,
            "coverUrl": self._cover_url,
            "rating": self.rating,
            "userStatuses": self.user_statuses,
            "addedTimestamp": self._added_timestamp,
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        allowed_statuses: Iterable[str],
        kind: Union[EntryKind, str] = EntryKind.BOOK,
    ) -> "CatalogEntry":
        """Create an entry from a serialized or raw mapping.

        Full validation runs again, so stored data is never trusted blindly.
        Both camelCase and snake_case field names are accepted, and ``isbn``
        may stand in for ``key``.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(f"Entry data must be a mapping, got {type(data).__name__}")

        key = data.get("key")
        if key in (None, ""):
            key = data.get("isbn")

        statuses = _first_present(data, "userStatuses", "user_statuses")
        if not isinstance(statuses, (list, tuple, set, frozenset)):
            raise ValidationError("User statuses are required and must be a list.")

        return cls(
            key=key,
            title=data.get("title"),
            kind=kind,
            author=data.get("author"),
            cover_url=_first_present(data, "coverUrl", "cover_url"),
            rating=data.get("rating"),
            user_statuses=statuses,
            allowed_statuses=allowed_statuses,
            added_timestamp=_first_present(data, "addedTimestamp", "added_timestamp"),
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CatalogEntry):
            return NotImplemented
        return (
            self._kind == other._kind
            and self._key == other._key
            and self._title == other._title
            and self._author == other._author
            and self._cover_url == other._cover_url
            and self.rating == other.rating
            and self._user_statuses == other._user_statuses
            and self._added_timestamp == other._added_timestamp
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"CatalogEntry(kind={self._kind.value!r}, key={self._key!r}, title={self._title!r}, "
            f"rating={self.rating!r}, user_statuses={self.user_statuses!r})"
        )


def _first_present(data: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None
