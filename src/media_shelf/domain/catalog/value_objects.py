"""
Catalog value objects.

Value objects are immutable objects that are defined by their attributes rather than identity.
They carry the validation rules shared by catalog entries of every kind.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from ...exceptions import ValidationError


class EntryKind(Enum):
    """Kinds of media tracked in a catalog."""
    BOOK = "book"
    MOVIE = "movie"

    @classmethod
    def parse(cls, value: Union[str, "EntryKind"]) -> "EntryKind":
        """Resolve an EntryKind from its name or value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValidationError(f"Unknown entry kind: {value!r}. Allowed kinds are: {allowed}")


@dataclass(frozen=True, slots=True)
class Rating:
    """
    Value object representing a user rating.

    Ratings are half-point steps between 0.5 and 5 inclusive.
    """

    MIN = 0.5
    MAX = 5.0

    _value: float

    def __init__(self, value: Union[int, float, str]) -> None:
        """Create a Rating with validation."""
        if isinstance(value, bool):
            raise ValidationError(f"Rating must be a number, got {value!r}")

        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise ValidationError(f"Rating must be a number, got {value!r}")

        if not isinstance(value, (int, float)):
            raise ValidationError(f"Rating must be a number, got {type(value).__name__}")

        try:
            number = float(value)
        except OverflowError:
            raise ValidationError(f"Rating must be between {self.MIN} and {self.MAX:g}, or null.")
        if not math.isfinite(number) or number < self.MIN or number > self.MAX:
            raise ValidationError(f"Rating must be between {self.MIN} and {self.MAX:g}, or null.")
        if not (number * 2).is_integer():
            raise ValidationError("Rating must be a multiple of 0.5.")

        object.__setattr__(self, "_value", number)

    @classmethod
    def from_raw(cls, value: Any) -> Optional["Rating"]:
        """Create a Rating from raw input, mapping None to unrated."""
        if value is None:
            return None
        return cls(value)

    @property
    def value(self) -> float:
        """Get the rating as a float."""
        return self._value

    def __float__(self) -> float:
        return self._value

    def __str__(self) -> str:
        return f"{self._value:g}"


@dataclass(frozen=True, slots=True)
class StatusSet:
    """
    Value object representing the set of personal statuses on an entry.

    Duplicates are collapsed and first-seen order is kept for display,
    but equality ignores order.
    """

    _names: Tuple[str, ...] = field(default=())

    def __init__(self, statuses: Iterable[str], allowed_statuses: Iterable[str]) -> None:
        """Create a StatusSet, checking every name against the allowed vocabulary."""
        if statuses is None or isinstance(statuses, (str, bytes)):
            raise ValidationError("User statuses must be a list of strings.")

        allowed = list(allowed_statuses)
        names: list[str] = []
        for status in statuses:
            if not isinstance(status, str):
                raise ValidationError(f"Invalid status: {status!r}. Statuses must be strings.")
            if status not in allowed:
                raise ValidationError(
                    f"Invalid status: {status}. Allowed statuses are: {', '.join(allowed)}"
                )
            if status not in names:
                names.append(status)

        if not names:
            raise ValidationError("An entry must have at least one user status.")

        object.__setattr__(self, "_names", tuple(names))

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def to_list(self) -> list[str]:
        return list(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, status: object) -> bool:
        return status in self._names

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, StatusSet):
            return False
        return frozenset(self._names) == frozenset(other._names)

    def __hash__(self) -> int:
        return hash(frozenset(self._names))

    def __str__(self) -> str:
        return ", ".join(self._names)
