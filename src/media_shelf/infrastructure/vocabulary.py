"""Status vocabulary sources.

The relational vocabulary is read live from the ``status`` table on every
call. The static vocabulary serves fixed per-kind lists, typically taken
from configuration, for backends without a vocabulary table.
"""

import logging
import sqlite3
from typing import Dict, Iterable, List, Mapping, Union

from ..domain.catalog.repositories import StatusVocabulary
from ..domain.catalog.value_objects import EntryKind
from ..exceptions import StorageConsistencyError, ValidationError
from .database import Database

logger = logging.getLogger(__name__)


class SqliteStatusVocabulary(StatusVocabulary):
    """Vocabulary stored in the ``status`` table."""

    def __init__(self, database: Database):
        self.database = database

    def fetch_allowed_statuses(self, kind: EntryKind) -> List[str]:
        kind = EntryKind.parse(kind)
        try:
            rows = self.database.fetch_all(
                "SELECT name FROM status WHERE kind = ? ORDER BY id", (kind.value,)
            )
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not read {kind.value} statuses: {e}") from e
        return [row["name"] for row in rows]

    def add_status(self, kind: Union[EntryKind, str], name: str) -> bool:
        """Add a status to the vocabulary. Returns False if it already existed."""
        kind = EntryKind.parse(kind)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Status name cannot be empty.")

        try:
            with self.database.transaction() as conn:
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO status (kind, name) VALUES (?, ?)", (kind.value, name)
                )
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not add {kind.value} status '{name}': {e}") from e

        added = cursor.rowcount > 0
        if added:
            logger.info(f"Added {kind.value} status '{name}'")
        return added

    def add_statuses(self, kind: Union[EntryKind, str], names: Iterable[str]) -> int:
        """Add several statuses, returning how many were new."""
        return sum(1 for name in names if self.add_status(kind, name))

    def remove_status(self, kind: Union[EntryKind, str], name: str) -> bool:
        """Remove an unused status. Returns False if it did not exist.

        A status still linked to an entry cannot be removed.
        """
        kind = EntryKind.parse(kind)
        try:
            with self.database.transaction() as conn:
                in_use = conn.execute(
                    "SELECT COUNT(*) FROM entry_has_status l JOIN status s ON s.id = l.status_id "
                    "WHERE s.kind = ? AND s.name = ?",
                    (kind.value, name),
                ).fetchone()[0]
                if in_use:
                    raise StorageConsistencyError(
                        f"Status '{name}' is still used by {in_use} {kind.value} entries."
                    )
                cursor = conn.execute(
                    "DELETE FROM status WHERE kind = ? AND name = ?", (kind.value, name)
                )
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not remove {kind.value} status '{name}': {e}") from e

        removed = cursor.rowcount > 0
        if removed:
            logger.info(f"Removed {kind.value} status '{name}'")
        return removed


class StaticStatusVocabulary(StatusVocabulary):
    """Fixed vocabulary keyed by entry kind."""

    def __init__(self, statuses: Mapping[Union[EntryKind, str], Iterable[str]]):
        self._statuses: Dict[EntryKind, List[str]] = {}
        for kind, names in statuses.items():
            unique: List[str] = []
            for name in names:
                if name not in unique:
                    unique.append(name)
            self._statuses[EntryKind.parse(kind)] = unique

    def fetch_allowed_statuses(self, kind: EntryKind) -> List[str]:
        return list(self._statuses.get(EntryKind.parse(kind), []))
