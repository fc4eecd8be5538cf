"""
Relational Repository Implementation.

Stores catalog entries in SQLite across three normalized tables: ``entry``
for the base rows, ``status`` for the vocabulary and ``entry_has_status``
for the many-to-many links between them. Status links are never diffed:
every save deletes and re-inserts them inside one transaction.
"""

import logging
import sqlite3
from typing import Any, List, Mapping, Optional, Sequence

from ...domain.catalog.entities import CatalogEntry
from ...domain.catalog.repositories import CatalogRepository, StatusVocabulary
from ...domain.catalog.value_objects import EntryKind
from ...exceptions import (
    HydrationError,
    StorageConsistencyError,
    ValidationError,
)
from ..database import Database
from ..vocabulary import SqliteStatusVocabulary

logger = logging.getLogger(__name__)

_ENTRY_COLUMNS = "e.key, e.title, e.author, e.cover_url, e.rating, e.added_timestamp"
_ORDER_BY = "ORDER BY e.added_timestamp DESC, e.key"


class SqliteCatalogRepository(CatalogRepository):
    """SQLite implementation of CatalogRepository for one entry kind."""

    def __init__(
        self,
        database: Database,
        kind: EntryKind = EntryKind.BOOK,
        vocabulary: Optional[StatusVocabulary] = None,
    ):
        super().__init__(kind, vocabulary or SqliteStatusVocabulary(database))
        self.database = database

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[CatalogEntry]:
        """Find all entries, newest first.

        Rows that fail validation are skipped and logged. An unknown status
        filter yields an empty list.
        """
        status = self._status_filter(filters)
        try:
            allowed = self.allowed_statuses()
            if status is None:
                rows = self.database.fetch_all(
                    f"SELECT {_ENTRY_COLUMNS} FROM entry e WHERE e.kind = ? {_ORDER_BY}",
                    (self.kind.value,),
                )
            else:
                if status not in allowed:
                    logger.warning(f"Filter on unknown {self.kind.value} status '{status}', returning no entries")
                    return []
                status_id = self._status_id(self.database.connect(), status)
                if status_id is None:
                    logger.warning(f"Status '{status}' not found in status table, returning no entries")
                    return []
                rows = self.database.fetch_all(
                    f"SELECT {_ENTRY_COLUMNS} FROM entry e "
                    "JOIN entry_has_status l ON l.kind = e.kind AND l.entry_key = e.key "
                    f"WHERE e.kind = ? AND l.status_id = ? {_ORDER_BY}",
                    (self.kind.value, status_id),
                )

            entries = []
            for row in rows:
                try:
                    entries.append(self._hydrate(row, allowed))
                except HydrationError as e:
                    logger.warning(f"Skipping invalid {self.kind.value} '{row['key']}': {e}")
            return entries

        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not list {self.kind.value} entries: {e}") from e

    def find_by_key(self, key: str) -> Optional[CatalogEntry]:
        """Find an entry by key.

        A stored row that fails validation raises StorageConsistencyError
        instead of being reported as missing.
        """
        try:
            row = self.database.fetch_one(
                f"SELECT {_ENTRY_COLUMNS} FROM entry e WHERE e.kind = ? AND e.key = ?",
                (self.kind.value, key),
            )
            if row is None:
                return None
            return self._hydrate(row, self.allowed_statuses())

        except HydrationError as e:
            logger.error(f"Stored {self.kind.value} '{key}' is invalid: {e}")
            raise StorageConsistencyError(
                f"Failed to load {self.kind.value} '{key}' due to inconsistent data: {e}"
            ) from e
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not load {self.kind.value} '{key}': {e}") from e

    def save(self, entry: CatalogEntry) -> None:
        """Upsert the base row and replace all status links in one transaction."""
        if entry.kind != self.kind:
            raise ValidationError(
                f"Cannot save a {entry.kind.value} entry in the {self.kind.value} repository."
            )

        try:
            with self.database.transaction() as conn:
                conn.execute(
                    "INSERT INTO entry (kind, key, title, author, cover_url, rating, added_timestamp) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?) "
                    "ON CONFLICT (kind, key) DO UPDATE SET "
                    "title = excluded.title, author = excluded.author, cover_url = excluded.cover_url, "
                    "rating = excluded.rating, added_timestamp = excluded.added_timestamp",
                    (
                        self.kind.value,
                        entry.key,
                        entry.title,
                        entry.author,
                        entry.cover_url,
                        entry.rating,
                        entry.added_timestamp,
                    ),
                )

                conn.execute(
                    "DELETE FROM entry_has_status WHERE kind = ? AND entry_key = ?",
                    (self.kind.value, entry.key),
                )

                for name in entry.user_statuses:
                    status_id = self._status_id(conn, name)
                    if status_id is None:
                        raise StorageConsistencyError(
                            f"Invalid status name '{name}' for {self.kind.value} '{entry.key}'. "
                            "Not found in the status table."
                        )
                    conn.execute(
                        "INSERT INTO entry_has_status (kind, entry_key, status_id) VALUES (?, ?, ?)",
                        (self.kind.value, entry.key, status_id),
                    )

        except StorageConsistencyError:
            logger.error(f"Rolled back save of {self.kind.value} '{entry.key}'")
            raise
        except sqlite3.Error as e:
            logger.error(f"Rolled back save of {self.kind.value} '{entry.key}': {e}")
            raise StorageConsistencyError(
                f"Could not save {self.kind.value} '{entry.key}' and its statuses: {e}"
            ) from e

        logger.info(f"Saved {self.kind.value} '{entry.key}' with statuses {entry.user_statuses}")

    def delete_by_key(self, key: str) -> bool:
        """Delete the links, then the entry, in one transaction."""
        try:
            with self.database.transaction() as conn:
                conn.execute(
                    "DELETE FROM entry_has_status WHERE kind = ? AND entry_key = ?",
                    (self.kind.value, key),
                )
                cursor = conn.execute(
                    "DELETE FROM entry WHERE kind = ? AND key = ?", (self.kind.value, key)
                )
                deleted = cursor.rowcount > 0

        except sqlite3.Error as e:
            logger.error(f"Rolled back delete of {self.kind.value} '{key}': {e}")
            raise StorageConsistencyError(f"Could not delete {self.kind.value} '{key}': {e}") from e

        if deleted:
            logger.info(f"Deleted {self.kind.value} '{key}'")
        return deleted

    def count(self) -> int:
        try:
            row = self.database.fetch_one(
                "SELECT COUNT(*) AS total FROM entry WHERE kind = ?", (self.kind.value,)
            )
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Could not count {self.kind.value} entries: {e}") from e
        return int(row["total"])

    def _status_id(self, conn: sqlite3.Connection, name: str) -> Optional[int]:
        row = conn.execute(
            "SELECT id FROM status WHERE kind = ? AND name = ?", (self.kind.value, name)
        ).fetchone()
        return int(row["id"]) if row else None

    def _status_names(self, key: str) -> List[str]:
        # One query per entry; links keep the order they were saved in
        rows = self.database.fetch_all(
            "SELECT s.name FROM status s "
            "JOIN entry_has_status l ON l.status_id = s.id "
            "WHERE l.kind = ? AND l.entry_key = ? ORDER BY l.rowid",
            (self.kind.value, key),
        )
        return [row["name"] for row in rows]

    def _hydrate(self, row: sqlite3.Row, allowed: Sequence[str]) -> CatalogEntry:
        try:
            return CatalogEntry(
                key=row["key"],
                title=row["title"],
                kind=self.kind,
                author=row["author"],
                cover_url=row["cover_url"],
                rating=row["rating"],
                user_statuses=self._status_names(row["key"]),
                allowed_statuses=allowed,
                added_timestamp=row["added_timestamp"],
            )
        except ValidationError as e:
            raise HydrationError(str(e)) from e
