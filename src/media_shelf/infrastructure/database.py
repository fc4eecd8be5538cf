"""SQLite connection management for the relational backend.

A Database is constructed explicitly and handed to the repositories that
need it. It owns exactly one connection, opened lazily.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence

from ..exceptions import StorageConsistencyError
from ..models.config import DatabaseConfig

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA = """
CREATE TABLE IF NOT EXISTS entry (
    kind TEXT NOT NULL,
    key TEXT NOT NULL,
    title TEXT NOT NULL,
    author TEXT,
    cover_url TEXT,
    rating REAL,
    added_timestamp INTEGER NOT NULL,
    PRIMARY KEY (kind, key)
);

CREATE TABLE IF NOT EXISTS status (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    name TEXT NOT NULL,
    UNIQUE (kind, name)
);

CREATE TABLE IF NOT EXISTS entry_has_status (
    kind TEXT NOT NULL,
    entry_key TEXT NOT NULL,
    status_id INTEGER NOT NULL,
    PRIMARY KEY (kind, entry_key, status_id),
    FOREIGN KEY (kind, entry_key) REFERENCES entry(kind, key) ON DELETE CASCADE,
    FOREIGN KEY (status_id) REFERENCES status(id)
);

CREATE INDEX IF NOT EXISTS idx_entry_added ON entry(kind, added_timestamp);
CREATE INDEX IF NOT EXISTS idx_entry_has_status_status ON entry_has_status(status_id);
"""


class Database:
    """Owns a single SQLite connection and its transactions."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or DatabaseConfig()
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> str:
        return str(self.config.path)

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def connect(self) -> sqlite3.Connection:
        """Open the connection if needed and return it."""
        if self._connection is not None:
            return self._connection

        if self.path != MEMORY_PATH:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            # Autocommit mode: transactions are opened explicitly in transaction()
            conn = sqlite3.connect(self.path, timeout=self.config.timeout, isolation_level=None)
            conn.row_factory = sqlite3.Row
            if self.config.foreign_keys:
                conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Database connection failed for {self.path}: {e}") from e

        logger.debug(f"Opened database {self.path}")
        self._connection = conn
        return conn

    def init_schema(self) -> None:
        """Create the catalog tables if they do not exist."""
        try:
            self.connect().executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageConsistencyError(f"Failed to initialize schema: {e}") from e
        logger.info(f"Initialized catalog schema in {self.path}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block inside a transaction.

        Commits when the block completes and rolls back on any exception.
        A block entered while a transaction is already open joins it.
        """
        conn = self.connect()
        if conn.in_transaction:
            yield conn
            return

        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
            raise
        else:
            conn.execute("COMMIT")

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Run a query and return all rows."""
        return self.connect().execute(sql, params).fetchall()

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Run a query and return a single row (or None)."""
        return self.connect().execute(sql, params).fetchone()

    def close(self) -> None:
        """Close the connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed database {self.path}")

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
