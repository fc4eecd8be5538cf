"""
Media library service.

Wires the configured storage backend, one repository per entry kind and
every command and query handler onto a CommandBus and a QueryBus. The
database connection is created here and passed down explicitly.
"""

import logging
from typing import List, Optional

from ..domain.catalog.repositories import CatalogRepository, StatusVocabulary
from ..domain.catalog.value_objects import EntryKind
from ..infrastructure.database import Database
from ..infrastructure.repositories import JsonFileCatalogRepository, SqliteCatalogRepository
from ..infrastructure.vocabulary import SqliteStatusVocabulary, StaticStatusVocabulary
from ..models.config import Config
from .commands import CommandBus, CommandResult
from .commands.base import Command
from .commands.catalog import (
    AddEntryCommand,
    AddEntryCommandHandler,
    DeleteEntryCommand,
    DeleteEntryCommandHandler,
    UpdateRatingCommand,
    UpdateRatingCommandHandler,
    UpdateStatusesCommand,
    UpdateStatusesCommandHandler,
)
from .queries import QueryBus, QueryResult
from .queries.base import Query
from .queries.catalog import (
    GetAllowedStatusesHandler,
    GetAllowedStatusesQuery,
    GetEntryHandler,
    GetEntryQuery,
    ListEntriesHandler,
    ListEntriesQuery,
)
from .registry import RepositoryRegistry

logger = logging.getLogger(__name__)


class Library:
    """CQRS entry point over a configured catalog backend."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config.default()
        self.config.validate()

        self.database: Optional[Database] = None
        self.vocabulary: StatusVocabulary = self._create_vocabulary()
        self.repositories = RepositoryRegistry(self._create_repositories())

        self.command_bus = CommandBus()
        self.query_bus = QueryBus()
        self._register_command_handlers()
        self._register_query_handlers()

    @property
    def backend(self) -> str:
        return self.config.storage.backend

    def _create_vocabulary(self) -> StatusVocabulary:
        if self.backend == "sqlite":
            self.database = Database(self.config.database)
            self.database.init_schema()
            return SqliteStatusVocabulary(self.database)
        return StaticStatusVocabulary(self.config.vocabulary.as_mapping())

    def _create_repositories(self) -> List[CatalogRepository]:
        if self.backend == "sqlite":
            return [SqliteCatalogRepository(self.database, kind, self.vocabulary) for kind in EntryKind]
        return [
            JsonFileCatalogRepository.in_directory(self.config.storage.data_dir, self.vocabulary, kind)
            for kind in EntryKind
        ]

    def _register_command_handlers(self) -> None:
        """Register all command handlers."""
        self.command_bus.register(AddEntryCommand, AddEntryCommandHandler(self.repositories))
        self.command_bus.register(DeleteEntryCommand, DeleteEntryCommandHandler(self.repositories))
        self.command_bus.register(UpdateRatingCommand, UpdateRatingCommandHandler(self.repositories))
        self.command_bus.register(UpdateStatusesCommand, UpdateStatusesCommandHandler(self.repositories))

    def _register_query_handlers(self) -> None:
        """Register all query handlers."""
        self.query_bus.register(ListEntriesQuery, ListEntriesHandler(self.repositories))
        self.query_bus.register(GetEntryQuery, GetEntryHandler(self.repositories))
        self.query_bus.register(GetAllowedStatusesQuery, GetAllowedStatusesHandler(self.repositories))

    def seed_vocabulary(self) -> int:
        """Insert the configured default statuses into the status table.

        Returns the number of statuses added. The JSON backend reads its
        vocabulary straight from configuration, so nothing is seeded there.
        """
        if not isinstance(self.vocabulary, SqliteStatusVocabulary):
            return 0

        added = 0
        for kind, names in self.config.vocabulary.as_mapping().items():
            added += self.vocabulary.add_statuses(kind, names)
        logger.info(f"Seeded {added} statuses")
        return added

    def execute(self, command: Command) -> CommandResult:
        """Dispatch a command."""
        return self.command_bus.dispatch(command)

    def ask(self, query: Query) -> QueryResult:
        """Dispatch a query."""
        return self.query_bus.dispatch(query)

    def close(self) -> None:
        if self.database is not None:
            self.database.close()

    def __enter__(self) -> "Library":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
