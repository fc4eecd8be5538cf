"""Application layer - CQRS pattern implementation."""

from .commands import Command, CommandHandler, CommandBus, CommandResult
from .queries import Query, QueryHandler, QueryBus, QueryResult
from .registry import RepositoryRegistry
from .library import Library

__all__ = [
    "Command",
    "CommandHandler",
    "CommandBus",
    "CommandResult",
    "Query",
    "QueryHandler",
    "QueryBus",
    "QueryResult",
    "RepositoryRegistry",
    "Library",
]
