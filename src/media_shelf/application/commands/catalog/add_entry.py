"""Add entry command."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from ...commands.base import Command, CommandHandler, CommandResult
from ...registry import RepositoryRegistry
from ....domain.catalog.entities import CatalogEntry
from ....domain.catalog.value_objects import EntryKind
from ....exceptions import ConflictError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class AddEntryCommand(Command):
    """Command to add a new entry to the catalog.

    ``entry_data`` is raw input: ``key`` or ``isbn``, ``title``, ``author``,
    ``coverUrl``, ``rating``, ``userStatuses`` and ``addedTimestamp``.
    """

    kind: Union[EntryKind, str] = EntryKind.BOOK
    entry_data: Dict[str, Any] = field(default_factory=dict)


class AddEntryCommandHandler(CommandHandler[AddEntryCommand, CommandResult]):
    """Handler for adding entries to the catalog."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, command: AddEntryCommand) -> CommandResult:
        """Handle the add entry command."""
        repository = self.repositories.get(command.kind)
        data = dict(command.entry_data or {})

        key = data.get("key") or data.get("isbn")
        if key is None or not str(key).strip():
            raise ValidationError("Key (or ISBN) is required to add an entry.")
        key = str(key).strip()
        if not data.get("title"):
            raise ValidationError("Title is required to add an entry.")
        statuses = data.get("userStatuses", data.get("user_statuses"))
        if not statuses or not isinstance(statuses, (list, tuple)):
            raise ValidationError("User statuses are required and must be a list.")
        if data.get("rating") == "":
            data["rating"] = None

        if repository.find_by_key(key) is not None:
            raise ConflictError(f"{repository.kind.value.capitalize()} with key {key} already exists.")

        data["key"] = key
        entry = CatalogEntry.from_dict(data, repository.allowed_statuses(), kind=repository.kind)
        repository.save(entry)

        logger.debug(f"Added {repository.kind.value} '{entry.key}'")
        return CommandResult(
            success=True,
            command_id=command.command_id,
            message=f"{repository.kind.value.capitalize()} added: {entry.title}",
            result_data={"entry": entry.to_dict()},
            status_code=201,
        )

    def can_handle(self, command_type: type) -> bool:
        """Check if this handler can handle the given command type."""
        return command_type == AddEntryCommand
