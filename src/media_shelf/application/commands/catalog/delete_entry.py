"""Delete entry command."""

from dataclasses import dataclass
from typing import Union

from ...commands.base import Command, CommandHandler, CommandResult
from ...registry import RepositoryRegistry
from ....domain.catalog.value_objects import EntryKind
from ....exceptions import NotFoundError, ValidationError


@dataclass(frozen=True, slots=True, kw_only=True)
class DeleteEntryCommand(Command):
    """Command to remove an entry and all its statuses."""

    kind: Union[EntryKind, str] = EntryKind.BOOK
    key: str


class DeleteEntryCommandHandler(CommandHandler[DeleteEntryCommand, CommandResult]):
    """Handler for deleting entries from the catalog."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, command: DeleteEntryCommand) -> CommandResult:
        repository = self.repositories.get(command.kind)
        key = (command.key or "").strip()
        if not key:
            raise ValidationError("Key is required to delete an entry.")

        if repository.find_by_key(key) is None:
            raise NotFoundError(f"{repository.kind.value.capitalize()} with key {key} not found.")

        deleted = repository.delete_by_key(key)
        return CommandResult(
            success=deleted,
            command_id=command.command_id,
            message=f"{repository.kind.value.capitalize()} deleted: {key}",
            result_data={"key": key, "deleted": deleted},
        )

    def can_handle(self, command_type: type) -> bool:
        return command_type == DeleteEntryCommand
