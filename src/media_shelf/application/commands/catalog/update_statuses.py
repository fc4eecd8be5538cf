"""Update user statuses command."""

from dataclasses import dataclass, field
from typing import List, Union

from ...commands.base import Command, CommandHandler, CommandResult
from ...registry import RepositoryRegistry
from ....domain.catalog.value_objects import EntryKind
from ....exceptions import NotFoundError, ValidationError


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateStatusesCommand(Command):
    """Command to replace the user statuses of an entry."""

    kind: Union[EntryKind, str] = EntryKind.BOOK
    key: str
    user_statuses: List[str] = field(default_factory=list)


class UpdateStatusesCommandHandler(CommandHandler[UpdateStatusesCommand, CommandResult]):
    """Handler for replacing entry statuses.

    The vocabulary is fetched fresh for every command.
    """

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, command: UpdateStatusesCommand) -> CommandResult:
        repository = self.repositories.get(command.kind)
        key = (command.key or "").strip()
        if not key:
            raise ValidationError("Key is required to update entry statuses.")

        entry = repository.find_by_key(key)
        if entry is None:
            raise NotFoundError(f"{repository.kind.value.capitalize()} with key {key} not found.")

        entry.set_user_statuses(command.user_statuses, repository.allowed_statuses())
        repository.save(entry)

        return CommandResult(
            success=True,
            command_id=command.command_id,
            message=f"Statuses updated for key {key}",
            result_data={"entry": entry.to_dict()},
        )

    def can_handle(self, command_type: type) -> bool:
        return command_type == UpdateStatusesCommand
