"""Update rating command."""

from dataclasses import dataclass
from typing import Optional, Union

from ...commands.base import Command, CommandHandler, CommandResult
from ...registry import RepositoryRegistry
from ....domain.catalog.value_objects import EntryKind
from ....exceptions import NotFoundError, ValidationError


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateRatingCommand(Command):
    """Command to rate an entry, or clear its rating with None (or 0)."""

    kind: Union[EntryKind, str] = EntryKind.BOOK
    key: str
    rating: Optional[Union[float, int, str]] = None


class UpdateRatingCommandHandler(CommandHandler[UpdateRatingCommand, CommandResult]):
    """Handler for updating entry ratings."""

    def __init__(self, repositories: RepositoryRegistry):
        self.repositories = repositories

    def handle(self, command: UpdateRatingCommand) -> CommandResult:
        repository = self.repositories.get(command.kind)
        key = (command.key or "").strip()
        if not key:
            raise ValidationError("Key is required to update a rating.")

        entry = repository.find_by_key(key)
        if entry is None:
            raise NotFoundError(f"{repository.kind.value.capitalize()} with key {key} not found.")

        rating = command.rating
        if isinstance(rating, str):
            if not rating.strip():
                rating = None
            else:
                try:
                    rating = float(rating.strip())
                except ValueError:
                    raise ValidationError(f"Rating must be a number, got {command.rating!r}")
        # An explicit zero means "unrate"
        if not isinstance(rating, bool) and isinstance(rating, (int, float)) and rating == 0:
            rating = None

        entry.set_rating(rating)
        repository.save(entry)

        return CommandResult(
            success=True,
            command_id=command.command_id,
            message=f"Rating updated for key {key}",
            result_data={"entry": entry.to_dict()},
        )

    def can_handle(self, command_type: type) -> bool:
        return command_type == UpdateRatingCommand
