"""Catalog commands."""

from .add_entry import AddEntryCommand, AddEntryCommandHandler
from .delete_entry import DeleteEntryCommand, DeleteEntryCommandHandler
from .update_rating import UpdateRatingCommand, UpdateRatingCommandHandler
from .update_statuses import UpdateStatusesCommand, UpdateStatusesCommandHandler

__all__ = [
    "AddEntryCommand",
    "AddEntryCommandHandler",
    "DeleteEntryCommand",
    "DeleteEntryCommandHandler",
    "UpdateRatingCommand",
    "UpdateRatingCommandHandler",
    "UpdateStatusesCommand",
    "UpdateStatusesCommandHandler",
]
