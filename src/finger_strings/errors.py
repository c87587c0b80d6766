"""Exception hierarchy for FingerStrings."""

from datetime import date
from pathlib import Path
from typing import Union


class FingerStringsError(Exception):
    """Base class for all FingerStrings errors."""


class StorageCorrupt(FingerStringsError):
    """The todo file could not be parsed as a list of todo records."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = (
            f"Your todo file appears to be corrupt. Could not parse valid todos "
            f"from {self.path}. Please fix or delete this file."
        )
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class TodoNotFound(FingerStringsError):
    """A todo id did not resolve to a todo in the current list."""

    def __init__(self, todo_id):
        self.todo_id = todo_id
        super().__init__(f"I couldn't find a todo with an ID of {todo_id}")


class InvalidArgument(FingerStringsError):
    """A command argument was malformed or missing."""


class DateInPast(InvalidArgument):
    """A schedule date resolved to a day before today."""

    def __init__(self, when: date):
        self.when = when
        super().__init__(
            f"Scheduled Todos should not happen in the past. {when.isoformat()} is in the past."
        )


class InvalidTransition(InvalidArgument):
    """A todo was asked to move between categories that are not connected."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(
            f"A {source.value} Todo can't be moved to {target.value}."
        )
