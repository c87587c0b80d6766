"""Todo data model and the category state machine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import InvalidTransition
from .utils.datetime import parse_iso_date, parse_iso_datetime, to_iso_string

TAG_PREFIX = "|"


class Category(Enum):
    """Lifecycle buckets a todo can occupy."""
    TODAY = "today"
    UPCOMING = "upcoming"
    BACKLOG = "backlog"
    RECURRING = "recurring"
    DONE = "done"

    @classmethod
    def _missing_(cls, value):
        # Names written by the predecessor script
        return LEGACY_CATEGORIES.get(value)


LEGACY_CATEGORIES = {
    "someday": Category.BACKLOG,
    "repeaters": Category.RECURRING,
}

_OPEN_CATEGORIES = {
    Category.TODAY,
    Category.UPCOMING,
    Category.BACKLOG,
    Category.RECURRING,
    Category.DONE,
}

# A done todo can only be reopened into today.
TRANSITIONS = {
    Category.TODAY: _OPEN_CATEGORIES,
    Category.UPCOMING: _OPEN_CATEGORIES,
    Category.BACKLOG: _OPEN_CATEGORIES,
    Category.RECURRING: _OPEN_CATEGORIES,
    Category.DONE: {Category.TODAY, Category.DONE},
}


def can_transition(source: Category, target: Category) -> bool:
    """Check whether a todo in ``source`` may move to ``target``."""
    return target in TRANSITIONS[source]


@dataclass
class Todo:
    """A single task and its scheduling metadata.

    ``index`` is the todo's position in storage order as of the last load
    or save. It is not an identity: any mutation of the list can give the
    same index to a different todo.
    """

    text: str
    category: Category = Category.TODAY
    completed_at: Optional[datetime] = None
    available_on: Optional[date] = None
    recurrence_rule: Optional[int] = None
    index: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        if isinstance(self.category, str):
            self.category = Category(self.category)

    @property
    def tags(self) -> List[str]:
        """Tags embedded in the text, in order of appearance."""
        return [word for word in self.text.split() if word.startswith(TAG_PREFIX)]

    def is_upcoming(self) -> bool:
        return self.category is Category.UPCOMING

    def is_done(self) -> bool:
        return self.category is Category.DONE

    def is_available(self, today: date) -> bool:
        """Check whether the todo may appear in today's list on ``today``."""
        return self.available_on is None or today >= self.available_on

    def move_to(
        self,
        category: Category,
        available_on: Optional[date] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        """Move the todo into ``category``.

        ``available_on`` is kept only for upcoming todos and ``completed_at``
        only for done ones; both are cleared otherwise.

        Raises:
            InvalidTransition: If the table does not connect the categories
            ValueError: If an upcoming todo is given no date
        """
        if not can_transition(self.category, category):
            raise InvalidTransition(self.category, category)
        if category is Category.UPCOMING and available_on is None:
            raise ValueError("Upcoming todos need an available_on date")

        self.category = category
        self.available_on = available_on if category is Category.UPCOMING else None
        self.completed_at = completed_at if category is Category.DONE else None

    def add_tag(self, tag: str) -> str:
        """Append a tag to the text, adding the ``|`` prefix if missing."""
        if not tag.startswith(TAG_PREFIX):
            tag = TAG_PREFIX + tag
        self.text += f" {tag}"
        return tag

    def untag(self) -> None:
        """Remove every tag from the text."""
        self.text = " ".join(
            word for word in self.text.split() if not word.startswith(TAG_PREFIX)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Todo to a storage record, omitting absent fields."""
        data: Dict[str, Any] = {"text": self.text, "category": self.category.value}
        if self.completed_at:
            data["completed_at"] = to_iso_string(self.completed_at)
        if self.available_on:
            data["available_on"] = self.available_on.isoformat()
        if self.recurrence_rule and self.recurrence_rule > 0:
            data["recurrence_rule"] = str(self.recurrence_rule)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        """Create a Todo from a storage record.

        A date left on a todo that is no longer upcoming is dropped, and a
        recurrence rule of zero or less means no rule.

        Raises:
            ValueError: If a field holds a value of the wrong shape
            KeyError: If the record has no text
        """
        text = data["text"]
        if not isinstance(text, str):
            raise ValueError(f"text must be a string, not {type(text).__name__}")

        category = Category(data.get("category") or Category.TODAY.value)
        available_on = parse_iso_date(data.get("available_on"))
        if category is Category.UPCOMING and available_on is None:
            raise ValueError("upcoming todo has no available_on date")

        rule = data.get("recurrence_rule")
        rule = int(rule) if rule not in (None, "") else None

        return cls(
            text=text,
            category=category,
            completed_at=parse_iso_datetime(data.get("completed_at")),
            available_on=available_on if category is Category.UPCOMING else None,
            recurrence_rule=rule if rule and rule > 0 else None,
        )
