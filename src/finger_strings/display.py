"""Rendering of todo views to the terminal.

Views are composed as markup strings (see ``markup``), colorized to ANSI
and handed to a Rich console for output.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.text import Text

from .dates import is_next_week, is_this_week, is_tomorrow
from .marker import Marker
from .markup import colorize, escape, highlight_tags
from .todo import Category, Todo

MIN_WIDTH = 80

CATEGORY_COLORS = {
    Category.TODAY: "{wi ",
    Category.UPCOMING: "{w ",
    Category.BACKLOG: "{r ",
    Category.RECURRING: "{w ",
    Category.DONE: "{wv ",
}


def format_todo(todo: Todo, show_available: bool = True) -> str:
    """Format a todo as a markup line: ``<index>. <text>`` plus metadata."""
    display = f"{todo.index}. {escape(todo.text)}"
    if todo.recurrence_rule:
        display += f" {{wi Recurs {todo.recurrence_rule} days after completion}}"
    if show_available and todo.available_on:
        display += f" {{bi (Available on {todo.available_on.isoformat()})}}"
    if todo.is_done() and todo.completed_at:
        display += f" {{c Completed {todo.completed_at.strftime('%Y-%m-%d')}}}"
    return display


def upcoming_label(day: date, today: date) -> str:
    """Describe how far away ``day`` is, e.g. ``[Tomorrow]``."""
    if is_tomorrow(day, today):
        return "[Tomorrow]"
    if is_this_week(day, today):
        return f"[{day.strftime('%A')}]"
    if is_next_week(day, today):
        return f"[Next {day.strftime('%A')}]"
    return ""


class Display:
    """Writes colorized markup to a Rich console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        min_width: int = MIN_WIDTH,
        no_color: bool = False,
    ):
        self.console = console or Console(highlight=False, no_color=no_color)
        self.min_width = min_width

    @property
    def width(self) -> int:
        return max(self.console.width, self.min_width)

    def say(self, *stuff) -> None:
        """Print markup text."""
        text = " ".join(str(part) for part in stuff)
        self.console.print(Text.from_ansi(colorize(text)), soft_wrap=True)

    def line_say(self, text: str) -> None:
        """Print a todo line, highlighting its tags."""
        self.say(highlight_tags(text))

    def mark(self) -> None:
        self.say("-" * self.width)

    def clear(self) -> None:
        self.console.clear()

    def flowerbox(
        self, *lines: str, box_character: str = "*", box_thickness: int = 1
    ) -> None:
        for _ in range(box_thickness):
            self.say(box_character * self.width)
        for line in lines:
            self.say(line)
        for _ in range(box_thickness):
            self.say(box_character * self.width)

    def show(
        self,
        category: Category,
        todos: List[Todo],
        marker: Optional[Marker] = None,
        today: Optional[date] = None,
    ) -> None:
        """Print one category's todos under a header.

        The marker separator is only drawn in the today view.
        """
        color = CATEGORY_COLORS[category]
        if category is Category.TODAY:
            stamp = f" [{today.isoformat()}]" if today else ""
            self.say(f"{color}Today ({len(todos)} items){stamp}}}")
        else:
            self.say(f"{color}{category.value.title()}}}")

        if not todos:
            self.say("{r (none)}")
            return

        for row, todo in enumerate(todos):
            self.line_say(format_todo(todo))
            if category is Category.TODAY and marker is not None and marker.is_after(row):
                self.mark()

    def show_upcoming(self, grouped: Dict[date, List[Todo]], today: date) -> None:
        self.say(f"{CATEGORY_COLORS[Category.UPCOMING]}Upcoming}}")
        if not grouped:
            self.say("{r (none)}")
            return

        for day in sorted(grouped):
            self.say(f"{{bi {day.isoformat()}}} {{wi {upcoming_label(day, today)}}}")
            for todo in grouped[day]:
                self.line_say("    " + format_todo(todo, show_available=False))

    def show_tags(self, tag_index: Dict[str, List[Todo]]) -> None:
        if not tag_index:
            self.say("{r (no tags)}")
            return

        for tag in sorted(tag_index):
            self.say(f"{{gi {escape(tag)}}}")
            for todo in tag_index[tag]:
                self.line_say("    " + format_todo(todo))

    def show_all(
        self,
        by_category: Dict[Category, List[Todo]],
        marker: Optional[Marker] = None,
        today: Optional[date] = None,
    ) -> None:
        for category, todos in by_category.items():
            self.say()
            self.show(category, todos, marker=marker, today=today)

    def info(self, version: str, by_category: Dict[Category, List[Todo]]) -> None:
        stats: Iterable[str] = (
            f"{len(todos)} Todos in {category.value}"
            for category, todos in by_category.items()
        )
        self.flowerbox(f"FingerStrings v{version}", *stats, box_thickness=0)
