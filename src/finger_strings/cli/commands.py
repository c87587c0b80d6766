"""Command dispatcher for the interactive prompt.

A line typed at the prompt is split on whitespace; the first word selects
a handler through ``CMD_MAP`` and the rest are passed to it as arguments.
Handlers resolve todo ids, call the engine, and re-render a view.
"""

import logging
import re
import subprocess
from typing import Callable, List, Optional

from .. import __version__
from ..dates import resolve_schedule_date
from ..display import Display
from ..engine import TodoEngine
from ..errors import FingerStringsError, InvalidArgument, StorageCorrupt, TodoNotFound
from ..markup import escape
from ..todo import Category, Todo

logger = logging.getLogger(__name__)

CMD_MAP = {
    "a": "add",
    "add": "add",
    "b": "backlog",
    "backlog": "backlog",
    "c": "complete",
    "complete": "complete",
    "l": "list",
    "list": "list",
    "x": "delete",
    "delete": "delete",
    "d": "defer",
    "dw": "defer",
    "defer": "defer",
    "dm": "long_defer",
    "longdefer": "long_defer",
    "p": "prioritize",
    "prioritize": "prioritize",
    "!": "deprioritize",
    "deprioritize": "deprioritize",
    "r": "recur",
    "recur": "recur",
    "s": "schedule",
    "schedule": "schedule",
    "t": "tag",
    "tag": "tag",
    "untag": "untag",
    "m": "mark",
    "mark": "mark",
    "h": "help",
    "?": "help",
    "help": "help",
    "q": "quit",
    "quit": "quit",
    "clear": "clear",
    "i": "info",
    "info": "info",
    "cal": "calendar",
    "calendar": "calendar",
}

LIST_VIEWS = {
    "all": "all",
    "*": "all",
    "done": "done",
    "d": "done",
    "upcoming": "upcoming",
    "u": "upcoming",
    "recurring": "recurring",
    "r": "recurring",
    "tags": "tags",
    "t": "tags",
    "backlog": "backlog",
    "b": "backlog",
}

HELP_LINES = [
    "Commands (the starting letter can be used if underlined)",
    "========",
    "{wu a}dd <text>                 - Add a new Todo",
    "{wu l}ist                       - List today's Todos",
    "    l *, l all                  - List Todos in all categories",
    "    l {wu u}pcoming             - List Upcoming Todos",
    "    l {wu r}ecurring            - List Recurring Todos",
    "    l {wu t}ags                 - List Tags and tagged Todos",
    "    l {wu b}acklog              - List Backlogged Todos",
    "    l {wu d}one                 - List Done Todos",
    "{wu c}omplete <id>              - Mark a Todo as done",
    "{wu p}rioritize <id>            - Move a Todo to the top of the list",
    "!, deprioritize <id>            - Move a Todo to the bottom of the list",
    "{wu b}acklog <id>               - Move a Todo to the backlog",
    "{w t}ag <id> <tag>              - Add Tag to a Todo",
    "{wu s}chedule <id> <date>       - Schedule a Todo for a future date",
    "                                  (YYYY-MM-DD, today, tomorrow, mon, next mon, 3 days)",
    "{wu r}ecur <id> <amount>        - Set a recurrence rule for a Todo",
    "{wu m}ark <id>                  - Add a marker below the specified todo (impermanent)",
    "untag <id>                      - Remove all Tags from a Todo",
    "delete <id>, x <id>             - Delete a Todo entirely",
    "{wu d}efer <id>, dw <id>        - Defer a Todo to the following Monday",
    "longdefer <id>, dm <id>         - Defer a Todo for 30 days",
    "{wu i}nfo                       - Display FingerStrings version and stats",
    "cal, calendar                   - Show a three month calendar",
    "{wu h}elp, ?                    - Display this text",
    "clear                           - Clear screen",
    "{wu q}uit                       - Leave FingerStrings",
]

CALENDAR_TODAY_RE = re.compile(r"_\x08(\d)")


class CommandDispatcher:
    """Maps prompt lines to engine operations and views."""

    def __init__(self, engine: TodoEngine, display: Display):
        self.engine = engine
        self.display = display

    def handle(self, line: str) -> bool:
        """Run one prompt line.

        Returns:
            False when the user asked to quit, True otherwise

        Raises:
            StorageCorrupt: If the todo file cannot be read
        """
        tokens = line.strip().split()
        if not tokens:
            return True

        command = CMD_MAP.get(tokens[0])
        if command is None:
            self.display.say(
                "I didn't understand your command.  Type \"help\" for a list of valid commands."
            )
            return True

        handler: Callable[[List[str]], Optional[bool]] = getattr(self, f"do_{command}")
        try:
            result = handler(tokens[1:])
        except StorageCorrupt:
            raise
        except FingerStringsError as e:
            logger.debug(f"Command {command} failed: {e}")
            self.display.say(f"{{r {escape(str(e))}}}")
            return True

        return result is not False

    # ------------------------------------------------------------------
    # Views

    def show_today(self) -> None:
        self.display.clear()
        self.display.show(
            Category.TODAY,
            self.engine.today(),
            marker=self.engine.marker,
            today=self.engine.today_date(),
        )

    def do_list(self, args: List[str]) -> None:
        view = LIST_VIEWS.get(args[0]) if len(args) == 1 else None
        if view is None:
            self.show_today()
            return

        self.display.clear()
        if view == "all":
            self.display.show_all(
                self.engine.by_category(),
                marker=self.engine.marker,
                today=self.engine.today_date(),
            )
        elif view == "done":
            self.display.show(Category.DONE, self.engine.done())
        elif view == "upcoming":
            self.display.show_upcoming(self.engine.upcoming(), self.engine.today_date())
        elif view == "recurring":
            self.display.show(Category.RECURRING, self.engine.recurring())
        elif view == "tags":
            self.display.show_tags(self.engine.tag_index())
        elif view == "backlog":
            self.display.show(Category.BACKLOG, self.engine.backlog())

    # ------------------------------------------------------------------
    # Mutations

    def do_add(self, args: List[str]) -> None:
        if not args:
            raise InvalidArgument("I don't understand what you want to do")
        self.engine.create(" ".join(args))
        self.show_today()

    def _single_todo_command(
        self, args: List[str], operation: Callable[[int], Optional[Todo]]
    ) -> None:
        if len(args) != 1:
            raise InvalidArgument("I don't understand what you want to do")

        index = parse_todo_id(args[0])
        if operation(index) is None:
            raise TodoNotFound(args[0])
        self.show_today()

    def do_complete(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.mark_done)

    def do_delete(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.delete)

    def do_prioritize(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.prioritize)

    def do_deprioritize(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.deprioritize)

    def do_backlog(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.move_to_backlog)

    def do_untag(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.untag)

    def do_mark(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.mark)

    def do_defer(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.defer)

    def do_long_defer(self, args: List[str]) -> None:
        self._single_todo_command(args, self.engine.long_defer)

    def do_schedule(self, args: List[str]) -> None:
        if len(args) not in (2, 3):
            raise InvalidArgument("I don't understand what you want to do")

        index = parse_todo_id(args[0])
        if self.engine.find(index) is None:
            raise TodoNotFound(args[0])

        on = resolve_schedule_date(" ".join(args[1:]), self.engine.today_date())
        self.engine.schedule(index, on)
        self.show_today()

    def do_tag(self, args: List[str]) -> None:
        if len(args) != 2:
            raise InvalidArgument("I don't understand what you want to do")

        index = parse_todo_id(args[0])
        if self.engine.add_tag(index, args[1].lower()) is None:
            raise TodoNotFound(args[0])
        self.show_today()

    def do_recur(self, args: List[str]) -> None:
        if len(args) != 2:
            raise InvalidArgument("I don't understand what you want to do")

        index = parse_todo_id(args[0])
        try:
            days = int(args[1])
        except ValueError:
            raise InvalidArgument(
                f"I couldn't understand your amount '{args[1]}' (should be an integer)"
            )

        if self.engine.recur(index, days) is None:
            raise TodoNotFound(args[0])

        self.show_today()
        if days > 0:
            self.display.say(f"Todo is set to recur {days} days after completion.")
        else:
            self.display.say("Recurrence has been disabled for this Todo")

    # ------------------------------------------------------------------
    # Everything else

    def do_info(self, args: List[str]) -> None:
        self.display.info(__version__, self.engine.by_category())

    def do_help(self, args: List[str]) -> None:
        self.display.flowerbox(
            f"FingerStrings v{__version__}",
            "",
            *HELP_LINES,
            box_character="",
        )

    def do_clear(self, args: List[str]) -> None:
        self.display.clear()

    def do_calendar(self, args: List[str]) -> None:
        try:
            result = subprocess.run(
                ["cal", "-A", "1", "-B", "1"],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug(f"cal failed: {e}")
            raise InvalidArgument("The calendar is not available on this system")

        self.display.say(CALENDAR_TODAY_RE.sub(r"{bv \1}", result.stdout))

    def do_quit(self, args: List[str]) -> bool:
        return False


def parse_todo_id(todo_id: str) -> int:
    """Convert a todo id typed at the prompt to a positional index.

    Raises:
        TodoNotFound: If the id is not a non-negative integer
    """
    if not todo_id.isdecimal():
        raise TodoNotFound(todo_id)
    return int(todo_id)
