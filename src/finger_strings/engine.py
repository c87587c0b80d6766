"""Todo lifecycle engine.

Every operation works on one load/mutate/save cycle: the full list is
loaded, the target is located by its positional index within *that* load,
mutated, and the full list is written back. Indices handed out by a view
are only valid until the next mutation.

Operations return the mutated todo, carrying its index after the save, or
``None`` when the index does not resolve to a todo.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from .dates import dow_to_date
from .marker import Marker
from .storage import TodoStore
from .todo import Category, Todo
from .utils.datetime import min_utc, now_local

logger = logging.getLogger(__name__)

DEFAULT_DEFER_WEEKDAY = "mon"
DEFAULT_LONG_DEFER_DAYS = 30


class TodoEngine:
    """Owns the todo list of one store and the marker drawn over it."""

    def __init__(
        self,
        store: TodoStore,
        marker: Optional[Marker] = None,
        clock: Callable[[], datetime] = now_local,
        defer_weekday: str = DEFAULT_DEFER_WEEKDAY,
        long_defer_days: int = DEFAULT_LONG_DEFER_DAYS,
    ):
        self.store = store
        self.marker = marker if marker is not None else Marker()
        self.clock = clock
        self.defer_weekday = defer_weekday
        self.long_defer_days = long_defer_days

    def today_date(self) -> date:
        """The local calendar day according to the engine's clock."""
        return self.clock().date()

    # ------------------------------------------------------------------
    # Views

    def all(self) -> List[Todo]:
        return self.store.load()

    def find(self, index: int) -> Optional[Todo]:
        """Look up a todo by positional index in a fresh load."""
        return _locate(self.store.load(), index)

    def today(self) -> List[Todo]:
        return [todo for todo in self.store.load() if todo.category is Category.TODAY]

    def done(self) -> List[Todo]:
        """Done todos, most recently completed first."""
        todos = [todo for todo in self.store.load() if todo.is_done()]
        return sorted(todos, key=lambda t: t.completed_at or min_utc(), reverse=True)

    def backlog(self) -> List[Todo]:
        return [todo for todo in self.store.load() if todo.category is Category.BACKLOG]

    def not_done(self) -> List[Todo]:
        return [todo for todo in self.store.load() if not todo.is_done()]

    def upcoming(self) -> Dict[date, List[Todo]]:
        """Upcoming todos grouped by the day they become available.

        Dates are in ascending order; todos sharing a date keep storage order.
        """
        grouped: Dict[date, List[Todo]] = {}
        for todo in self.store.load():
            if todo.is_upcoming():
                grouped.setdefault(todo.available_on, []).append(todo)
        return {day: grouped[day] for day in sorted(grouped)}

    def recurring(self) -> List[Todo]:
        """Todos that are not done and either recur or sit in recurring."""
        return [
            todo for todo in self.not_done()
            if todo.recurrence_rule or todo.category is Category.RECURRING
        ]

    def tagged(self) -> List[Todo]:
        return [todo for todo in self.not_done() if todo.tags]

    def all_tags(self) -> List[str]:
        tags = {tag for todo in self.tagged() for tag in todo.tags}
        return sorted(tags)

    def find_all_by_tag(self, tag: str) -> List[Todo]:
        return [todo for todo in self.tagged() if tag in todo.tags]

    def tag_index(self) -> Dict[str, List[Todo]]:
        """Map every tag in use to its not-done todos, tags sorted."""
        tagged = self.tagged()
        tags = sorted({tag for todo in tagged for tag in todo.tags})
        return {tag: [todo for todo in tagged if tag in todo.tags] for tag in tags}

    def by_category(self) -> Dict[Category, List[Todo]]:
        """Todos grouped by category; every category is present."""
        grouped: Dict[Category, List[Todo]] = {category: [] for category in Category}
        for todo in self.store.load():
            grouped[todo.category].append(todo)
        return grouped

    # ------------------------------------------------------------------
    # Mutations

    def create(self, text: str) -> Todo:
        """Append a new todo to today's list."""
        todos = self.store.load()
        todo = Todo(text=text)
        todos.append(todo)
        self.store.save(todos)
        logger.debug(f"Created todo {todo.index}: {text}")
        return todo

    def mark_done(self, index: int) -> Optional[Todo]:
        """Complete a todo, or reschedule it when it has a recurrence rule."""
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        if todo.recurrence_rule is not None and todo.recurrence_rule > 0:
            next_date = self.today_date() + timedelta(days=todo.recurrence_rule)
            self._schedule_in(todos, index, next_date)
        else:
            todo.move_to(Category.DONE, completed_at=self.clock())
            self.marker.after_removal(index)

        self.store.save(todos)
        return todo

    def delete(self, index: int) -> Optional[Todo]:
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todos.pop(index)
        self.marker.after_removal(index)

        self.store.save(todos)
        todo.index = None
        return todo

    def prioritize(self, index: int) -> Optional[Todo]:
        """Move a todo to the top of today's list."""
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        self._promote(todos, index)
        self.store.save(todos)
        return todo

    def deprioritize(self, index: int) -> Optional[Todo]:
        """Move a todo to the bottom of the list, keeping its category."""
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todos.append(todos.pop(index))
        self.marker.after_removal(index)

        self.store.save(todos)
        return todo

    def move_to_backlog(self, index: int) -> Optional[Todo]:
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todo.move_to(Category.BACKLOG)
        todos.insert(0, todos.pop(index))
        self.marker.after_backlog(index)

        self.store.save(todos)
        return todo

    def schedule(self, index: int, on: date) -> Optional[Todo]:
        """Schedule a todo for ``on``.

        Scheduling for today is the same as prioritizing. Dates in the past
        are the caller's to reject.
        """
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        self._schedule_in(todos, index, on)
        self.store.save(todos)
        return todo

    def defer(self, index: int) -> Optional[Todo]:
        """Schedule a todo for the next defer weekday (Monday by default)."""
        return self.schedule(index, dow_to_date(self.defer_weekday, self.today_date()))

    def long_defer(self, index: int, days: Optional[int] = None) -> Optional[Todo]:
        if days is None:
            days = self.long_defer_days
        return self.schedule(index, self.today_date() + timedelta(days=days))

    def recur(self, index: int, days: int) -> Optional[Todo]:
        """Set the recurrence rule; zero or negative days disable it."""
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todo.recurrence_rule = days if days > 0 else None
        self.store.save(todos)
        return todo

    def add_tag(self, index: int, tag: str) -> Optional[Todo]:
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todo.add_tag(tag)
        self.store.save(todos)
        return todo

    def untag(self, index: int) -> Optional[Todo]:
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        todo.untag()
        self.store.save(todos)
        return todo

    def mark(self, index: int) -> Optional[Todo]:
        """Place the marker below a todo of today's list.

        A todo outside today's list clears the marker.
        """
        todos = self.store.load()
        todo = _locate(todos, index)
        if todo is None:
            return None

        today = [t for t in todos if t.category is Category.TODAY]
        position = next((row for row, t in enumerate(today) if t is todo), None)
        self.marker.place(position)
        return todo

    def update_for_schedules(self) -> List[Todo]:
        """Promote every upcoming todo whose date has arrived.

        Todos are promoted in storage order, each exactly as ``prioritize``
        would, so the last one promoted ends up first.
        """
        todos = self.store.load()
        today = self.today_date()

        due = [
            position for position, todo in enumerate(todos)
            if todo.is_upcoming() and todo.is_available(today)
        ]
        promoted = [todos[position] for position in due]

        # Positions after a promoted todo are unaffected by moving it to the head.
        for position in due:
            self._promote(todos, position)

        if promoted:
            self.store.save(todos)
        logger.info(f"Schedule update promoted {len(promoted)} todos")
        return promoted

    # ------------------------------------------------------------------
    # In-memory steps shared by the operations above

    def _promote(self, todos: List[Todo], position: int) -> None:
        todo = todos[position]
        todo.move_to(Category.TODAY)
        todos.insert(0, todos.pop(position))
        self.marker.after_promotion(position)

    def _schedule_in(self, todos: List[Todo], position: int, on: date) -> None:
        if on == self.today_date():
            self._promote(todos, position)
            return

        todos[position].move_to(Category.UPCOMING, available_on=on)
        self.marker.after_removal(position)


def _locate(todos: List[Todo], index: int) -> Optional[Todo]:
    """Return the todo at ``index`` within this load, or None."""
    if 0 <= index < len(todos):
        return todos[index]
    return None
