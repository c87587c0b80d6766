"""Tests for the Todo model."""

from datetime import date, datetime, timezone

import pytest

from finger_strings.errors import InvalidTransition
from finger_strings.todo import Category, Todo, can_transition


class TestTodo:
    """Test Todo model functionality."""

    def test_todo_creation(self):
        """Test creating a todo with defaults."""
        todo = Todo(text="Test task")

        assert todo.text == "Test task"
        assert todo.category is Category.TODAY
        assert todo.completed_at is None
        assert todo.available_on is None
        assert todo.recurrence_rule is None

    def test_tags(self):
        """Test that tags are words starting with a pipe."""
        todo = Todo(text="buy milk |home |errands")
        assert todo.tags == ["|home", "|errands"]

    def test_add_tag_normalizes_prefix(self):
        """Test that add_tag adds the pipe prefix when missing."""
        todo = Todo(text="buy milk")
        assert todo.add_tag("home") == "|home"
        todo.add_tag("|errands")
        assert todo.text == "buy milk |home |errands"

    def test_untag(self):
        """Test removing every tag from the text."""
        todo = Todo(text="buy |home milk |errands")
        todo.untag()
        assert todo.text == "buy milk"
        assert todo.tags == []

    def test_is_available(self):
        """Test availability on and before the scheduled date."""
        todo = Todo(text="later")
        todo.move_to(Category.UPCOMING, available_on=date(2024, 1, 5))
        assert not todo.is_available(date(2024, 1, 4))
        assert todo.is_available(date(2024, 1, 5))


class TestCategoryTransitions:
    """Test the category state machine."""

    def test_upcoming_requires_date(self):
        """Test that moving to upcoming without a date fails."""
        todo = Todo(text="later")
        with pytest.raises(ValueError):
            todo.move_to(Category.UPCOMING)

    def test_leaving_upcoming_clears_date(self):
        """Test that leaving upcoming clears available_on."""
        todo = Todo(text="later")
        todo.move_to(Category.UPCOMING, available_on=date(2024, 1, 5))
        todo.move_to(Category.BACKLOG)
        assert todo.available_on is None

    def test_done_sets_and_reopen_clears_completion(self):
        """Test that completed_at only lives on done todos."""
        now = datetime(2024, 1, 3, tzinfo=timezone.utc)
        todo = Todo(text="finish")
        todo.move_to(Category.DONE, completed_at=now)
        assert todo.completed_at == now

        todo.move_to(Category.TODAY)
        assert todo.completed_at is None

    def test_done_cannot_become_upcoming(self):
        """Test that a done todo cannot be scheduled."""
        todo = Todo(text="finish", category=Category.DONE)
        with pytest.raises(InvalidTransition):
            todo.move_to(Category.UPCOMING, available_on=date(2024, 1, 5))
        assert todo.category is Category.DONE

    def test_table(self):
        """Test sample entries of the transition table."""
        assert can_transition(Category.TODAY, Category.DONE)
        assert can_transition(Category.BACKLOG, Category.UPCOMING)
        assert can_transition(Category.DONE, Category.TODAY)
        assert not can_transition(Category.DONE, Category.BACKLOG)


class TestSerialization:
    """Test conversion to and from storage records."""

    def test_to_dict_omits_absent_fields(self):
        """Test that empty fields are left out of the record."""
        assert Todo(text="plain").to_dict() == {"text": "plain", "category": "today"}

    def test_to_dict_full(self):
        """Test a record with every optional field."""
        todo = Todo(text="water plants", recurrence_rule=3)
        todo.move_to(Category.UPCOMING, available_on=date(2024, 1, 6))

        assert todo.to_dict() == {
            "text": "water plants",
            "category": "upcoming",
            "available_on": "2024-01-06",
            "recurrence_rule": "3",
        }

    def test_from_dict(self):
        """Test building a todo from a full record."""
        todo = Todo.from_dict({
            "text": "done thing",
            "category": "done",
            "completed_at": "2024-01-02T10:00:00+00:00",
            "recurrence_rule": "2",
        })

        assert todo.category is Category.DONE
        assert todo.completed_at == datetime(2024, 1, 2, 10, tzinfo=timezone.utc)
        assert todo.recurrence_rule == 2

    def test_from_dict_defaults_to_today(self):
        """Test that a record without category lands in today."""
        assert Todo.from_dict({"text": "x"}).category is Category.TODAY

    def test_legacy_categories(self):
        """Test that old category names map onto current ones."""
        assert Todo.from_dict({"text": "x", "category": "someday"}).category is Category.BACKLOG
        assert Todo.from_dict({"text": "x", "category": "repeaters"}).category is Category.RECURRING

    def test_unknown_category(self):
        """Test that an unknown category is rejected."""
        with pytest.raises(ValueError):
            Todo.from_dict({"text": "x", "category": "whenever"})

    def test_non_string_text(self):
        """Test that a record whose text is not a string is rejected."""
        with pytest.raises(ValueError):
            Todo.from_dict({"text": None})

    def test_upcoming_without_date(self):
        """Test that an upcoming record must carry a date."""
        with pytest.raises(ValueError):
            Todo.from_dict({"text": "x", "category": "upcoming"})

    def test_non_positive_rule(self):
        """Test that a negative recurrence rule loads as no rule."""
        assert Todo.from_dict({"text": "x", "recurrence_rule": "-3"}).recurrence_rule is None
