"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finger_strings.engine import TodoEngine  # noqa: E402
from finger_strings.marker import Marker  # noqa: E402
from finger_strings.storage import TodoStore  # noqa: E402

# A Wednesday
FIXED_NOW = datetime(2024, 1, 3, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def todo_path(tmp_path):
    return tmp_path / "finger_strings.json"


@pytest.fixture
def store(todo_path):
    return TodoStore(todo_path)


@pytest.fixture
def engine(store):
    return TodoEngine(store, marker=Marker(), clock=lambda: FIXED_NOW)


@pytest.fixture
def make_todos(engine):
    """Create todos with the given texts, in order."""
    def _make(*texts):
        for text in texts:
            engine.create(text)
        return engine.all()
    return _make
