"""Storage layer for FingerStrings using a single JSON file."""

import json
import logging
import os
from pathlib import Path
from typing import List, Union

from .errors import StorageCorrupt
from .todo import Todo

logger = logging.getLogger(__name__)

EMPTY_TODOS: List[dict] = []
TODO_FILE_MODE = 0o644


def index_todos(todos: List[Todo]) -> List[Todo]:
    """Assign each todo its position in storage order."""
    for position, todo in enumerate(todos):
        todo.index = position
    return todos


class TodoStore:
    """Whole-file persistence for the todo list.

    Every load reads the full file and every save rewrites it; there is no
    partial update and no locking.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _ensure_file(self) -> None:
        """Create the todo file as an empty list if it does not exist."""
        if self.path.exists():
            return

        logger.info(f"Todo file not found, building {self.path}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(EMPTY_TODOS), encoding="utf-8")
        os.chmod(self.path, TODO_FILE_MODE)

    def load(self) -> List[Todo]:
        """Load and index every todo.

        Raises:
            StorageCorrupt: If the file is not a JSON list of todo records
        """
        self._ensure_file()

        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StorageCorrupt(self.path, str(e)) from e

        if not isinstance(records, list):
            raise StorageCorrupt(self.path, "expected a list of todos")

        todos = []
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise StorageCorrupt(self.path, f"record {position} is not an object")
            try:
                todos.append(Todo.from_dict(record))
            except (KeyError, ValueError, TypeError) as e:
                raise StorageCorrupt(self.path, f"record {position}: {e}") from e

        logger.debug(f"Loaded {len(todos)} todos from {self.path}")
        return index_todos(todos)

    def save(self, todos: List[Todo]) -> None:
        """Rewrite the todo file with ``todos`` and re-index them."""
        records = [todo.to_dict() for todo in todos]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
            f.write("\n")

        logger.debug(f"Saved {len(todos)} todos to {self.path}")
        index_todos(todos)
