"""FingerStrings - a todo list driven by an interactive prompt."""

__version__ = "0.1.0"
__author__ = "FingerStrings Team"

from .todo import Todo, Category
from .engine import TodoEngine
from .marker import Marker
from .storage import TodoStore

__all__ = ["Todo", "Category", "TodoEngine", "Marker", "TodoStore", "__version__"]
