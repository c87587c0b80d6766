"""Prompt input with a persistent history file."""

import logging
import readline
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LineEditor:
    """Reads prompt lines through readline and appends them to a history file."""

    def __init__(self, history_path: Path):
        self.history_path = Path(history_path)
        self._history_loaded = False

    def _load_history(self) -> None:
        self._history_loaded = True
        if not self.history_path.exists():
            return
        try:
            readline.read_history_file(str(self.history_path))
        except OSError as e:
            logger.warning(f"Could not read history from {self.history_path}: {e}")

    def _remember(self, line: str) -> None:
        try:
            with open(self.history_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.debug(f"Could not write history to {self.history_path}: {e}")

    def readline(self, prompt: str) -> Optional[str]:
        """Read one line, or None at end of input (Ctrl-D)."""
        if not self._history_loaded:
            self._load_history()

        try:
            line = input(prompt)
        except EOFError:
            return None

        if line.strip():
            self._remember(line)
        return line
