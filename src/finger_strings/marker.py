"""The marker: a movable separator line in the today view.

The marker is an offset into the today list below which a separator is
drawn. It lives only as long as the process. Every mutation that moves a
todo relative to the marker shifts it so the separator keeps its place
between the same two todos.

Positions passed to the ``after_*`` methods are the mutated todo's storage
position before the mutation. The boundaries differ per operation and are
kept exactly as they are; a marker shifted to -1 simply draws nowhere.
"""

from typing import Optional


class Marker:
    """Optional offset of the separator line in the today view."""

    def __init__(self, position: Optional[int] = None):
        self.position = position

    @property
    def is_set(self) -> bool:
        return self.position is not None

    def place(self, position: Optional[int]) -> None:
        self.position = position

    def after_removal(self, position: int) -> None:
        """Adjust for a todo leaving the list at ``position``.

        Used by completion, deletion, deprioritizing and scheduling into
        upcoming.
        """
        if self.is_set and position <= self.position + 1:
            self.position -= 1

    def after_backlog(self, position: int) -> None:
        """Adjust for a todo at ``position`` being sent to the backlog."""
        if self.is_set and position <= self.position:
            self.position -= 1

    def after_promotion(self, position: int) -> None:
        """Adjust for a todo at ``position`` moving to the head of the list."""
        if self.is_set and position > self.position:
            self.position += 1

    def is_after(self, row: int) -> bool:
        """Check whether the separator is drawn right below ``row``."""
        return self.position == row

    def __repr__(self) -> str:
        return f"Marker(position={self.position!r})"
