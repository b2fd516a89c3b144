from typing import Optional

from .constants import Position


class SearchNode:
    """A* search node stored in a per-search arena (list)."""

    __slots__ = ("position", "g", "h", "f", "parent")

    def __init__(self, position: Position, g: int, h: int, parent: Optional[int] = None):
        self.position = position  # cell (r, c)
        self.g = g                # steps from the start node
        self.h = h                # Manhattan estimate to the goal
        self.f = g + h
        self.parent = parent      # arena index of the parent, None for the start node

    def relax(self, g: int, parent: int):
        """Update cost and back-pointer after finding a cheaper way in."""
        self.g = g
        self.f = g + self.h
        self.parent = parent

    def __repr__(self):
        return f"SearchNode({self.position}, g={self.g}, h={self.h}, parent={self.parent})"
