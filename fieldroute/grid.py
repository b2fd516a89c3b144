"""
Grid helpers shared by the path finder and the coverage planner.

A field can arrive either as a typed cell-state matrix ("empty", "obstacle",
"start", ...) or as a binary occupancy matrix (0 = free, 1 = obstacle), as
nested lists or as a numpy array. Only the obstacle state blocks movement.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import BLOCKED, EMPTY, END, FREE, OBSTACLE, PATH, START, Position
from .exceptions import GridShapeError


def grid_shape(grid) -> Tuple[int, int]:
    """Return (rows, cols), raising GridShapeError for empty or ragged grids."""
    if grid is None:
        raise GridShapeError("grid is None")

    if isinstance(grid, np.ndarray):
        if grid.ndim != 2:
            raise GridShapeError(f"grid must be 2-D, got {grid.ndim} dimension(s)")
        rows, cols = grid.shape
        if rows == 0 or cols == 0:
            raise GridShapeError(f"grid must be at least 1x1, got {rows}x{cols}")
        return int(rows), int(cols)

    rows = len(grid)
    if rows == 0:
        raise GridShapeError("grid has no rows")
    cols = len(grid[0])
    if cols == 0:
        raise GridShapeError("grid has zero width")
    for r, row in enumerate(grid):
        if len(row) != cols:
            raise GridShapeError(f"row {r} has {len(row)} cells, expected {cols}")
    return rows, cols


def in_bounds(shape: Tuple[int, int], pos: Sequence[int]) -> bool:
    rows, cols = shape
    return 0 <= pos[0] < rows and 0 <= pos[1] < cols


def is_obstacle(value) -> bool:
    """True for the obstacle state of either grid representation."""
    if isinstance(value, str):
        return value == OBSTACLE
    return value == BLOCKED


def to_occupancy(grid) -> np.ndarray:
    """Binary occupancy matrix (int8, 1 = obstacle) from any grid representation."""
    rows, cols = grid_shape(grid)
    occupancy = np.full((rows, cols), FREE, dtype=np.int8)
    for r in range(rows):
        for c in range(cols):
            if is_obstacle(grid[r][c]):
                occupancy[r, c] = BLOCKED
    return occupancy


def to_cell_grid(grid) -> List[List[str]]:
    """Typed cell-state matrix from any grid representation."""
    rows, cols = grid_shape(grid)
    return [[_as_cell_state(grid[r][c]) for c in range(cols)] for r in range(rows)]


def _as_cell_state(value) -> str:
    if isinstance(value, str):
        return str(value)
    return OBSTACLE if value == BLOCKED else EMPTY


def annotate_route(grid, route, start: Optional[Sequence[int]] = None,
                   end: Optional[Sequence[int]] = None) -> List[List[str]]:
    """
    Copy of the field as cell states with the route marked as "path".

    Obstacles and the start/end markers are never overwritten, so the
    annotation can be drawn directly by a display layer.
    """
    cells = to_cell_grid(grid)
    for r, c in route:
        if cells[r][c] not in (OBSTACLE, START, END):
            cells[r][c] = PATH
    for marker, pos in ((START, start), (END, end)):
        if pos is not None and cells[pos[0]][pos[1]] != OBSTACLE:
            cells[pos[0]][pos[1]] = marker
    return cells


def as_position(pos: Sequence[int]) -> Position:
    r, c = pos
    return Position(int(r), int(c))
