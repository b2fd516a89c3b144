"""
A* point-to-point search on a 4-connected field grid.

The open list is a plain list scanned linearly for the lowest f; field grids
are small (a few thousand cells) so no priority queue is needed.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .constants import DIR4, Position
from .grid import as_position, grid_shape, in_bounds, is_obstacle
from .node import SearchNode


def manhattan(a: Sequence[int], b: Sequence[int]) -> int:
    """Manhattan distance |dr| + |dc| (A* heuristic)."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_walkable(grid, shape, pos: Position, overrides: Optional[Mapping] = None) -> bool:
    """In bounds and not an obstacle; overrides take precedence over the grid."""
    if not in_bounds(shape, pos):
        return False
    if overrides and pos in overrides:
        return not is_obstacle(overrides[pos])
    return not is_obstacle(grid[pos[0]][pos[1]])


def get_neighbors(grid, shape, pos: Position, overrides: Optional[Mapping] = None) -> List[Position]:
    """Walkable orthogonal neighbours in the order up, down, left, right."""
    neighbors = []
    for dr, dc in DIR4:
        nxt = Position(pos.row + dr, pos.col + dc)
        if is_walkable(grid, shape, nxt, overrides):
            neighbors.append(nxt)
    return neighbors


def reconstruct_path(arena: List[SearchNode], index: int) -> List[Position]:
    """Follow parent indices from the goal node back to the start node."""
    path = []
    current: Optional[int] = index
    while current is not None:
        node = arena[current]
        path.append(node.position)
        current = node.parent
    path.reverse()
    return path


def find_path(grid, start: Sequence[int], end: Sequence[int],
              overrides: Optional[Mapping] = None,
              max_expansions: Optional[int] = None) -> Optional[List[Position]]:
    """
    Shortest 4-connected path from start to end, avoiding obstacles.

    Args:
        grid: cell-state or binary grid (lists or numpy array), never mutated
        start: (row, col) of the first cell
        end: (row, col) of the goal cell
        overrides: optional {(row, col): cell state} read instead of the grid,
            used to force endpoints walkable without touching the grid
        max_expansions: optional cap on the number of expanded nodes

    Returns:
        List of positions including both endpoints ([start] when start == end),
        or None when no path exists.
    """
    shape = grid_shape(grid)
    start = as_position(start)
    end = as_position(end)
    if overrides:
        overrides = {as_position(p): state for p, state in overrides.items()}

    if not in_bounds(shape, start) or not in_bounds(shape, end):
        logger.warning(f"A*: endpoint out of bounds {start} -> {end} on {shape[0]}x{shape[1]} grid")
        return None

    arena: List[SearchNode] = [SearchNode(start, 0, manhattan(start, end))]
    open_list: List[int] = [0]
    open_index: Dict[Position, int] = {start: 0}
    closed = set()
    expansions = 0

    while open_list:
        # Lowest f wins; strict < keeps the first one found on ties
        best = 0
        for i in range(1, len(open_list)):
            if arena[open_list[i]].f < arena[open_list[best]].f:
                best = i
        current_index = open_list.pop(best)
        current = arena[current_index]
        del open_index[current.position]
        closed.add(current.position)

        if current.position == end:
            return reconstruct_path(arena, current_index)

        expansions += 1
        if max_expansions is not None and expansions > max_expansions:
            logger.warning(f"A*: gave up after {max_expansions} expansions ({start} -> {end})")
            return None

        for neighbor in get_neighbors(grid, shape, current.position, overrides):
            if neighbor in closed:
                continue

            g_score = current.g + 1
            neighbor_index = open_index.get(neighbor)
            if neighbor_index is None:
                arena.append(SearchNode(neighbor, g_score, manhattan(neighbor, end), current_index))
                open_index[neighbor] = len(arena) - 1
                open_list.append(len(arena) - 1)
            elif g_score < arena[neighbor_index].g:
                arena[neighbor_index].relax(g_score, current_index)

    return None


def find_position(grid, cell_type) -> Optional[Position]:
    """First cell (row-major) holding the given state, or None."""
    rows, cols = grid_shape(grid)
    for r in range(rows):
        for c in range(cols):
            if grid[r][c] == cell_type:
                return Position(r, c)
    return None
