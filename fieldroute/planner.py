"""
Coverage path planning for a grid field.

Boustrophedon decomposition into vertical sweep segments, greedy
nearest-segment sequencing and A* connectors between segments.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .astar import find_path, manhattan
from .config import PlannerConfig
from .constants import BLOCKED, END, FREE, START, SWEEP_DOWN, SWEEP_UP, Position
from .grid import as_position, in_bounds, to_occupancy

Segment = Tuple[Position, ...]

# --- Plan status ---
COMPLETE = "complete"
INVALID_INPUT = "invalid_input"
ITERATION_LIMIT = "iteration_limit"
TIME_LIMIT = "time_limit"
END_UNREACHABLE = "end_unreachable"


@dataclass
class CoverageResult:
    ok: bool
    route: List[Position]
    status: str
    reason: str = ""
    end_reached: Optional[bool] = None    # None when no end was requested
    iteration_limit_hit: bool = False
    segment_count: int = 0
    iterations: int = 0
    unreachable_segments: int = 0
    unsafe_connectors: int = 0
    segments: List[Segment] = field(default_factory=list, repr=False)

    @property
    def complete(self) -> bool:
        return self.status == COMPLETE


# --- Boustrophedon decomposition ---

def sweep_direction(col: int) -> str:
    """Even columns sweep top -> bottom, odd columns bottom -> top."""
    return SWEEP_DOWN if col % 2 == 0 else SWEEP_UP


def generate_column_segments(occupancy: np.ndarray, col: int, direction: str) -> List[Segment]:
    """Split one column scan into maximal runs of free cells."""
    rows = occupancy.shape[0]
    row_order = range(rows) if direction == SWEEP_DOWN else range(rows - 1, -1, -1)

    segments: List[Segment] = []
    current: List[Position] = []
    for r in row_order:
        if occupancy[r, col] == FREE:
            current.append(Position(r, col))
        elif current:
            segments.append(tuple(current))
            current = []
    if current:
        segments.append(tuple(current))
    return segments


def generate_segments(occupancy: np.ndarray) -> List[Segment]:
    """All sweep segments in column-major order."""
    segments: List[Segment] = []
    for col in range(occupancy.shape[1]):
        segments.extend(generate_column_segments(occupancy, col, sweep_direction(col)))
    return segments


def _is_empty_grid(grid) -> bool:
    if grid is None:
        return True
    if isinstance(grid, np.ndarray):
        return grid.size == 0
    return len(grid) == 0 or len(grid[0]) == 0


class CoveragePlanner:
    """
    Plans one continuous route visiting every reachable free cell of a field.

    The input grid is never mutated; the planner keeps its own binary
    occupancy copy and marks connector endpoints through search overrides.

    Example:
        planner = CoveragePlanner(grid, start=(0, 0))
        result = planner.run()
        if result.ok:
            follow(result.route)
    """

    def __init__(self, grid, start: Sequence[int], end: Optional[Sequence[int]] = None,
                 config: Optional[PlannerConfig] = None):
        self.grid = grid
        self.start = as_position(start)
        self.end = as_position(end) if end is not None else None
        self.config = config or PlannerConfig()

        self.occupancy: Optional[np.ndarray] = None
        self.segments: List[Segment] = []

        # Observers for step-by-step display
        self.on_segment_callback: Optional[Callable] = None
        self.on_connector_callback: Optional[Callable] = None

    def set_callbacks(self, segment_callback=None, connector_callback=None):
        """
        segment_callback(cells, route) fires after each swept segment,
        connector_callback(cells) after each accepted A* connector.
        """
        self.on_segment_callback = segment_callback
        self.on_connector_callback = connector_callback

    def _validate(self) -> Optional[str]:
        """Reason the inputs cannot be planned, or None."""
        if _is_empty_grid(self.grid):
            return "grid is empty"

        # Ragged grids raise GridShapeError here
        self.occupancy = to_occupancy(self.grid)
        shape = self.occupancy.shape

        if not in_bounds(shape, self.start):
            return f"start {tuple(self.start)} is outside the {shape[0]}x{shape[1]} field"
        if self.occupancy[self.start.row, self.start.col] == BLOCKED:
            return f"start {tuple(self.start)} is on an obstacle"
        if self.end is not None and not in_bounds(shape, self.end):
            return f"end {tuple(self.end)} is outside the {shape[0]}x{shape[1]} field"
        return None

    def _nearest_entry(self, remaining: List[Segment], visited: np.ndarray,
                       current: Position) -> Optional[Tuple[int, int]]:
        """
        (segment index, cell index) of the unvisited cell closest to current.

        Strict < keeps the earliest segment and cell on ties, so the result
        follows the column-major scan order.
        """
        best = None
        best_distance = None
        for seg_index, segment in enumerate(remaining):
            for cell_index, cell in enumerate(segment):
                if visited[cell.row, cell.col]:
                    continue
                distance = manhattan(cell, current)
                if best_distance is None or distance < best_distance:
                    best_distance = distance
                    best = (seg_index, cell_index)
        return best

    def _connect(self, source: Position, target: Position) -> Optional[List[Position]]:
        """A* connector from source to target with both endpoints forced walkable."""
        overrides = {source: START, target: END}
        path = find_path(self.occupancy, source, target, overrides=overrides,
                         max_expansions=self.config.max_search_expansions)
        if path is None:
            return None
        return [as_position(cell) for cell in path]

    def _is_safe(self, path: Sequence[Position]) -> bool:
        return all(self.occupancy[r, c] == FREE for r, c in path)

    def _connect_end(self, last: Position) -> Tuple[bool, List[Position]]:
        """Final leg from the last covered cell to the requested end."""
        if last == self.end:
            return True, []
        if self.occupancy[self.end.row, self.end.col] == BLOCKED:
            logger.warning(f"end {tuple(self.end)} is on an obstacle")
            return False, []

        leg = self._connect(last, self.end)
        if leg is None:
            logger.warning(f"no path from {tuple(last)} to end {tuple(self.end)}")
            return False, []
        if not self._is_safe(leg):
            logger.error(f"end leg {tuple(last)} -> {tuple(self.end)} crosses an obstacle")
            return False, []
        return True, leg[1:]

    def run(self) -> CoverageResult:
        """Plan the coverage route."""
        reason = self._validate()
        if reason is not None:
            logger.error(f"coverage planning rejected: {reason}")
            return CoverageResult(ok=False, route=[], status=INVALID_INPUT, reason=reason)

        occupancy = self.occupancy
        start = self.start
        self.segments = generate_segments(occupancy)
        segment_count = len(self.segments)
        logger.info(f"planning coverage on {occupancy.shape[0]}x{occupancy.shape[1]} field "
                    f"from {tuple(start)}: {segment_count} segments")

        route: List[Position] = [start]
        status = COMPLETE
        iterations = 0
        unreachable = 0
        unsafe = 0
        iteration_limit_hit = False

        if segment_count:
            visited = np.zeros(occupancy.shape, dtype=bool)
            visited[start.row, start.col] = True
            current = start

            remaining = list(self.segments)
            max_iterations = self.config.iteration_factor * segment_count
            deadline = None
            if self.config.time_budget_s is not None:
                deadline = time.monotonic() + self.config.time_budget_s

            while remaining and iterations < max_iterations:
                if deadline is not None and time.monotonic() > deadline:
                    logger.warning(f"time budget of {self.config.time_budget_s}s exhausted, "
                                   f"returning partial route ({len(route)} cells)")
                    status = TIME_LIMIT
                    break
                iterations += 1

                choice = self._nearest_entry(remaining, visited, current)
                if choice is None:
                    break
                seg_index, entry_index = choice
                segment = remaining[seg_index]
                entry = segment[entry_index]

                if current != entry:
                    connector = self._connect(current, entry)
                    if connector is None:
                        logger.debug(f"segment entered at {tuple(entry)} unreachable from "
                                     f"{tuple(current)}, skipped")
                        unreachable += 1
                        del remaining[seg_index]
                        continue

                    if not self._is_safe(connector):
                        logger.error(f"connector {tuple(current)} -> {tuple(entry)} crosses an "
                                     f"obstacle, segment skipped")
                        unsafe += 1
                        del remaining[seg_index]
                        continue

                    for cell in connector[1:]:
                        route.append(cell)
                        if occupancy[cell.row, cell.col] == FREE:
                            visited[cell.row, cell.col] = True
                    current = entry

                    if self.on_connector_callback:
                        self.on_connector_callback(connector)

                swept = []
                for cell in segment[entry_index:]:
                    if occupancy[cell.row, cell.col] == BLOCKED:
                        logger.error(f"segment cell {tuple(cell)} is an obstacle, sweep stopped")
                        break
                    if not visited[cell.row, cell.col]:
                        route.append(cell)
                        visited[cell.row, cell.col] = True
                        current = cell
                        swept.append(cell)

                # Dropped even when nothing new was swept, so it is never retried
                del remaining[seg_index]

                if self.on_segment_callback:
                    self.on_segment_callback(swept, route)

            if status == COMPLETE and remaining and iterations >= max_iterations:
                if self._nearest_entry(remaining, visited, current) is not None:
                    logger.warning(f"iteration bound {max_iterations} reached with "
                                   f"{len(remaining)} segments left, coverage may be incomplete")
                    iteration_limit_hit = True
                    status = ITERATION_LIMIT

        route = [cell for cell in route if occupancy[cell[0], cell[1]] == FREE]

        end_reached = None
        ok = True
        reason = ""
        if self.end is not None:
            end_reached, leg = self._connect_end(route[-1])
            route.extend(leg)
            if not end_reached:
                ok = False
                reason = f"coverage finished but end {tuple(self.end)} is unreachable"
                if status == COMPLETE:
                    status = END_UNREACHABLE

        logger.info(f"coverage route: {len(route)} cells, {iterations} iterations, "
                    f"{unreachable} unreachable segments, status={status}")

        return CoverageResult(
            ok=ok,
            route=route,
            status=status,
            reason=reason,
            end_reached=end_reached,
            iteration_limit_hit=iteration_limit_hit,
            segment_count=segment_count,
            iterations=iterations,
            unreachable_segments=unreachable,
            unsafe_connectors=unsafe,
            segments=self.segments,
        )


def plan_coverage(grid, start: Sequence[int], end: Optional[Sequence[int]] = None,
                  config: Optional[PlannerConfig] = None) -> CoverageResult:
    """Plan a coverage route; see CoveragePlanner."""
    return CoveragePlanner(grid, start, end, config).run()


def plan_route(grid, start: Sequence[int], end: Optional[Sequence[int]] = None,
               config: Optional[PlannerConfig] = None) -> Optional[List[Position]]:
    """Route only, or None when the inputs are invalid or the end is unreachable."""
    result = plan_coverage(grid, start, end, config)
    return result.route if result.ok else None
