from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .grid import to_occupancy
from .constants import FREE


@dataclass
class RouteStatistics:
    total_distance: int      # sum of Manhattan steps between consecutive cells
    covered_cells: int       # distinct cells in the route
    coverage_percent: float  # covered / total free cells * 100


def route_statistics(route: Sequence[Sequence[int]],
                     total_free_cells: Optional[int] = None) -> RouteStatistics:
    """
    Statistics of a planned route.

    coverage_percent needs the field's free-cell count, which only the caller
    knows; without it the percentage is left at 0.0.
    """
    total_distance = 0
    for prev, cur in zip(route, route[1:]):
        total_distance += abs(cur[0] - prev[0]) + abs(cur[1] - prev[1])

    covered = len({(int(r), int(c)) for r, c in route})

    percent = 0.0
    if total_free_cells:
        percent = covered / total_free_cells * 100.0

    return RouteStatistics(total_distance=total_distance,
                           covered_cells=covered,
                           coverage_percent=percent)


def count_free_cells(grid) -> int:
    """Number of traversable cells in the field."""
    return int(np.count_nonzero(to_occupancy(grid) == FREE))


def coverage_percent(route: Sequence[Sequence[int]], grid) -> float:
    return route_statistics(route, count_free_cells(grid)).coverage_percent
