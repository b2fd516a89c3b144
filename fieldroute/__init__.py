"""
fieldroute: coverage path planning for grid-represented fields.
"""

from .astar import find_path, find_position, manhattan
from .config import PlannerConfig, load_config
from .constants import (BLOCKED, EMPTY, END, FREE, MACHINE, OBSTACLE, PATH, START,
                        Position)
from .exceptions import FieldRouteError, GridShapeError
from .grid import annotate_route, to_cell_grid, to_occupancy
from .planner import (COMPLETE, END_UNREACHABLE, INVALID_INPUT, ITERATION_LIMIT,
                      TIME_LIMIT, CoveragePlanner, CoverageResult, generate_segments,
                      plan_coverage, plan_route)
from .stats import RouteStatistics, count_free_cells, coverage_percent, route_statistics

__version__ = "0.1.0"
