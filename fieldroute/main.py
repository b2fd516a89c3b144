"""
Console demo: plan a coverage route on a sample field and print it.

    python -m fieldroute.main --env obstacles --size 20
"""

import argparse
import sys
from typing import Optional

from loguru import logger

from .config import PlannerConfig, load_config
from .constants import END, OBSTACLE, PATH, START
from .envs import ENVIRONMENTS
from .grid import annotate_route
from .log import setup_logger
from .planner import plan_coverage
from .stats import count_free_cells, route_statistics

SYMBOLS = {
    OBSTACLE: '#',
    PATH: '.',
    START: 'S',
    END: 'E',
}


def print_grid(cells):
    """Print an annotated field, one character per cell."""
    for row in cells:
        print("".join(SYMBOLS.get(cell, ' ') for cell in row))


def run_console_demo(env: str = "obstacles", size: int = 20,
                     config: Optional[PlannerConfig] = None, end=None) -> int:
    grid = ENVIRONMENTS[env](size)
    start = (0, 0)

    print(f"=== Coverage route: {env} field {size}x{size} ===")
    result = plan_coverage(grid, start, end, config)
    if not result.route:
        print(f"Planning failed: {result.reason}")
        return 1

    print_grid(annotate_route(grid, result.route, start=start, end=end))

    stats = route_statistics(result.route, count_free_cells(grid))
    print(f"\nStatus: {result.status}")
    print(f"Segments: {len(result.segments)}")
    print(f"Route cells: {len(result.route)}")
    print(f"Distance: {stats.total_distance}")
    print(f"Coverage: {stats.coverage_percent:.1f}% ({stats.covered_cells} cells)")
    if result.unreachable_segments:
        print(f"Unreachable segments: {result.unreachable_segments}")
    if not result.complete:
        print(f"Warning: plan ended with status {result.status}")
    if result.end_reached is False:
        print(f"Warning: {result.reason}")
        return 2
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Plan a coverage route on a sample field")
    parser.add_argument("--env", choices=sorted(ENVIRONMENTS), default="obstacles")
    parser.add_argument("--size", type=int, default=20)
    parser.add_argument("--config", help="YAML planner config")
    parser.add_argument("--end", type=int, nargs=2, metavar=("ROW", "COL"),
                        help="cell the route must finish on")
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else PlannerConfig()
    setup_logger(config.log_level)
    if args.size < 1:
        logger.error(f"--size must be positive, got {args.size}")
        return 1

    return run_console_demo(args.env, args.size, config, tuple(args.end) if args.end else None)


if __name__ == "__main__":
    sys.exit(main())
