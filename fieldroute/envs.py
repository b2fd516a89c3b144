from typing import List

from .constants import BLOCKED, FREE


def create_open_field(rows: int = 10, cols: int = 10) -> List[List[int]]:
    """Field without obstacles"""
    return [[FREE for _ in range(cols)] for _ in range(rows)]


def create_split_field(size: int = 5, wall_col: int = 2) -> List[List[int]]:
    """Square field cut in two by a full-height wall at wall_col"""
    grid = create_open_field(size, size)
    for r in range(size):
        grid[r][wall_col] = BLOCKED
    return grid


def create_test_environment(size: int = 20) -> List[List[int]]:
    """Field with a few rectangular obstacles (trees, sheds, ponds)"""
    grid = create_open_field(size, size)

    obstacles = [
        (2, 3, 4, 5),
        (8, 10, 12, 11),
        (14, 2, 15, 7),
        (5, 15, 9, 16),
    ]

    for start_r, start_c, end_r, end_c in obstacles:
        for r in range(start_r, min(end_r + 1, size)):
            for c in range(start_c, min(end_c + 1, size)):
                grid[r][c] = BLOCKED
    return grid


ENVIRONMENTS = {
    "open": lambda size: create_open_field(size, size),
    "split": lambda size: create_split_field(size, size // 2),
    "obstacles": create_test_environment,
}
