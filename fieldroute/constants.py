from typing import NamedTuple


class Position(NamedTuple):
    """Grid coordinate (row, col). Equal to and hashes like a plain tuple."""
    row: int
    col: int


# --- Cell states of a typed field grid ---
EMPTY = "empty"          # free cell
OBSTACLE = "obstacle"    # impassable
START = "start"          # designated start marker (traversable)
END = "end"              # designated end marker (traversable)
MACHINE = "machine"      # machine position marker (traversable)
PATH = "path"            # route annotation, rendering only

# --- Binary occupancy values ---
FREE = 0
BLOCKED = 1

# --- 4-connected moves: up, down, left, right ---
DIR4 = [
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
]

# Sweep direction of a column, chosen by column parity
SWEEP_DOWN = "down"   # even columns: top -> bottom
SWEEP_UP = "up"       # odd columns: bottom -> top

DEFAULT_ITERATION_FACTOR = 3
