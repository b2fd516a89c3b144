"""
Exceptions raised by fieldroute.

Only malformed input structures raise; expected planning outcomes (no path,
unreachable segments, limits) are reported as values.
"""


class FieldRouteError(Exception):
    """Base class for fieldroute errors."""


class GridShapeError(FieldRouteError, ValueError):
    """Grid is empty, has zero width or has rows of unequal length."""
