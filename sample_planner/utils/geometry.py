"""
Geometric utility functions for grid path planning.

This module provides the small set of planar operations shared by the
planners and the occupancy grid: Euclidean distance, bearing, cell
rasterization of a segment and snapping of continuous points to cells.
"""

import math
from typing import List, Tuple

Point = Tuple[float, float]
Cell = Tuple[int, int]


def distance(a: Point, b: Point) -> float:
    """
    Euclidean distance between two points.

    Args:
        a: First point (x, y)
        b: Second point (x, y)

    Returns:
        Straight-line distance in grid units

    Example:
        >>> distance((0, 0), (3, 4))
        5.0
    """
    return math.hypot(b[0] - a[0], b[1] - a[1])


def bearing(a: Point, b: Point) -> float:
    """
    Heading of the vector a -> b, in radians in (-pi, pi].

    Example:
        >>> bearing((0, 0), (0, 1))
        1.5707963267948966
    """
    return math.atan2(b[1] - a[1], b[0] - a[0])


def round_to_cell(x: float, y: float) -> Cell:
    """
    Round a continuous point to the nearest cell (halves round up).

    Python's built-in round() uses banker's rounding, which would bias
    samples toward even cells.
    """
    return int(math.floor(x + 0.5)), int(math.floor(y + 0.5))


def step_toward(origin: Cell, target: Point, step: float) -> Cell:
    """
    Move from origin toward target by step, snapping to a cell.

    The exact step point is rounded to the nearest cell. When that cell lies
    beyond step, the farthest of the four cells around the step point that
    is still within step is taken instead, so the move never exceeds step
    and never collapses to origin while a neighbouring cell is in reach.

    Args:
        origin: Cell to move from
        target: Point to move toward
        step: Distance to travel

    Returns:
        Cell reached after the move

    Example:
        >>> step_toward((0, 0), (10, 1), 1.0)
        (1, 0)
    """
    theta = bearing(origin, target)
    px = origin[0] + step * math.cos(theta)
    py = origin[1] + step * math.sin(theta)

    cell = round_to_cell(px, py)
    if distance(origin, cell) <= step:
        return cell

    best = (int(origin[0]), int(origin[1]))
    best_key = (0.0, -distance((px, py), best))
    for cx in (int(math.floor(px)), int(math.ceil(px))):
        for cy in (int(math.floor(py)), int(math.ceil(py))):
            reach = distance(origin, (cx, cy))
            if reach > step:
                continue
            key = (reach, -distance((px, py), (cx, cy)))
            if key > best_key:
                best, best_key = (cx, cy), key
    return best


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Cell]:
    """
    Cells traversed by the segment (x0, y0) -> (x1, y1), both ends included.

    Classic integer Bresenham rasterization: every column (or row, for steep
    segments) between the end points contributes exactly one cell, so a
    segment can never step across a one-cell-thick wall without touching it.

    Args:
        x0: Start column
        y0: Start row
        x1: End column
        y1: End row

    Returns:
        Ordered list of cells from start to end

    Example:
        >>> bresenham_line(0, 0, 3, 1)
        [(0, 0), (1, 0), (2, 1), (3, 1)]
    """
    cells = []
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        cells.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return cells


def polyline_length(points: List[Point]) -> float:
    """Total Euclidean length of a sequence of points (0.0 for fewer than two)."""
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))
