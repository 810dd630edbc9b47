"""
Sample generation strategies for tree planners.

A sampler turns the planner's random generator into the next grid cell to
grow the tree toward. UniformSampler covers the whole free space;
InformedSampler restricts sampling to the ellipse of cells that could still
improve the best known solution once one exists.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..utils.geometry import bearing, distance, round_to_cell


class UniformSampler:
    """Draws free cells uniformly over the whole grid."""

    def draw_sample(self, grid, state, rng: np.random.Generator) -> Tuple[int, int]:
        """
        Draw a uniformly random free cell.

        Occupied cells are rejected and redrawn. The start cell is always
        free, so the loop terminates.

        Args:
            grid: Grid adapter
            state: Current search state (unused)
            rng: Random generator owned by the planning call

        Returns:
            Sampled cell (x, y)
        """
        width, height = grid.grid_size()
        while True:
            x, y = grid.coords(int(rng.integers(0, width * height)))
            if not grid.is_obstacle(x, y):
                return x, y


def sample_unit_disk(rng: np.random.Generator) -> Tuple[float, float]:
    """Uniform point strictly inside the unit disk, by rejection from [-1, 1]^2."""
    while True:
        u = rng.uniform(-1.0, 1.0)
        v = rng.uniform(-1.0, 1.0)
        if u * u + v * v < 1.0:
            return u, v


@dataclass(frozen=True)
class InformedEllipse:
    """
    Ellipse of points whose start + goal distance sum is at most best_cost.

    Attributes:
        start: First focus (x, y)
        goal: Second focus (x, y)
        center: Midpoint of the foci
        angle: Negative bearing from start to goal (radians)
        a: Semi-major axis, best_cost / 2
        b: Semi-minor axis, sqrt(a^2 - (min_cost / 2)^2)
    """

    start: Tuple[float, float]
    goal: Tuple[float, float]
    center: Tuple[float, float]
    angle: float
    a: float
    b: float

    @classmethod
    def from_costs(cls, start, goal, best_cost: float, min_cost: float) -> 'InformedEllipse':
        """
        Build the sampling ellipse for the current best solution cost.

        Args:
            start: Start cell (x, y)
            goal: Goal cell (x, y)
            best_cost: Cost of the best solution found so far
            min_cost: Straight-line distance from start to goal

        Example:
            >>> e = InformedEllipse.from_costs((0, 0), (8, 0), 10.0, 8.0)
            >>> e.a, e.b
            (5.0, 3.0)
        """
        a = best_cost / 2.0
        c = min_cost / 2.0
        # best_cost bounds a real path through both foci, so a >= c up to rounding
        b = math.sqrt(max(a * a - c * c, 0.0))
        center = ((start[0] + goal[0]) / 2.0, (start[1] + goal[1]) / 2.0)
        return cls(start=tuple(start), goal=tuple(goal), center=center,
                   angle=-bearing(start, goal), a=a, b=b)

    def transform(self, u: float, v: float) -> Tuple[float, float]:
        """
        Map a point of the unit disk onto the ellipse.

        The disk is scaled by (a, b), rotated so the major axis runs from
        start to goal, then moved to the ellipse center.
        """
        cos_t, sin_t = math.cos(self.angle), math.sin(self.angle)
        rotation = np.array([[cos_t, sin_t],
                             [-sin_t, cos_t]])
        scale = np.diag([self.a, self.b])
        point = rotation @ scale @ np.array([u, v]) + np.asarray(self.center)
        return float(point[0]), float(point[1])

    def focal_sum(self, x: float, y: float) -> float:
        """Sum of distances from (x, y) to both foci; at most 2a inside the ellipse."""
        return distance(self.start, (x, y)) + distance((x, y), self.goal)


class InformedSampler:
    """
    Uniform sampling until a solution exists, then sampling inside its ellipse.

    Attributes:
        fallback: Sampler used while no solution is known
        ellipse (Optional[InformedEllipse]): Ellipse used by the last informed draw
    """

    def __init__(self, fallback=None):
        self.fallback = fallback if fallback is not None else UniformSampler()
        self.ellipse = None

    def draw_sample(self, grid, state, rng: np.random.Generator) -> Tuple[int, int]:
        """
        Draw the next sample given the current best cost.

        Cells mapped outside the grid are rejected and redrawn.

        Args:
            grid: Grid adapter
            state: Search state providing start, goal, best_cost and min_cost
            rng: Random generator owned by the planning call

        Returns:
            Sampled cell (x, y)
        """
        if not math.isfinite(state.best_cost):
            self.ellipse = None
            return self.fallback.draw_sample(grid, state, rng)

        if self.ellipse is None or self.ellipse.a != state.best_cost / 2.0:
            self.ellipse = InformedEllipse.from_costs(
                state.start.xy, state.goal.xy, state.best_cost, state.min_cost)

        while True:
            x, y = round_to_cell(*self.ellipse.transform(*sample_unit_disk(rng)))
            if grid.in_bounds(x, y):
                return x, y
