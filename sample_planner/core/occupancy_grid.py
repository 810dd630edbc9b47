"""
Occupancy grid representation for path planning.

This module defines the OccupancyGrid class which encapsulates the planning
space as a 2D cost array, together with the GridAdapter protocol the planners
consume. Cells whose cost reaches ``obstacle_factor * LETHAL_COST`` are
treated as obstacles.
"""

from typing import Any, Dict, List, Protocol, Tuple

import numpy as np

from ..utils.geometry import bresenham_line

FREE_COST = 0
LETHAL_COST = 254


class GridAdapter(Protocol):
    """Occupancy queries and index mapping required by the planners."""

    def grid_size(self) -> Tuple[int, int]: ...

    def in_bounds(self, x: int, y: int) -> bool: ...

    def is_obstacle(self, x: int, y: int) -> bool: ...

    def line_clear(self, x0: int, y0: int, x1: int, y1: int) -> bool: ...

    def index(self, x: int, y: int) -> int: ...

    def coords(self, index: int) -> Tuple[int, int]: ...


class OccupancyGrid:
    """
    Represents the planning space as a grid of traversal costs.

    The grid is stored row-major with shape (height, width), so the cost of
    cell (x, y) is ``costs[y, x]`` and its index is ``y * width + x``.

    Attributes:
        costs (np.ndarray): (H, W) array of uint8 cell costs
        obstacle_factor (float): Fraction of LETHAL_COST at which a cell blocks
        resolution (float): Cell edge length in world units
        origin (Tuple[float, float]): World coordinates of cell (0, 0)'s corner
    """

    def __init__(self,
                 costs: np.ndarray,
                 obstacle_factor: float = 0.5,
                 resolution: float = 1.0,
                 origin: Tuple[float, float] = (0.0, 0.0)):
        """
        Initialize the grid.

        Args:
            costs: (H, W) array of cell costs in [0, 255]
            obstacle_factor: Cells with cost >= factor * LETHAL_COST are obstacles
            resolution: World units per cell
            origin: World position of the lower-left grid corner

        Raises:
            ValueError: If costs is not 2D or resolution is not positive
        """
        costs = np.asarray(costs, dtype=np.uint8)
        if costs.ndim != 2:
            raise ValueError(f"costs must be a (H, W) array, got shape {costs.shape}")
        if not resolution > 0.0:
            raise ValueError("resolution must be > 0")

        self.costs = costs.copy()
        self.obstacle_factor = float(obstacle_factor)
        self.resolution = float(resolution)
        self.origin = (float(origin[0]), float(origin[1]))
        self.height, self.width = self.costs.shape

    @classmethod
    def from_occupancy(cls, occupied: np.ndarray, **kwargs) -> 'OccupancyGrid':
        """
        Build a grid from a boolean occupancy array.

        Example:
            >>> occupied = np.zeros((20, 20), dtype=bool)
            >>> occupied[:, 10] = True
            >>> grid = OccupancyGrid.from_occupancy(occupied)
        """
        occupied = np.asarray(occupied, dtype=bool)
        costs = np.where(occupied, LETHAL_COST, FREE_COST).astype(np.uint8)
        return cls(costs, **kwargs)

    @classmethod
    def from_config(cls, env_config: Dict[str, Any]) -> 'OccupancyGrid':
        """
        Build a grid from the ``environment`` section of the YAML config.

        Rectangular obstacles given in world units are rasterized: every cell
        whose center lies inside a rectangle becomes lethal.

        Args:
            env_config: Environment configuration with ``grid`` and ``obstacles``

        Returns:
            OccupancyGrid object
        """
        grid_config = env_config['grid']
        width = int(grid_config['width'])
        height = int(grid_config['height'])
        resolution = float(grid_config.get('resolution', 1.0))
        origin = tuple(grid_config.get('origin', (0.0, 0.0)))

        grid = cls(np.zeros((height, width), dtype=np.uint8),
                   obstacle_factor=env_config.get('obstacle_factor', 0.5),
                   resolution=resolution,
                   origin=origin)

        for obstacle in env_config.get('obstacles', []) or []:
            grid.add_rectangle(tuple(obstacle['center']), tuple(obstacle['size']))

        if env_config.get('outline_map', False):
            grid.outline()

        return grid

    def grid_size(self) -> Tuple[int, int]:
        """Return (width, height) in cells."""
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_obstacle(self, x: int, y: int) -> bool:
        """
        Check whether a cell blocks motion.

        Cells outside the grid are reported as obstacles.
        """
        if not self.in_bounds(x, y):
            return True
        return bool(self.costs[y, x] >= LETHAL_COST * self.obstacle_factor)

    def line_clear(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        """
        Check if the straight segment between two cells is obstacle-free.

        Every cell the segment rasterizes onto (end points included) must be
        free. The test is symmetric in its end points.

        Args:
            x0: Start column
            y0: Start row
            x1: End column
            y1: End row

        Returns:
            True if no traversed cell is an obstacle
        """
        for x, y in self.line_cells(x0, y0, x1, y1):
            if self.is_obstacle(x, y):
                return False
        return True

    def line_cells(self, x0: int, y0: int, x1: int, y1: int) -> List[Tuple[int, int]]:
        """
        Cells covered by the segment between two cells.

        The segment is always rasterized from its lexicographically smaller
        end, so both directions cover the same cells.
        """
        if (x1, y1) < (x0, y0):
            x0, y0, x1, y1 = x1, y1, x0, y0
        return bresenham_line(x0, y0, x1, y1)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def coords(self, index: int) -> Tuple[int, int]:
        return index % self.width, index // self.width

    def world_to_map(self, wx: float, wy: float) -> Tuple[int, int]:
        """
        Convert world coordinates to the containing cell.

        Raises:
            ValueError: If the point lies outside the grid
        """
        mx = int((wx - self.origin[0]) // self.resolution)
        my = int((wy - self.origin[1]) // self.resolution)
        if not self.in_bounds(mx, my):
            raise ValueError(f"World point ({wx}, {wy}) is off the grid")
        return mx, my

    def map_to_world(self, mx: float, my: float) -> Tuple[float, float]:
        """Convert a cell to the world coordinates of its center."""
        return (self.origin[0] + (mx + 0.5) * self.resolution,
                self.origin[1] + (my + 0.5) * self.resolution)

    def add_rectangle(self, center: Tuple[float, float], size: Tuple[float, float]) -> None:
        """
        Mark cells covered by an axis-aligned rectangle (world units) as lethal.

        Args:
            center: Rectangle center (x, y)
            size: Rectangle (width, height)
        """
        cx, cy = center
        w, h = size
        xs = self.origin[0] + (np.arange(self.width) + 0.5) * self.resolution
        ys = self.origin[1] + (np.arange(self.height) + 0.5) * self.resolution
        inside_x = np.abs(xs - cx) <= w / 2.0
        inside_y = np.abs(ys - cy) <= h / 2.0
        self.costs[np.ix_(inside_y, inside_x)] = LETHAL_COST

    def outline(self) -> None:
        """Mark the border cells of the grid as lethal."""
        self.costs[0, :] = LETHAL_COST
        self.costs[-1, :] = LETHAL_COST
        self.costs[:, 0] = LETHAL_COST
        self.costs[:, -1] = LETHAL_COST

    def __repr__(self) -> str:
        """String representation of the grid."""
        return (f"OccupancyGrid(size={self.width}x{self.height}, "
                f"resolution={self.resolution}, obstacle_factor={self.obstacle_factor})")
