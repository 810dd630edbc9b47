"""
Abstract base class for grid path planners.

This module defines the common interface that all sample-based planners
(RRT, RRT*, Informed RRT*) implement, plus path bookkeeping shared by them:
validation against the grid, length and persistence.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..utils.geometry import polyline_length


class PathPlanner(ABC):
    """
    Abstract base class for path planning algorithms.

    Attributes:
        grid: Grid adapter providing occupancy queries and index mapping
        config (Dict[str, Any]): Algorithm configuration (``parameters``,
            ``visualization``, ``output`` sections)
        path (Optional[List[Tuple[int, int]]]): Last computed cell path
        planning_time (float): Time taken by the last plan() call (seconds)
        metrics (Dict[str, Any]): Performance metrics from the last planning run
    """

    def __init__(self, grid, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the path planner.

        Args:
            grid: Grid adapter (see ``GridAdapter``)
            config: Dictionary of algorithm parameters loaded from YAML
        """
        self.grid = grid
        self.config = config if config is not None else {}
        self.path: Optional[List[Tuple[int, int]]] = None
        self.planning_time: float = 0.0
        self.metrics: Dict[str, Any] = {}
        self._initialize_algorithm()

    @abstractmethod
    def _initialize_algorithm(self) -> None:
        """
        Initialize algorithm-specific data structures and parameters.

        Called once from __init__.
        """
        pass

    @abstractmethod
    def plan(self, start: Tuple[int, int], goal: Tuple[int, int]):
        """
        Compute a collision-free path from start to goal.

        Implementations store the cell path in self.path (None when no path
        was found) and the elapsed time in self.planning_time.

        Args:
            start: Start cell (x, y)
            goal: Goal cell (x, y)
        """
        pass

    @abstractmethod
    def get_metrics(self) -> Dict[str, Any]:
        """
        Get algorithm performance metrics from the last planning run.

        Returns:
            Dictionary containing at least path_length, planning_time and
            nodes_explored
        """
        pass

    @abstractmethod
    def visualize(self, ax, **kwargs) -> None:
        """
        Visualize the planning result on a matplotlib axis.

        Args:
            ax: Matplotlib axis object to draw on
            **kwargs: Additional visualization parameters
        """
        pass

    def validate_path(self) -> bool:
        """
        Validate that the computed path is collision-free.

        Returns:
            True if a path exists and every edge has a clear line of sight
        """
        if not self.path:
            return False

        for (x0, y0), (x1, y1) in zip(self.path, self.path[1:]):
            if not self.grid.line_clear(x0, y0, x1, y1):
                return False

        return True

    def get_path_length(self) -> float:
        """
        Calculate the total Euclidean length of the computed path.

        Returns:
            Path length in grid cells, 0.0 if no path exists
        """
        if self.path is None or len(self.path) < 2:
            return 0.0
        return polyline_length(self.path)

    def save_path(self, filename: str) -> None:
        """
        Save the computed path to a file.

        Supports multiple formats based on file extension:
        - .npy: NumPy binary format
        - .json: JSON format with path and metrics
        - .csv: Comma-separated values

        Args:
            filename: Output file path with extension

        Raises:
            ValueError: If no path exists or file format is unsupported

        Example:
            >>> planner.save_path('outputs/path.json')
        """
        if self.path is None:
            raise ValueError("No path to save. Run plan() first.")

        if filename.endswith('.npy'):
            np.save(filename, np.array(self.path, dtype=np.int64))
        elif filename.endswith('.json'):
            with open(filename, 'w') as f:
                json.dump({
                    'path': [list(cell) for cell in self.path],
                    'metrics': self.get_metrics()
                }, f, indent=2)
        elif filename.endswith('.csv'):
            np.savetxt(filename, np.array(self.path, dtype=np.int64), fmt='%d',
                       delimiter=',', header='x,y', comments='')
        else:
            raise ValueError(f"Unsupported file format: {filename}. "
                             f"Use .npy, .json, or .csv")

    def load_path(self, filename: str) -> List[Tuple[int, int]]:
        """
        Load a path from a file.

        Args:
            filename: Input file path

        Returns:
            List of cells loaded from file
        """
        if filename.endswith('.npy'):
            path_array = np.load(filename)
            self.path = [(int(x), int(y)) for x, y in path_array]
        elif filename.endswith('.json'):
            with open(filename, 'r') as f:
                data = json.load(f)
            self.path = [(int(x), int(y)) for x, y in data['path']]
        elif filename.endswith('.csv'):
            path_array = np.loadtxt(filename, delimiter=',', skiprows=1, ndmin=2)
            self.path = [(int(x), int(y)) for x, y in path_array]
        else:
            raise ValueError(f"Unsupported file format: {filename}")

        return self.path

    def __repr__(self) -> str:
        """String representation of the planner."""
        return f"{self.__class__.__name__}(config={self.config})"

    def __str__(self) -> str:
        """Human-readable string representation."""
        status = "with path" if self.path else "no path"
        return f"{self.__class__.__name__} ({status})"
