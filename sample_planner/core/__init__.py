"""Grid, tree and planner base types."""

from .errors import InvalidInput, InvariantViolation, PlanningError
from .node import Node
from .occupancy_grid import GridAdapter, OccupancyGrid
from .tree import TreeStore, extract_path

__all__ = [
    'GridAdapter',
    'InvalidInput',
    'InvariantViolation',
    'Node',
    'OccupancyGrid',
    'PlanningError',
    'TreeStore',
    'extract_path',
]
