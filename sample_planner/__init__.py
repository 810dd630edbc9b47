"""
Sample-based path planning on 2D occupancy grids.

Provides RRT, RRT* and Informed RRT* planners that grow a random tree over an
occupancy grid and return an ordered cell path from start to goal.
"""

from .algorithms import (
    ALGORITHM_MAP,
    InformedRRTPlanner,
    PlanResult,
    RRTPlanner,
    RRTStarPlanner,
    create_planner,
)
from .core import InvalidInput, InvariantViolation, Node, OccupancyGrid, TreeStore

__version__ = '1.0.0'

__all__ = [
    'ALGORITHM_MAP',
    'InformedRRTPlanner',
    'InvalidInput',
    'InvariantViolation',
    'Node',
    'OccupancyGrid',
    'PlanResult',
    'RRTPlanner',
    'RRTStarPlanner',
    'TreeStore',
    'create_planner',
]
