"""Sample-based tree planners and the strategies they are composed of."""

from typing import Any, Dict, Optional

from .informed_rrt import InformedRRTPlanner
from .rrt import RRTPlanner
from .rrt_star import RRTStarPlanner
from .tree_planner import PlanResult, SampleTreePlanner, SearchState

ALGORITHM_MAP = {
    'rrt': RRTPlanner,
    'rrt_star': RRTStarPlanner,
    'informed_rrt': InformedRRTPlanner,
}


def create_planner(name: str, grid, config: Optional[Dict[str, Any]] = None) -> SampleTreePlanner:
    """
    Instantiate a planner by its configuration name.

    Raises:
        ValueError: If name is not one of ALGORITHM_MAP's keys
    """
    if name not in ALGORITHM_MAP:
        raise ValueError(f"Unknown planner name: {name}. "
                         f"Available planners: {', '.join(ALGORITHM_MAP)}")
    return ALGORITHM_MAP[name](grid, config)


__all__ = [
    'ALGORITHM_MAP',
    'InformedRRTPlanner',
    'PlanResult',
    'RRTPlanner',
    'RRTStarPlanner',
    'SampleTreePlanner',
    'SearchState',
    'create_planner',
]
