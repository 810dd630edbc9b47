"""
Host integration layer for the sample planners.

SamplePlannerHost adapts world-frame requests to the grid planners: it maps
start and goal poses to cells, runs one planning call per request, converts
the cell path back to world coordinates, and keeps the last successful plan
as a fallback for display when a request fails.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .algorithms import create_planner
from .core.errors import InvalidInput

logger = logging.getLogger(__name__)

WorldPoint = Tuple[float, float]


class SamplePlannerHost:
    """
    World-frame front end to one configured planner.

    Attributes:
        grid: OccupancyGrid shared with the planner
        planner: Planner created from planner_name
        outline_map (bool): Mark the grid border as obstacle before each request
        expand_zone (bool): Expose the explored tree of each request for display
        history_plan (List[WorldPoint]): Last successful world path
    """

    def __init__(self, planner_name: str, grid, config: Optional[Dict[str, Any]] = None,
                 outline_map: bool = False, expand_zone: bool = False):
        """
        Args:
            planner_name: One of 'rrt', 'rrt_star', 'informed_rrt'
            grid: OccupancyGrid to plan on
            config: Algorithm configuration passed to the planner
            outline_map: Whether to outline the map before planning
            expand_zone: Whether tree_edges() reports the explored tree

        Raises:
            ValueError: If planner_name is unknown
        """
        self.grid = grid
        self.planner = create_planner(planner_name, grid, config)
        self.outline_map = outline_map
        self.expand_zone = expand_zone
        self.history_plan: List[WorldPoint] = []
        logger.info("Using global sample planner: %s", planner_name)

    def make_plan(self, start: WorldPoint, goal: WorldPoint) -> List[WorldPoint]:
        """
        Plan between two world points.

        Args:
            start: Start position (x, y) in world units
            goal: Goal position (x, y) in world units

        Returns:
            World points from start to goal, the goal point itself appended
            last; the previous successful plan when this request fails; an
            empty list when there is neither
        """
        try:
            start_cell = self.grid.world_to_map(*start)
        except ValueError:
            logger.warning("The start position %s is off the grid. Planning will always fail, "
                           "is the robot properly localized?", start)
            return []

        try:
            goal_cell = self.grid.world_to_map(*goal)
        except ValueError:
            logger.warning("The goal %s is off the grid. Planning will always fail "
                           "to this goal.", goal)
            return []

        if self.outline_map:
            self.grid.outline()

        try:
            result = self.planner.plan(start_cell, goal_cell)
        except InvalidInput as e:
            logger.error("Rejected planning request: %s", e)
            return self._fallback()

        if not result.found:
            return self._fallback()

        plan = [self.grid.map_to_world(x, y) for x, y in result.path]
        plan.append((float(goal[0]), float(goal[1])))
        self.history_plan = plan
        return plan

    def _fallback(self) -> List[WorldPoint]:
        if self.history_plan:
            logger.warning("Using history path.")
            return list(self.history_plan)
        logger.error("Failed to get a path.")
        return []

    def tree_edges(self) -> List[Tuple[WorldPoint, WorldPoint]]:
        """
        Explored tree edges (parent, child) of the last request, in world units.

        Empty unless the host was created with expand_zone.
        """
        if not self.expand_zone:
            return []

        edges = []
        for node in self.planner.explored:
            if node.parent_id == -1:
                continue
            px, py = self.grid.coords(node.parent_id)
            edges.append((self.grid.map_to_world(px, py),
                          self.grid.map_to_world(node.x, node.y)))
        logger.debug("Expand zone size: %d", len(edges))
        return edges
