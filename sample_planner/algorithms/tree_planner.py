"""
Shared main loop of the sample-based tree planners.

SampleTreePlanner grows a tree from the start cell: draw a sample, find the
nearest tree node, steer toward the sample, screen the new edge for
collisions, attach the new node and check whether it reaches the goal. The
two variable steps, drawing a sample and attaching a node, are delegated to
strategy objects so RRT, RRT* and Informed RRT* share this loop.
"""

import logging
import math
import time
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.errors import InvalidInput
from ..core.node import Node
from ..core.path_planner import PathPlanner
from ..core.tree import TreeStore, extract_path
from ..utils.geometry import distance, polyline_length, step_toward
from ..utils.visualization import draw_ellipse, draw_grid, draw_path, draw_tree

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_POINTS = 500
DEFAULT_MAX_DISTANCE = 5.0
DEFAULT_OPTIMIZATION_RADIUS = 10.0


@dataclass
class SearchState:
    """
    Mutable state of one planning call, shared with the strategies.

    Attributes:
        start: Root node
        goal: Goal node (never inserted in the tree)
        min_cost: Straight-line distance from start to goal
        best_cost: Cost of the best start-goal connection so far (inf if none)
        best_parent: Id of the anchor node of that connection (-1 if none)
        iteration: Number of loop iterations consumed
        cost_history: (iteration, best_cost) for every improvement
    """

    start: Node
    goal: Node
    min_cost: float
    best_cost: float = math.inf
    best_parent: int = -1
    iteration: int = 0
    cost_history: List[Tuple[int, float]] = field(default_factory=list)


@dataclass
class PlanResult:
    """
    Outcome of one planning call.

    Attributes:
        found: Whether a start-goal connection was discovered
        path: Cells from start to goal inclusive (empty if not found)
        explored: Tree nodes in insertion order, root first
        cost: Length of the returned path (inf if not found)
        iterations: Iterations consumed from the budget
        cost_history: (iteration, best_cost) for every improvement
    """

    found: bool
    path: List[Tuple[int, int]]
    explored: List[Node]
    cost: float = math.inf
    iterations: int = 0
    cost_history: List[Tuple[int, float]] = field(default_factory=list)


class SampleTreePlanner(PathPlanner):
    """
    Tree-growing planner parameterized by a sampler and an extender.

    The sampler exposes ``draw_sample(grid, state, rng) -> (x, y)`` and the
    extender ``attach(tree, candidate, nearest, grid)``. Subclasses only
    choose default strategies; either can be replaced at construction time.

    Attributes:
        sample_points (int): Iteration budget per planning call
        max_distance (float): Maximum edge length when steering
        optimization_radius (float): Neighborhood radius used by rewiring extenders
        random_seed (Optional[int]): Seed for the per-call random generator
        time_limit (Optional[float]): Optional wall-clock cap in seconds
        stop_at_first_solution (bool): Return as soon as any anchor exists
        tree (TreeStore): Tree built by the last planning call
        explored (List[Node]): Nodes inserted by the last call, in order
    """

    name = 'SampleTree'
    stop_at_first_solution = False

    def __init__(self, grid, config: Optional[Dict[str, Any]] = None,
                 sampler=None, extender=None):
        self._sampler_override = sampler
        self._extender_override = extender
        super().__init__(grid, config)

    def _initialize_algorithm(self) -> None:
        """Read parameters from config and build the strategies."""
        self.tree = TreeStore()
        self.explored: List[Node] = []
        self.state: Optional[SearchState] = None
        self.result: Optional[PlanResult] = None

        params = self.config.get('parameters', {}) or {}
        self.random_seed = params.get('random_seed', None)
        self.time_limit = params.get('time_limit', None)
        self.configure(
            params.get('sample_points', DEFAULT_SAMPLE_POINTS),
            params.get('max_distance', DEFAULT_MAX_DISTANCE),
            params.get('optimization_radius', DEFAULT_OPTIMIZATION_RADIUS),
        )

    def configure(self, sample_points: int, max_distance: float,
                  optimization_radius: float) -> None:
        """
        Set the iteration budget, steering distance and optimization radius.

        Strategies are rebuilt so the new radius takes effect.

        Raises:
            ValueError: If the budget or step distance is not positive, or the
                radius is negative
        """
        if int(sample_points) < 1:
            raise ValueError(f"sample_points must be >= 1, got {sample_points}")
        if not max_distance > 0.0:
            raise ValueError(f"max_distance must be > 0, got {max_distance}")
        if optimization_radius < 0.0:
            raise ValueError(f"optimization_radius must be >= 0, got {optimization_radius}")

        self.sample_points = int(sample_points)
        self.max_distance = float(max_distance)
        self.optimization_radius = float(optimization_radius)

        self.sampler = self._sampler_override or self._make_sampler()
        self.extender = self._extender_override or self._make_extender()

    @abstractmethod
    def _make_sampler(self):
        """Build the default sampler (``draw_sample(grid, state, rng)``)."""
        pass

    @abstractmethod
    def _make_extender(self):
        """Build the default extender (``attach(tree, candidate, nearest, grid)``)."""
        pass

    def _make_endpoint(self, cell: Tuple[int, int], label: str) -> Node:
        x, y = int(cell[0]), int(cell[1])
        if not self.grid.in_bounds(x, y):
            raise InvalidInput(f"{label} ({x}, {y}) is outside the grid")
        if self.grid.is_obstacle(x, y):
            raise InvalidInput(f"{label} ({x}, {y}) is occupied")
        return Node(x, y, cost=0.0, id=self.grid.index(x, y), parent_id=-1)

    def _steer(self, nearest: Node, sample: Tuple[int, int]) -> Optional[Node]:
        """
        Turn a sample into a candidate node, or None if it must be rejected.

        Candidates are rejected when out of bounds, occupied, already in the
        tree, on the goal cell, or not visible from nearest.
        """
        if distance(nearest.xy, sample) <= self.max_distance:
            x, y = sample
        else:
            x, y = step_toward(nearest.xy, sample, self.max_distance)

        if not self.grid.in_bounds(x, y) or self.grid.is_obstacle(x, y):
            return None

        node_id = self.grid.index(x, y)
        if node_id in self.tree or node_id == self.state.goal.id:
            return None
        if not self.grid.line_clear(nearest.x, nearest.y, x, y):
            return None

        return Node(x, y, id=node_id)

    def _update_anchor(self, node: Node) -> None:
        """Record node as the goal anchor if it connects to the goal more cheaply."""
        goal = self.state.goal
        dist = distance(node.xy, goal.xy)
        if dist > self.max_distance or not self.grid.line_clear(node.x, node.y, goal.x, goal.y):
            return

        cost = node.cost + dist
        if cost < self.state.best_cost:
            logger.debug("Iteration %d: anchor (%d, %d), best cost %.3f -> %.3f",
                         self.state.iteration, node.x, node.y, self.state.best_cost, cost)
            self.state.best_cost = cost
            self.state.best_parent = node.id
            self.state.cost_history.append((self.state.iteration, cost))

    def plan(self, start: Tuple[int, int], goal: Tuple[int, int],
             rng: Optional[np.random.Generator] = None) -> PlanResult:
        """
        Grow a tree from start and connect it to goal.

        Args:
            start: Start cell (x, y)
            goal: Goal cell (x, y)
            rng: Random generator to draw from; a new one seeded with
                random_seed is created when omitted

        Returns:
            PlanResult; ``found`` is False if the budget ran out without a
            connection

        Raises:
            InvalidInput: If start or goal is outside the grid or occupied
        """
        start_time = time.time()

        start_node = self._make_endpoint(start, "Start")
        goal_node = self._make_endpoint(goal, "Goal")

        # Initialize tree
        self.tree = TreeStore()
        self.tree.insert(start_node)
        self.explored = [start_node]
        self.state = SearchState(start=start_node, goal=goal_node,
                                 min_cost=distance(start_node.xy, goal_node.xy))
        if rng is None:
            rng = np.random.default_rng(self.random_seed)

        if start_node.id == goal_node.id:
            self.state.best_cost = 0.0
            self.state.best_parent = start_node.id
        else:
            self._update_anchor(start_node)

        # Main loop
        while self.state.iteration < self.sample_points:
            if self.stop_at_first_solution and self.state.best_parent != -1:
                break
            # A straight-line connection cannot be improved
            if self.state.best_cost <= self.state.min_cost:
                break
            if self.time_limit is not None and time.time() - start_time >= self.time_limit:
                logger.warning("%s stopped by time limit after %d iterations",
                               self.name, self.state.iteration)
                break

            self.state.iteration += 1

            sample = self.sampler.draw_sample(self.grid, self.state, rng)
            nearest = self.tree.nearest(*sample)
            candidate = self._steer(nearest, sample)
            if candidate is None:
                continue

            self.extender.attach(self.tree, candidate, nearest, self.grid)
            self.explored.append(candidate)
            self._update_anchor(candidate)

        # Generate path
        nodes = extract_path(self.tree, self.state.best_parent, goal_node)
        self.path = [node.xy for node in nodes] if nodes else None
        self.planning_time = time.time() - start_time

        self.result = PlanResult(
            found=self.path is not None,
            path=list(self.path) if self.path else [],
            explored=list(self.explored),
            cost=polyline_length(self.path) if self.path else math.inf,
            iterations=self.state.iteration,
            cost_history=list(self.state.cost_history),
        )

        if self.result.found:
            logger.info("%s found a path of %d cells (cost %.2f) in %d iterations, %.3fs",
                        self.name, len(self.result.path), self.result.cost,
                        self.result.iterations, self.planning_time)
        else:
            logger.info("%s found no path in %d iterations (%d nodes)",
                        self.name, self.result.iterations, len(self.tree))

        return self.result

    def get_metrics(self) -> Dict[str, Any]:
        """Get performance metrics of the last planning call."""
        return {
            'algorithm': self.name,
            'path_length': self.get_path_length(),
            'planning_time': self.planning_time,
            'nodes_explored': len(self.explored),
            'iterations': self.state.iteration if self.state else 0,
            'tree_size': len(self.tree),
            'best_cost': self.state.best_cost if self.state else math.inf,
            'path_exists': self.path is not None,
        }

    def visualize(self, ax, show_tree: bool = True, **kwargs) -> None:
        """
        Visualize the grid, the tree and the path.

        Args:
            ax: Matplotlib axis
            show_tree: Whether to draw the tree edges
            **kwargs: Overrides for the ``visualization`` config section
        """
        viz = dict(self.config.get('visualization', {}) or {})
        viz.update(kwargs)

        draw_grid(ax, self.grid)
        if show_tree:
            draw_tree(ax, self.tree, color=viz.get('tree_color', 'blue'),
                      alpha=viz.get('tree_alpha', 0.3))
        ellipse = getattr(self.sampler, 'ellipse', None)
        if ellipse is not None and viz.get('show_ellipse', True):
            draw_ellipse(ax, ellipse, color=viz.get('ellipse_color', 'orange'))
        if self.state is not None:
            draw_path(ax, self.path, start=self.state.start.xy, goal=self.state.goal.xy,
                      color=viz.get('path_color', 'green'), label=f"{self.name} Path")

        ax.set_title(f"{self.name}\n"
                     f"Length: {self.get_path_length():.2f}, "
                     f"Time: {self.planning_time:.3f}s, "
                     f"Nodes: {len(self.tree)}")
