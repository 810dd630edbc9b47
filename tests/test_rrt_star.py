import math
import time

import numpy as np
import pytest

from sample_planner.algorithms import RRTPlanner, RRTStarPlanner
from sample_planner.algorithms.extension import RewiringAttacher
from sample_planner.core.node import Node
from sample_planner.core.occupancy_grid import OccupancyGrid
from sample_planner.core.tree import TreeStore

from conftest import planner_config


class CheckingAttacher(RewiringAttacher):
    """Rewiring attacher that verifies the tree after every attachment."""

    def __init__(self, radius):
        super().__init__(radius)
        self.checks = 0

    def attach(self, tree, candidate, nearest, grid):
        super().attach(tree, candidate, nearest, grid)
        tree.check_invariants()
        self.checks += 1


def test_tree_stays_acyclic_after_every_rewire(wall_grid):
    extender = CheckingAttacher(8.0)
    planner = RRTStarPlanner(wall_grid, planner_config(sample_points=300, max_distance=5.0,
                                                       random_seed=6),
                             extender=extender)
    result = planner.plan((0, 0), (19, 19))

    assert extender.checks == len(result.explored) - 1
    assert extender.rewire_count > 0


def test_stored_costs_never_underestimate_chains(open_grid):
    planner = RRTStarPlanner(open_grid, planner_config(sample_points=400, max_distance=5.0,
                                                       optimization_radius=7.0,
                                                       random_seed=12))
    planner.plan((0, 0), (19, 19))

    for node in planner.tree:
        assert node.cost >= planner.tree.chain_cost(node.id) - 1e-9


def test_optimizing_is_no_worse_than_base_for_same_samples(open_grid):
    config = planner_config(sample_points=500, max_distance=5.0, optimization_radius=5.0,
                            random_seed=11)

    base = RRTPlanner(open_grid, config).plan((0, 0), (19, 19))
    optimized = RRTStarPlanner(open_grid, config).plan((0, 0), (19, 19))

    assert base.found and optimized.found
    assert optimized.cost <= base.cost + 1e-9
    assert optimized.iterations >= base.iterations


def test_best_cost_only_decreases(open_grid):
    planner = RRTStarPlanner(open_grid, planner_config(sample_points=500, random_seed=5))
    result = planner.plan((0, 0), (19, 19))

    costs = [cost for _, cost in result.cost_history]
    assert costs
    assert all(later < earlier for earlier, later in zip(costs, costs[1:]))
    assert result.cost <= costs[-1] + 1e-9


def test_consecutive_cells_within_step_when_radius_matches(open_grid):
    planner = RRTStarPlanner(open_grid, planner_config(sample_points=500, max_distance=5.0,
                                                       optimization_radius=5.0,
                                                       random_seed=9))
    result = planner.plan((0, 0), (19, 19))

    assert result.found
    assert result.path[0] == (0, 0) and result.path[-1] == (19, 19)
    for a, b in zip(result.path, result.path[1:]):
        assert math.hypot(b[0] - a[0], b[1] - a[1]) <= 5.0
    assert planner.validate_path()


def test_parent_is_cheapest_visible_neighbor():
    grid = OccupancyGrid.from_occupancy(np.zeros((10, 10), dtype=bool))
    tree = TreeStore()
    root = Node(0, 0, id=grid.index(0, 0))
    detour = Node(0, 4, cost=9.0, id=grid.index(0, 4), parent_id=root.id)
    tree.insert(root)
    tree.insert(detour)

    candidate = Node(2, 4, id=grid.index(2, 4))
    RewiringAttacher(5.0).attach(tree, candidate, detour, grid)

    assert candidate.parent_id == root.id
    assert candidate.cost == pytest.approx(math.hypot(2, 4))
    # The detour is cheaper through the new node now
    assert detour.parent_id == candidate.id
    assert detour.cost == pytest.approx(math.hypot(2, 4) + 2.0)


def test_rewiring_does_not_cascade_to_descendants():
    grid = OccupancyGrid.from_occupancy(np.zeros((8, 12), dtype=bool))
    tree = TreeStore()
    root = Node(0, 0, cost=0.0, id=grid.index(0, 0))
    p = Node(0, 5, cost=5.0, id=grid.index(0, 5), parent_id=root.id)
    m = Node(5, 5, cost=10.0, id=grid.index(5, 5), parent_id=p.id)
    c = Node(10, 5, cost=15.0, id=grid.index(10, 5), parent_id=m.id)
    for node in (root, p, m, c):
        tree.insert(node)

    attacher = RewiringAttacher(6.0)
    candidate = Node(3, 2, id=grid.index(3, 2))
    attacher.attach(tree, candidate, root, grid)

    tree.check_invariants()
    assert candidate.parent_id == root.id
    assert m.parent_id == candidate.id
    assert m.cost == pytest.approx(2 * math.hypot(2, 3))
    assert attacher.rewire_count == 1

    # c still carries the cost it had through the old route
    assert c.parent_id == m.id
    assert c.cost == 15.0
    assert tree.chain_cost(c.id) == pytest.approx(2 * math.hypot(2, 3) + 5.0)
    assert c.cost > tree.chain_cost(c.id)


def test_root_is_never_rewired():
    grid = OccupancyGrid.from_occupancy(np.zeros((10, 10), dtype=bool))
    tree = TreeStore()
    root = Node(5, 5, id=grid.index(5, 5))
    tree.insert(root)

    RewiringAttacher(10.0).attach(tree, Node(6, 5, id=grid.index(6, 5)), root, grid)

    assert root.parent_id == -1
    assert root.cost == 0.0


def test_metrics_include_rewires(open_grid):
    planner = RRTStarPlanner(open_grid, planner_config(sample_points=200, random_seed=3))
    planner.plan((0, 0), (19, 19))

    metrics = planner.get_metrics()
    assert metrics['algorithm'] == 'RRT*'
    assert metrics['rewires'] == planner.extender.rewire_count


class SlowSampler:
    """Returns one fixed sample; every call after the first waits ``delay`` seconds."""

    def __init__(self, sample, delay):
        self.sample = sample
        self.delay = delay
        self.calls = 0

    def draw_sample(self, grid, state, rng):
        if self.calls:
            time.sleep(self.delay)
        self.calls += 1
        return self.sample


def test_time_limit_returns_the_anchor_found_so_far():
    occupied = np.zeros((10, 10), dtype=bool)
    occupied[5, 5] = True
    grid = OccupancyGrid.from_occupancy(occupied)
    planner = RRTStarPlanner(grid, planner_config(sample_points=1000, max_distance=5.0,
                                                  time_limit=0.5),
                             sampler=SlowSampler((5, 7), delay=0.6))

    result = planner.plan((3, 5), (7, 5))

    assert result.iterations == 2
    assert result.found
    assert result.path == [(3, 5), (5, 7), (7, 5)]
    assert result.cost == pytest.approx(2 * math.hypot(2, 2))
