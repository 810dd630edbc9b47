import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from sample_planner.algorithms import InformedRRTPlanner
from sample_planner.algorithms.sampling import (
    InformedEllipse,
    InformedSampler,
    UniformSampler,
    sample_unit_disk,
)
from sample_planner.algorithms.tree_planner import SearchState
from sample_planner.core.node import Node
from sample_planner.core.occupancy_grid import OccupancyGrid

from conftest import planner_config


class RecordingSampler(InformedSampler):
    """Informed sampler that remembers the best cost and ellipse of every draw."""

    def __init__(self):
        super().__init__()
        self.draws = []

    def draw_sample(self, grid, state, rng):
        sample = super().draw_sample(grid, state, rng)
        self.draws.append((state.best_cost, self.ellipse, sample))
        return sample


def make_state(start, goal, best_cost=math.inf):
    return SearchState(start=Node(*start), goal=Node(*goal),
                       min_cost=math.hypot(goal[0] - start[0], goal[1] - start[1]),
                       best_cost=best_cost)


def test_ellipse_axes():
    ellipse = InformedEllipse.from_costs((0, 0), (8, 0), 10.0, 8.0)
    assert ellipse.center == (4.0, 0.0)
    assert ellipse.a == pytest.approx(5.0)
    assert ellipse.b == pytest.approx(3.0)


def test_ellipse_is_degenerate_at_minimum_cost():
    ellipse = InformedEllipse.from_costs((0, 0), (8, 0), 8.0, 8.0)
    assert ellipse.b == 0.0


def test_transform_maps_disk_onto_ellipse():
    ellipse = InformedEllipse.from_costs((0, 0), (8, 0), 10.0, 8.0)
    assert ellipse.transform(1.0, 0.0) == pytest.approx((9.0, 0.0))
    assert ellipse.transform(0.0, 1.0) == pytest.approx((4.0, 3.0))
    assert ellipse.transform(0.0, 0.0) == pytest.approx((4.0, 0.0))
    assert ellipse.focal_sum(4.0, 3.0) == pytest.approx(10.0)


def test_transform_aligns_major_axis_with_start_goal_direction():
    ellipse = InformedEllipse.from_costs((0, 0), (0, 8), 10.0, 8.0)
    assert ellipse.transform(1.0, 0.0) == pytest.approx((0.0, 9.0), abs=1e-9)
    assert ellipse.transform(-1.0, 0.0) == pytest.approx((0.0, -1.0), abs=1e-9)

    diagonal = InformedEllipse.from_costs((2, 2), (10, 10), 14.0, math.hypot(8, 8))
    rng = np.random.default_rng(0)
    for _ in range(200):
        x, y = diagonal.transform(*sample_unit_disk(rng))
        assert diagonal.focal_sum(x, y) <= 14.0 + 1e-9


def test_unit_disk_samples_stay_inside():
    rng = np.random.default_rng(1)
    for _ in range(500):
        u, v = sample_unit_disk(rng)
        assert u * u + v * v < 1.0


def test_sampler_is_uniform_until_a_solution_exists(open_grid):
    sampler = InformedSampler()
    rng = np.random.default_rng(2)

    sample = sampler.draw_sample(open_grid, make_state((0, 0), (19, 19)), rng)

    assert open_grid.in_bounds(*sample)
    assert sampler.ellipse is None
    assert isinstance(sampler.fallback, UniformSampler)


def test_informed_samples_respect_grid_bounds():
    grid = OccupancyGrid.from_occupancy(np.zeros((5, 5), dtype=bool))
    sampler = InformedSampler()
    rng = np.random.default_rng(3)
    state = make_state((0, 0), (4, 0), best_cost=6.0)

    for _ in range(200):
        x, y = sampler.draw_sample(grid, state, rng)
        assert grid.in_bounds(x, y)
        # Rounding to a cell moves a point by at most sqrt(0.5)
        assert sampler.ellipse.focal_sum(x, y) <= 6.0 + math.sqrt(2) + 1e-9


def test_sampling_domain_shrinks_with_best_cost():
    grid = OccupancyGrid.from_occupancy(np.zeros((30, 30), dtype=bool))
    sampler = RecordingSampler()
    planner = InformedRRTPlanner(grid, planner_config(sample_points=400, max_distance=5.0,
                                                      optimization_radius=6.0,
                                                      random_seed=5),
                                 sampler=sampler)

    result = planner.plan((1, 1), (28, 28))

    assert result.found
    costs = [cost for _, cost in result.cost_history]
    assert all(later < earlier for earlier, later in zip(costs, costs[1:]))

    informed = [(best, ellipse, sample) for best, ellipse, sample in sampler.draws
                if math.isfinite(best)]
    assert informed
    previous_a = math.inf
    for best, ellipse, (x, y) in informed:
        assert ellipse.a == pytest.approx(best / 2.0)
        assert ellipse.a <= previous_a
        assert ellipse.focal_sum(x, y) <= best + math.sqrt(2) + 1e-9
        previous_a = ellipse.a


def test_direct_connection_needs_no_sampling(open_grid):
    planner = InformedRRTPlanner(open_grid, planner_config(max_distance=5.0))
    result = planner.plan((0, 0), (4, 0))

    assert result.found
    assert result.iterations == 0
    assert result.path == [(0, 0), (4, 0)]


def test_informed_run_is_reproducible(wall_grid):
    config = planner_config(sample_points=300, max_distance=5.0, optimization_radius=6.0,
                            random_seed=17)
    first = InformedRRTPlanner(wall_grid, config).plan((0, 0), (19, 19))
    second = InformedRRTPlanner(wall_grid, config).plan((0, 0), (19, 19))

    assert first.path == second.path
    assert first.cost_history == second.cost_history


def test_visualize_and_metrics(open_grid):
    planner = InformedRRTPlanner(open_grid, planner_config(sample_points=300, random_seed=4))
    planner.plan((0, 0), (19, 19))

    metrics = planner.get_metrics()
    assert metrics['algorithm'] == 'Informed RRT*'
    assert metrics['ellipse_major_axis'] >= metrics['best_cost'] - 1e-9

    fig, ax = plt.subplots()
    planner.visualize(ax)
    assert ax.get_title().startswith('Informed RRT*')
    plt.close(fig)
