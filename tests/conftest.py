import matplotlib

matplotlib.use('Agg')

import numpy as np
import pytest

from sample_planner.core.occupancy_grid import OccupancyGrid


def planner_config(**params):
    return {'parameters': params}


@pytest.fixture
def open_grid():
    """20x20 grid without obstacles."""
    return OccupancyGrid.from_occupancy(np.zeros((20, 20), dtype=bool))


@pytest.fixture
def wall_grid():
    """20x20 grid with a wall at x=10 and a single gap at y=10."""
    occupied = np.zeros((20, 20), dtype=bool)
    occupied[:, 10] = True
    occupied[10, 10] = False
    return OccupancyGrid.from_occupancy(occupied)


@pytest.fixture
def enclosed_goal_grid():
    """10x10 grid whose cell (8, 8) is fenced in by obstacles."""
    occupied = np.zeros((10, 10), dtype=bool)
    occupied[7:10, 7:10] = True
    occupied[8, 8] = False
    return OccupancyGrid.from_occupancy(occupied)
