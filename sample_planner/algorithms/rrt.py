"""
RRT (Rapidly-exploring Random Tree) planner.

Grows a tree by uniform sampling and nearest-node extension and returns the
first start-goal connection it discovers.
"""

from .extension import NearestAttacher
from .sampling import UniformSampler
from .tree_planner import SampleTreePlanner


class RRTPlanner(SampleTreePlanner):
    """
    RRT path planning algorithm.

    Example:
        >>> planner = RRTPlanner(grid, {'parameters': {'sample_points': 500,
        ...                                            'max_distance': 5.0}})
        >>> result = planner.plan((0, 0), (19, 19))
    """

    name = 'RRT'
    stop_at_first_solution = True

    def _make_sampler(self):
        return UniformSampler()

    def _make_extender(self):
        return NearestAttacher()
