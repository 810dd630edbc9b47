"""
RRT* (Rapidly-exploring Random Tree Star) planner.

RRT* keeps RRT's uniform sampling but attaches every new node to the cheapest
visible neighbor within the optimization radius and rewires that neighborhood
through it. The whole iteration budget is used and the cheapest start-goal
connection seen is returned.
"""

from .extension import RewiringAttacher
from .sampling import UniformSampler
from .tree_planner import SampleTreePlanner


class RRTStarPlanner(SampleTreePlanner):
    """RRT* path planning algorithm."""

    name = 'RRT*'

    def _make_sampler(self):
        return UniformSampler()

    def _make_extender(self):
        return RewiringAttacher(self.optimization_radius)

    def get_metrics(self):
        """Get RRT* performance metrics."""
        metrics = super().get_metrics()
        metrics['rewires'] = getattr(self.extender, 'rewire_count', 0)
        return metrics
