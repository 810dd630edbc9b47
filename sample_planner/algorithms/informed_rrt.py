"""
Informed RRT* planner.

Identical to RRT* until a first solution is found. From then on samples are
drawn from the ellipse whose foci are start and goal and whose major axis is
the best solution cost, so the search concentrates on the region that can
still shorten the path.
"""

from .rrt_star import RRTStarPlanner
from .sampling import InformedSampler


class InformedRRTPlanner(RRTStarPlanner):
    """Informed RRT* path planning algorithm."""

    name = 'Informed RRT*'

    def _make_sampler(self):
        return InformedSampler()

    def get_metrics(self):
        metrics = super().get_metrics()
        ellipse = getattr(self.sampler, 'ellipse', None)
        metrics['ellipse_major_axis'] = 2.0 * ellipse.a if ellipse is not None else None
        return metrics
