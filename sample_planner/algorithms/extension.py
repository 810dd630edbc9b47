"""
Tree extension strategies.

An extender decides how an accepted candidate cell is connected to the tree.
NearestAttacher links it to the node it was steered from (plain RRT).
RewiringAttacher picks the cheapest parent in a radius and then rewires the
neighborhood through the new node (RRT*).
"""

import logging

from ..core.node import Node
from ..core.tree import TreeStore
from ..utils.geometry import distance

logger = logging.getLogger(__name__)


class NearestAttacher:
    """Connect each new node to its nearest tree node."""

    def attach(self, tree: TreeStore, candidate: Node, nearest: Node, grid) -> None:
        """
        Parent the candidate on nearest and insert it.

        Args:
            tree: Tree to insert into
            candidate: Accepted, not yet inserted node
            nearest: Tree node the candidate was steered from
            grid: Grid adapter (unused)
        """
        candidate.parent_id = nearest.id
        candidate.cost = nearest.cost + distance(nearest.xy, candidate.xy)
        tree.insert(candidate)


class RewiringAttacher:
    """
    Cost-minimizing attachment with radius-limited rewiring.

    Improved costs are written to the rewired neighbors only; their
    descendants keep the costs they had, until they are themselves rewired.

    Attributes:
        radius (float): Optimization radius in grid cells
        rewire_count (int): Number of neighbors reparented since construction
    """

    def __init__(self, radius: float):
        self.radius = float(radius)
        self.rewire_count = 0

    def attach(self, tree: TreeStore, candidate: Node, nearest: Node, grid) -> None:
        """
        Insert the candidate under its cheapest visible neighbor, then rewire.

        Args:
            tree: Tree to insert into
            candidate: Accepted, not yet inserted node
            nearest: Tree node the candidate was steered from; used as parent
                when no neighbor in the radius offers a cheaper route
            grid: Grid adapter used for line-of-sight checks
        """
        neighbors = [n for n in tree.within_radius(candidate.x, candidate.y, self.radius)
                     if grid.line_clear(n.x, n.y, candidate.x, candidate.y)]

        # Choose parent
        best = nearest
        best_cost = nearest.cost + distance(nearest.xy, candidate.xy)
        for node in neighbors:
            cost = node.cost + distance(node.xy, candidate.xy)
            if cost < best_cost:
                best, best_cost = node, cost

        candidate.parent_id = best.id
        candidate.cost = best_cost
        tree.insert(candidate)

        # Rewire
        for node in neighbors:
            if node.id == best.id or node.id == tree.root_id:
                continue

            new_cost = candidate.cost + distance(candidate.xy, node.xy)
            if new_cost < node.cost:
                logger.debug("Rewiring (%d, %d) through (%d, %d): %.3f -> %.3f",
                             node.x, node.y, candidate.x, candidate.y, node.cost, new_cost)
                tree.reparent(node.id, candidate.id, new_cost)
                self.rewire_count += 1
