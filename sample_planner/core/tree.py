"""
Tree store and path extraction for sample-based planners.

The tree is an arena: nodes are kept in a dict keyed by their grid index and
parent links are plain ids. Reparenting a node during rewiring is therefore a
single id update on the node.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .errors import InvariantViolation
from .node import Node
from ..utils.geometry import distance

logger = logging.getLogger(__name__)


class TreeStore:
    """
    Mapping from grid index to tree node.

    The first node inserted is the root. It is never reparented or removed.

    Attributes:
        root_id (int): Id of the root node, -1 while the store is empty
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}
        self.root_id = -1

    def insert(self, node: Node) -> None:
        """
        Add a node to the tree.

        Args:
            node: Node to add; its parent must already be stored unless this
                is the first (root) node

        Raises:
            InvariantViolation: If the id is already present or the parent is missing
        """
        if node.id in self._nodes:
            raise InvariantViolation(f"Duplicate node id {node.id} at ({node.x}, {node.y})")

        if self.root_id == -1:
            self.root_id = node.id
        elif node.parent_id not in self._nodes:
            raise InvariantViolation(
                f"Node {node.id} refers to missing parent {node.parent_id}")

        self._nodes[node.id] = node

    def reparent(self, node_id: int, parent_id: int, cost: float) -> None:
        """
        Attach an existing node to a new parent with a new cost.

        Descendants of the node keep their stored costs.

        Raises:
            InvariantViolation: If the node is the root, either id is unknown,
                or the new link would close a cycle
        """
        if node_id == self.root_id:
            raise InvariantViolation("The root node cannot be reparented")
        if node_id not in self._nodes or parent_id not in self._nodes:
            raise InvariantViolation(f"Cannot reparent {node_id} onto {parent_id}: unknown id")

        # The new parent must not descend from the node being moved.
        for ancestor in self.ancestors(parent_id):
            if ancestor.id == node_id:
                raise InvariantViolation(
                    f"Reparenting {node_id} onto {parent_id} would create a cycle")

        node = self._nodes[node_id]
        node.parent_id = parent_id
        node.cost = cost

    def ancestors(self, node_id: int) -> Iterator[Node]:
        """
        Yield the node and each of its ancestors up to the root.

        Raises:
            InvariantViolation: On a dangling parent link or a cycle
        """
        visited = set()
        current = node_id
        while current != -1:
            if current in visited:
                raise InvariantViolation(f"Cycle detected in parent chain at node {current}")
            visited.add(current)

            node = self._nodes.get(current)
            if node is None:
                raise InvariantViolation(f"Parent chain refers to missing node {current}")
            yield node
            current = node.parent_id

    def chain_cost(self, node_id: int) -> float:
        """Length of the parent chain from node_id to the root, recomputed from geometry."""
        chain = list(self.ancestors(node_id))
        return sum(distance(chain[i].xy, chain[i + 1].xy) for i in range(len(chain) - 1))

    def check_invariants(self) -> None:
        """
        Verify every node reaches the root through its parents.

        Raises:
            InvariantViolation: If any chain is broken, cyclic or rooted elsewhere
        """
        for node_id in self._nodes:
            *_, last = self.ancestors(node_id)
            if last.id != self.root_id:
                raise InvariantViolation(
                    f"Node {node_id} is rooted at {last.id}, not at {self.root_id}")

    def nearest(self, x: float, y: float) -> Node:
        """
        Find the stored node closest to (x, y).

        Ties go to the node inserted first.
        """
        return min(self._nodes.values(),
                   key=lambda n: (n.x - x) ** 2 + (n.y - y) ** 2)

    def within_radius(self, x: float, y: float, radius: float) -> List[Node]:
        """All stored nodes whose Euclidean distance to (x, y) is at most radius."""
        radius_sq = radius * radius
        return [n for n in self._nodes.values()
                if (n.x - x) ** 2 + (n.y - y) ** 2 <= radius_sq]

    def get(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def __getitem__(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"TreeStore(nodes={len(self._nodes)}, root_id={self.root_id})"


def extract_path(tree: TreeStore, anchor_id: int, goal: Node) -> List[Node]:
    """
    Build the start-to-goal node sequence through an anchor node.

    Walks parent links from the anchor back to the root, then attaches the
    goal after the anchor.

    Args:
        tree: Tree holding the anchor and its ancestors
        anchor_id: Id of the node connected directly to the goal
        goal: Goal node

    Returns:
        Nodes ordered from start to goal, or an empty list if anchor_id is
        not in the tree

    Raises:
        InvariantViolation: If the parent chain is cyclic or broken
    """
    anchor = tree.get(anchor_id)
    if anchor is None:
        logger.debug("Anchor %d is not in the tree", anchor_id)
        return []

    path = list(tree.ancestors(anchor_id))
    if path[-1].id != tree.root_id:
        raise InvariantViolation(f"Anchor {anchor_id} does not lead back to the root")

    if goal.id != anchor.id:
        path.insert(0, Node(goal.x, goal.y,
                            cost=anchor.cost + distance(anchor.xy, goal.xy),
                            id=goal.id,
                            parent_id=anchor.id))

    return path[::-1]  # Reverse to get start-to-goal order
