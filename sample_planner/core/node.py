"""
Node class for sample-based tree planners.

Nodes live in a TreeStore and refer to their parent by grid index rather
than by reference, so rewiring is a single id update.
"""


class Node:
    """
    Represents a grid cell in the search tree.

    Attributes:
        x (int): Grid column
        y (int): Grid row
        cost (float): Accumulated path cost from the root
        id (int): Grid index of (x, y), -1 if not yet assigned
        parent_id (int): Grid index of the parent node (-1 for the root)
    """

    def __init__(self, x: int, y: int, cost: float = 0.0, id: int = -1, parent_id: int = -1):
        """
        Initialize a node at given grid coordinates.

        Args:
            x: Grid column
            y: Grid row
            cost: Accumulated cost from the root
            id: Grid index of the cell
            parent_id: Grid index of the parent (-1 when unattached)
        """
        self.x = int(x)
        self.y = int(y)
        self.cost = float(cost)
        self.id = int(id)
        self.parent_id = int(parent_id)

    @property
    def xy(self):
        return (self.x, self.y)

    def __repr__(self) -> str:
        """String representation of the node."""
        return (f"Node({self.x}, {self.y}, cost={self.cost:.2f}, "
                f"id={self.id}, parent_id={self.parent_id})")
