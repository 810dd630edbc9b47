"""
Visualization utilities for grid planners.

This module provides drawing helpers for the occupancy grid, the search
tree, the informed sampling ellipse and the resulting path. All coordinates
are in grid cells, with cell (x, y) centered on the integer point (x, y).
"""

import math
from typing import List, Optional, Tuple

import matplotlib.patches as patches
from matplotlib.collections import LineCollection


def draw_grid(ax, grid, cmap: str = 'Greys'):
    """
    Draw the grid costs as an image, obstacles dark.

    Args:
        ax: Matplotlib axis to draw on
        grid: OccupancyGrid to draw
        cmap: Matplotlib colormap name

    Example:
        >>> fig, ax = plt.subplots()
        >>> draw_grid(ax, grid)
    """
    ax.clear()
    width, height = grid.grid_size()
    ax.imshow(grid.costs, cmap=cmap, origin='lower', vmin=0, vmax=255,
              extent=(-0.5, width - 0.5, -0.5, height - 0.5), zorder=0)
    ax.set_xlabel("X Cell")
    ax.set_ylabel("Y Cell")
    ax.set_aspect('equal', adjustable='box')


def draw_tree(ax, tree, color: str = 'blue', alpha: float = 0.3, linewidth: float = 0.5):
    """
    Draw every tree edge (parent to child) as a thin line.

    Args:
        ax: Matplotlib axis
        tree: TreeStore to draw
        color: Edge color
        alpha: Edge transparency
        linewidth: Edge width
    """
    segments = []
    for node in tree:
        parent = tree.get(node.parent_id)
        if parent is not None:
            segments.append([(parent.x, parent.y), (node.x, node.y)])

    if segments:
        ax.add_collection(LineCollection(segments, colors=color, linewidths=linewidth,
                                         alpha=alpha, zorder=1))


def draw_ellipse(ax, ellipse, color: str = 'orange'):
    """Outline the informed sampling ellipse."""
    patch = patches.Ellipse(
        ellipse.center,
        width=2.0 * ellipse.a,
        height=2.0 * ellipse.b,
        angle=math.degrees(-ellipse.angle),
        fill=False,
        edgecolor=color,
        linestyle='--',
        linewidth=1.5,
        zorder=2
    )
    ax.add_patch(patch)


def draw_path(ax,
              path: Optional[List[Tuple[int, int]]],
              start: Optional[Tuple[int, int]] = None,
              goal: Optional[Tuple[int, int]] = None,
              color: str = 'green',
              label: str = "Path"):
    """
    Draw start, goal and the path between them.

    Args:
        ax: Matplotlib axis
        path: Cells from start to goal, or None
        start: Start cell
        goal: Goal cell
        color: Path color
        label: Path label for the legend
    """
    if path:
        path_x, path_y = zip(*path)
        ax.plot(path_x, path_y, color=color, linewidth=2, label=label,
                zorder=3, marker='o', markersize=3)

    # Draw start point (green)
    if start is not None:
        ax.scatter(*start, color='green', s=100, marker='o',
                   label="Start", zorder=10, edgecolors='black', linewidths=1.5)

    # Draw goal point (red)
    if goal is not None:
        ax.scatter(*goal, color='red', s=100, marker='*',
                   label="Goal", zorder=10, edgecolors='black', linewidths=1.5)

    ax.legend(loc='best')
