"""
Visualization utilities for spherical polygons.

Loops are drawn in planar longitude/latitude degrees. Edges are drawn as
straight segments between vertices, not as great-circle arcs.
"""

from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from ..core.geometry import points_to_degrees
from ..shapes.polygon import Polygon


def plot_polygon(
    polygon: Polygon,
    ax: Optional[plt.Axes] = None,
    show_bound: bool = True,
    title: str = "Polygon",
    show_stats: bool = True
) -> plt.Axes:
    """
    Visualize the loops of a polygon in longitude/latitude.

    Parameters
    ----------
    polygon : Polygon
        Polygon to draw. Empty and full polygons draw no loops.
    ax : plt.Axes, optional
        Matplotlib axes to plot on. Creates new figure if None.
    show_bound : bool
        Whether to outline the rect bound.
    title : str
        Plot title.
    show_stats : bool
        Whether to show loop/vertex counts.

    Returns
    -------
    plt.Axes
        The matplotlib axes object.
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8))

    drawable = not (polygon.is_empty() or polygon.is_full())

    for k in range(polygon.num_loops() if drawable else 0):
        coords = points_to_degrees(polygon.loop(k).vertices)
        closed = np.vstack([coords, coords[0]])

        if polygon.loop_is_hole(k):
            ax.fill(coords[:, 0], coords[:, 1], color='white', zorder=2)
            ax.plot(closed[:, 0], closed[:, 1], 'r--', linewidth=1.5, zorder=3)
        else:
            ax.fill(coords[:, 0], coords[:, 1], alpha=0.3, color='steelblue', zorder=1)
            ax.plot(closed[:, 0], closed[:, 1], 'k-', linewidth=2, zorder=3)

        ax.scatter(coords[:, 0], coords[:, 1], c='black', s=20, zorder=4)

    bound = polygon.rect_bound()
    if show_bound and not bound.is_empty():
        lat_lo, lat_hi = np.degrees([bound.lat.lo, bound.lat.hi])
        lng_lo, lng_hi = np.degrees([bound.lng.lo, bound.lng.hi])
        if bound.lng.is_inverted():
            # Draw the part east of lng_lo; the wrapped part is out of view
            lng_hi = 180.0
        ax.add_patch(Rectangle(
            (lng_lo, lat_lo), lng_hi - lng_lo, lat_hi - lat_lo,
            fill=False, edgecolor='gray', linestyle=':', linewidth=1, zorder=0,
            label='Bound'
        ))

    if show_stats:
        stats_text = (
            f"Loops: {polygon.num_loops()}\n"
            f"Vertices: {polygon.num_vertices()}\n"
            f"Holes: {polygon.has_holes()}"
        )
        ax.text(
            0.02, 0.98, stats_text,
            transform=ax.transAxes,
            verticalalignment='top',
            fontfamily='monospace',
            fontsize=9,
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8)
        )

    ax.set_xlabel('Longitude (deg)')
    ax.set_ylabel('Latitude (deg)')
    ax.set_title(title)
    ax.set_aspect('equal', adjustable='datalim')
    ax.grid(True, alpha=0.3)

    return ax
