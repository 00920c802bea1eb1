"""
Conversion between spherical polygons and planar shapely geometries.

Shapely coordinates are (longitude, latitude) pairs in degrees. Planar
edges are replaced by great-circle arcs and vice versa, which is only a
good approximation for small rings. Rings crossing the antimeridian are
not handled.
"""

import numpy as np
from shapely.geometry import LinearRing, MultiPolygon
from shapely.geometry import Polygon as ShapelyPolygon

from ..core.geometry import points_to_degrees
from ..shapes.loop import Loop
from ..shapes.polygon import Polygon


def ensure_ccw(ring: np.ndarray) -> np.ndarray:
    """
    Ensure ring vertices are in counter-clockwise order.

    Orientation is decided by shapely's signed-area test on the planar ring.

    Parameters
    ----------
    ring : np.ndarray
        Ring vertices of shape (M, 2), as [lng, lat] rows, M >= 3.

    Returns
    -------
    np.ndarray
        Ring vertices in CCW order.
    """
    if LinearRing(ring).is_ccw:
        return ring
    return ring[::-1].copy()


def ring_to_numpy(ring) -> np.ndarray:
    """
    Convert a shapely ring (or a sequence of coordinates) to an array.

    Returns
    -------
    np.ndarray
        Ring vertices of shape (M, 2), without the closing duplicate vertex
        that shapely adds.
    """
    coords = np.asarray(getattr(ring, 'coords', ring), dtype=np.float64)
    if len(coords) > 1 and np.allclose(coords[0], coords[-1]):
        coords = coords[:-1]
    return coords


def loop_from_shapely(geom) -> Loop:
    """
    Build a loop from a shapely ring, or from a polygon's exterior.

    The ring is oriented CCW first, so the loop encloses the region the
    ring bounds.

    Parameters
    ----------
    geom : LinearRing or Polygon
        Ring in (lng, lat) degrees.

    Returns
    -------
    Loop
    """
    if isinstance(geom, ShapelyPolygon):
        geom = geom.exterior

    coords = ring_to_numpy(geom)
    if len(coords) < 3:
        raise ValueError(f"Need at least 3 ring vertices, got {len(coords)}")

    coords = ensure_ccw(coords)
    return Loop.from_degrees(coords[:, 1], coords[:, 0])


def polygon_from_shapely(geom) -> Polygon:
    """
    Build a polygon from a shapely Polygon or MultiPolygon.

    Each shell becomes a loop at depth 0, immediately followed by its holes
    at depth 1. Holes are re-oriented CCW so that each loop encloses its own
    ring; hole points are then inside two loops and drop out of the interior.

    Parameters
    ----------
    geom : Polygon or MultiPolygon
        Valid planar geometry in (lng, lat) degrees.

    Returns
    -------
    Polygon
    """
    if geom.is_empty:
        return Polygon.empty()

    if isinstance(geom, ShapelyPolygon):
        parts = [geom]
    elif isinstance(geom, MultiPolygon):
        parts = list(geom.geoms)
    else:
        raise ValueError(f"Expected Polygon or MultiPolygon, got {geom.geom_type}")

    loops = []
    depths = []
    for part in parts:
        loops.append(loop_from_shapely(part.exterior))
        depths.append(0)
        for interior in part.interiors:
            loops.append(loop_from_shapely(interior))
            depths.append(1)

    if len(loops) == 1:
        return Polygon.from_loops(loops)
    return Polygon.from_ordered_loops(loops, depths)


def loop_to_shapely(loop: Loop) -> ShapelyPolygon:
    """
    Planar polygon for a loop. The empty loop gives an empty polygon.
    """
    if loop.is_empty():
        return ShapelyPolygon()
    if loop.is_full():
        raise ValueError("The full loop has no planar representation")
    return ShapelyPolygon(points_to_degrees(loop.vertices))


def polygon_to_shapely(polygon: Polygon):
    """
    Planar geometry for a polygon.

    Every shell becomes a shapely exterior and its direct children become
    interiors. Shells nested inside holes become separate parts.

    Returns
    -------
    Polygon or MultiPolygon
        A single Polygon when there is one shell, otherwise a MultiPolygon.
    """
    if polygon.is_empty():
        return ShapelyPolygon()
    if polygon.is_full():
        raise ValueError("The full polygon has no planar representation")

    parts = []
    for k in range(polygon.num_loops()):
        if polygon.loop_is_hole(k):
            continue

        shell = points_to_degrees(polygon.loop(k).vertices)
        holes = [
            LinearRing(points_to_degrees(polygon.loop(j).vertices))
            for j in range(k + 1, polygon.last_descendant(k) + 1)
            if polygon.parent(j) == k
        ]
        parts.append(ShapelyPolygon(shell, holes))

    if len(parts) == 1:
        return parts[0]
    return MultiPolygon(parts)
