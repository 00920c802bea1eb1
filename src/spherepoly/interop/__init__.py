"""
Shapely interoperability.
"""

from .shapely_io import (
    ensure_ccw,
    ring_to_numpy,
    loop_from_shapely,
    polygon_from_shapely,
    loop_to_shapely,
    polygon_to_shapely,
)

__all__ = [
    'ensure_ccw',
    'ring_to_numpy',
    'loop_from_shapely',
    'polygon_from_shapely',
    'loop_to_shapely',
    'polygon_to_shapely',
]
