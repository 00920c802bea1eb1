"""
Core geometry operations and binary encoding.
"""

from .geometry import (
    DBL_EPSILON,
    ORIGIN_POINT,
    NORTH_POLE,
    SOUTH_POLE,
    normalize,
    latlng_to_point,
    point_to_latlng,
    points_from_degrees,
    points_to_degrees,
    ortho,
    robust_sign,
    ordered_ccw,
    crossing_sign,
    vertex_crossing,
    edge_or_vertex_crossing,
)
from .encoding import ENCODING_VERSION, Encoder

__all__ = [
    'DBL_EPSILON',
    'ORIGIN_POINT',
    'NORTH_POLE',
    'SOUTH_POLE',
    'normalize',
    'latlng_to_point',
    'point_to_latlng',
    'points_from_degrees',
    'points_to_degrees',
    'ortho',
    'robust_sign',
    'ordered_ccw',
    'crossing_sign',
    'vertex_crossing',
    'edge_or_vertex_crossing',
    'ENCODING_VERSION',
    'Encoder',
]
