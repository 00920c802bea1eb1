"""
Spherepoly - Nested-loop polygons on the sphere.

This package models a spherical polygon as a preorder sequence of nested
loops and exposes it as an indexable shape:
- Shells and holes recovered from per-loop nesting depths
- Global edge numbering with per-loop chains
- Conservative latitude/longitude and cap bounds
- Lossless little-endian binary encoding

Main Classes
------------
Loop : Simple closed loop, interior on its left
Polygon : Nested loops forming a region, usable as a Shape
Rect, Cap : Bounding regions

Example
-------
>>> from spherepoly import Loop, Polygon

>>> triangle = Loop.from_degrees([0, 0, 10], [0, 10, 5])
>>> polygon = Polygon.from_loops([triangle])
>>> polygon.num_edges()
3
>>> data = polygon.to_bytes()
"""

from .core.geometry import (
    ORIGIN_POINT,
    latlng_to_point,
    point_to_latlng,
    points_from_degrees,
    points_to_degrees,
)
from .core.encoding import ENCODING_VERSION, Encoder
from .regions import Cap, Interval, Rect, S1Interval
from .shapes import Chain, ChainPosition, Dimension, Edge, Loop, Polygon, Shape
from .interop.shapely_io import polygon_from_shapely, polygon_to_shapely
from .visualization.plotting import plot_polygon

__all__ = [
    # Points
    'ORIGIN_POINT',
    'latlng_to_point',
    'point_to_latlng',
    'points_from_degrees',
    'points_to_degrees',
    # Encoding
    'ENCODING_VERSION',
    'Encoder',
    # Regions
    'Cap',
    'Interval',
    'Rect',
    'S1Interval',
    # Shapes
    'Chain',
    'ChainPosition',
    'Dimension',
    'Edge',
    'Loop',
    'Polygon',
    'Shape',
    # Interop
    'polygon_from_shapely',
    'polygon_to_shapely',
    # Visualization
    'plot_polygon',
]
