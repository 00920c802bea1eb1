"""
Loops, polygons and the shape contract they expose to spatial indexes.
"""

from .shape import Chain, ChainPosition, Dimension, Edge, Shape
from .loop import Loop
from .polygon import MAX_LINEAR_SEARCH_LOOPS, Polygon

__all__ = [
    'Chain',
    'ChainPosition',
    'Dimension',
    'Edge',
    'Shape',
    'Loop',
    'MAX_LINEAR_SEARCH_LOOPS',
    'Polygon',
]
