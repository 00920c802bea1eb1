"""
Bounding regions: intervals, latitude-longitude rectangles and caps.
"""

from .interval import Interval, S1Interval
from .cap import Cap
from .rect import Rect, RectBounder, expand_for_subregion_bound

__all__ = [
    'Interval',
    'S1Interval',
    'Cap',
    'Rect',
    'RectBounder',
    'expand_for_subregion_bound',
]
