"""
Latitude-longitude rectangles and conservative edge bounds.

A Rect is the product of a latitude Interval and a longitude S1Interval.
RectBounder computes the bound of a chain of great-circle edges, which can
reach further north or south than its endpoints. The bounds it returns
are conservative: every point that passes a containment test against the
edges is inside the bound, even with floating-point error.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..core.encoding import ENCODING_VERSION, Encoder
from ..core.geometry import DBL_EPSILON, latlng_to_point, point_to_latlng
from .cap import Cap
from .interval import Interval, S1Interval

_VALID_LAT = Interval(-math.pi / 2, math.pi / 2)


@dataclass(frozen=True)
class Rect:
    """
    Closed latitude/longitude rectangle, in radians.

    Attributes
    ----------
    lat : Interval
        Latitude range, within [-pi/2, pi/2].
    lng : S1Interval
        Longitude range; may wrap around the antimeridian.
    """
    lat: Interval
    lng: S1Interval

    @classmethod
    def empty(cls) -> "Rect":
        return cls(Interval.empty(), S1Interval.empty())

    @classmethod
    def full(cls) -> "Rect":
        return cls(_VALID_LAT, S1Interval.full())

    @classmethod
    def from_latlng(cls, lat: float, lng: float) -> "Rect":
        return cls(Interval.from_point(lat), S1Interval.empty().add_point(lng))

    def is_empty(self) -> bool:
        return self.lat.is_empty()

    def is_full(self) -> bool:
        return self.lat == _VALID_LAT and self.lng.is_full()

    def center(self) -> Tuple[float, float]:
        return self.lat.center(), self.lng.center()

    def vertex(self, k: int) -> Tuple[float, float]:
        """
        Corner k as (lat, lng), in CCW order starting at the lower-left.
        """
        k %= 4
        lat = self.lat.lo if k < 2 else self.lat.hi
        lng = self.lng.lo if k in (0, 3) else self.lng.hi
        return lat, lng

    def add_latlng(self, lat: float, lng: float) -> "Rect":
        return Rect(self.lat.add_point(lat), self.lng.add_point(lng))

    def add_point(self, p: np.ndarray) -> "Rect":
        return self.add_latlng(*point_to_latlng(p))

    def union(self, other: "Rect") -> "Rect":
        return Rect(self.lat.union(other.lat), self.lng.union(other.lng))

    def contains_latlng(self, lat: float, lng: float) -> bool:
        return self.lat.contains(lat) and self.lng.contains(lng)

    def contains_point(self, p: np.ndarray) -> bool:
        return self.contains_latlng(*point_to_latlng(p))

    def contains(self, other: "Rect") -> bool:
        return self.lat.contains_interval(other.lat) and self.lng.contains_interval(other.lng)

    def expanded(self, lat_margin: float, lng_margin: float = 0.0) -> "Rect":
        """
        Expand by the given margins in radians, clamping latitude to the
        valid range. Negative margins shrink the rectangle.
        """
        lat = self.lat.expanded(lat_margin)
        lng = self.lng.expanded(lng_margin)
        if lat.is_empty() or lng.is_empty():
            return Rect.empty()
        return Rect(lat.intersection(_VALID_LAT), lng)

    def polar_closure(self) -> "Rect":
        """
        A rectangle touching a pole contains every longitude at that pole,
        so widen the longitude range to full.
        """
        if self.lat.lo == -math.pi / 2 or self.lat.hi == math.pi / 2:
            return Rect(self.lat, S1Interval.full())
        return self

    def cap_bound(self) -> Cap:
        """
        Bounding cap.

        Uses the smaller of a cap centered on the nearer pole and, for
        rectangles spanning at most pi in longitude, a cap centered on the
        rectangle center through its corners.
        """
        if self.is_empty():
            return Cap.empty()

        if self.lat.lo + self.lat.hi < 0:
            pole_z = -1.0
            pole_angle = math.pi / 2 + self.lat.hi
        else:
            pole_z = 1.0
            pole_angle = math.pi / 2 - self.lat.lo
        pole_cap = Cap.from_center_angle(np.array([0.0, 0.0, pole_z]), pole_angle)

        if not self.lng.is_full() and self.lng.length() <= math.pi:
            mid_cap = Cap.from_point(latlng_to_point(*self.center()))
            for k in range(4):
                mid_cap = mid_cap.add_point(latlng_to_point(*self.vertex(k)))
            if mid_cap.height() < pole_cap.height():
                return mid_cap

        return pole_cap

    def encode(self, encoder: Encoder) -> None:
        encoder.write_int8(ENCODING_VERSION)
        encoder.write_float64(self.lat.lo)
        encoder.write_float64(self.lat.hi)
        encoder.write_float64(self.lng.lo)
        encoder.write_float64(self.lng.hi)


class RectBounder:
    """
    Accumulates a bound for a chain of edges AB, BC, CD, ...

    Feed the vertices in order with add_point(); to bound a closed loop, add
    the first vertex again at the end.

    Examples
    --------
    >>> bounder = RectBounder()
    >>> for v in vertices:
    ...     bounder.add_point(v)
    >>> bound = bounder.rect_bound()
    """

    def __init__(self):
        self._a: Optional[np.ndarray] = None
        self._a_latlng: Tuple[float, float] = (0.0, 0.0)
        self._bound = Rect.empty()

    def add_point(self, b: np.ndarray) -> None:
        b = np.asarray(b, dtype=np.float64)
        b_lat, b_lng = point_to_latlng(b)

        if self._bound.is_empty():
            self._bound = self._bound.add_latlng(b_lat, b_lng)
        else:
            self._add_edge(self._a, self._a_latlng, b, (b_lat, b_lng))

        self._a = b
        self._a_latlng = (b_lat, b_lng)

    def _add_edge(self, a, a_latlng, b, b_latlng) -> None:
        a_lat, a_lng = a_latlng
        b_lat, b_lng = b_latlng

        # N = A x B, computed as (A - B) x (A + B) for accuracy when A ~ B
        n = np.cross(a - b, a + b)
        n_norm = float(np.linalg.norm(n))

        if n_norm < 1.91346e-15:
            # A and B are nearly identical or nearly antipodal
            if float(np.dot(a, b)) < 0:
                self._bound = Rect.full()
            else:
                edge = Rect.from_latlng(a_lat, a_lng).add_latlng(b_lat, b_lng)
                self._bound = self._bound.union(edge)
            return

        lng_ab = S1Interval.from_point_pair(a_lng, b_lng)
        if lng_ab.length() >= math.pi - 2 * DBL_EPSILON:
            # Endpoints on nearly opposite meridians
            lng_ab = S1Interval.full()

        lat_ab = Interval.from_point(a_lat).add_point(b_lat)

        # M is perpendicular to N and passes through the north pole. The
        # latitude extremum is inside AB iff A and B are on opposite sides of
        # the plane through M.
        m = np.cross(n, np.array([0.0, 0.0, 1.0]))
        m_a = float(np.dot(m, a))
        m_b = float(np.dot(m, b))
        m_error = 6.06638e-16 * n_norm + 6.83174e-31

        if m_a * m_b < 0 or abs(m_a) <= m_error or abs(m_b) <= m_error:
            max_lat = min(
                math.atan2(math.hypot(n[0], n[1]), abs(n[2])) + 3 * DBL_EPSILON,
                math.pi / 2,
            )
            lat_budget = 2 * math.asin(0.5 * float(np.linalg.norm(a - b)) * math.sin(max_lat))
            max_delta = 0.5 * (lat_budget - lat_ab.length()) + DBL_EPSILON

            if m_a <= m_error and m_b >= -m_error:
                lat_ab = Interval(lat_ab.lo, min(max_lat, lat_ab.hi + max_delta))
            if m_b <= m_error and m_a >= -m_error:
                lat_ab = Interval(max(-max_lat, lat_ab.lo - max_delta), lat_ab.hi)

        self._bound = self._bound.union(Rect(lat_ab, lng_ab))

    def rect_bound(self) -> Rect:
        """Accumulated bound, padded for latitude rounding error."""
        return self._bound.expanded(2 * DBL_EPSILON, 0.0).polar_closure()


def expand_for_subregion_bound(bound: Rect) -> Rect:
    """
    Expand a bound so that it contains the bound of any region it contains.

    If region A contains region B, the computed bound of B may still poke
    slightly outside the computed bound of A. The returned rectangle is large
    enough that expand_for_subregion_bound(A.bound) contains B.bound.

    Parameters
    ----------
    bound : Rect
        Conservative bound of a region.

    Returns
    -------
    Rect
        Expanded bound; Rect.full() when the bound nearly covers the sphere.
    """
    if bound.is_empty():
        return bound

    lng_gap = max(0.0, math.pi - bound.lng.length() - 2.5 * DBL_EPSILON)
    min_abs_lat = max(bound.lat.lo, -bound.lat.hi)
    lat_gap_south = math.pi / 2 + bound.lat.lo
    lat_gap_north = math.pi / 2 - bound.lat.hi

    if min_abs_lat >= 0:
        # Does not straddle the equator
        if 2 * min_abs_lat + lng_gap < 1.354e-15:
            return Rect.full()
    elif lng_gap >= math.pi / 2:
        # Straddles the equator, spans less than 90 degrees of longitude
        if lat_gap_south + lat_gap_north < 1.687e-15:
            return Rect.full()
    elif max(lat_gap_south, lat_gap_north) * lng_gap < 1.765e-15:
        return Rect.full()

    # Close last: the expansion may reach a pole
    return bound.expanded(9 * DBL_EPSILON, 0.0).polar_closure()
