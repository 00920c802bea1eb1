"""
One-dimensional intervals used by latitude/longitude rectangles.

Interval is a closed interval on the real line (latitudes). S1Interval is a
closed interval on the unit circle (longitudes), which may wrap around
through +-pi.
"""

import math
from dataclasses import dataclass

from ..core.geometry import DBL_EPSILON


@dataclass(frozen=True)
class Interval:
    """
    Closed interval [lo, hi] on the real line.

    The interval is empty iff lo > hi; the canonical empty interval is [1, 0].
    """
    lo: float
    hi: float

    @classmethod
    def empty(cls) -> "Interval":
        return cls(1.0, 0.0)

    @classmethod
    def from_point(cls, p: float) -> "Interval":
        return cls(p, p)

    def is_empty(self) -> bool:
        return self.lo > self.hi

    def length(self) -> float:
        return self.hi - self.lo

    def center(self) -> float:
        return 0.5 * (self.lo + self.hi)

    def contains(self, p: float) -> bool:
        return self.lo <= p <= self.hi

    def contains_interval(self, other: "Interval") -> bool:
        if other.is_empty():
            return True
        return other.lo >= self.lo and other.hi <= self.hi

    def add_point(self, p: float) -> "Interval":
        if self.is_empty():
            return Interval(p, p)
        if p < self.lo:
            return Interval(p, self.hi)
        if p > self.hi:
            return Interval(self.lo, p)
        return self

    def union(self, other: "Interval") -> "Interval":
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        return Interval(min(self.lo, other.lo), max(self.hi, other.hi))

    def intersection(self, other: "Interval") -> "Interval":
        return Interval(max(self.lo, other.lo), min(self.hi, other.hi))

    def expanded(self, margin: float) -> "Interval":
        if self.is_empty():
            return self
        return Interval(self.lo - margin, self.hi + margin)


def _positive_distance(a: float, b: float) -> float:
    # Distance from a to b walking CCW, in [0, 2*pi).
    d = b - a
    if d >= 0:
        return d
    return (b + math.pi) - (a - math.pi)


@dataclass(frozen=True)
class S1Interval:
    """
    Closed interval on the unit circle, endpoints in radians.

    When lo > hi the interval is "inverted" and contains the points from lo
    through +-pi to hi. The full interval is [-pi, pi] and the empty interval
    is [pi, -pi]. The point -pi is normalized to pi everywhere except in the
    full interval.
    """
    lo: float
    hi: float

    @classmethod
    def empty(cls) -> "S1Interval":
        return cls(math.pi, -math.pi)

    @classmethod
    def full(cls) -> "S1Interval":
        return cls(-math.pi, math.pi)

    @classmethod
    def from_endpoints(cls, lo: float, hi: float) -> "S1Interval":
        if lo == -math.pi and hi != math.pi:
            lo = math.pi
        if hi == -math.pi and lo != math.pi:
            hi = math.pi
        return cls(lo, hi)

    @classmethod
    def from_point_pair(cls, a: float, b: float) -> "S1Interval":
        """Shortest interval containing both a and b."""
        return cls.empty().add_point(a).add_point(b)

    def is_full(self) -> bool:
        return self.lo == -math.pi and self.hi == math.pi

    def is_empty(self) -> bool:
        return self.lo == math.pi and self.hi == -math.pi

    def is_inverted(self) -> bool:
        return self.lo > self.hi

    def length(self) -> float:
        length = self.hi - self.lo
        if length >= 0:
            return length
        length += 2 * math.pi
        if length > 0:
            return length
        return -1.0

    def center(self) -> float:
        c = 0.5 * (self.lo + self.hi)
        if not self.is_inverted():
            return c
        if c <= 0:
            return c + math.pi
        return c - math.pi

    def _fast_contains(self, p: float) -> bool:
        if self.is_inverted():
            return (p >= self.lo or p <= self.hi) and not self.is_empty()
        return self.lo <= p <= self.hi

    def contains(self, p: float) -> bool:
        if p == -math.pi:
            p = math.pi
        return self._fast_contains(p)

    def contains_interval(self, other: "S1Interval") -> bool:
        if self.is_inverted():
            if other.is_inverted():
                return other.lo >= self.lo and other.hi <= self.hi
            return (other.lo >= self.lo or other.hi <= self.hi) and not self.is_empty()
        if other.is_inverted():
            return self.is_full() or other.is_empty()
        return other.lo >= self.lo and other.hi <= self.hi

    def add_point(self, p: float) -> "S1Interval":
        """Extend the interval by the shorter way around to include p."""
        if abs(p) > math.pi:
            return self
        if p == -math.pi:
            p = math.pi
        if self._fast_contains(p):
            return self
        if self.is_empty():
            return S1Interval(p, p)
        if _positive_distance(p, self.lo) < _positive_distance(self.hi, p):
            return S1Interval(p, self.hi)
        return S1Interval(self.lo, p)

    def union(self, other: "S1Interval") -> "S1Interval":
        if other.is_empty():
            return self

        if self._fast_contains(other.lo):
            if self._fast_contains(other.hi):
                # Either other is inside self, or together they cover the circle.
                if self.contains_interval(other):
                    return self
                return S1Interval.full()
            return S1Interval(self.lo, other.hi)

        if self._fast_contains(other.hi):
            return S1Interval(other.lo, self.hi)

        # Neither endpoint of other is in self: either self is inside other,
        # or the two are disjoint and we bridge the smaller gap.
        if self.is_empty() or other._fast_contains(self.lo):
            return other

        if _positive_distance(other.hi, self.lo) < _positive_distance(self.hi, other.lo):
            return S1Interval(other.lo, self.hi)
        return S1Interval(self.lo, other.hi)

    def expanded(self, margin: float) -> "S1Interval":
        if margin >= 0:
            if self.is_empty():
                return self
            if self.length() + 2 * margin + 2 * DBL_EPSILON >= 2 * math.pi:
                return S1Interval.full()
        else:
            if self.is_full():
                return self
            if self.length() + 2 * margin - 2 * DBL_EPSILON <= 0:
                return S1Interval.empty()

        result = S1Interval.from_endpoints(
            math.remainder(self.lo - margin, 2 * math.pi),
            math.remainder(self.hi + margin, 2 * math.pi),
        )
        if result.lo <= -math.pi:
            result = S1Interval(math.pi, result.hi)
        return result
