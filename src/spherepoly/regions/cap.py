"""
Spherical caps.

A cap is the part of the sphere cut off by a plane. It is stored as a
center point and the squared chord length from the center to the cap
boundary, which avoids trigonometry in containment tests.
"""

import math
from dataclasses import dataclass, field

import numpy as np

from ..core.encoding import Encoder
from ..core.geometry import NORTH_POLE, normalize

# Squared chord length of a cap covering the whole sphere
_FULL_RADIUS2 = 4.0
_EMPTY_RADIUS2 = -1.0


@dataclass(frozen=True, eq=False)
class Cap:
    """
    Spherical cap.

    Attributes
    ----------
    center : np.ndarray
        Unit vector of shape (3,).
    radius2 : float
        Squared chord length of the cap radius. Negative for the empty cap,
        4 for the full cap.
    """
    center: np.ndarray = field(default_factory=lambda: NORTH_POLE.copy())
    radius2: float = _EMPTY_RADIUS2

    @classmethod
    def empty(cls) -> "Cap":
        return cls(NORTH_POLE.copy(), _EMPTY_RADIUS2)

    @classmethod
    def full(cls) -> "Cap":
        return cls(NORTH_POLE.copy(), _FULL_RADIUS2)

    @classmethod
    def from_point(cls, p: np.ndarray) -> "Cap":
        return cls(np.asarray(p, dtype=np.float64), 0.0)

    @classmethod
    def from_center_angle(cls, center: np.ndarray, angle: float) -> "Cap":
        """
        Cap with the given center and angular radius in radians.

        Angles of pi or more give the full cap, negative angles the empty cap.
        """
        center = normalize(center)
        if angle < 0:
            return cls(center, _EMPTY_RADIUS2)
        if angle >= math.pi:
            return cls(center, _FULL_RADIUS2)
        chord = 2.0 * math.sin(0.5 * angle)
        return cls(center, min(_FULL_RADIUS2, chord * chord))

    def is_empty(self) -> bool:
        return self.radius2 < 0

    def is_full(self) -> bool:
        return self.radius2 >= _FULL_RADIUS2

    def height(self) -> float:
        """Distance from the cap plane to the cap apex, 1 - cos(radius)."""
        return 0.5 * self.radius2

    def angle(self) -> float:
        """Angular radius in radians, negative for the empty cap."""
        if self.is_empty():
            return -1.0
        return 2.0 * math.asin(min(1.0, 0.5 * math.sqrt(self.radius2)))

    def contains_point(self, p: np.ndarray) -> bool:
        d = self.center - p
        return float(np.dot(d, d)) <= self.radius2

    def add_point(self, p: np.ndarray) -> "Cap":
        """Smallest cap with the same center that also contains p."""
        p = np.asarray(p, dtype=np.float64)
        if self.is_empty():
            return Cap(p, 0.0)
        d = self.center - p
        dist2 = min(_FULL_RADIUS2, float(np.dot(d, d)))
        return Cap(self.center, max(self.radius2, dist2))

    def encode(self, encoder: Encoder) -> None:
        encoder.write_float64(self.center[0])
        encoder.write_float64(self.center[1])
        encoder.write_float64(self.center[2])
        encoder.write_float64(self.radius2)
