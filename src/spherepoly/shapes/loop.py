"""
Simple closed loops on the sphere.

A loop is a closed chain of great-circle edges whose interior is the region
on its left. Two special single-vertex loops exist: the empty loop, which
contains no points, and the full loop, which contains the whole sphere.
"""

from typing import Optional

import numpy as np

from ..core.encoding import ENCODING_VERSION, Encoder
from ..core.geometry import (
    NORTH_POLE,
    ORIGIN_POINT,
    SOUTH_POLE,
    edge_or_vertex_crossing,
    ordered_ccw,
    ortho,
    points_from_degrees,
)
from ..regions.cap import Cap
from ..regions.interval import Interval, S1Interval
from ..regions.rect import Rect, RectBounder, expand_for_subregion_bound
from .shape import Chain, ChainPosition, Dimension, Edge, Shape


class Loop(Shape):
    """
    Closed loop of vertices with its interior on the left.

    Parameters
    ----------
    vertices : array-like
        Vertices of shape (N, 3). They are normalized to unit length. The
        last vertex is implicitly joined to the first.

    Attributes
    ----------
    depth : int
        Nesting depth inside the owning polygon. Set by the polygon; 0 for a
        loop that does not belong to one.
    """

    def __init__(self, vertices):
        vertices = np.asarray(vertices, dtype=np.float64)

        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise ValueError(f"Expected vertices of shape (N, 3), got {vertices.shape}")

        if len(vertices) == 0:
            raise ValueError("A loop needs at least one vertex")

        norms = np.linalg.norm(vertices, axis=1)
        if np.any(norms == 0):
            raise ValueError("Loop vertices must be non-zero vectors")

        self._vertices = vertices / norms[:, np.newaxis]
        self._vertices.setflags(write=False)
        self.depth = 0

        self._origin_inside = False
        self._init_origin()
        self._init_bound()

    @classmethod
    def empty(cls) -> "Loop":
        """The loop containing no points: a single vertex at the north pole."""
        return cls(NORTH_POLE[np.newaxis, :])

    @classmethod
    def full(cls) -> "Loop":
        """The loop containing every point: a single vertex at the south pole."""
        return cls(SOUTH_POLE[np.newaxis, :])

    @classmethod
    def from_degrees(cls, lats, lngs) -> "Loop":
        """Build a loop from latitude and longitude sequences in degrees."""
        return cls(points_from_degrees(lats, lngs))

    def _init_origin(self) -> None:
        n = len(self._vertices)
        if n < 3:
            # Only the special loops have a meaningful answer here
            self._origin_inside = bool(self.is_empty_or_full() and self._vertices[0, 2] < 0)
            return

        # Guess that the origin is outside, then check the guess against the
        # local orientation at vertex 1, which is inside iff the wedge
        # v0-v1-v2 opens to the left.
        v0, v1, v2 = self._vertices[0], self._vertices[1], self._vertices[2]
        v1_inside = ordered_ccw(ortho(v1), v0, v2, v1)
        self._origin_inside = False
        if v1_inside != self.contains_point(v1):
            self._origin_inside = True

    def _init_bound(self) -> None:
        if self.is_empty_or_full():
            self._bound = Rect.empty() if self.is_empty() else Rect.full()
            self._subregion_bound = self._bound
            return

        bounder = RectBounder()
        for i in range(len(self._vertices) + 1):
            bounder.add_point(self.vertex(i))
        bound = bounder.rect_bound()

        if self.contains_point(NORTH_POLE):
            bound = Rect(Interval(bound.lat.lo, np.pi / 2), S1Interval.full())

        # Containing the south pole implies full longitude, either from
        # wrapping around it or from also containing the north pole.
        if bound.lng.is_full() and self.contains_point(SOUTH_POLE):
            bound = Rect(Interval(-np.pi / 2, bound.lat.hi), bound.lng)

        self._bound = bound
        self._subregion_bound = expand_for_subregion_bound(bound)

    @property
    def vertices(self) -> np.ndarray:
        """Read-only array of vertices, shape (N, 3)."""
        return self._vertices

    def num_vertices(self) -> int:
        return len(self._vertices)

    def vertex(self, i: int) -> np.ndarray:
        """Vertex i, with indices taken modulo the vertex count."""
        return self._vertices[i % len(self._vertices)]

    def is_empty_or_full(self) -> bool:
        return len(self._vertices) == 1

    def is_empty(self) -> bool:
        return self.is_empty_or_full() and not self._origin_inside

    def is_full(self) -> bool:
        return self.is_empty_or_full() and self._origin_inside

    def contains_point(self, p: np.ndarray) -> bool:
        """
        Point containment by crossing parity along the arc from ORIGIN_POINT.

        Parameters
        ----------
        p : np.ndarray
            Unit vector of shape (3,).

        Returns
        -------
        bool
            True if p is inside the loop.
        """
        if len(self._vertices) < 3:
            return self._origin_inside

        inside = self._origin_inside
        n = len(self._vertices)
        for i in range(n):
            c = self._vertices[i]
            d = self._vertices[(i + 1) % n]
            if edge_or_vertex_crossing(ORIGIN_POINT, p, c, d):
                inside = not inside
        return inside

    def rect_bound(self) -> Rect:
        return self._bound

    def subregion_bound(self) -> Rect:
        return self._subregion_bound

    def cap_bound(self) -> Cap:
        return self._bound.cap_bound()

    # Shape interface

    def num_edges(self) -> int:
        if self.is_empty_or_full():
            return 0
        return len(self._vertices)

    def edge(self, e: int) -> Edge:
        return Edge(self.vertex(e), self.vertex(e + 1))

    def dimension(self) -> Dimension:
        return Dimension.POLYGON

    def contains_origin(self) -> bool:
        return self._origin_inside

    def num_chains(self) -> int:
        return 0 if self.is_empty_or_full() else 1

    def chain(self, chain_id: int) -> Chain:
        return Chain(0, self.num_edges())

    def chain_edge(self, chain_id: int, offset: int) -> Edge:
        return Edge(self.vertex(offset), self.vertex(offset + 1))

    def chain_position(self, edge_id: int) -> ChainPosition:
        return ChainPosition(0, edge_id)

    def encode(self, encoder: Encoder, depth: Optional[int] = None) -> None:
        """
        Write the lossless encoding: version, vertex count, vertices as
        float64 triples, origin flag, depth, then the bounding rectangle.

        Parameters
        ----------
        encoder : Encoder
            Destination writer.
        depth : int, optional
            Depth to write instead of self.depth.
        """
        encoder.write_int8(ENCODING_VERSION)
        encoder.write_uint32(len(self._vertices))
        for v in self._vertices:
            encoder.write_float64(v[0])
            encoder.write_float64(v[1])
            encoder.write_float64(v[2])
        encoder.write_bool(self._origin_inside)
        encoder.write_int32(self.depth if depth is None else depth)
        self._bound.encode(encoder)

    def __repr__(self) -> str:
        return f"Loop(num_vertices={len(self._vertices)}, depth={self.depth})"
