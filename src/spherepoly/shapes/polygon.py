"""
Polygons made of hierarchically nested loops.

A polygon's loops are stored in preorder of their nesting tree: every loop
is immediately followed by all of its descendants. Each loop carries its
nesting depth, and the tree is recovered from the depth sequence alone.
Loops at even depth are shells, loops at odd depth are holes. The polygon
interior is the set of points contained by an odd number of loops.

The polygon is also a Shape: its edges are numbered globally, loop after
loop, and each loop forms one chain.
"""

import copy
import io
import logging
from typing import BinaryIO, Iterable, Optional, Sequence, Tuple

import numpy as np

from ..core.encoding import ENCODING_VERSION, Encoder
from ..regions.cap import Cap
from ..regions.rect import Rect, expand_for_subregion_bound
from .loop import Loop
from .shape import Chain, ChainPosition, Dimension, Edge, Shape

logger = logging.getLogger(__name__)

# Above this many loops, edge lookups use a table of cumulative edge counts
# instead of scanning the loops. Based on benchmarks.
MAX_LINEAR_SEARCH_LOOPS = 12


def _cumulative_edge_table(loops: Sequence[Loop]) -> np.ndarray:
    """
    Element i is the number of edges in loops [0, i).
    """
    counts = np.fromiter((loop.num_vertices() for loop in loops), dtype=np.int64, count=len(loops))
    table = np.zeros(len(loops), dtype=np.int64)
    if len(loops) > 1:
        np.cumsum(counts[:-1], out=table[1:])
    return table


def _locate_in_table(table: np.ndarray, e: int) -> Tuple[int, int]:
    # Greatest i with table[i] <= e
    i = int(np.searchsorted(table, e, side='right')) - 1
    return i, e - int(table[i])


def _locate_by_scan(loops: Sequence[Loop], e: int) -> Tuple[int, int]:
    # Usually there is exactly one loop and the loop body never runs
    i = 0
    while e >= loops[i].num_vertices():
        e -= loops[i].num_vertices()
        i += 1
    return i, e


def _owned_copy(loop: Loop, depth: int) -> Loop:
    # Shares the read-only vertices and bounds; only depth differs
    owned = copy.copy(loop)
    owned.depth = depth
    return owned


def _check_preorder_depths(depths: Sequence[int]) -> None:
    previous = -1
    for k, depth in enumerate(depths):
        if depth < 0 or depth > previous + 1:
            raise ValueError(
                f"Loop {k} has depth {depth} after depth {previous}; "
                f"depths must start at 0 and grow by at most 1 per loop"
            )
        previous = depth


class Polygon(Shape):
    """
    Region of the sphere bounded by zero or more nested loops.

    Polygon() is the empty polygon. Use from_loops(), from_ordered_loops()
    or full() for anything else. Polygons are immutable once built: they
    hold their own copies of the given loops, so reusing a loop elsewhere
    never changes an existing polygon.

    The empty polygon cannot be encoded yet; encode() and to_bytes() raise
    NotImplementedError for it, which callers may catch.

    Examples
    --------
    >>> triangle = Loop.from_degrees([0, 0, 10], [0, 10, 5])
    >>> polygon = Polygon.from_loops([triangle])
    >>> polygon.num_edges(), polygon.chain(0)
    (3, Chain(start=0, length=3))
    """

    def __init__(self):
        self._loops: Tuple[Loop, ...] = ()
        self._depths: Tuple[int, ...] = ()
        self._has_holes = False
        self._num_vertices = 0
        self._num_edges = 0
        self._bound = Rect.empty()
        self._subregion_bound = Rect.empty()
        self._cumulative_edges: Optional[np.ndarray] = None

    @classmethod
    def empty(cls) -> "Polygon":
        return cls()

    @classmethod
    def full(cls) -> "Polygon":
        """The polygon covering the whole sphere: a single full loop."""
        return cls._build([Loop.full()], [0])

    @classmethod
    def from_loops(cls, loops: Iterable[Loop]) -> "Polygon":
        """
        Build a polygon from loops in any order, assigning nesting depths.

        Only a single loop is supported for now. An empty loop gives the
        empty polygon and a full loop gives the full polygon.

        Parameters
        ----------
        loops : iterable of Loop
            Zero or one loops.

        Returns
        -------
        Polygon

        Raises
        ------
        NotImplementedError
            If more than one loop is given; nesting detection for several
            loops is not implemented.
        """
        loops = list(loops)
        if len(loops) > 1:
            raise NotImplementedError("Polygon.from_loops for multiple loops is not yet implemented")

        if not loops or loops[0].is_empty():
            return cls()

        return cls._build(loops, [0])

    @classmethod
    def from_ordered_loops(
        cls,
        loops: Iterable[Loop],
        depths: Optional[Sequence[int]] = None
    ) -> "Polygon":
        """
        Build a polygon from loops already in preorder nesting order.

        No geometric check is made that the loops actually nest the way the
        depths say; that is the caller's responsibility.

        Parameters
        ----------
        loops : iterable of Loop
            Loops in preorder: each loop followed by all of its descendants.
        depths : sequence of int, optional
            Nesting depth of each loop. If None, the depths already stored
            on the loops are used. The given loops are not modified.

        Returns
        -------
        Polygon

        Raises
        ------
        ValueError
            If the depths are not a valid preorder sequence, a loop is
            empty, or a full loop is not the only loop.
        """
        loops = list(loops)

        if depths is None:
            depths = [loop.depth for loop in loops]
        else:
            depths = [int(d) for d in depths]
            if len(depths) != len(loops):
                raise ValueError(f"Got {len(depths)} depths for {len(loops)} loops")

        _check_preorder_depths(depths)

        for k, loop in enumerate(loops):
            if loop.is_empty():
                raise ValueError(f"Loop {k} is empty; empty loops are not allowed in a polygon")
            if loop.is_full() and len(loops) > 1:
                raise ValueError("The full loop may only appear as the sole loop of the full polygon")

        return cls._build(loops, depths)

    @classmethod
    def _build(cls, loops: Sequence[Loop], depths: Sequence[int]) -> "Polygon":
        polygon = cls()
        polygon._depths = tuple(depths)
        polygon._loops = tuple(
            _owned_copy(loop, depth) for loop, depth in zip(loops, polygon._depths)
        )
        polygon._init_loop_properties()
        return polygon

    def _init_loop_properties(self) -> None:
        bound = Rect.empty()
        for k, loop in enumerate(self._loops):
            if self.loop_is_hole(k):
                self._has_holes = True
            elif self._depths[k] == 0:
                # Deeper shells lie inside a depth-0 shell already counted
                bound = bound.union(loop.rect_bound())
            self._num_vertices += loop.num_vertices()
            self._num_edges += loop.num_edges()

        self._bound = bound
        self._subregion_bound = expand_for_subregion_bound(bound)

        if len(self._loops) > MAX_LINEAR_SEARCH_LOOPS:
            self._cumulative_edges = _cumulative_edge_table(self._loops)
            self._cumulative_edges.setflags(write=False)

        logger.debug(
            f"Built polygon: {len(self._loops)} loops, {self._num_edges} edges, "
            f"{'indexed' if self._cumulative_edges is not None else 'linear'} edge lookup"
        )

    def is_empty(self) -> bool:
        return len(self._loops) == 0

    def is_full(self) -> bool:
        return len(self._loops) == 1 and self._loops[0].is_full()

    def has_holes(self) -> bool:
        return self._has_holes

    def num_vertices(self) -> int:
        return self._num_vertices

    # Nesting hierarchy

    def num_loops(self) -> int:
        return len(self._loops)

    def loops(self) -> Tuple[Loop, ...]:
        return self._loops

    def loop(self, k: int) -> Loop:
        """
        Loop k in preorder, carrying its depth. The children of loop k are
        the loops in k+1..last_descendant(k) whose depth is loop(k).depth + 1.
        """
        return self._loops[k]

    def parent(self, k: int) -> Optional[int]:
        """
        Index of the loop directly enclosing loop k, or None for a top-level
        loop.
        """
        depth = self._depths[k]
        if depth == 0:
            return None

        # Siblings and their descendants may sit between us and the parent
        k -= 1
        while k >= 0 and self._depths[k] >= depth:
            k -= 1
        return k

    def last_descendant(self, k: int) -> int:
        """
        Index of the last loop nested inside loop k, or k itself when loop k
        has no descendants. A negative k stands for the root and gives the
        last loop of the polygon.
        """
        if k < 0:
            return len(self._loops) - 1

        depth = self._depths[k]
        k += 1
        while k < len(self._depths) and self._depths[k] > depth:
            k += 1
        return k - 1

    def loop_is_hole(self, k: int) -> bool:
        return self._depths[k] & 1 != 0

    def loop_sign(self, k: int) -> int:
        """-1 for holes and +1 for shells, for combining per-loop areas."""
        return -1 if self.loop_is_hole(k) else 1

    # Bounds

    def rect_bound(self) -> Rect:
        return self._bound

    def cap_bound(self) -> Cap:
        return self._bound.cap_bound()

    def subregion_bound(self) -> Rect:
        """
        Bound expanded so that if this polygon contains another one, this
        rectangle contains the other polygon's rect_bound().
        """
        return self._subregion_bound

    def contains_point(self, p: np.ndarray) -> bool:
        """
        Whether p lies inside an odd number of loops.

        Parameters
        ----------
        p : np.ndarray
            Unit vector of shape (3,).
        """
        if not self._bound.contains_point(p):
            return False

        inside = False
        for loop in self._loops:
            inside = inside != loop.contains_point(p)
        return inside

    # Shape interface

    def _locate(self, e: int) -> Tuple[int, int]:
        if self._cumulative_edges is not None:
            return _locate_in_table(self._cumulative_edges, e)
        return _locate_by_scan(self._loops, e)

    def num_edges(self) -> int:
        return self._num_edges

    def edge(self, e: int) -> Edge:
        i, j = self._locate(e)
        loop = self._loops[i]
        return Edge(loop.vertex(j), loop.vertex(j + 1))

    def dimension(self) -> Dimension:
        return Dimension.POLYGON

    def contains_origin(self) -> bool:
        contains = False
        for loop in self._loops:
            contains = contains != loop.contains_origin()
        return contains

    def num_chains(self) -> int:
        # The full polygon has no edges to chain
        if self.is_full():
            return 0
        return len(self._loops)

    def chain(self, chain_id: int) -> Chain:
        length = self._loops[chain_id].num_vertices()
        if self._cumulative_edges is not None:
            return Chain(int(self._cumulative_edges[chain_id]), length)

        start = sum(loop.num_vertices() for loop in self._loops[:chain_id])
        return Chain(start, length)

    def chain_edge(self, chain_id: int, offset: int) -> Edge:
        loop = self._loops[chain_id]
        return Edge(loop.vertex(offset), loop.vertex(offset + 1))

    def chain_position(self, edge_id: int) -> ChainPosition:
        return ChainPosition(*self._locate(edge_id))

    # Encoding

    def encode(self, stream: BinaryIO) -> None:
        """
        Write the lossless binary encoding to a stream.

        Layout, little-endian: version (int8), legacy flag (bool, always
        true), has_holes (bool), loop count (uint32), each loop's encoding
        in preorder, then the rect bound.

        Parameters
        ----------
        stream : BinaryIO
            Writable binary stream.

        Raises
        ------
        NotImplementedError
            For a polygon without vertices, which needs the compressed
            format. Nothing is written in that case.
        """
        if self._num_vertices == 0:
            raise NotImplementedError("compressed encoding not yet implemented")

        self._encode_lossless(Encoder(stream))

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.encode(buffer)
        return buffer.getvalue()

    def _encode_lossless(self, encoder: Encoder) -> None:
        encoder.write_int8(ENCODING_VERSION)
        encoder.write_bool(True)  # legacy flag, must be true
        encoder.write_bool(self._has_holes)
        encoder.write_uint32(len(self._loops))

        for loop, depth in zip(self._loops, self._depths):
            loop.encode(encoder, depth)

        self._bound.encode(encoder)

    def __repr__(self) -> str:
        return (
            f"Polygon(num_loops={len(self._loops)}, num_vertices={self._num_vertices}, "
            f"has_holes={self._has_holes})"
        )
