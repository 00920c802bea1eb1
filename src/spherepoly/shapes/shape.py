"""
The edge-collection contract consumed by spatial indexes.

A shape is a collection of edges, optionally grouped into chains of
consecutive edges, together with enough information to tell inside from
outside. Points, polylines and polygons all present this same interface so
an index can treat them uniformly.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import NamedTuple

import numpy as np


class Dimension(IntEnum):
    """Geometric dimension of a shape."""
    POINT = 0
    POLYLINE = 1
    POLYGON = 2


class Edge(NamedTuple):
    """Directed edge from v0 to v1."""
    v0: np.ndarray
    v1: np.ndarray


class Chain(NamedTuple):
    """Contiguous run of edge ids [start, start + length)."""
    start: int
    length: int


class ChainPosition(NamedTuple):
    """Location of an edge as the offset-th edge of chain chain_id."""
    chain_id: int
    offset: int


class Shape(ABC):
    """
    Abstract edge collection.

    Edge ids are global over the shape, in [0, num_edges()). Accessors do not
    range-check their arguments.
    """

    @abstractmethod
    def num_edges(self) -> int:
        ...

    @abstractmethod
    def edge(self, e: int) -> Edge:
        ...

    @abstractmethod
    def dimension(self) -> Dimension:
        ...

    def has_interior(self) -> bool:
        return self.dimension() == Dimension.POLYGON

    @abstractmethod
    def contains_origin(self) -> bool:
        """Whether the fixed reference point ORIGIN_POINT is inside."""

    @abstractmethod
    def num_chains(self) -> int:
        ...

    @abstractmethod
    def chain(self, chain_id: int) -> Chain:
        ...

    @abstractmethod
    def chain_edge(self, chain_id: int, offset: int) -> Edge:
        ...

    @abstractmethod
    def chain_position(self, edge_id: int) -> ChainPosition:
        ...
