"""
Tests for Polygon construction, nesting hierarchy, bounds and the shape view.
"""

import logging
import math

import numpy as np
import pytest

from spherepoly.core.geometry import NORTH_POLE, latlng_to_point
from spherepoly.shapes import Chain, Dimension, Loop, Polygon


def _deg(lat, lng):
    return latlng_to_point(math.radians(lat), math.radians(lng))


def _triangle():
    return Loop.from_degrees([0, 0, 10], [0, 10, 5])


def _square(lat, lng, size=2.0):
    """Small CCW square with its lower-left corner at (lat, lng)."""
    return Loop.from_degrees(
        [lat, lat, lat + size, lat + size],
        [lng, lng + size, lng + size, lng],
    )


def _ring(lat, n=8):
    """Ring of constant latitude traversed eastward, enclosing the north pole."""
    lngs = np.linspace(-180, 180, n, endpoint=False)
    return Loop.from_degrees(np.full(n, lat), lngs)


# Depths of a two-tree forest: 0 > (1 > 2), 1 and 0 > 1
NESTED_DEPTHS = [0, 1, 2, 1, 0, 1]


def _nested_polygon():
    loops = [_square(0, 10 * k) for k in range(len(NESTED_DEPTHS))]
    return Polygon.from_ordered_loops(loops, NESTED_DEPTHS)


class TestSentinels:
    """Tests for the empty and full polygons."""

    def test_empty_polygon(self):
        polygon = Polygon()
        assert polygon.is_empty()
        assert not polygon.is_full()
        assert polygon.num_loops() == 0
        assert polygon.num_chains() == 0
        assert polygon.num_edges() == 0
        assert polygon.num_vertices() == 0
        assert not polygon.contains_origin()
        assert polygon.rect_bound().is_empty()

    def test_empty_constructor_alias(self):
        assert Polygon.empty().is_empty()

    def test_full_polygon(self):
        polygon = Polygon.full()
        assert polygon.is_full()
        assert not polygon.is_empty()
        assert polygon.num_loops() == 1
        assert polygon.loop(0).is_full()
        assert polygon.num_chains() == 0
        assert polygon.num_edges() == 0
        assert polygon.num_vertices() == 1
        assert polygon.contains_origin()
        assert polygon.rect_bound().is_full()
        assert polygon.subregion_bound().is_full()

    def test_full_polygon_contains_everything(self):
        polygon = Polygon.full()
        assert polygon.contains_point(_deg(-60, 33))
        assert polygon.contains_point(NORTH_POLE)


class TestFromLoops:
    """Tests for the public nesting constructor."""

    def test_single_triangle(self):
        """A single triangular loop, no holes."""
        polygon = Polygon.from_loops([_triangle()])

        assert polygon.num_loops() == 1
        assert polygon.num_edges() == 3
        assert polygon.num_vertices() == 3
        assert polygon.num_chains() == 1
        assert polygon.chain(0) == Chain(0, 3)
        assert not polygon.has_holes()

        edge = polygon.edge(1)
        chain_edge = polygon.chain_edge(0, 1)
        np.testing.assert_array_equal(edge.v0, chain_edge.v0)
        np.testing.assert_array_equal(edge.v1, chain_edge.v1)

    def test_single_loop_is_shell(self):
        polygon = Polygon.from_loops([_triangle()])
        assert not polygon.loop_is_hole(0)
        assert polygon.loop_sign(0) == 1
        assert polygon.loop(0).depth == 0

    def test_resets_depth(self):
        loop = _triangle()
        loop.depth = 5
        polygon = Polygon.from_loops([loop])
        assert polygon.loop(0).depth == 0
        assert not polygon.loop_is_hole(0)
        assert loop.depth == 5

    def test_no_loops(self):
        assert Polygon.from_loops([]).is_empty()

    def test_empty_loop_dropped(self):
        assert Polygon.from_loops([Loop.empty()]).is_empty()

    def test_full_loop(self):
        polygon = Polygon.from_loops([Loop.full()])
        assert polygon.is_full()
        assert polygon.num_chains() == 0

    def test_multiple_loops_not_supported(self):
        with pytest.raises(NotImplementedError):
            Polygon.from_loops([_square(0, 0), _square(0, 10)])

    def test_multiple_loops_leave_depths_untouched(self):
        loops = [_square(0, 0), _square(0, 10)]
        loops[1].depth = 1
        with pytest.raises(NotImplementedError):
            Polygon.from_loops(loops)
        assert [loop.depth for loop in loops] == [0, 1]

    def test_loops_tuple(self):
        loop = _triangle()
        polygon = Polygon.from_loops([loop])
        loops = polygon.loops()
        assert isinstance(loops, tuple)
        assert len(loops) == 1
        np.testing.assert_array_equal(loops[0].vertices, loop.vertices)


class TestFromOrderedLoops:
    """Tests for building from loops already in preorder."""

    def test_depths_assigned(self):
        polygon = _nested_polygon()
        assert [polygon.loop(k).depth for k in range(polygon.num_loops())] == NESTED_DEPTHS

    def test_given_loops_not_modified(self):
        loops = [_square(0, 10 * k) for k in range(len(NESTED_DEPTHS))]
        Polygon.from_ordered_loops(loops, NESTED_DEPTHS)
        assert [loop.depth for loop in loops] == [0] * len(NESTED_DEPTHS)

    def test_uses_existing_depths(self):
        loops = [_square(0, 0), _square(0, 10)]
        loops[1].depth = 1
        polygon = Polygon.from_ordered_loops(loops)
        assert polygon.has_holes()

    def test_first_depth_must_be_zero(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([_square(0, 0)], [1])

    def test_depth_cannot_jump(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([_square(0, 0), _square(0, 10)], [0, 2])

    def test_negative_depth(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([_square(0, 0), _square(0, 10)], [0, -1])

    def test_depth_count_mismatch(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([_square(0, 0), _square(0, 10)], [0])

    def test_invalid_depths_not_written(self):
        loops = [_square(0, 0), _square(0, 10)]
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops(loops, [0, 3])
        assert [loop.depth for loop in loops] == [0, 0]

    def test_empty_loop_rejected(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([_square(0, 0), Loop.empty()], [0, 0])

    def test_full_loop_must_be_alone(self):
        with pytest.raises(ValueError):
            Polygon.from_ordered_loops([Loop.full(), _square(0, 0)], [0, 1])

    def test_full_loop_alone(self):
        assert Polygon.from_ordered_loops([Loop.full()]).is_full()

    def test_logs_lookup_mode(self, caplog):
        loops = [_square(0, 5 * k) for k in range(13)]
        with caplog.at_level(logging.DEBUG, logger="spherepoly.shapes.polygon"):
            Polygon.from_ordered_loops(loops, [0] * 13)
        assert "13 loops" in caplog.text
        assert "indexed edge lookup" in caplog.text


class TestSharedLoops:
    """Reusing a loop in a new polygon must leave earlier polygons unchanged."""

    def test_hierarchy_unchanged(self):
        outer, inner = _ring(80), _ring(85)
        first = Polygon.from_ordered_loops([outer, inner], [0, 1])
        before = (first.loop_is_hole(1), first.parent(1), first.loop_sign(1), first.has_holes())

        Polygon.from_loops([inner])

        after = (first.loop_is_hole(1), first.parent(1), first.loop_sign(1), first.has_holes())
        assert after == before == (True, 0, -1, True)
        assert first.loop(1).depth == 1

    def test_encoding_unchanged(self):
        outer, inner = _ring(80), _ring(85)
        first = Polygon.from_ordered_loops([outer, inner], [0, 1])
        data = first.to_bytes()

        Polygon.from_ordered_loops([inner], [0])
        inner.depth = 7

        assert first.to_bytes() == data

    def test_depth_of_returned_loop_ignored(self):
        polygon = _nested_polygon()
        polygon.loop(1).depth = 0
        assert polygon.parent(1) == 0
        assert polygon.loop_is_hole(1)

    def test_loops_share_vertices(self):
        loop = _triangle()
        polygon = Polygon.from_loops([loop])
        assert polygon.loop(0) is not loop
        assert polygon.loop(0).vertices is loop.vertices


class TestHierarchy:
    """Tests for parent/last_descendant navigation over the depth sequence."""

    def test_parent(self):
        polygon = _nested_polygon()
        assert [polygon.parent(k) for k in range(6)] == [None, 0, 1, 0, None, 4]

    def test_last_descendant(self):
        polygon = _nested_polygon()
        assert [polygon.last_descendant(k) for k in range(6)] == [3, 2, 2, 3, 5, 5]

    def test_last_descendant_of_root(self):
        polygon = _nested_polygon()
        assert polygon.last_descendant(-1) == 5
        assert Polygon.from_loops([_triangle()]).last_descendant(-1) == 0

    def test_single_loop(self):
        polygon = Polygon.from_loops([_triangle()])
        assert polygon.parent(0) is None
        assert polygon.last_descendant(0) == 0

    def test_parent_depth_consistency(self):
        """A parent precedes its child and is exactly one level up."""
        polygon = _nested_polygon()
        for k in range(polygon.num_loops()):
            depth = polygon.loop(k).depth
            p = polygon.parent(k)
            if depth == 0:
                assert p is None
            else:
                assert 0 <= p < k
                assert polygon.loop(p).depth == depth - 1

    def test_subtree_is_contiguous(self):
        """
        Loops after k up to last_descendant(k) are deeper than k, and the
        next loop (if any) is not.
        """
        polygon = _nested_polygon()
        for k in range(polygon.num_loops()):
            depth = polygon.loop(k).depth
            last = polygon.last_descendant(k)
            assert last >= k
            for j in range(k + 1, last + 1):
                assert polygon.loop(j).depth > depth
            if last + 1 < polygon.num_loops():
                assert polygon.loop(last + 1).depth <= depth

    def test_children_from_subtree(self):
        polygon = _nested_polygon()
        children = [
            j for j in range(1, polygon.last_descendant(0) + 1)
            if polygon.loop(j).depth == polygon.loop(0).depth + 1
        ]
        assert children == [1, 3]
        assert all(polygon.parent(j) == 0 for j in children)

    def test_holes_and_signs(self):
        polygon = _nested_polygon()
        assert polygon.has_holes()
        assert [polygon.loop_is_hole(k) for k in range(6)] == [False, True, False, True, False, True]
        assert [polygon.loop_sign(k) for k in range(6)] == [1, -1, 1, -1, 1, -1]

    def test_shells_only(self):
        loops = [_square(0, 10 * k) for k in range(3)]
        polygon = Polygon.from_ordered_loops(loops, [0, 0, 0])
        assert not polygon.has_holes()
        assert all(polygon.parent(k) is None for k in range(3))


class TestBounds:
    """Tests for polygon bounds."""

    def test_single_loop_bound(self):
        loop = _triangle()
        polygon = Polygon.from_loops([loop])
        assert polygon.rect_bound() == loop.rect_bound()
        assert polygon.subregion_bound().contains(polygon.rect_bound())

    def test_bound_covers_top_level_shells(self):
        polygon = _nested_polygon()
        bound = polygon.rect_bound()
        for k in range(polygon.num_loops()):
            if polygon.loop(k).depth == 0:
                assert bound.contains(polygon.loop(k).rect_bound())

    def test_cap_bound(self):
        polygon = Polygon.from_loops([_triangle()])
        cap = polygon.cap_bound()
        for v in polygon.loop(0).vertices:
            assert cap.contains_point(v)

    def test_empty_bounds(self):
        assert Polygon().subregion_bound().is_empty()
        assert Polygon().cap_bound().is_empty()


class TestContainsPoint:
    """Tests for odd-parity point containment."""

    def test_triangle(self):
        polygon = Polygon.from_loops([_triangle()])
        assert polygon.contains_point(_deg(3, 5))
        assert not polygon.contains_point(_deg(-20, 5))

    def test_annulus(self):
        """A polar cap with a smaller polar hole."""
        polygon = Polygon.from_ordered_loops([_ring(80), _ring(85)], [0, 1])

        assert polygon.contains_point(_deg(82.5, 10))
        assert not polygon.contains_point(_deg(88, 10))
        assert not polygon.contains_point(NORTH_POLE)
        assert not polygon.contains_point(_deg(70, 10))


class TestShapeInterface:
    """Tests for the polygon as a generic shape."""

    def test_dimension(self):
        polygon = Polygon.from_loops([_triangle()])
        assert polygon.dimension() == Dimension.POLYGON
        assert polygon.has_interior()
        assert Polygon().has_interior()

    def test_contains_origin_parity(self):
        """The origin is inside iff an odd number of loops contain it."""
        assert not Polygon.from_loops([_triangle()]).contains_origin()
        assert Polygon.from_loops([_ring(80)]).contains_origin()
        assert not Polygon.from_ordered_loops([_ring(80), _ring(85)], [0, 1]).contains_origin()

    def test_contains_origin_inverted_loop(self):
        inverted = Loop(_triangle().vertices[::-1])
        assert Polygon.from_loops([inverted]).contains_origin()

    def test_num_chains_matches_loops(self):
        polygon = _nested_polygon()
        assert polygon.num_chains() == polygon.num_loops()
        assert polygon.num_edges() == 4 * polygon.num_loops()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
