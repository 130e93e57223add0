"""Tests for pcbcanvas.core.brep tessellation."""

import math

import pytest

from pcbcanvas.core.brep import (
    ARC_SEGMENTS,
    BEZIER_SEGMENTS,
    bezier_points,
    loop_to_polygon,
    tessellate_edge,
    tessellate_loop,
)
from pcbcanvas.core.primitives import (
    BrepEdge,
    BrepLoop,
    BrepRing,
    BrepVertex,
    CurveKind,
)


def v(x, y):
    return BrepVertex(x, y)


def line_loop(*corners):
    n = len(corners)
    return BrepLoop(edges=tuple(
        BrepEdge(v(*corners[i]), v(*corners[(i + 1) % n]), curve=CurveKind.LINE)
        for i in range(n)
    ))


class TestLineEdges:
    """Tests for line tessellation."""

    def test_rectangle_has_four_distinct_points(self):
        points = list(tessellate_loop(line_loop((0, 0), (10, 0), (10, 5), (0, 5))))
        assert len(points) == 8
        assert set(points) == {(0, 0), (10, 0), (10, 5), (0, 5)}
        assert points[0] == (0, 0)

    def test_missing_curve_kind_is_a_line(self):
        edge = BrepEdge(v(0, 0), v(3, 4))
        assert list(tessellate_edge(edge)) == [(0, 0), (3, 4)]

    def test_zero_length_line_yields_start_once(self):
        edge = BrepEdge(v(2, 2), v(2, 2), curve=CurveKind.LINE)
        assert list(tessellate_edge(edge)) == [(2, 2)]

    def test_unknown_curve_string_reads_as_line(self):
        assert CurveKind.parse("spline") is None
        edge = BrepEdge(v(0, 0), v(1, 0), curve=CurveKind.parse("spline"))
        assert list(tessellate_edge(edge)) == [(0, 0), (1, 0)]


class TestArcEdges:
    """Tests for arc tessellation (start vertex is the center)."""

    def test_points_lie_on_radius(self):
        edge = BrepEdge(v(1, 1), v(1, 6), curve=CurveKind.ARC, radius=3)
        points = list(tessellate_edge(edge))
        assert len(points) == ARC_SEGMENTS + 1
        for x, y in points:
            assert math.hypot(x - 1, y - 1) == pytest.approx(3)

    def test_sweep_starts_at_angle_zero(self):
        edge = BrepEdge(v(0, 0), v(0, 5), curve=CurveKind.ARC, radius=2)
        points = list(tessellate_edge(edge))
        assert points[0] == pytest.approx((2, 0))
        assert points[-1] == pytest.approx((0, 2), abs=1e-12)

    def test_missing_radius_degrades_to_start(self):
        edge = BrepEdge(v(4, 5), v(9, 9), curve=CurveKind.ARC)
        assert list(tessellate_edge(edge)) == [(4, 5)]

    def test_zero_radius_degrades_to_start(self):
        edge = BrepEdge(v(4, 5), v(9, 9), curve=CurveKind.ARC, radius=0)
        assert list(tessellate_edge(edge)) == [(4, 5)]


class TestBezierEdges:
    """Tests for bezier tessellation."""

    def test_quadratic_endpoints_exact(self):
        edge = BrepEdge(v(0, 0), v(10, 0), curve=CurveKind.BEZIER,
                        control_points=(v(5, 10),))
        points = list(tessellate_edge(edge))
        assert len(points) == BEZIER_SEGMENTS + 1
        assert points[0] == (0.0, 0.0)
        assert points[-1] == (10.0, 0.0)
        assert points[BEZIER_SEGMENTS // 2] == pytest.approx((5, 5))

    def test_cubic_sampling(self):
        edge = BrepEdge(v(0, 0), v(10, 0), curve=CurveKind.BEZIER,
                        control_points=(v(0, 10), v(10, 10)))
        points = list(tessellate_edge(edge))
        assert len(points) == BEZIER_SEGMENTS + 1
        assert points[0] == (0.0, 0.0)
        assert points[-1] == (10.0, 0.0)
        assert points[BEZIER_SEGMENTS // 2] == pytest.approx((5, 7.5))

    def test_extra_control_points_ignored(self):
        cubic = list(bezier_points(v(0, 0), (v(0, 10), v(10, 10)), v(10, 0)))
        extra = list(bezier_points(v(0, 0), (v(0, 10), v(10, 10), v(99, 99)), v(10, 0)))
        assert cubic == extra

    def test_without_control_points_degrades_to_start(self):
        edge = BrepEdge(v(7, 8), v(10, 0), curve=CurveKind.BEZIER)
        assert list(tessellate_edge(edge)) == [(7, 8)]

    def test_custom_segment_count(self):
        points = list(bezier_points(v(0, 0), (v(1, 1),), v(2, 0), segments=4))
        assert len(points) == 5


class TestLoops:
    """Tests for loop tessellation."""

    def test_generator_is_single_use(self):
        loop = line_loop((0, 0), (1, 0), (1, 1))
        gen = tessellate_loop(loop)
        first = list(gen)
        assert list(gen) == []
        assert list(tessellate_loop(loop)) == first

    def test_empty_loop(self):
        assert list(tessellate_loop(BrepLoop())) == []

    def test_mixed_edges_in_order(self):
        loop = BrepLoop(edges=(
            BrepEdge(v(0, 0), v(4, 0)),
            BrepEdge(v(4, 0), v(0, 0), curve=CurveKind.BEZIER, control_points=(v(2, 3),)),
        ))
        points = list(tessellate_loop(loop))
        assert points[:2] == [(0, 0), (4, 0)]
        assert len(points) == 2 + BEZIER_SEGMENTS + 1
        assert points[-1] == (0.0, 0.0)

    def test_loop_to_polygon(self):
        polygon = loop_to_polygon(line_loop((0, 0), (4, 0), (4, 2)))
        assert polygon.points == 6
        assert polygon.bbox == (0.0, 0.0, 4.0, 2.0)

    def test_ring_to_loop_closes(self):
        ring = BrepRing(vertices=(v(0, 0), v(2, 0), v(2, 2)))
        loop = ring.to_loop()
        assert len(loop.edges) == 3
        assert loop.edges[-1].start == v(2, 2)
        assert loop.edges[-1].end == v(0, 0)
