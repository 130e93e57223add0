"""
Boundary tessellation for brep loops.

Converts a loop of typed edges (line / arc / bezier) into an ordered
sequence of planar points suitable for filling and stroking.

Edge rules:
    line (or no curve kind): start, then end if it differs from start
    arc with radius: start is the arc center; sweep from angle 0 to
        atan2(end - start) in ARC_SEGMENTS equal steps, both ends included
    bezier, 1 control point: quadratic, BEZIER_SEGMENTS + 1 samples
    bezier, 2+ control points: cubic on the first two control points
    anything else: start point only
"""

import logging
import math
from typing import Iterator, Sequence, Tuple

import numpy as np

from pcbcanvas.core.primitives import (
    BrepEdge,
    BrepLoop,
    BrepVertex,
    CurveKind,
    Polygon,
)


logger = logging.getLogger(__name__)

ARC_SEGMENTS = 20
BEZIER_SEGMENTS = 20

# Outer loops with fewer points are not filled
MIN_FILL_POINTS = 3

Point = Tuple[float, float]


def _line_points(edge: BrepEdge) -> Iterator[Point]:
    yield edge.start.xy
    if edge.start.x != edge.end.x or edge.start.y != edge.end.y:
        yield edge.end.xy


def _arc_points(edge: BrepEdge) -> Iterator[Point]:
    """Sample an arc around edge.start, sweeping from angle 0."""
    cx, cy = edge.start.x, edge.start.y
    end_angle = math.atan2(edge.end.y - cy, edge.end.x - cx)
    angles = np.linspace(0.0, end_angle, ARC_SEGMENTS + 1)
    xs = cx + np.cos(angles) * edge.radius
    ys = cy + np.sin(angles) * edge.radius
    for px, py in zip(xs, ys):
        yield (float(px), float(py))


def bezier_points(
    start: BrepVertex,
    control_points: Sequence[BrepVertex],
    end: BrepVertex,
    segments: int = BEZIER_SEGMENTS,
) -> Iterator[Point]:
    """
    Sample a quadratic (one control point) or cubic (two or more) bezier.

    Args:
        start: Curve start (t = 0)
        control_points: Control points; only the first two are used
        end: Curve end (t = 1)
        segments: Number of equal parameter steps

    Yields:
        segments + 1 points, including both endpoints exactly
    """
    t = np.linspace(0.0, 1.0, segments + 1)
    u = 1.0 - t

    if len(control_points) == 1:
        cp = control_points[0]
        xs = u * u * start.x + 2 * u * t * cp.x + t * t * end.x
        ys = u * u * start.y + 2 * u * t * cp.y + t * t * end.y
    elif len(control_points) >= 2:
        cp1, cp2 = control_points[0], control_points[1]
        xs = (u ** 3 * start.x + 3 * u ** 2 * t * cp1.x
              + 3 * u * t ** 2 * cp2.x + t ** 3 * end.x)
        ys = (u ** 3 * start.y + 3 * u ** 2 * t * cp1.y
              + 3 * u * t ** 2 * cp2.y + t ** 3 * end.y)
    else:
        xs = np.full_like(t, start.x)
        ys = np.full_like(t, start.y)

    for px, py in zip(xs, ys):
        yield (float(px), float(py))


def tessellate_edge(edge: BrepEdge) -> Iterator[Point]:
    """Yield the points contributed by a single edge."""
    if edge.curve is None or edge.curve is CurveKind.LINE:
        yield from _line_points(edge)
    elif edge.curve is CurveKind.ARC and edge.radius:
        yield from _arc_points(edge)
    elif edge.curve is CurveKind.BEZIER and edge.control_points:
        yield from bezier_points(edge.start, edge.control_points, edge.end)
    else:
        # Missing radius or control points
        logger.debug("Degrading %s edge at %s to its start point",
                     edge.curve.value, edge.start.xy)
        yield edge.start.xy


def tessellate_loop(loop: BrepLoop) -> Iterator[Point]:
    """
    Tessellate a boundary loop into an ordered point sequence.

    The result is a generator: consume it once, call again for a fresh one.
    """
    for edge in loop.edges:
        yield from tessellate_edge(edge)


def loop_to_polygon(loop: BrepLoop) -> Polygon:
    """Tessellate a loop and collect the points into a Polygon."""
    return Polygon.from_points(list(tessellate_loop(loop)))
