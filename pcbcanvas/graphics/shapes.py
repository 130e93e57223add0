"""
Primitive shape renderers.

Stateless functions that issue QPainter calls for polygons, paths and
simple primitives. Each one brackets its work in save()/restore() so the
painter's state is unchanged on return, including on exceptions.

Polygon and path renderers map every vertex through the transform.
Primitive renderers (rect, circle, oval, pill) map only the center and
scale sizes by the transform's linear scale, then rotate locally around
the mapped center. They assume a uniform, shear-free transform such as
the one produced by compute_transform().
"""

from contextlib import contextmanager
from typing import Iterator, List, Sequence, Tuple, Union

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPainter, QPainterPath, QPolygonF, QTransform

from pcbcanvas.core.primitives import Polygon
from pcbcanvas.core.transform import apply_to_point, linear_scale
from pcbcanvas.graphics.layers import solid_brush, stroke_pen


Point = Tuple[float, float]
PointSource = Union[Polygon, Sequence[Point]]


@contextmanager
def saved_state(painter: QPainter) -> Iterator[QPainter]:
    """Save painter state and restore it on every exit path."""
    painter.save()
    try:
        yield painter
    finally:
        painter.restore()


def _map_points(points: PointSource, transform: QTransform) -> List[QPointF]:
    """Map design-space vertices to canvas pixels."""
    if isinstance(points, Polygon):
        points = points.to_points()
    return [transform.map(QPointF(x, y)) for x, y in points]


def draw_polygon(
    painter: QPainter,
    points: PointSource,
    fill: str,
    transform: QTransform,
) -> None:
    """
    Fill a polygon with a solid color.

    Args:
        painter: Active painter
        points: Design-space vertices
        fill: Fill color string
        transform: Design-space to canvas transform
    """
    mapped = _map_points(points, transform)
    if not mapped:
        return

    path = QPainterPath()
    path.addPolygon(QPolygonF(mapped))
    path.closeSubpath()

    with saved_state(painter):
        painter.fillPath(path, solid_brush(fill))


def draw_path(
    painter: QPainter,
    points: PointSource,
    stroke: str,
    stroke_width: float,
    transform: QTransform,
    close_path: bool = False,
) -> None:
    """
    Stroke a polyline.

    Args:
        painter: Active painter
        points: Design-space vertices
        stroke: Stroke color string
        stroke_width: Line width in design units
        transform: Design-space to canvas transform
        close_path: Connect the last vertex back to the first
    """
    mapped = _map_points(points, transform)
    if len(mapped) < 2:
        return

    path = QPainterPath(mapped[0])
    for point in mapped[1:]:
        path.lineTo(point)
    if close_path:
        path.closeSubpath()

    pen = stroke_pen(stroke, stroke_width * linear_scale(transform))
    with saved_state(painter):
        painter.strokePath(path, pen)


def draw_rect(
    painter: QPainter,
    center: Point,
    width: float,
    height: float,
    fill: str,
    transform: QTransform,
    border_radius: float = 0.0,
    rotation: float = 0.0,
) -> None:
    """
    Fill a rectangle with optional rounded corners and rotation.

    Args:
        center: Design-space center
        width, height: Design-space size
        border_radius: Corner radius, clamped to half the smaller side
        rotation: Counter-clockwise rotation in degrees
    """
    cx, cy = apply_to_point(transform, center[0], center[1])
    scale = linear_scale(transform)
    w = width * scale
    h = height * scale
    r = border_radius * scale

    path = QPainterPath()
    rect = QRectF(-w / 2, -h / 2, w, h)
    if r > 0:
        r = min(r, w / 2, h / 2)
        path.addRoundedRect(rect, r, r)
    else:
        path.addRect(rect)

    with saved_state(painter):
        painter.translate(cx, cy)
        if rotation:
            painter.rotate(-rotation)
        painter.fillPath(path, solid_brush(fill))


def draw_pill(
    painter: QPainter,
    center: Point,
    width: float,
    height: float,
    fill: str,
    transform: QTransform,
    rotation: float = 0.0,
) -> None:
    """Fill a stadium shape (rect with fully rounded short ends)."""
    draw_rect(
        painter,
        center,
        width,
        height,
        fill,
        transform,
        border_radius=min(width, height) / 2,
        rotation=rotation,
    )


def draw_circle(
    painter: QPainter,
    center: Point,
    radius: float,
    fill: str,
    transform: QTransform,
) -> None:
    """Fill a circle."""
    cx, cy = apply_to_point(transform, center[0], center[1])
    r = radius * linear_scale(transform)

    path = QPainterPath()
    path.addEllipse(QPointF(cx, cy), r, r)
    with saved_state(painter):
        painter.fillPath(path, solid_brush(fill))


def draw_oval(
    painter: QPainter,
    center: Point,
    width: float,
    height: float,
    fill: str,
    transform: QTransform,
    rotation: float = 0.0,
) -> None:
    """Fill an axis-aligned (then rotated) ellipse."""
    cx, cy = apply_to_point(transform, center[0], center[1])
    scale = linear_scale(transform)

    path = QPainterPath()
    path.addEllipse(QPointF(0.0, 0.0), width * scale / 2, height * scale / 2)
    with saved_state(painter):
        painter.translate(cx, cy)
        if rotation:
            painter.rotate(-rotation)
        painter.fillPath(path, solid_brush(fill))
