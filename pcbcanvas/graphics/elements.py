"""
Element renderers for plated holes and brep (copper pour) shapes.

Brep faces are drawn as: fill the outer polygon, punch every hole with
DestinationOut compositing, return to SourceOver, then stroke the closed
outer boundary. The whole element is drawn at the resolved opacity
inside a single save()/restore() bracket.

Style resolution has two stages: the style declared on the element and
the layer policy default. StylePrecedence.POLICY (the default) lets the
policy win for every field, which ignores declared colors. Pass
StylePrecedence.DECLARED to honour declared values where they are set.
"""

from enum import Enum
import logging
from typing import Any, List, Mapping, Optional, Tuple

from PySide6.QtGui import QPainter, QTransform

from pcbcanvas.core.brep import MIN_FILL_POINTS, loop_to_polygon
from pcbcanvas.core.primitives import (
    BrepElement,
    BrepFace,
    PlatedHole,
    Polygon,
    ShapeStyle,
)
from pcbcanvas.graphics.layers import default_fill_color
from pcbcanvas.graphics.shapes import (
    draw_circle,
    draw_oval,
    draw_path,
    draw_pill,
    draw_polygon,
    draw_rect,
    saved_state,
)


logger = logging.getLogger(__name__)

DEFAULT_BREP_OPACITY = 0.5
DEFAULT_BREP_STROKE_WIDTH = 0.1

# Only coverage matters under DestinationOut
HOLE_PUNCH_COLOR = "black"


class StylePrecedence(str, Enum):
    """Which stage wins when declared and policy styles disagree."""
    POLICY = "policy"
    DECLARED = "declared"


def policy_style(layer: str, color_map: Mapping[str, Any]) -> ShapeStyle:
    """Default brep style for a layer."""
    color = default_fill_color(layer, color_map)
    return ShapeStyle(
        fill=color,
        stroke=color,
        stroke_width=DEFAULT_BREP_STROKE_WIDTH,
        opacity=DEFAULT_BREP_OPACITY,
    )


def resolve_shape_style(
    declared: Optional[ShapeStyle],
    layer: str,
    color_map: Mapping[str, Any],
    precedence: StylePrecedence = StylePrecedence.POLICY,
) -> ShapeStyle:
    """
    Resolve the effective style of a brep element.

    Args:
        declared: Style carried by the element, if any
        layer: Element layer name
        color_map: Active color map
        precedence: Which stage wins on conflicts

    Returns:
        Fully populated ShapeStyle
    """
    policy = policy_style(layer, color_map)
    if declared is None or precedence is StylePrecedence.POLICY:
        return policy

    def pick(declared_value, policy_value):
        return declared_value if declared_value is not None else policy_value

    return ShapeStyle(
        fill=pick(declared.fill, policy.fill),
        stroke=pick(declared.stroke, policy.stroke),
        stroke_width=pick(declared.stroke_width, policy.stroke_width),
        opacity=pick(declared.opacity, policy.opacity),
    )


def draw_brep_face(
    painter: QPainter,
    face: BrepFace,
    outer: Polygon,
    style: ShapeStyle,
    transform: QTransform,
) -> None:
    """Draw one face from its pre-tessellated outer loop."""
    draw_polygon(painter, outer, style.fill, transform)

    if face.holes:
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_DestinationOut)
        for hole in face.holes:
            hole_polygon = loop_to_polygon(hole)
            if hole_polygon.points >= MIN_FILL_POINTS:
                draw_polygon(painter, hole_polygon, HOLE_PUNCH_COLOR, transform)
            else:
                logger.debug("Skipping degenerate hole (%d points)", hole_polygon.points)
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)

    draw_path(
        painter,
        outer,
        style.stroke,
        style.stroke_width,
        transform,
        close_path=True,
    )


def draw_brep_element(
    painter: QPainter,
    element: BrepElement,
    transform: QTransform,
    color_map: Mapping[str, Any],
    precedence: StylePrecedence = StylePrecedence.POLICY,
) -> int:
    """
    Draw a copper pour or brep shape.

    Faces whose outer loop tessellates to fewer than MIN_FILL_POINTS
    points are skipped. If no face is drawable the painter is not touched.

    Returns:
        Number of faces drawn
    """
    drawable: List[Tuple[BrepFace, Polygon]] = []
    for face in element.faces():
        outer = loop_to_polygon(face.outer)
        if outer.points < MIN_FILL_POINTS:
            logger.debug("Skipping degenerate face of '%s' (%d points)",
                         element.id, outer.points)
            continue
        drawable.append((face, outer))

    if not drawable:
        return 0

    style = resolve_shape_style(
        getattr(element, "style", None),
        element.layer,
        color_map,
        precedence,
    )

    with saved_state(painter):
        if style.opacity is not None:
            painter.setOpacity(style.opacity)
        for face, outer in drawable:
            draw_brep_face(painter, face, outer, style, transform)

    return len(drawable)


def draw_plated_hole(
    painter: QPainter,
    hole: PlatedHole,
    transform: QTransform,
    color_map: Mapping[str, Any],
) -> bool:
    """
    Draw a plated hole: copper pad first, drill on top.

    Returns:
        False for an unknown hole shape (nothing drawn)
    """
    copper = color_map["copper"]["top"]
    drill = color_map["drill"]
    center = hole.position
    hole_center = (hole.x + hole.hole_offset_x, hole.y + hole.hole_offset_y)

    if hole.shape == "circle":
        draw_circle(painter, center, hole.outer_diameter / 2, copper, transform)
        draw_circle(painter, center, hole.hole_diameter / 2, drill, transform)
    elif hole.shape == "oval":
        draw_oval(painter, center, hole.outer_width, hole.outer_height,
                  copper, transform, rotation=hole.rotation)
        draw_oval(painter, center, hole.hole_width, hole.hole_height,
                  drill, transform, rotation=hole.rotation)
    elif hole.shape == "pill":
        draw_pill(painter, center, hole.outer_width, hole.outer_height,
                  copper, transform, rotation=hole.rotation)
        draw_pill(painter, center, hole.hole_width, hole.hole_height,
                  drill, transform, rotation=hole.rotation)
    elif hole.shape == "circular_hole_with_rect_pad":
        draw_rect(painter, center, hole.rect_pad_width, hole.rect_pad_height,
                  copper, transform, border_radius=hole.rect_border_radius,
                  rotation=hole.rotation)
        draw_circle(painter, hole_center, hole.hole_diameter / 2, drill, transform)
    elif hole.shape == "pill_hole_with_rect_pad":
        draw_rect(painter, center, hole.rect_pad_width, hole.rect_pad_height,
                  copper, transform, border_radius=hole.rect_border_radius,
                  rotation=hole.rotation)
        draw_pill(painter, hole_center, hole.hole_width, hole.hole_height,
                  drill, transform, rotation=hole.rotation)
    else:
        logger.debug("Unsupported plated hole shape '%s' on '%s'", hole.shape, hole.id)
        return False

    return True
