"""
Core data models for pcbcanvas.

This package contains the circuit element model, boundary tessellation
and the design-space to canvas transform.
"""

from pcbcanvas.core.primitives import (
    BrepEdge,
    BrepElement,
    BrepFace,
    BrepLoop,
    BrepOperation,
    BrepPlane,
    BrepRing,
    BrepShape,
    BrepVertex,
    CircuitElement,
    CopperPour,
    CurveKind,
    ElementKind,
    PlatedHole,
    Polygon,
    ShapeStyle,
    SmtPad,
    UnknownElement,
    Via,
)
from pcbcanvas.core.brep import (
    ARC_SEGMENTS,
    BEZIER_SEGMENTS,
    MIN_FILL_POINTS,
    bezier_points,
    loop_to_polygon,
    tessellate_edge,
    tessellate_loop,
)
from pcbcanvas.core.transform import (
    CameraBounds,
    apply_to_point,
    compute_transform,
    linear_scale,
)

__all__ = [
    # Elements
    "BrepEdge",
    "BrepElement",
    "BrepFace",
    "BrepLoop",
    "BrepOperation",
    "BrepPlane",
    "BrepRing",
    "BrepShape",
    "BrepVertex",
    "CircuitElement",
    "CopperPour",
    "CurveKind",
    "ElementKind",
    "PlatedHole",
    "Polygon",
    "ShapeStyle",
    "SmtPad",
    "UnknownElement",
    "Via",
    # Tessellation
    "ARC_SEGMENTS",
    "BEZIER_SEGMENTS",
    "MIN_FILL_POINTS",
    "bezier_points",
    "loop_to_polygon",
    "tessellate_edge",
    "tessellate_loop",
    # Transform
    "CameraBounds",
    "apply_to_point",
    "compute_transform",
    "linear_scale",
]
