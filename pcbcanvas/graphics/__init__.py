"""
Graphics subsystem for pcbcanvas.

Everything here draws through a QPainter:
- Color map defaults, overrides and pen/brush helpers
- Painter-level shape primitives (polygon, path, rect, pill, circle, oval)
- Element renderers for plated holes and brep shapes

The drawer facade lives in pcbcanvas.graphics.drawer.
"""

from pcbcanvas.graphics.layers import (
    DEFAULT_PCB_COLOR_MAP,
    PcbColorMap,
    default_color_map,
    default_fill_color,
    merge_color_overrides,
    to_qcolor,
)
from pcbcanvas.graphics.shapes import (
    draw_circle,
    draw_oval,
    draw_path,
    draw_pill,
    draw_polygon,
    draw_rect,
    saved_state,
)
from pcbcanvas.graphics.elements import (
    StylePrecedence,
    draw_brep_element,
    draw_brep_face,
    draw_plated_hole,
    resolve_shape_style,
)

__all__ = [
    # Colors
    "DEFAULT_PCB_COLOR_MAP",
    "PcbColorMap",
    "default_color_map",
    "default_fill_color",
    "merge_color_overrides",
    "to_qcolor",
    # Shapes
    "draw_circle",
    "draw_oval",
    "draw_path",
    "draw_pill",
    "draw_polygon",
    "draw_rect",
    "saved_state",
    # Elements
    "StylePrecedence",
    "draw_brep_element",
    "draw_brep_face",
    "draw_plated_hole",
    "resolve_shape_style",
]
