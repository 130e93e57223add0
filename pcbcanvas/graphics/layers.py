"""
Color management for pcbcanvas.

Provides the default PCB color map, override merging, the layer-based
fill-color policy and conversion of CSS-like color strings to QColor.
"""

from __future__ import annotations

from copy import deepcopy
import logging
import re
from typing import Any, Dict, Mapping, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QPen


logger = logging.getLogger(__name__)


PcbColorMap = Dict[str, Any]

# Groups merged one level deep by configure()
NESTED_COLOR_GROUPS = (
    "copper",
    "silkscreen",
    "soldermask",
    "soldermaskWithCopperUnderneath",
    "soldermaskOverCopper",
)

DEFAULT_PCB_COLOR_MAP: PcbColorMap = {
    "copper": {
        "top": "rgb(200, 52, 52)",
        "bottom": "rgb(77, 127, 196)",
    },
    "silkscreen": {
        "top": "#f2eeef",
        "bottom": "#5da9e9",
    },
    "soldermask": {
        "top": "rgb(18, 82, 50)",
        "bottom": "rgb(18, 82, 50)",
    },
    "soldermaskWithCopperUnderneath": {
        "top": "rgb(18, 110, 60)",
        "bottom": "rgb(18, 110, 60)",
    },
    "soldermaskOverCopper": {
        "top": "rgb(52, 135, 73)",
        "bottom": "rgb(52, 135, 73)",
    },
    "drill": "#ff26e2",
    "boardOutline": "rgba(255, 255, 255, 0.5)",
}

_RGB_PATTERN = re.compile(
    r"^\s*rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)\s*$",
    re.IGNORECASE,
)


def default_color_map() -> PcbColorMap:
    """Return a fresh copy of the default color map."""
    return deepcopy(DEFAULT_PCB_COLOR_MAP)


def merge_color_overrides(
    current: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]],
) -> PcbColorMap:
    """
    Merge a color-override structure into a color map.

    Merge is shallow per top-level key and one level deep for the nested
    color groups; unspecified keys keep their current values.

    Args:
        current: Existing color map (left unmodified)
        overrides: Override structure, may be None or empty

    Returns:
        New merged color map
    """
    merged = deepcopy(dict(current))
    if not overrides:
        return merged

    for key, value in overrides.items():
        if key in NESTED_COLOR_GROUPS and isinstance(value, Mapping):
            group = dict(merged.get(key) or {})
            group.update(value)
            merged[key] = group
        else:
            merged[key] = value
    return merged


def default_fill_color(layer: str, color_map: Mapping[str, Any]) -> str:
    """
    Resolve the default fill color for a layer name.

    top* -> copper.top, bottom* -> copper.bottom, drill -> drill,
    silkscreen_top / silkscreen_bottom -> silkscreen, else copper.top.
    """
    if layer.startswith("top"):
        return color_map["copper"]["top"]
    if layer.startswith("bottom"):
        return color_map["copper"]["bottom"]
    if layer == "drill":
        return color_map["drill"]
    if layer == "silkscreen_top":
        return color_map["silkscreen"]["top"]
    if layer == "silkscreen_bottom":
        return color_map["silkscreen"]["bottom"]
    return color_map["copper"]["top"]


def to_qcolor(color: str) -> QColor:
    """
    Convert a color string to a QColor.

    Accepts everything QColor understands (#rgb, #rrggbb, SVG names)
    plus CSS rgb(r, g, b) and rgba(r, g, b, a) with a in [0, 1].
    """
    match = _RGB_PATTERN.match(color)
    if match:
        r, g, b, a = match.groups()
        qcolor = QColor(int(float(r)), int(float(g)), int(float(b)))
        if a is not None:
            qcolor.setAlphaF(max(0.0, min(1.0, float(a))))
        return qcolor

    qcolor = QColor(color)
    if not qcolor.isValid():
        logger.debug("Unrecognized color '%s'", color)
    return qcolor


def solid_brush(color: str) -> QBrush:
    """Create a solid QBrush for a color string."""
    return QBrush(to_qcolor(color), Qt.BrushStyle.SolidPattern)


def stroke_pen(color: str, width: float) -> QPen:
    """Create a solid QPen with round joins for outline strokes."""
    pen = QPen(to_qcolor(color))
    pen.setWidthF(width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    pen.setStyle(Qt.PenStyle.SolidLine)
    return pen


def dashed_pen(color: str, width: float, dash: tuple[float, float]) -> QPen:
    """
    Create a dashed QPen.

    Args:
        color: Stroke color
        width: Line width in pixels
        dash: (dash, gap) lengths in pixels
    """
    pen = QPen(to_qcolor(color))
    pen.setWidthF(width)
    pen.setCapStyle(Qt.PenCapStyle.FlatCap)
    # Qt dash patterns are in units of the pen width
    unit = width if width > 0 else 1.0
    pen.setDashPattern([dash[0] / unit, dash[1] / unit])
    return pen
