"""
Circuit JSON reader for pcbcanvas.

Parses circuit-JSON element dicts into the typed element model.

Recognized element types:
    pcb_plated_hole  - PlatedHole
    pcb_copper_pour  - CopperPour (shape "brep" or "polygon")
    pcb_brep_shape   - BrepShape (typed-edge faces with a declared style)
    pcb_smtpad       - SmtPad (position only)
    pcb_via          - Via (position only)

Anything else, and any element that fails to parse, becomes an
UnknownElement so one bad record never aborts a drawing pass.

A circuit file is either a JSON list of elements or an object:
    {"elements": [...], "connectivity": {net: [ids]}, "bounds": {...}}
"""

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from pcbcanvas.core.primitives import (
    BrepEdge,
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
    PlatedHole,
    ShapeStyle,
    SmtPad,
    UnknownElement,
    Via,
)
from pcbcanvas.core.transform import CameraBounds
from pcbcanvas.netlist.connectivity import ConnectivityMap


logger = logging.getLogger(__name__)


@dataclass
class CircuitDocument:
    """Parsed contents of a circuit file."""
    elements: List[CircuitElement]
    connectivity: Optional[ConnectivityMap] = None
    bounds: Optional[CameraBounds] = None


def _num(data: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key)
    return float(value) if value is not None else default


def _vertex(data: Mapping[str, Any]) -> BrepVertex:
    z = data.get("z")
    return BrepVertex(
        x=float(data["x"]),
        y=float(data["y"]),
        z=float(z) if z is not None else None,
    )


def _edge(data: Mapping[str, Any]) -> BrepEdge:
    radius = data.get("radius")
    control = data.get("controlPoints", data.get("control_points")) or ()
    return BrepEdge(
        start=_vertex(data["start"]),
        end=_vertex(data["end"]),
        curve=CurveKind.parse(data.get("curve")),
        radius=float(radius) if radius is not None else None,
        control_points=tuple(_vertex(cp) for cp in control),
    )


def _loop(data: Mapping[str, Any]) -> BrepLoop:
    return BrepLoop(edges=tuple(_edge(e) for e in data.get("edges", ())))


def _ring(data: Mapping[str, Any]) -> BrepRing:
    return BrepRing(vertices=tuple(_vertex(v) for v in data.get("vertices", ())))


def _plane(data: Optional[Mapping[str, Any]]) -> Optional[BrepPlane]:
    if not data:
        return None
    normal = data.get("normal") or {}
    return BrepPlane(
        normal=(_num(normal, "x"), _num(normal, "y"), _num(normal, "z", 1.0)),
        offset=_num(data, "offset"),
    )


def _face(data: Mapping[str, Any]) -> BrepFace:
    return BrepFace(
        outer=_loop(data["outer"]),
        holes=tuple(_loop(h) for h in data.get("holes") or ()),
        plane=_plane(data.get("plane")),
    )


def _style(data: Optional[Mapping[str, Any]]) -> ShapeStyle:
    data = data or {}
    width = data.get("strokeWidth", data.get("stroke_width"))
    opacity = data.get("opacity")
    return ShapeStyle(
        fill=data.get("fill"),
        stroke=data.get("stroke"),
        stroke_width=float(width) if width is not None else None,
        opacity=float(opacity) if opacity is not None else None,
    )


def _layers(data: Mapping[str, Any]) -> Tuple[str, ...]:
    layers = data.get("layers")
    if not layers:
        return ("top", "bottom")
    return tuple(str(layer) for layer in layers)


def _parse_plated_hole(data: Mapping[str, Any]) -> PlatedHole:
    rotation = data.get("ccw_rotation", data.get("rect_ccw_rotation"))
    return PlatedHole(
        id=str(data.get("pcb_plated_hole_id", "")),
        shape=str(data["shape"]),
        x=float(data["x"]),
        y=float(data["y"]),
        layers=_layers(data),
        outer_diameter=_num(data, "outer_diameter"),
        hole_diameter=_num(data, "hole_diameter"),
        outer_width=_num(data, "outer_width"),
        outer_height=_num(data, "outer_height"),
        hole_width=_num(data, "hole_width"),
        hole_height=_num(data, "hole_height"),
        rect_pad_width=_num(data, "rect_pad_width"),
        rect_pad_height=_num(data, "rect_pad_height"),
        rect_border_radius=_num(data, "rect_border_radius"),
        hole_offset_x=_num(data, "hole_offset_x"),
        hole_offset_y=_num(data, "hole_offset_y"),
        rotation=float(rotation) if rotation is not None else 0.0,
    )


def _parse_copper_pour(data: Mapping[str, Any]) -> CircuitElement:
    shape = data.get("shape")
    if shape == "brep":
        brep = data["brep_shape"]
        outer = _ring(brep["outer_ring"])
        inner = tuple(_ring(r) for r in brep.get("inner_rings") or ())
    elif shape == "polygon":
        outer = BrepRing(vertices=tuple(_vertex(p) for p in data["points"]))
        inner = ()
    else:
        logger.debug("Unsupported copper pour shape '%s'", shape)
        return UnknownElement(type=str(data.get("type")), raw=dict(data))

    return CopperPour(
        id=str(data.get("pcb_copper_pour_id", "")),
        layer=str(data.get("layer", "top")),
        outer_ring=outer,
        inner_rings=inner,
        covered_with_solder_mask=bool(data.get("covered_with_solder_mask", False)),
    )


def _parse_brep_shape(data: Mapping[str, Any]) -> BrepShape:
    geometry = data.get("geometry") or {}
    operation = data.get("operation") or BrepOperation.ADD.value
    return BrepShape(
        id=str(data.get("pcb_brep_shape_id", "")),
        layer=str(data.get("layer", "top")),
        brep_faces=tuple(_face(f) for f in geometry.get("faces", ())),
        operation=BrepOperation(operation),
        style=_style(data.get("style")),
    )


def _parse_smtpad(data: Mapping[str, Any]) -> SmtPad:
    return SmtPad(
        id=str(data.get("pcb_smtpad_id", "")),
        x=float(data["x"]),
        y=float(data["y"]),
        layer=str(data.get("layer", "top")),
        shape=str(data.get("shape", "rect")),
        width=_num(data, "width"),
        height=_num(data, "height"),
    )


def _parse_via(data: Mapping[str, Any]) -> Via:
    return Via(
        id=str(data.get("pcb_via_id", "")),
        x=float(data["x"]),
        y=float(data["y"]),
        outer_diameter=_num(data, "outer_diameter"),
        hole_diameter=_num(data, "hole_diameter"),
        layers=_layers(data),
    )


_PARSERS = {
    "pcb_plated_hole": _parse_plated_hole,
    "pcb_copper_pour": _parse_copper_pour,
    "pcb_brep_shape": _parse_brep_shape,
    "pcb_smtpad": _parse_smtpad,
    "pcb_via": _parse_via,
}


def parse_element(data: Mapping[str, Any]) -> CircuitElement:
    """
    Parse one circuit-JSON element dict.

    Unknown types and malformed records become UnknownElement.
    """
    element_type = str(data.get("type", ""))
    parser = _PARSERS.get(element_type)
    if parser is None:
        return UnknownElement(type=element_type, raw=dict(data))

    try:
        return parser(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        # AttributeError: a nested object arrived as a list or scalar
        logger.warning("Skipping malformed '%s' element: %s", element_type, exc)
        return UnknownElement(type=element_type, raw=dict(data))


def read_elements(items: Iterable[Mapping[str, Any]]) -> List[CircuitElement]:
    """Parse a list of circuit-JSON element dicts."""
    return [parse_element(item) for item in items]


def read_circuit_file(filepath: Path) -> CircuitDocument:
    """
    Read a circuit JSON file.

    Args:
        filepath: Path to a .json file

    Returns:
        Parsed CircuitDocument

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the top level is neither a list nor an object
            with an "elements" list
    """
    logger.info("Reading circuit file '%s'", filepath)
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    connectivity = None
    bounds = None
    if isinstance(data, list):
        raw_elements = data
    elif isinstance(data, dict) and isinstance(data.get("elements"), list):
        raw_elements = data["elements"]
        if data.get("connectivity"):
            connectivity = ConnectivityMap(data["connectivity"])
        if data.get("bounds"):
            bounds = CameraBounds.from_dict(data["bounds"])
    else:
        raise ValueError(f"'{filepath}' is not a circuit element list")

    elements = read_elements(raw_elements)
    logger.info(
        "Read complete '%s' (elements=%d unknown=%d nets=%d)",
        filepath,
        len(elements),
        sum(1 for e in elements if isinstance(e, UnknownElement)),
        len(connectivity) if connectivity is not None else 0,
    )
    return CircuitDocument(elements=elements, connectivity=connectivity, bounds=bounds)


def _element_extent(element: CircuitElement) -> List[Tuple[float, float]]:
    """Corner points covering an element's footprint."""
    points: List[Tuple[float, float]] = []

    if isinstance(element, PlatedHole):
        half = max(element.extent)
        points += [(element.x - half, element.y - half), (element.x + half, element.y + half)]
    elif isinstance(element, SmtPad):
        hw, hh = element.width / 2, element.height / 2
        points += [(element.x - hw, element.y - hh), (element.x + hw, element.y + hh)]
    elif isinstance(element, Via):
        r = element.outer_diameter / 2
        points += [(element.x - r, element.y - r), (element.x + r, element.y + r)]
    elif isinstance(element, (CopperPour, BrepShape)):
        for face in element.faces():
            for loop in (face.outer,) + tuple(face.holes):
                for edge in loop.edges:
                    points += [edge.start.xy, edge.end.xy]
                    points += [cp.xy for cp in edge.control_points]
                    if edge.curve is CurveKind.ARC and edge.radius:
                        r = abs(edge.radius)
                        points += [
                            (edge.start.x - r, edge.start.y - r),
                            (edge.start.x + r, edge.start.y + r),
                        ]

    return points


def calculate_bounds(
    elements: Iterable[CircuitElement],
    padding: float = 0.0,
) -> Optional[CameraBounds]:
    """
    Calculate padded bounds covering every element.

    Returns:
        CameraBounds, or None when there is no geometry or the padded
        extent has zero width or height
    """
    all_x: List[float] = []
    all_y: List[float] = []
    for element in elements:
        for x, y in _element_extent(element):
            all_x.append(x)
            all_y.append(y)

    if not all_x:
        return None

    bounds = CameraBounds(
        min_x=min(all_x) - padding,
        min_y=min(all_y) - padding,
        max_x=max(all_x) + padding,
        max_y=max(all_y) + padding,
    )
    if bounds.width <= 0 or bounds.height <= 0:
        return None
    return bounds
