"""
Circuit-board elements and boundary-representation geometry.

This module defines the typed data model consumed by the drawer:
- BrepVertex / BrepEdge / BrepLoop / BrepFace: typed-edge boundary loops
- BrepRing: closed vertex ring (the form copper pours store their rings in)
- Polygon: tessellated planar polygon backed by NumPy arrays
- PlatedHole, CopperPour, BrepShape, SmtPad, Via: circuit elements

Elements form a closed set tagged by ElementKind. Anything the reader
does not recognise becomes an UnknownElement so the drawer can skip it
explicitly instead of by omission.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Tuple, Union, Dict, Any, ClassVar
import numpy as np
from numpy.typing import NDArray


class CurveKind(str, Enum):
    """Curve type of a boundary edge."""
    LINE = "line"
    ARC = "arc"
    BEZIER = "bezier"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CurveKind"]:
        """Return the matching kind, or None for missing/unknown strings."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class BrepOperation(str, Enum):
    """Boolean operation tag. Carried as metadata, never evaluated."""
    ADD = "add"
    SUBTRACT = "subtract"
    INTERSECT = "intersect"


class ElementKind(str, Enum):
    """Circuit element type tags."""
    PLATED_HOLE = "pcb_plated_hole"
    COPPER_POUR = "pcb_copper_pour"
    BREP_SHAPE = "pcb_brep_shape"
    SMT_PAD = "pcb_smtpad"
    VIA = "pcb_via"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BrepVertex:
    """Boundary vertex. z is accepted and ignored (planar renderer)."""
    x: float
    y: float
    z: Optional[float] = None

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class BrepEdge:
    """
    One typed edge of a boundary loop.

    Attributes:
        start: Start vertex (the arc center for ARC edges)
        end: End vertex
        curve: Curve kind, None degrades to a straight line
        radius: Arc radius, required for ARC edges
        control_points: One (quadratic) or two (cubic) bezier control points
    """
    start: BrepVertex
    end: BrepVertex
    curve: Optional[CurveKind] = None
    radius: Optional[float] = None
    control_points: Tuple[BrepVertex, ...] = ()


@dataclass(frozen=True)
class BrepLoop:
    """Ordered ring of edges. Closure is the caller's responsibility."""
    edges: Tuple[BrepEdge, ...] = ()


@dataclass(frozen=True)
class BrepPlane:
    """Plane metadata for a face. Accepted, not used for projection."""
    normal: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    offset: float = 0.0


@dataclass(frozen=True)
class BrepFace:
    """One outer loop plus zero or more hole loops."""
    outer: BrepLoop
    holes: Tuple[BrepLoop, ...] = ()
    plane: Optional[BrepPlane] = None


@dataclass(frozen=True)
class BrepRing:
    """Closed vertex ring, as stored on copper pours."""
    vertices: Tuple[BrepVertex, ...] = ()

    def to_loop(self) -> BrepLoop:
        """Convert to a loop of line edges, vertex i -> vertex (i+1) mod n."""
        n = len(self.vertices)
        edges = tuple(
            BrepEdge(
                start=self.vertices[i],
                end=self.vertices[(i + 1) % n],
                curve=CurveKind.LINE,
            )
            for i in range(n)
        )
        return BrepLoop(edges=edges)


@dataclass(frozen=True)
class ShapeStyle:
    """Declared or resolved drawing style. Unset fields are None."""
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None


@dataclass
class Polygon:
    """
    Tessellated planar polygon.

    Uses NumPy arrays for coordinate storage.

    Attributes:
        x: Array of x coordinates
        y: Array of y coordinates
    """
    x: NDArray[np.float64] = field(default_factory=lambda: np.array([], dtype=np.float64))
    y: NDArray[np.float64] = field(default_factory=lambda: np.array([], dtype=np.float64))

    @property
    def points(self) -> int:
        """Number of points in the polygon."""
        return len(self.x)

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        """Return bounding box."""
        if len(self.x) == 0:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            float(np.min(self.x)),
            float(np.min(self.y)),
            float(np.max(self.x)),
            float(np.max(self.y)),
        )

    def to_points(self) -> List[Tuple[float, float]]:
        """Return the vertices as a list of (x, y) tuples."""
        return [(float(px), float(py)) for px, py in zip(self.x, self.y)]

    @classmethod
    def from_points(cls, points: List[tuple[float, float]]) -> "Polygon":
        """Create polygon from list of (x, y) tuples."""
        x = np.array([p[0] for p in points], dtype=np.float64)
        y = np.array([p[1] for p in points], dtype=np.float64)
        return cls(x=x, y=y)


@dataclass(frozen=True)
class PlatedHole:
    """
    Drilled, metal-lined hole with its copper annulus or pad.

    Which size fields matter depends on shape:
        circle: outer_diameter, hole_diameter
        oval / pill: outer_width, outer_height, hole_width, hole_height
        circular_hole_with_rect_pad: hole_diameter, rect_pad_width,
            rect_pad_height, rect_border_radius
        pill_hole_with_rect_pad: hole_width, hole_height, rect_pad_width,
            rect_pad_height, rect_border_radius
    """
    kind: ClassVar[ElementKind] = ElementKind.PLATED_HOLE

    id: str
    shape: str
    x: float
    y: float
    layers: Tuple[str, ...] = ("top", "bottom")
    outer_diameter: float = 0.0
    hole_diameter: float = 0.0
    outer_width: float = 0.0
    outer_height: float = 0.0
    hole_width: float = 0.0
    hole_height: float = 0.0
    rect_pad_width: float = 0.0
    rect_pad_height: float = 0.0
    rect_border_radius: float = 0.0
    hole_offset_x: float = 0.0
    hole_offset_y: float = 0.0
    rotation: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def extent(self) -> Tuple[float, float]:
        """Half-width and half-height of the copper footprint, unrotated."""
        if self.shape == "circle":
            r = self.outer_diameter / 2
            return (r, r)
        if self.shape in ("oval", "pill"):
            return (self.outer_width / 2, self.outer_height / 2)
        return (self.rect_pad_width / 2, self.rect_pad_height / 2)


@dataclass(frozen=True)
class CopperPour:
    """Copper pour stored as an outer ring with inner (hole) rings."""
    kind: ClassVar[ElementKind] = ElementKind.COPPER_POUR

    id: str
    layer: str
    outer_ring: BrepRing
    inner_rings: Tuple[BrepRing, ...] = ()
    covered_with_solder_mask: bool = False

    def faces(self) -> Tuple[BrepFace, ...]:
        """Express the rings as a single face of line-edge loops."""
        return (
            BrepFace(
                outer=self.outer_ring.to_loop(),
                holes=tuple(ring.to_loop() for ring in self.inner_rings),
            ),
        )


@dataclass(frozen=True)
class BrepShape:
    """Generic brep shape with typed-edge faces and a declared style."""
    kind: ClassVar[ElementKind] = ElementKind.BREP_SHAPE

    id: str
    layer: str
    brep_faces: Tuple[BrepFace, ...] = ()
    operation: BrepOperation = BrepOperation.ADD
    style: ShapeStyle = field(default_factory=ShapeStyle)

    def faces(self) -> Tuple[BrepFace, ...]:
        return self.brep_faces


@dataclass(frozen=True)
class SmtPad:
    """Surface-mount pad. Only its position is used (rats nest lookups)."""
    kind: ClassVar[ElementKind] = ElementKind.SMT_PAD

    id: str
    x: float
    y: float
    layer: str = "top"
    shape: str = "rect"
    width: float = 0.0
    height: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Via:
    """Via. Only its position is used (rats nest lookups)."""
    kind: ClassVar[ElementKind] = ElementKind.VIA

    id: str
    x: float
    y: float
    outer_diameter: float = 0.0
    hole_diameter: float = 0.0
    layers: Tuple[str, ...] = ("top", "bottom")

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class UnknownElement:
    """Element of a type the drawer does not handle."""
    kind: ClassVar[ElementKind] = ElementKind.UNKNOWN

    type: str
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


BrepElement = Union[CopperPour, BrepShape]
CircuitElement = Union[PlatedHole, CopperPour, BrepShape, SmtPad, Via, UnknownElement]
