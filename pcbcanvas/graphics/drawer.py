"""
Circuit-board drawer for pcbcanvas.

PcbCanvasDrawer owns the painter, the active design-to-canvas transform
and the color map for one drawing session, and dispatches each circuit
element to its renderer.
"""

from copy import deepcopy
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from PySide6.QtGui import QPainter, QPaintDevice, QTransform

from pcbcanvas.core.primitives import CircuitElement, ElementKind
from pcbcanvas.core.transform import CameraBounds, compute_transform
from pcbcanvas.graphics.elements import (
    StylePrecedence,
    draw_brep_element,
    draw_plated_hole,
)
from pcbcanvas.graphics.layers import (
    PcbColorMap,
    default_color_map,
    merge_color_overrides,
)
from pcbcanvas.io.circuit_reader import parse_element
from pcbcanvas.netlist.connectivity import ConnectivityMap, PositionIndex
from pcbcanvas.netlist.rats_nest import draw_rats_nest


logger = logging.getLogger(__name__)

ElementInput = Union[CircuitElement, Mapping[str, Any]]


class DrawerInitError(RuntimeError):
    """Raised when no drawing context can be obtained from a surface."""


class PcbCanvasDrawer:
    """
    Renders circuit elements onto a Qt paint surface.

    Accepts either an active QPainter, a QPaintDevice (a QImage, usually)
    on which a painter is opened and owned, or a provider object with a
    get_context() method returning a painter.

    Example:
        >>> image = QImage(100, 100, QImage.Format.Format_ARGB32_Premultiplied)
        >>> with PcbCanvasDrawer(image) as drawer:
        ...     drawer.set_camera_bounds(CameraBounds(0, 0, 100, 100))
        ...     drawer.draw_elements(elements)
    """

    def __init__(self, surface: Any, antialias: bool = True):
        """
        Initialize the drawer.

        Args:
            surface: QPainter, QPaintDevice or drawing-context provider
            antialias: Enable antialiasing on painters opened by the drawer

        Raises:
            DrawerInitError: If no active painter can be obtained
        """
        self._owns_painter = False
        # Held while the drawer owns the painter; QPainter does not keep the
        # device alive
        self._surface: Optional[QPaintDevice] = None

        if isinstance(surface, QPainter):
            painter = surface
        elif isinstance(surface, QPaintDevice):
            painter = QPainter()
            if not painter.begin(surface):
                raise DrawerInitError("Failed to open a QPainter on the paint device")
            self._owns_painter = True
            self._surface = surface
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, antialias)
        else:
            get_context = getattr(surface, "get_context", None)
            if not callable(get_context):
                raise DrawerInitError(
                    f"{type(surface).__name__} provides no drawing context"
                )
            painter = get_context()
            if painter is None:
                raise DrawerInitError("Failed to get a drawing context from the surface provider")

        if not painter.isActive():
            raise DrawerInitError("Drawing context is not an active painter")

        self._painter: QPainter = painter
        self._color_map: PcbColorMap = default_color_map()
        self._style_precedence = StylePrecedence.POLICY
        self._transform = QTransform()

    @property
    def painter(self) -> QPainter:
        """The painter all drawing goes through."""
        return self._painter

    @property
    def owns_painter(self) -> bool:
        """True if the drawer opened the painter and will end it."""
        return self._owns_painter

    @property
    def transform(self) -> QTransform:
        """Active design-space to canvas transform."""
        return self._transform

    @property
    def color_map(self) -> PcbColorMap:
        """Copy of the active color map; change it through configure()."""
        return deepcopy(self._color_map)

    @property
    def style_precedence(self) -> StylePrecedence:
        return self._style_precedence

    def configure(
        self,
        color_overrides: Optional[Mapping[str, Any]] = None,
        style_precedence: Optional[StylePrecedence] = None,
    ) -> None:
        """
        Apply drawer configuration.

        Args:
            color_overrides: Color map overrides; merged shallowly per
                top-level key and one level deep for nested groups
            style_precedence: Brep style precedence, see StylePrecedence
        """
        if color_overrides:
            self._color_map = merge_color_overrides(self._color_map, color_overrides)
            logger.debug("Applied color overrides for %s", sorted(color_overrides))
        if style_precedence is not None:
            self._style_precedence = StylePrecedence(style_precedence)

    def set_camera_bounds(self, bounds: Union[CameraBounds, Mapping[str, float]]) -> QTransform:
        """
        Fit real-world bounds onto the painter's device.

        The device size is read once here; resizing the surface later does
        not recompute the transform.

        Returns:
            The new active transform
        """
        if not isinstance(bounds, CameraBounds):
            bounds = CameraBounds.from_dict(bounds)

        device = self._painter.device()
        self._transform = compute_transform(bounds, device.width(), device.height())
        logger.debug(
            "Camera bounds %s on %dx%d canvas",
            bounds, device.width(), device.height(),
        )
        return self._transform

    def draw_elements(
        self,
        elements: Iterable[ElementInput],
        layers: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Draw circuit elements.

        Args:
            elements: Typed elements or raw circuit-JSON dicts
            layers: Only draw elements on one of these layers (None = all)
        """
        for element in self._normalize(elements):
            self._draw_element(element, layers)

    def draw_rats_nest(
        self,
        elements: Iterable[ElementInput],
        connectivity: Union[ConnectivityMap, Mapping[str, Sequence[str]]],
    ) -> int:
        """
        Draw nearest-neighbour net connectivity.

        Returns:
            Number of segments drawn
        """
        typed = self._normalize(elements)
        return draw_rats_nest(
            self._painter,
            typed,
            connectivity,
            self._transform,
            self._color_map,
            index=PositionIndex.from_elements(typed),
        )

    def close(self) -> None:
        """End the painter if the drawer opened it."""
        if self._owns_painter and self._painter.isActive():
            self._painter.end()
        self._surface = None

    def __enter__(self) -> "PcbCanvasDrawer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _normalize(self, elements: Iterable[ElementInput]) -> List[CircuitElement]:
        """Parse raw dict elements, pass typed ones through."""
        return [
            parse_element(e) if isinstance(e, Mapping) else e
            for e in elements
        ]

    def _draw_element(self, element: CircuitElement, layers: Optional[Sequence[str]]) -> None:
        kind = element.kind

        if kind is ElementKind.PLATED_HOLE:
            if _on_layers(element.layers, layers):
                draw_plated_hole(self._painter, element, self._transform, self._color_map)
        elif kind in (ElementKind.COPPER_POUR, ElementKind.BREP_SHAPE):
            if _on_layers((element.layer,), layers):
                draw_brep_element(
                    self._painter,
                    element,
                    self._transform,
                    self._color_map,
                    self._style_precedence,
                )
        elif kind in (ElementKind.SMT_PAD, ElementKind.VIA, ElementKind.UNKNOWN):
            # Position-only or unhandled kinds are not rendered
            logger.debug("Not rendering element of kind '%s'", kind.value)


def _on_layers(element_layers: Sequence[str], layers: Optional[Sequence[str]]) -> bool:
    if layers is None:
        return True
    return any(layer in layers for layer in element_layers)
