"""
Rats nest rendering.

Draws net connectivity as dashed segments before any routing exists.
Every resolved point of a net is joined to its nearest other point of the
same net (O(n^2) per net). Points pick their neighbours independently, so
the result is not guaranteed to be connected; an undirected pair is drawn
once even when both ends pick each other.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from PySide6.QtCore import QLineF, QPointF, Qt
from PySide6.QtGui import QPainter, QTransform

from pcbcanvas.core.primitives import CircuitElement
from pcbcanvas.graphics.layers import dashed_pen
from pcbcanvas.graphics.shapes import saved_state
from pcbcanvas.netlist.connectivity import ConnectivityMap, Position, PositionIndex


logger = logging.getLogger(__name__)

RATS_NEST_LINE_WIDTH = 1.0
RATS_NEST_DASH = (2.0, 2.0)

Segment = Tuple[Position, Position]


def find_nearest_point(
    source: Position,
    points: Sequence[Position],
) -> Optional[Position]:
    """
    Nearest point to source by Euclidean distance.

    Zero-distance points are excluded, so a point never pairs with itself
    or with a duplicate of its own coordinates. Ties keep the first
    minimum found.
    """
    nearest: Optional[Position] = None
    min_distance = math.inf

    for pos in points:
        distance = math.hypot(source[0] - pos[0], source[1] - pos[1])
        if 0 < distance < min_distance:
            min_distance = distance
            nearest = pos

    return nearest


def rats_nest_segments(
    index: PositionIndex,
    connectivity: ConnectivityMap,
) -> List[Segment]:
    """
    Compute the nearest-neighbour segments of every net.

    Ids without a resolvable position are excluded. Nets with fewer than
    two distinct positions contribute nothing.
    """
    segments: List[Segment] = []

    for net_id in connectivity.nets():
        positions = index.resolve(connectivity.ids_connected_to_net(net_id))
        seen = set()

        for source in positions:
            nearest = find_nearest_point(source, positions)
            if nearest is None:
                continue
            key = (min(source, nearest), max(source, nearest))
            if key in seen:
                continue
            seen.add(key)
            segments.append((source, nearest))

    return segments


def draw_rats_nest(
    painter: QPainter,
    elements: Sequence[CircuitElement],
    connectivity: Union[ConnectivityMap, Mapping[str, Sequence[str]]],
    transform: QTransform,
    color_map: Mapping[str, Any],
    index: Optional[PositionIndex] = None,
) -> int:
    """
    Draw the rats nest for a set of elements.

    Args:
        painter: Active painter
        elements: Circuit elements providing positions
        connectivity: Net map, as ConnectivityMap or plain mapping
        transform: Design-space to canvas transform
        color_map: Active color map (silkscreen.top is the line color)
        index: Prebuilt position index, built from elements if omitted

    Returns:
        Number of segments drawn
    """
    if not isinstance(connectivity, ConnectivityMap):
        connectivity = ConnectivityMap(connectivity)
    if index is None:
        index = PositionIndex.from_elements(elements)

    segments = rats_nest_segments(index, connectivity)
    logger.debug("Rats nest: %d nets, %d segments", len(connectivity), len(segments))
    if not segments:
        return 0

    pen = dashed_pen(color_map["silkscreen"]["top"], RATS_NEST_LINE_WIDTH, RATS_NEST_DASH)

    with saved_state(painter):
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for source, target in segments:
            painter.drawLine(QLineF(
                transform.map(QPointF(*source)),
                transform.map(QPointF(*target)),
            ))

    return len(segments)
