"""
Connectivity lookups for pcbcanvas.

ConnectivityMap is the read-only net map produced upstream
(net id -> ordered element ids). PositionIndex resolves element ids to
real-world positions; it is built once per drawing pass instead of
scanning the element list for every lookup.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from pcbcanvas.core.primitives import (
    CircuitElement,
    ElementKind,
)

logger = logging.getLogger(__name__)

Position = Tuple[float, float]

# Lookup priority when the same id appears on several element kinds
POSITION_KINDS = (ElementKind.SMT_PAD, ElementKind.PLATED_HOLE, ElementKind.VIA)


class ConnectivityMap:
    """
    Read-only mapping of net id to the element ids on that net.

    Net order and member order are preserved from the input mapping;
    duplicate member ids are dropped.
    """

    def __init__(self, net_map: Mapping[str, Iterable[str]]):
        self._nets: Dict[str, Tuple[str, ...]] = {
            str(net_id): tuple(dict.fromkeys(str(i) for i in ids))
            for net_id, ids in net_map.items()
        }
        self._net_by_id: Dict[str, str] = {}
        for net_id, ids in self._nets.items():
            for element_id in ids:
                self._net_by_id.setdefault(element_id, net_id)

    @property
    def net_map(self) -> Dict[str, Tuple[str, ...]]:
        """Copy of the underlying net map."""
        return dict(self._nets)

    def nets(self) -> List[str]:
        """Net ids in input order."""
        return list(self._nets)

    def ids_connected_to_net(self, net_id: str) -> Tuple[str, ...]:
        """Element ids on a net; empty for an unknown net."""
        return self._nets.get(net_id, ())

    def net_for_id(self, element_id: str) -> Optional[str]:
        """Net containing an element id, or None."""
        return self._net_by_id.get(element_id)

    def __len__(self) -> int:
        return len(self._nets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nets)

    def __contains__(self, net_id: object) -> bool:
        return net_id in self._nets


class PositionIndex:
    """
    Element id -> real-world position index.

    Smt pads, plated holes and vias contribute positions. When an id is
    shared between kinds the first kind in POSITION_KINDS wins.
    """

    def __init__(self, positions: Optional[Dict[str, Position]] = None):
        self._positions: Dict[str, Position] = dict(positions or {})

    @classmethod
    def from_elements(cls, elements: Sequence[CircuitElement]) -> "PositionIndex":
        """Build an index from a circuit element list."""
        by_kind: Dict[ElementKind, Dict[str, Position]] = {
            kind: {} for kind in POSITION_KINDS
        }
        for element in elements:
            table = by_kind.get(element.kind)
            if table is None:
                continue
            table.setdefault(element.id, element.position)

        positions: Dict[str, Position] = {}
        for kind in POSITION_KINDS:
            for element_id, pos in by_kind[kind].items():
                positions.setdefault(element_id, pos)

        logger.debug("Built position index with %d entries", len(positions))
        return cls(positions)

    def get(self, element_id: str) -> Optional[Position]:
        """Position of an element id, or None if it cannot be resolved."""
        return self._positions.get(element_id)

    def resolve(self, element_ids: Iterable[str]) -> List[Position]:
        """Positions of every resolvable id, in input order."""
        resolved: List[Position] = []
        for element_id in element_ids:
            pos = self._positions.get(element_id)
            if pos is None:
                logger.debug("No position for element '%s'", element_id)
                continue
            resolved.append(pos)
        return resolved

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._positions
