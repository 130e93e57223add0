"""
Net connectivity for pcbcanvas.

Provides the read-only net map and element position lookups. Rats-nest
drawing lives in pcbcanvas.netlist.rats_nest.
"""

from pcbcanvas.netlist.connectivity import ConnectivityMap, PositionIndex

__all__ = [
    "ConnectivityMap",
    "PositionIndex",
]
