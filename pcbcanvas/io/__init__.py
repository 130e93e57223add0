"""
File I/O for pcbcanvas.

Reads circuit JSON element lists into the typed element model.
"""

from pcbcanvas.io.circuit_reader import (
    CircuitDocument,
    calculate_bounds,
    parse_element,
    read_circuit_file,
    read_elements,
)

__all__ = [
    "CircuitDocument",
    "calculate_bounds",
    "parse_element",
    "read_circuit_file",
    "read_elements",
]
