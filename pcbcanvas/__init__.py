"""
pcbcanvas - raster rendering of circuit-board layouts with PySide6.

Draws plated holes, brep copper pours and rats-nest connectivity onto a
QPainter surface. The entry point for library use is
pcbcanvas.graphics.drawer.PcbCanvasDrawer.
"""

__version__ = "0.1.0"
__author__ = "pcbcanvas Contributors"
