"""
pcbcanvas command line renderer.

Reads a circuit JSON file and renders it to a PNG image.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pcbcanvas import __version__
from pcbcanvas.config import JsonConfigManager
from pcbcanvas.logging_config import setup_logging


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISSING_INPUT = 1
EXIT_UNRENDERABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcbcanvas",
        description="Render circuit-board layout JSON to a PNG image.",
    )
    parser.add_argument("input", type=Path, help="circuit JSON file")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="output PNG (default: INPUT with .png suffix)")
    parser.add_argument("--width", type=int, default=None, help="canvas width in pixels")
    parser.add_argument("--height", type=int, default=None, help="canvas height in pixels")
    parser.add_argument("--layers", default=None,
                        help="comma separated layer filter, e.g. top,bottom")
    parser.add_argument("--no-rats-nest", action="store_true",
                        help="do not draw net connectivity")
    parser.add_argument("--log-level", default=None, help="stderr log level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _parse_layers(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    layers = [layer.strip() for layer in value.split(",") if layer.strip()]
    return layers or None


def _ensure_gui_application():
    """Return the running QGuiApplication, creating an offscreen one if needed."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv[:1])
        app.setApplicationName("pcbcanvas")
        app.setApplicationVersion(__version__)
    return app


def run_app(args: List[str]) -> int:
    """Render a circuit file; returns the process exit code."""
    options = build_parser().parse_args(args)

    log_path = setup_logging(options.log_level)
    config_manager = JsonConfigManager()
    logger.info("Starting pcbcanvas (args=%s, log_file=%s)", args, log_path)
    logger.info("Configuration directory: %s", config_manager.config_dir)
    settings = config_manager.render_settings()

    input_path: Path = options.input
    if not input_path.is_file():
        logger.error("Input file not found: %s", input_path)
        return EXIT_MISSING_INPUT
    output_path: Path = options.output or input_path.with_suffix(".png")

    _ensure_gui_application()

    # Import here so QT_QPA_PLATFORM is set before any Qt GUI module loads
    from PySide6.QtGui import QColor, QImage

    from pcbcanvas.graphics.drawer import DrawerInitError, PcbCanvasDrawer
    from pcbcanvas.graphics.layers import to_qcolor
    from pcbcanvas.io.circuit_reader import calculate_bounds, read_circuit_file

    try:
        document = read_circuit_file(input_path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read '%s': %s", input_path, exc)
        return EXIT_UNRENDERABLE

    bounds = document.bounds or calculate_bounds(document.elements, settings.padding)
    if bounds is None:
        logger.error("'%s' has no drawable geometry", input_path)
        return EXIT_UNRENDERABLE

    width = options.width or settings.width
    height = options.height or settings.height
    image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
    background = to_qcolor(settings.background)
    image.fill(background if background.isValid() else QColor("black"))

    draw_rats_nest = (
        not options.no_rats_nest
        and settings.draw_rats_nest
        and document.connectivity is not None
    )

    try:
        drawer = PcbCanvasDrawer(image, antialias=settings.antialias)
    except DrawerInitError as exc:
        logger.error("Cannot paint a %dx%d canvas: %s", width, height, exc)
        return EXIT_UNRENDERABLE

    with drawer:
        drawer.configure(color_overrides=config_manager.color_overrides())
        drawer.set_camera_bounds(bounds)
        drawer.draw_elements(document.elements, layers=_parse_layers(options.layers))
        if draw_rats_nest:
            segments = drawer.draw_rats_nest(document.elements, document.connectivity)
            logger.info("Drew %d rats nest segments", segments)

    if not image.save(str(output_path), "PNG"):
        logger.error("Failed to write image '%s'", output_path)
        return EXIT_UNRENDERABLE

    logger.info("Rendered '%s' to '%s' (%dx%d)", input_path, output_path, width, height)
    return EXIT_OK
