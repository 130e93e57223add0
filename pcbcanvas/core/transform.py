"""
Design-space to canvas-pixel transforms.

The drawer maps real-world board coordinates onto a bounded pixel canvas
with a uniform scale, so the whole design fits without distortion and is
centered on the canvas:

    pixel = offset + scale * (point - bounds_min)

The transform is a QTransform (m11 m12 m21 m22 dx dy).
"""

from dataclasses import dataclass
from typing import Any, Mapping, Tuple
import numpy as np

from PySide6.QtCore import QPointF
from PySide6.QtGui import QTransform


@dataclass(frozen=True)
class CameraBounds:
    """
    Real-world viewport bounds.

    Attributes:
        min_x, min_y: Lower corner
        max_x, max_y: Upper corner (must exceed the lower corner)
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CameraBounds":
        """Build bounds from either minX/maxX or min_x/max_x keys."""
        def pick(camel: str, snake: str) -> float:
            value = data[camel] if camel in data else data[snake]
            return float(value)

        return cls(
            min_x=pick("minX", "min_x"),
            min_y=pick("minY", "min_y"),
            max_x=pick("maxX", "max_x"),
            max_y=pick("maxY", "max_y"),
        )


def compute_transform(
    bounds: CameraBounds,
    canvas_width: float,
    canvas_height: float,
) -> QTransform:
    """
    Compute the affine map from design-space bounds to canvas pixels.

    Args:
        bounds: Real-world bounds to show
        canvas_width, canvas_height: Pixel size of the canvas (> 0)

    Returns:
        QTransform applying translate(-min), then scale, then the
        centering offset

    Degenerate bounds (zero width or height) yield non-finite
    coefficients; that is a caller error and is not recovered here.
    """
    real_width = np.float64(bounds.width)
    real_height = np.float64(bounds.height)

    with np.errstate(divide="ignore", invalid="ignore"):
        scale_x = np.float64(canvas_width) / real_width
        scale_y = np.float64(canvas_height) / real_height
        uniform_scale = float(np.minimum(scale_x, scale_y))

        offset_x = float((canvas_width - real_width * uniform_scale) / 2)
        offset_y = float((canvas_height - real_height * uniform_scale) / 2)

    # QTransform products apply left to right
    return (
        QTransform.fromTranslate(-bounds.min_x, -bounds.min_y)
        * QTransform.fromScale(uniform_scale, uniform_scale)
        * QTransform.fromTranslate(offset_x, offset_y)
    )


def linear_scale(transform: QTransform) -> float:
    """Uniform linear scale factor of a transform (|m11|)."""
    return abs(transform.m11())


def apply_to_point(transform: QTransform, x: float, y: float) -> Tuple[float, float]:
    """Map a single design-space point to canvas pixels."""
    mapped = transform.map(QPointF(x, y))
    return (mapped.x(), mapped.y())
