"""
Gaussian brush engine for the deform map.

A stroke adds a tint to every pixel around its center, weighted by a Gaussian
falloff. Pixels whose falloff is at or below FALLOFF_CUTOFF are not touched
at all, which leaves a hard edge at that contour.

Per pixel (x, y):
    distance = sqrt((cx - x)^2 + (cy - y)^2)
    falloff  = exp(-distance^2 / (2 * sigma^2))
    new      = current + color * falloff * power      (normalized space)
    new[clamp_channel] = clamp(new[clamp_channel], clamp_min, clamp_max)
    stored   = round(clip(new, 0, 1) * 255)

Only the box center +/- BRUSH_EXTENT_SIGMAS * sigma is scanned. Falloff
outside that box is far below the cutoff, so the result matches a full scan.

Example:
    >>> buffer = PixelBuffer.create(64, 64, (0, 0, 0, 255))
    >>> stroke = BrushStroke(center_x=32, center_y=32, sigma=4.0, power=0.5,
    ...                      clamp_min=0.0, clamp_max=1.0,
    ...                      clamp_channel=ClampChannel.R, color=(1, 0, 0, 0))
    >>> GaussianBrushEngine().apply(buffer, stroke)
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from DM_Libs.constants import BRUSH_EXTENT_SIGMAS, FALLOFF_CUTOFF
from DM_Libs.errors import InvalidParameterError
from DM_Libs.PaintLib.color_ops import (
    ClampChannel,
    UnitColor,
    blend_additive,
    clamp_channel,
    normalize,
    quantize,
    validate_unit_color,
)
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrushStroke:
    """Parameters for a single paint operation.

    Attributes:
        center_x: Stroke center x in pixels (may lie outside the buffer)
        center_y: Stroke center y in pixels (may lie outside the buffer)
        sigma: Gaussian standard deviation in pixels (> 0)
        power: Signed strength; negative values subtract the tint
        clamp_min: Lower bound for the clamp channel (normalized)
        clamp_max: Upper bound for the clamp channel (normalized)
        clamp_channel: The one channel that is clamped
        color: Normalized RGBA tint
    """
    center_x: float
    center_y: float
    sigma: float
    power: float
    clamp_min: float = 0.0
    clamp_max: float = 1.0
    clamp_channel: ClampChannel = ClampChannel.R
    color: UnitColor = (1.0, 0.0, 0.0, 0.0)

    def __post_init__(self):
        for name in ("center_x", "center_y", "sigma", "power", "clamp_min", "clamp_max"):
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidParameterError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)

        if self.sigma <= 0:
            raise InvalidParameterError(f"sigma must be > 0, got {self.sigma}")

        if self.clamp_min > self.clamp_max:
            raise InvalidParameterError(
                f"clamp_min must be <= clamp_max, got {self.clamp_min} > {self.clamp_max}"
            )

        try:
            if isinstance(self.clamp_channel, str):
                channel = ClampChannel[self.clamp_channel.upper()]
            else:
                channel = ClampChannel(self.clamp_channel)
        except (KeyError, ValueError):
            raise InvalidParameterError(f"Unsupported clamp channel: {self.clamp_channel!r}")
        object.__setattr__(self, "clamp_channel", channel)
        object.__setattr__(self, "color", validate_unit_color(self.color))

    @property
    def center(self) -> Tuple[float, float]:
        return self.center_x, self.center_y


def gaussian_falloff(distance, sigma: float):
    """Gaussian weight for a distance (scalar or array) from the stroke center."""
    distance = np.asarray(distance, dtype=np.float64)
    return np.exp(-np.square(distance) / (2.0 * sigma * sigma))


class GaussianBrushEngine:
    """Composites brush strokes onto a PixelBuffer."""

    def __init__(self, cutoff: float = FALLOFF_CUTOFF, extent_sigmas: float = BRUSH_EXTENT_SIGMAS) -> None:
        self.cutoff = cutoff
        self.extent_sigmas = extent_sigmas

    def stroke_bounds(self, buffer: PixelBuffer, stroke: BrushStroke) -> Tuple[int, int, int, int]:
        """
        Pixel box that can receive a contribution, clipped to the buffer.

        Returns:
            (x0, y0, x1, y1) with exclusive upper bounds. Empty when x0 >= x1 or y0 >= y1.
        """
        extent = self.extent_sigmas * stroke.sigma
        x0 = max(0, int(math.floor(stroke.center_x - extent)))
        y0 = max(0, int(math.floor(stroke.center_y - extent)))
        x1 = min(buffer.width, int(math.ceil(stroke.center_x + extent)) + 1)
        y1 = min(buffer.height, int(math.ceil(stroke.center_y + extent)) + 1)
        return x0, y0, x1, y1

    def falloff_map(self, buffer: PixelBuffer, stroke: BrushStroke) -> np.ndarray:
        """
        Falloff for every pixel of the buffer, zero where the cutoff skips it.

        Returns:
            (height, width) float64 array
        """
        weights = np.zeros((buffer.height, buffer.width), dtype=np.float64)
        x0, y0, x1, y1 = self.stroke_bounds(buffer, stroke)
        if x0 >= x1 or y0 >= y1:
            return weights

        falloff = self._region_falloff(stroke, x0, y0, x1, y1)
        weights[y0:y1, x0:x1] = np.where(falloff > self.cutoff, falloff, 0.0)
        return weights

    def apply(self, buffer: PixelBuffer, stroke: BrushStroke) -> int:
        """
        Apply one stroke to the buffer in place.

        Args:
            buffer: Buffer to paint into
            stroke: Validated stroke parameters

        Returns:
            Number of pixels written

        Raises:
            InvalidParameterError: If stroke is not a BrushStroke
        """
        if not isinstance(stroke, BrushStroke):
            raise InvalidParameterError(f"Expected BrushStroke, got {type(stroke)}")

        # A zero delta contributes nothing, so no pixel is clamped either
        if stroke.power == 0:
            return 0

        x0, y0, x1, y1 = self.stroke_bounds(buffer, stroke)
        if x0 >= x1 or y0 >= y1:
            logger.debug(f"Stroke at {stroke.center} lies entirely outside the buffer")
            return 0

        falloff = self._region_falloff(stroke, x0, y0, x1, y1)
        touched = falloff > self.cutoff
        count = int(np.count_nonzero(touched))
        if count == 0:
            return 0

        region = buffer.pixels[y0:y1, x0:x1]
        current = normalize(region[touched])
        painted = blend_additive(current, stroke.color, falloff[touched] * stroke.power)
        clamp_channel(painted, stroke.clamp_channel, stroke.clamp_min, stroke.clamp_max)
        region[touched] = quantize(painted)

        logger.debug(
            f"Applied stroke at {stroke.center} sigma={stroke.sigma} power={stroke.power} "
            f"to {count} pixels"
        )
        return count

    def _region_falloff(self, stroke: BrushStroke, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
        ys, xs = np.mgrid[y0:y1, x0:x1]
        distance = np.sqrt(np.square(stroke.center_x - xs) + np.square(stroke.center_y - ys))
        return gaussian_falloff(distance, stroke.sigma)


def apply_gaussian_stroke(buffer: PixelBuffer, stroke: BrushStroke) -> int:
    """Apply a stroke with the default engine settings."""
    return GaussianBrushEngine().apply(buffer, stroke)
