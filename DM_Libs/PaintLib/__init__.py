"""
PaintLib - Pixel buffer and brush painting

This module provides the RGBA8 pixel buffer, explicit color math and the
Gaussian brush engine used to paint deform maps.
"""

from DM_Libs.PaintLib.color_ops import (
    ClampChannel,
    Color4,
    UnitColor,
    quantize_channel,
    to_color4,
    to_unit,
)
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer
from DM_Libs.PaintLib.gaussian_brush import (
    BrushStroke,
    GaussianBrushEngine,
    apply_gaussian_stroke,
    gaussian_falloff,
)

__all__ = [
    "ClampChannel",
    "Color4",
    "UnitColor",
    "quantize_channel",
    "to_color4",
    "to_unit",
    "PixelBuffer",
    "BrushStroke",
    "GaussianBrushEngine",
    "apply_gaussian_stroke",
    "gaussian_falloff",
]
