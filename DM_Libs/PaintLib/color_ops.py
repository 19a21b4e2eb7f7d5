"""
Per-channel color arithmetic for the deform map.

Buffer pixels are stored as 8-bit RGBA. All blending happens in normalized
float space and is converted back with a single quantization rule, so the
8-bit saturation behavior lives in one place.

Type Aliases:
    Color4: Tuple of 4 ints (0-255), one stored pixel
    UnitColor: Tuple of 4 floats in normalized channel space

Functions:
    quantize_channel: Convert one normalized value to a stored byte
    quantize: Vectorized quantization of a float array to uint8
    to_unit: Convert a Color4 to normalized floats
    to_color4: Convert a UnitColor to a stored Color4
    blend_additive: current + tint * weight, per channel
    clamp_channel: Clamp a single channel of an RGBA float array
"""

from enum import IntEnum
from typing import Sequence, Tuple

import numpy as np

from DM_Libs.constants import CHANNEL_COUNT, CHANNEL_MAX
from DM_Libs.errors import InvalidParameterError

Color4 = Tuple[int, int, int, int]
UnitColor = Tuple[float, float, float, float]


class ClampChannel(IntEnum):
    R = 0
    G = 1
    B = 2
    A = 3


def quantize_channel(value: float) -> int:
    """
    Convert a normalized channel value to its stored byte.

    Values are saturated to [0, 1] before scaling, then rounded half to even.
    """
    return int(np.rint(min(1.0, max(0.0, float(value))) * CHANNEL_MAX))


def quantize(values: np.ndarray) -> np.ndarray:
    """Vectorized quantize_channel. Returns a uint8 array of the same shape."""
    return np.rint(np.clip(values, 0.0, 1.0) * CHANNEL_MAX).astype(np.uint8)


def normalize(values: np.ndarray) -> np.ndarray:
    """Convert stored bytes to float64 normalized values."""
    return values.astype(np.float64) / CHANNEL_MAX


def to_unit(color: Sequence[int]) -> UnitColor:
    r, g, b, a = validate_color4(color)
    return (r / CHANNEL_MAX, g / CHANNEL_MAX, b / CHANNEL_MAX, a / CHANNEL_MAX)


def to_color4(color: Sequence[float]) -> Color4:
    r, g, b, a = validate_unit_color(color)
    return (
        quantize_channel(r),
        quantize_channel(g),
        quantize_channel(b),
        quantize_channel(a),
    )


def validate_color4(color: Sequence[int]) -> Color4:
    """
    Check that a color has four integer channels in 0..255.

    Raises:
        InvalidParameterError: If the color is malformed
    """
    values = tuple(color)
    if len(values) != CHANNEL_COUNT:
        raise InvalidParameterError(f"Color must have {CHANNEL_COUNT} channels, got {len(values)}")

    result = []
    for value in values:
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
            raise InvalidParameterError(f"Color channels must be integers, got {color!r}")
        if not 0 <= value <= CHANNEL_MAX:
            raise InvalidParameterError(f"Color channel out of range 0-{CHANNEL_MAX}: {color!r}")
        result.append(int(value))
    return tuple(result)


def validate_unit_color(color: Sequence[float]) -> UnitColor:
    values = tuple(float(value) for value in color)
    if len(values) != CHANNEL_COUNT:
        raise InvalidParameterError(f"Color must have {CHANNEL_COUNT} channels, got {len(values)}")
    if not all(np.isfinite(values)):
        raise InvalidParameterError(f"Color channels must be finite, got {color!r}")
    return values


def blend_additive(current: np.ndarray, tint: Sequence[float], weight: np.ndarray) -> np.ndarray:
    """
    Add a weighted tint to normalized colors.

    Args:
        current: (..., 4) float array of normalized colors
        tint: 4 normalized tint channels
        weight: Array broadcastable against current[..., 0]

    Returns:
        New (..., 4) float array, unclamped
    """
    tint_array = np.asarray(tint, dtype=np.float64)
    return current + tint_array * np.asarray(weight, dtype=np.float64)[..., None]


def clamp_channel(colors: np.ndarray, channel: ClampChannel, low: float, high: float) -> np.ndarray:
    """Clamp one channel of a (..., 4) float array in place and return it."""
    colors[..., int(channel)] = np.clip(colors[..., int(channel)], low, high)
    return colors
