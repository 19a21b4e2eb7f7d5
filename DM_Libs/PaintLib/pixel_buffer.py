"""
Pixel buffer for the deform map texture.

This module defines the RGBA8 store that the brush engine paints into and the
codec encodes. Pixels are kept in a (height, width, 4) uint8 numpy array, so
the flat row-major index of (x, y) is y * width + x.

Classes:
    PixelBuffer: Fixed-size RGBA8 pixel store with bounds-checked access
"""

import logging
from typing import Sequence

import numpy as np

from DM_Libs.constants import CHANNEL_COUNT
from DM_Libs.errors import InvalidDimensionError, InvalidParameterError, OutOfBoundsError
from DM_Libs.PaintLib.color_ops import Color4, to_color4, validate_color4

logger = logging.getLogger(__name__)


class PixelBuffer:
    """
    Fixed-size RGBA8 pixel store.

    The size never changes after construction. A differently sized texture
    is a new PixelBuffer.

    Example:
        >>> buffer = PixelBuffer.create(4, 4, (0, 0, 0, 255))
        >>> buffer.set(1, 2, (255, 0, 0, 255))
        >>> buffer.get(1, 2)
        (255, 0, 0, 255)
    """

    def __init__(self, pixels: np.ndarray):
        """
        Wrap an existing (height, width, 4) uint8 array.

        Prefer the create/from_array/from_raw constructors, which validate
        their input.
        """
        self._pixels = pixels

    @classmethod
    def create(cls, width: int, height: int, fill_color: Sequence[int]) -> "PixelBuffer":
        """
        Create a buffer with every pixel set to fill_color.

        Args:
            width: Width in pixels (> 0)
            height: Height in pixels (> 0)
            fill_color: RGBA color with channels 0-255

        Raises:
            InvalidDimensionError: If width or height <= 0
            InvalidParameterError: If fill_color is malformed
        """
        _validate_dimensions(width, height)
        width, height = int(width), int(height)
        color = validate_color4(fill_color)

        pixels = np.empty((height, width, CHANNEL_COUNT), dtype=np.uint8)
        pixels[...] = color
        logger.debug(f"Created {width}x{height} pixel buffer filled with {color}")
        return cls(pixels)

    @classmethod
    def create_from_unit(cls, width: int, height: int, fill_color: Sequence[float]) -> "PixelBuffer":
        """Create a buffer from a normalized (0.0-1.0) fill color."""
        _validate_dimensions(width, height)
        return cls.create(width, height, to_color4(fill_color))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Create a buffer holding a copy of a (height, width, 4) array."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != CHANNEL_COUNT:
            raise InvalidParameterError(
                f"Expected array of shape (height, width, {CHANNEL_COUNT}), got {array.shape}"
            )
        height, width = array.shape[:2]
        _validate_dimensions(width, height)
        return cls(np.array(array, dtype=np.uint8, copy=True))

    @classmethod
    def from_raw(cls, data: bytes, width: int, height: int) -> "PixelBuffer":
        """Create a buffer from raw RGBA bytes in row-major order."""
        _validate_dimensions(width, height)
        width, height = int(width), int(height)
        expected = width * height * CHANNEL_COUNT
        if len(data) != expected:
            raise InvalidParameterError(
                f"Raw data has {len(data)} bytes, expected {expected} for {width}x{height} RGBA"
            )
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, CHANNEL_COUNT)
        return cls(pixels.copy())

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self):
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """The live (height, width, 4) uint8 array. Writes go straight to the buffer."""
        return self._pixels

    def get(self, x: int, y: int) -> Color4:
        """
        Read one pixel.

        Raises:
            OutOfBoundsError: If (x, y) is outside the buffer
        """
        self._check_bounds(x, y)
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, color: Sequence[int]) -> None:
        """
        Write one pixel.

        Raises:
            OutOfBoundsError: If (x, y) is outside the buffer
            InvalidParameterError: If color is malformed
        """
        self._check_bounds(x, y)
        self._pixels[y, x] = validate_color4(color)

    def to_bytes(self) -> bytes:
        """Raw RGBA bytes, row-major."""
        return self._pixels.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self._pixels.copy())

    def _check_bounds(self, x: int, y: int) -> None:
        for value in (x, y):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidParameterError(f"Pixel coordinates must be integers, got ({x!r}, {y!r})")
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(
                f"Pixel ({x}, {y}) outside buffer of size {self.width}x{self.height}"
            )

    def __len__(self) -> int:
        return self.width * self.height

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def _validate_dimensions(width: int, height: int) -> None:
    if isinstance(width, bool) or isinstance(height, bool):
        raise InvalidDimensionError(f"Dimensions must be integers, got {width}x{height}")
    if int(width) != width or int(height) != height:
        raise InvalidDimensionError(f"Dimensions must be integers, got {width}x{height}")
    if width <= 0 or height <= 0:
        raise InvalidDimensionError(f"Width and height must be > 0, got {width}x{height}")
