"""
Exception types for Deform Map Painter.

Each error derives from DeformMapError and from the builtin exception that
best describes it, so callers may catch either.

Classes:
    DeformMapError: Base class for all package errors
    InvalidDimensionError: Non-positive buffer width or height
    OutOfBoundsError: Pixel access outside the buffer extent
    InvalidParameterError: Malformed stroke or pixel parameters
    TextureFileNotFoundError: Load path does not resolve to a readable file
    TextureDecodeError: Bytes are not a recognized image container
"""

from pathlib import Path
from typing import Optional, Union

from DM_Libs.constants import STATUS_FILE_NOT_FOUND, STATUS_LOAD_FAILED


class DeformMapError(Exception):
    """Base class for Deform Map Painter errors."""


class InvalidDimensionError(DeformMapError, ValueError):
    """Raised when a buffer is created with width or height <= 0."""


class OutOfBoundsError(DeformMapError, IndexError):
    """Raised when a pixel coordinate lies outside the buffer."""


class InvalidParameterError(DeformMapError, ValueError):
    """Raised for non-positive sigma, inverted clamp ranges and similar."""


class TextureFileNotFoundError(DeformMapError, FileNotFoundError):
    """Raised when a texture path is not a readable file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"{STATUS_FILE_NOT_FOUND}{path}")


class TextureDecodeError(DeformMapError, IOError):
    """Raised when bytes cannot be decoded as an image."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        if path is not None:
            message = f"{STATUS_LOAD_FAILED}{path}: {message}"
        super().__init__(message)
