"""
Painter session for Deform Map Painter.

The session owns the one live PixelBuffer and is the only thing that mutates
it. Hosts (the PyQt5 window, scripts, tests) call its methods directly:

- initialize_texture: Replace the buffer with a freshly filled one
- load_texture: Replace the buffer with a decoded file, or keep it on failure
- save_texture: Write the buffer as PNG into the save directory
- apply_stroke / paint_at: Paint into the buffer

Load failures are reported through status_message instead of raising.

Classes:
    PointerButton: Mouse button driving a stroke
    PixelReadout: Values shown by the hover readout
    PainterSession: Owns the buffer and turns input into strokes
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from DM_Libs.constants import (
    CHANNEL_MAX,
    STATUS_SAVE_FAILED,
    STATUS_SAVE_SUCCESS,
    STATUS_LOAD_SUCCESS,
)
from DM_Libs.errors import TextureDecodeError, TextureFileNotFoundError
from DM_Libs.PaintLib.gaussian_brush import BrushStroke, GaussianBrushEngine
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer
from DM_Libs.SessionLib.painter_settings import PainterSettings
from DM_Libs.SessionLib.settings_store import get_data_dir
from DM_Libs.TextureStoreLib.texture_persistence import load_texture, save_texture

logger = logging.getLogger(__name__)


class PointerButton(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class PixelReadout:
    x: int
    y: int
    r: int
    g: int

    @property
    def r_unit(self) -> float:
        return self.r / CHANNEL_MAX

    @property
    def g_unit(self) -> float:
        return self.g / CHANNEL_MAX

    def format(self) -> str:
        return (
            f"RG: {self.r}, {self.g}\n"
            f"01: {self.r_unit:.2f}, {self.g_unit:.2f}\n"
            f"XY: {self.x}, {self.y}"
        )


class PainterSession:
    """
    Owns the live deform map buffer and applies painter input to it.

    Example:
        >>> session = PainterSession(PainterSettings(init_size=(64, 64)))
        >>> session.paint_at(0.5, 0.5, PointerButton.PRIMARY)
        True
        >>> path = session.save_texture()
    """

    def __init__(
        self,
        settings: Optional[PainterSettings] = None,
        data_dir: Optional[Path] = None,
        engine: Optional[GaussianBrushEngine] = None,
    ) -> None:
        self.settings = settings or PainterSettings()
        self.settings.validate()
        self.data_dir = Path(data_dir) if data_dir is not None else Path.cwd()
        self.engine = engine or GaussianBrushEngine()

        self.status_message = ""
        self.load_file_path = ""
        self._buffer: PixelBuffer = self._create_buffer()

    @property
    def buffer(self) -> PixelBuffer:
        return self._buffer

    @property
    def width(self) -> int:
        return self._buffer.width

    @property
    def height(self) -> int:
        return self._buffer.height

    def pixel_bytes(self) -> bytes:
        """Raw RGBA bytes of the live buffer, for display surfaces."""
        return self._buffer.to_bytes()

    @property
    def save_directory(self) -> Path:
        if self.settings.save_directory:
            return Path(self.settings.save_directory)
        return get_data_dir(self.data_dir)

    def initialize_texture(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        color: Optional[Sequence[float]] = None,
    ) -> PixelBuffer:
        """
        Replace the buffer with a new one filled with a single color.

        Arguments left as None come from settings.init_size / init_color.
        The old buffer is only replaced once the new one is built.

        Raises:
            InvalidDimensionError: If width or height <= 0
            InvalidParameterError: If color is malformed
        """
        self._buffer = self._create_buffer(width, height, color)
        logger.debug(f"Initialized {self.width}x{self.height} texture")
        return self._buffer

    def load_texture(self, path: Union[str, Path]) -> bool:
        """
        Replace the buffer with a texture file.

        Surrounding quotes and whitespace are stripped from the path. On
        failure the current buffer is kept and status_message says why.

        Returns:
            True if the texture was loaded
        """
        path_str = str(path).strip().strip('"').strip("'")

        try:
            buffer = load_texture(path_str)
        except (TextureFileNotFoundError, TextureDecodeError) as e:
            self.status_message = str(e)
            logger.warning(f"Texture load failed: {e}")
            return False

        self._buffer = buffer
        self.load_file_path = path_str
        self.status_message = f"{STATUS_LOAD_SUCCESS}{path_str}"
        return True

    def save_texture(self) -> Path:
        """
        Save the buffer into the save directory.

        The written path becomes the next load path. On failure
        status_message is set before the error propagates.

        Returns:
            Path that was written

        Raises:
            OSError: If the file cannot be written
            ValueError: If texture_base_name is not a plain file name
        """
        try:
            path = save_texture(
                self._buffer,
                self.save_directory,
                base_name=self.settings.texture_base_name,
            )
        except (OSError, ValueError) as e:
            self.status_message = f"{STATUS_SAVE_FAILED}{e}"
            raise

        self.load_file_path = str(path)
        self.status_message = f"{STATUS_SAVE_SUCCESS}{path}"
        return path

    def apply_stroke(self, stroke: BrushStroke) -> int:
        """Apply a prepared stroke. Returns the number of pixels written."""
        return self.engine.apply(self._buffer, stroke)

    def build_stroke(self, pixel_x: int, pixel_y: int, button: PointerButton) -> BrushStroke:
        """
        Build the stroke the current settings produce at a pixel.

        The button picks the sign of the power, the paint mode picks the tint
        and the clamped channel.
        """
        settings = self.settings
        sign = -1.0 if button is PointerButton.SECONDARY else 1.0
        clamp_min, clamp_max = settings.paint_clamp

        return BrushStroke(
            center_x=pixel_x,
            center_y=pixel_y,
            sigma=settings.paint_sigma,
            power=settings.paint_power * sign,
            clamp_min=clamp_min,
            clamp_max=clamp_max,
            clamp_channel=settings.clamp_channel,
            color=settings.paint_color,
        )

    def paint_at(self, u: float, v: float, button: PointerButton) -> bool:
        """
        Paint at a normalized pointer position.

        Args:
            u: Horizontal position, 0.0 (left) to 1.0 (right)
            v: Vertical position, 0.0 (first row) to 1.0 (last row)
            button: Which pointer button is held

        Returns:
            False if the position lies outside the viewport and nothing was painted
        """
        pixel = self.pointer_to_pixel(u, v)
        if pixel is None:
            return False

        self.apply_stroke(self.build_stroke(pixel[0], pixel[1], button))
        return True

    def pointer_to_pixel(self, u: float, v: float):
        """Map a normalized pointer position to (x, y), or None outside [0, 1]."""
        if not (0.0 <= u <= 1.0 and 0.0 <= v <= 1.0):
            return None
        return int(math.floor(u * self.width)), int(math.floor(v * self.height))

    def inspect_pixel(self, u: float, v: float) -> Optional[PixelReadout]:
        """Read the R and G values under a normalized pointer position."""
        pixel = self.pointer_to_pixel(u, v)
        if pixel is None:
            return None

        # u or v == 1.0 maps one past the last pixel
        x = min(pixel[0], self.width - 1)
        y = min(pixel[1], self.height - 1)
        r, g, _, _ = self._buffer.get(x, y)
        return PixelReadout(x=x, y=y, r=r, g=g)

    def _create_buffer(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        color: Optional[Sequence[float]] = None,
    ) -> PixelBuffer:
        init_width, init_height = self.settings.init_size
        return PixelBuffer.create_from_unit(
            init_width if width is None else width,
            init_height if height is None else height,
            self.settings.init_color if color is None else color,
        )
