"""
Painter settings for Deform Map Painter.

Holds the values the painter window edits: paint mode, brush strength and
size, clamp range, the two preset tints and the initial texture.

Classes:
    PaintMode: Which deformation axis a stroke paints
    PainterSettings: All user-editable painter settings
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from DM_Libs.constants import (
    DEFAULT_INIT_COLOR,
    DEFAULT_INIT_HEIGHT,
    DEFAULT_INIT_WIDTH,
    DEFAULT_PAINT_CLAMP,
    DEFAULT_PAINT_COLOR_L,
    DEFAULT_PAINT_COLOR_R,
    DEFAULT_PAINT_POWER,
    DEFAULT_PAINT_SIGMA,
    TEXTURE_BASE_NAME,
)
from DM_Libs.errors import InvalidDimensionError, InvalidParameterError
from DM_Libs.PaintLib.color_ops import ClampChannel, UnitColor, validate_unit_color
from DM_Libs.TextureStoreLib.texture_persistence import validate_base_name


class PaintMode(Enum):
    SCALE_X = "ScaleX"
    SCALE_Y = "ScaleY"


# Paint mode -> clamped channel
_MODE_CHANNELS = {
    PaintMode.SCALE_X: ClampChannel.R,
    PaintMode.SCALE_Y: ClampChannel.G,
}


@dataclass
class PainterSettings:
    """User-editable painter settings.

    Attributes:
        paint_mode: SCALE_X paints paint_color_l and clamps R,
                    SCALE_Y paints paint_color_r and clamps G
        paint_power: Stroke strength; the secondary button negates it
        paint_sigma: Gaussian sigma in pixels
        paint_clamp: (min, max) for the clamped channel, normalized
        paint_color_l: Tint used in SCALE_X mode
        paint_color_r: Tint used in SCALE_Y mode
        init_size: (width, height) of a freshly initialized texture
        init_color: Normalized fill color of a freshly initialized texture
        save_directory: Where textures are saved (None = data directory)
        texture_base_name: File name of saved textures, without extension
    """
    paint_mode: PaintMode = PaintMode.SCALE_X
    paint_power: float = DEFAULT_PAINT_POWER
    paint_sigma: float = DEFAULT_PAINT_SIGMA
    paint_clamp: Tuple[float, float] = DEFAULT_PAINT_CLAMP
    paint_color_l: UnitColor = DEFAULT_PAINT_COLOR_L
    paint_color_r: UnitColor = DEFAULT_PAINT_COLOR_R
    init_size: Tuple[int, int] = (DEFAULT_INIT_WIDTH, DEFAULT_INIT_HEIGHT)
    init_color: UnitColor = DEFAULT_INIT_COLOR
    save_directory: Optional[str] = None
    texture_base_name: str = TEXTURE_BASE_NAME
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def clamp_channel(self) -> ClampChannel:
        return _MODE_CHANNELS[self.paint_mode]

    @property
    def paint_color(self) -> UnitColor:
        if self.paint_mode is PaintMode.SCALE_X:
            return self.paint_color_l
        return self.paint_color_r

    def validate(self) -> None:
        """
        Check the settings can produce valid strokes and textures.

        Raises:
            InvalidParameterError: For bad paint values
            InvalidDimensionError: For a non-positive init_size
        """
        if not isinstance(self.paint_mode, PaintMode):
            raise InvalidParameterError(f"Unsupported paint mode: {self.paint_mode!r}")
        for name, value in (
            ("paint_power", self.paint_power),
            ("paint_sigma", self.paint_sigma),
            ("paint_clamp min", self.paint_clamp[0]),
            ("paint_clamp max", self.paint_clamp[1]),
        ):
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
        if self.paint_sigma <= 0:
            raise InvalidParameterError(f"paint_sigma must be > 0, got {self.paint_sigma}")
        clamp_min, clamp_max = self.paint_clamp
        if clamp_min > clamp_max:
            raise InvalidParameterError(f"paint_clamp min must be <= max, got {self.paint_clamp}")
        width, height = self.init_size
        if width <= 0 or height <= 0:
            raise InvalidDimensionError(f"init_size must be > 0, got {self.init_size}")
        validate_unit_color(self.paint_color_l)
        validate_unit_color(self.paint_color_r)
        validate_unit_color(self.init_color)

        if self.save_directory is not None and not isinstance(self.save_directory, str):
            raise InvalidParameterError(
                f"save_directory must be a string or None, got {type(self.save_directory)}"
            )
        try:
            validate_base_name(self.texture_base_name)
        except ValueError as e:
            raise InvalidParameterError(f"Invalid texture_base_name: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data.pop("extra")
        data["paint_mode"] = self.paint_mode.value
        for key in ("paint_clamp", "paint_color_l", "paint_color_r", "init_size", "init_color"):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PainterSettings":
        """
        Create from dictionary, ignoring unknown keys.

        Raises:
            InvalidParameterError: If a value cannot be converted
        """
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__ and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in cls.__dataclass_fields__}

        try:
            if "paint_mode" in known:
                known["paint_mode"] = PaintMode(known["paint_mode"])
            for key in ("paint_power", "paint_sigma"):
                if key in known:
                    known[key] = float(known[key])
            if "paint_clamp" in known:
                low, high = known["paint_clamp"]
                known["paint_clamp"] = (float(low), float(high))
            if "init_size" in known:
                width, height = known["init_size"]
                known["init_size"] = (int(width), int(height))
            for key in ("paint_color_l", "paint_color_r", "init_color"):
                if key in known:
                    known[key] = validate_unit_color(known[key])
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Invalid painter settings: {e}")

        return cls(extra=extra, **known)
