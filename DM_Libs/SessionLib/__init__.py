"""
SessionLib - Painter session and settings

This module ties pointer input, painter settings and texture persistence
to the single live deform map buffer.
"""

from DM_Libs.SessionLib.painter_settings import PaintMode, PainterSettings
from DM_Libs.SessionLib.settings_store import (
    get_data_dir,
    get_settings_path,
    load_settings,
    save_settings,
)
from DM_Libs.SessionLib.painter_session import PainterSession, PixelReadout, PointerButton

__all__ = [
    "PaintMode",
    "PainterSettings",
    "get_data_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "PainterSession",
    "PixelReadout",
    "PointerButton",
]
