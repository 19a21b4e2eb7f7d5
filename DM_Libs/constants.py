"""
Constants and configuration values for Deform Map Painter.

This module centralizes all constant values, magic numbers, and
default settings used throughout the application.
"""

# Texture defaults
DEFAULT_INIT_WIDTH = 512
DEFAULT_INIT_HEIGHT = 512
DEFAULT_INIT_COLOR = (0.5, 0.5, 0.0, 1.0)

# Paint defaults
DEFAULT_PAINT_POWER = 0.05
DEFAULT_PAINT_SIGMA = 10.0
DEFAULT_PAINT_CLAMP = (0.0, 1.0)
DEFAULT_PAINT_COLOR_L = (1.0, 0.0, 0.0, 1.0)
DEFAULT_PAINT_COLOR_R = (0.0, 1.0, 0.0, 1.0)

# Brush falloff
FALLOFF_CUTOFF = 0.01
BRUSH_EXTENT_SIGMAS = 4.0

# Channel layout
CHANNEL_COUNT = 4
CHANNEL_MAX = 255

# GUI ranges
POWER_RANGE = (0.0, 255.0)
SIGMA_RANGE = (0.0, 255.0)
CLAMP_RANGE = (-1.0, 1.0)
INIT_SIZE_RANGE = (1, 4096)

# Persistence
DATA_DIR_NAME = "DeformMaps"
TEXTURE_BASE_NAME = "DeformMap"
TEXTURE_EXTENSION = ".png"
TEXTURE_FORMAT = "PNG"
COLLISION_TIMESTAMP_FORMAT = "%y%m%d%H%M%S"
SETTINGS_FILE_NAME = "painter_settings.json"
SCHEMA_VERSION = 1

# Status messages
STATUS_LOAD_SUCCESS = "Load success : "
STATUS_LOAD_FAILED = "Load failed : "
STATUS_FILE_NOT_FOUND = "File not found : "
STATUS_SAVE_SUCCESS = "Save success : "
STATUS_SAVE_FAILED = "Save failed : "

# Supported file formats for the load dialog
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp", ".tga"}
