"""
Settings storage for Deform Map Painter.

Painter settings live in a versioned JSON file inside the application data
directory, next to the saved textures.

Functions:
    get_data_dir: Return (and create) the data directory under a base directory
    get_settings_path: Path of the settings file
    load_settings: Load settings, falling back to defaults
    save_settings: Write settings
"""

import json
import logging
from pathlib import Path

from DM_Libs.constants import DATA_DIR_NAME, SCHEMA_VERSION, SETTINGS_FILE_NAME
from DM_Libs.SessionLib.painter_settings import PainterSettings

logger = logging.getLogger(__name__)

FIELD_SCHEMA_VERSION = "schema_version"
FIELD_SETTINGS = "settings"


def get_data_dir(base_dir: Path) -> Path:
    data_dir = Path(base_dir) / DATA_DIR_NAME
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_settings_path(base_dir: Path) -> Path:
    return get_data_dir(base_dir) / SETTINGS_FILE_NAME


def load_settings(base_dir: Path) -> PainterSettings:
    """
    Load painter settings from the data directory.

    Args:
        base_dir: Application data base directory

    Returns:
        Stored settings, or defaults when no settings file exists

    Raises:
        ValueError: If the file is not valid JSON or has the wrong shape
    """
    settings_path = get_settings_path(base_dir)
    if not settings_path.exists():
        logger.debug(f"No settings file at {settings_path}, using defaults")
        return PainterSettings()

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Settings file is not valid JSON: {settings_path}: {e}")

    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a JSON object: {settings_path}")

    version = raw.get(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        logger.warning(f"Settings schema version {version} differs from {SCHEMA_VERSION}: {settings_path}")

    settings_data = raw.get(FIELD_SETTINGS, {})
    if not isinstance(settings_data, dict):
        raise ValueError(f"'{FIELD_SETTINGS}' must be a JSON object: {settings_path}")

    settings = PainterSettings.from_dict(settings_data)
    logger.debug(f"Loaded settings from {settings_path}")
    return settings


def save_settings(base_dir: Path, settings: PainterSettings) -> Path:
    settings_path = get_settings_path(base_dir)
    payload = {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_SETTINGS: settings.to_dict(),
    }
    settings_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.debug(f"Saved settings to {settings_path}")
    return settings_path
