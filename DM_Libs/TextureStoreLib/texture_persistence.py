"""
Texture file persistence for Deform Map Painter.

Loads deform map textures from disk and saves them as PNG without
overwriting earlier saves.

Save naming:
- {base_directory}/{base_name}.png when that file does not exist yet
- {base_directory}/{base_name}_{YYMMDDHHMMSS}.png otherwise

The timestamped name is checked once. Two saves in the same second against an
already taken name therefore collide, and that is reported as FileExistsError
instead of replacing the earlier file.

Functions:
    load_texture: Read and decode a texture file
    resolve_save_path: Pick the path the next save will write
    save_texture: Encode and write a texture file
    validate_base_name: Check a save base name is a plain file name
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from DM_Libs.constants import (
    COLLISION_TIMESTAMP_FORMAT,
    TEXTURE_BASE_NAME,
    TEXTURE_EXTENSION,
)
from DM_Libs.errors import TextureDecodeError, TextureFileNotFoundError
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer
from DM_Libs.TextureStoreLib.image_codec import decode_image, encode_image

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Clock = Callable[[], datetime]


def load_texture(path: PathLike) -> PixelBuffer:
    """
    Load a texture file into a new PixelBuffer.

    Nothing outside the returned buffer is touched, so a failed load leaves
    the caller's current buffer as it was.

    Args:
        path: Path to an encoded image file

    Returns:
        Decoded PixelBuffer

    Raises:
        TextureFileNotFoundError: If path is not a readable file
        TextureDecodeError: If the file is not a recognized image
    """
    path = Path(path)

    try:
        is_file = path.is_file()
    except OSError as e:
        raise TextureFileNotFoundError(path) from e
    if not is_file:
        raise TextureFileNotFoundError(path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise TextureFileNotFoundError(path) from e

    try:
        buffer = decode_image(data)
    except TextureDecodeError as e:
        raise TextureDecodeError(str(e), path=path) from e

    logger.info(f"Loaded {buffer.width}x{buffer.height} texture from {path}")
    return buffer


def resolve_save_path(
    base_directory: PathLike,
    base_name: str = TEXTURE_BASE_NAME,
    now: Optional[Clock] = None,
) -> Path:
    """
    Resolve the file the next save should write.

    Args:
        base_directory: Directory to save into
        base_name: File name without extension
        now: Clock used for the collision suffix (default: datetime.now)

    Returns:
        Path that does not exist yet

    Raises:
        ValueError: If base_name is empty or contains path separators
        FileExistsError: If the timestamped fallback name is taken as well
    """
    validate_base_name(base_name)
    base_dir = Path(base_directory)

    path = base_dir / f"{base_name}{TEXTURE_EXTENSION}"
    if not path.exists():
        return path

    stamp = (now or datetime.now)().strftime(COLLISION_TIMESTAMP_FORMAT)
    path = base_dir / f"{base_name}_{stamp}{TEXTURE_EXTENSION}"
    if path.exists():
        raise FileExistsError(f"Output file already exists: {path}")

    return path


def save_texture(
    buffer: PixelBuffer,
    base_directory: PathLike,
    base_name: str = TEXTURE_BASE_NAME,
    create_directories: bool = True,
    now: Optional[Clock] = None,
) -> Path:
    """
    Encode a buffer as PNG and write it without replacing existing files.

    Args:
        buffer: Buffer to save
        base_directory: Directory to save into
        base_name: File name without extension
        create_directories: Create base_directory if missing (default: True)
        now: Clock used for the collision suffix (default: datetime.now)

    Returns:
        Path that was written

    Raises:
        ValueError: If base_name is invalid
        FileExistsError: If no free name was found
        OSError: If the directory is missing or the file cannot be written
    """
    validate_base_name(base_name)
    data = encode_image(buffer)

    base_dir = Path(base_directory)
    if create_directories:
        base_dir.mkdir(parents=True, exist_ok=True)
    elif not base_dir.is_dir():
        raise OSError(f"Output directory does not exist: {base_dir}")

    path = resolve_save_path(base_dir, base_name, now=now)

    # "x" fails instead of truncating a file created since resolve_save_path
    with open(path, "xb") as handle:
        handle.write(data)

    logger.info(f"Saved {buffer.width}x{buffer.height} texture to {path}")
    return path


def validate_base_name(base_name: str) -> None:
    """
    Raises:
        ValueError: If base_name is empty, contains a path separator or is "." or ".."
    """
    if not isinstance(base_name, str):
        raise ValueError(f"base_name must be a string, got {type(base_name)}")
    if not base_name or not str(base_name).strip():
        raise ValueError("base_name cannot be empty")

    if Path(base_name).name != base_name or base_name in (".", ".."):
        raise ValueError(f"base_name must be a plain file name, got {base_name!r}")
