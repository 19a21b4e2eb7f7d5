"""
TextureStoreLib - Texture encoding and persistence

This module converts pixel buffers to and from image bytes and reads and
writes deform map textures on disk.
"""

from DM_Libs.TextureStoreLib.image_codec import (
    ChannelOrder,
    EncodedImage,
    decode_image,
    encode_image,
    pixels_from_raw,
    reorder_to_rgba,
    to_pil_image,
)
from DM_Libs.TextureStoreLib.texture_persistence import (
    load_texture,
    resolve_save_path,
    save_texture,
    validate_base_name,
)

__all__ = [
    "ChannelOrder",
    "EncodedImage",
    "decode_image",
    "encode_image",
    "pixels_from_raw",
    "reorder_to_rgba",
    "to_pil_image",
    "load_texture",
    "resolve_save_path",
    "save_texture",
    "validate_base_name",
]
