"""
Image codec for deform map textures.

Bridges encoded image bytes and PixelBuffer, whose canonical byte order is
R, G, B, A. Decoding goes through an intermediate raw block that declares its
channel order; alpha-first blocks are reordered before a buffer is built.
Reading an alpha-first block as RGBA does not fail, it silently shifts every
channel by one, so the reorder is never skipped.

Classes:
    ChannelOrder: Channel orders a raw block may use
    EncodedImage: Raw pixel block with its declared channel order

Functions:
    decode_image: Encoded bytes -> PixelBuffer
    encode_image: PixelBuffer -> PNG bytes
    reorder_to_rgba: Reorder a (..., 4) array into R, G, B, A
    pixels_from_raw: Raw bytes in a declared order -> PixelBuffer
    to_pil_image: PixelBuffer -> PIL Image
"""

import logging
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Any

import numpy as np
from PIL import Image, UnidentifiedImageError

from DM_Libs.constants import TEXTURE_FORMAT
from DM_Libs.errors import InvalidParameterError, TextureDecodeError
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ChannelOrder(Enum):
    RGBA = "RGBA"
    ARGB = "ARGB"


@dataclass(frozen=True)
class EncodedImage:
    """Raw pixel block produced by the decode primitive.

    Attributes:
        data: width * height * 4 bytes, row-major
        width: Width in pixels
        height: Height in pixels
        channel_order: Byte order of each pixel in data
    """
    data: bytes
    width: int
    height: int
    channel_order: ChannelOrder = ChannelOrder.RGBA


def reorder_to_rgba(array: np.ndarray, channel_order: ChannelOrder) -> np.ndarray:
    """
    Return a copy of a (..., 4) array with channels in R, G, B, A order.

    Raises:
        InvalidParameterError: If channel_order is not supported
    """
    if channel_order is ChannelOrder.RGBA:
        return array.copy()
    if channel_order is ChannelOrder.ARGB:
        # A, R, G, B -> R, G, B, A
        return np.roll(array, -1, axis=-1)
    raise InvalidParameterError(f"Unsupported channel order: {channel_order!r}")


def pixels_from_raw(raw: bytes, width: int, height: int, channel_order: ChannelOrder) -> PixelBuffer:
    """
    Build a PixelBuffer from raw pixel bytes in the given channel order.

    Raises:
        InvalidDimensionError: If width or height <= 0
        InvalidParameterError: If the byte count does not match the size
    """
    staging = PixelBuffer.from_raw(raw, width, height)
    return PixelBuffer(reorder_to_rgba(staging.pixels, channel_order))


def pixels_from_encoded(encoded: EncodedImage) -> PixelBuffer:
    return pixels_from_raw(encoded.data, encoded.width, encoded.height, encoded.channel_order)


def _decode_container(data: bytes) -> EncodedImage:
    """Decode an image container with Pillow into a raw block."""
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            if image.mode != "RGBA":
                image = image.convert("RGBA")
            return EncodedImage(
                data=image.tobytes(),
                width=image.width,
                height=image.height,
                channel_order=ChannelOrder.RGBA,
            )
    except UnidentifiedImageError as e:
        raise TextureDecodeError(f"Unrecognized image container: {e}")
    except (OSError, EOFError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise TextureDecodeError(f"Failed to decode image: {e}")


def decode_image(data: bytes) -> PixelBuffer:
    """
    Decode encoded image bytes into a PixelBuffer.

    Any container Pillow can open is accepted. Palette, grayscale and RGB
    images are expanded to RGBA.

    Args:
        data: Encoded image bytes

    Returns:
        PixelBuffer in R, G, B, A order

    Raises:
        TextureDecodeError: If data is not a recognized image
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected bytes, got {type(data)}")

    encoded = _decode_container(bytes(data))
    buffer = pixels_from_encoded(encoded)
    logger.debug(
        f"Decoded {encoded.width}x{encoded.height} image "
        f"({encoded.channel_order.value}, {len(data)} bytes)"
    )
    return buffer


def to_pil_image(buffer: PixelBuffer) -> Any:
    """Copy a PixelBuffer into a new RGBA PIL Image."""
    return Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.to_bytes())


def encode_image(buffer: PixelBuffer) -> bytes:
    """
    Encode a PixelBuffer as PNG.

    PNG is lossless, so decode_image(encode_image(buffer)) == buffer.

    Returns:
        PNG file bytes
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    output = BytesIO()
    to_pil_image(buffer).save(output, format=TEXTURE_FORMAT)
    data = output.getvalue()
    logger.debug(f"Encoded {buffer.width}x{buffer.height} buffer as {TEXTURE_FORMAT} ({len(data)} bytes)")
    return data
