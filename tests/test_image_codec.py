"""
Unit tests for image_codec module.

Tests PNG encoding, decoding of foreign containers and the explicit
alpha-first to RGBA channel reorder.
"""

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from DM_Libs.errors import InvalidParameterError, TextureDecodeError
from DM_Libs.PaintLib.pixel_buffer import PixelBuffer
from DM_Libs.TextureStoreLib.image_codec import (
    ChannelOrder,
    decode_image,
    encode_image,
    pixels_from_raw,
    reorder_to_rgba,
    to_pil_image,
)


def pil_bytes(image, fmt="PNG"):
    output = BytesIO()
    image.save(output, format=fmt)
    return output.getvalue()


class TestEncode:
    """Tests for encode_image."""

    def test_produces_png(self, random_buffer):
        """Output should be a PNG file."""
        data = encode_image(random_buffer)

        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        with Image.open(BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.mode == "RGBA"
            assert image.size == (random_buffer.width, random_buffer.height)

    def test_channel_order_unchanged(self):
        """Pixel (x, y) of the PNG should read back as the buffer's R, G, B, A."""
        buffer = PixelBuffer.create(3, 2, (0, 0, 0, 255))
        buffer.set(2, 1, (10, 20, 30, 40))

        with Image.open(BytesIO(encode_image(buffer))) as image:
            assert image.getpixel((2, 1)) == (10, 20, 30, 40)

    def test_rejects_non_buffer(self):
        with pytest.raises(TypeError):
            encode_image(b"not a buffer")


class TestDecode:
    """Tests for decode_image."""

    def test_round_trip_is_exact(self, random_buffer):
        """decode(encode(buffer)) reproduces the buffer, alpha included."""
        assert decode_image(encode_image(random_buffer)) == random_buffer

    def test_round_trip_single_pixel(self):
        buffer = PixelBuffer.create(1, 1, (1, 2, 3, 0))

        assert decode_image(encode_image(buffer)) == buffer

    def test_rgb_image_gets_opaque_alpha(self):
        """Three-channel images are expanded to RGBA."""
        data = pil_bytes(Image.new("RGB", (2, 3), (10, 20, 30)))
        buffer = decode_image(data)

        assert buffer.size == (2, 3)
        assert buffer.get(1, 2) == (10, 20, 30, 255)

    def test_grayscale_image(self):
        data = pil_bytes(Image.new("L", (2, 2), 77))

        assert decode_image(data).get(0, 0) == (77, 77, 77, 255)

    def test_palette_image(self):
        image = Image.new("P", (2, 2), 0)
        image.putpalette([200, 100, 50])
        buffer = decode_image(pil_bytes(image))

        assert buffer.get(1, 1) == (200, 100, 50, 255)

    def test_bmp_container(self):
        """Any container Pillow reads is accepted."""
        data = pil_bytes(Image.new("RGB", (4, 1), (5, 6, 7)), fmt="BMP")

        assert decode_image(data).get(3, 0) == (5, 6, 7, 255)

    @pytest.mark.parametrize("data", [b"", b"not an image", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16])
    def test_rejects_garbage(self, data):
        """Unrecognized or broken containers raise TextureDecodeError."""
        with pytest.raises(TextureDecodeError):
            decode_image(data)

    def test_decode_error_is_os_error(self):
        """Callers catching IOError/OSError should see decode errors."""
        with pytest.raises(OSError):
            decode_image(b"garbage")

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            decode_image("image.png")


class TestChannelReorder:
    """Tests for the alpha-first -> RGBA reorder."""

    def test_argb_is_reordered(self):
        """A, R, G, B bytes become R, G, B, A pixels."""
        raw = bytes([40, 10, 20, 30, 255, 1, 2, 3])
        buffer = pixels_from_raw(raw, 2, 1, ChannelOrder.ARGB)

        assert buffer.get(0, 0) == (10, 20, 30, 40)
        assert buffer.get(1, 0) == (1, 2, 3, 255)

    def test_rgba_is_unchanged(self):
        raw = bytes([10, 20, 30, 40])

        assert pixels_from_raw(raw, 1, 1, ChannelOrder.RGBA).get(0, 0) == (10, 20, 30, 40)

    def test_skipping_reorder_misreads_silently(self, random_buffer):
        """Reading ARGB bytes as RGBA does not fail, it just gives wrong channels."""
        argb = np.roll(random_buffer.pixels, 1, axis=-1).tobytes()
        width, height = random_buffer.size

        assert pixels_from_raw(argb, width, height, ChannelOrder.ARGB) == random_buffer
        assert pixels_from_raw(argb, width, height, ChannelOrder.RGBA) != random_buffer

    def test_reorder_returns_copy(self):
        source = np.zeros((1, 1, 4), dtype=np.uint8)
        result = reorder_to_rgba(source, ChannelOrder.RGBA)
        result[0, 0, 0] = 9

        assert source[0, 0, 0] == 0

    def test_rejects_unknown_order(self):
        with pytest.raises(InvalidParameterError):
            reorder_to_rgba(np.zeros((1, 1, 4), dtype=np.uint8), "BGRA")

    def test_wrong_length_raw(self):
        with pytest.raises(InvalidParameterError):
            pixels_from_raw(b"\x00" * 7, 1, 2, ChannelOrder.ARGB)


class TestToPilImage:
    """Tests for to_pil_image."""

    def test_copies_pixels(self, random_buffer):
        image = to_pil_image(random_buffer)

        assert image.mode == "RGBA"
        assert image.size == random_buffer.size
        assert image.getpixel((6, 4)) == random_buffer.get(6, 4)
        assert image.tobytes() == random_buffer.to_bytes()
