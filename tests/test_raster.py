from __future__ import annotations

import numpy as np
import pytest

from qrcode_helper.raster import DecodeError, PixelFormat, RasterImage, SaveError


@pytest.mark.parametrize(
    "image",
    [
        RasterImage(0, 10, PixelFormat.GRAY8, b""),
        RasterImage(10, -1, PixelFormat.GRAY8, b""),
        RasterImage(2, 2, PixelFormat.BGR888, b"\x00" * 4),
    ],
)
def test_validate_rejects_malformed_buffers(image):
    with pytest.raises(DecodeError):
        image.validate()


@pytest.mark.parametrize("data", [b"", b"GIF89a-but-not-really"])
def test_from_encoded_rejects_garbage(data):
    with pytest.raises(DecodeError):
        RasterImage.from_encoded(data)


def test_from_array_detects_pixel_format():
    gray = RasterImage.from_array(np.zeros((3, 4), dtype=np.uint8))
    bgr = RasterImage.from_array(np.zeros((3, 4, 3), dtype=np.uint8))
    bgra = RasterImage.from_array(np.zeros((3, 4, 4), dtype=np.uint8))

    assert (gray.width, gray.height, gray.pixel_format) == (4, 3, PixelFormat.GRAY8)
    assert bgr.pixel_format is PixelFormat.BGR888
    assert bgra.pixel_format is PixelFormat.BGRA8888
    assert len(bgra.data) == 3 * 4 * 4


def test_from_array_copies_the_buffer():
    array = np.zeros((2, 2), dtype=np.uint8)
    image = RasterImage.from_array(array)
    array[0, 0] = 99

    assert image.to_array()[0, 0] == 0


def test_transparent_pixels_read_as_white():
    image = RasterImage(1, 1, PixelFormat.BGRA8888, bytes([0, 0, 0, 0]))

    assert image.to_gray()[0, 0] == 255


def test_encode_rejects_unknown_format():
    image = RasterImage(1, 1, PixelFormat.GRAY8, b"\x00")

    with pytest.raises(SaveError):
        image.encode("bmp")
