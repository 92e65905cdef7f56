"""Tests for Pillow image helpers."""

import io

import pytest
from PIL import Image

from conftest import make_png
from deskcapture.capture_exceptions import CaptureFailedError, EncodingFailedError
from deskcapture.imaging import encode_png, image_size, require_image


def test_encode_png_swaps_channels() -> None:
    """Test BGRA input is stored as RGB."""
    data = encode_png((2, 1), b"\x10\x20\x30\xff" * 2)

    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "PNG"
        assert image.getpixel((0, 0)) == (0x30, 0x20, 0x10)


def test_encode_png_size_mismatch() -> None:
    """Test a short buffer is an encoding failure."""
    with pytest.raises(EncodingFailedError) as exc_info:
        encode_png((10, 10), b"\x00" * 12)

    assert exc_info.value.context == {"width": 10, "height": 10}


def test_image_size() -> None:
    """Test dimensions are read from the header."""
    assert image_size(make_png(33, 17)) == (33, 17)


def test_image_size_not_an_image() -> None:
    """Test unrecognized bytes give None."""
    assert image_size(b"not an image") is None


def test_require_image() -> None:
    """Test non-empty data passes and empty data fails."""
    assert require_image(b"x", "capture_screen") == b"x"

    with pytest.raises(CaptureFailedError, match="during capture_screen: no image data"):
        require_image(b"", "capture_screen")
