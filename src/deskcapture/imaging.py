"""Pillow helpers for captured image data."""

import io

from PIL import Image, UnidentifiedImageError

from .capture_exceptions import CaptureFailedError, EncodingFailedError


def encode_png(size: tuple[int, int], bgra: bytes) -> bytes:
    """Encode a raw BGRA frame, as grabbed by ``mss``, to PNG.

    Args:
        size: (width, height) of the frame
        bgra: Raw pixel buffer

    Returns:
        PNG bytes

    Raises:
        EncodingFailedError: If the buffer does not match the size
    """
    try:
        image = Image.frombytes("RGB", size, bgra, "raw", "BGRX")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except (ValueError, OSError) as e:
        raise EncodingFailedError(
            f"Could not encode {size[0]}x{size[1]} frame: {e}",
            context={"width": size[0], "height": size[1]},
        ) from e
    return buffer.getvalue()


def image_size(data: bytes) -> tuple[int, int] | None:
    """Read image dimensions without decoding pixel data.

    Returns:
        (width, height), or None if the bytes are not a recognizable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError):
        return None


def require_image(data: bytes, operation: str) -> bytes:
    """Reject empty tool output.

    Args:
        data: Bytes produced by a capture tool
        operation: Operation name for the error message

    Returns:
        ``data`` unchanged

    Raises:
        CaptureFailedError: If no bytes were produced
    """
    if not data:
        raise CaptureFailedError("no image data returned", operation=operation)
    return data
