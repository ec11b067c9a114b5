# pngtoico/imaging.py
"""Pillow side of the tool: decode, square-resize and PNG-encode rasters."""
import io
import logging
from typing import Optional

from PIL import Image

from pngtoico.errors import ArgumentError, DecodeError, EncodeError

logger = logging.getLogger(__name__)

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}

# Errors Pillow raises for unreadable or truncated image data
_PIL_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


def resolve_resample(name: str) -> int:
    try:
        return RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        choices = ", ".join(sorted(RESAMPLE_FILTERS))
        raise ArgumentError(f"Unknown resample filter '{name}' (choose from {choices})") from None


def load_image(data: bytes, expect_format: Optional[str] = None) -> Image.Image:
    """Decode ``data`` completely and return it as an RGBA image.

    Args:
        data: Encoded image bytes
        expect_format: Pillow format name the data must be in (e.g. "PNG")

    Raises:
        DecodeError: If the bytes are not a decodable image of the expected format
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            if expect_format and img.format != expect_format:
                raise DecodeError(f"Expected {expect_format} data, found {img.format or 'unknown format'}")
            img.load()
            return img.convert("RGBA")
    except _PIL_DECODE_ERRORS as e:
        raise DecodeError(f"Cannot decode image: {e}") from e


def resize_square(image: Image.Image, size: int, resample: int = Image.Resampling.LANCZOS) -> Image.Image:
    """Resize to size x size, ignoring aspect ratio"""
    try:
        return image.resize((size, size), resample)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to resize image to {size}x{size}: {e}") from e


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode PNG: {e}") from e
    return buffer.getvalue()
