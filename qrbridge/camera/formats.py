"""
==============================================================================
Pixel Format Module
==============================================================================

Camera pixel formats, decoder bitmap formats and the mapping between them.

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, FrozenSet


# Module logger
logger = logging.getLogger(__name__)


class PixelFormat(str, enum.Enum):
    """Pixel encodings a camera subsystem can be asked to emit."""

    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    RGB565 = "RGB565"
    RGB888 = "RGB888"
    GRAYSCALE = "GRAYSCALE"
    YUV = "YUV"
    RGBA8888 = "RGBA8888"
    INDEXED = "INDEXED"


class BitmapFormat(str, enum.Enum):
    """Buffer layouts understood by the decoder."""

    UNKNOWN = "Unknown"
    GRAY8 = "Gray8"
    RGB24 = "RGB24"
    RGBA32 = "RGBA32"
    RGB565 = "RGB565"


_PIXEL_TO_BITMAP: Dict[PixelFormat, BitmapFormat] = {
    PixelFormat.GRAYSCALE: BitmapFormat.GRAY8,
    PixelFormat.RGB888: BitmapFormat.RGB24,
    PixelFormat.RGBA8888: BitmapFormat.RGBA32,
    PixelFormat.RGB565: BitmapFormat.RGB565,
}

_BYTES_PER_PIXEL: Dict[BitmapFormat, int] = {
    BitmapFormat.GRAY8: 1,
    BitmapFormat.RGB24: 3,
    BitmapFormat.RGBA32: 4,
    BitmapFormat.RGB565: 2,
}

# Pixel formats with a decoder equivalent
SUPPORTED_FORMATS: FrozenSet[PixelFormat] = frozenset(_PIXEL_TO_BITMAP)


def to_bitmap_format(pixel_format: PixelFormat) -> BitmapFormat:
    """
    Map a camera pixel format to the decoder's bitmap format.

    Formats without an equivalent map to BitmapFormat.UNKNOWN and
    log a single error.

    Args:
        pixel_format: Configured camera pixel format

    Returns:
        Corresponding BitmapFormat
    """
    bitmap_format = _PIXEL_TO_BITMAP.get(pixel_format)
    if bitmap_format is None:
        name = getattr(pixel_format, "value", pixel_format)
        logger.error(
            f"Pixel format {name} does not have a corresponding bitmap format. "
            "Please use another pixel format."
        )
        return BitmapFormat.UNKNOWN
    return bitmap_format


def bytes_per_pixel(bitmap_format: BitmapFormat) -> int:
    """Bytes per pixel for a bitmap format (0 for UNKNOWN)."""
    return _BYTES_PER_PIXEL.get(bitmap_format, 0)
