"""
==============================================================================
pyzbar Decoder Module
==============================================================================

Decoder backed by zbar through pyzbar.

Raw buffers are reshaped with numpy and reduced to 8-bit grayscale with
OpenCV before being handed to zbar.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import cv2
import numpy as np
from pyzbar.pyzbar import ZBarSymbol, decode

from qrbridge.camera.formats import BitmapFormat, bytes_per_pixel
from qrbridge.core import exceptions
from qrbridge.scanner.decoder import Decoder, DecodeResult


# Module logger
logger = logging.getLogger(__name__)


# Bitmap format -> (channels, grayscale conversion code)
_GRAY_CONVERSIONS = {
    BitmapFormat.GRAY8: (1, None),
    BitmapFormat.RGB24: (3, cv2.COLOR_RGB2GRAY),
    BitmapFormat.RGBA32: (4, cv2.COLOR_RGBA2GRAY),
    BitmapFormat.RGB565: (2, cv2.COLOR_BGR5652GRAY),
}


def to_grayscale(
    pixels: bytes,
    width: int,
    height: int,
    bitmap_format: BitmapFormat,
) -> np.ndarray:
    """
    Build an 8-bit grayscale image from a raw pixel buffer.

    Raises:
        AppException: UNSUPPORTED_BITMAP_FORMAT or INVALID_FRAME_BUFFER
    """
    conversion = _GRAY_CONVERSIONS.get(bitmap_format)
    if conversion is None:
        raise exceptions.unsupported_bitmap_format(bitmap_format.value)

    channels, code = conversion
    expected = width * height * bytes_per_pixel(bitmap_format)
    if width <= 0 or height <= 0 or len(pixels) < expected:
        raise exceptions.invalid_frame_buffer(expected, len(pixels))

    data = np.frombuffer(pixels, dtype=np.uint8, count=expected)
    if channels == 1:
        return data.reshape(height, width)

    image = data.reshape(height, width, channels)
    return cv2.cvtColor(image, code)


class PyzbarDecoder(Decoder):
    """
    zbar based decoder.

    Example:
        >>> decoder = PyzbarDecoder(["QRCODE"])
        >>> result = decoder.decode(frame.pixels, 640, 480, BitmapFormat.GRAY8)
    """

    def __init__(self, symbols: Optional[Iterable[str]] = None) -> None:
        """
        Args:
            symbols: zbar symbology names to look for (default: QRCODE)
        """
        names = list(symbols) if symbols else ["QRCODE"]
        self._symbols = [ZBarSymbol[name] for name in names]
        logger.debug(f"Decoder created for {', '.join(names)}")

    def decode(
        self,
        pixels: bytes,
        width: int,
        height: int,
        bitmap_format: BitmapFormat,
    ) -> Optional[DecodeResult]:
        gray = to_grayscale(pixels, width, height, bitmap_format)

        barcodes = decode(gray, symbols=self._symbols)
        if not barcodes:
            return None

        barcode = barcodes[0]
        return DecodeResult(
            text=barcode.data.decode("utf-8", errors="replace"),
            symbology=barcode.type,
            points=[(p.x, p.y) for p in barcode.polygon],
        )
