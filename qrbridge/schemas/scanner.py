"""
==============================================================================
Scanner Schemas Module
==============================================================================

Pydantic models for scan session REST responses and WebSocket frames.

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from qrbridge.camera.base import Frame
from qrbridge.camera.formats import SUPPORTED_FORMATS, PixelFormat, bytes_per_pixel, to_bitmap_format


class FrameMessage(BaseModel):
    """
    Raw frame sent by a WebSocket client.

    `data` holds base64 encoded pixel bytes laid out row by row in
    `pixel_format`.
    """

    type: str = Field(default="frame")
    width: int = Field(ge=1, le=8192)
    height: int = Field(ge=1, le=8192)
    stride: Optional[int] = Field(default=None, ge=1)
    pixel_format: PixelFormat
    data: str = Field(min_length=1)

    @field_validator("pixel_format", mode="before")
    @classmethod
    def normalize_pixel_format(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def decode_pixels(self) -> bytes:
        """Decode the base64 payload, raising ValueError if malformed."""
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 frame data: {e}") from e

    def to_frame(self) -> Frame:
        """
        Build a Frame with tightly packed rows.

        Rows padded to `stride` bytes are repacked to `width * bpp` so the
        decoder never reads padding as pixels.

        Raises:
            ValueError: If stride is shorter than a row
        """
        pixels = self.decode_pixels()
        bpp = 0
        if self.pixel_format in SUPPORTED_FORMATS:
            bpp = bytes_per_pixel(to_bitmap_format(self.pixel_format))

        row = self.width * bpp
        stride = self.stride or row
        if bpp and stride != row:
            if stride < row:
                raise ValueError(f"Stride {stride} is shorter than a {row} byte row")
            pixels = b"".join(
                pixels[y * stride:y * stride + row] for y in range(self.height)
            )
            stride = row

        return Frame(
            width=self.width,
            height=self.height,
            stride=stride,
            buffer_width=self.width,
            buffer_height=self.height,
            pixels=pixels,
            pixel_format=self.pixel_format,
        )


class FormatInfo(BaseModel):
    """Pixel format and its decoder equivalent."""
    pixel_format: str
    bitmap_format: str
    bytes_per_pixel: int


class FormatListResponse(BaseModel):
    """Supported pixel formats."""
    success: bool = Field(default=True)
    default: str
    formats: List[FormatInfo]


class SessionResponse(BaseModel):
    """Single scan session status."""
    success: bool = Field(default=True)
    session: Dict[str, Any]


class SessionListResponse(BaseModel):
    """All active scan sessions."""
    success: bool = Field(default=True)
    total: int = Field(ge=0)
    sessions: List[Dict[str, Any]]
