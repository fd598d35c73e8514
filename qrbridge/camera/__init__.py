"""
==============================================================================
Camera Package
==============================================================================

Camera and renderer subsystems the scanner is wired to.

Classes:
--------
- CameraDevice / VideoRenderer: Interfaces
- Frame / VideoTextureInfo: Data passed across them
- PushCamera: Frames pushed by a client

The OpenCV backed camera lives in qrbridge.camera.opencv.

==============================================================================
"""

from .base import CameraDevice, Frame, VideoRenderer, VideoTextureInfo
from .formats import (
    SUPPORTED_FORMATS,
    BitmapFormat,
    PixelFormat,
    bytes_per_pixel,
    to_bitmap_format,
)
from .push import PushCamera

__all__ = [
    "CameraDevice",
    "Frame",
    "VideoRenderer",
    "VideoTextureInfo",
    "SUPPORTED_FORMATS",
    "BitmapFormat",
    "PixelFormat",
    "bytes_per_pixel",
    "to_bitmap_format",
    "PushCamera",
]
