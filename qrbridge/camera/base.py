"""
==============================================================================
Camera Interfaces
==============================================================================

Frame containers and the two collaborator interfaces the scanner talks to:

- CameraDevice: frame format registration and frame retrieval
- VideoRenderer: video background texture for feed display

==============================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from qrbridge.camera.formats import PixelFormat


@dataclass(frozen=True)
class Frame:
    """
    Single camera image snapshot.

    Borrowed from the camera for the duration of one processing call.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        stride: Bytes per buffer row
        buffer_width: Width of the pixel buffer
        buffer_height: Height of the pixel buffer
        pixels: Raw pixel bytes
        pixel_format: Encoding of the pixel bytes
    """

    width: int
    height: int
    stride: int
    buffer_width: int
    buffer_height: int
    pixels: bytes
    pixel_format: PixelFormat

    def describe(self) -> str:
        """Multi-line summary used in debug logs."""
        return (
            "IMAGE DETAILS\n"
            f"  Format:      {self.pixel_format.value}\n"
            f"  Size:        {self.width}x{self.height}\n"
            f"  Buffer Size: {self.buffer_width}x{self.buffer_height}\n"
            f"  Stride:      {self.stride}"
        )


@dataclass(frozen=True)
class VideoTextureInfo:
    """Sizes of the camera image and the texture that holds it."""

    image_size: Tuple[int, int]
    texture_size: Tuple[int, int]


class CameraDevice(ABC):
    """Camera subsystem: pixel format negotiation and frame access."""

    @abstractmethod
    def set_frame_format(self, pixel_format: PixelFormat, enabled: bool) -> bool:
        """Enable or disable delivery of frames in the given format."""

    @abstractmethod
    def get_camera_image(self, pixel_format: PixelFormat) -> Optional[Frame]:
        """Latest frame in the given format, or None if none is available."""


class VideoRenderer(ABC):
    """Renderer subsystem: the texture that backs the camera feed display."""

    @abstractmethod
    def get_video_texture_info(self) -> VideoTextureInfo:
        """Current image and texture sizes."""

    @property
    @abstractmethod
    def video_background_texture(self) -> Any:
        """Handle to the texture holding the current feed image."""


def next_power_of_two(value: int) -> int:
    """Smallest power of two >= value (1 for non-positive values)."""
    if value <= 1:
        return 1
    return 1 << (value - 1).bit_length()
