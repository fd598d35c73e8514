"""
==============================================================================
OpenCV Camera Module
==============================================================================

Camera and renderer backed by cv2.VideoCapture.

Captured BGR frames are converted to the registered pixel format on
request:

- GRAYSCALE: 8-bit luminance
- RGB888:    packed R, G, B
- RGBA8888:  packed R, G, B, A
- RGB565:    16-bit little endian, red in the high bits

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set

import cv2
import numpy as np

from qrbridge.camera.base import (
    CameraDevice,
    Frame,
    VideoRenderer,
    VideoTextureInfo,
    next_power_of_two,
)
from qrbridge.camera.formats import PixelFormat
from qrbridge.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


# BGR -> pixel format conversion codes
CONVERSIONS: Dict[PixelFormat, int] = {
    PixelFormat.GRAYSCALE: cv2.COLOR_BGR2GRAY,
    PixelFormat.RGB888: cv2.COLOR_BGR2RGB,
    PixelFormat.RGBA8888: cv2.COLOR_BGR2RGBA,
    PixelFormat.RGB565: cv2.COLOR_BGR2BGR565,
}


def convert_frame(bgr: np.ndarray, pixel_format: PixelFormat) -> Frame:
    """
    Convert a BGR capture into a Frame in the given pixel format.

    Args:
        bgr: OpenCV image (H x W x 3, uint8)
        pixel_format: Target format, must be in CONVERSIONS

    Returns:
        Frame holding a contiguous copy of the converted pixels
    """
    code = CONVERSIONS.get(pixel_format)
    if code is None:
        raise exceptions.unsupported_pixel_format(pixel_format.value)

    converted = np.ascontiguousarray(cv2.cvtColor(bgr, code))
    height, width = converted.shape[:2]

    return Frame(
        width=width,
        height=height,
        stride=converted.strides[0],
        buffer_width=width,
        buffer_height=height,
        pixels=converted.tobytes(),
        pixel_format=pixel_format,
    )


class OpenCVCamera(CameraDevice, VideoRenderer):
    """
    Local camera device.

    Example:
        >>> camera = OpenCVCamera(0)
        >>> camera.open()
        >>> camera.set_frame_format(PixelFormat.GRAYSCALE, True)
        True
        >>> camera.grab()
        >>> frame = camera.get_camera_image(PixelFormat.GRAYSCALE)
    """

    def __init__(
        self,
        camera_index: int = 0,
        frame_width: Optional[int] = None,
        frame_height: Optional[int] = None,
    ) -> None:
        self._camera_index = camera_index
        self._frame_width = frame_width
        self._frame_height = frame_height
        self._cap = None
        self._enabled: Set[PixelFormat] = set()
        self._latest: Optional[np.ndarray] = None
        self._texture: Optional[np.ndarray] = None

        logger.debug(f"Camera created (index {camera_index})")

    # =========================================================================
    # CAPTURE LIFECYCLE
    # =========================================================================

    def open(self) -> None:
        """Open the capture device, raising CAMERA_UNAVAILABLE on failure."""
        self._cap = cv2.VideoCapture(self._camera_index)

        if not self._cap.isOpened():
            self._cap = None
            raise exceptions.camera_unavailable(self._camera_index)

        if self._frame_width:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, int(self._frame_width))
        if self._frame_height:
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, int(self._frame_height))

        logger.info(f"📷 Camera {self._camera_index} opened")

    def grab(self) -> bool:
        """
        Read the next frame from the device.

        Returns:
            True when the feed size changed since the previous frame
        """
        if self._cap is None:
            return False

        ret, frame = self._cap.read()
        if not ret or frame is None:
            logger.warning("Failed to read frame")
            self._latest = None
            return False

        self._latest = frame

        # The texture handle stays valid until the feed size changes
        if self._texture is None or self._texture.shape != frame.shape:
            self._texture = frame.copy()
            return True

        np.copyto(self._texture, frame)
        return False

    def close(self) -> None:
        """Release the capture device."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        self._latest = None
        self._texture = None
        logger.debug("Camera closed")

    # =========================================================================
    # CAMERA DEVICE
    # =========================================================================

    def set_frame_format(self, pixel_format: PixelFormat, enabled: bool) -> bool:
        if not enabled:
            self._enabled.discard(pixel_format)
            return True

        if pixel_format not in CONVERSIONS:
            return False

        self._enabled.add(pixel_format)
        return True

    def get_camera_image(self, pixel_format: PixelFormat) -> Optional[Frame]:
        if pixel_format not in self._enabled or self._latest is None:
            return None
        return convert_frame(self._latest, pixel_format)

    # =========================================================================
    # VIDEO RENDERER
    # =========================================================================

    def get_video_texture_info(self) -> VideoTextureInfo:
        if self._latest is None:
            return VideoTextureInfo(image_size=(0, 0), texture_size=(0, 0))

        height, width = self._latest.shape[:2]
        return VideoTextureInfo(
            image_size=(width, height),
            texture_size=(next_power_of_two(width), next_power_of_two(height)),
        )

    @property
    def video_background_texture(self) -> Optional[np.ndarray]:
        return self._texture
