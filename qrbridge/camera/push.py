"""
==============================================================================
Push Camera Module
==============================================================================

Camera and renderer fed by frames pushed from outside, e.g. a WebSocket
client streaming raw pixel buffers.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Set

from qrbridge.camera.base import (
    CameraDevice,
    Frame,
    VideoRenderer,
    VideoTextureInfo,
    next_power_of_two,
)
from qrbridge.camera.formats import SUPPORTED_FORMATS, PixelFormat


# Module logger
logger = logging.getLogger(__name__)


class PushCamera(CameraDevice, VideoRenderer):
    """
    Holds the most recently pushed frame.

    Only frames in a registered format are handed out. A frame
    is handed out once; later pulls return None until the next push.

    Example:
        >>> camera = PushCamera()
        >>> camera.set_frame_format(PixelFormat.GRAYSCALE, True)
        True
        >>> camera.push(frame)
        True
    """

    def __init__(self) -> None:
        self._enabled: Set[PixelFormat] = set()
        self._latest: Optional[Frame] = None
        self._texture: Optional[Frame] = None
        self._frames_pushed = 0
        self._frames_dropped = 0

    @property
    def frames_pushed(self) -> int:
        return self._frames_pushed

    @property
    def frames_dropped(self) -> int:
        return self._frames_dropped

    # =========================================================================
    # CAMERA DEVICE
    # =========================================================================

    def set_frame_format(self, pixel_format: PixelFormat, enabled: bool) -> bool:
        if not enabled:
            self._enabled.discard(pixel_format)
            return True

        if pixel_format not in SUPPORTED_FORMATS:
            logger.warning(f"Push camera cannot deliver {pixel_format.value} frames")
            return False

        self._enabled.add(pixel_format)
        return True

    def get_camera_image(self, pixel_format: PixelFormat) -> Optional[Frame]:
        if pixel_format not in self._enabled:
            return None

        frame, self._latest = self._latest, None
        if frame is None:
            return None

        if frame.pixel_format != pixel_format:
            self._frames_dropped += 1
            logger.warning(
                f"Dropping {frame.pixel_format.value} frame, "
                f"registered format is {pixel_format.value}"
            )
            return None

        return frame

    # =========================================================================
    # VIDEO RENDERER
    # =========================================================================

    def get_video_texture_info(self) -> VideoTextureInfo:
        if self._texture is None:
            return VideoTextureInfo(image_size=(0, 0), texture_size=(0, 0))

        width, height = self._texture.width, self._texture.height
        return VideoTextureInfo(
            image_size=(width, height),
            texture_size=(next_power_of_two(width), next_power_of_two(height)),
        )

    @property
    def video_background_texture(self) -> Optional[Frame]:
        return self._texture

    # =========================================================================
    # FRAME INPUT
    # =========================================================================

    def push(self, frame: Frame) -> bool:
        """
        Store a new frame.

        Returns:
            True when the feed size changed, i.e. the background
            texture has to be reassigned
        """
        previous = self._texture
        self._latest = frame
        self._texture = frame
        self._frames_pushed += 1

        return previous is None or (previous.width, previous.height) != (
            frame.width,
            frame.height,
        )
