"""
==============================================================================
Frame Format Negotiator
==============================================================================

Requests a pixel format from the camera and tracks whether the request
succeeded. Frames are only pulled while the format is registered.

==============================================================================
"""

from __future__ import annotations

import enum
import logging

from qrbridge.camera.base import CameraDevice
from qrbridge.camera.formats import PixelFormat


# Module logger
logger = logging.getLogger(__name__)


class ScannerState(str, enum.Enum):
    """Registration state of the scanner."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


class FrameFormatNegotiator:
    """
    Registers and unregisters the configured pixel format.

    Failures are logged, never raised. There is no automatic retry;
    the next resume triggers the next attempt.
    """

    def __init__(self, camera: CameraDevice, pixel_format: PixelFormat) -> None:
        self._camera = camera
        self._pixel_format = pixel_format
        self._registered = False

    @property
    def pixel_format(self) -> PixelFormat:
        return self._pixel_format

    @property
    def registered(self) -> bool:
        return self._registered

    @property
    def state(self) -> ScannerState:
        if self._registered:
            return ScannerState.REGISTERED
        return ScannerState.UNREGISTERED

    def register(self) -> bool:
        """
        Register the pixel format with the camera.

        Returns:
            True if the camera accepted the format
        """
        name = self._pixel_format.value
        try:
            self._registered = bool(
                self._camera.set_frame_format(self._pixel_format, True)
            )
        except Exception as e:
            logger.error(f"Registering pixel format {name} raised: {e}")
            self._registered = False

        if self._registered:
            logger.info(f"Registered pixel format {name}.")
        else:
            logger.error(
                f"Pixel format {name} could not be registered. "
                "The format may not be supported by your device. "
                "Consider using a different pixel format."
            )

        return self._registered

    def unregister(self) -> None:
        """Unregister the pixel format; frame pulls stop immediately."""
        name = self._pixel_format.value
        logger.info(f"Unregistering camera pixel format {name}.")
        try:
            self._camera.set_frame_format(self._pixel_format, False)
        except Exception as e:
            logger.error(f"Unregistering pixel format {name} raised: {e}")
        finally:
            self._registered = False
