"""
==============================================================================
Frame Bridge
==============================================================================

Moves one camera frame per tick into the decoder.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from qrbridge.camera.base import CameraDevice, Frame
from qrbridge.camera.formats import to_bitmap_format
from qrbridge.scanner.decoder import Decoder, DecodeOutcome
from qrbridge.scanner.negotiator import FrameFormatNegotiator


# Module logger
logger = logging.getLogger(__name__)


class FrameBridge:
    """
    Per-tick frame forwarding.

    Attributes:
        decode_calls: Number of frames handed to the decoder
    """

    def __init__(
        self,
        camera: CameraDevice,
        decoder: Decoder,
        negotiator: FrameFormatNegotiator,
    ) -> None:
        self._camera = camera
        self._decoder = decoder
        self._negotiator = negotiator
        self.decode_calls = 0

    def tick(self) -> Optional[DecodeOutcome]:
        """
        Pull the latest frame and decode it.

        Returns:
            None when no frame was processed (format not registered,
            or no frame available), otherwise the decode outcome
        """
        if not self._negotiator.registered:
            return None

        frame = self._camera.get_camera_image(self._negotiator.pixel_format)
        if frame is None:
            return None

        logger.debug(frame.describe())
        return self.read_qr_code(frame)

    def read_qr_code(self, frame: Frame) -> DecodeOutcome:
        """Decode any single QR code present in a frame."""
        if frame is None or not frame.pixels:
            return DecodeOutcome.nothing()

        self.decode_calls += 1
        try:
            result = self._decoder.decode(
                frame.pixels,
                frame.buffer_width,
                frame.buffer_height,
                to_bitmap_format(frame.pixel_format),
            )
        except Exception as e:
            logger.error(f"Decode error: {e}")
            return DecodeOutcome.failed(str(e))

        if result is None:
            logger.debug("Nothing decoded yet.")
            return DecodeOutcome.nothing()

        logger.info(f"Decoded {result.text}")
        return DecodeOutcome.decoded(result)
