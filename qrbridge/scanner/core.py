"""
==============================================================================
QR Code Scanner Core Module
==============================================================================

Scanner component gluing a camera feed to a barcode decoder and a
display.

Responsibilities:
-----------------
- Lifecycle: attach/detach callbacks on a callback hub
- Format negotiation: register the pixel format on start and resume,
  unregister it on pause
- Frame bridging: decode one frame per trackables update and show the
  decoded text

State machine:
--------------
    UNREGISTERED --start/resume (camera accepts)--> REGISTERED
    REGISTERED   --pause------------------------> UNREGISTERED

Ticks are no-ops while UNREGISTERED.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from qrbridge.camera.base import CameraDevice, VideoRenderer
from qrbridge.camera.formats import PixelFormat
from qrbridge.runtime.hub import ARCallbackHub
from qrbridge.scanner.bridge import FrameBridge
from qrbridge.scanner.decoder import Decoder, DecodeOutcome
from qrbridge.scanner.display import ScanDisplay
from qrbridge.scanner.negotiator import FrameFormatNegotiator, ScannerState


# Module logger
logger = logging.getLogger(__name__)


class QRCodeScanner:
    """
    Real-time QR code scanner component.

    Attributes:
        display: ScanDisplay with elapsed time and last decoded text

    Example:
        >>> scanner = QRCodeScanner(camera, camera, decoder, PixelFormat.RGBA8888)
        >>> scanner.attach(hub)
        >>> hub.fire_started()
        >>> hub.fire_trackables_updated()
        >>> scanner.display.scanned_text
        'ABC123'
    """

    def __init__(
        self,
        camera: CameraDevice,
        renderer: VideoRenderer,
        decoder: Decoder,
        pixel_format: PixelFormat = PixelFormat.RGBA8888,
        display: Optional[ScanDisplay] = None,
    ) -> None:
        self._renderer = renderer
        self._negotiator = FrameFormatNegotiator(camera, pixel_format)
        self._bridge = FrameBridge(camera, decoder, self._negotiator)
        self._hub: Optional[ARCallbackHub] = None
        self._last_outcome: Optional[DecodeOutcome] = None
        self._tick_outcome: Optional[DecodeOutcome] = None
        self._decoded_count = 0
        self.display = display or ScanDisplay()

        logger.debug(f"Scanner created ({pixel_format.value})")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def pixel_format(self) -> PixelFormat:
        return self._negotiator.pixel_format

    @property
    def registered(self) -> bool:
        return self._negotiator.registered

    @property
    def state(self) -> ScannerState:
        return self._negotiator.state

    @property
    def last_outcome(self) -> Optional[DecodeOutcome]:
        return self._last_outcome

    @property
    def tick_outcome(self) -> Optional[DecodeOutcome]:
        """Outcome of the most recent tick, None if it processed no frame."""
        return self._tick_outcome

    @property
    def negotiator(self) -> FrameFormatNegotiator:
        return self._negotiator

    @property
    def bridge(self) -> FrameBridge:
        return self._bridge

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def attach(self, hub: ARCallbackHub) -> None:
        """Register callbacks with a hub."""
        if self._hub is not None:
            self.detach()

        hub.register_started_callback(self.on_started)
        hub.register_trackables_updated_callback(self.on_trackables_updated)
        hub.register_background_texture_changed_callback(
            self.on_background_texture_changed
        )
        hub.register_pause_callback(self.on_pause)
        self._hub = hub

    def detach(self) -> None:
        """Unregister callbacks from the attached hub."""
        hub, self._hub = self._hub, None
        self._tick_outcome = None
        if hub is None:
            return

        hub.unregister_started_callback(self.on_started)
        hub.unregister_trackables_updated_callback(self.on_trackables_updated)
        hub.unregister_background_texture_changed_callback(
            self.on_background_texture_changed
        )
        hub.unregister_pause_callback(self.on_pause)

    # =========================================================================
    # HUB CALLBACKS
    # =========================================================================

    def on_started(self) -> None:
        self._negotiator.register()

    def on_trackables_updated(self) -> None:
        outcome = self._tick_outcome = self._bridge.tick()
        if outcome is None:
            return

        self._last_outcome = outcome
        if outcome.ok:
            self._decoded_count += 1
            self.display.scanned_text = outcome.text

    def on_background_texture_changed(self) -> None:
        info = self._renderer.get_video_texture_info()
        logger.debug(
            "Background texture changed: "
            f"image {info.image_size[0]}x{info.image_size[1]}, "
            f"texture {info.texture_size[0]}x{info.texture_size[1]}"
        )
        self.display.camera_feed = self._renderer.video_background_texture

    def on_pause(self, paused: bool) -> None:
        if paused:
            logger.info("App was paused.")
            self._negotiator.unregister()
        else:
            logger.info("App was resumed.")
            self._negotiator.register()

    def on_gui(self, delta_time: float) -> None:
        self.display.advance(delta_time)

    # =========================================================================
    # STATUS
    # =========================================================================

    def status(self) -> Dict[str, Any]:
        """Snapshot of scanner state for reporting."""
        return {
            "state": self.state.value,
            "registered": self.registered,
            "pixel_format": self.pixel_format.value,
            "seconds_passed": round(self.display.seconds_passed, 2),
            "scanned_text": self.display.scanned_text,
            "decode_calls": self._bridge.decode_calls,
            "decoded_count": self._decoded_count,
            "last_outcome": self._last_outcome.to_dict() if self._last_outcome else None,
        }
