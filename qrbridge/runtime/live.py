"""
==============================================================================
Live Scan Loop
==============================================================================

Single-threaded OpenCV host for a QRCodeScanner.

Each iteration grabs one frame, fires the hub events, advances the GUI
clock and draws the overlay. A slow decode delays the next iteration;
frames are never queued.

Controls
--------
q = Quit
p = Pause / resume

==============================================================================
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import cv2
import numpy as np

from qrbridge.camera.opencv import OpenCVCamera
from qrbridge.runtime.hub import ARCallbackHub
from qrbridge.scanner.core import QRCodeScanner


# Module logger
logger = logging.getLogger(__name__)


# UI Colors (BGR)
COLOR_TEXT = (255, 255, 255)
COLOR_DECODED = (0, 200, 0)
COLOR_PAUSED = (0, 165, 255)
COLOR_BG = (30, 30, 30)


class LiveScanLoop:
    """
    Drives a scanner from a local camera and shows the feed in a window.

    Example:
        >>> loop = LiveScanLoop(hub, camera, scanner)
        >>> loop.run(duration_seconds=30)
    """

    def __init__(
        self,
        hub: ARCallbackHub,
        camera: OpenCVCamera,
        scanner: QRCodeScanner,
        window_name: str = "QR Scanner",
    ) -> None:
        self._hub = hub
        self._camera = camera
        self._scanner = scanner
        self._window_name = window_name

    def run(self, duration_seconds: float = 0) -> Optional[str]:
        """
        Run until 'q', camera failure, or the duration elapses.

        Args:
            duration_seconds: Stop after this many seconds (0 = indefinite)

        Returns:
            Last decoded text, if any
        """
        self._camera.open()
        logger.info("📷 Starting live scan (press 'q' to quit, 'p' to pause)")

        self._hub.fire_started()
        last_tick = time.monotonic()

        try:
            while True:
                if not self._hub.paused:
                    if self._camera.grab():
                        self._hub.fire_background_texture_changed()
                    self._hub.fire_trackables_updated()

                now = time.monotonic()
                self._scanner.on_gui(now - last_tick)
                last_tick = now

                feed = self._scanner.display.camera_feed
                if feed is not None:
                    cv2.imshow(self._window_name, self.render(feed))

                key = cv2.waitKey(1) & 0xFF
                if key == ord("q"):
                    logger.info("User pressed 'q' - stopping scan")
                    break
                if key == ord("p"):
                    self._hub.fire_pause(not self._hub.paused)

                if 0 < duration_seconds <= self._scanner.display.seconds_passed:
                    logger.info(f"Duration {duration_seconds}s reached")
                    break
        finally:
            if self._scanner.registered:
                self._hub.fire_pause(True)
            self._camera.close()
            cv2.destroyAllWindows()

        return self._scanner.display.scanned_text

    def render(self, feed: np.ndarray) -> np.ndarray:
        """Copy of the feed with elapsed time, state and decoded text drawn on."""
        out = feed.copy()
        display = self._scanner.display
        font = cv2.FONT_HERSHEY_SIMPLEX

        cv2.rectangle(out, (0, 0), (out.shape[1], 70), COLOR_BG, -1)
        cv2.putText(out, display.seconds_text, (10, 28), font, 0.8, COLOR_TEXT, 2)

        if self._hub.paused:
            cv2.putText(out, "PAUSED", (160, 28), font, 0.8, COLOR_PAUSED, 2)

        if display.scanned_text:
            cv2.putText(
                out, display.scanned_text[:60], (10, 58), font, 0.7, COLOR_DECODED, 2
            )

        outcome = self._scanner.last_outcome
        if outcome is not None and outcome.ok and len(outcome.result.points) >= 4:
            pts = np.array(outcome.result.points, dtype=np.int32).reshape((-1, 1, 2))
            cv2.polylines(out, [pts], True, COLOR_DECODED, 3)

        return out
