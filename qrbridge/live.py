"""
==============================================================================
Live QR Scanner - Command Line Entry Point
==============================================================================

Scan QR codes from a local camera in an OpenCV window.

Usage:
------
    qrbridge-live --camera 0 --format GRAYSCALE
    python -m qrbridge.live --duration 30

==============================================================================
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from qrbridge.camera.formats import PixelFormat
from qrbridge.config import configure_logging, get_settings
from qrbridge.core import AppException


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    p = argparse.ArgumentParser(description="Live QR code scanner")
    p.add_argument("--camera", type=int, default=settings.camera_index,
                   help=f"Camera device ID (default {settings.camera_index})")
    p.add_argument("--format", type=str.upper, default=settings.pixel_format.value,
                   choices=[f.value for f in PixelFormat],
                   help="Pixel format requested from the camera")
    p.add_argument("--width", type=int, default=settings.frame_width,
                   help="Capture width")
    p.add_argument("--height", type=int, default=settings.frame_height,
                   help="Capture height")
    p.add_argument("--duration", type=float, default=0,
                   help="Stop after N seconds (0 = until 'q')")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    # cv2 and pyzbar load native libraries, import only when scanning
    from qrbridge.camera.opencv import OpenCVCamera
    from qrbridge.runtime.hub import ARCallbackHub
    from qrbridge.runtime.live import LiveScanLoop
    from qrbridge.scanner.core import QRCodeScanner
    from qrbridge.scanner.pyzbar_decoder import PyzbarDecoder

    camera = OpenCVCamera(args.camera, args.width, args.height)
    scanner = QRCodeScanner(
        camera,
        camera,
        PyzbarDecoder(settings.barcode_symbols_list),
        PixelFormat(args.format),
    )
    hub = ARCallbackHub()
    scanner.attach(hub)

    try:
        text = LiveScanLoop(hub, camera, scanner, settings.window_name).run(args.duration)
    except AppException as e:
        logger.error(e.message)
        return 1
    finally:
        scanner.detach()

    if text:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
