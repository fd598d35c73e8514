"""
==============================================================================
Scanner Package - QR Code Detection
==============================================================================

Camera-to-decoder bridge.

Classes:
--------
- QRCodeScanner: Component wired to a callback hub
- FrameFormatNegotiator: Pixel format registration
- FrameBridge: Per-tick frame forwarding
- Decoder / DecodeResult / DecodeOutcome: Decoder contract

The zbar backed decoder lives in qrbridge.scanner.pyzbar_decoder.

==============================================================================
"""

from .bridge import FrameBridge
from .core import QRCodeScanner
from .decoder import Decoder, DecodeOutcome, DecodeResult, DecodeStatus
from .display import ScanDisplay
from .negotiator import FrameFormatNegotiator, ScannerState

__all__ = [
    "FrameBridge",
    "QRCodeScanner",
    "Decoder",
    "DecodeOutcome",
    "DecodeResult",
    "DecodeStatus",
    "ScanDisplay",
    "FrameFormatNegotiator",
    "ScannerState",
]
