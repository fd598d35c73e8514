"""Scan display state: elapsed time, last decoded text and the feed texture."""

from __future__ import annotations

from typing import Any, Optional


class ScanDisplay:
    """UI-facing state of a scanner. No history is kept."""

    def __init__(self) -> None:
        self.seconds_passed = 0.0
        self.scanned_text: Optional[str] = None
        self.camera_feed: Any = None

    def advance(self, delta_time: float) -> None:
        self.seconds_passed += max(delta_time, 0.0)

    @property
    def seconds_text(self) -> str:
        return f"{self.seconds_passed:.2f}s"
