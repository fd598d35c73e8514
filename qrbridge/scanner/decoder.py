"""
==============================================================================
Decoder Interface
==============================================================================

Barcode decoder contract and the result types that flow out of the
frame bridge.

==============================================================================
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from qrbridge.camera.formats import BitmapFormat


@dataclass(frozen=True)
class DecodeResult:
    """A decoded symbol."""

    text: str
    symbology: str = "QRCODE"
    points: List[Tuple[int, int]] = field(default_factory=list)


class Decoder(ABC):
    """Decodes a single barcode from a raw pixel buffer."""

    @abstractmethod
    def decode(
        self,
        pixels: bytes,
        width: int,
        height: int,
        bitmap_format: BitmapFormat,
    ) -> Optional[DecodeResult]:
        """
        Decode the first barcode in the buffer.

        Returns:
            DecodeResult, or None if nothing was found

        Raises:
            Any exception on malformed input; callers treat it as a
            failed decode
        """


class DecodeStatus(str, enum.Enum):
    """Outcome of one decode attempt."""

    DECODED = "decoded"
    NOTHING = "nothing"
    FAILED = "failed"


@dataclass(frozen=True)
class DecodeOutcome:
    """
    Explicit result of the decode step.

    Decode errors are reported here instead of propagating, so the
    caller picks the log-and-continue policy.
    """

    status: DecodeStatus
    result: Optional[DecodeResult] = None
    error: Optional[str] = None

    @classmethod
    def decoded(cls, result: DecodeResult) -> "DecodeOutcome":
        return cls(DecodeStatus.DECODED, result=result)

    @classmethod
    def nothing(cls) -> "DecodeOutcome":
        return cls(DecodeStatus.NOTHING)

    @classmethod
    def failed(cls, error: str) -> "DecodeOutcome":
        return cls(DecodeStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status == DecodeStatus.DECODED

    @property
    def text(self) -> Optional[str]:
        return self.result.text if self.result else None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.result:
            data["text"] = self.result.text
            data["symbology"] = self.result.symbology
            data["points"] = [list(p) for p in self.result.points]
        if self.error:
            data["error"] = self.error
        return data
