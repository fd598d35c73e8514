"""
==============================================================================
Scan Session Service Module
==============================================================================

Bookkeeping for scanner sessions hosted over WebSocket.

This module implements:
- ScanSession: hub + push camera + scanner for one client
- ScanSessionManager: registry of live sessions

A session is driven entirely by its client's messages; all calls happen
on the event loop thread.

==============================================================================
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional

from qrbridge.camera.base import Frame
from qrbridge.camera.formats import PixelFormat
from qrbridge.camera.push import PushCamera
from qrbridge.core import exceptions
from qrbridge.runtime.hub import ARCallbackHub
from qrbridge.scanner.core import QRCodeScanner
from qrbridge.scanner.decoder import Decoder, DecodeOutcome


# Module logger
logger = logging.getLogger(__name__)


class ScanSession:
    """
    One scanner wired to a push camera and its own hub.

    Example:
        >>> session = ScanSession(decoder, PixelFormat.GRAYSCALE)
        >>> session.start()
        >>> outcome = session.process_frame(frame)
    """

    def __init__(self, decoder: Decoder, pixel_format: PixelFormat) -> None:
        self.id = uuid.uuid4().hex
        self.created_at = datetime.now(timezone.utc)
        self.hub = ARCallbackHub()
        self.camera = PushCamera()
        self.scanner = QRCodeScanner(self.camera, self.camera, decoder, pixel_format)
        self.scanner.attach(self.hub)
        self._last_tick: Optional[float] = None
        self._frame_count = 0
        self._closed = False

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> bool:
        """Fire the started event; returns whether the format registered."""
        self.hub.fire_started()
        self._last_tick = time.monotonic()
        return self.scanner.registered

    def process_frame(self, frame: Frame) -> Optional[DecodeOutcome]:
        """Push a frame and run one tick. None if the frame was not processed."""
        if self._closed:
            return None

        self._frame_count += 1
        if self.camera.push(frame):
            self.hub.fire_background_texture_changed()
        self.hub.fire_trackables_updated()
        self._advance_clock()

        return self.scanner.tick_outcome

    def pause(self) -> None:
        self.hub.fire_pause(True)
        self._advance_clock()

    def resume(self) -> bool:
        self.hub.fire_pause(False)
        self._advance_clock()
        return self.scanner.registered

    def close(self) -> None:
        self._closed = True
        if self.scanner.registered:
            self.scanner.negotiator.unregister()
        self.scanner.detach()

    def _advance_clock(self) -> None:
        now = time.monotonic()
        if self._last_tick is not None:
            self.scanner.on_gui(now - self._last_tick)
        self._last_tick = now

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "session_id": self.id,
            "created_at": self.created_at.isoformat(),
            "paused": self.hub.paused,
            "closed": self._closed,
            "frames_received": self._frame_count,
            "frames_dropped": self.camera.frames_dropped,
        }
        data.update(self.scanner.status())
        return data


class ScanSessionManager:
    """Registry of active scan sessions."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ScanSession] = {}

    def create(self, decoder: Decoder, pixel_format: PixelFormat) -> ScanSession:
        session = ScanSession(decoder, pixel_format)
        self._sessions[session.id] = session
        logger.info(f"📱 Scan session {session.id} created ({pixel_format.value})")
        return session

    def get(self, session_id: str) -> ScanSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise exceptions.session_not_found(session_id)
        return session

    def remove(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
            logger.info(f"Scan session {session_id} closed")

    def list(self) -> List[ScanSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.remove(session_id)


@lru_cache(maxsize=1)
def get_session_manager() -> ScanSessionManager:
    """Global session manager (singleton)."""
    return ScanSessionManager()
