"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Real-time QR scanning via WebSocket connection.

Protocol:
---------
1. Client connects, optionally with ?pixel_format=GRAYSCALE
2. Server registers the pixel format and sends an init message
3. Client sends raw frames as base64:
       {"type": "frame", "width": 640, "height": 480,
        "pixel_format": "GRAYSCALE", "data": "..."}
   Server replies with a result message per processed frame
4. Client sends {"type": "pause"} / {"type": "resume"}
5. Client sends {"type": "stop"} to end the session
6. If the session is closed over REST, the next message gets a
   SESSION_CLOSED error and the socket is closed

==============================================================================
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from qrbridge.api.dependencies import get_decoder, get_sessions
from qrbridge.camera.formats import PixelFormat
from qrbridge.config import get_settings
from qrbridge.scanner.decoder import Decoder
from qrbridge.schemas import FrameMessage
from qrbridge.services.session_service import ScanSession, ScanSessionManager


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class ScannerWebSocketHandler:
    """
    Handler for QR scanning WebSocket connections.

    Manages the lifecycle of a scanning session including:
    - Session creation and format registration
    - Frame processing
    - Pause / resume
    - Decode reporting
    """

    def __init__(
        self,
        websocket: WebSocket,
        decoder: Decoder,
        sessions: ScanSessionManager,
    ):
        self._websocket = websocket
        self._decoder = decoder
        self._sessions = sessions
        self._session: Optional[ScanSession] = None

    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })

    async def send_status(self) -> None:
        await self._websocket.send_json({
            "type": "status",
            **self._session.to_dict()
        })

    @staticmethod
    def resolve_format(requested: Optional[str]) -> Optional[PixelFormat]:
        """Requested pixel format, the configured one if absent, None if invalid."""
        if not requested:
            return get_settings().pixel_format
        try:
            return PixelFormat(requested.strip().upper())
        except ValueError:
            return None

    async def handle_init(self, pixel_format: PixelFormat) -> None:
        """Create the session and register its pixel format."""
        self._session = self._sessions.create(self._decoder, pixel_format)
        registered = self._session.start()

        await self._websocket.send_json({
            "type": "init",
            "session_id": self._session.id,
            "pixel_format": pixel_format.value,
            "registered": registered,
        })

    async def handle_frame(self, data: dict) -> None:
        """Handle frame message from client."""
        try:
            frame = FrameMessage.model_validate(data).to_frame()
        except (ValidationError, ValueError) as e:
            logger.warning(f"Rejected frame: {e}")
            await self.send_error("Invalid frame message", "INVALID_FRAME")
            return

        outcome = self._session.process_frame(frame)

        await self._websocket.send_json({
            "type": "result",
            "frame_id": self._session.frame_count,
            "processed": outcome is not None,
            "outcome": outcome.to_dict() if outcome else None,
            "scanned_text": self._session.scanner.display.scanned_text,
            "seconds": self._session.scanner.display.seconds_text,
        })

    async def run(self, pixel_format: Optional[str]) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Scanner WebSocket connected")

        resolved = self.resolve_format(pixel_format)
        if resolved is None:
            await self.send_error(
                f"Unknown pixel format: {pixel_format}", "UNSUPPORTED_PIXEL_FORMAT"
            )
            await self._websocket.close()
            return

        try:
            await self.handle_init(resolved)

            while True:
                data = await self._websocket.receive_json()
                if not isinstance(data, dict):
                    await self.send_error("Expected a JSON object", "INVALID_MESSAGE")
                    continue

                if self._session.closed:
                    logger.info(f"Scan session {self._session.id} was closed, disconnecting")
                    await self.send_error("Scan session was closed", "SESSION_CLOSED")
                    await self._websocket.close()
                    break

                message_type = data.get("type")

                if message_type == "frame":
                    await self.handle_frame(data)

                elif message_type == "pause":
                    self._session.pause()
                    await self.send_status()

                elif message_type == "resume":
                    self._session.resume()
                    await self.send_status()

                elif message_type == "stop":
                    logger.info("🛑 Client requested stop")
                    await self._websocket.close()
                    break

                else:
                    await self.send_error(
                        f"Unknown message type: {message_type}", "UNKNOWN_MESSAGE"
                    )

        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        finally:
            if self._session is not None:
                self._sessions.remove(self._session.id)
            logger.info("✅ Scanner WebSocket closed")


@router.websocket("/ws/scan")
async def websocket_scan(
    websocket: WebSocket,
    pixel_format: Optional[str] = Query(None),
    decoder: Decoder = Depends(get_decoder),
    sessions: ScanSessionManager = Depends(get_sessions),
):
    """Real-time QR scanning via WebSocket."""
    handler = ScannerWebSocketHandler(websocket, decoder, sessions)
    await handler.run(pixel_format)
