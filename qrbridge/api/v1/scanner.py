"""
==============================================================================
Scanner Endpoints
==============================================================================

Pixel format listing and scan session control.

==============================================================================
"""

from fastapi import APIRouter, Depends

from qrbridge.api.dependencies import get_sessions
from qrbridge.camera.formats import SUPPORTED_FORMATS, bytes_per_pixel, to_bitmap_format
from qrbridge.config import get_settings
from qrbridge.schemas import (
    FormatInfo,
    FormatListResponse,
    MessageResponse,
    SessionListResponse,
    SessionResponse,
)
from qrbridge.services.session_service import ScanSessionManager


router = APIRouter(prefix="/scanner", tags=["Scanner"])


class ScannerController:
    """Controller for scan session operations."""

    def __init__(self, sessions: ScanSessionManager):
        self._sessions = sessions

    @staticmethod
    def list_formats() -> FormatListResponse:
        formats = []
        for pixel_format in sorted(SUPPORTED_FORMATS, key=lambda f: f.value):
            bitmap_format = to_bitmap_format(pixel_format)
            formats.append(FormatInfo(
                pixel_format=pixel_format.value,
                bitmap_format=bitmap_format.value,
                bytes_per_pixel=bytes_per_pixel(bitmap_format),
            ))
        return FormatListResponse(
            default=get_settings().pixel_format.value,
            formats=formats,
        )

    def list_sessions(self) -> SessionListResponse:
        sessions = [s.to_dict() for s in self._sessions.list()]
        return SessionListResponse(total=len(sessions), sessions=sessions)

    def get_session(self, session_id: str) -> SessionResponse:
        return SessionResponse(session=self._sessions.get(session_id).to_dict())

    def pause(self, session_id: str) -> SessionResponse:
        session = self._sessions.get(session_id)
        session.pause()
        return SessionResponse(session=session.to_dict())

    def resume(self, session_id: str) -> SessionResponse:
        session = self._sessions.get(session_id)
        session.resume()
        return SessionResponse(session=session.to_dict())

    def close(self, session_id: str) -> MessageResponse:
        self._sessions.get(session_id)
        self._sessions.remove(session_id)
        return MessageResponse(message=f"Session {session_id} closed")


@router.get("/formats", response_model=FormatListResponse)
async def list_formats():
    """Pixel formats the scanner can decode."""
    return ScannerController.list_formats()


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(sessions: ScanSessionManager = Depends(get_sessions)):
    """All active scan sessions."""
    return ScannerController(sessions).list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, sessions: ScanSessionManager = Depends(get_sessions)):
    """Status of one scan session."""
    return ScannerController(sessions).get_session(session_id)


@router.post("/sessions/{session_id}/pause", response_model=SessionResponse)
async def pause_session(session_id: str, sessions: ScanSessionManager = Depends(get_sessions)):
    """Pause a session: the pixel format is unregistered and frames are ignored."""
    return ScannerController(sessions).pause(session_id)


@router.post("/sessions/{session_id}/resume", response_model=SessionResponse)
async def resume_session(session_id: str, sessions: ScanSessionManager = Depends(get_sessions)):
    """Resume a session: the pixel format is registered again."""
    return ScannerController(sessions).resume(session_id)


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def close_session(session_id: str, sessions: ScanSessionManager = Depends(get_sessions)):
    """Close a session from the server side."""
    return ScannerController(sessions).close(session_id)
