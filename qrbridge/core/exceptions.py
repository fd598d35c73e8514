"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Usage:
        raise AppException("Session not found", "SESSION_NOT_FOUND", 404)

    Error Codes:
        Scanner:
            - UNSUPPORTED_PIXEL_FORMAT (400)
            - UNSUPPORTED_BITMAP_FORMAT (400)
            - INVALID_FRAME_BUFFER (400)
            - CAMERA_UNAVAILABLE (503)

        Sessions:
            - SESSION_NOT_FOUND (404)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "SESSION_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to a consistent JSON error response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def unsupported_pixel_format(pixel_format: str) -> AppException:
    """Create unsupported pixel format exception."""
    return AppException(
        f"Pixel format {pixel_format} is not supported",
        "UNSUPPORTED_PIXEL_FORMAT",
        400,
        {"pixel_format": pixel_format}
    )


def unsupported_bitmap_format(bitmap_format: str) -> AppException:
    """Create unsupported bitmap format exception."""
    return AppException(
        f"Cannot decode bitmap format {bitmap_format}",
        "UNSUPPORTED_BITMAP_FORMAT",
        400,
        {"bitmap_format": bitmap_format}
    )


def invalid_frame_buffer(expected: int, actual: int) -> AppException:
    """Create invalid frame buffer exception."""
    return AppException(
        f"Frame buffer too small: expected {expected} bytes, got {actual}",
        "INVALID_FRAME_BUFFER",
        400,
        {"expected": expected, "actual": actual}
    )


def camera_unavailable(camera_index: int) -> AppException:
    """Create camera unavailable exception."""
    return AppException(
        f"Cannot open camera {camera_index}",
        "CAMERA_UNAVAILABLE",
        503,
        {"camera_index": camera_index}
    )


def session_not_found(session_id: Optional[str] = None) -> AppException:
    """Create scan session not found exception."""
    details = {"session_id": session_id} if session_id else {}
    return AppException("Scan session not found", "SESSION_NOT_FOUND", 404, details)
