"""
==============================================================================
Schemas Package
==============================================================================

Pydantic models for request/response validation.

==============================================================================
"""

from .common import MessageResponse
from .scanner import (
    FormatInfo,
    FormatListResponse,
    FrameMessage,
    SessionListResponse,
    SessionResponse,
)

__all__ = [
    "MessageResponse",
    "FormatInfo",
    "FormatListResponse",
    "FrameMessage",
    "SessionListResponse",
    "SessionResponse",
]
