"""
==============================================================================
Services Package
==============================================================================

Session services for the network host.

Services:
---------
- ScanSessionManager: Registry of WebSocket scan sessions

==============================================================================
"""

from .session_service import ScanSession, ScanSessionManager, get_session_manager

__all__ = [
    "ScanSession",
    "ScanSessionManager",
    "get_session_manager",
]
