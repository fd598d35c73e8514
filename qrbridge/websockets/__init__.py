"""
==============================================================================
WebSocket Package
==============================================================================

Real-time WebSocket handlers for QR scanning.

Handlers:
---------
- scanner: Raw frame streaming with per-frame decode results

==============================================================================
"""

from .scanner import router as scanner_router

__all__ = ["scanner_router"]
