"""
==============================================================================
API Dependencies
==============================================================================

FastAPI dependency providers shared by REST and WebSocket routes.

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache

from qrbridge.config import get_settings
from qrbridge.scanner.decoder import Decoder
from qrbridge.services.session_service import ScanSessionManager, get_session_manager


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_decoder() -> Decoder:
    """
    Shared zbar decoder.

    pyzbar loads libzbar on import, so the import happens on first use.
    """
    from qrbridge.scanner.pyzbar_decoder import PyzbarDecoder

    settings = get_settings()
    return PyzbarDecoder(settings.barcode_symbols_list)


def get_sessions() -> ScanSessionManager:
    """Active scan sessions."""
    return get_session_manager()
