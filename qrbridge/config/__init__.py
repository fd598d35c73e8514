"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from qrbridge.config import get_settings

    settings = get_settings()
    print(settings.pixel_format)

==============================================================================
"""

from .settings import Settings, configure_logging, get_settings

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
]
