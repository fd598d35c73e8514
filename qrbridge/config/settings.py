"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single global configuration instance is shared by the live OpenCV
scanner and the FastAPI host.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from qrbridge.camera.formats import PixelFormat


# Module logger
logger = logging.getLogger(__name__)


# Symbology names understood by pyzbar.ZBarSymbol
ZBAR_SYMBOL_NAMES = frozenset({
    "NONE", "PARTIAL", "EAN2", "EAN5", "EAN8", "UPCE", "ISBN10", "UPCA",
    "EAN13", "ISBN13", "COMPOSITE", "I25", "DATABAR", "DATABAR_EXP",
    "CODABAR", "CODE39", "PDF417", "QRCODE", "SQCODE", "CODE93", "CODE128",
})


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        cors_origins: Allowed CORS origins (JSON array string)
        pixel_format: Pixel format requested from the camera subsystem
        barcode_symbols: Symbologies handed to the decoder (JSON array string)
        camera_index: OpenCV camera device index for the live scanner
        frame_width: Requested capture width
        frame_height: Requested capture height
        window_name: Title of the live scanner window

    Example:
        >>> settings = Settings()
        >>> settings.pixel_format
        <PixelFormat.RGBA8888: 'RGBA8888'>
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="QR Bridge",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # SCANNER SETTINGS
    # =========================================================================
    pixel_format: PixelFormat = Field(
        default=PixelFormat.RGBA8888,
        description="Pixel format requested from the camera subsystem"
    )

    barcode_symbols: str = Field(
        default='["QRCODE"]',
        description="Symbologies to decode as JSON array string"
    )

    # =========================================================================
    # LIVE CAMERA SETTINGS
    # =========================================================================
    camera_index: int = Field(
        default=0,
        ge=0,
        description="OpenCV camera device index"
    )

    frame_width: int = Field(
        default=1280,
        ge=16,
        le=7680,
        description="Requested capture width in pixels"
    )

    frame_height: int = Field(
        default=720,
        ge=16,
        le=4320,
        description="Requested capture height in pixels"
    )

    window_name: str = Field(
        default="QR Scanner",
        description="Live scanner window title"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to 'development'.
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("pixel_format", mode="before")
    @classmethod
    def normalize_pixel_format(cls, value):
        """Accept pixel format names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("barcode_symbols")
    @classmethod
    def validate_barcode_symbols(cls, value: str) -> str:
        """Reject symbology names zbar does not know."""
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return value

        if isinstance(parsed, list):
            unknown = [s for s in parsed if str(s).upper() not in ZBAR_SYMBOL_NAMES]
            if unknown:
                raise ValueError(f"Unknown barcode symbols: {unknown}")

        return value

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def log_level(self) -> int:
        """Root log level: quiet in production, verbose in debug."""
        if self.is_production:
            return logging.WARNING
        return logging.DEBUG if self.debug else logging.INFO

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from JSON string to list."""
        return self._parse_json_list(self.cors_origins, ["*"], "CORS origins")

    @property
    def barcode_symbols_list(self) -> List[str]:
        """Parse decoder symbologies from JSON string to list."""
        symbols = self._parse_json_list(
            self.barcode_symbols, ["QRCODE"], "barcode symbols"
        )
        return [str(s).upper() for s in symbols]

    @staticmethod
    def _parse_json_list(raw: str, fallback: List[str], label: str) -> List[str]:
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return parsed
            return fallback
        except json.JSONDecodeError:
            logger.warning(f"Invalid {label} JSON: {raw}, defaulting to {fallback}")
            return fallback

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"pixel_format={self.pixel_format.value!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
