"""
==============================================================================
Settings Tests
==============================================================================
"""

import logging

import pytest
from pydantic import ValidationError

from qrbridge.camera.formats import PixelFormat
from qrbridge.config.settings import Settings


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.pixel_format == PixelFormat.RGBA8888
        assert settings.barcode_symbols_list == ["QRCODE"]
        assert settings.cors_origins_list == ["*"]

    def test_pixel_format_from_env(self, monkeypatch):
        monkeypatch.setenv("PIXEL_FORMAT", "grayscale")
        settings = Settings(_env_file=None)
        assert settings.pixel_format == PixelFormat.GRAYSCALE

    def test_invalid_pixel_format(self, monkeypatch):
        monkeypatch.setenv("PIXEL_FORMAT", "CMYK")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_unknown_env_falls_back(self):
        settings = Settings(_env_file=None, app_env="qa")
        assert settings.app_env == "development"

    def test_log_level(self):
        assert Settings(_env_file=None, debug=True).log_level == logging.DEBUG
        assert Settings(_env_file=None, debug=False).log_level == logging.INFO
        assert Settings(_env_file=None, app_env="production").log_level == logging.WARNING

    def test_barcode_symbols(self):
        settings = Settings(_env_file=None, barcode_symbols='["qrcode", "ean13"]')
        assert settings.barcode_symbols_list == ["QRCODE", "EAN13"]

    def test_invalid_symbols_json(self):
        settings = Settings(_env_file=None, barcode_symbols="QRCODE")
        assert settings.barcode_symbols_list == ["QRCODE"]

    def test_unknown_barcode_symbol_rejected(self, monkeypatch):
        monkeypatch.setenv("BARCODE_SYMBOLS", '["QRCODE", "NOT_A_CODE"]')
        with pytest.raises(ValidationError) as exc:
            Settings(_env_file=None)
        assert "NOT_A_CODE" in str(exc.value)
