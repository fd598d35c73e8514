"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides fake camera/decoder collaborators and an API test client.

==============================================================================
"""

import base64
from typing import Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from qrbridge.api.dependencies import get_decoder, get_sessions
from qrbridge.camera.base import (
    CameraDevice,
    Frame,
    VideoRenderer,
    VideoTextureInfo,
)
from qrbridge.camera.formats import BitmapFormat, PixelFormat
from qrbridge.main import app
from qrbridge.runtime.hub import ARCallbackHub
from qrbridge.scanner.core import QRCodeScanner
from qrbridge.scanner.decoder import Decoder, DecodeResult
from qrbridge.services.session_service import ScanSessionManager


# ============================================================================
# FAKE COLLABORATORS
# ============================================================================

def make_frame(
    pixel_format: PixelFormat = PixelFormat.RGBA8888,
    width: int = 4,
    height: int = 2,
    bytes_per_pixel: int = 4,
) -> Frame:
    """Small frame filled with a constant byte."""
    return Frame(
        width=width,
        height=height,
        stride=width * bytes_per_pixel,
        buffer_width=width,
        buffer_height=height,
        pixels=b"\x7f" * (width * height * bytes_per_pixel),
        pixel_format=pixel_format,
    )


class FakeCamera(CameraDevice, VideoRenderer):
    """Camera that accepts or rejects formats on demand and counts pulls."""

    def __init__(self, accept: bool = True, frame: Optional[Frame] = None):
        self.accept = accept
        self.frame = frame if frame is not None else make_frame()
        self.raise_on_set = False
        self.format_calls: List[Tuple[PixelFormat, bool]] = []
        self.pulls = 0
        self.texture = object()

    def set_frame_format(self, pixel_format: PixelFormat, enabled: bool) -> bool:
        self.format_calls.append((pixel_format, enabled))
        if self.raise_on_set:
            raise RuntimeError("camera driver failure")
        return self.accept if enabled else True

    def get_camera_image(self, pixel_format: PixelFormat) -> Optional[Frame]:
        self.pulls += 1
        return self.frame

    def get_video_texture_info(self) -> VideoTextureInfo:
        return VideoTextureInfo(image_size=(640, 480), texture_size=(1024, 512))

    @property
    def video_background_texture(self):
        return self.texture


class FakeDecoder(Decoder):
    """Decoder returning a fixed text, None, or raising."""

    def __init__(self, text: Optional[str] = "ABC123", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Tuple[int, int, int, BitmapFormat]] = []

    def decode(self, pixels, width, height, bitmap_format):
        self.calls.append((len(pixels), width, height, bitmap_format))
        if self.error is not None:
            raise self.error
        if self.text is None:
            return None
        return DecodeResult(text=self.text, points=[(0, 0), (1, 0), (1, 1), (0, 1)])


# ============================================================================
# SCANNER FIXTURES
# ============================================================================

@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def hub() -> ARCallbackHub:
    return ARCallbackHub()


@pytest.fixture
def scanner(camera: FakeCamera, decoder: FakeDecoder, hub: ARCallbackHub) -> QRCodeScanner:
    """RGBA8888 scanner attached to a hub."""
    scanner = QRCodeScanner(camera, camera, decoder, PixelFormat.RGBA8888)
    scanner.attach(hub)
    yield scanner
    scanner.detach()


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
def sessions() -> ScanSessionManager:
    manager = ScanSessionManager()
    yield manager
    manager.close_all()


@pytest.fixture
def client(decoder: FakeDecoder, sessions: ScanSessionManager) -> Generator[TestClient, None, None]:
    """Test client with fake decoder and an isolated session registry."""
    app.dependency_overrides[get_decoder] = lambda: decoder
    app.dependency_overrides[get_sessions] = lambda: sessions

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def frame_message(
    pixel_format: str = "GRAYSCALE",
    width: int = 8,
    height: int = 8,
    bytes_per_pixel: int = 1,
) -> dict:
    """WebSocket frame message with a blank buffer."""
    pixels = bytes(width * height * bytes_per_pixel)
    return {
        "type": "frame",
        "width": width,
        "height": height,
        "pixel_format": pixel_format,
        "data": base64.b64encode(pixels).decode("ascii"),
    }
