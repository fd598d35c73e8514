"""
==============================================================================
Scan Session Tests
==============================================================================
"""

import pytest

from qrbridge.camera.formats import PixelFormat
from qrbridge.core import AppException
from qrbridge.services.session_service import ScanSessionManager

from tests.conftest import FakeDecoder, make_frame


class TestScanSession:
    """Tests for a push-camera backed session."""

    def test_process_frame_decodes(self):
        session = ScanSessionManager().create(FakeDecoder("HELLO"), PixelFormat.GRAYSCALE)
        assert session.start() is True

        outcome = session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1))

        assert outcome.text == "HELLO"
        assert session.scanner.display.scanned_text == "HELLO"
        assert session.frame_count == 1

    def test_first_frame_assigns_texture(self):
        session = ScanSessionManager().create(FakeDecoder(), PixelFormat.GRAYSCALE)
        session.start()
        frame = make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)

        session.process_frame(frame)

        assert session.scanner.display.camera_feed is frame

    def test_frames_ignored_before_start(self):
        decoder = FakeDecoder()
        session = ScanSessionManager().create(decoder, PixelFormat.GRAYSCALE)

        assert session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)) is None
        assert decoder.calls == []

    def test_pause_resume(self):
        decoder = FakeDecoder()
        session = ScanSessionManager().create(decoder, PixelFormat.GRAYSCALE)
        session.start()

        session.pause()
        assert session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)) is None

        assert session.resume() is True
        assert session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)) is not None
        assert len(decoder.calls) == 1

    def test_to_dict(self):
        session = ScanSessionManager().create(FakeDecoder(), PixelFormat.RGB565)
        session.start()

        data = session.to_dict()

        assert data["session_id"] == session.id
        assert data["pixel_format"] == "RGB565"
        assert data["registered"] is True
        assert data["paused"] is False


class TestScanSessionManager:
    """Tests for the session registry."""

    def test_get_unknown(self):
        with pytest.raises(AppException) as exc:
            ScanSessionManager().get("nope")
        assert exc.value.status_code == 404

    def test_remove_unregisters(self):
        manager = ScanSessionManager()
        session = manager.create(FakeDecoder(), PixelFormat.GRAYSCALE)
        session.start()

        manager.remove(session.id)

        assert len(manager) == 0
        assert session.scanner.registered is False
        assert session.hub.callback_count == 0

    def test_close_all(self):
        manager = ScanSessionManager()
        manager.create(FakeDecoder(), PixelFormat.GRAYSCALE)
        manager.create(FakeDecoder(), PixelFormat.RGB888)

        manager.close_all()

        assert manager.list() == []

    def test_removed_session_processes_nothing(self):
        decoder = FakeDecoder()
        manager = ScanSessionManager()
        session = manager.create(decoder, PixelFormat.GRAYSCALE)
        session.start()
        assert session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)) is not None

        manager.remove(session.id)

        assert session.closed is True
        assert session.process_frame(make_frame(PixelFormat.GRAYSCALE, bytes_per_pixel=1)) is None
        assert session.scanner.tick_outcome is None
        assert len(decoder.calls) == 1
