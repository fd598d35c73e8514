"""
==============================================================================
Scanner Tests
==============================================================================

Format negotiation, frame bridging and the scanner component.

==============================================================================
"""

import logging

from qrbridge.camera.formats import BitmapFormat, PixelFormat
from qrbridge.runtime.hub import ARCallbackHub
from qrbridge.scanner.bridge import FrameBridge
from qrbridge.scanner.core import QRCodeScanner
from qrbridge.scanner.decoder import DecodeStatus
from qrbridge.scanner.negotiator import FrameFormatNegotiator, ScannerState

from tests.conftest import FakeCamera, FakeDecoder, make_frame


class TestFrameFormatNegotiator:
    """Tests for pixel format registration."""

    def test_register_success(self, camera: FakeCamera, caplog):
        negotiator = FrameFormatNegotiator(camera, PixelFormat.RGBA8888)

        with caplog.at_level(logging.INFO, logger="qrbridge.scanner.negotiator"):
            assert negotiator.register() is True

        assert negotiator.registered is True
        assert negotiator.state == ScannerState.REGISTERED
        assert camera.format_calls == [(PixelFormat.RGBA8888, True)]
        assert "RGBA8888" in caplog.text

    def test_register_failure_logs_error(self, caplog):
        camera = FakeCamera(accept=False)
        negotiator = FrameFormatNegotiator(camera, PixelFormat.RGBA8888)

        with caplog.at_level(logging.ERROR, logger="qrbridge.scanner.negotiator"):
            assert negotiator.register() is False

        assert negotiator.registered is False
        assert negotiator.state == ScannerState.UNREGISTERED
        assert "not be supported" in caplog.text

    def test_register_does_not_raise(self):
        """Camera exceptions stay inside the negotiator."""
        camera = FakeCamera()
        camera.raise_on_set = True
        negotiator = FrameFormatNegotiator(camera, PixelFormat.GRAYSCALE)

        assert negotiator.register() is False
        assert negotiator.registered is False

    def test_unregister_always_clears(self):
        camera = FakeCamera()
        negotiator = FrameFormatNegotiator(camera, PixelFormat.GRAYSCALE)
        negotiator.register()

        camera.raise_on_set = True
        negotiator.unregister()

        assert negotiator.registered is False
        assert camera.format_calls[-1] == (PixelFormat.GRAYSCALE, False)

    def test_failed_register_after_success(self):
        camera = FakeCamera()
        negotiator = FrameFormatNegotiator(camera, PixelFormat.GRAYSCALE)
        assert negotiator.register() is True

        camera.accept = False
        assert negotiator.register() is False
        assert negotiator.registered is False


class TestFrameBridge:
    """Tests for per-tick frame forwarding."""

    def _bridge(self, camera, decoder, register=True):
        negotiator = FrameFormatNegotiator(camera, PixelFormat.RGBA8888)
        if register:
            negotiator.register()
        return FrameBridge(camera, decoder, negotiator)

    def test_tick_without_registration_is_noop(self, camera, decoder):
        bridge = self._bridge(camera, decoder, register=False)

        assert bridge.tick() is None
        assert camera.pulls == 0
        assert decoder.calls == []

    def test_tick_without_frame_is_noop(self, decoder):
        camera = FakeCamera()
        camera.frame = None
        bridge = self._bridge(camera, decoder)

        assert bridge.tick() is None
        assert camera.pulls == 1
        assert decoder.calls == []

    def test_tick_forwards_buffer(self, camera, decoder):
        bridge = self._bridge(camera, decoder)

        outcome = bridge.tick()

        assert outcome.status == DecodeStatus.DECODED
        assert outcome.text == "ABC123"
        assert decoder.calls == [(32, 4, 2, BitmapFormat.RGBA32)]
        assert bridge.decode_calls == 1

    def test_nothing_decoded(self, camera):
        bridge = self._bridge(camera, FakeDecoder(text=None))

        outcome = bridge.tick()

        assert outcome.status == DecodeStatus.NOTHING
        assert outcome.text is None

    def test_decode_exception_is_absorbed(self, camera, caplog):
        bridge = self._bridge(camera, FakeDecoder(error=ValueError("bad buffer")))

        with caplog.at_level(logging.ERROR, logger="qrbridge.scanner.bridge"):
            outcome = bridge.tick()

        assert outcome.status == DecodeStatus.FAILED
        assert outcome.error == "bad buffer"
        assert "bad buffer" in caplog.text

    def test_empty_pixels_skip_decoder(self, camera, decoder):
        bridge = self._bridge(camera, decoder)
        frame = make_frame(width=0, height=0)

        assert bridge.read_qr_code(frame).status == DecodeStatus.NOTHING
        assert decoder.calls == []

    def test_unmapped_format_reaches_decoder_as_unknown(self, decoder):
        camera = FakeCamera(frame=make_frame(PixelFormat.YUV))
        bridge = self._bridge(camera, decoder)

        bridge.tick()

        assert decoder.calls[0][3] == BitmapFormat.UNKNOWN


class TestQRCodeScanner:
    """Scenario tests for the scanner component."""

    def test_register_then_decode(self, scanner, hub):
        """Registered scanner shows decoded text after a tick."""
        hub.fire_started()
        assert scanner.registered is True

        hub.fire_trackables_updated()

        assert scanner.display.scanned_text == "ABC123"
        assert scanner.last_outcome.ok

    def test_failed_registration_never_pulls(self, hub):
        camera = FakeCamera(accept=False)
        decoder = FakeDecoder()
        scanner = QRCodeScanner(camera, camera, decoder, PixelFormat.RGBA8888)
        scanner.attach(hub)

        hub.fire_started()
        hub.fire_trackables_updated()

        assert scanner.registered is False
        assert camera.pulls == 0
        assert decoder.calls == []
        assert scanner.display.scanned_text is None

    def test_pause_and_resume(self, scanner, hub, camera, decoder):
        hub.fire_started()
        hub.fire_pause(True)

        assert scanner.state == ScannerState.UNREGISTERED
        hub.fire_trackables_updated()
        hub.fire_trackables_updated()
        assert decoder.calls == []

        hub.fire_pause(False)
        assert scanner.registered is True
        assert camera.format_calls == [
            (PixelFormat.RGBA8888, True),
            (PixelFormat.RGBA8888, False),
            (PixelFormat.RGBA8888, True),
        ]

        hub.fire_trackables_updated()
        assert len(decoder.calls) == 1

    def test_resume_reflects_new_outcome(self, scanner, hub, camera):
        hub.fire_started()
        hub.fire_pause(True)

        camera.accept = False
        hub.fire_pause(False)

        assert scanner.registered is False

    def test_decode_failure_keeps_previous_text(self, scanner, hub, decoder):
        hub.fire_started()
        hub.fire_trackables_updated()

        decoder.error = RuntimeError("decoder crashed")
        hub.fire_trackables_updated()

        assert scanner.display.scanned_text == "ABC123"
        assert scanner.last_outcome.status == DecodeStatus.FAILED

    def test_nothing_decoded_keeps_previous_text(self, scanner, hub, decoder):
        hub.fire_started()
        hub.fire_trackables_updated()

        decoder.text = None
        hub.fire_trackables_updated()

        assert scanner.display.scanned_text == "ABC123"

    def test_new_text_replaces_old(self, scanner, hub, decoder):
        hub.fire_started()
        hub.fire_trackables_updated()

        decoder.text = "XYZ"
        hub.fire_trackables_updated()

        assert scanner.display.scanned_text == "XYZ"

    def test_background_texture_assigned(self, scanner, hub, camera):
        hub.fire_background_texture_changed()
        assert scanner.display.camera_feed is camera.texture

    def test_gui_accumulates_seconds(self, scanner):
        scanner.on_gui(0.5)
        scanner.on_gui(0.25)

        assert scanner.display.seconds_passed == 0.75
        assert scanner.display.seconds_text == "0.75s"

    def test_detach_unregisters_callbacks(self, scanner, hub, decoder):
        scanner.detach()

        hub.fire_started()
        hub.fire_trackables_updated()

        assert hub.callback_count == 0
        assert scanner.registered is False
        assert decoder.calls == []

    def test_attach_to_new_hub_moves_callbacks(self, scanner, hub):
        other = ARCallbackHub()
        scanner.attach(other)

        assert hub.callback_count == 0
        assert other.callback_count == 4

    def test_status(self, scanner, hub):
        hub.fire_started()
        hub.fire_trackables_updated()

        status = scanner.status()

        assert status["state"] == "registered"
        assert status["pixel_format"] == "RGBA8888"
        assert status["scanned_text"] == "ABC123"
        assert status["decode_calls"] == 1
        assert status["decoded_count"] == 1
        assert status["last_outcome"]["status"] == "decoded"
