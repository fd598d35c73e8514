"""
==============================================================================
Callback Hub
==============================================================================

Event source that drives scanner components. A host (the live OpenCV
loop, a WebSocket session, a test) owns one hub and fires its events;
components register callbacks on attach and remove them on detach.

Events:
-------
- started:                    camera pipeline is up
- trackables_updated:         per-frame tick
- background_texture_changed: feed texture was replaced
- pause(paused: bool):        host paused or resumed

All callbacks run synchronously on the caller's thread, in registration
order.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Callable, List


# Module logger
logger = logging.getLogger(__name__)


Callback = Callable[[], None]
PauseCallback = Callable[[bool], None]


class ARCallbackHub:
    """Registry and dispatcher for scanner lifecycle callbacks."""

    def __init__(self) -> None:
        self._started: List[Callback] = []
        self._trackables_updated: List[Callback] = []
        self._texture_changed: List[Callback] = []
        self._pause: List[PauseCallback] = []
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    @staticmethod
    def _add(callbacks: list, callback) -> None:
        if callback not in callbacks:
            callbacks.append(callback)

    @staticmethod
    def _remove(callbacks: list, callback) -> None:
        if callback in callbacks:
            callbacks.remove(callback)

    def register_started_callback(self, callback: Callback) -> None:
        self._add(self._started, callback)

    def unregister_started_callback(self, callback: Callback) -> None:
        self._remove(self._started, callback)

    def register_trackables_updated_callback(self, callback: Callback) -> None:
        self._add(self._trackables_updated, callback)

    def unregister_trackables_updated_callback(self, callback: Callback) -> None:
        self._remove(self._trackables_updated, callback)

    def register_background_texture_changed_callback(self, callback: Callback) -> None:
        self._add(self._texture_changed, callback)

    def unregister_background_texture_changed_callback(self, callback: Callback) -> None:
        self._remove(self._texture_changed, callback)

    def register_pause_callback(self, callback: PauseCallback) -> None:
        self._add(self._pause, callback)

    def unregister_pause_callback(self, callback: PauseCallback) -> None:
        self._remove(self._pause, callback)

    @property
    def callback_count(self) -> int:
        return (
            len(self._started)
            + len(self._trackables_updated)
            + len(self._texture_changed)
            + len(self._pause)
        )

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def fire_started(self) -> None:
        for callback in list(self._started):
            callback()

    def fire_trackables_updated(self) -> None:
        for callback in list(self._trackables_updated):
            callback()

    def fire_background_texture_changed(self) -> None:
        for callback in list(self._texture_changed):
            callback()

    def fire_pause(self, paused: bool) -> None:
        self._paused = paused
        for callback in list(self._pause):
            callback(paused)
