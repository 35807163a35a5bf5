from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error


class AppState(QObject):
    """
    Application-root holder. Owns the single PlaybackController for the
    lifetime of the QApplication and acts as the notification sink.
    """
    notification = Signal(object)   # emits Notify

    def __init__(self, config=None, handle_factory=None):
        super().__init__()
        self.config = config
        self.tracks = []
        self.queued_notifications: list[Notify] = []

        self._handle_factory = handle_factory
        self._playback = None

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))

    @property
    def playback(self):
        """The process-wide PlaybackController, created on first use."""
        if self._playback is None:
            from player.controller import PlaybackController
            from player.media_handle import NullMediaHandle, QtMediaHandle

            factory = self._handle_factory or QtMediaHandle
            try:
                handle = factory()
            except Exception as e:
                logger.exception("Audio player initialization failed")
                self.queued_notifications.append(
                    Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
                )
                handle = NullMediaHandle(reason=str(e))

            default_volume = self.config.default_volume if self.config else 0.7
            self._playback = PlaybackController(
                handle,
                notify=self.notify,
                default_volume=default_volume,
                parent=self,
            )
            logger.debug("Playback controller created")
        return self._playback

    def shutdown(self) -> None:
        if self._playback is not None:
            self._playback.shutdown()
            self._playback = None
            logger.debug("Playback controller torn down")
