# src/player/media_handle.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from core.utils import clamp

logger = logging.getLogger(__name__)

# on_done(ok, error_message)
PlayCallback = Callable[[bool, str], None]


class MediaHandle(QObject):
    """
    The one native object able to play a single audio stream.

    Only PlaybackController talks to it. Implementations report telemetry in
    seconds through the signals below and resolve each play() attempt exactly
    once through its callback, from the event loop.
    """
    metadataLoaded = Signal(float)   # duration, seconds
    timeUpdate = Signal(float)       # position, seconds
    ended = Signal()
    volumeChanged = Signal(float)    # 0.0 - 1.0

    def set_source(self, url: str) -> None:
        raise NotImplementedError

    def play(self, on_done: Optional[PlayCallback] = None) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def set_position(self, seconds: float) -> None:
        raise NotImplementedError

    def set_volume(self, volume_0_to_1: float) -> None:
        raise NotImplementedError

    def position(self) -> float:
        raise NotImplementedError

    def duration(self) -> float:
        raise NotImplementedError

    def volume(self) -> float:
        raise NotImplementedError

    def close(self) -> None:
        pass


class NullMediaHandle(MediaHandle):
    """Stand-in when no audio backend could be created: every play() fails."""

    def __init__(self, reason: str = "No audio output available", parent=None):
        super().__init__(parent)
        self.reason = reason
        self._volume = 0.7

    def set_source(self, url: str) -> None:
        pass

    def play(self, on_done: Optional[PlayCallback] = None) -> None:
        if on_done is not None:
            QTimer.singleShot(0, lambda: on_done(False, self.reason))

    def pause(self) -> None:
        pass

    def set_position(self, seconds: float) -> None:
        pass

    def set_volume(self, volume_0_to_1: float) -> None:
        self._volume = clamp(float(volume_0_to_1), 0.0, 1.0)

    def position(self) -> float:
        return 0.0

    def duration(self) -> float:
        return 0.0

    def volume(self) -> float:
        return self._volume


class QtMediaHandle(MediaHandle):
    def __init__(self, parent=None):
        super().__init__(parent)

        self.audio = QAudioOutput(self)
        self.media = QMediaPlayer(self)
        self.media.setAudioOutput(self.audio)

        self._pending: list[PlayCallback] = []

        self.media.durationChanged.connect(self._on_duration)
        self.media.positionChanged.connect(self._on_position)
        self.media.playbackStateChanged.connect(self._on_state_changed)
        self.media.mediaStatusChanged.connect(self._on_media_status)
        self.media.errorOccurred.connect(self._on_error)
        self.audio.volumeChanged.connect(self.volumeChanged.emit)

    # ----------------------------
    # Commands
    # ----------------------------

    def set_source(self, url: str) -> None:
        # Replacing the source aborts whatever play() was still pending.
        if self._pending:
            self._resolve_later(False, "Playback aborted: source replaced")
        self.media.setSource(QUrl.fromUserInput(url))

    def play(self, on_done: Optional[PlayCallback] = None) -> None:
        if on_done is not None:
            self._pending.append(on_done)

        if self.media.source().isEmpty():
            self._resolve_later(False, "No media source set")
            return

        if self.media.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self._resolve_later(True, "")
            return

        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def set_position(self, seconds: float) -> None:
        self.media.setPosition(int(max(0.0, float(seconds)) * 1000))

    def set_volume(self, volume_0_to_1: float) -> None:
        self.audio.setVolume(clamp(float(volume_0_to_1), 0.0, 1.0))

    def position(self) -> float:
        return self.media.position() / 1000.0

    def duration(self) -> float:
        return self.media.duration() / 1000.0

    def volume(self) -> float:
        return float(self.audio.volume())

    def close(self) -> None:
        self.media.stop()
        self._pending.clear()

    # ----------------------------
    # Qt handlers
    # ----------------------------

    def _on_duration(self, ms: int) -> None:
        if ms > 0:
            self.metadataLoaded.emit(ms / 1000.0)

    def _on_position(self, ms: int) -> None:
        self.timeUpdate.emit(ms / 1000.0)

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._resolve(True, "")

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.ended.emit()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._resolve(False, "Invalid media")

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.warning("Media error %s: %s", error, message)
        self._resolve(False, message or str(error))

    # ----------------------------
    # Helpers
    # ----------------------------

    def _resolve(self, ok: bool, error: str) -> None:
        callbacks, self._pending = self._pending, []
        for cb in callbacks:
            cb(ok, error)

    def _resolve_later(self, ok: bool, error: str) -> None:
        callbacks, self._pending = self._pending, []

        def _fire():
            for cb in callbacks:
                cb(ok, error)

        QTimer.singleShot(0, _fire)
