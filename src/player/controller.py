# src/player/controller.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from core.models import PlaybackSession, PlayerStatus, Track
from core.utils import clamp, finite_or_zero, progress_percent
from .media_handle import MediaHandle

logger = logging.getLogger(__name__)

PLAY_FAILED_MESSAGE = "Failed to play audio. Check the URL or your audio output."


class PlaybackController(QObject):
    """
    Single authority over what plays, whether it plays, and where it is.

    Every consumer (floating player, track list, shortcuts) goes through this
    object; nothing else may touch the media handle. Telemetry fields are
    written only from the handle's events.
    """
    trackChanged = Signal(object)       # Track | None
    statusChanged = Signal(object)      # PlayerStatus
    playingChanged = Signal(bool)
    positionChanged = Signal(float)     # seconds
    durationChanged = Signal(float)     # seconds
    progressChanged = Signal(float)     # 0 - 100
    volumeChanged = Signal(float)       # 0.0 - 1.0
    sessionChanged = Signal(object)     # PlaybackSession
    ended = Signal()

    def __init__(
        self,
        handle: MediaHandle,
        notify: Optional[Callable[[str, str], None]] = None,
        default_volume: float = 0.7,
        parent=None,
    ):
        super().__init__(parent)
        self._handle = handle
        self._notify = notify if notify is not None else (lambda message, notify_type="info": None)

        self._track: Track | None = None
        self._status = PlayerStatus.IDLE
        self._position_s = 0.0
        self._duration_s = 0.0
        self._progress = 0.0
        self._volume = clamp(float(default_volume), 0.0, 1.0)

        # Bumped when a new source is bound and on pause/stop; play()
        # continuations carrying an older serial are stale.
        self._attempt_serial = 0

        self._handle.set_volume(self._volume)

        self._handle.metadataLoaded.connect(self._on_metadata_loaded)
        self._handle.timeUpdate.connect(self._on_time_update)
        self._handle.ended.connect(self._on_ended)
        self._handle.volumeChanged.connect(self._on_volume_changed)

    # ----------------------------
    # Read-only state
    # ----------------------------

    @property
    def current_track(self) -> Track | None:
        return self._track

    @property
    def is_playing(self) -> bool:
        return self._status == PlayerStatus.PLAYING

    @property
    def status(self) -> PlayerStatus:
        return self._status

    @property
    def position_s(self) -> float:
        return self._position_s

    @property
    def duration_s(self) -> float:
        return self._duration_s

    @property
    def progress_percent(self) -> float:
        return self._progress

    @property
    def volume(self) -> float:
        return self._volume

    def session(self) -> PlaybackSession:
        return PlaybackSession(
            current_track=self._track,
            is_playing=self.is_playing,
            position_s=self._position_s,
            duration_s=self._duration_s,
            progress_percent=self._progress,
            volume=self._volume,
            status=self._status,
        )

    # ----------------------------
    # Commands
    # ----------------------------

    def play(self, track: Track) -> None:
        if self._track is None or self._track.id != track.id:
            self._handle.pause()
            self._attempt_serial += 1
            self._handle.set_source(track.media_url)
            self._reset_telemetry()
            self._set_track(track)
            self._set_status(PlayerStatus.LOADING)
            logger.info("Loading track %s (%s)", track.id, track.title)
        elif self._status == PlayerStatus.LOADING:
            # start already pending for this track
            return

        serial = self._attempt_serial
        self._handle.play(lambda ok, error: self._on_play_resolved(serial, track, ok, error))
        self._emit_session()

    def pause(self) -> None:
        if self._track is None:
            return
        self._handle.pause()
        self._attempt_serial += 1
        self._set_status(PlayerStatus.PAUSED)
        logger.debug("Paused %s", self._track.id)
        self._emit_session()

    def toggle_play_pause(self) -> None:
        if self.is_playing:
            self.pause()
        elif self._track is not None:
            self.play(self._track)

    def set_volume(self, volume: float) -> None:
        v = clamp(finite_or_zero(volume), 0.0, 1.0)
        self._handle.set_volume(v)
        self._set_volume(v)
        self._emit_session()

    def seek(self, seconds: float) -> None:
        if self._track is None:
            return
        target = clamp(finite_or_zero(seconds), 0.0, self._duration_s)
        self._handle.set_position(target)

    def seek_percent(self, value: float) -> None:
        self.seek(clamp(finite_or_zero(value), 0.0, 100.0) / 100.0 * self._duration_s)

    def skip(self, delta_s: float) -> None:
        self.seek(self._position_s + float(delta_s))

    def stop(self) -> None:
        """Stop playback and forget the current track."""
        if self._track is None:
            return
        logger.info("Stopped %s", self._track.id)
        self._handle.pause()
        self._handle.set_position(0.0)
        self._attempt_serial += 1
        self._reset_session()

    def shutdown(self) -> None:
        self.stop()
        self._handle.metadataLoaded.disconnect(self._on_metadata_loaded)
        self._handle.timeUpdate.disconnect(self._on_time_update)
        self._handle.ended.disconnect(self._on_ended)
        self._handle.volumeChanged.disconnect(self._on_volume_changed)
        self._handle.close()

    # ----------------------------
    # play() continuation
    # ----------------------------

    def _on_play_resolved(self, serial: int, track: Track, ok: bool, error: str) -> None:
        if serial != self._attempt_serial or self._track is None or self._track.id != track.id:
            logger.debug("Discarding stale play result for %s", track.id)
            return

        if ok:
            self._set_status(PlayerStatus.PLAYING)
            self._notify(f"Now Playing: {track.title}", "success")
            logger.info("Started playing %s", track.id)
            self._emit_session()
            return

        logger.error("Playback failed for %s: %s", track.id, error)
        self._reset_session()
        self._notify(PLAY_FAILED_MESSAGE, "error")

    # ----------------------------
    # Media handle events
    # ----------------------------

    def _on_metadata_loaded(self, duration_s: float) -> None:
        if self._track is None:
            return
        duration_s = finite_or_zero(duration_s)
        if duration_s != self._duration_s:
            self._duration_s = duration_s
            self.durationChanged.emit(duration_s)
        self._update_progress()
        self._emit_session()

    def _on_time_update(self, position_s: float) -> None:
        if self._track is None:
            return
        position_s = finite_or_zero(position_s)
        if position_s != self._position_s:
            self._position_s = position_s
            self.positionChanged.emit(position_s)
        self._update_progress()
        self._emit_session()

    def _on_ended(self) -> None:
        if self._track is None:
            return
        logger.info("Track ended: %s", self._track.id)
        self._handle.set_position(0.0)
        self._position_s = 0.0
        self.positionChanged.emit(0.0)
        self._update_progress()
        self._set_status(PlayerStatus.ENDED)
        self.ended.emit()
        self._emit_session()

    def _on_volume_changed(self, volume: float) -> None:
        self._set_volume(clamp(finite_or_zero(volume), 0.0, 1.0))
        self._emit_session()

    # ----------------------------
    # Shared helpers
    # ----------------------------

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self._status == new_status:
            return
        was_playing = self.is_playing
        self._status = new_status
        self.statusChanged.emit(new_status)
        if was_playing != self.is_playing:
            self.playingChanged.emit(self.is_playing)

    def _set_track(self, track: Track | None) -> None:
        if self._track is not track:
            self._track = track
            self.trackChanged.emit(track)

    def _set_volume(self, v: float) -> None:
        if v != self._volume:
            self._volume = v
            self.volumeChanged.emit(v)

    def _update_progress(self) -> None:
        progress = progress_percent(self._position_s, self._duration_s)
        if progress != self._progress:
            self._progress = progress
            self.progressChanged.emit(progress)

    def _reset_telemetry(self) -> None:
        self._position_s = 0.0
        self._duration_s = 0.0
        self._progress = 0.0
        self.positionChanged.emit(0.0)
        self.durationChanged.emit(0.0)
        self.progressChanged.emit(0.0)

    def _reset_session(self) -> None:
        self._reset_telemetry()
        self._set_status(PlayerStatus.IDLE)
        self._set_track(None)
        self._emit_session()

    def _emit_session(self) -> None:
        self.sessionChanged.emit(self.session())
