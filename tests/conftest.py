from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from core.models import Track
from player.controller import PlaybackController
from player.media_handle import MediaHandle
from ui.position_store import PositionStore


class FakeMediaHandle(MediaHandle):
    """
    Scriptable media handle. play() attempts stay pending until resolve();
    replacing the source rejects pending attempts, like a browser <audio>.
    """

    def __init__(self, abort_on_source_change: bool = True):
        super().__init__()
        self.abort_on_source_change = abort_on_source_change
        self.sources: list[str] = []
        self.pending: list = []
        self.calls: list[str] = []
        self._position = 0.0
        self._duration = 0.0
        self._volume = 1.0

    # commands
    def set_source(self, url: str) -> None:
        self.calls.append("set_source")
        self.sources.append(url)
        self._position = 0.0
        if self.abort_on_source_change:
            self.resolve(False, "aborted")

    def play(self, on_done=None) -> None:
        self.calls.append("play")
        if on_done is not None:
            self.pending.append(on_done)

    def pause(self) -> None:
        self.calls.append("pause")

    def set_position(self, seconds: float) -> None:
        self.calls.append("set_position")
        self._position = seconds
        self.timeUpdate.emit(seconds)

    def set_volume(self, volume_0_to_1: float) -> None:
        self.calls.append("set_volume")
        self._volume = volume_0_to_1
        self.volumeChanged.emit(volume_0_to_1)

    def position(self) -> float:
        return self._position

    def duration(self) -> float:
        return self._duration

    def volume(self) -> float:
        return self._volume

    # test helpers
    def resolve(self, ok: bool = True, error: str = "") -> None:
        callbacks, self.pending = self.pending, []
        for cb in callbacks:
            cb(ok, error)

    def load_metadata(self, duration: float) -> None:
        self._duration = duration
        self.metadataLoaded.emit(duration)

    def tick(self, position: float) -> None:
        self._position = position
        self.timeUpdate.emit(position)

    def finish(self) -> None:
        self.ended.emit()


class NotificationLog(list):
    def __call__(self, message: str, notify_type: str = "info") -> None:
        self.append((notify_type, message))


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def handle() -> FakeMediaHandle:
    return FakeMediaHandle()


@pytest.fixture
def notifications() -> NotificationLog:
    return NotificationLog()


@pytest.fixture
def playback(handle, notifications) -> PlaybackController:
    return PlaybackController(handle, notify=notifications, default_volume=0.7)


@pytest.fixture
def position_store(tmp_path) -> PositionStore:
    settings = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return PositionStore(settings)


def make_track(track_id: str = "1", title: str = "Hymn A", **kw) -> Track:
    return Track(
        id=track_id,
        title=title,
        artist=kw.pop("artist", "Zemari Tewodros"),
        media_url=kw.pop("media_url", f"https://cdn.example.org/mezmurs/{track_id}.mp3"),
        **kw,
    )


@pytest.fixture
def hymn_a() -> Track:
    return make_track("a", "Hymn A")


@pytest.fixture
def hymn_b() -> Track:
    return make_track("b", "Hymn B")
