from __future__ import annotations

from core.config import load_config
from core.state import AppState
from player.media_handle import NullMediaHandle

from conftest import FakeMediaHandle


def test_playback_is_created_once_and_torn_down() -> None:
    created = []

    def factory():
        created.append(FakeMediaHandle())
        return created[-1]

    state = AppState(handle_factory=factory)
    first = state.playback
    assert state.playback is first
    assert len(created) == 1

    state.shutdown()
    assert state.playback is not first
    assert len(created) == 2


def test_broken_audio_backend_degrades_to_null_handle() -> None:
    def factory():
        raise RuntimeError("no audio device")

    state = AppState(handle_factory=factory)
    playback = state.playback

    assert isinstance(playback._handle, NullMediaHandle)
    assert [n.notify_type for n in state.queued_notifications] == ["error"]
    assert "no audio device" in state.queued_notifications[0].message


def test_notify_emits_notification() -> None:
    state = AppState(handle_factory=FakeMediaHandle)
    seen = []
    state.notification.connect(seen.append)

    state.notify("Now Playing: Hymn A", "success")

    assert seen[0].message == "Now Playing: Hymn A"
    assert seen[0].notify_type == "success"


def test_load_config_reads_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MEZMUR_CATALOG", str(tmp_path / "export.json"))
    monkeypatch.setenv("MEZMUR_DOWNLOAD_DIR", str(tmp_path / "downloads"))
    monkeypatch.setenv("MEZMUR_DEFAULT_VOLUME", "1.5")
    monkeypatch.setenv("MEZMUR_COMPACT_BREAKPOINT", "wide")

    config = load_config(app_data_dir=str(tmp_path))

    assert config.catalog_path == str(tmp_path / "export.json")
    assert config.download_dir == str(tmp_path / "downloads")
    assert config.default_volume == 1.0
    assert config.compact_breakpoint == 768


def test_load_config_defaults_catalog_into_app_data(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("MEZMUR_CATALOG", raising=False)
    monkeypatch.setenv("MEZMUR_DOWNLOAD_DIR", str(tmp_path))
    monkeypatch.delenv("MEZMUR_DEFAULT_VOLUME", raising=False)

    config = load_config(app_data_dir=str(tmp_path))

    assert config.catalog_path == str(tmp_path / "mezmurs.json")
    assert config.default_volume == 0.7
