from __future__ import annotations

import pytest
from PySide6.QtCore import QPoint
from PySide6.QtWidgets import QAbstractSlider, QWidget

from ui.floating_player import FloatingPlayer
from ui.widget_controller import PlayerWidgetController


@pytest.fixture
def host():
    w = QWidget()
    w.resize(1000, 800)
    yield w
    w.deleteLater()


@pytest.fixture
def player(host, playback, position_store):
    controller = PlayerWidgetController(playback, store=position_store)
    return FloatingPlayer(playback, controller, host)


def test_hidden_until_a_track_is_loaded(player, host, playback, handle, hymn_a) -> None:
    assert not player.isVisibleTo(host)

    playback.play(hymn_a)
    handle.resolve(True)

    assert player.isVisibleTo(host)
    assert player.lbl_title.text() == "Hymn A"
    assert player.btn_play.toolTip() == "Pause"


def test_ended_track_stays_visible_in_replay_state(player, host, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)
    handle.load_metadata(60.0)
    handle.tick(59.0)

    handle.finish()

    assert player.isVisibleTo(host)
    assert player.btn_play.toolTip() == "Play"
    assert player.lbl_time.text() == "0:00"
    assert player.seek_slider.value() == 0


def test_close_button_stops_and_hides(player, host, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)

    player.btn_close.click()

    assert playback.current_track is None
    assert not player.isVisibleTo(host)


def test_wide_host_places_card_inside_viewport(player, host, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)

    assert player.width() == 320
    assert player.x() + player.width() <= host.width()
    assert player.y() + player.height() <= host.height()
    assert player.handle.isVisibleTo(player)


def test_narrow_host_gets_fixed_top_bar(host, playback, handle, position_store, hymn_a) -> None:
    host.resize(500, 800)
    controller = PlayerWidgetController(playback, store=position_store)
    player = FloatingPlayer(playback, controller, host)

    playback.play(hymn_a)
    handle.resolve(True)

    assert player.pos() == QPoint(0, 0)
    assert player.width() == 500
    assert not player.handle.isVisibleTo(player)


def test_global_listener_only_while_dragging(player, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)
    assert not player._event_filter_on_app

    player._on_grab(player.mapToGlobal(QPoint(20, 5)))
    assert player.controller.dragging
    assert player._event_filter_on_app

    player._release_drag()
    assert not player.controller.dragging
    assert not player._event_filter_on_app
    assert player.controller.store.load() == (player.controller.position.x, player.controller.position.y)


def test_volume_slider_reflects_mute(player, playback) -> None:
    assert player.volume_slider.value() == 70

    player.btn_mute.click()
    assert player.volume_slider.value() == 0
    assert player.btn_mute.toolTip() == "Unmute"

    player.btn_mute.click()
    assert player.volume_slider.value() == 70
    assert playback.volume == 0.7


def test_minimize_hides_secondary_controls(player, host, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)

    player.btn_minimize.click()

    assert player.width() == 200
    assert not player.progress_row.isVisibleTo(player)
    assert player.btn_play.isVisibleTo(player)


def test_seek_slider_page_and_key_steps_seek(player, playback, handle, hymn_a) -> None:
    playback.play(hymn_a)
    handle.resolve(True)
    handle.load_metadata(200.0)
    player.seek_slider.setPageStep(100)

    player.seek_slider.triggerAction(QAbstractSlider.SliderAction.SliderPageStepAdd)
    assert handle.position() == pytest.approx(20.0)
    assert playback.position_s == pytest.approx(20.0)

    player.seek_slider.triggerAction(QAbstractSlider.SliderAction.SliderToMaximum)
    assert handle.position() == pytest.approx(200.0)
    assert player.seek_slider.value() == 1000
