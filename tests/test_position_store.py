from __future__ import annotations

from PySide6.QtCore import QSettings

from ui.position_store import PLAYER_POSITION_KEY, PositionStore
from ui.widget_controller import PlayerWidgetController, WidgetPosition


def test_missing_position_loads_none(position_store) -> None:
    assert position_store.load() is None


def test_position_survives_a_new_settings_object(tmp_path) -> None:
    path = str(tmp_path / "player.ini")
    PositionStore(QSettings(path, QSettings.Format.IniFormat)).save(100, 200)

    reopened = PositionStore(QSettings(path, QSettings.Format.IniFormat))
    assert reopened.load() == (100, 200)


def test_value_is_stored_as_json_under_fixed_key(position_store) -> None:
    position_store.save(12, 34)
    raw = position_store.settings.value(PLAYER_POSITION_KEY)
    assert raw.replace(" ", "") == '{"x":12,"y":34}'


def test_malformed_values_fall_back_to_none(position_store) -> None:
    for bad in ("not json", '{"x": 1}', '["x", "y"]', '{"x": "left", "y": 2}'):
        position_store.settings.setValue(PLAYER_POSITION_KEY, bad)
        assert position_store.load() is None, bad


def test_non_finite_coordinates_fall_back_to_none(position_store) -> None:
    for bad in ('{"x": 1e400, "y": 0}', '{"x": 10, "y": -Infinity}', '{"x": NaN, "y": 0}'):
        position_store.settings.setValue(PLAYER_POSITION_KEY, bad)
        assert position_store.load() is None, bad


def test_corrupt_position_uses_default_placement(position_store, playback) -> None:
    position_store.settings.setValue(PLAYER_POSITION_KEY, '{"x": 1e400, "y": 0}')
    controller = PlayerWidgetController(playback, store=position_store)

    assert controller.initial_position((1000, 800), (320, 180)) == WidgetPosition(664, 604)
