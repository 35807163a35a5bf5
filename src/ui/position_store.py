# ui/position_store.py
from __future__ import annotations

import json
import logging
import math

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

PLAYER_POSITION_KEY = "audio_player_position"


class PositionStore:
    """
    Durable storage for the floating player's top-left corner.
    The value is a JSON object {"x": n, "y": n} under a fixed key.
    Failures are never raised: the widget just falls back to its default.
    """

    def __init__(self, settings: QSettings | None = None, key: str = PLAYER_POSITION_KEY):
        self.settings = settings or QSettings("MezmurHub", "Player")
        self.key = key

    def load(self) -> tuple[int, int] | None:
        try:
            raw = self.settings.value(self.key, None)
            if raw is None:
                return None
            data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
            x, y = float(data["x"]), float(data["y"])
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ValueError("non-finite coordinate")
            return int(x), int(y)
        except (TypeError, ValueError, KeyError, OverflowError) as e:
            logger.debug("Ignoring unreadable player position %r: %s", self.key, e)
            return None

    def save(self, x: int, y: int) -> None:
        try:
            self.settings.setValue(self.key, json.dumps({"x": int(x), "y": int(y)}))
            self.settings.sync()
        except (TypeError, ValueError, RuntimeError) as e:
            logger.debug("Could not persist player position: %s", e)
            return

        if self.settings.status() != QSettings.Status.NoError:
            logger.debug("Player position not persisted: %s", self.settings.status())
