# ui/widget_controller.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 16
COMPACT_BREAKPOINT = 768
SKIP_SECONDS = 10
FALLBACK_VOLUME = 0.7


@dataclass(frozen=True)
class WidgetPosition:
    x: int
    y: int


def clamp_position(x, y, viewport_w, viewport_h, widget_w, widget_h) -> WidgetPosition:
    """Keep the whole widget inside the viewport (pinned to 0 if it does not fit)."""
    max_x = max(0, int(viewport_w) - int(widget_w))
    max_y = max(0, int(viewport_h) - int(widget_h))
    return WidgetPosition(
        x=max(0, min(int(x), max_x)),
        y=max(0, min(int(y), max_y)),
    )


def compute_default_position(viewport_w, viewport_h, widget_w, widget_h, margin=DEFAULT_MARGIN) -> WidgetPosition:
    return clamp_position(
        viewport_w - widget_w - margin,
        viewport_h - widget_h - margin,
        viewport_w, viewport_h, widget_w, widget_h,
    )


class DragGesture:
    """Idle -> begin() -> Dragging -> end() -> Idle."""

    def __init__(self):
        self._offset: tuple[int, int] | None = None
        self._last: WidgetPosition | None = None

    @property
    def active(self) -> bool:
        return self._offset is not None

    def begin(self, pointer: tuple[int, int], top_left: tuple[int, int]) -> None:
        self._offset = (pointer[0] - top_left[0], pointer[1] - top_left[1])
        self._last = WidgetPosition(int(top_left[0]), int(top_left[1]))

    def move(self, pointer: tuple[int, int], viewport: tuple[int, int], widget: tuple[int, int]) -> WidgetPosition | None:
        if self._offset is None:
            return None
        self._last = clamp_position(
            pointer[0] - self._offset[0],
            pointer[1] - self._offset[1],
            viewport[0], viewport[1], widget[0], widget[1],
        )
        return self._last

    def end(self) -> WidgetPosition | None:
        last = self._last
        self._offset = None
        self._last = None
        return last


class PlayerWidgetController(QObject):
    """
    Everything the floating player decides without touching pixels:
    visibility, layout mode, position + drag, mute and transport bindings.
    """
    positionChanged = Signal(object)     # WidgetPosition
    minimizedChanged = Signal(bool)
    mutedChanged = Signal(bool)

    def __init__(
        self,
        playback,
        store=None,
        breakpoint: int = COMPACT_BREAKPOINT,
        margin: int = DEFAULT_MARGIN,
        skip_seconds: float = SKIP_SECONDS,
        fallback_volume: float = FALLBACK_VOLUME,
        parent=None,
    ):
        super().__init__(parent)
        self.playback = playback
        self.store = store
        self.breakpoint = int(breakpoint)
        self.margin = int(margin)
        self.skip_seconds = float(skip_seconds)
        self.fallback_volume = float(fallback_volume)

        self.position: WidgetPosition | None = None
        self.minimized = False

        self._drag = DragGesture()
        self._was_muted = playback.volume == 0
        self._prev_volume = playback.volume

        self.playback.volumeChanged.connect(self._on_volume_changed)

    # --- visibility / layout ---
    def is_visible(self) -> bool:
        return self.playback.current_track is not None

    def is_compact(self, viewport_w: int) -> bool:
        return int(viewport_w) < self.breakpoint

    def widget_width(self) -> int:
        return 200 if self.minimized else 320

    def toggle_minimized(self) -> None:
        self.minimized = not self.minimized
        self.minimizedChanged.emit(self.minimized)

    def close(self) -> None:
        self.playback.stop()

    # --- position ---
    def initial_position(self, viewport: tuple[int, int], widget: tuple[int, int]) -> WidgetPosition:
        saved = self.store.load() if self.store else None
        if saved is not None:
            pos = clamp_position(saved[0], saved[1], viewport[0], viewport[1], widget[0], widget[1])
        else:
            pos = compute_default_position(viewport[0], viewport[1], widget[0], widget[1], self.margin)
        self._set_position(pos)
        return pos

    def fit_to_viewport(self, viewport: tuple[int, int], widget: tuple[int, int]) -> WidgetPosition:
        if self.position is None:
            return self.initial_position(viewport, widget)
        pos = clamp_position(self.position.x, self.position.y, viewport[0], viewport[1], widget[0], widget[1])
        self._set_position(pos)
        return pos

    @property
    def dragging(self) -> bool:
        return self._drag.active

    def begin_drag(self, pointer: tuple[int, int], viewport_w: int) -> bool:
        if self.is_compact(viewport_w) or self.position is None:
            return False
        self._drag.begin(pointer, (self.position.x, self.position.y))
        return True

    def drag_to(self, pointer: tuple[int, int], viewport: tuple[int, int], widget: tuple[int, int]) -> WidgetPosition | None:
        pos = self._drag.move(pointer, viewport, widget)
        if pos is not None:
            self._set_position(pos)
        return pos

    def end_drag(self) -> WidgetPosition | None:
        if not self._drag.active:
            return None
        pos = self._drag.end()
        if pos is not None and self.store is not None:
            self.store.save(pos.x, pos.y)
        return pos

    def _set_position(self, pos: WidgetPosition) -> None:
        if pos != self.position:
            self.position = pos
            self.positionChanged.emit(pos)

    # --- volume / mute ---
    @property
    def is_muted(self) -> bool:
        return self.playback.volume == 0

    def toggle_mute(self) -> None:
        if self.is_muted:
            restored = self._prev_volume if self._prev_volume > 0 else self.fallback_volume
            self.playback.set_volume(restored)
        else:
            self._prev_volume = self.playback.volume
            self.playback.set_volume(0.0)

    def volume_slider_value(self) -> int:
        return 0 if self.is_muted else int(round(self.playback.volume * 100))

    def on_volume_slider(self, value: int) -> None:
        self.playback.set_volume(float(value) / 100.0)

    def _on_volume_changed(self, volume: float) -> None:
        # _prev_volume tracks the last audible volume, whoever set it
        if volume > 0:
            self._prev_volume = volume
        if (volume == 0) != self._was_muted:
            self._was_muted = volume == 0
            self.mutedChanged.emit(self._was_muted)

    # --- transport ---
    def seek_slider_value(self) -> float:
        return self.playback.progress_percent

    def on_seek_slider(self, value: float) -> None:
        self.playback.seek_percent(value)

    def skip_forward(self) -> None:
        self.playback.skip(self.skip_seconds)

    def skip_back(self) -> None:
        self.playback.skip(-self.skip_seconds)

    def toggle_play_pause(self) -> None:
        self.playback.toggle_play_pause()
