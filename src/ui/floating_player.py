# ui/floating_player.py
from __future__ import annotations

from PySide6.QtCore import QByteArray, QEvent, QPoint, QSignalBlocker, QSize, Qt, Signal
from PySide6.QtGui import QIcon, QMouseEvent, QPainter, QPixmap
from PySide6.QtSvg import QSvgRenderer
from PySide6.QtWidgets import (
    QAbstractSlider,
    QApplication,
    QFrame,
    QHBoxLayout,
    QLabel,
    QSlider,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from core.utils import format_time
from ui.widget_controller import PlayerWidgetController


def _svg_icon(path_d: str, size: int = 20, color: str = "#e5e7eb") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)


SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"
SVG_REWIND = "M11 18V6l-8.5 6 8.5 6zm.5-6l8.5 6V6l-8.5 6z"
SVG_FORWARD = "M4 18l8.5-6L4 6v12zm9-12v12l8.5-6L13 6z"
SVG_VOLUME = "M3 9v6h4l5 5V4L7 9H3zm13.5 3A4.5 4.5 0 0 0 14 7.97v8.05A4.5 4.5 0 0 0 16.5 12z"
SVG_MUTED = "M16.5 12A4.5 4.5 0 0 0 14 7.97v2.21l2.45 2.45c.03-.2.05-.41.05-.63zM19 12c0 .94-.2 1.82-.54 2.64l1.51 1.51A8.8 8.8 0 0 0 21 12c0-4.28-2.99-7.86-7-8.77v2.06c2.89.86 5 3.54 5 6.71zM4.27 3L3 4.27 7.73 9H3v6h4l5 5v-6.73l4.25 4.25c-.67.52-1.42.93-2.25 1.18v2.06a8.99 8.99 0 0 0 3.69-1.81L19.73 21 21 19.73l-9-9L4.27 3zM12 4L9.91 6.09 12 8.18V4z"
SVG_MINIMIZE = "M6 19h12v2H6z"
SVG_MAXIMIZE = "M3 3h18v18H3V3zm2 2v14h14V5H5z"
SVG_CLOSE = "M19 6.41L17.59 5 12 10.59 6.41 5 5 6.41 10.59 12 5 17.59 6.41 19 12 13.41 17.59 19 19 17.59 13.41 12z"

SEEK_STEPS = 1000  # slider resolution: 0.1 %


class DragHandle(QWidget):
    grabbed = Signal(QPoint)   # global pointer position

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("DragHandle")
        self.setFixedHeight(18)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.grabbed.emit(event.globalPosition().toPoint())
            event.accept()
            return
        super().mousePressEvent(event)


class FloatingPlayer(QFrame):
    """
    Floating transport panel living on top of `host`.

    Wide hosts get a draggable card whose position survives restarts;
    narrow hosts get a fixed bar across the top. Hidden while nothing
    is loaded.
    """

    def __init__(self, playback, controller: PlayerWidgetController, host: QWidget):
        super().__init__(host)
        self.host = host
        self.playback = playback
        self.controller = controller

        self._scrubbing = False
        self._event_filter_on_app = False

        self.setObjectName("FloatingPlayer")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 6, 12, 10)
        root.setSpacing(6)

        # --- header: drag handle + window buttons ---
        header = QHBoxLayout()
        header.setSpacing(4)
        self.handle = DragHandle()
        self.btn_minimize = self._tool_button(SVG_MINIMIZE, 14, "Minimize")
        self.btn_close = self._tool_button(SVG_CLOSE, 14, "Close player")
        header.addWidget(self.handle, 1)
        header.addWidget(self.btn_minimize)
        header.addWidget(self.btn_close)
        root.addLayout(header)

        # --- now playing + transport ---
        info = QHBoxLayout()
        info.setSpacing(6)

        titles = QVBoxLayout()
        titles.setSpacing(0)
        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setObjectName("NowPlaying")
        self.lbl_artist = QLabel("")
        self.lbl_artist.setObjectName("Artist")
        titles.addWidget(self.lbl_title)
        titles.addWidget(self.lbl_artist)

        self.btn_rewind = self._tool_button(SVG_REWIND, 18, "Back 10 seconds")
        self.btn_play = self._tool_button(SVG_PLAY, 22, "Play")
        self.btn_play.setObjectName("BtnPlay")
        self.btn_forward = self._tool_button(SVG_FORWARD, 18, "Forward 10 seconds")
        self.btn_mute = self._tool_button(SVG_VOLUME, 18, "Mute")

        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setObjectName("VolumeSlider")
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setFixedWidth(70)

        info.addLayout(titles, 1)
        info.addWidget(self.btn_rewind)
        info.addWidget(self.btn_play)
        info.addWidget(self.btn_forward)
        info.addWidget(self.btn_mute)
        info.addWidget(self.volume_slider)
        root.addLayout(info)

        # --- progress ---
        self.progress_row = QWidget()
        progress = QHBoxLayout(self.progress_row)
        progress.setContentsMargins(0, 0, 0, 0)
        progress.setSpacing(8)
        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")
        self.seek_slider = QSlider(Qt.Orientation.Horizontal)
        self.seek_slider.setRange(0, SEEK_STEPS)
        progress.addWidget(self.lbl_time)
        progress.addWidget(self.seek_slider, 1)
        progress.addWidget(self.lbl_dur)
        root.addWidget(self.progress_row)

        # --- signals: UI -> controller ---
        self.handle.grabbed.connect(self._on_grab)
        self.btn_play.clicked.connect(self.controller.toggle_play_pause)
        self.btn_rewind.clicked.connect(self.controller.skip_back)
        self.btn_forward.clicked.connect(self.controller.skip_forward)
        self.btn_mute.clicked.connect(self.controller.toggle_mute)
        self.btn_minimize.clicked.connect(self.controller.toggle_minimized)
        self.btn_close.clicked.connect(self.controller.close)
        self.volume_slider.valueChanged.connect(self.controller.on_volume_slider)
        self.seek_slider.sliderPressed.connect(self._on_seek_pressed)
        self.seek_slider.sliderMoved.connect(self._on_seek_moved)
        self.seek_slider.sliderReleased.connect(self._on_seek_released)
        self.seek_slider.actionTriggered.connect(self._on_seek_action)

        # --- signals: state -> UI ---
        self.playback.trackChanged.connect(self._on_track_changed)
        self.playback.playingChanged.connect(self._set_playing)
        self.playback.positionChanged.connect(self._on_position)
        self.playback.durationChanged.connect(self._on_duration)
        self.playback.progressChanged.connect(self._on_progress)
        self.playback.volumeChanged.connect(self._sync_volume)
        self.controller.mutedChanged.connect(self._sync_volume)
        self.controller.minimizedChanged.connect(self._on_minimized)
        self.controller.positionChanged.connect(self._on_position_changed)

        self.host.installEventFilter(self)

        self._icons = {
            "play": _svg_icon(SVG_PLAY, 22),
            "pause": _svg_icon(SVG_PAUSE, 22),
            "volume": _svg_icon(SVG_VOLUME, 18),
            "muted": _svg_icon(SVG_MUTED, 18),
            "minimize": _svg_icon(SVG_MINIMIZE, 14),
            "maximize": _svg_icon(SVG_MAXIMIZE, 14),
        }

        self._apply_styles()
        self._sync_volume()
        self._on_track_changed(self.playback.current_track)

    def _tool_button(self, svg: str, size: int, tip: str) -> QToolButton:
        btn = QToolButton()
        btn.setIcon(_svg_icon(svg, size))
        btn.setIconSize(QSize(size, size))
        btn.setToolTip(tip)
        return btn

    # ----------------------------
    # Layout
    # ----------------------------

    def viewport_size(self) -> tuple[int, int]:
        return self.host.width(), self.host.height()

    def is_compact(self) -> bool:
        return self.controller.is_compact(self.host.width())

    def relayout(self) -> None:
        if not self.controller.is_visible():
            self.hide()
            return

        vw, vh = self.viewport_size()
        if self.is_compact():
            self.handle.setVisible(False)
            self.btn_minimize.setVisible(False)
            self.setFixedWidth(vw)
            self.adjustSize()
            self.move(0, 0)
        else:
            self.handle.setVisible(True)
            self.btn_minimize.setVisible(True)
            self.setFixedWidth(self.controller.widget_width())
            self.adjustSize()
            pos = self.controller.fit_to_viewport((vw, vh), (self.width(), self.height()))
            self.move(pos.x, pos.y)

        self.show()
        self.raise_()

    def _on_position_changed(self, pos) -> None:
        if not self.is_compact():
            self.move(pos.x, pos.y)

    def _on_minimized(self, minimized: bool) -> None:
        for w in (self.btn_rewind, self.btn_forward, self.btn_mute, self.volume_slider, self.progress_row):
            w.setVisible(not minimized)
        self.btn_minimize.setIcon(self._icons["maximize" if minimized else "minimize"])
        self.btn_minimize.setToolTip("Expand" if minimized else "Minimize")
        self.relayout()

    # ----------------------------
    # Drag
    # ----------------------------

    def _host_point(self, global_pos: QPoint) -> tuple[int, int]:
        p = self.host.mapFromGlobal(global_pos)
        return p.x(), p.y()

    def _on_grab(self, global_pos: QPoint) -> None:
        if not self.controller.begin_drag(self._host_point(global_pos), self.host.width()):
            return
        # Pointer move/release are watched application-wide only while dragging.
        QApplication.instance().installEventFilter(self)
        self._event_filter_on_app = True
        self.handle.setCursor(Qt.CursorShape.ClosedHandCursor)

    def _release_drag(self) -> None:
        if self._event_filter_on_app:
            QApplication.instance().removeEventFilter(self)
            self._event_filter_on_app = False
        self.handle.setCursor(Qt.CursorShape.OpenHandCursor)
        self.controller.end_drag()

    def eventFilter(self, obj, event) -> bool:
        if obj is self.host and event.type() == QEvent.Type.Resize:
            self.relayout()
            return False

        if self.controller.dragging and isinstance(event, QMouseEvent):
            if event.type() == QEvent.Type.MouseMove:
                self.controller.drag_to(
                    self._host_point(event.globalPosition().toPoint()),
                    self.viewport_size(),
                    (self.width(), self.height()),
                )
                return True
            if event.type() == QEvent.Type.MouseButtonRelease:
                self._release_drag()
                return True

        return super().eventFilter(obj, event)

    # ----------------------------
    # Seek slider
    # ----------------------------

    def _on_seek_pressed(self):
        self._scrubbing = True

    def _on_seek_moved(self, value: int):
        # preview time while scrubbing
        self.lbl_time.setText(format_time(value / SEEK_STEPS * self.playback.duration_s))

    def _on_seek_released(self):
        self._scrubbing = False
        self.controller.on_seek_slider(self.seek_slider.value() * 100.0 / SEEK_STEPS)

    def _on_seek_action(self, action: int):
        # groove clicks and keys; drags are committed on release
        if action == QAbstractSlider.SliderAction.SliderNoAction.value or self.seek_slider.isSliderDown():
            return
        self.controller.on_seek_slider(self.seek_slider.sliderPosition() * 100.0 / SEEK_STEPS)

    # ----------------------------
    # Playback updates
    # ----------------------------

    def _on_track_changed(self, track):
        if track:
            self.lbl_title.setText(track.title or "Unknown")
            self.lbl_artist.setText(track.artist or "Unknown Artist")
        else:
            self.lbl_title.setText("Nothing playing")
            self.lbl_artist.setText("")
            self.seek_slider.setValue(0)
            self.lbl_time.setText("0:00")
            self.lbl_dur.setText("0:00")
            self._set_playing(False)
        self.relayout()

    def _set_playing(self, playing: bool):
        if playing:
            self.btn_play.setIcon(self._icons["pause"])
            self.btn_play.setToolTip("Pause")
        else:
            self.btn_play.setIcon(self._icons["play"])
            self.btn_play.setToolTip("Play")

    def _on_duration(self, seconds: float):
        self.lbl_dur.setText(format_time(seconds))

    def _on_position(self, seconds: float):
        if self._scrubbing:
            return
        self.lbl_time.setText(format_time(seconds))

    def _on_progress(self, percent: float):
        if self._scrubbing:
            return
        self.seek_slider.setValue(int(round(percent * SEEK_STEPS / 100.0)))

    def _sync_volume(self, *_):
        with QSignalBlocker(self.volume_slider):
            self.volume_slider.setValue(self.controller.volume_slider_value())
        muted = self.controller.is_muted
        self.btn_mute.setIcon(self._icons["muted" if muted else "volume"])
        self.btn_mute.setToolTip("Unmute" if muted else "Mute")

    def _apply_styles(self):
        self.setStyleSheet("""
        QFrame#FloatingPlayer {
            background-color: #020617;
            border: 1px solid #1f2937;
            border-radius: 12px;
        }

        QWidget#DragHandle {
            background: #1f2937;
            border-radius: 3px;
            margin: 6px 40px;
        }

        QToolButton {
            border: 1px solid transparent;
            background: transparent;
            padding: 4px;
            border-radius: 10px;
        }
        QToolButton:hover {
            background: #0b1222;
            border-color: #1f2937;
        }

        QToolButton#BtnPlay {
            background: #111827;
            border: 1px solid #1f2937;
            border-radius: 999px;
            padding: 6px;
        }
        QToolButton#BtnPlay:hover { border-color: #38bdf8; }

        QSlider::groove:horizontal {
            height: 4px;
            background: #0f172a;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            width: 12px;
            height: 12px;
            margin: -4px 0;
            border-radius: 6px;
            background: #38bdf8;
        }
        QSlider::sub-page:horizontal {
            background: #38bdf8;
            border-radius: 2px;
        }

        QLabel {
            color: #9ca3af;
            font-size: 11px;
        }
        QLabel#NowPlaying {
            color: #e5e7eb;
            font-size: 12px;
            font-weight: 600;
        }
        """)
