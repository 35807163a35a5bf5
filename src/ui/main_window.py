from __future__ import annotations

import logging

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QLineEdit, QHBoxLayout, QLabel
from PySide6.QtGui import QShortcut, QKeySequence

from core.catalog import load_catalog
from core.models import CatalogError
from ui.floating_player import FloatingPlayer
from ui.position_store import PositionStore
from ui.widget_controller import PlayerWidgetController
from ui.widgets.toast import ToastManager
from ui.widgets.track_list_widget import TrackListWidget
from ui.workers.track_download_worker import TrackDownloadWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Mezmur Hub")
        self.resize(1000, 700)
        self.app_state = app_state
        self.playback = app_state.playback

        self._downloads: list[TrackDownloadWorker] = []

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)

        # --- Top bar: search ---
        top_bar = QHBoxLayout()
        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search mezmurs by title or artist...")
        top_bar.addWidget(self.search_box, stretch=1)
        self.lbl_count = QLabel("")
        self.lbl_count.setObjectName("TrackCount")
        top_bar.addWidget(self.lbl_count)
        self.layout.addLayout(top_bar)

        # --- Track list ---
        self.track_list = TrackListWidget(self.app_state)
        self.track_list.downloadTrack.connect(self.on_download_track)
        self.layout.addWidget(self.track_list)

        self.search_box.textChanged.connect(self._apply_search)

        # --- Floating player over the central area ---
        breakpoint = app_state.config.compact_breakpoint if app_state.config else 768
        self.player_controller = PlayerWidgetController(
            self.playback,
            store=PositionStore(),
            breakpoint=breakpoint,
            parent=self,
        )
        self.player = FloatingPlayer(self.playback, self.player_controller, self.central_widget)

        # --- Shortcuts ---
        QShortcut(QKeySequence("Space"), self, activated=self.playback.toggle_play_pause)
        QShortcut(QKeySequence("Ctrl+Right"), self, activated=self.player_controller.skip_forward)
        QShortcut(QKeySequence("Ctrl+Left"), self, activated=self.player_controller.skip_back)
        QShortcut(QKeySequence("Return"), self, activated=self._play_selected)

        self.reload_catalog()
        self.show_queued_notifications()

    # ------------------ catalog ------------------
    def reload_catalog(self):
        path = self.app_state.config.catalog_path if self.app_state.config else None
        if not path:
            return
        try:
            self.app_state.tracks = load_catalog(path)
        except FileNotFoundError:
            self.app_state.notify(f"No mezmur catalog found at {path}", "warning")
            self.app_state.tracks = []
        except (OSError, CatalogError) as e:
            logger.exception("Failed to load catalog %s", path)
            self.app_state.notify(f"Failed to load Mezmurs: {e}", "error")
            self.app_state.tracks = []
        self._apply_search()

    def _apply_search(self):
        self.track_list.setSearchValue(self.search_box.text())
        shown = self.track_list.model.rowCount()
        self.lbl_count.setText(f"{shown} / {len(self.app_state.tracks)}")

    def _play_selected(self):
        track = self.track_list.selected_track()
        if track is not None:
            self.track_list.toggle_track(track)

    # ------------------ downloads ------------------
    def on_download_track(self, track):
        if not track.downloadable:
            self.app_state.notify("No audio URL available for download or not downloadable.", "error")
            return

        dest_dir = self.app_state.config.download_dir if self.app_state.config else "."
        worker = TrackDownloadWorker(track, dest_dir, parent=self)
        worker.progress.connect(lambda s: self.statusBar().showMessage(s))
        worker.finished.connect(lambda ok, msg, _tid, w=worker: self._on_download_finished(w, ok, msg))
        self._downloads.append(worker)
        self.app_state.notify(f"Downloading {track.title}...", "info")
        worker.start()

    def _on_download_finished(self, worker, ok: bool, msg: str):
        if worker in self._downloads:
            self._downloads.remove(worker)
        worker.deleteLater()
        self.statusBar().showMessage(msg, 4000)
        self.app_state.notify(msg, "success" if ok else "error")

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        self.toasts.show_toast(n.message, notify_type=n.notify_type, timeout_ms=3000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    def closeEvent(self, event):
        self.app_state.shutdown()
        super().closeEvent(event)
