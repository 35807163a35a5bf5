# ui/track_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt, QItemSelectionModel
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableView, QMenu

from core.catalog import filter_tracks
from core.models import Track
from ui.delegates.actions_delegate import ActionsDelegate
from ui.models.track_table_model import COL_ACTIONS, COL_ARTIST, COL_PLAY, COL_TITLE, TrackTableModel


class TrackListWidget(QWidget):
    downloadTrack = Signal(object)  # Track

    def __init__(self, app_state):
        super().__init__()
        self.app_state = app_state
        self.playback = app_state.playback
        self._search = ""

        self.table = QTableView()
        self.model = TrackTableModel([])
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)

        self.table.setColumnWidth(COL_PLAY, 36)
        self.table.setColumnWidth(COL_TITLE, 360)
        self.table.setColumnWidth(COL_ARTIST, 200)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setObjectName("TrackTable")

        self.table.verticalHeader().setDefaultSectionSize(28)

        self._apply_styles()

        self.actions = ActionsDelegate(self.table)
        self.actions.downloadClicked.connect(self.downloadTrack.emit)
        self.table.setItemDelegateForColumn(COL_ACTIONS, self.actions)

        # Click on the play column toggles, double click anywhere plays.
        self.table.clicked.connect(self._on_click)
        self.table.doubleClicked.connect(self._on_double_click)

        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        self.playback.trackChanged.connect(self._sync_now_playing)
        self.playback.playingChanged.connect(self._sync_now_playing)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    # -------------------------
    # External API
    # -------------------------
    def setSearchValue(self, text: str):
        self._search = text or ""
        self.refresh()

    def refresh(self):
        self.model.set_rows(filter_tracks(self.app_state.tracks, self._search))
        self._sync_now_playing()

    def toggle_track(self, track: Track):
        """Pause if this is the track playing right now, play it otherwise."""
        current = self.playback.current_track
        if current is not None and current.id == track.id and self.playback.is_playing:
            self.playback.pause()
        else:
            self.playback.play(track)

    def selected_track(self) -> Track | None:
        idx = self.table.currentIndex()
        if not idx.isValid():
            return None
        return self.model.track_at(idx.row())

    # -------------------------
    # UI Events
    # -------------------------
    def _on_click(self, index):
        if not index.isValid() or index.column() != COL_PLAY:
            return
        track = self.model.track_at(index.row())
        if track is not None:
            self.toggle_track(track)

    def _on_double_click(self, index):
        if not index.isValid() or index.column() in (COL_PLAY, COL_ACTIONS):
            return
        track = self.model.track_at(index.row())
        if track is not None:
            self.playback.play(track)

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return

        track = self.model.track_at(idx.row())
        if track is None:
            return

        menu = QMenu(self)
        is_playing_this = (
            self.playback.is_playing
            and self.playback.current_track is not None
            and self.playback.current_track.id == track.id
        )
        act_play = menu.addAction("Pause" if is_playing_this else "Play")
        act_dl = menu.addAction("Download")
        act_dl.setEnabled(track.downloadable)

        chosen = menu.exec(self.table.viewport().mapToGlobal(pos))
        if chosen == act_play:
            self.toggle_track(track)
        elif chosen == act_dl:
            self.downloadTrack.emit(track)

    def _sync_now_playing(self, *_):
        current = self.playback.current_track
        track_id = current.id if current else None
        self.model.set_now_playing(track_id, self.playback.is_playing)

        if track_id is None:
            return
        row = self.model.row_for_track_id(track_id)
        if row < 0:
            return  # track not in current filtered view

        sm = self.table.selectionModel()
        if sm is None:
            return
        idx = self.model.index(row, COL_TITLE)
        sm.setCurrentIndex(idx, QItemSelectionModel.ClearAndSelect | QItemSelectionModel.Rows)

    def _apply_styles(self):
        self.setStyleSheet("""
        QTableView#TrackTable {
            background-color: #020617;
            alternate-background-color: #030712;
            border: none;
            color: #e5e7eb;
            gridline-color: #020617;
            selection-background-color: rgba(56, 189, 248, 0.2);
            selection-color: #e5e7eb;
        }

        QHeaderView::section {
            background-color: #020617;
            color: #9ca3af;
            padding: 4px 6px;
            border: none;
            border-bottom: 1px solid #111827;
            font-size: 11px;
            text-transform: uppercase;
            letter-spacing: 0.08em;
        }

        QTableView::item {
            padding: 4px 6px;
        }
        """)
