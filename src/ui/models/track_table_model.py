# ui/track_table_model.py
from __future__ import annotations
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from core.models import Track

COL_PLAY, COL_TITLE, COL_ARTIST, COL_ACTIONS = range(4)


class TrackTableModel(QAbstractTableModel):
    def __init__(self, rows):
        super().__init__()
        self._rows: list[Track] = list(rows)
        self._now_playing_id: str | None = None
        self._playing = False

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def set_now_playing(self, track_id: str | None, playing: bool):
        self._now_playing_id = track_id
        self._playing = bool(playing)
        if self._rows:
            self.dataChanged.emit(self.index(0, COL_PLAY), self.index(len(self._rows) - 1, COL_PLAY))

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 4

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return ["", "Title", "Artist", ""][section]

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == COL_PLAY:
                is_current = row.id == self._now_playing_id
                return "❚❚" if is_current and self._playing else "▶"
            if col == COL_TITLE:
                return row.title
            if col == COL_ARTIST:
                return row.artist
            return ""
        if role == Qt.ToolTipRole and col == COL_TITLE and row.lyrics:
            return row.lyrics
        if role == Qt.UserRole:
            return row
        return None

    def track_at(self, row: int) -> Track | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def row_for_track_id(self, track_id: str) -> int:
        for i, r in enumerate(self._rows):
            if r.id == track_id:
                return i
        return -1

    def all_tracks(self) -> list[Track]:
        return list(self._rows)
