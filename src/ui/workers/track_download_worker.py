# ui/workers/track_download_worker.py
from __future__ import annotations

import os

from PySide6.QtCore import QThread, Signal

from core.downloads import DownloadError, download_track
from core.models import Track


class TrackDownloadWorker(QThread):
    progress = Signal(str)
    finished = Signal(bool, str, str)  # ok, msg, track_id

    def __init__(self, track: Track, dest_dir: str, parent=None):
        super().__init__(parent)
        self.track = track
        self.dest_dir = dest_dir

    def run(self):
        self.progress.emit(f"Downloading {self.track.title}...")
        try:
            path = download_track(self.track, self.dest_dir)
        except DownloadError as e:
            self.finished.emit(False, str(e), self.track.id)
            return

        self.finished.emit(True, f"Saved {os.path.basename(path)}", self.track.id)
