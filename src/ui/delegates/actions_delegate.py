# ui/actions_delegate.py
from __future__ import annotations
from PySide6.QtCore import QEvent, Qt, QRect, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QStyledItemDelegate, QStyleOptionButton, QApplication, QStyle

BTN_W, BTN_H = 90, 24


def _button_rect(rect: QRect) -> QRect:
    return QRect(rect.right() - BTN_W - 8, rect.center().y() - BTN_H // 2, BTN_W, BTN_H)


class ActionsDelegate(QStyledItemDelegate):
    """Paints a Download button on rows whose track is downloadable."""
    downloadClicked = Signal(object)  # Track

    def paint(self, painter: QPainter, option, index):
        super().paint(painter, option, index)

        track = index.data(Qt.UserRole)
        if not track or not track.downloadable:
            return

        opt = QStyleOptionButton()
        opt.rect = _button_rect(option.rect)
        opt.text = "Download"
        opt.state = QStyle.State_Enabled
        QApplication.style().drawControl(QStyle.CE_PushButton, opt, painter)

    def editorEvent(self, event, model, option, index):
        if event.type() != QEvent.Type.MouseButtonRelease or event.button() != Qt.LeftButton:
            return False

        track = index.data(Qt.UserRole)
        if not track or not track.downloadable:
            return False

        if _button_rect(option.rect).contains(event.position().toPoint()):
            self.downloadClicked.emit(track)
            return True
        return False
