"""
Dialog for drawing or loading a signature image.
"""
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QBuffer, QByteArray, QIODevice, QPoint, Qt
from PyQt5.QtGui import QImage, QPainter, QPen
from PyQt5.QtWidgets import (
    QDialog, QDialogButtonBox, QFileDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
)

PAD_WIDTH = 400
PAD_HEIGHT = 160


def image_to_png(image: QImage) -> bytes:
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.WriteOnly)
    image.save(buffer, "PNG")
    buffer.close()
    return bytes(data)


class SignaturePad(QWidget):
    """Freehand drawing surface on a transparent background."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedSize(PAD_WIDTH, PAD_HEIGHT)
        self.setCursor(Qt.CrossCursor)
        self.image = QImage(PAD_WIDTH, PAD_HEIGHT, QImage.Format_ARGB32)
        self.clear()
        self._last_point: Optional[QPoint] = None

    def clear(self):
        self.image.fill(Qt.transparent)
        self.is_empty = True
        self.update()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._last_point = event.pos()

    def mouseMoveEvent(self, event):
        if self._last_point is None or not (event.buttons() & Qt.LeftButton):
            return
        painter = QPainter(self.image)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setPen(QPen(Qt.black, 2.5, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin))
        painter.drawLine(self._last_point, event.pos())
        painter.end()
        self._last_point = event.pos()
        self.is_empty = False
        self.update()

    def mouseReleaseEvent(self, event):
        self._last_point = None

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.white)
        painter.setPen(QPen(Qt.lightGray, 1, Qt.DashLine))
        painter.drawLine(20, PAD_HEIGHT - 30, PAD_WIDTH - 20, PAD_HEIGHT - 30)
        painter.drawImage(0, 0, self.image)
        painter.end()


class SignatureDialog(QDialog):
    """Collects a signature as PNG bytes."""

    def __init__(self, parent=None, start_dir: str = ""):
        super().__init__(parent)
        self.setWindowTitle("Add Signature")
        self.signature: Optional[bytes] = None
        self.start_dir = start_dir

        layout = QVBoxLayout(self)
        hint = QLabel("Draw your signature below, or load an image.", self)
        hint.setStyleSheet("color: #8899AA;")
        layout.addWidget(hint)

        self.pad = SignaturePad(self)
        layout.addWidget(self.pad)

        row = QHBoxLayout()
        clear_button = QPushButton("Clear", self)
        clear_button.clicked.connect(self.pad.clear)
        row.addWidget(clear_button)
        load_button = QPushButton("Load Image...", self)
        load_button.clicked.connect(self._load_image)
        row.addWidget(load_button)
        row.addStretch()
        layout.addLayout(row)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, self)
        buttons.accepted.connect(self._accept_drawing)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _load_image(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Load Signature", self.start_dir, "Images (*.png *.jpg *.jpeg)"
        )
        if path:
            self.signature = Path(path).read_bytes()
            self.accept()

    def _accept_drawing(self):
        if self.pad.is_empty:
            return
        self.signature = image_to_png(self.pad.image)
        self.accept()

    @staticmethod
    def get_signature(parent=None, start_dir: str = "") -> Optional[bytes]:
        dialog = SignatureDialog(parent, start_dir)
        if dialog.exec_() == QDialog.Accepted:
            return dialog.signature
        return None
