"""
Page widget showing a rendered page with its annotation overlay.
"""
import logging
from typing import Dict, Tuple

from PyQt5.QtCore import QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont, QFontMetricsF, QImage, QMouseEvent, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import QLabel, QLineEdit

from quillmark.controllers.annotation_controller import AnnotationController
from quillmark.core import CheckboxAnnotation, SignatureAnnotation, TextAnnotation, ToolMode
from quillmark.core.annotations.models import CHECKBOX_SIZE
from quillmark.core.document.raster import PageRaster
from quillmark.core.interaction import PointerCapture

log = logging.getLogger(__name__)

SELECTION_COLOR = QColor(74, 158, 255)
OVERLAY_FONT_FAMILY = "Helvetica"

CURSORS = {
    ToolMode.SELECT: Qt.ArrowCursor,
    ToolMode.TEXT: Qt.IBeamCursor,
    ToolMode.CHECKBOX: Qt.CrossCursor,
}


def overlay_font(font_size: int) -> QFont:
    font = QFont(OVERLAY_FONT_FAMILY)
    font.setPixelSize(max(1, int(font_size)))
    return font


def measure_text(text: str, font_size: int) -> Tuple[float, float]:
    """Text box size as Qt will paint it; used for hit testing."""
    metrics = QFontMetricsF(overlay_font(font_size))
    return metrics.horizontalAdvance(text), metrics.height()


class _MouseGrab(PointerCapture):
    """Routes every mouse event to the canvas while a drag or resize runs."""

    def __init__(self, canvas: QLabel):
        self.canvas = canvas

    def acquire(self) -> None:
        self.canvas.grabMouse()

    def release(self) -> None:
        self.canvas.releaseMouse()


class InlineTextEdit(QLineEdit):
    """Single-line editor floating over the page while text entry is pending."""

    cancelled = pyqtSignal()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.cancelled.emit()
            event.accept()
            return
        super().keyPressEvent(event)


class PageCanvas(QLabel):
    """
    One rendered page plus its annotations.

    Widget coordinates are overlay coordinates: the raster is shown
    unscaled, so mouse positions are forwarded to the controller as is.
    """

    def __init__(self, raster: PageRaster, controller: AnnotationController, parent=None):
        super().__init__(parent)

        self.raster = raster
        self.page_index = raster.page_index
        self.controller = controller
        self._capture = _MouseGrab(self)
        self._signature_cache: Dict[int, QPixmap] = {}

        image = QImage(raster.samples, raster.width, raster.height, raster.stride,
                       QImage.Format_RGB888).copy()
        self.setPixmap(QPixmap.fromImage(image))
        self.setFixedSize(raster.width, raster.height)
        self.setFocusPolicy(Qt.StrongFocus)

        self.text_edit = InlineTextEdit(self)
        self.text_edit.hide()
        self.text_edit.editingFinished.connect(self._on_text_committed)
        self.text_edit.cancelled.connect(self.controller.cancel_text)

        self.update_cursor(controller.tool_mode)

    def update_cursor(self, mode: ToolMode) -> None:
        self.setCursor(CURSORS.get(mode, Qt.ArrowCursor))

    # Text entry

    def show_text_editor(self, x: float, y: float) -> None:
        font_size = self.controller.session.controller.state.font_size
        self.text_edit.setFont(overlay_font(font_size))
        self.text_edit.clear()
        self.text_edit.move(int(x), int(y))
        self.text_edit.setMinimumWidth(160)
        self.text_edit.adjustSize()
        self.text_edit.show()
        self.text_edit.setFocus()

    def hide_text_editor(self) -> None:
        if self.text_edit.isVisible():
            self.text_edit.hide()
            self.setFocus()

    def _on_text_committed(self) -> None:
        if self.text_edit.isVisible():
            self.controller.commit_text(self.text_edit.text())

    # Mouse event handlers

    def mousePressEvent(self, event: QMouseEvent):
        # Taking focus ends any open text entry before the press is handled
        self.setFocus()

        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)

        pos = event.pos()
        self.controller.pointer_down(self.page_index, pos.x(), pos.y(), self._capture)

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.pos()
        self.controller.pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.LeftButton:
            return super().mouseReleaseEvent(event)
        self.controller.pointer_up()

    # Paint methods

    def paintEvent(self, event):
        super().paintEvent(event)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            store = self.controller.store
            for ann in store.get_annotations_for_page(self.page_index):
                if isinstance(ann, TextAnnotation):
                    self._paint_text(painter, ann)
                elif isinstance(ann, CheckboxAnnotation):
                    self._paint_checkbox(painter, ann)
                elif isinstance(ann, SignatureAnnotation):
                    self._paint_signature(painter, ann)

            selected = store.selected
            if selected is not None and selected.page == self.page_index:
                self._paint_selection(painter, selected)
        finally:
            painter.end()

    def _paint_text(self, painter: QPainter, ann: TextAnnotation):
        width, height = measure_text(ann.text, ann.font_size)
        painter.setFont(overlay_font(ann.font_size))
        painter.setPen(QColor(*ann.color))
        painter.drawText(QRectF(ann.x, ann.y, width + 1, height),
                         Qt.AlignLeft | Qt.AlignTop, ann.text)

    def _paint_checkbox(self, painter: QPainter, ann: CheckboxAnnotation):
        rect = QRectF(ann.x, ann.y, CHECKBOX_SIZE, CHECKBOX_SIZE)
        painter.setBrush(QBrush(Qt.white))
        painter.setPen(QPen(Qt.black, 1))
        painter.drawRect(rect)
        if ann.checked:
            painter.setFont(overlay_font(CHECKBOX_SIZE - 2))
            painter.drawText(rect, Qt.AlignCenter, "✓")

    def _paint_signature(self, painter: QPainter, ann: SignatureAnnotation):
        pixmap = self._signature_cache.get(ann.id)
        if pixmap is None:
            pixmap = QPixmap()
            if not pixmap.loadFromData(ann.image):
                log.warning("Cannot preview signature %s", ann.id)
            self._signature_cache[ann.id] = pixmap

        rect = QRectF(ann.x, ann.y, ann.width, ann.height)
        if pixmap.isNull():
            painter.setBrush(Qt.NoBrush)
            painter.setPen(QPen(Qt.red, 1, Qt.DashLine))
            painter.drawRect(rect)
        else:
            painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))

    def _paint_selection(self, painter: QPainter, ann):
        store = self.controller.store
        x0, y0, x1, y1 = store.bounds(ann, self.controller.session.controller.measure)
        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(SELECTION_COLOR, 1, Qt.DashLine))
        painter.drawRect(QRectF(x0 - 2, y0 - 2, x1 - x0 + 4, y1 - y0 + 4))

        handle = store.handle_rect(ann, self.controller.session.controller.measure)
        if handle is not None:
            hx0, hy0, hx1, hy1 = handle
            painter.setBrush(QBrush(SELECTION_COLOR))
            painter.setPen(QPen(Qt.white, 1))
            painter.drawRect(QRectF(hx0, hy0, hx1 - hx0, hy1 - hy0))
