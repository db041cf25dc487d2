"""
Controller connecting the editing session to the Qt widgets.
"""
import logging
from pathlib import Path
from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtWidgets import QWidget

from quillmark.core import EditingSession, Key, ToolMode
from quillmark.core.annotations.store import TextMeasure
from quillmark.core.document.raster import PageRaster
from quillmark.core.interaction import PointerCapture
from quillmark.utils.settings import EditorSettings
from quillmark.utils.warning_manager import WarningType, warning_manager

log = logging.getLogger(__name__)


class AnnotationController(QObject):
    """Handles annotation operations and user interactions for the GUI."""

    # Signals
    annotations_changed = pyqtSignal()  # Any store or interaction change
    document_loaded = pyqtSignal(object)  # List[PageRaster]
    tool_mode_changed = pyqtSignal(object)  # ToolMode
    text_entry_requested = pyqtSignal(int, float, float)  # page, x, y
    text_entry_closed = pyqtSignal()

    def __init__(self, session: EditingSession, settings: Optional[EditorSettings] = None,
                 parent: QWidget = None):
        super().__init__()
        self.session = session
        self.settings = settings or EditorSettings()
        self.parent_widget = parent

        controller = session.controller
        controller.set_text_defaults(self.settings.font_size, self.settings.text_color)
        controller.on_changed = self.annotations_changed.emit
        controller.on_text_entry_requested = self.text_entry_requested.emit
        controller.on_text_entry_closed = self.text_entry_closed.emit

    @property
    def store(self):
        return self.session.store

    @property
    def tool_mode(self) -> ToolMode:
        return self.session.controller.tool_mode

    def set_text_measure(self, measure: TextMeasure) -> None:
        self.session.controller.measure = measure

    # Document

    def load_document(self, path: str) -> Optional[List[PageRaster]]:
        """
        Load a PDF for editing, asking before discarding annotations.

        Returns:
            Rendered pages, or None if the user kept the current document

        Raises:
            DocumentError: if the file cannot be opened or rendered
        """
        data = Path(path).read_bytes()
        pages = self.session.load_for_editing(data, Path(path).name, confirm=self._confirm_discard)
        if pages is not None:
            self.document_loaded.emit(pages)
        return pages

    def _confirm_discard(self) -> bool:
        return warning_manager.show_confirmation(
            self.parent_widget,
            WarningType.DISCARD_ANNOTATIONS,
            "Discard Annotations",
            f"Opening another document discards {len(self.store)} annotation(s). Continue?"
        )

    # Tools

    def set_tool_mode(self, mode: ToolMode) -> None:
        self.session.controller.set_tool_mode(mode)
        self.tool_mode_changed.emit(mode)

    def set_current_page(self, page_index: int) -> None:
        self.session.controller.set_current_page(page_index)

    def set_text_defaults(self, font_size: Optional[int] = None, color=None) -> None:
        self.session.controller.set_text_defaults(font_size, color)

    # Pointer and keyboard, forwarded from page canvases

    def pointer_down(self, page: int, x: float, y: float, capture: PointerCapture) -> None:
        self.session.controller.pointer_down(page, x, y, capture)

    def pointer_move(self, x: float, y: float) -> None:
        self.session.controller.pointer_move(x, y)

    def pointer_up(self) -> None:
        self.session.controller.pointer_up()

    def key_press(self, key: Key) -> bool:
        return self.session.controller.key_press(key)

    def commit_text(self, text: str) -> None:
        self.session.controller.commit_text(text)

    def cancel_text(self) -> None:
        self.session.controller.cancel_text()

    # Actions

    def add_signature(self, image: bytes) -> bool:
        """Place a signature on the current page with the configured defaults."""
        if not self.session.is_loaded:
            return False
        annotation = self.session.add_signature(
            image,
            self.settings.signature_width,
            self.settings.signature_height,
            self.settings.signature_x,
            self.settings.signature_y,
        )
        if annotation is not None:
            self.tool_mode_changed.emit(ToolMode.SELECT)
        return annotation is not None

    def undo(self) -> None:
        self.session.undo_last()

    def delete_selected(self) -> bool:
        return self.session.delete_selected()

    def clear_all(self) -> bool:
        """
        Remove every annotation after confirmation.

        Returns:
            True if annotations were cleared
        """
        if not len(self.store):
            return False
        if not warning_manager.show_confirmation(
            self.parent_widget,
            WarningType.CLEAR_ALL,
            "Clear All",
            f"Remove all {len(self.store)} annotation(s)?"
        ):
            return False
        self.session.clear_all()
        return True

    def has_unsaved_changes(self) -> bool:
        return self.store.has_unsaved_changes and len(self.store) > 0
