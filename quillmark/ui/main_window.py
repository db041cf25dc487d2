import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QAction, QFileDialog, QInputDialog, QLabel, QMainWindow, QMessageBox, QScrollArea,
    QVBoxLayout, QWidget
)

from quillmark.controllers import AnnotationController, UserInputHandler
from quillmark.core import DocumentError, EditingSession, ToolMode
from quillmark.core.document import operations
from quillmark.core.document.raster import PageRaster
from quillmark.ui.dialogs.signature_dialog import SignatureDialog
from quillmark.ui.export_worker import ExportWorker
from quillmark.ui.toolbars.editor_toolbar import EditorToolbar
from quillmark.ui.widgets.page_canvas import PageCanvas, measure_text
from quillmark.utils.settings import EditorSettings, save_settings
from quillmark.utils.warning_manager import WarningType, warning_manager

log = logging.getLogger(__name__)

PDF_FILTER = "PDF Files (*.pdf)"


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[EditorSettings] = None, file_path: Optional[str] = None):
        super().__init__()
        self.setWindowTitle("Quillmark PDF")

        self.settings = settings or EditorSettings()
        self.session = EditingSession(render_scale=self.settings.render_scale)
        self.annotation_controller = AnnotationController(self.session, self.settings, parent=self)
        self.annotation_controller.set_text_measure(measure_text)
        self.input_handler = UserInputHandler(self)

        self.canvases: Dict[int, PageCanvas] = {}
        self._export_worker: Optional[ExportWorker] = None
        self._export_revision = 0

        self.setup_ui()
        self._connect_controller()

        if file_path:
            self.load_pdf(file_path)

    # ===== UI setup =====

    def setup_ui(self):
        self.toolbar = EditorToolbar(self.settings.font_size, self.settings.text_color, self)
        self.toolbar.tool_selected.connect(self.set_tool_mode)
        self.toolbar.text_defaults_changed.connect(self._on_text_defaults_changed)
        self.toolbar.signature_requested.connect(self.add_signature)
        self.toolbar.undo_requested.connect(self.annotation_controller.undo)
        self.toolbar.delete_requested.connect(self.annotation_controller.delete_selected)
        self.toolbar.clear_requested.connect(self.annotation_controller.clear_all)
        self.toolbar.save_requested.connect(self.save_edited_pdf)

        self.page_container = QWidget()
        self.page_layout = QVBoxLayout(self.page_container)
        self.page_layout.setAlignment(Qt.AlignHCenter)
        self.page_layout.setSpacing(20)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.page_container)
        self.scroll_area.verticalScrollBar().valueChanged.connect(self._track_current_page)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.toolbar)
        layout.addWidget(self.scroll_area)
        self.setCentralWidget(central)

        self.status_label = QLabel("Open a PDF to start editing")
        self.statusBar().addWidget(self.status_label)

        self._build_menus()

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        self._add_action(file_menu, "&Open...", self.open_pdf, "Ctrl+O")
        self._add_action(file_menu, "&Save Edited PDF...", self.save_edited_pdf, "Ctrl+S")
        file_menu.addSeparator()
        self._add_action(file_menu, "E&xit", self.close)

        edit_menu = self.menuBar().addMenu("&Edit")
        self._add_action(edit_menu, "&Undo Last Annotation", self.annotation_controller.undo)
        self._add_action(edit_menu, "&Delete Selected", self.annotation_controller.delete_selected)
        self._add_action(edit_menu, "&Clear All", self.annotation_controller.clear_all)
        edit_menu.addSeparator()
        self._add_action(edit_menu, "&Reset Confirmations", self.reset_confirmations)

        tools_menu = self.menuBar().addMenu("&Tools")
        self._add_action(tools_menu, "&Merge PDFs...", self.merge_pdfs)
        self._add_action(tools_menu, "&Split PDF...", self.split_pdf)
        self._add_action(tools_menu, "&Rotate Pages...", self.rotate_pdf)
        self._add_action(tools_menu, "&Images to PDF...", self.images_to_pdf)
        self._add_action(tools_menu, "&PDF to Images...", self.pdf_to_images)
        self._add_action(tools_menu, "&Compress PDF...", self.compress_pdf)

    def _add_action(self, menu, text, slot, shortcut=None):
        action = QAction(text, self)
        if shortcut:
            # Shortcuts are dispatched by UserInputHandler; shown here for reference
            action.setShortcut(shortcut)
            action.setShortcutContext(Qt.WidgetShortcut)
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    def _connect_controller(self):
        controller = self.annotation_controller
        controller.annotations_changed.connect(self._on_annotations_changed)
        controller.document_loaded.connect(self._show_pages)
        controller.tool_mode_changed.connect(self._on_tool_mode_changed)
        controller.text_entry_requested.connect(self._on_text_entry_requested)
        controller.text_entry_closed.connect(self._on_text_entry_closed)

    # ===== Document =====

    def open_pdf(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open PDF", self.settings.last_directory,
                                              PDF_FILTER)
        if path:
            self.load_pdf(path)

    def load_pdf(self, path: str):
        try:
            pages = self.annotation_controller.load_document(path)
        except (OSError, DocumentError) as e:
            log.error("Failed to load %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Error loading PDF: {e}")
            return

        if pages is not None:
            self.settings.last_directory = os.path.dirname(path)
            self.setWindowTitle(f"Quillmark PDF - {Path(path).name}")

    def _show_pages(self, pages: List[PageRaster]):
        for canvas in self.canvases.values():
            canvas.deleteLater()
        self.canvases.clear()

        for raster in pages:
            canvas = PageCanvas(raster, self.annotation_controller, self.page_container)
            self.page_layout.addWidget(canvas)
            self.canvases[raster.page_index] = canvas

        self.scroll_area.verticalScrollBar().setValue(0)
        self._update_status()

    def _track_current_page(self, *_):
        """Treat the page under the middle of the viewport as current."""
        if not self.canvases:
            return
        middle = self.scroll_area.verticalScrollBar().value() + self.scroll_area.viewport().height() // 2
        for index, canvas in self.canvases.items():
            if canvas.y() <= middle <= canvas.y() + canvas.height():
                self.annotation_controller.set_current_page(index)
                self._update_status()
                break

    # ===== Annotations =====

    def set_tool_mode(self, mode: ToolMode):
        self.annotation_controller.set_tool_mode(mode)

    def _on_tool_mode_changed(self, mode: ToolMode):
        self.toolbar.set_tool_mode(mode)
        for canvas in self.canvases.values():
            canvas.update_cursor(mode)

    def _on_text_defaults_changed(self, font_size: int, color: tuple):
        self.annotation_controller.set_text_defaults(font_size, color)
        self.settings.font_size = font_size
        self.settings.text_color = color

    def _on_text_entry_requested(self, page: int, x: float, y: float):
        canvas = self.canvases.get(page)
        if canvas:
            canvas.show_text_editor(x, y)

    def _on_text_entry_closed(self):
        for canvas in self.canvases.values():
            canvas.hide_text_editor()

    def _on_annotations_changed(self):
        for canvas in self.canvases.values():
            canvas.update()
        self._update_status()

    def reset_confirmations(self):
        """Show every silenced confirmation dialog again."""
        warning_manager.reset_all_warnings()
        self.status_label.setText("Confirmation dialogs restored")

    def add_signature(self):
        if not self.session.is_loaded:
            QMessageBox.information(self, "No Document", "Open a PDF before adding a signature.")
            return
        image = SignatureDialog.get_signature(self, self.settings.last_directory)
        if image:
            self.annotation_controller.add_signature(image)

    def _update_status(self):
        if not self.session.is_loaded:
            return
        state = self.session.controller.state
        self.status_label.setText(
            f"Page {state.current_page + 1} of {self.session.page_count} | "
            f"{len(self.session.store)} annotation(s)"
        )

    # ===== Export =====

    def save_edited_pdf(self) -> bool:
        """
        Start exporting the edited PDF.

        Returns:
            True if an export was started
        """
        if not self.session.is_loaded:
            return False
        if self.is_exporting():
            QMessageBox.information(self, "Export Running", "An export is already in progress.")
            return False

        base = Path(self.session.source_name or "document.pdf").stem
        default_path = os.path.join(self.settings.last_directory, f"{base}_edited.pdf")
        path, _ = QFileDialog.getSaveFileName(self, "Save Edited PDF", default_path, PDF_FILTER)
        if not path:
            return False

        self._export_revision = self.session.store.revision
        self._export_worker = ExportWorker(
            self.session.exporter,
            self.session.source,
            self.session.snapshot_annotations(),
            path,
            self.session.render_scale,
        )
        self._export_worker.page_progress.connect(
            lambda done, total: self.status_label.setText(f"Exporting page {done} of {total}...")
        )
        self._export_worker.finished_export.connect(self._on_export_finished)
        self._export_worker.start()
        return True

    def is_exporting(self) -> bool:
        return self._export_worker is not None and self._export_worker.isRunning()

    def _on_export_finished(self, success: bool, message: str):
        if success:
            # Edits made while the worker ran are not in the file
            self.session.store.mark_saved(self._export_revision)
            self.status_label.setText(message)
        else:
            QMessageBox.critical(self, "Export Failed", message)
            self._update_status()

    # ===== Toolkit =====

    def _pick_pdf(self, title: str) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(self, title, self.settings.last_directory, PDF_FILTER)
        return path or None

    def _write_output(self, title: str, default_name: str, data: bytes,
                      file_filter: str = PDF_FILTER) -> Optional[str]:
        path, _ = QFileDialog.getSaveFileName(
            self, title, os.path.join(self.settings.last_directory, default_name), file_filter
        )
        if path:
            Path(path).write_bytes(data)
        return path or None

    def _run_tool(self, action):
        try:
            action()
        except (OSError, ValueError, DocumentError) as e:
            log.error("Tool failed: %s", e)
            QMessageBox.critical(self, "Error", str(e))

    def merge_pdfs(self):
        def action():
            paths, _ = QFileDialog.getOpenFileNames(self, "Merge PDFs", self.settings.last_directory,
                                                    PDF_FILTER)
            if len(paths) < 2:
                return
            data = operations.merge([(Path(p).name, Path(p).read_bytes()) for p in paths])
            if self._write_output("Save Merged PDF", "merged.pdf", data):
                self.status_label.setText(f"Merged {len(paths)} files")
        self._run_tool(action)

    def split_pdf(self):
        def action():
            path = self._pick_pdf("Split PDF")
            if not path:
                return
            out_dir = QFileDialog.getExistingDirectory(self, "Output Folder", os.path.dirname(path))
            if not out_dir:
                return
            for number, data in enumerate(operations.split(Path(path).read_bytes()), start=1):
                Path(out_dir, f"page_{number}.pdf").write_bytes(data)
            self.status_label.setText(f"Split {Path(path).name} into {out_dir}")
        self._run_tool(action)

    def rotate_pdf(self):
        def action():
            path = self._pick_pdf("Rotate Pages")
            if not path:
                return
            degrees, ok = QInputDialog.getItem(self, "Rotate Pages", "Rotation:",
                                               ["90", "180", "270"], 0, False)
            if not ok:
                return
            data = operations.rotate(Path(path).read_bytes(), int(degrees))
            self._write_output("Save Rotated PDF", "rotated.pdf", data)
        self._run_tool(action)

    def images_to_pdf(self):
        def action():
            paths, _ = QFileDialog.getOpenFileNames(self, "Images to PDF", self.settings.last_directory,
                                                    "Images (*.png *.jpg *.jpeg)")
            if not paths:
                return
            data = operations.images_to_pdf([(Path(p).name, Path(p).read_bytes()) for p in paths])
            self._write_output("Save PDF", "images.pdf", data)
        self._run_tool(action)

    def pdf_to_images(self):
        def action():
            path = self._pick_pdf("PDF to Images")
            if not path:
                return
            out_dir = QFileDialog.getExistingDirectory(self, "Output Folder", os.path.dirname(path))
            if not out_dir:
                return
            for number, data in enumerate(operations.pdf_to_images(Path(path).read_bytes()), start=1):
                Path(out_dir, f"page_{number}.png").write_bytes(data)
            self.status_label.setText(f"Exported images to {out_dir}")
        self._run_tool(action)

    def compress_pdf(self):
        def action():
            path = self._pick_pdf("Compress PDF")
            if not path:
                return
            result = operations.compress(Path(path).read_bytes())
            if self._write_output("Save Compressed PDF", "compressed.pdf", result.data):
                QMessageBox.information(
                    self, "PDF Compressed",
                    f"Original: {result.original_size / 1024:.1f} KB\n"
                    f"Compressed: {result.compressed_size / 1024:.1f} KB\n"
                    f"Reduction: {result.reduction:.1f}%"
                )
        self._run_tool(action)

    # ===== Events =====

    def keyPressEvent(self, event):
        self.input_handler.handle_key_press(event)

    def closeEvent(self, event):
        """Handle window close event - check for unsaved changes."""
        if self.is_exporting():
            QMessageBox.information(self, "Export Running",
                                    "Wait for the export to finish before closing.")
            event.ignore()
            return

        if self.annotation_controller.has_unsaved_changes():
            reply = warning_manager.show_save_discard_cancel(
                self, WarningType.EXIT_UNSAVED,
                message="You have unsaved annotations. Do you want to save them to a PDF?"
            )
            if reply == QMessageBox.Cancel:
                event.ignore()
                return
            if reply == QMessageBox.Save:
                # Export runs in the background; keep the window open until it finishes
                self.save_edited_pdf()
                event.ignore()
                return

        save_settings(self.settings)
        event.accept()
