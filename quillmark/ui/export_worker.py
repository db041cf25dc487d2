import logging
import os
import shutil
import tempfile

from PyQt5.QtCore import QThread, pyqtSignal

from quillmark.core.document.pdf_exporter import PDFExporter

log = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Bakes a snapshot of the annotations without freezing the UI."""

    # Signals
    finished_export = pyqtSignal(bool, str)  # success, message
    page_progress = pyqtSignal(int, int)  # current, total pages

    def __init__(self, exporter: PDFExporter, source: bytes, annotations, output_path: str,
                 scale: float = 1.0):
        super().__init__()
        self.exporter = exporter
        self.source = source
        self.annotations = annotations
        self.output_path = output_path
        self.scale = scale

    def run(self):
        """Execute the export in a background thread."""
        temp_path = None
        try:
            data = self.exporter.export(self.source, self.annotations, self.scale,
                                        progress=self.page_progress.emit)

            # Write next to the target, then replace it in one step
            output_dir = os.path.dirname(os.path.abspath(self.output_path))
            temp_fd, temp_path = tempfile.mkstemp(suffix='.pdf', dir=output_dir)
            with os.fdopen(temp_fd, 'wb') as f:
                f.write(data)
            shutil.move(temp_path, self.output_path)
            temp_path = None

            self.finished_export.emit(True, f"Saved {os.path.basename(self.output_path)}")
        except Exception as e:
            log.exception("Export to %s failed", self.output_path)
            self.finished_export.emit(False, f"Error during export: {e}")
        finally:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
