"""
Editing session: the contract the application talks to.
"""
import copy
import logging
from typing import Callable, List, Optional

from .annotations import AnnotationStore, CheckboxAnnotation, SignatureAnnotation, TextAnnotation
from .annotations.models import RGB
from .document.codec import PdfCodec
from .document.pdf_exporter import PDFExporter, ProgressCallback
from .document.raster import PageRaster, render_pages
from .errors import DocumentError
from .interaction import InteractionController, SessionState

log = logging.getLogger(__name__)


class EditingSession:
    """
    One loaded document plus the annotations placed on it.

    Annotations are stored in overlay pixels of pages rendered at
    ``render_scale``; the exporter divides by the same scale when baking.
    """

    def __init__(self, exporter: Optional[PDFExporter] = None, render_scale: float = 1.0,
                 state: Optional[SessionState] = None):
        self.store = AnnotationStore()
        self.controller = InteractionController(self.store, state)
        self.exporter = exporter or PDFExporter()
        self.render_scale = render_scale

        self.pages: List[PageRaster] = []
        self.source: Optional[bytes] = None
        self.source_name: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self.source is not None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def load_for_editing(self, data: bytes, name: str = "document.pdf",
                         confirm: Optional[Callable[[], bool]] = None) -> Optional[List[PageRaster]]:
        """
        Render a document and start a fresh annotation set on it.

        Args:
            data: PDF bytes
            name: Display name of the document
            confirm: Asked before discarding existing annotations

        Returns:
            Rendered pages, or None if the user declined to discard

        Raises:
            DocumentError: if the document cannot be opened or rendered;
                the current session is left untouched
        """
        if len(self.store) and (confirm is None or not confirm()):
            log.info("Load of %s cancelled; keeping %s annotations", name, len(self.store))
            return None

        doc = PdfCodec().open(data)
        try:
            pages = render_pages(doc, self.render_scale)
        finally:
            doc.close()
        if not pages:
            raise DocumentError(f"{name} has no pages")

        self.pages = pages
        self.source = data
        self.source_name = name
        self.controller.reset(len(pages))
        log.info("Loaded %s (%s pages)", name, len(pages))
        return pages

    # Annotation actions

    def add_text(self, text: str, x: float, y: float, page: Optional[int] = None,
                 font_size: Optional[int] = None,
                 color: Optional[RGB] = None) -> Optional[TextAnnotation]:
        page = self.controller.state.current_page if page is None else page
        return self.controller.add_text(page, x, y, text, font_size, color)

    def add_checkbox(self, x: float, y: float, page: Optional[int] = None,
                     checked: bool = True) -> Optional[CheckboxAnnotation]:
        page = self.controller.state.current_page if page is None else page
        return self.controller.add_checkbox(page, x, y, checked)

    def add_signature(self, image: bytes, width: float, height: float, x: float = 50,
                      y: float = 50, page: Optional[int] = None) -> Optional[SignatureAnnotation]:
        return self.controller.add_signature(image, width, height, x, y, page)

    def select_annotation(self, annotation_id: Optional[int]) -> None:
        self.controller.select_annotation(annotation_id)

    def undo_last(self) -> None:
        self.controller.undo_last()

    def delete_selected(self) -> bool:
        return self.controller.delete_selected()

    def clear_all(self) -> None:
        self.controller.clear_all()

    # Export

    def save_edited(self, progress: Optional[ProgressCallback] = None) -> bytes:
        """
        Bake the current annotations into a new PDF.

        Raises:
            DocumentError: if no document is loaded
        """
        if self.source is None:
            raise DocumentError("No document loaded")

        revision = self.store.revision
        data = self.exporter.export(self.source, list(self.store), self.render_scale, progress)
        self.store.mark_saved(revision)
        log.info("Exported %s with %s annotations", self.source_name, len(self.store))
        return data

    def snapshot_annotations(self) -> list:
        """Deep copy of the annotations, safe to hand to a worker thread."""
        return [copy.deepcopy(ann) for ann in self.store]
