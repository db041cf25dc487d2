"""
Bake overlay annotations into a PDF.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from ..annotations.models import (
    CHECKBOX_SIZE,
    Annotation,
    CheckboxAnnotation,
    SignatureAnnotation,
    TextAnnotation,
)
from ..coords import anchored_document_y, scale_point, to_document_space
from ..errors import ImageDecodeError
from .codec import DocumentCodec, PdfCodec

log = logging.getLogger(__name__)

# ZapfDingbats "4" is the heavy check mark
CHECK_GLYPH = "4"
CHECK_FONT = "zadb"
CHECK_GLYPH_SIZE = 12
CHECK_INSET = 2
BLACK = (0, 0, 0)

ProgressCallback = Callable[[int, int], None]


class PDFExporter:
    """Handles baking annotations into a fresh copy of the source PDF."""

    def __init__(self, codec: Optional[DocumentCodec] = None):
        self.codec = codec or PdfCodec()

    def export(self, source: bytes, annotations: Iterable[Annotation], scale: float = 1.0,
               progress: Optional[ProgressCallback] = None) -> bytes:
        """
        Export annotations into a new PDF.

        Args:
            source: Bytes of the original PDF
            annotations: Annotations in store order
            scale: Render scale the overlay positions were captured at
            progress: Optional callback receiving (pages done, total pages)

        Returns:
            Bytes of the new PDF

        Codec failures propagate unchanged and no output is produced. Only
        signatures whose image cannot be decoded are skipped.
        """
        doc = self.codec.open(source)
        try:
            page_count = self.codec.page_count(doc)

            # Group annotations by page, keeping store order within a page
            annotations_by_page: Dict[int, List[Annotation]] = defaultdict(list)
            for ann in annotations:
                if not 0 <= ann.page < page_count:
                    log.warning("Skipping annotation %s on missing page %s", ann.id, ann.page)
                    continue
                annotations_by_page[ann.page].append(ann)

            total_pages = len(annotations_by_page)
            for done, page_index in enumerate(sorted(annotations_by_page), start=1):
                _, page_height = self.codec.page_size(doc, page_index)
                for ann in annotations_by_page[page_index]:
                    self._bake(doc, page_index, page_height, ann, scale)

                log.debug("Baked page %s (%s/%s)", page_index + 1, done, total_pages)
                if progress:
                    progress(done, total_pages)

            return self.codec.save(doc)
        finally:
            self.codec.close(doc)

    def _bake(self, doc, page_index: int, page_height: float,
              annotation: Annotation, scale: float) -> None:
        """Draw a single annotation on its page."""
        factor = 1.0 / scale
        x, y = scale_point(annotation.x, annotation.y, factor)
        doc_x, doc_y = to_document_space(x, y, page_height)

        if isinstance(annotation, TextAnnotation):
            self.codec.draw_text(doc, page_index, doc_x, doc_y, annotation.text,
                                 annotation.font_size * factor, annotation.color)

        elif isinstance(annotation, CheckboxAnnotation):
            # The overlay box is CHECKBOX_SIZE pixels at the render scale
            size = CHECKBOX_SIZE * factor
            inset = CHECK_INSET * factor
            box_y = anchored_document_y(y, size, page_height)
            self.codec.draw_rect(doc, page_index, doc_x, box_y, size, size, color=BLACK)
            if annotation.checked:
                self.codec.draw_text(doc, page_index, doc_x + inset, box_y + inset,
                                     CHECK_GLYPH, CHECK_GLYPH_SIZE * factor, BLACK,
                                     font=CHECK_FONT)

        elif isinstance(annotation, SignatureAnnotation):
            width, height = scale_point(annotation.width, annotation.height, factor)
            image_y = anchored_document_y(y, height, page_height)
            try:
                self.codec.draw_image(doc, page_index, doc_x, image_y, width, height,
                                      annotation.image)
            except ImageDecodeError as e:
                log.warning("Skipping signature %s on page %s: %s",
                            annotation.id, page_index + 1, e)
