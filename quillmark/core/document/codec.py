"""
Document codec: the drawing primitives the exporter needs.

All coordinates passed to a codec are in document space (origin at the
bottom-left of the page, y up, PDF points). ``PdfCodec`` adapts that to
PyMuPDF, whose page coordinates start at the top-left.
"""
from typing import Tuple

import fitz  # PyMuPDF

from ..annotations.models import RGB
from ..coords import to_overlay_space
from ..errors import DocumentError, ImageDecodeError


class DocumentCodec:
    """Interface of the external document library used by the exporter."""

    def open(self, data: bytes):
        raise NotImplementedError

    def page_count(self, doc) -> int:
        raise NotImplementedError

    def page_size(self, doc, page_index: int) -> Tuple[float, float]:
        raise NotImplementedError

    def draw_text(self, doc, page_index: int, x: float, y: float, text: str,
                  font_size: float, color: RGB, font: str = "helv") -> None:
        """Draw ``text`` with its baseline starting at (x, y)."""
        raise NotImplementedError

    def draw_rect(self, doc, page_index: int, x: float, y: float, width: float,
                  height: float, color: RGB = (0, 0, 0), border_width: float = 1.0) -> None:
        """Stroke a rectangle whose bottom-left corner is (x, y)."""
        raise NotImplementedError

    def draw_image(self, doc, page_index: int, x: float, y: float, width: float,
                   height: float, image: bytes) -> None:
        """
        Draw a PNG/JPEG payload stretched over the box at (x, y).

        Raises:
            ImageDecodeError: if the payload is not a readable image
        """
        raise NotImplementedError

    def save(self, doc) -> bytes:
        raise NotImplementedError

    def close(self, doc) -> None:
        pass


def _unit_color(color: RGB) -> Tuple[float, float, float]:
    # PyMuPDF uses 0-1 range
    return tuple(c / 255.0 for c in color)


class PdfCodec(DocumentCodec):
    """``DocumentCodec`` backed by PyMuPDF."""

    def open(self, data: bytes) -> fitz.Document:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentError(f"Cannot open PDF: {e}") from e
        if doc.needs_pass:
            doc.close()
            raise DocumentError("PDF is password-protected; remove the password first")
        return doc

    def page_count(self, doc: fitz.Document) -> int:
        return doc.page_count

    def page_size(self, doc: fitz.Document, page_index: int) -> Tuple[float, float]:
        rect = doc[page_index].rect
        return rect.width, rect.height

    def _point(self, page: fitz.Page, x: float, y: float) -> fitz.Point:
        return fitz.Point(*to_overlay_space(x, y, page.rect.height))

    def _rect(self, page: fitz.Page, x: float, y: float, width: float, height: float) -> fitz.Rect:
        top_left = self._point(page, x, y + height)
        return fitz.Rect(top_left.x, top_left.y, top_left.x + width, top_left.y + height)

    def draw_text(self, doc, page_index, x, y, text, font_size, color, font="helv"):
        page = doc[page_index]
        page.insert_text(self._point(page, x, y), text, fontsize=font_size,
                         fontname=font, color=_unit_color(color))

    def draw_rect(self, doc, page_index, x, y, width, height, color=(0, 0, 0), border_width=1.0):
        page = doc[page_index]
        shape = page.new_shape()
        shape.draw_rect(self._rect(page, x, y, width, height))
        shape.finish(color=_unit_color(color), width=border_width)
        shape.commit()

    def decode_image(self, image: bytes) -> fitz.Pixmap:
        try:
            return fitz.Pixmap(image)
        except Exception as e:
            raise ImageDecodeError(f"Cannot decode image payload: {e}") from e

    def draw_image(self, doc, page_index, x, y, width, height, image):
        self.decode_image(image)
        page = doc[page_index]
        page.insert_image(self._rect(page, x, y, width, height), stream=image,
                          keep_proportion=False)

    def save(self, doc: fitz.Document) -> bytes:
        return doc.tobytes(garbage=4, deflate=True)

    def close(self, doc: fitz.Document) -> None:
        doc.close()
