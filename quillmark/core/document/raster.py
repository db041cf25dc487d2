"""
Page raster provider.
"""
from dataclasses import dataclass
from typing import List

import fitz  # PyMuPDF

from ..errors import DocumentError


@dataclass(frozen=True)
class PageRaster:
    """A rendered page. Never modified after rendering."""

    page_number: int  # 1-based
    width: int  # pixels
    height: int  # pixels
    stride: int
    samples: bytes  # RGB888

    @property
    def page_index(self) -> int:
        return self.page_number - 1


def render_page(doc: fitz.Document, page_index: int, scale: float = 1.0) -> PageRaster:
    """
    Render a single page of the PDF to an RGB raster.

    Args:
        doc: Open PyMuPDF document
        page_index: 0-based index of the page to render
        scale: Pixels per PDF point

    Raises:
        DocumentError: if the page cannot be rendered
    """
    try:
        page = doc.load_page(page_index)
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    except Exception as e:
        raise DocumentError(f"Error rendering page {page_index + 1}: {e}") from e

    return PageRaster(
        page_number=page_index + 1,
        width=pix.width,
        height=pix.height,
        stride=pix.stride,
        samples=bytes(pix.samples),
    )


def render_pages(doc: fitz.Document, scale: float = 1.0) -> List[PageRaster]:
    """Render every page, one after another."""
    return [render_page(doc, index, scale) for index in range(doc.page_count)]
