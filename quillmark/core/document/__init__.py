"""
PDF document handling: codec, rendering, baking and toolkit operations.
"""
from .codec import DocumentCodec, PdfCodec
from .pdf_exporter import PDFExporter
from .raster import PageRaster, render_page, render_pages

__all__ = [
    "DocumentCodec",
    "PdfCodec",
    "PDFExporter",
    "PageRaster",
    "render_page",
    "render_pages",
]
