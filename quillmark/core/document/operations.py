"""
Whole-document toolkit operations: merge, split, rotate, convert, compress.

Every operation takes and returns bytes; reading and writing files is up
to the caller.
"""
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import fitz  # PyMuPDF

from ..errors import DocumentError

log = logging.getLogger(__name__)

IMAGE_TYPES = {"png", "jpg", "jpeg"}


@dataclass(frozen=True)
class CompressionResult:
    data: bytes
    original_size: int
    compressed_size: int

    @property
    def reduction(self) -> float:
        """Size reduction in percent; negative if the file grew."""
        if not self.original_size:
            return 0.0
        return (1 - self.compressed_size / self.original_size) * 100


def _open(data: bytes, name: str = "document") -> fitz.Document:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentError(f"Error processing {name}: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise DocumentError(
            f"Error processing {name}: this file is password-protected. "
            "Please try removing the password first."
        )
    return doc


def merge(sources: Sequence[Tuple[str, bytes]]) -> bytes:
    """
    Concatenate every page of every source, in order.

    Args:
        sources: (display name, PDF bytes) pairs

    Raises:
        DocumentError: naming the first source that cannot be read
    """
    merged = fitz.open()
    try:
        for name, data in sources:
            doc = _open(data, name)
            try:
                merged.insert_pdf(doc)
            finally:
                doc.close()
            log.info("Merged %s", name)
        return merged.tobytes(garbage=4, deflate=True)
    finally:
        merged.close()


def split(source: bytes) -> List[bytes]:
    """Return one single-page PDF per page."""
    doc = _open(source)
    try:
        pages = []
        for index in range(doc.page_count):
            single = fitz.open()
            single.insert_pdf(doc, from_page=index, to_page=index)
            pages.append(single.tobytes(garbage=4, deflate=True))
            single.close()
        return pages
    finally:
        doc.close()


def rotate(source: bytes, degrees: int) -> bytes:
    """Set the rotation of every page to ``degrees`` (a multiple of 90)."""
    if degrees % 90:
        raise ValueError(f"Rotation must be a multiple of 90, got {degrees}")

    doc = _open(source)
    try:
        for page in doc:
            page.set_rotation(degrees % 360)
        return doc.tobytes()
    finally:
        doc.close()


def images_to_pdf(images: Sequence[Tuple[str, bytes]]) -> bytes:
    """
    Build a PDF with one page per PNG/JPEG image, sized to the image.

    Files with other extensions are skipped.
    """
    doc = fitz.open()
    try:
        for name, data in images:
            if name.rsplit(".", 1)[-1].lower() not in IMAGE_TYPES:
                log.info("Skipping unsupported image %s", name)
                continue
            try:
                pix = fitz.Pixmap(data)
            except Exception as e:
                raise DocumentError(f"Error processing {name}: {e}") from e

            page = doc.new_page(width=pix.width, height=pix.height)
            page.insert_image(page.rect, stream=data)
        if doc.page_count == 0:
            raise DocumentError("No PNG or JPEG images to convert")
        return doc.tobytes(garbage=4, deflate=True)
    finally:
        doc.close()


def pdf_to_images(source: bytes, scale: float = 2.0) -> List[bytes]:
    """Render each page to PNG bytes."""
    doc = _open(source)
    try:
        matrix = fitz.Matrix(scale, scale)
        return [page.get_pixmap(matrix=matrix, alpha=False).tobytes("png") for page in doc]
    finally:
        doc.close()


def compress(source: bytes) -> CompressionResult:
    """Re-save with unused objects removed and streams deflated."""
    doc = _open(source)
    try:
        data = doc.tobytes(garbage=4, deflate=True, clean=True)
    finally:
        doc.close()
    return CompressionResult(data=data, original_size=len(source), compressed_size=len(data))
