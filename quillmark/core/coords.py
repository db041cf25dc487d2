"""
Conversion between overlay space and document space.

Overlay space is the rendered raster: origin top-left, y down.
Document space is the PDF page: origin bottom-left, y up.

Both share the left edge, so only y is flipped. No unit conversion
happens here; callers scale values to document units first.
"""
from typing import Tuple


def to_document_space(x: float, y: float, page_height: float) -> Tuple[float, float]:
    return x, page_height - y


def to_overlay_space(x: float, y: float, page_height: float) -> Tuple[float, float]:
    return x, page_height - y


def anchored_document_y(y: float, height: float, page_height: float) -> float:
    """
    Document-space y of the bottom edge of an object whose overlay top edge
    is ``y``.
    """
    return page_height - y - height


def scale_point(x: float, y: float, factor: float) -> Tuple[float, float]:
    return x * factor, y * factor
