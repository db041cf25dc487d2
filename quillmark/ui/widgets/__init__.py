"""
Custom widgets for page display and annotation editing.
"""
from .page_canvas import InlineTextEdit, PageCanvas, measure_text

__all__ = ['InlineTextEdit', 'PageCanvas', 'measure_text']
