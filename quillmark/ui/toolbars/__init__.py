"""
Toolbar components for the editor window.
"""
from .editor_toolbar import EditorToolbar

__all__ = ['EditorToolbar']
