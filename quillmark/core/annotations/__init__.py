"""
Annotation model and store.
"""
from .models import (
    Annotation,
    CheckboxAnnotation,
    SignatureAnnotation,
    TextAnnotation,
    ToolMode,
)
from .store import AnnotationStore

__all__ = [
    'Annotation',
    'TextAnnotation',
    'CheckboxAnnotation',
    'SignatureAnnotation',
    'ToolMode',
    'AnnotationStore'
]
