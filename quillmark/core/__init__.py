"""
Core business logic for Quillmark PDF.
"""
from .annotations import (
    Annotation,
    AnnotationStore,
    CheckboxAnnotation,
    SignatureAnnotation,
    TextAnnotation,
    ToolMode,
)
from .errors import DocumentError, ImageDecodeError, QuillmarkError
from .interaction import InteractionController, Key, SessionState
from .session import EditingSession

__all__ = [
    'Annotation',
    'AnnotationStore',
    'CheckboxAnnotation',
    'SignatureAnnotation',
    'TextAnnotation',
    'ToolMode',
    'DocumentError',
    'ImageDecodeError',
    'QuillmarkError',
    'InteractionController',
    'Key',
    'SessionState',
    'EditingSession',
]
