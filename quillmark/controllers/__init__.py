"""
Application controllers for managing interactions between UI and core logic.
"""
from .annotation_controller import AnnotationController
from .input_handler import UserInputHandler

__all__ = [
    'AnnotationController',
    'UserInputHandler'
]
