"""
Ordered annotation collection with selection and creation-only undo.
"""
import itertools
import logging
from typing import Callable, Iterator, List, Optional, Tuple

from .models import (
    CHECKBOX_SIZE,
    Annotation,
    CheckboxAnnotation,
    RESIZABLE_TYPES,
    SignatureAnnotation,
    TextAnnotation,
    clamp_font_size,
    clamp_signature_size,
)

log = logging.getLogger(__name__)

HANDLE_SIZE = 10

TextMeasure = Callable[[str, int], Tuple[float, float]]


def approximate_text_size(text: str, font_size: int) -> Tuple[float, float]:
    """Rough Helvetica box for ``text``; good enough for hit testing."""
    return 0.6 * font_size * len(text), 1.2 * font_size


class AnnotationStore:
    """
    Owns every annotation of the editing session.

    List order is both z-order (later entries are drawn on top) and undo
    order. Only creation is undoable: moving or resizing an annotation does
    not push anything, so ``undo_last`` always removes the newest annotation
    regardless of what was edited since.

    Mutations that name an unknown id are silent no-ops.
    """

    def __init__(self, page_count: int = 0):
        self.annotations: List[Annotation] = []
        self.selected_id: Optional[int] = None
        self.page_count = page_count
        # Bumped by every mutation; saved_revision is the one last written out
        self.revision = 0
        self.saved_revision = 0
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self.annotations)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self.annotations)

    def next_id(self) -> int:
        """Return a fresh identifier, unique for the lifetime of the store."""
        return next(self._ids)

    def reset(self, page_count: int) -> None:
        """Drop every annotation and bind the store to a new page set."""
        self.annotations.clear()
        self.selected_id = None
        self.page_count = page_count
        self.revision += 1
        self.saved_revision = self.revision

    # Collection

    def add(self, annotation: Annotation) -> bool:
        """
        Append an annotation.

        Returns:
            False if the annotation's page is outside the loaded page set
            or its id is already taken
        """
        if not 0 <= annotation.page < self.page_count:
            log.debug("Rejected annotation on page %s of %s", annotation.page, self.page_count)
            return False
        if self.get(annotation.id) is not None:
            log.debug("Rejected duplicate annotation id %s", annotation.id)
            return False

        self.annotations.append(annotation)
        self.revision += 1
        return True

    def undo_last(self) -> Optional[Annotation]:
        """Remove and return the most recently added annotation."""
        if not self.annotations:
            return None

        removed = self.annotations.pop()
        if self.selected_id == removed.id:
            self.selected_id = None
        self.revision += 1
        return removed

    def remove(self, annotation_id: int) -> bool:
        annotation = self.get(annotation_id)
        if annotation is None:
            log.debug("Ignoring removal of unknown annotation %s", annotation_id)
            return False

        self.annotations.remove(annotation)
        if self.selected_id == annotation_id:
            self.selected_id = None
        self.revision += 1
        return True

    def clear(self) -> None:
        if self.annotations:
            self.revision += 1
        self.annotations.clear()
        self.selected_id = None

    @property
    def has_unsaved_changes(self) -> bool:
        return self.revision != self.saved_revision

    def mark_saved(self, revision: Optional[int] = None) -> None:
        """
        Record that the annotations as of ``revision`` were written out.

        Edits made after that revision stay unsaved.
        """
        self.saved_revision = self.revision if revision is None else revision

    # Lookup

    def get(self, annotation_id: Optional[int]) -> Optional[Annotation]:
        for annotation in self.annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    @property
    def selected(self) -> Optional[Annotation]:
        return self.get(self.selected_id)

    def get_annotations_for_page(self, page_index: int) -> List[Annotation]:
        return [ann for ann in self.annotations if ann.page == page_index]

    def pages_with_annotations(self) -> List[int]:
        return sorted({ann.page for ann in self.annotations})

    # Mutation

    def select(self, annotation_id: Optional[int]) -> None:
        if annotation_id is not None and self.get(annotation_id) is None:
            log.debug("Ignoring selection of unknown annotation %s", annotation_id)
            return
        self.selected_id = annotation_id

    def update_position(self, annotation_id: int, dx: float, dy: float) -> None:
        """Shift an annotation. Positions are not clamped to the page."""
        annotation = self.get(annotation_id)
        if annotation is None:
            log.debug("Ignoring move of unknown annotation %s", annotation_id)
            return
        annotation.x += dx
        annotation.y += dy
        self.revision += 1

    def update_size(self, annotation_id: int, width: float, height: float) -> None:
        annotation = self.get(annotation_id)
        if not isinstance(annotation, SignatureAnnotation):
            return
        annotation.width, annotation.height = clamp_signature_size(width, height)
        self.revision += 1

    def update_font_size(self, annotation_id: int, font_size: float) -> None:
        annotation = self.get(annotation_id)
        if not isinstance(annotation, TextAnnotation):
            return
        annotation.font_size = clamp_font_size(font_size)
        self.revision += 1

    # Hit testing

    def bounds(self, annotation: Annotation,
               measure: TextMeasure = approximate_text_size) -> Tuple[float, float, float, float]:
        """
        Get the overlay-space box of an annotation.

        Returns:
            Tuple of (x0, y0, x1, y1)
        """
        if isinstance(annotation, TextAnnotation):
            width, height = measure(annotation.text, annotation.font_size)
        elif isinstance(annotation, SignatureAnnotation):
            width, height = annotation.width, annotation.height
        else:
            width = height = CHECKBOX_SIZE
        return annotation.x, annotation.y, annotation.x + width, annotation.y + height

    def handle_rect(self, annotation: Annotation,
                    measure: TextMeasure = approximate_text_size) -> Optional[Tuple[float, float, float, float]]:
        """Box of the bottom-right resize handle, or None for fixed-size types."""
        if not isinstance(annotation, RESIZABLE_TYPES):
            return None
        _, _, x1, y1 = self.bounds(annotation, measure)
        half = HANDLE_SIZE / 2
        return x1 - half, y1 - half, x1 + half, y1 + half

    def get_annotation_at_point(self, page_index: int, x: float, y: float,
                                measure: TextMeasure = approximate_text_size) -> Optional[Annotation]:
        """Return the topmost annotation under the point."""
        for annotation in reversed(self.get_annotations_for_page(page_index)):
            x0, y0, x1, y1 = self.bounds(annotation, measure)
            if x0 <= x <= x1 and y0 <= y <= y1:
                return annotation
        return None

    def get_resize_handle_at_point(self, page_index: int, x: float, y: float,
                                   measure: TextMeasure = approximate_text_size) -> Optional[Annotation]:
        """Return the selected annotation if the point lies on its resize handle."""
        selected = self.selected
        if selected is None or selected.page != page_index:
            return None

        rect = self.handle_rect(selected, measure)
        if rect is None:
            return None
        x0, y0, x1, y1 = rect
        if x0 <= x <= x1 and y0 <= y <= y1:
            return selected
        return None
