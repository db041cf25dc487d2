"""
Pointer/keyboard state machine for the annotation overlay.

The controller owns the session state and is the only code path that
mutates the annotation store in response to user input. Hosts (the Qt
page canvas, or tests) feed it pointer and key events in overlay
coordinates and repaint when ``on_changed`` fires.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from .annotations.models import (
    RGB,
    Annotation,
    CheckboxAnnotation,
    SignatureAnnotation,
    TextAnnotation,
    ToolMode,
    clamp_color,
    clamp_font_size,
)
from .annotations.store import AnnotationStore, TextMeasure, approximate_text_size

log = logging.getLogger(__name__)

# Text resize maps horizontal drag to a scale factor 1 + dx / TEXT_RESIZE_SPAN.
TEXT_RESIZE_SPAN = 100.0
MIN_TEXT_SCALE = 0.3
MAX_TEXT_SCALE = 5.0


# ==============================================================================
# Interaction states
# ==============================================================================


@dataclass(frozen=True)
class Idle:
    """No interaction in progress. Placement modes are Idle plus a tool mode."""


@dataclass(frozen=True)
class TextEntryPending:
    """A text box is open at (x, y) waiting for the user to type."""

    page: int
    x: float
    y: float


@dataclass(frozen=True)
class Dragging:
    """Moving the selected annotation; the offset is pointer minus origin."""

    annotation_id: int
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class Resizing:
    """Resizing the selected annotation from its bottom-right handle."""

    annotation_id: int
    start_x: float
    start_y: float
    start_width: float = 0.0
    start_height: float = 0.0
    start_font_size: int = 0


InteractionState = Union[Idle, TextEntryPending, Dragging, Resizing]


class Key(Enum):
    ENTER = "enter"
    ESCAPE = "escape"
    DELETE = "delete"


@dataclass
class SessionState:
    """Per-session editor state held by the controller."""

    current_page: int = 0
    tool_mode: ToolMode = ToolMode.SELECT
    font_size: int = 16
    color: RGB = (0, 0, 0)
    interaction: InteractionState = field(default_factory=Idle)


class PointerCapture:
    """
    Routes move and release events to the controller.

    ``acquire`` is called when a drag or resize starts and ``release``
    exactly once when it ends. Hosts override both; the base class is a
    no-op for hosts that always deliver move events.
    """

    def acquire(self) -> None:
        pass

    def release(self) -> None:
        pass


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class InteractionController:
    """Translate pointer and key events into annotation store mutations."""

    def __init__(self, store: AnnotationStore, state: Optional[SessionState] = None,
                 measure: TextMeasure = approximate_text_size):
        self.store = store
        self.state = state or SessionState()
        self.measure = measure

        # Host callbacks
        self.on_changed: Optional[Callable[[], None]] = None
        self.on_text_entry_requested: Optional[Callable[[int, float, float], None]] = None
        self.on_text_entry_closed: Optional[Callable[[], None]] = None

        self._capture: Optional[PointerCapture] = None

    @property
    def interaction(self) -> InteractionState:
        return self.state.interaction

    @property
    def tool_mode(self) -> ToolMode:
        return self.state.tool_mode

    # Session state

    def set_tool_mode(self, mode: ToolMode) -> None:
        """Switch tool. Always drops the selection and any pending interaction."""
        self._end_interaction()
        self.state.tool_mode = mode
        self.store.select(None)
        self._notify()

    def set_current_page(self, page_index: int) -> None:
        if not 0 <= page_index < self.store.page_count:
            return
        if page_index != self.state.current_page:
            self._end_interaction()
            self.state.current_page = page_index
            self._notify()

    def set_text_defaults(self, font_size: Optional[int] = None, color: Optional[RGB] = None) -> None:
        if font_size is not None:
            self.state.font_size = clamp_font_size(font_size)
        if color is not None:
            self.state.color = clamp_color(color)

    def reset(self, page_count: int) -> None:
        """Forget all annotations and bind to a freshly loaded page set."""
        self._end_interaction()
        self.store.reset(page_count)
        self.state.current_page = 0
        self._notify()

    # Pointer events

    def pointer_down(self, page: int, x: float, y: float,
                     capture: Optional[PointerCapture] = None) -> None:
        """
        Handle a primary-button press on a page.

        Args:
            page: 0-based page index the press landed on
            x, y: Overlay coordinates of the press
            capture: Host hook used if the press starts a drag or resize
        """
        if not isinstance(self.state.interaction, Idle):
            # A pending text entry is committed by the host on focus loss;
            # stray presses during drag/resize are ignored.
            return
        if not 0 <= page < self.store.page_count:
            return

        self.state.current_page = page
        mode = self.state.tool_mode

        if mode == ToolMode.TEXT:
            self.state.interaction = TextEntryPending(page, x, y)
            if self.on_text_entry_requested:
                self.on_text_entry_requested(page, x, y)
            self._notify()

        elif mode == ToolMode.CHECKBOX:
            self.add_checkbox(page, x, y)

        else:
            self._select_press(page, x, y, capture)

    def _select_press(self, page: int, x: float, y: float,
                      capture: Optional[PointerCapture]) -> None:
        handle_target = self.store.get_resize_handle_at_point(page, x, y, self.measure)
        if handle_target is not None:
            self._begin_resize(handle_target, x, y, capture)
            return

        target = self.store.get_annotation_at_point(page, x, y, self.measure)
        if target is None:
            self.store.select(None)
        elif target.id == self.store.selected_id:
            self._begin(Dragging(target.id, x - target.x, y - target.y), capture)
        else:
            self.store.select(target.id)
        self._notify()

    def _begin_resize(self, target: Annotation, x: float, y: float,
                      capture: Optional[PointerCapture]) -> None:
        if isinstance(target, SignatureAnnotation):
            state = Resizing(target.id, x, y, start_width=target.width, start_height=target.height)
        elif isinstance(target, TextAnnotation):
            state = Resizing(target.id, x, y, start_font_size=target.font_size)
        else:
            return
        self._begin(state, capture)

    def _begin(self, state: InteractionState, capture: Optional[PointerCapture]) -> None:
        self._capture = capture or PointerCapture()
        self._capture.acquire()
        self.state.interaction = state

    def pointer_move(self, x: float, y: float) -> None:
        interaction = self.state.interaction

        if isinstance(interaction, Dragging):
            target = self.store.get(interaction.annotation_id)
            if target is None:
                self._end_interaction()
                return
            # Incremental delta since the last move; coalesced events still
            # land on pointer - offset.
            dx = (x - interaction.offset_x) - target.x
            dy = (y - interaction.offset_y) - target.y
            self.store.update_position(target.id, dx, dy)
            self._notify()

        elif isinstance(interaction, Resizing):
            target = self.store.get(interaction.annotation_id)
            if target is None:
                self._end_interaction()
                return
            self._apply_resize(interaction, target, x, y)
            self._notify()

    def _apply_resize(self, interaction: Resizing, target: Annotation, x: float, y: float) -> None:
        dx = x - interaction.start_x
        dy = y - interaction.start_y

        if isinstance(target, SignatureAnnotation):
            self.store.update_size(target.id,
                                   interaction.start_width + dx,
                                   interaction.start_height + dy)

        elif isinstance(target, TextAnnotation):
            scale = 1 + dx / TEXT_RESIZE_SPAN
            if not MIN_TEXT_SCALE < scale < MAX_TEXT_SCALE:
                return
            self.store.update_font_size(target.id,
                                        round_half_up(interaction.start_font_size * scale))

    def pointer_up(self) -> None:
        if isinstance(self.state.interaction, (Dragging, Resizing)):
            self._end_interaction()
            self._notify()

    # Keyboard and text entry

    def key_press(self, key: Key) -> bool:
        """
        Handle a key press.

        Returns:
            True if the key was consumed
        """
        if key == Key.DELETE:
            return self.delete_selected()
        if key == Key.ESCAPE and isinstance(self.state.interaction, TextEntryPending):
            self.cancel_text()
            return True
        return False

    def commit_text(self, text: str) -> Optional[TextAnnotation]:
        """Finish a pending text entry. Blank text discards it."""
        pending = self.state.interaction
        if not isinstance(pending, TextEntryPending):
            return None

        self._end_interaction()
        annotation = self.add_text(pending.page, pending.x, pending.y, text)
        if annotation is None:
            self._notify()
        return annotation

    def cancel_text(self) -> None:
        if isinstance(self.state.interaction, TextEntryPending):
            self._end_interaction()
            self._notify()

    # Actions

    def add_text(self, page: int, x: float, y: float, text: str,
                 font_size: Optional[int] = None,
                 color: Optional[RGB] = None) -> Optional[TextAnnotation]:
        """Create a text annotation; blank text is ignored."""
        text = text.strip()
        if not text:
            return None

        annotation = TextAnnotation(
            self.store.next_id(), page, x, y, text,
            font_size=self.state.font_size if font_size is None else font_size,
            color=self.state.color if color is None else color,
        )
        return annotation if self._add(annotation) else None

    def add_checkbox(self, page: int, x: float, y: float,
                     checked: bool = True) -> Optional[CheckboxAnnotation]:
        annotation = CheckboxAnnotation(self.store.next_id(), page, x, y, checked=checked)
        return annotation if self._add(annotation) else None

    def add_signature(self, image: bytes, width: float, height: float,
                      x: float = 50, y: float = 50,
                      page: Optional[int] = None) -> Optional[SignatureAnnotation]:
        """
        Drop a signature and select it so it can be dragged into place.

        Signature is a one-shot action: the tool mode switches to select.
        """
        if not image:
            return None

        self.set_tool_mode(ToolMode.SELECT)
        page = self.state.current_page if page is None else page
        annotation = SignatureAnnotation(self.store.next_id(), page,
                                         x, y, image, width=width, height=height)
        if not self._add(annotation):
            return None
        self.store.select(annotation.id)
        self._notify()
        return annotation

    def select_annotation(self, annotation_id: Optional[int]) -> None:
        self.store.select(annotation_id)
        self._notify()

    def delete_selected(self) -> bool:
        selected_id = self.store.selected_id
        if selected_id is None:
            return False
        self._end_interaction()
        self.store.remove(selected_id)
        self._notify()
        return True

    def undo_last(self) -> Optional[Annotation]:
        self._end_interaction()
        removed = self.store.undo_last()
        self._notify()
        return removed

    def clear_all(self) -> None:
        self._end_interaction()
        self.store.clear()
        self._notify()

    # Internals

    def _add(self, annotation: Annotation) -> bool:
        added = self.store.add(annotation)
        if added:
            log.debug("Added %r", annotation)
        self._notify()
        return added

    def _end_interaction(self) -> None:
        interaction = self.state.interaction
        self.state.interaction = Idle()

        if isinstance(interaction, (Dragging, Resizing)) and self._capture is not None:
            capture, self._capture = self._capture, None
            capture.release()
        elif isinstance(interaction, TextEntryPending) and self.on_text_entry_closed:
            self.on_text_entry_closed()

    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed()
