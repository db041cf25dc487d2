import pytest

from quillmark.core.annotations import CheckboxAnnotation, SignatureAnnotation, TextAnnotation, ToolMode
from quillmark.core.interaction import (
    Dragging,
    Idle,
    InteractionController,
    Key,
    Resizing,
    TextEntryPending,
    round_half_up,
)


class Events:
    def __init__(self, controller):
        self.requested = []
        self.closed = 0
        self.changed = 0
        controller.on_text_entry_requested = lambda *args: self.requested.append(args)
        controller.on_text_entry_closed = self._closed
        controller.on_changed = self._changed

    def _closed(self):
        self.closed += 1

    def _changed(self):
        self.changed += 1


@pytest.fixture
def events(controller):
    return Events(controller)


# Text entry

def test_text_click_opens_entry_then_commits(controller, store, events):
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(0, 100, 200)

    assert controller.interaction == TextEntryPending(0, 100, 200)
    assert events.requested == [(0, 100, 200)]

    ann = controller.commit_text("  Hi ")
    assert isinstance(ann, TextAnnotation)
    assert (ann.page, ann.x, ann.y, ann.text, ann.font_size) == (0, 100, 200, "Hi", 16)
    assert list(store) == [ann]
    assert controller.interaction == Idle()
    assert events.closed == 1


def test_text_uses_session_defaults(controller):
    controller.set_text_defaults(24, (255, 0, 0))
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(1, 5, 5)
    ann = controller.commit_text("red")
    assert (ann.page, ann.font_size, ann.color) == (1, 24, (255, 0, 0))


def test_escape_cancels_text_entry(controller, store, events):
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(0, 10, 10)

    assert controller.key_press(Key.ESCAPE)
    assert controller.interaction == Idle()
    assert len(store) == 0
    assert events.closed == 1


def test_blank_text_creates_nothing(controller, store):
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(0, 10, 10)
    assert controller.commit_text("   ") is None
    assert len(store) == 0
    assert controller.interaction == Idle()


def test_commit_without_pending_entry_is_ignored(controller, store):
    assert controller.commit_text("Hi") is None
    assert len(store) == 0


def test_press_while_text_pending_is_ignored(controller, store):
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(0, 10, 10)
    controller.pointer_down(0, 300, 300)
    assert controller.interaction == TextEntryPending(0, 10, 10)


def test_mode_switch_closes_text_entry(controller, events):
    controller.set_tool_mode(ToolMode.TEXT)
    controller.pointer_down(0, 10, 10)
    controller.set_tool_mode(ToolMode.SELECT)

    assert controller.interaction == Idle()
    assert events.closed == 1


# Checkbox placement

def test_checkbox_click_places_checked_box(controller, store):
    controller.set_tool_mode(ToolMode.CHECKBOX)
    controller.pointer_down(1, 20, 20)
    controller.pointer_down(1, 20, 20)

    assert len(store) == 2
    first = store.annotations[0]
    assert isinstance(first, CheckboxAnnotation)
    assert (first.page, first.x, first.y, first.checked) == (1, 20, 20, True)
    assert store.annotations[0].id != store.annotations[1].id
    assert controller.tool_mode == ToolMode.CHECKBOX


def test_press_outside_loaded_pages_is_ignored(controller, store):
    controller.set_tool_mode(ToolMode.CHECKBOX)
    controller.pointer_down(5, 20, 20)
    assert len(store) == 0


# Selection and dragging

def test_first_press_selects_second_press_drags(controller, store, capture):
    box = controller.add_checkbox(0, 20, 20)

    controller.pointer_down(0, 25, 25, capture)
    assert store.selected_id == box.id
    assert controller.interaction == Idle()
    assert capture.acquired == 0

    controller.pointer_down(0, 25, 25, capture)
    assert controller.interaction == Dragging(box.id, 5, 5)
    assert capture.acquired == 1


def test_drag_tracks_pointer_minus_offset(controller, store, capture):
    box = controller.add_checkbox(0, 20, 20)
    controller.select_annotation(box.id)
    controller.pointer_down(0, 25, 25, capture)

    controller.pointer_move(35, 45)
    assert (box.x, box.y) == (30, 40)
    controller.pointer_move(40, 50)
    assert (box.x, box.y) == (35, 45)
    controller.pointer_move(40, 50)
    assert (box.x, box.y) == (35, 45)

    controller.pointer_up()
    assert controller.interaction == Idle()
    assert capture.released == 1

    controller.pointer_move(100, 100)
    assert (box.x, box.y) == (35, 45)


def test_press_on_empty_canvas_deselects(controller, store):
    box = controller.add_checkbox(0, 20, 20)
    controller.select_annotation(box.id)
    controller.pointer_down(0, 300, 300)
    assert store.selected_id is None


def test_move_without_interaction_does_nothing(controller):
    box = controller.add_checkbox(0, 20, 20)
    controller.pointer_move(100, 100)
    controller.pointer_up()
    assert (box.x, box.y) == (20, 20)


def test_mode_switch_during_drag_releases_capture(controller, store, capture):
    box = controller.add_checkbox(0, 20, 20)
    controller.select_annotation(box.id)
    controller.pointer_down(0, 25, 25, capture)

    controller.set_tool_mode(ToolMode.TEXT)
    assert controller.interaction == Idle()
    assert store.selected_id is None
    assert (capture.acquired, capture.released) == (1, 1)

    controller.pointer_up()
    assert capture.released == 1


# Resizing

def test_signature_resize_from_handle(controller, store, capture):
    sig = controller.add_signature(b"img", 150, 60, x=50, y=50)
    assert store.selected_id == sig.id

    # bottom-right corner is the handle centre
    controller.pointer_down(0, 200, 110, capture)
    assert isinstance(controller.interaction, Resizing)

    controller.pointer_move(230, 120)
    assert (sig.width, sig.height) == (180, 70)
    assert (sig.x, sig.y) == (50, 50)

    controller.pointer_move(100, 50)
    assert (sig.width, sig.height) == (50, 20)

    controller.pointer_up()
    assert capture.released == 1


def test_text_resize_scales_font(controller, store):
    ann = controller.add_text(0, 10, 10, "Hi", font_size=16)
    controller.select_annotation(ann.id)
    x1, y1 = store.bounds(ann)[2:]

    controller.pointer_down(0, x1, y1)
    assert controller.interaction == Resizing(ann.id, x1, y1, start_font_size=16)

    controller.pointer_move(x1 + 50, y1)
    assert ann.font_size == 24

    # scale factor 6.0 is outside (0.3, 5.0): ignored
    controller.pointer_move(x1 + 500, y1)
    assert ann.font_size == 24

    controller.pointer_move(x1 - 75, y1)
    assert ann.font_size == 24

    controller.pointer_move(x1 - 50, y1)
    assert ann.font_size == 8


def test_round_half_up():
    assert round_half_up(20.5) == 21
    assert round_half_up(20.49) == 20
    assert round_half_up(4.5) == 5


# Signatures and actions

def test_signature_is_one_shot(controller, store):
    controller.set_tool_mode(ToolMode.CHECKBOX)
    controller.set_current_page(1)
    sig = controller.add_signature(b"img", 150, 60)

    assert isinstance(sig, SignatureAnnotation)
    assert sig.page == 1
    assert (sig.x, sig.y) == (50, 50)
    assert controller.tool_mode == ToolMode.SELECT
    assert store.selected_id == sig.id


def test_empty_signature_is_rejected(controller, store):
    assert controller.add_signature(b"", 150, 60) is None
    assert len(store) == 0


def test_delete_key_removes_selected(controller, store):
    box = controller.add_checkbox(0, 20, 20)
    assert not controller.key_press(Key.DELETE)

    controller.select_annotation(box.id)
    assert controller.key_press(Key.DELETE)
    assert len(store) == 0
    assert store.selected_id is None


def test_clear_all_with_five_annotations(controller, store):
    for i in range(5):
        controller.add_checkbox(0, i * 20, 20)
    controller.select_annotation(store.annotations[2].id)

    controller.clear_all()
    assert len(store) == 0
    assert store.selected_id is None


def test_undo_last(controller, store):
    first = controller.add_checkbox(0, 0, 0)
    controller.add_text(0, 10, 10, "x")
    controller.undo_last()
    assert list(store) == [first]


def test_set_current_page_bounds(controller):
    controller.set_current_page(1)
    controller.set_current_page(7)
    assert controller.state.current_page == 1


def test_reset_binds_new_page_count(store):
    controller = InteractionController(store)
    controller.add_checkbox(0, 0, 0)
    controller.set_current_page(1)

    controller.reset(3)
    assert len(store) == 0
    assert store.page_count == 3
    assert controller.state.current_page == 0
