from quillmark.core.annotations import (
    AnnotationStore,
    CheckboxAnnotation,
    SignatureAnnotation,
    TextAnnotation,
)
from quillmark.core.annotations.models import MAX_FONT_SIZE, MIN_FONT_SIZE


def _text(store, page=0, x=10, y=10, text="Hi", font_size=16):
    return TextAnnotation(store.next_id(), page, x, y, text, font_size=font_size)


def test_ids_are_unique(store):
    ids = [store.next_id() for _ in range(50)]
    assert len(set(ids)) == 50


def test_add_rejects_missing_page_and_duplicate_id(store):
    ann = _text(store)
    assert store.add(ann)
    assert not store.add(ann)
    assert not store.add(_text(store, page=2))
    assert not store.add(_text(store, page=-1))
    assert len(store) == 1


def test_undo_removes_newest_first(store):
    added = [_text(store, x=i) for i in range(4)]
    for ann in added:
        store.add(ann)

    assert store.undo_last() is added[-1]
    assert store.undo_last() is added[-2]
    assert list(store) == added[:2]


def test_undo_on_empty_store_is_noop(store):
    assert store.undo_last() is None
    assert len(store) == 0


def test_undo_ignores_moves(store):
    first, second = _text(store), _text(store)
    store.add(first)
    store.add(second)
    store.update_position(first.id, 5, 5)

    assert store.undo_last() is second


def test_undo_clears_selection_of_removed(store):
    ann = _text(store)
    store.add(ann)
    store.select(ann.id)
    store.undo_last()
    assert store.selected_id is None


def test_clear_drops_selection(store):
    for _ in range(5):
        store.add(_text(store))
    store.select(3)
    store.clear()
    assert len(store) == 0
    assert store.selected_id is None


def test_remove_and_unknown_ids(store):
    ann = _text(store)
    store.add(ann)
    store.select(ann.id)

    assert not store.remove(999)
    assert store.remove(ann.id)
    assert store.selected_id is None

    store.update_position(ann.id, 1, 1)
    store.select(ann.id)
    assert store.selected_id is None


def test_font_size_is_clamped():
    assert TextAnnotation(1, 0, 0, 0, "a", font_size=2).font_size == MIN_FONT_SIZE
    assert TextAnnotation(1, 0, 0, 0, "a", font_size=200).font_size == MAX_FONT_SIZE

    store = AnnotationStore(page_count=1)
    ann = _text(store)
    store.add(ann)
    store.update_font_size(ann.id, 1000)
    assert ann.font_size == MAX_FONT_SIZE


def test_signature_size_floors(store):
    sig = SignatureAnnotation(store.next_id(), 0, 0, 0, b"img", width=10, height=5)
    assert (sig.width, sig.height) == (50, 20)

    store.add(sig)
    store.update_size(sig.id, 20, 200)
    assert (sig.width, sig.height) == (50, 200)


def test_update_size_only_touches_signatures(store):
    box = CheckboxAnnotation(store.next_id(), 0, 0, 0)
    store.add(box)
    store.update_size(box.id, 100, 100)
    store.update_font_size(box.id, 30)
    assert box == CheckboxAnnotation(box.id, 0, 0, 0)


def test_signature_repr_hides_image():
    sig = SignatureAnnotation(1, 0, 0, 0, b"\x89PNG" * 1000)
    assert "PNG" not in repr(sig)


def test_hit_testing_prefers_topmost(store):
    bottom = SignatureAnnotation(store.next_id(), 0, 0, 0, b"img", width=100, height=100)
    top = CheckboxAnnotation(store.next_id(), 0, 10, 10)
    store.add(bottom)
    store.add(top)

    assert store.get_annotation_at_point(0, 15, 15) is top
    assert store.get_annotation_at_point(0, 80, 80) is bottom
    assert store.get_annotation_at_point(1, 15, 15) is None


def test_resize_handle_only_for_selected(store):
    sig = SignatureAnnotation(store.next_id(), 0, 0, 0, b"img", width=100, height=50)
    store.add(sig)

    assert store.get_resize_handle_at_point(0, 100, 50) is None
    store.select(sig.id)
    assert store.get_resize_handle_at_point(0, 100, 50) is sig
    assert store.get_resize_handle_at_point(0, 104, 54) is sig
    assert store.get_resize_handle_at_point(0, 90, 40) is None


def test_checkbox_has_no_handle(store):
    box = CheckboxAnnotation(store.next_id(), 0, 0, 0)
    store.add(box)
    store.select(box.id)
    assert store.handle_rect(box) is None


def test_unsaved_changes_tracking(store):
    assert not store.has_unsaved_changes
    store.add(_text(store))
    assert store.has_unsaved_changes
    store.mark_saved()
    assert not store.has_unsaved_changes


def test_pages_with_annotations(store):
    store.add(_text(store, page=1))
    store.add(_text(store, page=0))
    store.add(_text(store, page=1))
    assert store.pages_with_annotations() == [0, 1]
    assert len(store.get_annotations_for_page(1)) == 2


def test_mark_saved_at_older_revision_keeps_later_edits(store):
    first = _text(store)
    store.add(first)
    exported = store.revision

    store.add(_text(store))
    store.mark_saved(exported)
    assert store.has_unsaved_changes

    store.mark_saved()
    assert not store.has_unsaved_changes


def test_every_mutation_bumps_revision(store):
    sig = SignatureAnnotation(store.next_id(), 0, 0, 0, b"img")
    store.add(sig)
    revisions = [store.revision]
    for mutate in (
        lambda: store.update_position(sig.id, 1, 1),
        lambda: store.update_size(sig.id, 100, 100),
        lambda: store.remove(sig.id),
    ):
        mutate()
        revisions.append(store.revision)
    assert revisions == sorted(set(revisions))


def test_reset_is_saved_state(store):
    store.add(_text(store))
    stale = store.revision
    store.reset(3)
    assert not store.has_unsaved_changes

    store.add(_text(store))
    store.mark_saved(stale)
    assert store.has_unsaved_changes
