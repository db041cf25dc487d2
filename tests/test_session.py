import fitz  # PyMuPDF
import pytest

from conftest import RecordingCodec, make_pdf
from quillmark.core import DocumentError, EditingSession, ToolMode
from quillmark.core.document import PDFExporter


def test_load_renders_every_page():
    session = EditingSession()
    pages = session.load_for_editing(make_pdf(2, 200, 100), "two.pdf")

    assert [p.page_number for p in pages] == [1, 2]
    assert (pages[0].width, pages[0].height) == (200, 100)
    assert len(pages[0].samples) == pages[0].stride * pages[0].height
    assert session.page_count == 2
    assert session.store.page_count == 2


def test_load_at_render_scale():
    session = EditingSession(render_scale=2.0)
    pages = session.load_for_editing(make_pdf(1, 200, 100))
    assert (pages[0].width, pages[0].height) == (400, 200)


def test_load_garbage_leaves_session_untouched():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    session.add_checkbox(20, 20)

    with pytest.raises(DocumentError):
        session.load_for_editing(b"not a pdf", confirm=lambda: True)
    assert len(session.store) == 1
    assert session.page_count == 1


def test_declined_reload_keeps_annotations():
    session = EditingSession()
    session.load_for_editing(make_pdf(1), "first.pdf")
    session.add_text("keep", 10, 10)

    assert session.load_for_editing(make_pdf(3), "second.pdf", confirm=lambda: False) is None
    assert session.load_for_editing(make_pdf(3), "second.pdf") is None
    assert session.source_name == "first.pdf"
    assert len(session.store) == 1


def test_confirmed_reload_starts_fresh():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    session.add_text("gone", 10, 10)
    asked = []

    pages = session.load_for_editing(make_pdf(3), confirm=lambda: asked.append(1) or True)

    assert len(pages) == 3
    assert asked == [1]
    assert len(session.store) == 0


def test_add_uses_current_page():
    session = EditingSession()
    session.load_for_editing(make_pdf(2))
    session.controller.set_current_page(1)

    assert session.add_text("p2", 10, 10).page == 1
    assert session.add_checkbox(0, 0, page=0).page == 0


def test_add_signature_selects_it():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    session.controller.set_tool_mode(ToolMode.TEXT)

    sig = session.add_signature(b"img", 150, 60)
    assert session.store.selected_id == sig.id
    assert session.controller.tool_mode == ToolMode.SELECT


def test_save_without_document_raises():
    with pytest.raises(DocumentError):
        EditingSession().save_edited()


def test_save_edited_bakes_and_marks_saved():
    session = EditingSession()
    session.load_for_editing(make_pdf(2))
    session.add_text("Hi", 10, 30, page=0, font_size=12)
    assert session.store.has_unsaved_changes

    data = session.save_edited()

    assert not session.store.has_unsaved_changes
    doc = fitz.open(stream=data, filetype="pdf")
    try:
        assert "Hi" in doc[0].get_text()
    finally:
        doc.close()


def test_save_passes_render_scale_to_exporter():
    codec = RecordingCodec()
    session = EditingSession(exporter=PDFExporter(codec), render_scale=2.0)
    session.load_for_editing(make_pdf(1))
    session.add_checkbox(40, 40, checked=False)

    session.save_edited()
    assert codec.drawing_calls() == [("rect", 0, 20, 792 - 27.5, 7.5, 7.5)]


def test_snapshot_is_independent():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    ann = session.add_text("Hi", 10, 10)

    snapshot = session.snapshot_annotations()
    ann.x = 500
    assert snapshot[0].x == 10
    assert snapshot[0] is not ann


def test_undo_delete_and_clear():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    first = session.add_checkbox(0, 0)
    second = session.add_checkbox(30, 30)

    session.select_annotation(first.id)
    assert session.delete_selected()
    session.undo_last()
    assert len(session.store) == 0

    session.add_checkbox(0, 0)
    session.clear_all()
    assert len(session.store) == 0
    assert second not in session.store.annotations


def test_edits_during_export_stay_unsaved():
    session = EditingSession()
    session.load_for_editing(make_pdf(1))
    session.add_text("Hi", 10, 30)

    revision = session.store.revision
    snapshot = session.snapshot_annotations()
    session.add_checkbox(20, 20)

    session.exporter.export(session.source, snapshot)
    session.store.mark_saved(revision)
    assert session.store.has_unsaved_changes
