import os

import fitz  # PyMuPDF
import pytest

from quillmark.core.annotations import AnnotationStore
from quillmark.core.document.codec import DocumentCodec
from quillmark.core.errors import ImageDecodeError
from quillmark.core.interaction import InteractionController, PointerCapture

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

LETTER = (612.0, 792.0)
PNG_MAGIC = b"\x89PNG"


class RecordingCodec(DocumentCodec):
    """Records every drawing call instead of touching a real PDF."""

    def __init__(self, page_sizes=(LETTER,), fail_on=None):
        self.page_sizes = list(page_sizes)
        self.fail_on = fail_on
        self.calls = []
        self.closed = False

    def open(self, data):
        self.calls.append(("open", data))
        return "doc"

    def page_count(self, doc):
        return len(self.page_sizes)

    def page_size(self, doc, page_index):
        return self.page_sizes[page_index]

    def _record(self, name, *args):
        if name == self.fail_on:
            raise RuntimeError(f"{name} failed")
        self.calls.append((name,) + args)

    def draw_text(self, doc, page_index, x, y, text, font_size, color, font="helv"):
        self._record("text", page_index, x, y, text, font_size, color, font)

    def draw_rect(self, doc, page_index, x, y, width, height, color=(0, 0, 0), border_width=1.0):
        self._record("rect", page_index, x, y, width, height)

    def draw_image(self, doc, page_index, x, y, width, height, image):
        if not image.startswith(PNG_MAGIC):
            raise ImageDecodeError("not a PNG")
        self._record("image", page_index, x, y, width, height)

    def save(self, doc):
        self.calls.append(("save",))
        return b"%PDF-baked"

    def close(self, doc):
        self.closed = True

    def drawing_calls(self):
        return [call for call in self.calls if call[0] in ("text", "rect", "image")]


class RecordingCapture(PointerCapture):
    def __init__(self):
        self.acquired = 0
        self.released = 0

    def acquire(self):
        self.acquired += 1

    def release(self):
        self.released += 1


def make_pdf(page_count=2, width=612, height=792) -> bytes:
    doc = fitz.open()
    for _ in range(page_count):
        doc.new_page(width=width, height=height)
    data = doc.tobytes()
    doc.close()
    return data


def make_png(width=40, height=20) -> bytes:
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.clear_with(200)
    return pix.tobytes("png")


@pytest.fixture
def store():
    return AnnotationStore(page_count=2)


@pytest.fixture
def controller(store):
    return InteractionController(store)


@pytest.fixture
def capture():
    return RecordingCapture()


@pytest.fixture
def png():
    return make_png()


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PyQt5.QtWidgets")
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
