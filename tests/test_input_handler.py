import pytest

pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtCore import QEvent, Qt  # noqa: E402
from PyQt5.QtGui import QKeyEvent  # noqa: E402

from quillmark.controllers import UserInputHandler  # noqa: E402
from quillmark.core import Key, ToolMode  # noqa: E402


class FakeController:
    def __init__(self, consumes):
        self.consumes = consumes
        self.keys = []

    def key_press(self, key):
        self.keys.append(key)
        return self.consumes

    def undo(self):
        pass


class FakeWindow:
    def __init__(self, consumes=True):
        self.annotation_controller = FakeController(consumes)
        self.modes = []

    def set_tool_mode(self, mode):
        self.modes.append(mode)


def _press(key, modifiers=Qt.NoModifier):
    return QKeyEvent(QEvent.KeyPress, key, modifiers)


def test_consumed_key_is_accepted(qapp):
    window = FakeWindow(consumes=True)
    event = _press(Qt.Key_Delete)

    UserInputHandler(window).handle_key_press(event)

    assert window.annotation_controller.keys == [Key.DELETE]
    assert event.isAccepted()


def test_unconsumed_key_is_ignored(qapp):
    window = FakeWindow(consumes=False)
    event = _press(Qt.Key_Escape)

    UserInputHandler(window).handle_key_press(event)

    assert window.annotation_controller.keys == [Key.ESCAPE]
    assert not event.isAccepted()


def test_tool_shortcut(qapp):
    window = FakeWindow()
    event = _press(Qt.Key_T)

    UserInputHandler(window).handle_key_press(event)

    assert window.modes == [ToolMode.TEXT]
    assert event.isAccepted()
