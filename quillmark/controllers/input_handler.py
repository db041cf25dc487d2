from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence

from quillmark.core import Key, ToolMode


# Qt key codes understood by the interaction controller
KEY_MAP = {
    Qt.Key_Delete: Key.DELETE,
    Qt.Key_Backspace: Key.DELETE,
    Qt.Key_Escape: Key.ESCAPE,
    Qt.Key_Return: Key.ENTER,
    Qt.Key_Enter: Key.ENTER,
}

TOOL_SHORTCUTS = {
    Qt.Key_V: ToolMode.SELECT,
    Qt.Key_T: ToolMode.TEXT,
    Qt.Key_C: ToolMode.CHECKBOX,
}


class UserInputHandler:
    """
    Handles keyboard shortcuts for the editor window.
    """
    def __init__(self, main_window):
        """
        Initializes the handler with a reference to the main window.

        Args:
            main_window (MainWindow): A reference to the main application window.
        """
        self.main_window = main_window

    def handle_key_press(self, event):
        """
        Handles key press events for the main window.
        """
        controller = self.main_window.annotation_controller

        if event.matches(QKeySequence.Open):
            self.main_window.open_pdf()
        elif event.matches(QKeySequence.Save):
            self.main_window.save_edited_pdf()
        elif event.matches(QKeySequence.Undo):
            controller.undo()
        elif event.key() in KEY_MAP:
            if not controller.key_press(KEY_MAP[event.key()]):
                event.ignore()
                return
        elif event.key() in TOOL_SHORTCUTS and not event.modifiers():
            self.main_window.set_tool_mode(TOOL_SHORTCUTS[event.key()])
        else:
            event.ignore()
            return
        event.accept()
