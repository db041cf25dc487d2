from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QButtonGroup, QColorDialog, QFrame, QHBoxLayout, QLabel, QSpinBox, QToolButton
)

from quillmark.core import ToolMode
from quillmark.core.annotations.models import MAX_FONT_SIZE, MIN_FONT_SIZE


class EditorToolbar(QFrame):
    """Tool modes, text defaults and annotation actions."""

    tool_selected = pyqtSignal(object)  # ToolMode
    text_defaults_changed = pyqtSignal(int, tuple)  # font size, RGB
    signature_requested = pyqtSignal()
    undo_requested = pyqtSignal()
    delete_requested = pyqtSignal()
    clear_requested = pyqtSignal()
    save_requested = pyqtSignal()

    def __init__(self, font_size: int = 16, color=(0, 0, 0), parent=None):
        super().__init__(parent)
        self.setObjectName("EditorToolbar")
        self.current_color = tuple(color)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(6)

        # Tool modes
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons = {}
        for mode, label, tip in (
            (ToolMode.SELECT, "Select", "Select, move and resize (V)"),
            (ToolMode.TEXT, "Text", "Click to place text (T)"),
            (ToolMode.CHECKBOX, "Checkbox", "Click to place a checkbox (C)"),
        ):
            button = self._button(label, tip)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, m=mode: self.tool_selected.emit(m))
            self.mode_group.addButton(button)
            self.mode_buttons[mode] = button
            layout.addWidget(button)
        self.mode_buttons[ToolMode.SELECT].setChecked(True)

        layout.addSpacing(12)

        # Text defaults
        layout.addWidget(QLabel("Size:", self))
        self.size_spin = QSpinBox(self)
        self.size_spin.setRange(MIN_FONT_SIZE, MAX_FONT_SIZE)
        self.size_spin.setValue(font_size)
        self.size_spin.valueChanged.connect(self._emit_text_defaults)
        layout.addWidget(self.size_spin)

        self.color_button = self._button("", "Text color")
        self.color_button.setFixedSize(28, 28)
        self.color_button.clicked.connect(self._choose_color)
        self._update_color_button()
        layout.addWidget(self.color_button)

        layout.addSpacing(12)

        for label, tip, signal in (
            ("Signature", "Add a signature", self.signature_requested),
            ("Undo", "Remove the last added annotation (Ctrl+Z)", self.undo_requested),
            ("Delete", "Delete the selected annotation (Del)", self.delete_requested),
            ("Clear All", "Remove every annotation", self.clear_requested),
        ):
            button = self._button(label, tip)
            button.clicked.connect(signal.emit)
            layout.addWidget(button)

        layout.addStretch()

        save_button = self._button("Save PDF", "Export the annotated PDF (Ctrl+S)")
        save_button.clicked.connect(self.save_requested.emit)
        save_button.setStyleSheet("""
            QToolButton {
                background-color: #4a9eff;
                color: white;
                border: none;
                border-radius: 4px;
                padding: 0 12px;
                font-weight: bold;
            }
            QToolButton:hover {
                background-color: #3a8eef;
            }
            QToolButton:pressed {
                background-color: #2a7edf;
            }
        """)
        layout.addWidget(save_button)

    def _button(self, text: str, tooltip: str) -> QToolButton:
        button = QToolButton(self)
        button.setText(text)
        button.setToolTip(tooltip)
        button.setFixedHeight(28)
        return button

    def set_tool_mode(self, mode: ToolMode):
        """Reflect a mode change that did not come from the toolbar."""
        self.mode_buttons[mode].setChecked(True)

    def _choose_color(self):
        """Open color picker dialog."""
        initial_color = QColor(*self.current_color)
        color = QColorDialog.getColor(initial_color, self, "Choose Text Color")

        if color.isValid():
            self.current_color = (color.red(), color.green(), color.blue())
            self._update_color_button()
            self._emit_text_defaults()

    def _update_color_button(self):
        """Update the color button to show the current color."""
        r, g, b = self.current_color
        self.color_button.setStyleSheet(f"""
            QToolButton {{
                background-color: rgb({r}, {g}, {b});
                border: 2px solid #555555;
                border-radius: 4px;
            }}
            QToolButton:hover {{
                border: 2px solid #777777;
            }}
        """)

    def _emit_text_defaults(self, *_):
        self.text_defaults_changed.emit(self.size_spin.value(), self.current_color)
