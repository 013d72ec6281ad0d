"""
Console widget for displaying pipeline logs.
"""
from datetime import datetime
from typing import Set

from PySide6.QtCore import Slot
from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import (
    QApplication, QFileDialog, QGroupBox, QMenu, QPlainTextEdit, QSizePolicy, QVBoxLayout
)

from photo_framer.gui.styles.theme import Fonts, get_colors
from photo_framer.gui.utils.icons import MaterialIcons

# Log levels hidden from the console by default
# Valid values: "info", "warning", "error", "success"
CONSOLE_SUPPRESSED_LEVELS: Set[str] = set()

MAX_LINES = 1000


class ConsoleWidget(QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Console Log", parent)

        # Can be overridden per instance: console.suppressed_levels = {"info"}
        self.suppressed_levels: Set[str] = CONSOLE_SUPPRESSED_LEVELS.copy()

        self.setMinimumHeight(40)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        self.text_edit.setMaximumBlockCount(MAX_LINES)

        font = QFont(Fonts.MONO_FONT.split(',')[0])
        font.setPointSize(int(Fonts.CONSOLE.replace("pt", "")))
        self.text_edit.setFont(font)
        layout.addWidget(self.text_edit)

        self.format_info = QTextCharFormat()
        self.format_error = QTextCharFormat()
        self.format_warning = QTextCharFormat()
        self.format_success = QTextCharFormat()
        self.update_theme()

    @Slot(str, str)
    def append_log(self, level: str, message: str):
        """Appends a log message with color coding based on level."""
        if level.lower() in self.suppressed_levels:
            return

        fmt = self.format_info
        if level.lower() in ("error", "critical"):
            fmt = self.format_error
        elif level.lower() in ("warning", "warn"):
            fmt = self.format_warning
        elif level.lower() == "success":
            fmt = self.format_success

        cursor = self.text_edit.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        timestamp = datetime.now().strftime("%H:%M:%S")
        cursor.insertText(f"[{timestamp}] [{level.upper()}] {message}\n", fmt)

        self.text_edit.setTextCursor(cursor)
        self.text_edit.ensureCursorVisible()

    def contextMenuEvent(self, event):
        menu = QMenu(self)

        copy_all_action = menu.addAction(MaterialIcons.content_copy(), "Copy All")
        save_action = menu.addAction(MaterialIcons.content_save(), "Save to File...")
        menu.addSeparator()
        clear_action = menu.addAction(MaterialIcons.delete(), "Clear")

        action = menu.exec(event.globalPos())

        if action == copy_all_action:
            QApplication.clipboard().setText(self.text_edit.toPlainText())
        elif action == save_action:
            self._save_to_file()
        elif action == clear_action:
            self.clear()

    def _save_to_file(self):
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Log", "console_log.txt", "Text Files (*.txt);;All Files (*)"
        )
        if filename:
            try:
                with open(filename, 'w', encoding='utf-8') as f:
                    f.write(self.text_edit.toPlainText())
            except OSError as e:
                self.append_log("ERROR", f"Failed to save log: {e}")

    def clear(self):
        self.text_edit.clear()

    def update_theme(self):
        """Update styles when theme changes."""
        C = get_colors()
        self.setStyleSheet(f"""
            QGroupBox {{
                background-color: {C.SURFACE};
                border-top: 1px solid {C.BORDER};
                border-left: none;
                border-right: none;
                border-bottom: none;
                border-radius: 0px;
                margin-top: 24px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 8px;
                padding: 0 4px;
                background-color: {C.BACKGROUND};
                color: {C.TEXT_PRIMARY};
            }}
        """)
        self.text_edit.setStyleSheet(f"""
            QPlainTextEdit {{
                border: none;
                background-color: {C.SURFACE};
                border-radius: 0px;
            }}
        """)

        self.format_info.setForeground(QColor(C.TEXT_PRIMARY))
        self.format_error.setForeground(QColor(C.ERROR))
        self.format_warning.setForeground(QColor(C.WARNING))
        self.format_success.setForeground(QColor(C.SUCCESS))
