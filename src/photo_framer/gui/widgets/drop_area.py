"""
Upload area: click to browse, or drag and drop a photo file.
"""
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout

from photo_framer.framing.loading import is_image_content_type, guess_content_type
from photo_framer.gui.styles.theme import get_styles
from photo_framer.gui.utils.icons import MaterialIcons


class DropArea(QFrame):
    """
    Landing page target for the user's photo.

    Emits file_dropped with the local path of a dropped or browsed file.
    Non-image drops emit drop_rejected instead so the window can explain.
    """

    file_dropped = Signal(Path)
    drop_rejected = Signal(str)
    browse_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("dropArea")
        self.setAcceptDrops(True)
        self.setProperty("dragActive", False)
        self.setMinimumSize(360, 260)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(12)

        title = QLabel("Drop your photo here")
        title.setObjectName("mainTitle")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        hint = QLabel("JPG, PNG, WebP or any other image format")
        hint.setObjectName("hintLabel")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(hint)

        self.browse_btn = QPushButton(" Choose Photo")
        self.browse_btn.setIcon(MaterialIcons.upload())
        self.browse_btn.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.browse_btn.clicked.connect(self.browse_requested)
        layout.addWidget(self.browse_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def _set_drag_active(self, active: bool) -> None:
        self.setProperty("dragActive", active)
        # Re-polish so the [dragActive] selector applies
        self.style().unpolish(self)
        self.style().polish(self)

    @staticmethod
    def _first_local_file(event) -> Optional[Path]:
        mime = event.mimeData()
        if not mime.hasUrls():
            return None
        for url in mime.urls():
            if url.isLocalFile():
                return Path(url.toLocalFile())
        return None

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.browse_requested.emit()
        super().mousePressEvent(event)

    def dragEnterEvent(self, event):
        if self._first_local_file(event) is not None:
            event.acceptProposedAction()
            self._set_drag_active(True)
        else:
            event.ignore()

    def dragLeaveEvent(self, event):
        self._set_drag_active(False)
        super().dragLeaveEvent(event)

    def dropEvent(self, event):
        self._set_drag_active(False)
        path = self._first_local_file(event)
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        if not is_image_content_type(guess_content_type(path.name)):
            self.drop_rejected.emit("Please drop a valid image file.")
            return
        self.file_dropped.emit(path)

    def update_theme(self):
        self.browse_btn.setStyleSheet(get_styles().BUTTON_PRIMARY)
        self.browse_btn.setIcon(MaterialIcons.upload())
