"""
Main Window for the Photo Framer GUI.

Three pages share one window: upload, crop and result. All pixel work runs
on the FramingController's thread pool; results come back through Qt
signals emitted from future callbacks, so slots always run on the GUI
thread and check the session id before touching the UI.
"""
import logging
import queue
from concurrent.futures import Future
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QFileDialog, QHBoxLayout, QLabel, QMainWindow, QMessageBox,
    QProgressBar, QPushButton, QSlider, QSplitter, QStackedWidget, QStatusBar,
    QVBoxLayout, QWidget,
)

from photo_framer import __license__, __version__
from photo_framer.framing import (
    FrameAssetLoader,
    FramingController,
    PipelineCancelled,
    RenderConfig,
    RenderStage,
    SessionState,
)
from photo_framer.framing.loading import guess_content_type, is_image_content_type
from photo_framer.gui.models.settings import SettingsStore
from photo_framer.gui.styles.theme import apply_theme, get_styles
from photo_framer.gui.utils.icons import MaterialIcons
from photo_framer.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler
from photo_framer.gui.utils.paths import get_default_download_dir, get_default_frame_path
from photo_framer.gui.utils.qt_images import pil_to_qpixmap
from photo_framer.gui.widgets.console_widget import ConsoleWidget
from photo_framer.gui.widgets.crop_view import CropView
from photo_framer.gui.widgets.drop_area import DropArea

logger = logging.getLogger(__name__)

PAGE_UPLOAD = 0
PAGE_CROP = 1
PAGE_RESULT = 2

PREVIEW_DISPLAY_SIZE = 420
IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif *.tif *.tiff *.heic);;All Files (*)"


class MainWindow(QMainWindow):
    # Signals to communicate from worker threads to the main thread
    # session_id, result, error_message
    upload_finished = Signal(int, object, object)
    preview_finished = Signal(int, object, object)
    download_finished = Signal(int, object, object)
    # session_id, RenderStage
    stage_reported = Signal(int, object)
    # session_id, SessionState
    state_changed = Signal(int, object)
    # frame error message, or None when the frame loaded
    frame_status = Signal(object, object)

    def __init__(
        self,
        settings: SettingsStore,
        controller: Optional[FramingController] = None,
        config: Optional[RenderConfig] = None,
    ):
        super().__init__()
        self.settings = settings
        self._busy_cursor = False

        self.setWindowTitle("Photo Framer")
        self.resize(900, 760)
        self.setMinimumSize(560, 640)

        # Initialize Logging
        self.log_queue: queue.Queue = queue.Queue()
        self._log_handler = attach_queue_handler(self.log_queue)
        self.log_timer = QTimer(self)
        self.log_timer.timeout.connect(self._drain_log_queue)
        self.log_timer.start(100)

        # Pipeline
        if controller is None:
            frame_path = Path(self.settings.get_frame_path() or get_default_frame_path())
            config = (config or RenderConfig()).with_frame_path(frame_path)
            controller = FramingController(config)
        self.controller = controller
        self.controller.add_stage_listener(lambda sid, stage: self.stage_reported.emit(sid, stage))
        self.controller.add_state_listener(lambda s: self.state_changed.emit(s.session_id, s.state))

        self.upload_finished.connect(self._on_upload_finished)
        self.preview_finished.connect(self._on_preview_finished)
        self.download_finished.connect(self._on_download_finished)
        self.stage_reported.connect(self._on_stage)
        self.state_changed.connect(self._on_state_changed)
        # Queued: the loader may call back synchronously while we are still building
        self.frame_status.connect(self._on_frame_status, Qt.ConnectionType.QueuedConnection)
        self.settings.framePathChanged.connect(self._on_frame_path_changed)

        self._build_menus()
        self._build_ui()
        self._watch_frame(self.controller.frame_loader)

        geometry = self.settings.get_window_geometry()
        if geometry:
            self.restoreGeometry(bytes.fromhex(geometry))

        self._show_page(PAGE_UPLOAD)
        self._update_actions(self.controller.session.state)

    # ─────────────────────────────────────────────────────────────────────────
    # UI construction
    # ─────────────────────────────────────────────────────────────────────────

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("File")

        open_action = QAction("Open Photo...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._browse_for_photo)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        frame_action = QAction(MaterialIcons.frame(), "Choose Frame...", self)
        frame_action.triggered.connect(self._choose_frame)
        file_menu.addAction(frame_action)

        default_frame_action = QAction("Use Default Frame", self)
        default_frame_action.triggered.connect(self._use_default_frame)
        file_menu.addAction(default_frame_action)

        folder_action = QAction(MaterialIcons.folder_open(), "Download Folder...", self)
        folder_action.triggered.connect(self._choose_download_dir)
        file_menu.addAction(folder_action)

        file_menu.addSeparator()

        exit_action = QAction("Quit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        settings_menu = self.menuBar().addMenu("Settings")
        self.dark_mode_action = QAction("Dark Mode", self)
        self.dark_mode_action.setCheckable(True)
        self.dark_mode_action.setChecked(self.settings.get_dark_mode())
        self.dark_mode_action.triggered.connect(self._toggle_theme)
        settings_menu.addAction(self.dark_mode_action)

        help_menu = self.menuBar().addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.title_label = QLabel("Frame Your Photo")
        self.title_label.setObjectName("mainTitle")
        self.title_label.setContentsMargins(24, 16, 24, 8)
        main_layout.addWidget(self.title_label)

        self.splitter = QSplitter(Qt.Orientation.Vertical)
        self.splitter.setChildrenCollapsible(False)

        self.stack = QStackedWidget()
        self.stack.addWidget(self._build_upload_page())
        self.stack.addWidget(self._build_crop_page())
        self.stack.addWidget(self._build_result_page())

        self.console = ConsoleWidget()

        self.splitter.addWidget(self.stack)
        self.splitter.addWidget(self.console)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 0)
        self.splitter.setSizes([99999, 0])
        main_layout.addWidget(self.splitter)

        self.status_bar = QStatusBar()
        self.status_bar.showMessage("Ready")
        self.setStatusBar(self.status_bar)

    def _build_upload_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 24, 24, 24)

        self.drop_area = DropArea()
        self.drop_area.browse_requested.connect(self._browse_for_photo)
        self.drop_area.file_dropped.connect(self._upload_file)
        self.drop_area.drop_rejected.connect(lambda msg: self._show_error("Invalid File", msg))
        layout.addWidget(self.drop_area)
        return page

    def _build_crop_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 8, 24, 24)
        layout.setSpacing(12)

        hint = QLabel("Drag to position, scroll or pinch to zoom")
        hint.setObjectName("hintLabel")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(hint)

        config = self.controller.config
        self.crop_view = CropView(config)
        layout.addWidget(self.crop_view, 1)

        zoom_row = QHBoxLayout()
        self.zoom_out_btn = QPushButton()
        self.zoom_out_btn.setIcon(MaterialIcons.zoom_out())
        self.zoom_out_btn.setToolTip("Zoom out")
        self.zoom_out_btn.clicked.connect(self.crop_view.zoom_out)
        zoom_row.addWidget(self.zoom_out_btn)

        self.zoom_slider = QSlider(Qt.Orientation.Horizontal)
        self.zoom_slider.setRange(round(config.min_zoom * 100), round(config.max_zoom * 100))
        self.zoom_slider.setValue(round(config.default_zoom * 100))
        self.zoom_slider.valueChanged.connect(lambda v: self.crop_view.set_zoom(v / 100))
        zoom_row.addWidget(self.zoom_slider, 1)

        self.zoom_in_btn = QPushButton()
        self.zoom_in_btn.setIcon(MaterialIcons.zoom_in())
        self.zoom_in_btn.setToolTip("Zoom in")
        self.zoom_in_btn.clicked.connect(self.crop_view.zoom_in)
        zoom_row.addWidget(self.zoom_in_btn)

        self.reset_crop_btn = QPushButton(" Reset")
        self.reset_crop_btn.setIcon(MaterialIcons.reset())
        self.reset_crop_btn.clicked.connect(self.crop_view.reset)
        zoom_row.addWidget(self.reset_crop_btn)
        layout.addLayout(zoom_row)

        self.crop_view.zoom_changed.connect(self._sync_zoom_slider)

        button_row = QHBoxLayout()
        self.crop_start_over_btn = QPushButton(" Start Over")
        self.crop_start_over_btn.setIcon(MaterialIcons.refresh())
        self.crop_start_over_btn.clicked.connect(self._start_over)
        button_row.addWidget(self.crop_start_over_btn)
        button_row.addStretch()

        self.confirm_btn = QPushButton(" Frame It")
        self.confirm_btn.setIcon(MaterialIcons.crop())
        self.confirm_btn.clicked.connect(self._confirm_crop)
        button_row.addWidget(self.confirm_btn)
        layout.addLayout(button_row)
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 8, 24, 24)
        layout.setSpacing(12)

        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumSize(PREVIEW_DISPLAY_SIZE, PREVIEW_DISPLAY_SIZE)
        layout.addWidget(self.preview_label, 1)

        self.stage_label = QLabel("Preparing...")
        self.stage_label.setObjectName("hintLabel")
        self.stage_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.stage_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.download_dir_label = QLabel()
        self.download_dir_label.setObjectName("hintLabel")
        self.download_dir_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.download_dir_label)
        self._update_download_dir_label()

        button_row = QHBoxLayout()
        self.result_start_over_btn = QPushButton(" Start Over")
        self.result_start_over_btn.setIcon(MaterialIcons.refresh())
        self.result_start_over_btn.clicked.connect(self._start_over)
        button_row.addWidget(self.result_start_over_btn)

        self.adjust_btn = QPushButton(" Adjust Crop")
        self.adjust_btn.setIcon(MaterialIcons.edit())
        self.adjust_btn.clicked.connect(self._adjust_crop)
        button_row.addWidget(self.adjust_btn)
        button_row.addStretch()

        self.download_btn = QPushButton(" Download")
        self.download_btn.setIcon(MaterialIcons.download())
        self.download_btn.clicked.connect(self._download)
        button_row.addWidget(self.download_btn)
        layout.addLayout(button_row)

        self._apply_button_styles()
        return page

    def _apply_button_styles(self):
        S = get_styles()
        for btn in (self.confirm_btn, self.download_btn):
            btn.setStyleSheet(S.BUTTON_PRIMARY)
        for btn in (
            self.zoom_out_btn, self.zoom_in_btn, self.reset_crop_btn,
            self.crop_start_over_btn, self.result_start_over_btn, self.adjust_btn,
        ):
            btn.setStyleSheet(S.BUTTON_SECONDARY)

    # ─────────────────────────────────────────────────────────────────────────
    # Worker bridging
    # ─────────────────────────────────────────────────────────────────────────

    def _bridge(self, future: Future, signal, session_id: int) -> None:
        """Forward a future's outcome to a signal; stale results are dropped."""
        def done(f: Future):
            try:
                result = f.result()
            except PipelineCancelled:
                logger.debug(f"Discarded result of superseded session {session_id}")
                return
            except Exception as e:
                signal.emit(session_id, None, str(e) or type(e).__name__)
                return
            signal.emit(session_id, result, None)

        future.add_done_callback(done)

    def _is_current(self, session_id: int) -> bool:
        return self.controller.is_current(session_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Upload
    # ─────────────────────────────────────────────────────────────────────────

    def _browse_for_photo(self):
        start_dir = self.settings.get_last_upload_dir() or str(Path.home())
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Photo", start_dir, IMAGE_FILE_FILTER)
        if filename:
            self._upload_file(Path(filename))

    def _upload_file(self, path: Path):
        content_type = guess_content_type(path.name)
        if not is_image_content_type(content_type):
            self._show_error("Invalid File", "Please select a valid image file.")
            return
        try:
            data = path.read_bytes()
        except OSError as e:
            self._show_error("Upload Failed", f"Could not read {path.name}:\n\n{e}")
            return

        self.settings.set_last_upload_dir(str(path.parent))
        self.crop_view.clear()
        self.preview_label.clear()

        self._set_busy_cursor(True)
        self.status_bar.showMessage(f"Loading {path.name}...")
        future = self.controller.submit_upload(data, content_type, path.name)
        self._bridge(future, self.upload_finished, self.controller.session.session_id)

    def _on_upload_finished(self, session_id: int, source, error: Optional[str]):
        if not self._is_current(session_id):
            return
        self._set_busy_cursor(False)

        if error:
            self._show_error("Upload Failed", f"Could not open this photo:\n\n{error}")
            self.controller.acknowledge_error()
            self._show_page(PAGE_UPLOAD)
            self.status_bar.showMessage("Ready")
            return

        self.controller.begin_crop()
        self.crop_view.set_source(source)
        self._show_page(PAGE_CROP)
        self.crop_view.setFocus()
        self.status_bar.showMessage(f"{source.name or 'Photo'}: {source.width}x{source.height}")

    # ─────────────────────────────────────────────────────────────────────────
    # Crop & preview
    # ─────────────────────────────────────────────────────────────────────────

    def _sync_zoom_slider(self, zoom: float):
        self.zoom_slider.blockSignals(True)
        self.zoom_slider.setValue(round(zoom * 100))
        self.zoom_slider.blockSignals(False)

    def _confirm_crop(self):
        crop = self.crop_view.current_crop()
        future = self.controller.submit_preview(crop)

        self.preview_label.clear()
        self.progress_bar.setValue(0)
        self.progress_bar.show()
        self.stage_label.setText("Preparing...")
        self._show_page(PAGE_RESULT)
        self._bridge(future, self.preview_finished, self.controller.session.session_id)

    def _on_stage(self, session_id: int, stage: RenderStage):
        if not self._is_current(session_id):
            return
        self.progress_bar.setValue(stage.percent)
        self.stage_label.setText(stage.message)

    def _on_preview_finished(self, session_id: int, preview, error: Optional[str]):
        if not self._is_current(session_id):
            return
        if error:
            self._show_error("Framing Failed", f"Could not frame this photo:\n\n{error}")
            self.controller.acknowledge_error()
            self._show_page(PAGE_CROP)
            return

        pixmap = pil_to_qpixmap(preview).scaled(
            PREVIEW_DISPLAY_SIZE,
            PREVIEW_DISPLAY_SIZE,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.preview_label.setPixmap(pixmap)
        self.progress_bar.hide()
        self.console.append_log("SUCCESS", "Photo framed successfully!")
        self.status_bar.showMessage("Photo framed successfully!", 3000)

    def _adjust_crop(self):
        self.controller.begin_crop()
        self._show_page(PAGE_CROP)
        self.crop_view.setFocus()

    # ─────────────────────────────────────────────────────────────────────────
    # Download
    # ─────────────────────────────────────────────────────────────────────────

    def _download_dir(self) -> Path:
        stored = self.settings.get_download_dir()
        return Path(stored) if stored else get_default_download_dir()

    def _update_download_dir_label(self):
        self.download_dir_label.setText(f"Saving to {self._download_dir()}")

    def _choose_download_dir(self):
        directory = QFileDialog.getExistingDirectory(
            self,
            "Choose Download Folder",
            str(self._download_dir()),
            QFileDialog.Option.ShowDirsOnly,
        )
        if directory:
            self.settings.set_download_dir(directory)
            self._update_download_dir_label()

    def _download(self):
        future = self.controller.submit_download(self._download_dir())
        self.progress_bar.setValue(0)
        self.progress_bar.show()
        self._bridge(future, self.download_finished, self.controller.session.session_id)

    def _on_download_finished(self, session_id: int, path: Optional[Path], error: Optional[str]):
        if not self._is_current(session_id):
            return
        self.progress_bar.hide()
        if error:
            self._show_error("Download Failed", f"Could not save the framed photo:\n\n{error}")
            self.controller.acknowledge_error()
            return
        self.console.append_log("SUCCESS", f"Photo downloaded successfully! {path}")
        self.status_bar.showMessage(f"Saved {path.name}", 5000)

    # ─────────────────────────────────────────────────────────────────────────
    # Session
    # ─────────────────────────────────────────────────────────────────────────

    def _start_over(self):
        self.controller.start_over()
        self._set_busy_cursor(False)
        self.crop_view.clear()
        self.preview_label.clear()
        self.progress_bar.setValue(0)
        self.stage_label.setText("Preparing...")
        self._show_page(PAGE_UPLOAD)
        self.status_bar.showMessage("Ready")

    def _on_state_changed(self, session_id: int, state: SessionState):
        if self._is_current(session_id):
            self._update_actions(state)

    def _update_actions(self, state: SessionState):
        """Enable only the actions the session state allows."""
        self.confirm_btn.setEnabled(state is SessionState.CROPPING)
        self.download_btn.setEnabled(state is SessionState.PREVIEWED)
        self.adjust_btn.setEnabled(state is SessionState.PREVIEWED)
        busy = state in (SessionState.RENDERING, SessionState.EXPORTING)
        self.result_start_over_btn.setEnabled(not busy)

    def _set_busy_cursor(self, busy: bool):
        if busy and not self._busy_cursor:
            QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        elif not busy and self._busy_cursor:
            QApplication.restoreOverrideCursor()
        self._busy_cursor = busy

    def _show_page(self, index: int):
        self.stack.setCurrentIndex(index)
        titles = {
            PAGE_UPLOAD: "Frame Your Photo",
            PAGE_CROP: "Crop Your Photo",
            PAGE_RESULT: "Your Framed Photo",
        }
        self.title_label.setText(titles[index])

    def _show_error(self, title: str, message: str):
        self.console.append_log("ERROR", message.replace("\n\n", " "))
        QMessageBox.critical(self, title, message)

    # ─────────────────────────────────────────────────────────────────────────
    # Frame
    # ─────────────────────────────────────────────────────────────────────────

    def _watch_frame(self, loader: FrameAssetLoader):
        def done(finished: FrameAssetLoader):
            error = finished.error
            self.frame_status.emit(finished, str(error) if error else None)

        loader.add_done_callback(done)

    def _on_frame_status(self, loader: FrameAssetLoader, error: Optional[str]):
        # Ignore loaders replaced by a later frame choice
        if loader is not self.controller.frame_loader:
            return
        if error is None:
            self.console.append_log("INFO", f"Frame loaded: {loader.path}")
            return
        self.console.append_log("WARNING", f"Frame unavailable: {error}")
        QMessageBox.information(
            self,
            "Frame Unavailable",
            f"The frame image could not be loaded:\n\n{error}\n\n"
            "Photos will be framed with a plain outline instead.",
        )

    def _choose_frame(self):
        current = self.controller.frame_loader.path
        start_dir = str(current.parent) if current else str(Path.home())
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Frame", start_dir, IMAGE_FILE_FILTER)
        if filename:
            self.settings.set_frame_path(filename)

    def _use_default_frame(self):
        self.settings.set_frame_path(None)

    def _on_frame_path_changed(self, path: str):
        frame_path = Path(path) if path else get_default_frame_path()
        self._watch_frame(self.controller.change_frame(frame_path))

    # ─────────────────────────────────────────────────────────────────────────
    # Misc
    # ─────────────────────────────────────────────────────────────────────────

    def _toggle_theme(self, checked: bool):
        self.settings.set_dark_mode(checked)
        apply_theme(QApplication.instance(), checked)
        self._apply_button_styles()
        self.drop_area.update_theme()
        self.console.update_theme()
        self.crop_view.update()

    def _drain_log_queue(self):
        while True:
            try:
                text, level = self.log_queue.get_nowait()
            except queue.Empty:
                break
            self.console.append_log(level, text)

    def _show_about(self):
        QMessageBox.about(
            self,
            "About Photo Framer",
            "<h3>Photo Framer</h3>"
            f"<p>Version: {__version__}</p>"
            "<p>Crop a photo to a circle and place it inside a decorative frame.</p>"
            "<p>Copyright 2026 Photo Framer contributors<br>"
            f'Licensed under the <a href="https://polyformproject.org/licenses/noncommercial/1.0.0/">{__license__}</a></p>',
        )

    def closeEvent(self, event):
        """Save UI state and stop background work on close."""
        self.settings.set_window_geometry(self.saveGeometry().toHex().data().decode())
        self.log_timer.stop()
        self.controller.shutdown(wait=False)
        detach_queue_handler(self._log_handler)
        super().closeEvent(event)
