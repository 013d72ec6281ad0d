"""
Integration tests for the main window.

Test Coverage:
- Upload → crop → preview → download through the UI slots
- Rejected and undecodable uploads
- Start over returning to the upload page
- Frame failure notice and frame changes from settings
- Pipeline logs drained into the console
"""
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from PySide6.QtWidgets import QMessageBox

from photo_framer import __version__
from photo_framer.framing import FrameAssetLoader, FramingController, RenderConfig, SessionState
from photo_framer.gui.main_window import PAGE_CROP, PAGE_RESULT, PAGE_UPLOAD, MainWindow
from photo_framer.gui.models.settings import SettingsStore
from photo_framer.gui.utils.paths import get_default_frame_path

WAIT_MS = 10000


@pytest.fixture
def settings(tmp_path: Path, download_dir: Path) -> SettingsStore:
    store = SettingsStore(tmp_path / "gui_settings.json")
    store.set_download_dir(str(download_dir))
    return store


def _make_window(qtbot, settings, config):
    window = MainWindow(settings, FramingController(config))
    qtbot.addWidget(window)
    return window


@pytest.fixture
def window(qtbot, settings, small_config):
    window = _make_window(qtbot, settings, small_config)
    yield window
    window.close()


@pytest.fixture
def photo_path(tmp_path: Path, png_bytes) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


class TestFramingFlow:
    """Tests for the full user flow."""

    def test_starts_on_upload_page(self, window):
        assert window.stack.currentIndex() == PAGE_UPLOAD
        assert not window.confirm_btn.isEnabled()
        assert not window.download_btn.isEnabled()

    def test_upload_crop_preview_download(self, window, qtbot, photo_path, download_dir):
        # Upload
        window._upload_file(photo_path)
        qtbot.waitUntil(lambda: window.stack.currentIndex() == PAGE_CROP, timeout=WAIT_MS)
        assert window.controller.session.state is SessionState.CROPPING
        assert window.confirm_btn.isEnabled()

        # Preview
        window._confirm_crop()
        assert window.stack.currentIndex() == PAGE_RESULT
        qtbot.waitUntil(lambda: window.download_btn.isEnabled(), timeout=WAIT_MS)
        qtbot.waitUntil(lambda: not window.preview_label.pixmap().isNull(), timeout=WAIT_MS)
        assert window.stage_label.text() == "Complete!"

        # Download
        window._download()
        qtbot.waitUntil(lambda: len(list(download_dir.glob("*.png"))) == 1, timeout=WAIT_MS)
        qtbot.waitUntil(lambda: window.download_btn.isEnabled(), timeout=WAIT_MS)
        assert "Photo downloaded successfully!" in window.console.text_edit.toPlainText()

    def test_adjust_crop_returns_to_crop_page(self, window, qtbot, photo_path):
        window._upload_file(photo_path)
        qtbot.waitUntil(lambda: window.stack.currentIndex() == PAGE_CROP, timeout=WAIT_MS)
        window._confirm_crop()
        qtbot.waitUntil(lambda: window.adjust_btn.isEnabled(), timeout=WAIT_MS)

        window._adjust_crop()

        assert window.stack.currentIndex() == PAGE_CROP
        assert window.controller.session.state is SessionState.CROPPING

    def test_start_over(self, window, qtbot, photo_path):
        window._upload_file(photo_path)
        qtbot.waitUntil(lambda: window.stack.currentIndex() == PAGE_CROP, timeout=WAIT_MS)

        window._start_over()

        assert window.stack.currentIndex() == PAGE_UPLOAD
        assert window.controller.session.state is SessionState.IDLE
        assert window.crop_view.selector is None


class TestUploadErrors:
    """Tests for rejected uploads."""

    def test_non_image_rejected_before_upload(self, window, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with patch.object(QMessageBox, "critical") as critical:
            window._upload_file(path)

        critical.assert_called_once()
        assert window.stack.currentIndex() == PAGE_UPLOAD
        assert window.controller.session.state is SessionState.IDLE

    def test_corrupt_image_reports_error(self, window, qtbot, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not really a png")

        with patch.object(QMessageBox, "critical") as critical:
            window._upload_file(path)
            qtbot.waitUntil(lambda: critical.called, timeout=WAIT_MS)

        assert "Could not open this photo" in critical.call_args[0][2]
        assert window.stack.currentIndex() == PAGE_UPLOAD
        assert window.controller.session.state is SessionState.IDLE


class TestFrameNotice:
    """Tests for frame load feedback."""

    def test_missing_frame_shows_notice(self, qtbot, settings, tmp_path):
        config = RenderConfig(preview_size=200, download_size=400, frame_path=tmp_path / "missing.png")

        with patch.object(QMessageBox, "information") as information:
            window = _make_window(qtbot, settings, config)
            try:
                qtbot.waitUntil(lambda: information.called, timeout=WAIT_MS)
            finally:
                window.close()

        assert "outline" in information.call_args[0][2]

    def test_frame_setting_reloads_frame(self, window, qtbot, settings, tmp_path):
        missing = tmp_path / "gold.png"

        with patch.object(QMessageBox, "information") as information:
            settings.set_frame_path(str(missing))
            qtbot.waitUntil(lambda: information.called, timeout=WAIT_MS)

        assert window.controller.frame_loader.path == missing
        assert window.controller.config.frame_path == missing

    def test_default_frame_setting_restores_bundled_frame(self, window, settings, tmp_path):
        with patch.object(QMessageBox, "information"):
            settings.set_frame_path(str(tmp_path / "gold.png"))

            window._use_default_frame()

        assert window.controller.frame_loader.path == get_default_frame_path()

    def test_replaced_frame_status_ignored(self, window, tmp_path):
        stale = FrameAssetLoader(tmp_path / "old.png")

        with patch.object(QMessageBox, "information") as information:
            window._on_frame_status(stale, "Frame image not found")

        information.assert_not_called()
        assert "Frame image not found" not in window.console.text_edit.toPlainText()

    def test_loaded_frame_logged(self, window, qtbot):
        qtbot.waitUntil(
            lambda: "Frame loaded" in window.console.text_edit.toPlainText(),
            timeout=WAIT_MS,
        )


class TestConsole:
    """Tests for log routing into the console widget."""

    def test_pipeline_logs_drained(self, window):
        logging.getLogger("photo_framer.framing").warning("pipeline says hi")

        window._drain_log_queue()

        assert "pipeline says hi" in window.console.text_edit.toPlainText()

    def test_close_saves_geometry(self, window, settings):
        window.close()

        assert settings.get_window_geometry() is not None


class TestAbout:
    def test_about_shows_version_and_license(self, window):
        with patch.object(QMessageBox, "about") as about:
            window._show_about()

        text = about.call_args[0][2]
        assert __version__ in text
        assert "Polyform Noncommercial License 1.0.0" in text
