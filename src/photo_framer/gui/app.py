"""
Entry point for the Photo Framer PySide6 GUI.
"""
import logging
import sys

# Install crash handler for compiled builds (captures unhandled exceptions)
if getattr(sys, 'frozen', False):
    from photo_framer import __version__
    from photo_framer.gui.utils.crashlog import install_crash_handler
    install_crash_handler(app_version=__version__)

APP_NAME = "Photo Framer"


def _configure_logging() -> None:
    """Send pipeline logs to stderr in addition to the GUI console."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run():
    """
    Main entry point for the GUI application.
    """
    from PySide6.QtWidgets import QApplication
    from photo_framer.gui.main_window import MainWindow
    from photo_framer.gui.models.settings import SettingsStore
    from photo_framer.gui.styles.theme import apply_theme
    from photo_framer.gui.utils.paths import get_settings_path, ensure_directories

    _configure_logging()

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    ensure_directories()

    settings = SettingsStore(get_settings_path())

    # Check for malformed settings and prompt user to reset if needed
    if not settings.check_load_error():
        sys.exit(1)  # User chose not to reset, exit app

    apply_theme(app, settings.get_dark_mode())

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
