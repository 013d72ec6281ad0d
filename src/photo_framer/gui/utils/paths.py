"""
Path utilities for handling dev vs production (frozen) file locations.

Dev mode: Uses local workspace/ directory
Frozen mode: Uses system-standard paths (AppData, Downloads)
"""
from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths

APP_NAME = "Photo Framer"


def is_frozen() -> bool:
    """Check if running as a frozen (PyInstaller) application."""
    return getattr(sys, 'frozen', False) or hasattr(sys, '_MEIPASS')


def get_app_data_dir() -> Path:
    """
    Get the application data directory for internal state files.

    Frozen: ~/Library/Application Support/Photo Framer (macOS)
            or %LOCALAPPDATA%/Photo Framer (Windows)
    Dev: workspace/
    """
    if is_frozen():
        app_data = Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.AppLocalDataLocation
        ))
        app_data.mkdir(parents=True, exist_ok=True)
        return app_data
    return Path.cwd() / "workspace"


def get_settings_path() -> Path:
    """Get the path for storing GUI settings."""
    return get_app_data_dir() / "gui_settings.json"


def get_crashlog_dir() -> Path:
    """Get the directory for crash logs (not created)."""
    return get_app_data_dir() / "crash_logs"


def get_default_download_dir() -> Path:
    """
    Get the folder downloads are saved to until the user picks another.

    Frozen: the system Downloads folder
    Dev: workspace/downloads
    """
    if is_frozen():
        location = QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.DownloadLocation
        )
        return Path(location) if location else Path.home() / "Downloads"
    return Path.cwd() / "workspace" / "downloads"


def get_default_frame_path() -> Path:
    """Get the bundled frame overlay, handling frozen/dev modes."""
    if hasattr(sys, '_MEIPASS'):
        return Path(sys._MEIPASS) / "photo_framer" / "assets" / "frame.png"
    from photo_framer.framing.loading import default_frame_path
    return default_frame_path()


def ensure_directories() -> None:
    """
    Ensure the app data and default download directories exist.

    Called on app startup.
    """
    get_app_data_dir().mkdir(parents=True, exist_ok=True)
    get_default_download_dir().mkdir(parents=True, exist_ok=True)
