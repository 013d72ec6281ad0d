"""
Settings persistence model for the GUI.

This module handles all persistent GUI state with robust error handling.
Any malformed data should result in graceful fallback to defaults, never CTD.
Uploaded photos are never persisted; only preferences are.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class SettingsStore(QObject):
    """Lightweight JSON-backed store for persisting GUI preferences."""

    framePathChanged = Signal(str)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except OSError as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}
            if not isinstance(self.data, dict):
                self._load_error = "Settings file does not contain an object"
                self.data = {}

        if self._load_error:
            logger.warning(f"Using default settings: {self._load_error}")

        # Ensure version is set for new files
        if "version" not in self.data:
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def check_load_error(self) -> bool:
        """
        Check if there was an error loading settings and prompt user to reset.

        Returns True if app should continue, False if app should exit.
        Call this after QApplication is created.
        """
        if not self._load_error:
            return True

        from PySide6.QtWidgets import QMessageBox

        msg = QMessageBox()
        msg.setIcon(QMessageBox.Icon.Warning)
        msg.setWindowTitle("Settings Error")
        msg.setText("Your settings file could not be loaded.")
        msg.setInformativeText(
            f"{self._load_error}\n\n"
            "Would you like to reset settings to defaults and continue?"
        )
        msg.setStandardButtons(
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        msg.setDefaultButton(QMessageBox.StandardButton.Yes)

        if msg.exec() == QMessageBox.StandardButton.Yes:
            # Reset was already done by setting self.data = {}
            self._save()
            self._load_error = None
            return True
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # Paths
    # ─────────────────────────────────────────────────────────────────────────

    def get_frame_path(self) -> Optional[str]:
        """User-chosen frame overlay, or None for the bundled frame."""
        return self._get_str("frame_path")

    def set_frame_path(self, value: Optional[str]) -> None:
        self._get_dict()["frame_path"] = value
        self._save()
        self.framePathChanged.emit(value or "")

    def get_last_upload_dir(self) -> Optional[str]:
        return self._get_str("last_upload_dir")

    def set_last_upload_dir(self, value: str) -> None:
        self._get_dict()["last_upload_dir"] = value
        self._save()

    def get_download_dir(self) -> Optional[str]:
        return self._get_str("download_dir")

    def set_download_dir(self, value: str) -> None:
        self._get_dict()["download_dir"] = value
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # UI
    # ─────────────────────────────────────────────────────────────────────────

    def get_dark_mode(self) -> bool:
        ui = self._get_ui()
        return bool(ui.get("dark_mode", False))

    def set_dark_mode(self, enabled: bool) -> None:
        self._get_ui()["dark_mode"] = enabled
        self._save()

    def get_window_geometry(self) -> Optional[str]:
        """Get saved window geometry with hex validation.

        Returns None if geometry is missing or invalid hex.
        """
        geo = self._get_ui().get("window_geometry")
        if not isinstance(geo, str):
            return None
        try:
            bytes.fromhex(geo)
            return geo
        except ValueError:
            logger.warning("Invalid geometry string in settings, ignoring")
            return None

    def set_window_geometry(self, geometry: str) -> None:
        self._get_ui()["window_geometry"] = geometry
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _get_str(self, key: str) -> Optional[str]:
        value = self._get_dict().get(key)
        return value if isinstance(value, str) and value else None

    def _get_ui(self) -> Dict[str, object]:
        ui = self._get_dict().get("ui")
        if not isinstance(ui, dict):
            ui = {}
            self._get_dict()["ui"] = ui
        return ui

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = self.path.with_suffix('.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            try:
                if temp_path.exists():
                    temp_path.unlink()
            except OSError:
                pass
