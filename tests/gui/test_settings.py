"""
Unit tests for GUI settings persistence.
"""
import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from photo_framer.gui.models.settings import SettingsStore


class TestSettingsStore(unittest.TestCase):
    """Test settings persistence."""

    def setUp(self):
        self.temp_dir = TemporaryDirectory()
        self.settings_path = Path(self.temp_dir.name) / "gui_settings.json"
        self.store = SettingsStore(self.settings_path)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_defaults(self):
        """Fresh store has no paths and light mode."""
        self.assertIsNone(self.store.get_frame_path())
        self.assertIsNone(self.store.get_download_dir())
        self.assertIsNone(self.store.get_last_upload_dir())
        self.assertFalse(self.store.get_dark_mode())
        self.assertIsNone(self.store.load_error)

    def test_paths_persist(self):
        """Paths are saved and loaded by a new instance."""
        self.store.set_frame_path("/frames/gold.png")
        self.store.set_download_dir("/home/me/Downloads")
        self.store.set_last_upload_dir("/home/me/Pictures")

        new_store = SettingsStore(self.settings_path)
        self.assertEqual(new_store.get_frame_path(), "/frames/gold.png")
        self.assertEqual(new_store.get_download_dir(), "/home/me/Downloads")
        self.assertEqual(new_store.get_last_upload_dir(), "/home/me/Pictures")

    def test_clearing_frame_path(self):
        self.store.set_frame_path("/frames/gold.png")
        self.store.set_frame_path(None)

        self.assertIsNone(SettingsStore(self.settings_path).get_frame_path())

    def test_frame_path_signal(self):
        """Changing the frame emits framePathChanged."""
        seen = []
        self.store.framePathChanged.connect(seen.append)

        self.store.set_frame_path("/frames/gold.png")
        self.store.set_frame_path(None)

        self.assertEqual(seen, ["/frames/gold.png", ""])

    def test_dark_mode_persists(self):
        self.store.set_dark_mode(True)

        self.assertTrue(SettingsStore(self.settings_path).get_dark_mode())

    def test_window_geometry_validation(self):
        """Non-hex geometry is ignored."""
        self.store.set_window_geometry("01ff")
        self.assertEqual(self.store.get_window_geometry(), "01ff")

        self.store.set_window_geometry("not hex")
        self.assertIsNone(self.store.get_window_geometry())

    def test_version_written(self):
        self.store.set_dark_mode(False)

        data = json.loads(self.settings_path.read_text(encoding="utf-8"))
        self.assertEqual(data["version"], SettingsStore.CURRENT_VERSION)
        self.assertFalse(self.settings_path.with_suffix(".tmp").exists())

    def test_corrupt_file_reports_error(self):
        """Malformed JSON falls back to defaults with a load error."""
        self.settings_path.write_text("{not json", encoding="utf-8")

        store = SettingsStore(self.settings_path)

        self.assertIn("corrupted", store.load_error)
        self.assertFalse(store.get_dark_mode())

    def test_non_object_file_reports_error(self):
        self.settings_path.write_text("[1, 2, 3]", encoding="utf-8")

        store = SettingsStore(self.settings_path)

        self.assertIsNotNone(store.load_error)
        self.assertIsNone(store.get_frame_path())

    def test_wrong_types_ignored(self):
        self.settings_path.write_text(
            json.dumps({"version": 1, "frame_path": 42, "ui": "dark"}), encoding="utf-8"
        )

        store = SettingsStore(self.settings_path)

        self.assertIsNone(store.get_frame_path())
        self.assertFalse(store.get_dark_mode())


if __name__ == '__main__':
    unittest.main()
