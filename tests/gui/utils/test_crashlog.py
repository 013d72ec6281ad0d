"""Unit tests for crashlog module."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from photo_framer.gui.utils.crashlog import (
    MAX_CRASH_LOGS,
    _rotate_crash_logs,
    format_crash_report,
    install_crash_handler,
    write_crash_log,
)


class TestCrashlogModule:
    """Tests for crashlog utilities."""

    def test_max_crash_logs_constant(self):
        """Verify MAX_CRASH_LOGS is set to 5."""
        assert MAX_CRASH_LOGS == 5

    def test_rotate_crash_logs_limits_to_max(self, tmp_path: Path):
        """Verify log rotation leaves room for one more log."""
        for i in range(6):
            log_file = tmp_path / f"crash_2024010{i}_120000.log"
            log_file.write_text(f"log {i}")
            os.utime(log_file, (i, i))

        _rotate_crash_logs(tmp_path)

        remaining = sorted(p.name for p in tmp_path.glob("crash_*.log"))
        assert len(remaining) == MAX_CRASH_LOGS - 1
        # Oldest logs go first
        assert "crash_20240100_120000.log" not in remaining
        assert "crash_20240105_120000.log" in remaining

    def test_rotate_ignores_other_files(self, tmp_path: Path):
        keep = tmp_path / "notes.txt"
        keep.write_text("keep me")

        _rotate_crash_logs(tmp_path)

        assert keep.exists()

    def test_crash_report_format(self):
        """Report has a header with version and the traceback."""
        report = format_crash_report("Traceback: boom", "0.3.0")

        assert report.startswith("Photo Framer Crash Report")
        assert "Version: 0.3.0" in report
        assert "Exception:" in report
        assert report.endswith("Traceback: boom")

    def test_crash_report_title(self):
        report = format_crash_report("tb", "0.3.0", title="Thread exception in 'framing_0'")
        assert "Thread exception in 'framing_0':" in report

    def test_write_crash_log(self, tmp_path: Path):
        crash_file = write_crash_log("report text", tmp_path / "crash_logs")

        assert crash_file is not None
        assert crash_file.parent == tmp_path / "crash_logs"
        assert crash_file.name.startswith("crash_")
        assert crash_file.read_text(encoding="utf-8") == "report text"

    def test_write_crash_log_keeps_at_most_max(self, tmp_path: Path):
        for _ in range(MAX_CRASH_LOGS + 3):
            assert write_crash_log("report", tmp_path) is not None

        assert len(list(tmp_path.glob("crash_*.log"))) <= MAX_CRASH_LOGS

    def test_write_crash_log_failure_returns_none(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        assert write_crash_log("report", blocker) is None

    def test_default_dir_from_paths(self, tmp_path: Path):
        with patch("photo_framer.gui.utils.crashlog.get_crashlog_dir", return_value=tmp_path):
            crash_file = write_crash_log("report")

        assert crash_file.parent == tmp_path


class TestInstallCrashHandler:
    """Tests for excepthook installation."""

    @pytest.fixture(autouse=True)
    def restore_hooks(self):
        import threading
        original_sys, original_thread = sys.excepthook, threading.excepthook
        yield
        sys.excepthook, threading.excepthook = original_sys, original_thread

    def test_handler_writes_log(self, tmp_path: Path):
        install_crash_handler("0.3.0")

        with patch("photo_framer.gui.utils.crashlog.get_crashlog_dir", return_value=tmp_path), \
                patch("photo_framer.gui.utils.crashlog._show_crash_dialog") as dialog:
            try:
                raise ValueError("boom")
            except ValueError:
                with pytest.raises(SystemExit):
                    sys.excepthook(*sys.exc_info())

        logs = list(tmp_path.glob("crash_*.log"))
        assert len(logs) == 1
        assert "ValueError: boom" in logs[0].read_text(encoding="utf-8")
        dialog.assert_called_once()

    def test_keyboard_interrupt_passes_through(self, tmp_path: Path):
        install_crash_handler("0.3.0")

        with patch("photo_framer.gui.utils.crashlog.get_crashlog_dir", return_value=tmp_path), \
                patch("photo_framer.gui.utils.crashlog._original_excepthook") as original:
            sys.excepthook(KeyboardInterrupt, KeyboardInterrupt(), None)

        original.assert_called_once()
        assert not list(tmp_path.glob("crash_*.log"))
