"""
Crashlog utilities for capturing unhandled exceptions in the desktop app.

In frozen (PyInstaller) builds, stderr is not visible to users. This module
captures Python exceptions on the main thread and in worker threads, writes
them to rotating crash log files, and shows a dialog when a QApplication is
running.
"""
from __future__ import annotations

import platform
import sys
import threading
import traceback
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from photo_framer.gui.utils.paths import get_crashlog_dir

# Global reference to original excepthook
_original_excepthook: Optional[Callable] = None

# Maximum number of crash logs to keep
MAX_CRASH_LOGS = 5


def _rotate_crash_logs(crash_dir: Path) -> None:
    """
    Maintain a maximum of MAX_CRASH_LOGS files.

    Deletes oldest logs so that one more can be written.
    """
    logs = sorted(crash_dir.glob("crash_*.log"), key=lambda p: p.stat().st_mtime)
    while len(logs) >= MAX_CRASH_LOGS:
        oldest = logs.pop(0)
        try:
            oldest.unlink()
        except OSError:
            pass  # Best effort deletion


def format_crash_report(tb_text: str, app_version: str, title: str = "Exception") -> str:
    """Build the crash report text with system info header."""
    lines = [
        "Photo Framer Crash Report",
        "=" * 50,
        f"Timestamp: {datetime.now().isoformat()}",
        f"Version: {app_version}",
        f"Python: {sys.version}",
        f"Platform: {platform.platform()}",
        f"Frozen: {getattr(sys, 'frozen', False)}",
        "",
        f"{title}:",
        "-" * 50,
        tb_text,
    ]
    return "\n".join(lines)


def write_crash_log(report: str, crash_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Write a crash report to a new timestamped file.

    Args:
        report: Full report text
        crash_dir: Target directory (defaults to the app crash log dir)

    Returns:
        Path of the written file, or None if it could not be written
    """
    crash_dir = crash_dir or get_crashlog_dir()
    try:
        crash_dir.mkdir(parents=True, exist_ok=True)
        _rotate_crash_logs(crash_dir)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        crash_file = crash_dir / f"crash_{timestamp}.log"
        crash_file.write_text(report, encoding="utf-8")
        return crash_file
    except OSError as e:
        print(f"Could not write crash log: {e}", file=sys.stderr)
        return None


def _install_threading_excepthook(app_version: str) -> None:
    """
    Log unhandled exceptions in worker threads.

    No dialog is shown (threads can't safely interact with Qt GUI), but the
    exception is written to a crash log.
    """
    def thread_excepthook(args):
        tb_text = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
        thread_name = args.thread.name if args.thread else "Unknown"

        print(f"\n*** Unhandled exception in thread '{thread_name}' ***", file=sys.stderr)
        print(tb_text, file=sys.stderr)
        sys.stderr.flush()

        write_crash_log(format_crash_report(tb_text, app_version, f"Thread exception in '{thread_name}'"))

    threading.excepthook = thread_excepthook


def install_crash_handler(app_version: str = "unknown") -> None:
    """
    Install crash handling for unhandled Python exceptions.

    Call this early in application startup, before any GUI code.

    Args:
        app_version: Application version string for crash reports.
    """
    global _original_excepthook
    _original_excepthook = sys.excepthook

    _install_threading_excepthook(app_version)

    def crash_handler(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            _original_excepthook(exc_type, exc_value, exc_tb)
            return

        # Format the traceback FIRST (before any operations that might fail)
        tb_text = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        print(tb_text, file=sys.stderr)
        sys.stderr.flush()

        # Write crash log BEFORE any Qt operations
        crash_file = write_crash_log(format_crash_report(tb_text, app_version))

        _show_crash_dialog(crash_file, tb_text)
        sys.exit(1)

    sys.excepthook = crash_handler


def _show_crash_dialog(crash_file: Optional[Path], traceback_text: str) -> None:
    """
    Show a crash dialog to the user with the log location.

    Blocks until the user acknowledges the dialog. Does nothing if no
    QApplication is running.
    """
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication, QMessageBox

    app = QApplication.instance()
    if not app:
        return

    if crash_file and crash_file.exists():
        info_text = (
            f"A crash report has been saved to:\n{crash_file}\n\n"
            "Please include this file when reporting the issue."
        )
    else:
        info_text = (
            "Could not save crash report.\n\n"
            "Please copy the details below when reporting the issue."
        )

    msg = QMessageBox()
    msg.setIcon(QMessageBox.Icon.Critical)
    msg.setWindowTitle("Photo Framer - Unexpected Error")
    msg.setText("The application encountered an unexpected error and needs to close.")
    msg.setInformativeText(info_text)
    msg.setDetailedText(traceback_text)
    msg.setStandardButtons(QMessageBox.StandardButton.Ok)
    msg.setWindowModality(Qt.WindowModality.ApplicationModal)
    msg.exec()
