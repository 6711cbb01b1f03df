"""
Fatal connection error notification.
Passed to DatabaseService as its error_reporter by the entry point.
No DB access here.
"""
from __future__ import annotations

import logging

from PyQt6.QtWidgets import QApplication, QMessageBox

_log = logging.getLogger("notesdb.ui.dialogs.connection_error_dialog")


def report_fatal_connection_error(title: str, message: str) -> None:
    """
    Show a blocking critical message box.
    Without a running QApplication (headless, tests) the error is only logged.
    """
    _log.critical("%s: %s", title, message.replace("\n", " "))
    if QApplication.instance() is None:
        return
    QMessageBox.critical(None, title, message, QMessageBox.StandardButton.Cancel)
