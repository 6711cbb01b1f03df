"""Tests for the fatal connection error reporter outside a running QApplication."""
import unittest
from unittest import mock

from notesdb.ui.dialogs.connection_error_dialog import report_fatal_connection_error


class TestReportFatalConnectionError(unittest.TestCase):

    def test_headless_only_logs(self):
        with mock.patch("notesdb.ui.dialogs.connection_error_dialog.QApplication") as app, \
                mock.patch("notesdb.ui.dialogs.connection_error_dialog.QMessageBox") as box:
            app.instance.return_value = None
            with self.assertLogs("notesdb.ui.dialogs.connection_error_dialog", level="CRITICAL") as cm:
                report_fatal_connection_error("Cannot open disk database", "line one\nline two")
        box.critical.assert_not_called()
        self.assertIn("line one line two", cm.output[0])

    def test_shows_message_box_with_app(self):
        with mock.patch("notesdb.ui.dialogs.connection_error_dialog.QApplication") as app, \
                mock.patch("notesdb.ui.dialogs.connection_error_dialog.QMessageBox") as box:
            app.instance.return_value = object()
            with self.assertLogs("notesdb.ui.dialogs.connection_error_dialog", level="CRITICAL"):
                report_fatal_connection_error("Cannot open memory database", "msg")
        box.critical.assert_called_once_with(
            None, "Cannot open memory database", "msg", box.StandardButton.Cancel
        )


if __name__ == "__main__":
    unittest.main()
