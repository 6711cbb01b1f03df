import unittest
from pathlib import Path
from unittest import mock

from notesdb.core.constants import DISK_DB_NAME, FALLBACK_DATA_DIR
from notesdb.utils.paths import disk_database_path, writable_database_directory


class TestWritableDatabaseDirectory(unittest.TestCase):

    def test_uses_qt_location(self):
        with mock.patch("notesdb.utils.paths.QStandardPaths") as qsp:
            qsp.writableLocation.return_value = "/tmp/notesdb-data"
            self.assertEqual(writable_database_directory(), Path("/tmp/notesdb-data"))

    def test_empty_location_falls_back(self):
        with mock.patch("notesdb.utils.paths.QStandardPaths") as qsp:
            qsp.writableLocation.return_value = ""
            with self.assertLogs("notesdb.utils.paths", level="WARNING"):
                self.assertEqual(writable_database_directory(), FALLBACK_DATA_DIR)

    def test_real_location_is_absolute(self):
        self.assertTrue(writable_database_directory().is_absolute())


class TestDiskDatabasePath(unittest.TestCase):

    def test_appends_fixed_filename(self):
        self.assertEqual(disk_database_path("/data"), Path("/data") / DISK_DB_NAME)

    def test_does_not_create_directory(self):
        path = disk_database_path("/nonexistent/notesdb/dir")
        self.assertFalse(path.parent.exists())


if __name__ == "__main__":
    unittest.main()
