# tests/unit/db/test_app_data.py
import sqlite3
import unittest

from notesdb.core.exceptions import StoreError
from notesdb.db import queries


class TestAppData(unittest.TestCase):

    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        queries.ensure_app_data_table(self.conn)

    def test_roundtrip(self):
        queries.set_app_data(self.conn, "x", "y")
        self.conn.commit()
        self.assertEqual(queries.get_app_data(self.conn, "x"), "y")

    def test_unset_key_reads_empty(self):
        self.assertEqual(queries.get_app_data(self.conn, "never_set"), "")

    def test_upsert_overwrites(self):
        queries.set_app_data(self.conn, "theme", "dark")
        queries.set_app_data(self.conn, "theme", "light")
        self.conn.commit()
        self.assertEqual(queries.get_app_data(self.conn, "theme"), "light")
        count = self.conn.execute(
            "SELECT COUNT(*) FROM appData WHERE name = 'theme'"
        ).fetchone()[0]
        self.assertEqual(count, 1)

    def test_ensure_table_idempotent(self):
        queries.set_app_data(self.conn, "keep", "me")
        self.conn.commit()
        queries.ensure_app_data_table(self.conn)
        self.assertEqual(queries.get_app_data(self.conn, "keep"), "me")

    def test_get_all(self):
        queries.set_app_data(self.conn, "a", "1")
        queries.set_app_data(self.conn, "b", "2")
        self.conn.commit()
        self.assertEqual(queries.get_all_app_data(self.conn), {"a": "1", "b": "2"})

    def test_delete(self):
        queries.set_app_data(self.conn, "gone", "soon")
        self.assertTrue(queries.delete_app_data(self.conn, "gone"))
        self.assertFalse(queries.delete_app_data(self.conn, "gone"))
        self.assertEqual(queries.get_app_data(self.conn, "gone"), "")


class TestLenientReads(unittest.TestCase):

    def test_missing_table_reads_empty_and_logs(self):
        conn = sqlite3.connect(":memory:")
        with self.assertLogs("notesdb.db.queries", level="ERROR"):
            value = queries.get_app_data(conn, "schema_version")
        self.assertEqual(value, "")

    def test_missing_table_get_all_reads_empty(self):
        conn = sqlite3.connect(":memory:")
        with self.assertLogs("notesdb.db.queries", level="ERROR"):
            self.assertEqual(queries.get_all_app_data(conn), {})

    def test_set_without_table_raises_store_error(self):
        conn = sqlite3.connect(":memory:")
        with self.assertRaises(StoreError) as ctx:
            queries.set_app_data(conn, "x", "y")
        self.assertIn("REPLACE INTO", ctx.exception.sql)


class TestSchemaVersion(unittest.TestCase):

    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        queries.ensure_app_data_table(self.conn)

    def test_absent_is_zero(self):
        self.assertEqual(queries.get_schema_version(self.conn), 0)

    def test_parsed(self):
        queries.set_schema_version(self.conn, 7)
        self.assertEqual(queries.get_app_data(self.conn, "schema_version"), "7")
        self.assertEqual(queries.get_schema_version(self.conn), 7)

    def test_garbage_is_zero(self):
        queries.set_app_data(self.conn, "schema_version", "v2")
        self.assertEqual(queries.get_schema_version(self.conn), 0)

    def test_negative_is_zero(self):
        queries.set_app_data(self.conn, "schema_version", "-3")
        self.assertEqual(queries.get_schema_version(self.conn), 0)


if __name__ == "__main__":
    unittest.main()
