import sqlite3
import unittest

from notesdb.db.migrations import DISK_MIGRATIONS, run_migrations
from notesdb.services.calendar_items import (
    DEFAULT_HOOKS,
    UNDEFINED_SORT_PRIORITY,
    sort_priority_for,
    update_all_sort_priorities,
)


class TestSortPriorityFor(unittest.TestCase):
    def test_defined_priorities_keep_value(self):
        for p in range(1, 10):
            self.assertEqual(sort_priority_for(p), p)

    def test_undefined_sorts_last(self):
        self.assertEqual(sort_priority_for(0), UNDEFINED_SORT_PRIORITY)
        self.assertEqual(sort_priority_for(None), UNDEFINED_SORT_PRIORITY)

    def test_out_of_range_and_garbage(self):
        self.assertEqual(sort_priority_for(42), UNDEFINED_SORT_PRIORITY)
        self.assertEqual(sort_priority_for(-1), UNDEFINED_SORT_PRIORITY)
        self.assertEqual(sort_priority_for("high"), UNDEFINED_SORT_PRIORITY)

    def test_numeric_strings(self):
        self.assertEqual(sort_priority_for("5"), 5)


class TestUpdateAllSortPriorities(unittest.TestCase):
    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        run_migrations(self.conn, DISK_MIGRATIONS[:1])

    def test_updates_every_row(self):
        self.conn.executemany(
            "INSERT INTO calendarItem (url, priority) VALUES (?, ?)",
            [("u1", 1), ("u2", 0), ("u3", None), ("u4", 9)],
        )
        updated = update_all_sort_priorities(self.conn)
        self.assertEqual(updated, 4)
        rows = self.conn.execute(
            "SELECT url, sort_priority FROM calendarItem ORDER BY sort_priority, url"
        ).fetchall()
        self.assertEqual(
            [tuple(r) for r in rows],
            [("u1", 1), ("u4", 9), ("u2", 10), ("u3", 10)],
        )

    def test_empty_table(self):
        self.assertEqual(update_all_sort_priorities(self.conn), 0)

    def test_registered_as_default_hook(self):
        self.assertIs(DEFAULT_HOOKS["update_all_sort_priorities"], update_all_sort_priorities)
        hook_names = {step.hook for step in DISK_MIGRATIONS if step.hook}
        self.assertTrue(hook_names.issubset(DEFAULT_HOOKS))


if __name__ == "__main__":
    unittest.main()
