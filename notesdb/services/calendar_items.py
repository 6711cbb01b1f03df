"""
Calendar item maintenance used by disk migrations.
Only the schema-level pieces live here; the calendar item entity itself
belongs to the application layer.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from notesdb.db.migrations import MigrationHook

_log = logging.getLogger("notesdb.services.calendar_items")

# iCalendar PRIORITY: 1 highest .. 9 lowest, 0 undefined
UNDEFINED_SORT_PRIORITY = 10


def sort_priority_for(priority: Optional[int]) -> int:
    """Map an iCalendar priority to a sort key where undefined sorts last."""
    if priority is None:
        return UNDEFINED_SORT_PRIORITY
    try:
        value = int(priority)
    except (TypeError, ValueError):
        return UNDEFINED_SORT_PRIORITY
    if value < 1 or value > 9:
        return UNDEFINED_SORT_PRIORITY
    return value


def update_all_sort_priorities(conn: sqlite3.Connection) -> int:
    """
    Recompute sort_priority for every calendarItem row.
    Does not commit — runs inside the caller's migration transaction.
    Returns number of rows updated.
    """
    rows = conn.execute("SELECT id, priority FROM calendarItem").fetchall()
    updates = [(sort_priority_for(row[1]), row[0]) for row in rows]
    if updates:
        conn.executemany(
            "UPDATE calendarItem SET sort_priority = ? WHERE id = ?", updates
        )
    _log.info("sort priorities recomputed for %d calendar item(s)", len(updates))
    return len(updates)


DEFAULT_HOOKS: dict[str, MigrationHook] = {
    "update_all_sort_priorities": update_all_sort_priorities,
}
