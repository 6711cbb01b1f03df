# notesdb/db/queries.py
"""
App metadata queries (appData key/value table on the disk handle).

Writes do not commit — callers own the transaction, so a migration step
and its version stamp land together. Reads are lenient: a missing key and
a failed query both read as "".
"""
from __future__ import annotations

import logging
import sqlite3

from notesdb.core.constants import APP_DATA_TABLE, SCHEMA_VERSION_KEY
from notesdb.core.exceptions import StoreError

_log = logging.getLogger("notesdb.db.queries")

_CREATE_APP_DATA_SQL = (
    f"CREATE TABLE IF NOT EXISTS {APP_DATA_TABLE} ("
    "name VARCHAR(255) PRIMARY KEY, "
    "value VARCHAR(255))"
)


def ensure_app_data_table(conn: sqlite3.Connection) -> None:
    try:
        conn.execute(_CREATE_APP_DATA_SQL)
    except sqlite3.Error as exc:
        raise StoreError(f"could not create {APP_DATA_TABLE}: {exc}", _CREATE_APP_DATA_SQL) from exc


def set_app_data(conn: sqlite3.Connection, name: str, value: str) -> None:
    """Upsert name -> value in one statement. Raises StoreError on failure."""
    sql = f"REPLACE INTO {APP_DATA_TABLE} (name, value) VALUES (?, ?)"
    try:
        conn.execute(sql, (name, str(value)))
    except sqlite3.Error as exc:
        raise StoreError(f"could not store app data {name!r}: {exc}", sql) from exc


def get_app_data(conn: sqlite3.Connection, name: str) -> str:
    try:
        row = conn.execute(
            f"SELECT value FROM {APP_DATA_TABLE} WHERE name = ?", (name,)
        ).fetchone()
    except sqlite3.Error as exc:
        _log.error("get_app_data(%r) failed: %s", name, exc)
        return ""
    if row is None or row[0] is None:
        return ""
    return str(row[0])


def get_all_app_data(conn: sqlite3.Connection) -> dict[str, str]:
    try:
        rows = conn.execute(f"SELECT name, value FROM {APP_DATA_TABLE}").fetchall()
    except sqlite3.Error as exc:
        _log.error("get_all_app_data failed: %s", exc)
        return {}
    return {row[0]: row[1] if row[1] is not None else "" for row in rows}


def delete_app_data(conn: sqlite3.Connection, name: str) -> bool:
    """Remove name. Returns True if a row was deleted."""
    sql = f"DELETE FROM {APP_DATA_TABLE} WHERE name = ?"
    try:
        cur = conn.execute(sql, (name,))
    except sqlite3.Error as exc:
        raise StoreError(f"could not delete app data {name!r}: {exc}", sql) from exc
    return cur.rowcount > 0


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Stored schema version. Absent, unparsable or negative reads as 0."""
    raw = get_app_data(conn, SCHEMA_VERSION_KEY).strip()
    try:
        version = int(raw)
    except ValueError:
        if raw:
            _log.warning("unparsable %s %r, treating as 0", SCHEMA_VERSION_KEY, raw)
        return 0
    return max(version, 0)


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    set_app_data(conn, SCHEMA_VERSION_KEY, str(int(version)))
