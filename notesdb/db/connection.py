# notesdb/db/connection.py
"""
Database connection management for NotesDB.

Two connection types:
  - memory: ephemeral session store, rebuilt on every start
  - disk:   durable store, one SQLite file in the writable data directory

Rules:
  - Foreign keys enforced on every connection.
  - The disk file stays in rollback-journal mode: removing the file
    removes the database, no -wal/-shm side files are left behind.
  - Open failures raise ConnectError and never return a half-open handle.
"""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from notesdb.core.constants import DISK_LABEL, MEMORY_DB_URI, MEMORY_LABEL
from notesdb.core.exceptions import ConnectError

_log = logging.getLogger("notesdb.db.connection")


def _configure_connection(conn: sqlite3.Connection) -> None:
    """Apply standard PRAGMAs to every connection."""
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row


def open_memory_connection() -> sqlite3.Connection:
    """
    Open an ephemeral in-memory database.
    Raises ConnectError if SQLite cannot be initialised.
    """
    try:
        conn = sqlite3.connect(MEMORY_DB_URI)
        _configure_connection(conn)
    except sqlite3.Error as exc:
        _log.error("memory database could not be opened: %s", exc)
        raise ConnectError(MEMORY_LABEL, MEMORY_DB_URI, str(exc)) from exc

    _log.debug("memory database opened")
    return conn


def open_disk_connection(path: Path) -> sqlite3.Connection:
    """
    Open (creating if absent) the database file at path.
    Creates parent directories if they don't exist.
    Raises ConnectError if the file cannot be opened.
    """
    path = Path(path)
    conn = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        _configure_connection(conn)
        # sqlite3.connect is lazy; touch the schema so unreadable files fail here
        conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
    except (sqlite3.Error, OSError) as exc:
        if conn is not None:
            conn.close()
        _log.error("disk database could not be opened at %s: %s", path, exc)
        raise ConnectError(DISK_LABEL, path, str(exc)) from exc

    _log.debug("disk database opened: %s", path)
    return conn
