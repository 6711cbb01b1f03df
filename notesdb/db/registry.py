# notesdb/db/registry.py
"""
ConnectionRegistry — owns every open database handle, keyed by label.

One registry per application run, constructed explicitly and passed to
whatever needs a handle. Exactly one handle exists per label: opening a
label again closes the previous handle first.

Not thread-safe. Callers serialise access to the disk handle themselves.
"""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Optional

from notesdb.core.constants import DISK_LABEL, MEMORY_LABEL
from notesdb.core.exceptions import ConnectError, HandleNotFoundError
from notesdb.db.connection import open_disk_connection, open_memory_connection

_log = logging.getLogger("notesdb.db.registry")

# (title, message) -> None. Presentation is the caller's business.
ErrorReporter = Callable[[str, str], None]

CONNECTION_ERROR_TEXT = (
    "Unable to establish a database connection.\n"
    "This application needs SQLite support. Please make sure the Python "
    "sqlite3 module is available and the data directory is writable.\n\n"
    "Click Cancel to exit."
)

_ERROR_TITLES = {
    MEMORY_LABEL: "Cannot open memory database",
    DISK_LABEL: "Cannot open disk database",
}


class ConnectionRegistry:
    """Label -> sqlite3.Connection mapping with single-instance-per-label semantics."""

    def __init__(self, error_reporter: Optional[ErrorReporter] = None) -> None:
        self._handles: dict[str, sqlite3.Connection] = {}
        self._error_reporter = error_reporter
        self._disk_path: Optional[Path] = None

    # ------------------------------------------------------------------
    # Opening
    # ------------------------------------------------------------------

    def open_memory(self) -> sqlite3.Connection:
        try:
            conn = open_memory_connection()
        except ConnectError as exc:
            self._report(exc)
            raise
        self._register(MEMORY_LABEL, conn)
        return conn

    def open_disk(self, path: Path) -> sqlite3.Connection:
        path = Path(path)
        try:
            conn = open_disk_connection(path)
        except ConnectError as exc:
            self._report(exc)
            raise
        self._register(DISK_LABEL, conn)
        self._disk_path = path
        _log.info("disk database registered: %s", path)
        return conn

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, label: str) -> sqlite3.Connection:
        """Return the handle for label. Raises HandleNotFoundError if none is open."""
        try:
            return self._handles[label]
        except KeyError:
            raise HandleNotFoundError(label) from None

    def has(self, label: str) -> bool:
        return label in self._handles

    def labels(self) -> list[str]:
        return sorted(self._handles)

    @property
    def disk_path(self) -> Optional[Path]:
        """Path of the registered disk file, None if no disk handle is open."""
        return self._disk_path if self.has(DISK_LABEL) else None

    # ------------------------------------------------------------------
    # Closing
    # ------------------------------------------------------------------

    def close(self, label: str) -> bool:
        """Close and unregister label. Returns False if nothing was registered."""
        conn = self._handles.pop(label, None)
        if conn is None:
            return False
        conn.close()
        if label == DISK_LABEL:
            self._disk_path = None
        _log.debug("%s database closed", label)
        return True

    def close_all(self) -> None:
        for label in list(self._handles):
            self.close(label)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _register(self, label: str, conn: sqlite3.Connection) -> None:
        if self.close(label):
            _log.info("%s database replaced", label)
        self._handles[label] = conn

    def _report(self, exc: ConnectError) -> None:
        if self._error_reporter is None:
            return
        title = _ERROR_TITLES.get(exc.label, "Cannot open database")
        try:
            self._error_reporter(title, CONNECTION_ERROR_TEXT)
        except Exception as report_exc:
            # reporter failures never replace the ConnectError
            _log.error("connection error reporter failed: %s", report_exc)
