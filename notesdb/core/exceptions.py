# notesdb/core/exceptions.py
"""
All custom exceptions for NotesDB.
Granular exception types allow precise error handling and logging.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class NotesDBError(Exception):
    """Base exception for all NotesDB errors."""


# --- DB ---

class DatabaseError(NotesDBError):
    """Base for database errors."""


class ConnectError(DatabaseError):
    """
    A database handle could not be opened.
    Fatal at startup: the caller must halt or run without persistence.
    """
    def __init__(self, label: str, path: Optional[Path | str] = None, reason: str = "") -> None:
        self.label = label
        self.path = path
        self.reason = reason
        target = f" at {path}" if path else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot open {label} database{target}{detail}")


class StoreError(DatabaseError):
    """A single statement failed. Non-fatal: logged, operation is a no-op."""
    def __init__(self, msg: str, sql: str = "") -> None:
        self.sql = sql
        super().__init__(msg)


class HandleNotFoundError(DatabaseError, LookupError):
    """No handle registered under a label. Programming error, not a runtime condition."""
    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"no database handle registered under label {label!r}")


class MigrationError(DatabaseError):
    """A migration step failed while running with the abort policy."""
    def __init__(self, version: int, msg: str) -> None:
        self.version = version
        super().__init__(f"migration {version} failed: {msg}")


# --- Config ---

class ConfigError(NotesDBError):
    """Configuration error."""
