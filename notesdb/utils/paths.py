# notesdb/utils/paths.py
"""
Path resolution for the on-disk database.
The directory comes from Qt's standard locations so it follows the
platform conventions (XDG on Linux, Application Support on macOS,
AppData on Windows). Application and organization names set on the
QApplication decide the final path segment.
"""
from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QStandardPaths

from notesdb.core.constants import DISK_DB_NAME, FALLBACK_DATA_DIR

_log = logging.getLogger("notesdb.utils.paths")


def writable_database_directory() -> Path:
    """
    Return the writable directory the disk database lives in.
    Does not create it — open_disk_connection() does, right before opening.
    """
    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppDataLocation
    )
    if not location:
        _log.warning("no writable app data location, using %s", FALLBACK_DATA_DIR)
        return FALLBACK_DATA_DIR
    return Path(location)


def disk_database_path(directory: Path | str) -> Path:
    """Database file path inside directory. The directory is created on open."""
    return Path(directory) / DISK_DB_NAME
