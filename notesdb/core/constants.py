# notesdb/core/constants.py
"""
Project-wide constants.
Do not import from db, services or ui here — this is a leaf module.
"""
from pathlib import Path

APP_NAME = "NotesDB"
APP_VERSION = "0.1.0"
ORGANIZATION_NAME = "NotesDB"

# Connection labels — exactly one handle per label at a time
MEMORY_LABEL = "memory"
DISK_LABEL = "disk"

# DB
DISK_DB_NAME = "NotesDB.sqlite"
MEMORY_DB_URI = ":memory:"
APP_DATA_TABLE = "appData"
SCHEMA_VERSION_KEY = "schema_version"

# Used when Qt cannot name a writable location
FALLBACK_DATA_DIR = Path.home() / ".notesdb"
