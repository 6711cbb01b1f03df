# notesdb/db — SQLite layer
# Two databases: memory (session data, rebuilt every start) and disk (durable, migrated).
# Handles are owned by ConnectionRegistry, one per label.
from notesdb.db.connection import open_disk_connection, open_memory_connection
from notesdb.db.migrations import (
    DISK_MIGRATIONS,
    MEMORY_SCHEMA,
    MigrationReport,
    MigrationStep,
    init_memory_schema,
    run_migrations,
)
from notesdb.db.registry import ConnectionRegistry

__all__ = [
    "open_memory_connection",
    "open_disk_connection",
    "ConnectionRegistry",
    "run_migrations",
    "init_memory_schema",
    "MigrationStep",
    "MigrationReport",
    "DISK_MIGRATIONS",
    "MEMORY_SCHEMA",
]
