"""
DatabaseService — owns the memory and disk connections for one application run.
Bootstrap, app metadata access and the disk reset flow all go through here.
UI never touches DB connections directly — always through DatabaseService.
"""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from notesdb.core.constants import DISK_LABEL, MEMORY_LABEL
from notesdb.core.enums import StepErrorPolicy
from notesdb.core.exceptions import DatabaseError, NotesDBError, StoreError
from notesdb.db import queries
from notesdb.db.migrations import (
    DISK_MIGRATIONS,
    MEMORY_SCHEMA,
    MigrationHook,
    MigrationReport,
    MigrationStep,
    init_memory_schema,
    run_migrations,
)
from notesdb.db.registry import ConnectionRegistry, ErrorReporter
from notesdb.services.calendar_items import DEFAULT_HOOKS
from notesdb.utils.paths import disk_database_path, writable_database_directory

_log = logging.getLogger("notesdb.services.database_service")


class DatabaseService:
    """
    Single logical API over the two handles.
    One instance per application run. Not thread-safe.
    """

    def __init__(
        self,
        directory_resolver: Callable[[], Path] = writable_database_directory,
        error_reporter: Optional[ErrorReporter] = None,
        migrations: Sequence[MigrationStep] = DISK_MIGRATIONS,
        memory_schema: Sequence[str] = MEMORY_SCHEMA,
        hooks: Optional[Mapping[str, MigrationHook]] = None,
        registry: Optional[ConnectionRegistry] = None,
    ) -> None:
        self._directory_resolver = directory_resolver
        self._registry = registry or ConnectionRegistry(error_reporter)
        self._migrations = list(migrations)
        self._memory_schema = tuple(memory_schema)
        self._hooks = dict(DEFAULT_HOOKS if hooks is None else hooks)

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def memory(self) -> sqlite3.Connection:
        return self._registry.get(MEMORY_LABEL)

    @property
    def disk(self) -> sqlite3.Connection:
        return self._registry.get(DISK_LABEL)

    def disk_database_path(self) -> Path:
        return disk_database_path(self._directory_resolver())

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def create_memory_connection(self) -> sqlite3.Connection:
        return self._registry.open_memory()

    def create_disk_connection(self) -> sqlite3.Connection:
        return self._registry.open_disk(self.disk_database_path())

    def create_connection(self) -> None:
        """Open memory then disk. ConnectError propagates and startup must halt."""
        self.create_memory_connection()
        self.create_disk_connection()

    def setup_tables(self) -> MigrationReport:
        """Build the memory schema, then bring the disk schema up to date."""
        failed = init_memory_schema(self.memory, self._memory_schema)
        if failed:
            _log.warning("memory schema: %d statement(s) failed", failed)

        report = run_migrations(
            self.disk,
            self._migrations,
            hooks=self._hooks,
            policy=StepErrorPolicy.CONTINUE,
            db_label=DISK_LABEL,
        )
        _log.info(
            "disk schema at version %d (was %d, applied %s, failed %s)",
            report.end_version, report.start_version, report.applied, report.failed,
        )
        return report

    def bootstrap(self) -> MigrationReport:
        self.create_connection()
        return self.setup_tables()

    # ------------------------------------------------------------------
    # App metadata
    # ------------------------------------------------------------------

    def set_app_data(self, name: str, value: str) -> None:
        conn = self.disk
        try:
            with conn:
                queries.set_app_data(conn, name, value)
        except StoreError as exc:
            _log.error("set_app_data(%r) failed: %s", name, exc)
            raise

    def get_app_data(self, name: str) -> str:
        return queries.get_app_data(self.disk, name)

    def get_all_app_data(self) -> dict[str, str]:
        return queries.get_all_app_data(self.disk)

    def delete_app_data(self, name: str) -> bool:
        conn = self.disk
        try:
            with conn:
                return queries.delete_app_data(conn, name)
        except StoreError as exc:
            _log.error("delete_app_data(%r) failed: %s", name, exc)
            raise

    def schema_version(self) -> int:
        return queries.get_schema_version(self.disk)

    # ------------------------------------------------------------------
    # Disk lifecycle
    # ------------------------------------------------------------------

    def remove_disk_database(self) -> bool:
        """
        Delete the disk database file. Returns False if there was nothing to delete.
        A disk handle pointing at the file is closed first.
        """
        path = self.disk_database_path()
        if self._registry.disk_path == path:
            self._registry.close(DISK_LABEL)

        if not path.exists():
            return False

        _log.info("removing database file: %s", path)
        try:
            path.unlink()
            Path(f"{path}-journal").unlink(missing_ok=True)
        except OSError as exc:
            raise DatabaseError(f"could not remove {path}: {exc}") from exc
        return True

    def reinitialize_disk_database(self) -> MigrationReport:
        """
        Remove, reopen and migrate the disk database from version 0.
        All-or-nothing: the first failure is raised. If a migration fails,
        the half-built file is closed and deleted so a retry starts clean.
        """
        self.remove_disk_database()
        conn = self.create_disk_connection()
        try:
            report = run_migrations(
                conn,
                self._migrations,
                hooks=self._hooks,
                policy=StepErrorPolicy.ABORT,
                db_label=DISK_LABEL,
            )
        except (NotesDBError, sqlite3.Error):
            _log.error("reinitialize failed, discarding partial database")
            self.remove_disk_database()
            raise

        _log.info("disk database reinitialized at version %d", report.end_version)
        return report

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._registry.close_all()
