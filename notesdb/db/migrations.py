# notesdb/db/migrations.py
"""
Schema migration system for the disk database, plus the memory schema.

Design:
- Each migration is a MigrationStep(version, description, statements, hook)
  where statements is a tuple of individual SQL strings — no splitting.
- Migrations are append-only — never modify existing entries. Adding a
  schema change means appending a step, not touching the runner.
- Version tracked in appData under "schema_version" (string integer).
- Idempotent: a step runs only while stored version < step.version, so a
  second pass over an up-to-date DB executes nothing.
- The memory schema has no version: the memory DB never survives a restart,
  so it is created fresh every time.

Failure policy:
- CONTINUE (startup): a failing statement or hook is logged and the pass
  carries on. The stored version never advances past a failed step, so
  that step and everything after it are retried on the next start.
- ABORT (reinitialize): the failing step is rolled back and MigrationError
  is raised.
- A step whose commit fails is rolled back and handled by the same policy.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from notesdb.core.enums import StepErrorPolicy
from notesdb.core.exceptions import ConfigError, MigrationError, StoreError
from notesdb.core.constants import SCHEMA_VERSION_KEY
from notesdb.db.queries import (
    ensure_app_data_table,
    get_app_data,
    get_schema_version,
    set_schema_version,
)

_log = logging.getLogger("notesdb.db.migrations")

MigrationHook = Callable[[sqlite3.Connection], object]


@dataclass(frozen=True)
class MigrationStep:
    version: int
    description: str
    statements: tuple[str, ...] = ()
    hook: Optional[str] = None


@dataclass
class MigrationReport:
    """Outcome of one runner pass."""
    start_version: int
    end_version: int
    applied: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    executed_statements: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


# ---------------------------------------------------------------------------
# memory.db schema — rebuilt on every start
# ---------------------------------------------------------------------------

MEMORY_SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE note (
        id                  INTEGER PRIMARY KEY,
        name                VARCHAR(255),
        file_name           VARCHAR(255),
        note_text           TEXT,
        decrypted_note_text TEXT,
        has_dirty_data      INTEGER DEFAULT 0,
        file_last_modified  DATETIME,
        file_created        DATETIME,
        crypto_key          INT64 DEFAULT 0,
        crypto_password     VARCHAR(255),
        created             DATETIME DEFAULT current_timestamp,
        modified            DATETIME DEFAULT current_timestamp
    )
    """,
)


# ---------------------------------------------------------------------------
# disk.db migrations
# version must be monotonically increasing from 1.
# ---------------------------------------------------------------------------

DISK_MIGRATIONS: list[MigrationStep] = [
    MigrationStep(
        1,
        "calendar items: calendarItem table, unique url index, completion + sort columns",
        (
            """
            CREATE TABLE IF NOT EXISTS calendarItem (
                id                   INTEGER PRIMARY KEY,
                summary              VARCHAR(255),
                url                  VARCHAR(255),
                description          TEXT,
                has_dirty_data       INTEGER DEFAULT 0,
                completed            INTEGER DEFAULT 0,
                priority             INTEGER,
                calendar             VARCHAR(255),
                uid                  VARCHAR(255),
                ics_data             TEXT,
                alarm_date           DATETIME,
                etag                 VARCHAR(255),
                last_modified_string VARCHAR(255),
                created              DATETIME DEFAULT current_timestamp,
                modified             DATETIME DEFAULT current_timestamp
            )
            """,
            "CREATE UNIQUE INDEX IF NOT EXISTS idxUrl ON calendarItem(url)",
            "ALTER TABLE calendarItem ADD completed_date DATETIME",
            "ALTER TABLE calendarItem ADD sort_priority INTEGER DEFAULT 0",
        ),
    ),
    MigrationStep(
        2,
        "recompute calendar item sort priorities",
        hook="update_all_sort_priorities",
    ),
]


# ---------------------------------------------------------------------------
# Migration runner
# ---------------------------------------------------------------------------

def validate_migration_list(migrations: Sequence[MigrationStep]) -> None:
    for i, step in enumerate(migrations):
        expected = i + 1
        if step.version != expected:
            raise ConfigError(
                f"Migration list invalid: expected version {expected}, got {step.version}"
            )
        if isinstance(step.statements, str):
            raise ConfigError(
                f"Migration {step.version}: statements must be a sequence of SQL strings"
            )


def run_migrations(
    conn: sqlite3.Connection,
    migrations: Sequence[MigrationStep],
    hooks: Optional[Mapping[str, MigrationHook]] = None,
    policy: StepErrorPolicy = StepErrorPolicy.CONTINUE,
    db_label: str = "disk",
) -> MigrationReport:
    """
    Apply all pending migrations in ascending order.
    Each step runs in its own transaction together with its version stamp.
    Returns a MigrationReport; raises MigrationError only under ABORT.
    """
    validate_migration_list(migrations)
    hooks = hooks or {}

    ensure_app_data_table(conn)
    current = get_schema_version(conn)
    report = MigrationReport(start_version=current, end_version=current)
    blocked = False  # an earlier step failed in this pass

    for step in migrations:
        if step.version <= current:
            report.skipped.append(step.version)
            continue

        _log.info(f"[{db_label}] applying migration {step.version}: {step.description}")
        try:
            errors = _apply_step(conn, step, hooks, policy, db_label, report)
        except MigrationError:
            report.failed.append(step.version)
            raise

        if errors:
            blocked = True
            report.failed.append(step.version)
            _log.warning(
                f"[{db_label}] migration {step.version} finished with {errors} error(s); "
                f"schema version held at {report.end_version}"
            )
            continue

        report.applied.append(step.version)
        if not blocked:
            report.end_version = step.version
        _log.info(f"[{db_label}] migration {step.version} applied")

    if not get_app_data(conn, SCHEMA_VERSION_KEY):
        _persist_initial_version(conn, report.end_version, policy, db_label)

    if not report.applied and not report.failed:
        _log.debug(f"[{db_label}] schema up to date at version {current}")

    return report


def _apply_step(
    conn: sqlite3.Connection,
    step: MigrationStep,
    hooks: Mapping[str, MigrationHook],
    policy: StepErrorPolicy,
    db_label: str,
    report: MigrationReport,
) -> int:
    """
    Run one step's statements and hook. Returns number of tolerated errors.
    A transaction the caller left open is committed first, so the step's
    rollback never reaches the caller's writes.
    """
    errors = 0
    if conn.in_transaction:
        _log.debug(f"[{db_label}] committing pending transaction before migration {step.version}")
        conn.commit()
    try:
        conn.execute("BEGIN")
        with conn:
            for sql in step.statements:
                sql = sql.strip()
                if not sql:
                    continue
                report.executed_statements += 1
                try:
                    conn.execute(sql)
                except sqlite3.Error as exc:
                    msg = str(exc).lower()
                    if "duplicate column" in msg or "already exists" in msg:
                        _log.debug(f"[{db_label}] idempotent skip: {exc}")
                        continue
                    errors += 1
                    _on_step_error(step, policy, db_label, f"{exc} ({_first_line(sql)})", exc)

            if step.hook:
                hook = hooks.get(step.hook)
                if hook is None:
                    errors += 1
                    _on_step_error(step, policy, db_label, f"hook {step.hook!r} not registered")
                else:
                    try:
                        hook(conn)
                    except Exception as exc:
                        errors += 1
                        _on_step_error(
                            step, policy, db_label, f"hook {step.hook!r} raised: {exc}", exc
                        )

            if not errors and report.end_version == step.version - 1:
                try:
                    set_schema_version(conn, step.version)
                except StoreError as exc:
                    errors += 1
                    _on_step_error(step, policy, db_label, str(exc), exc)
    except sqlite3.Error as exc:
        # BEGIN or COMMIT failed, e.g. a deferred foreign key violated at commit
        if conn.in_transaction:
            conn.rollback()
        errors += 1
        _on_step_error(step, policy, db_label, f"transaction failed: {exc}", exc)
    return errors


def _persist_initial_version(
    conn: sqlite3.Connection, version: int, policy: StepErrorPolicy, db_label: str
) -> None:
    """Stamp a database that has no schema_version yet, e.g. an empty migration list."""
    try:
        with conn:
            set_schema_version(conn, version)
    except StoreError as exc:
        if policy is StepErrorPolicy.ABORT:
            raise
        _log.warning(f"[{db_label}] could not store schema version {version}: {exc}")


def _on_step_error(
    step: MigrationStep,
    policy: StepErrorPolicy,
    db_label: str,
    detail: str,
    cause: Optional[BaseException] = None,
) -> None:
    if policy is StepErrorPolicy.ABORT:
        _log.error(f"[{db_label}] migration {step.version} aborted: {detail}")
        raise MigrationError(step.version, detail) from cause
    _log.warning(f"[{db_label}] migration {step.version}: {detail}")


def _first_line(sql: str) -> str:
    return sql.strip().splitlines()[0].strip()


# ---------------------------------------------------------------------------
# Memory schema initializer
# ---------------------------------------------------------------------------

def init_memory_schema(
    conn: sqlite3.Connection,
    statements: Sequence[str] = MEMORY_SCHEMA,
) -> int:
    """
    Create the session-scoped tables on the memory handle.
    No version check. Failures are logged and tolerated.
    Returns the number of statements that failed.
    """
    failed = 0
    for sql in statements:
        sql = sql.strip()
        if not sql:
            continue
        try:
            conn.execute(sql)
        except sqlite3.Error as exc:
            failed += 1
            _log.warning(f"[memory] schema statement failed: {exc} ({_first_line(sql)})")
    conn.commit()
    return failed
