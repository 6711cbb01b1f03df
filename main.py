"""
NotesDB — entry point.
Opens the memory and disk databases and brings the disk schema up to date.
No business logic here.
"""
import logging
import sys

from PyQt6.QtWidgets import QApplication

from notesdb.core.constants import APP_NAME, ORGANIZATION_NAME
from notesdb.core.exceptions import ConnectError
from notesdb.services.database_service import DatabaseService
from notesdb.ui.dialogs.connection_error_dialog import report_fatal_connection_error

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
_log = logging.getLogger("notesdb.main")


def main() -> int:
    app = QApplication(sys.argv)
    # Application and organization names decide the QStandardPaths data dir
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORGANIZATION_NAME)

    db = DatabaseService(error_reporter=report_fatal_connection_error)
    try:
        report = db.bootstrap()
    except ConnectError as exc:
        _log.error("startup halted: %s", exc)
        return 1

    _log.info(
        "%s started — database %s at schema version %d",
        APP_NAME, db.disk_database_path(), report.end_version,
    )
    db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
