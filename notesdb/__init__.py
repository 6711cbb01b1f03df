# notesdb — dual-connection SQLite bootstrap and schema migrations
from notesdb.core.constants import APP_VERSION as __version__

__all__ = ["__version__"]
