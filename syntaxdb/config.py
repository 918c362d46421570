"""Runtime configuration for the syntax store."""

from dataclasses import dataclass
from pathlib import Path

__all__ = ["StoreConfig", "DEFAULT_DB_PATH"]

DEFAULT_DB_PATH = "~/.syntaxdb/vvs_syntax_db.sqlite3"


@dataclass
class StoreConfig:
    """
    Settings for SyntaxStore.

    Fields
    ──────
    db_path      — SQLite file; "~" is expanded, parent dirs are created
    timeout      — seconds a connection waits on a locked database
    journal_mode — SQLite journal mode applied to every connection
    """
    db_path:      str   = DEFAULT_DB_PATH
    timeout:      float = 5.0
    journal_mode: str   = "WAL"

    @property
    def path(self) -> Path:
        return Path(self.db_path).expanduser()
