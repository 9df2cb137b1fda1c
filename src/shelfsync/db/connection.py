# ABOUTME: Opens the shelfsync settings database, creating and upgrading it as needed.
# ABOUTME: One file per user; every CLI invocation opens it, acts, and closes it.

import logging
import sqlite3
from pathlib import Path

from shelfsync.db import schema

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".shelfsync" / "settings.db"


def latest_schema_version() -> int:
    """Highest schema version this release knows how to build."""
    return max([1, *(version for version, _ in schema.MIGRATIONS)])


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Stored schema version, or 0 for a database without settings tables."""
    has_table = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type='table' AND name='schema_version'"
    ).fetchone()
    if not has_table:
        return 0
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def _upgrade(conn: sqlite3.Connection, db_path: Path) -> None:
    current = _get_schema_version(conn)
    if current == 0:
        logger.debug("Creating settings database at %s", db_path)
        conn.executescript(schema.SCHEMA_V1)
        current = 1

    if current > latest_schema_version():
        # Written by a newer shelfsync; the tables this release uses still exist.
        logger.warning(
            "Settings database %s is at schema version %d, newer than this release (%d)",
            db_path,
            current,
            latest_schema_version(),
        )
        return

    for version, sql in schema.MIGRATIONS:
        if version <= current:
            continue
        logger.debug("Upgrading settings database %s to schema version %d", db_path, version)
        conn.executescript(sql)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
        conn.commit()


def open_settings(path: Path | None = None) -> sqlite3.Connection:
    """Open the settings database, creating or upgrading it first.

    The parent directory is created on demand, so a fresh machine needs no
    setup. Connections use WAL journaling and the sqlite3.Row factory.

    Args:
        path: Database file. Defaults to DEFAULT_DB_PATH (~/.shelfsync/settings.db).
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    _upgrade(conn, db_path)
    return conn
