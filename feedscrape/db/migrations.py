"""Database initialisation helpers.

``init_db(conn)`` is idempotent — safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

from feedscrape.config import settings

SCHEMA_VERSION = 1


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes, then record the schema version.

    Every DDL statement uses ``IF NOT EXISTS`` so calling this multiple times
    on the same database is safe.
    """
    sql = settings.schema_path.read_text(encoding="utf-8")
    # executescript() issues an implicit COMMIT first, fine for DDL-only scripts.
    conn.executescript(sql)
    _ensure_version_table(conn)


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version    INTEGER PRIMARY KEY,
                applied_at INTEGER DEFAULT (strftime('%s', 'now'))
            )
            """
        )
        conn.execute(
            "INSERT OR IGNORE INTO schema_version(version) VALUES (?)",
            (SCHEMA_VERSION,),
        )


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied schema version (0 if none applied)."""
    row = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return row[0] if row else 0
