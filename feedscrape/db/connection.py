"""SQLite connection factory.

Usage::

    from feedscrape.db.connection import get_connection

    conn = get_connection()
    conn.execute("SELECT 1")
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from feedscrape.config import settings


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    The connection is opened with ``check_same_thread=False`` because the
    API serves requests from a thread pool while sharing one connection.
    WAL journal mode is enabled for on-disk databases.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA journal_mode = WAL")

    return conn
