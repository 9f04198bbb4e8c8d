"""Insert and read operations for the ``records`` table."""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from time import time
from typing import Any, Optional

from feedscrape.db.models import StoredRecord

TRANSACTION_KIND = "Transaction"
DEFAULT_PARENT_KEY = "default_transaction"

# The API shares one connection across worker threads; a commit or rollback
# must only ever close the insert that opened it.
_write_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_record(row: sqlite3.Row) -> StoredRecord:
    return StoredRecord(
        id=row["id"],
        kind=row["kind"],
        parent_key=row["parent_key"],
        payload=json.loads(row["payload"]),
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def insert_record(
    conn: sqlite3.Connection,
    payload: dict[str, Any],
    kind: str = TRANSACTION_KIND,
    parent_key: str = DEFAULT_PARENT_KEY,
) -> str:
    """Insert one record under *kind* / *parent_key* and return its new id.

    Each call is its own transaction, so a record is either fully stored or
    not at all.

    Raises:
        sqlite3.Error: The insert failed.
        TypeError: *payload* is not JSON-serialisable.
    """
    rid = str(uuid.uuid4())
    row = (rid, kind, parent_key, json.dumps(payload), int(time()))
    with _write_lock, conn:
        conn.execute(
            """
            INSERT INTO records (id, kind, parent_key, payload, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            row,
        )
    return rid


def get_record(conn: sqlite3.Connection, record_id: str) -> Optional[StoredRecord]:
    """Fetch a single record by id.  Returns ``None`` if not found."""
    row = conn.execute(
        "SELECT * FROM records WHERE id = ?", (record_id,)
    ).fetchone()
    return _row_to_record(row) if row else None


def list_records(
    conn: sqlite3.Connection,
    kind: str = TRANSACTION_KIND,
    limit: int = 50,
) -> list[StoredRecord]:
    """Return the most recently stored records of *kind*, newest first."""
    rows = conn.execute(
        "SELECT * FROM records WHERE kind = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (kind, limit),
    ).fetchall()
    return [_row_to_record(r) for r in rows]


def count_records(conn: sqlite3.Connection, kind: str = TRANSACTION_KIND) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM records WHERE kind = ?", (kind,)
    ).fetchone()
    return row[0]
