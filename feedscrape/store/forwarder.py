"""Batch store forwarder: persist every record of a fetched batch."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from feedscrape.db.records import DEFAULT_PARENT_KEY, TRANSACTION_KIND, insert_record
from feedscrape.errors import StorageWriteError
from feedscrape.scraper.models import Batch

logger = logging.getLogger(__name__)


@dataclass
class StoreAck:
    records_written: int


def forward(
    conn: sqlite3.Connection,
    batch: Batch,
    kind: str = TRANSACTION_KIND,
    parent_key: str = DEFAULT_PARENT_KEY,
) -> StoreAck:
    """Insert each record of *batch* as its own row.

    There is no deduplication and no retry.  The first failed insert stops
    the batch; records already written stay written.

    Raises:
        StorageWriteError: An insert failed.  ``records_written`` tells how
            far the batch got.
    """
    written = 0
    for record in batch.records():
        try:
            insert_record(conn, record, kind=kind, parent_key=parent_key)
        except (sqlite3.Error, TypeError, ValueError) as exc:
            logger.error("Storage write failed after %d record(s): %s", written, exc)
            raise StorageWriteError(
                f"failed to store record {written + 1}: {exc}",
                records_written=written,
            ) from exc
        written += 1

    logger.info("Stored %d %s record(s)", written, kind)
    return StoreAck(records_written=written)
