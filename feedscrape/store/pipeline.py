"""One scrape round, end to end.

    parse cursor → build window → fetch batch → forward records → Pingback

The returned cursor depends only on the window, never on fetch outcomes.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass, field
from typing import Optional

import httpx

from feedscrape.config import settings
from feedscrape.errors import InvalidInput, StorageWriteError
from feedscrape.scraper.coordinator import fetch_all
from feedscrape.scraper.window import build_window
from feedscrape.store.forwarder import forward

logger = logging.getLogger(__name__)

_CURSOR_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class Pingback:
    """Acknowledgement returned to the caller of a scrape round."""

    ending_time: int
    records_written: int = 0
    pages_fetched: int = 0
    failed_urls: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "endingtime": self.ending_time,
            "records_written": self.records_written,
            "pages_fetched": self.pages_fetched,
            "failed_urls": self.failed_urls,
        }


def parse_cursor(raw: object) -> int:
    """Turn the caller's starting cursor into an integer.

    Raises:
        InvalidInput: *raw* is missing, not a plain base-10 integer (ASCII
            digits, optional sign, no padding), or outside the signed 64-bit
            range.
    """
    if isinstance(raw, bool):
        raise InvalidInput(f"invalid starting cursor: {raw!r}")
    if raw is None or raw == "":
        raise InvalidInput("missing starting cursor")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _CURSOR_RE.fullmatch(raw):
        value = int(raw)
    else:
        raise InvalidInput(f"invalid starting cursor: {raw!r}")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidInput(f"starting cursor out of range: {raw!r}")
    return value


def run_scrape(
    conn: sqlite3.Connection,
    raw_cursor: object,
    client: Optional[httpx.Client] = None,
    interval: Optional[int] = None,
    count: Optional[int] = None,
) -> Pingback:
    """Scrape one window starting at *raw_cursor* and store its records.

    Window parameters default to ``settings.window_interval`` and
    ``settings.window_size``.

    Raises:
        InvalidInput: Bad cursor; nothing is fetched.
        InvalidWindow: Bad window parameters; nothing is fetched.
        FetchAggregateError: Every URL failed; nothing is stored.
        StorageWriteError: A write failed.  Its ``next_cursor`` is set, since
            the fetch itself succeeded.
    """
    starting_time = parse_cursor(raw_cursor)
    next_cursor, urls = build_window(
        starting_time,
        settings.window_interval if interval is None else interval,
        settings.window_size if count is None else count,
    )
    logger.info("Scraping %d page(s) from %d, next cursor %d", len(urls), starting_time, next_cursor)

    batch = fetch_all(urls, client=client)

    try:
        ack = forward(conn, batch)
    except StorageWriteError as exc:
        exc.next_cursor = next_cursor
        raise

    return Pingback(
        ending_time=next_cursor,
        records_written=ack.records_written,
        pages_fetched=batch.succeeded,
        failed_urls=batch.failed_urls,
    )
