"""Exception taxonomy for the scrape pipeline.

Only validation errors, a totally failed fetch round and storage errors ever
reach the caller.  Per-URL ``FetchError`` instances are caught inside the
fetch workers and reported as failed outcomes instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from feedscrape.scraper.models import FetchFailure


class FeedScrapeError(Exception):
    """Base class for every error raised by feedscrape."""


class InvalidWindow(FeedScrapeError, ValueError):
    """Window parameters cannot produce a terminating URL sequence."""


class InvalidInput(FeedScrapeError, ValueError):
    """The starting cursor supplied by the caller is missing or unparsable."""


# ---------------------------------------------------------------------------
# Per-URL fetch errors
# ---------------------------------------------------------------------------

class FetchError(FeedScrapeError):
    """A single URL could not be turned into a page."""

    def __init__(self, url: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.cause = cause


class FetchTransportError(FetchError):
    """Network failure, request timeout, or a non-2xx response."""

    def __init__(
        self,
        url: str,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(url, message, cause)
        self.status_code = status_code


class FetchDecodeError(FetchError):
    """The response body is not a feed document."""


class FetchAggregateError(FeedScrapeError):
    """Every URL in the batch failed; nothing is left to store."""

    def __init__(self, failures: list[FetchFailure]) -> None:
        super().__init__(f"all {len(failures)} fetch(es) failed")
        self.failures = failures


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class StorageWriteError(FeedScrapeError):
    """A record insert failed; the remaining records of the batch were skipped."""

    def __init__(
        self,
        message: str,
        records_written: int = 0,
        next_cursor: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.records_written = records_written
        self.next_cursor = next_cursor
