"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from feedscrape.errors import FetchError

Record = dict[str, Any]


@dataclass(frozen=True)
class Page:
    """One decoded feed response: pagination cursors plus its records."""

    url: str
    next: Optional[str]
    previous: Optional[str]
    data: tuple[Record, ...] = ()


@dataclass(frozen=True)
class FetchFailure:
    url: str
    error: FetchError


@dataclass(frozen=True)
class FetchOutcome:
    """What a fetch task reports on the result queue, exactly once."""

    url: str
    page: Optional[Page] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Batch:
    """Everything collected from one fetch round.

    ``pages`` are in arrival order, which carries no meaning.  At return time
    ``len(pages) + len(failures) == requested``.
    """

    requested: int
    pages: list[Page] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.pages)

    @property
    def failed_urls(self) -> list[str]:
        """URLs worth handing to a fresh ``fetch_all`` call for a retry."""
        return [f.url for f in self.failures]

    @property
    def complete(self) -> bool:
        return len(self.pages) + len(self.failures) == self.requested

    def records(self) -> Iterator[Record]:
        for page in self.pages:
            yield from page.data
