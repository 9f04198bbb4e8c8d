"""Concurrent fan-out / fan-in fetch coordinator.

Each URL becomes one job on a ``ThreadPoolExecutor``.  Jobs never raise:
they put exactly one :class:`FetchOutcome` on a shared ``queue.Queue`` and
the coordinator counts outcomes until it has one per URL.  While waiting it
polls the queue with a short timeout and emits a heartbeat on every empty
poll, so a slow batch is visible rather than silent.

Termination relies on each job finishing on its own, which the client's
request timeout guarantees.  Nothing is cancelled or abandoned.
"""

from __future__ import annotations

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import httpx

from feedscrape.config import settings
from feedscrape.errors import FetchAggregateError, FetchError
from feedscrape.scraper.fetcher import fetch_page, make_client
from feedscrape.scraper.models import Batch, FetchFailure, FetchOutcome

logger = logging.getLogger(__name__)

# (received, requested) -> None
Heartbeat = Callable[[int, int], None]


def _log_heartbeat(received: int, requested: int) -> None:
    logger.debug("waiting on fetches: %d/%d received", received, requested)


def _fetch_task(
    client: httpx.Client,
    url: str,
    results: "queue.Queue[FetchOutcome]",
) -> None:
    """Fetch one URL and report the outcome on *results*, whatever happens."""
    try:
        logger.info("Fetching %s", url)
        page = fetch_page(client, url)
    except FetchError as exc:
        outcome = FetchOutcome(url=url, error=exc)
    except Exception as exc:  # noqa: BLE001
        outcome = FetchOutcome(url=url, error=FetchError(url, f"unexpected error: {exc!r}", exc))
    else:
        outcome = FetchOutcome(url=url, page=page)
    results.put(outcome)


class FetchCoordinator:
    """Fetch a batch of feed URLs in parallel and aggregate the pages.

    Args:
        client: Shared HTTP client.  Its timeout bounds every request.
        poll_interval: Seconds to block on the result queue before emitting
            a heartbeat.  Defaults to ``settings.poll_interval``.
        max_workers: Worker cap.  ``0``/``None`` runs one worker per URL.
            Defaults to ``settings.fetch_max_workers``.
        heartbeat: Called with ``(received, requested)`` on every empty poll.
    """

    def __init__(
        self,
        client: httpx.Client,
        poll_interval: Optional[float] = None,
        max_workers: Optional[int] = None,
        heartbeat: Optional[Heartbeat] = None,
    ) -> None:
        self.client = client
        self.poll_interval = settings.poll_interval if poll_interval is None else poll_interval
        self.max_workers = settings.fetch_max_workers if max_workers is None else max_workers
        self.heartbeat = heartbeat or _log_heartbeat

    def _pool_size(self, n: int) -> int:
        if not self.max_workers:
            return n
        return min(self.max_workers, n)

    def fetch_all(self, urls: Sequence[str]) -> Batch:
        """Fetch every URL and return once each has reported an outcome.

        Returns:
            A :class:`Batch` with the successful pages and per-URL failures.
            An empty *urls* gives an empty batch.

        Raises:
            FetchAggregateError: Every URL failed.
        """
        urls = list(urls)
        batch = Batch(requested=len(urls))
        if not urls:
            return batch

        results: queue.Queue[FetchOutcome] = queue.Queue()
        received = 0

        with ThreadPoolExecutor(
            max_workers=self._pool_size(len(urls)),
            thread_name_prefix="fetch",
        ) as pool:
            for url in urls:
                pool.submit(_fetch_task, self.client, url, results)

            while received < len(urls):
                try:
                    outcome = results.get(timeout=self.poll_interval)
                except queue.Empty:
                    self.heartbeat(received, len(urls))
                    continue

                received += 1
                if outcome.ok:
                    logger.info("%s was fetched (next=%s)", outcome.url, outcome.page.next)
                    batch.pages.append(outcome.page)
                else:
                    logger.warning("Fetch failed: %s", outcome.error)
                    batch.failures.append(FetchFailure(url=outcome.url, error=outcome.error))

        logger.info(
            "Fetched %d/%d page(s), %d failure(s)",
            batch.succeeded, batch.requested, len(batch.failures),
        )

        if not batch.pages:
            raise FetchAggregateError(batch.failures)
        return batch


def fetch_all(
    urls: Sequence[str],
    client: Optional[httpx.Client] = None,
    **kwargs,
) -> Batch:
    """Convenience wrapper around :meth:`FetchCoordinator.fetch_all`.

    When *client* is omitted a client with ``settings.request_timeout`` is
    created for this call and closed afterwards.  Extra keyword arguments go
    to :class:`FetchCoordinator`.
    """
    if client is not None:
        return FetchCoordinator(client, **kwargs).fetch_all(urls)

    with make_client(settings.request_timeout) as owned:
        return FetchCoordinator(owned, **kwargs).fetch_all(urls)
