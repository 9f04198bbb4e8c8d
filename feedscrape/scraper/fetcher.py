"""Single-URL fetch: GET the feed page and decode it into a :class:`Page`.

Every failure is raised as a :class:`~feedscrape.errors.FetchError`
subclass so the coordinator can report it as a typed outcome.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from feedscrape.errors import FetchDecodeError, FetchTransportError
from feedscrape.scraper.models import Page

_DEFAULT_HEADERS = {
    "User-Agent": "feedscrape/1.0 (+https://github.com/feedscrape)",
    "Accept": "application/json",
}


# ---------------------------------------------------------------------------
# Wire schema
# ---------------------------------------------------------------------------

class _Paging(BaseModel):
    model_config = ConfigDict(extra="allow")

    next: Optional[str] = None
    previous: Optional[str] = None


class FeedDocument(BaseModel):
    """``{"paging": {...}, "data": [...]}``.  Unknown fields are tolerated."""

    model_config = ConfigDict(extra="allow")

    paging: Optional[_Paging] = None
    data: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def make_client(timeout: float) -> httpx.Client:
    """Return a client suitable for sharing across fetch workers."""
    return httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=timeout,
        follow_redirects=True,
    )


def decode_page(url: str, body: bytes) -> Page:
    """Decode a raw response body into a :class:`Page`.

    Raises:
        FetchDecodeError: If the body is not JSON or ``data`` is missing or
            not a list of objects.
    """
    try:
        doc = FeedDocument.model_validate_json(body)
    except ValidationError as exc:
        raise FetchDecodeError(url, f"malformed feed document ({exc.error_count()} error(s))", exc) from exc

    paging = doc.paging or _Paging()
    return Page(
        url=url,
        next=paging.next,
        previous=paging.previous,
        data=tuple(doc.data),
    )


def fetch_page(client: httpx.Client, url: str) -> Page:
    """GET *url* with *client* and decode the body.

    The request timeout comes from *client*; it is what bounds the lifetime
    of a fetch task.

    Raises:
        FetchTransportError: Connection/timeout errors and non-2xx statuses.
        FetchDecodeError: The body is not a feed document.
    """
    try:
        response = client.get(url)
        body = response.read()
    except httpx.HTTPError as exc:
        raise FetchTransportError(url, f"{type(exc).__name__}: {exc}", exc) from exc

    if not response.is_success:
        raise FetchTransportError(
            url,
            f"HTTP {response.status_code}",
            status_code=response.status_code,
        )

    return decode_page(url, body)
