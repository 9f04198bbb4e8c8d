"""Scrape endpoint.

Routes
------
GET /store?from=<cursor>    → run one scrape round, return the next cursor
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from feedscrape.errors import (
    FetchAggregateError,
    InvalidInput,
    InvalidWindow,
    StorageWriteError,
)
from feedscrape.store.pipeline import run_scrape

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class PingbackResponse(BaseModel):
    endingtime: int
    records_written: int
    pages_fetched: int
    failed_urls: list[str]


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.get("", response_model=PingbackResponse)
def store(
    request: Request,
    from_: Optional[str] = Query(None, alias="from"),
) -> dict[str, Any]:
    """Fetch one window of feed pages starting at ``from`` and store them.

    Error mapping:

    - bad cursor / window → 400
    - every page failed   → 502
    - storage write error → 500 (detail carries the advanced cursor)
    """
    conn = request.app.state.db
    client = request.app.state.http_client
    try:
        pingback = run_scrape(conn, from_, client=client)
    except (InvalidInput, InvalidWindow) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FetchAggregateError as exc:
        raise HTTPException(
            status_code=502,
            detail={
                "error": str(exc),
                "failed_urls": [f.url for f in exc.failures],
            },
        ) from exc
    except StorageWriteError as exc:
        raise HTTPException(
            status_code=500,
            detail={
                "error": str(exc),
                "records_written": exc.records_written,
                "endingtime": exc.next_cursor,
            },
        ) from exc
    return pingback.to_dict()
