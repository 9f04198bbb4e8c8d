"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``), initialises the schema, and creates
one ``httpx.Client`` (``request.app.state.http_client``) that every fetch
worker shares.  On shutdown both are closed.

Routers
-------
    /store     — run one scrape round (``GET /store?from=<cursor>``)
    /records   — read back stored transaction records
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from feedscrape.config import configure_logging, settings
from feedscrape.db import get_connection, init_db
from feedscrape.scraper.fetcher import make_client

from feedscrape.api.routers import records as records_router
from feedscrape.api.routers import store as store_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB and the HTTP client on startup; close both on shutdown."""
    configure_logging()
    conn = get_connection()
    init_db(conn)
    client = make_client(settings.request_timeout)
    app.state.db = conn
    app.state.http_client = client
    try:
        yield
    finally:
        client.close()
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="feedscrape API",
        description=(
            "Scrapes time-windowed pages of a public transaction feed "
            "concurrently and stores the records, returning the cursor "
            "to resume from."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(store_router.router, prefix="/store", tags=["store"])
    app.include_router(records_router.router, prefix="/records", tags=["records"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn feedscrape.api.app:app
app = create_app()
