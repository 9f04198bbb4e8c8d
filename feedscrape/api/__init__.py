"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from feedscrape.api import app

    uvicorn feedscrape.api:app
"""

from feedscrape.api.app import app

__all__ = ["app"]
