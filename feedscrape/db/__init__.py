"""Database layer package.

Public re-exports so callers can write::

    from feedscrape.db import get_connection, init_db
    from feedscrape.db import records
"""

from feedscrape.db.connection import get_connection
from feedscrape.db.migrations import init_db
from feedscrape.db import records

__all__ = ["get_connection", "init_db", "records"]
