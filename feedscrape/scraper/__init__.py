"""Scraper package — window building, concurrent fetch and page decoding."""

from feedscrape.scraper.coordinator import FetchCoordinator, fetch_all
from feedscrape.scraper.fetcher import decode_page, fetch_page
from feedscrape.scraper.models import Batch, FetchFailure, FetchOutcome, Page
from feedscrape.scraper.window import build_window

__all__ = [
    "build_window",
    "fetch_all",
    "fetch_page",
    "decode_page",
    "FetchCoordinator",
    "Batch",
    "FetchFailure",
    "FetchOutcome",
    "Page",
]
