"""Store package — batch forwarding and the end-to-end scrape round."""

from feedscrape.store.forwarder import StoreAck, forward
from feedscrape.store.pipeline import Pingback, parse_cursor, run_scrape

__all__ = ["forward", "StoreAck", "Pingback", "parse_cursor", "run_scrape"]
