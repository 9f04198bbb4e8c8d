"""Time-window URL builder.

The feed is paged backwards in time with an ``until`` cursor.  A *window* is
``count`` consecutive cursors spaced ``interval`` apart; the value after the
last one is handed back to the caller so the next round resumes there.
"""

from __future__ import annotations

from typing import Optional

import httpx

from feedscrape.config import settings
from feedscrape.errors import InvalidWindow


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidWindow(f"{name} must be an integer, got {value!r}")
    return value


def build_window(
    starting_time: int,
    interval: int,
    count: int,
    base_url: Optional[str] = None,
) -> tuple[int, list[str]]:
    """Return ``(next_cursor, urls)`` for a window starting at *starting_time*.

    Args:
        starting_time: Cursor of the first page in the window.
        interval: Step between consecutive cursors.  ``0`` yields an empty
            window.
        count: Number of URLs wanted.
        base_url: Feed endpoint.  Defaults to ``settings.feed_base_url``.

    Returns:
        The advanced cursor (``starting_time + interval * count``) and the
        URLs in chronological step order.

    Raises:
        InvalidWindow: If *count* is negative, *interval* is negative while
            *count* is not zero, or any argument is not an integer.
    """
    starting_time = _require_int("starting_time", starting_time)
    interval = _require_int("interval", interval)
    count = _require_int("count", count)

    if count < 0:
        raise InvalidWindow(f"count must be >= 0, got {count}")
    if interval < 0 and count > 0:
        raise InvalidWindow(f"interval must be > 0, got {interval}")

    base = httpx.URL(base_url or settings.feed_base_url)
    ending_time = starting_time + interval * count
    current = starting_time
    urls: list[str] = []

    while current < ending_time:
        urls.append(str(base.copy_merge_params({"until": current})))
        current += interval

    return current, urls
