"""feedscrape CLI — entry-point for all scrape operations.

Usage:
    python cli/main.py --help

Commands:
    db init     create the SQLite schema
    window      print the URLs of one window (no network)
    scrape      run one scrape round
    run         run consecutive rounds, resuming from each returned cursor
    records     inspect stored records
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from feedscrape.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import time
from typing import Optional

import typer

from feedscrape.config import configure_logging, settings
from feedscrape.db import get_connection, init_db
from feedscrape.db.migrations import current_version
from feedscrape.errors import FeedScrapeError, StorageWriteError
from feedscrape.scraper.window import build_window
from feedscrape.store.pipeline import Pingback, run_scrape

from cli.commands.records import records_app

app = typer.Typer(
    name="feedscrape",
    help="Concurrent scraper for a time-windowed public transaction feed.",
    no_args_is_help=True,
)
app.add_typer(records_app, name="records")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    version = current_version(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path} (schema v{version})")


# ---------------------------------------------------------------------------
# Window / scrape commands
# ---------------------------------------------------------------------------
@app.command("window")
def window(
    start: int = typer.Option(..., "--from", help="Starting cursor."),
    interval: Optional[int] = typer.Option(None, help="Cursor step (default: WINDOW_INTERVAL)."),
    count: Optional[int] = typer.Option(None, help="Number of pages (default: WINDOW_SIZE)."),
) -> None:
    """Print the URLs one scrape round would fetch, without fetching them."""
    try:
        next_cursor, urls = build_window(
            start,
            settings.window_interval if interval is None else interval,
            settings.window_size if count is None else count,
        )
    except FeedScrapeError as exc:
        typer.echo(f"[window] Error: {exc}")
        raise typer.Exit(code=1)

    for url in urls:
        typer.echo(f"  {url}")
    typer.echo(f"[window] Next cursor: {next_cursor}")


def _report(tag: str, pingback: Pingback) -> None:
    typer.echo(
        f"[{tag}] Stored {pingback.records_written} record(s) from "
        f"{pingback.pages_fetched} page(s)"
    )
    for url in pingback.failed_urls:
        typer.echo(f"[{tag}] ✗ Failed {url}")
    typer.echo(f"[{tag}] Next cursor: {pingback.ending_time}")


@app.command("scrape")
def scrape(
    start: str = typer.Option(..., "--from", help="Starting cursor."),
) -> None:
    """Run one scrape round and print the cursor to resume from."""
    conn = get_connection()
    init_db(conn)
    try:
        pingback = run_scrape(conn, start)
    except StorageWriteError as exc:
        typer.echo(f"[scrape] Storage error after {exc.records_written} record(s): {exc}")
        typer.echo(f"[scrape] Next cursor: {exc.next_cursor}")
        raise typer.Exit(code=1)
    except FeedScrapeError as exc:
        typer.echo(f"[scrape] Error: {exc}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    _report("scrape", pingback)


@app.command("run")
def run(
    start: str = typer.Option(..., "--from", help="Starting cursor."),
    rounds: int = typer.Option(1, min=1, help="Number of consecutive rounds."),
    delay: float = typer.Option(0.0, min=0.0, help="Seconds to sleep between rounds."),
) -> None:
    """Scrape consecutive windows, feeding each returned cursor into the next."""
    conn = get_connection()
    init_db(conn)
    cursor: object = start
    try:
        for i in range(rounds):
            if i and delay:
                time.sleep(delay)
            try:
                pingback = run_scrape(conn, cursor)
            except FeedScrapeError as exc:
                typer.echo(f"[run] Round {i + 1}/{rounds} failed: {exc}")
                raise typer.Exit(code=1)
            _report(f"run {i + 1}/{rounds}", pingback)
            cursor = pingback.ending_time
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
