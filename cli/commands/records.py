"""Commands for inspecting stored transaction records."""

import json

import typer

from feedscrape.db import get_connection, init_db
from feedscrape.db.records import count_records, list_records

records_app = typer.Typer(help="Inspect stored transaction records.", no_args_is_help=True)


@records_app.command("count")
def records_count() -> None:
    """Print how many records are stored."""
    conn = get_connection()
    init_db(conn)
    try:
        total = count_records(conn)
    finally:
        conn.close()
    typer.echo(f"[records] {total} record(s)")


@records_app.command("list")
def records_list(
    limit: int = typer.Option(10, min=1, help="Maximum number of records to show."),
) -> None:
    """Show the most recently stored records."""
    conn = get_connection()
    init_db(conn)
    try:
        records = list_records(conn, limit=limit)
    finally:
        conn.close()

    if not records:
        typer.echo("[records] No records stored.")
        return
    for r in records:
        typer.echo(f"  {r.id}  {json.dumps(r.payload, sort_keys=True)}")
