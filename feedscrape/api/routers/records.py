"""Read-only access to stored transaction records.

Routes
------
GET /records?limit=50    Most recent records, newest first
GET /records/count       Number of stored records
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Request

from feedscrape.db.models import StoredRecord
from feedscrape.db.records import TRANSACTION_KIND, count_records, list_records

router = APIRouter()


def _record_dict(record: StoredRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "kind": record.kind,
        "parent_key": record.parent_key,
        "payload": record.payload,
        "created_at": record.created_at,
    }


@router.get("")
def get_records(
    request: Request,
    limit: int = Query(50, ge=1, le=1000),
) -> list[dict[str, Any]]:
    conn = request.app.state.db
    return [_record_dict(r) for r in list_records(conn, limit=limit)]


@router.get("/count")
def get_record_count(request: Request) -> dict[str, Any]:
    conn = request.app.state.db
    return {"kind": TRANSACTION_KIND, "count": count_records(conn)}
