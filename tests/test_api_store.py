"""Tests for the /store and /records API endpoints.

The lifespan opens its own DB in a temporary workspace; each test then swaps
in an in-memory connection and an ``httpx.Client`` backed by a
``MockTransport`` so no network calls are made.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from feedscrape.api.app import create_app
from feedscrape.config import settings
from feedscrape.db.connection import get_connection
from feedscrape.db.migrations import init_db
from feedscrape.db.records import count_records, insert_record

BASE = "https://feed.test/api/v5/public"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _feed(request: httpx.Request) -> httpx.Response:
    until = int(request.url.params["until"])
    if until == 13:
        return httpx.Response(404)
    return httpx.Response(200, json={"paging": {}, "data": [{"until": until}]})


@pytest.fixture()
def db():
    conn = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(conn)
    yield conn
    conn.close()


@pytest.fixture()
def client(db, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "workspace_dir", tmp_path)
    monkeypatch.setattr(settings, "feed_base_url", BASE)
    monkeypatch.setattr(settings, "window_interval", 1)
    monkeypatch.setattr(settings, "window_size", 4)
    monkeypatch.setattr(settings, "poll_interval", 0.01)

    fake_http = httpx.Client(transport=httpx.MockTransport(_feed), timeout=2.0)
    app = create_app()

    with TestClient(app, raise_server_exceptions=True) as c:
        c.app.state.db = db
        c.app.state.http_client = fake_http
        yield c

    fake_http.close()


# ---------------------------------------------------------------------------
# /store
# ---------------------------------------------------------------------------

class TestStore:
    def test_returns_next_cursor(self, client, db):
        resp = client.get("/store", params={"from": "100"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["endingtime"] == 104
        assert data["records_written"] == 4
        assert data["failed_urls"] == []
        assert count_records(db) == 4

    def test_partial_failure_reported(self, client, db):
        resp = client.get("/store", params={"from": "10"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["endingtime"] == 14
        assert data["pages_fetched"] == 3
        assert data["failed_urls"] == [f"{BASE}?until=13"]

    def test_missing_cursor_is_400(self, client, db):
        resp = client.get("/store")
        assert resp.status_code == 400
        assert count_records(db) == 0

    def test_bad_cursor_is_400(self, client):
        resp = client.get("/store", params={"from": "tomorrow"})
        assert resp.status_code == 400

    def test_total_failure_is_502(self, client, db, monkeypatch):
        monkeypatch.setattr(settings, "window_size", 1)
        resp = client.get("/store", params={"from": "13"})
        assert resp.status_code == 502
        assert resp.json()["detail"]["failed_urls"] == [f"{BASE}?until=13"]
        assert count_records(db) == 0

    def test_storage_error_is_500_with_cursor(self, client, db):
        db.execute("DROP TABLE records")
        resp = client.get("/store", params={"from": "0"})
        assert resp.status_code == 500
        detail = resp.json()["detail"]
        assert detail["endingtime"] == 4
        assert detail["records_written"] == 0


# ---------------------------------------------------------------------------
# /records
# ---------------------------------------------------------------------------

class TestRecords:
    def test_count(self, client, db):
        insert_record(db, {"x": 1})
        resp = client.get("/records/count")
        assert resp.status_code == 200
        assert resp.json() == {"kind": "Transaction", "count": 1}

    def test_list(self, client, db):
        insert_record(db, {"x": 1})
        insert_record(db, {"x": 2})
        resp = client.get("/records", params={"limit": 1})
        assert resp.status_code == 200
        rows = resp.json()
        assert len(rows) == 1
        assert rows[0]["payload"] == {"x": 2}
        assert rows[0]["parent_key"] == "default_transaction"

    def test_limit_validated(self, client):
        resp = client.get("/records", params={"limit": 0})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# lifespan
# ---------------------------------------------------------------------------

class TestLifespan:
    def test_shared_client_uses_request_timeout(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "workspace_dir", tmp_path)
        monkeypatch.setattr(settings, "request_timeout", 3.5)

        with TestClient(create_app()) as c:
            http_client = c.app.state.http_client
            assert http_client.timeout == httpx.Timeout(3.5)

        assert http_client.is_closed
