"""Tests for the single-URL fetch task unit.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from feedscrape.errors import FetchDecodeError, FetchTransportError
from feedscrape.scraper.fetcher import decode_page, fetch_page, make_client
from feedscrape.scraper.models import Page

URL = "https://feed.test/api/v5/public"

_DOC = {
    "paging": {
        "next": "https://feed.test/api/v5/public?until=995",
        "previous": "https://feed.test/api/v5/public?since=1000",
    },
    "data": [
        {"payment_id": 1, "message": "pizza", "actor": {"username": "a"}},
        {"payment_id": 2, "message": "rent", "actor": {"username": "b"}},
    ],
}


# ---------------------------------------------------------------------------
# decode_page
# ---------------------------------------------------------------------------

class TestDecodePage:
    def test_decodes_paging_and_records(self) -> None:
        import json

        page = decode_page(URL, json.dumps(_DOC).encode())
        assert isinstance(page, Page)
        assert page.url == URL
        assert page.next == _DOC["paging"]["next"]
        assert page.previous == _DOC["paging"]["previous"]
        assert [r["payment_id"] for r in page.data] == [1, 2]

    def test_records_forwarded_verbatim(self) -> None:
        page = decode_page(URL, b'{"data": [{"x": {"y": [1, 2]}, "z": null}]}')
        assert page.data == ({"x": {"y": [1, 2]}, "z": None},)

    def test_paging_null(self) -> None:
        page = decode_page(URL, b'{"paging": null, "data": [{"a": 1}]}')
        assert page.next is None
        assert len(page.data) == 1

    def test_paging_optional(self) -> None:
        page = decode_page(URL, b'{"data": []}')
        assert page.next is None
        assert page.previous is None
        assert page.data == ()

    def test_unknown_fields_tolerated(self) -> None:
        body = b'{"data": [], "paging": {"next": "n", "cursor": 3}, "meta": {"v": 5}}'
        page = decode_page(URL, body)
        assert page.next == "n"

    def test_page_is_immutable(self) -> None:
        page = decode_page(URL, b'{"data": []}')
        with pytest.raises(AttributeError):
            page.next = "x"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"",
            b"[]",
            b'{"paging": {"next": "n"}}',
            b'{"data": null}',
            b'{"data": "rows"}',
            b'{"data": [1, 2]}',
        ],
    )
    def test_malformed_documents(self, body: bytes) -> None:
        with pytest.raises(FetchDecodeError) as info:
            decode_page(URL, body)
        assert info.value.url == URL


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------

class TestFetchPage:
    def test_successful_fetch(self) -> None:
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(200, json=_DOC))
            with make_client(timeout=5.0) as client:
                page = fetch_page(client, URL)

        assert len(page.data) == 2

    def test_http_error_status(self) -> None:
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(503, text="busy"))
            with make_client(timeout=5.0) as client:
                with pytest.raises(FetchTransportError) as info:
                    fetch_page(client, URL)

        assert info.value.status_code == 503
        assert info.value.url == URL

    def test_timeout(self) -> None:
        with respx.mock:
            respx.get(URL).mock(side_effect=httpx.ReadTimeout("timed out"))
            with make_client(timeout=5.0) as client:
                with pytest.raises(FetchTransportError) as info:
                    fetch_page(client, URL)

        assert isinstance(info.value.cause, httpx.ReadTimeout)
        assert info.value.status_code is None

    def test_connect_error(self) -> None:
        with respx.mock:
            respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))
            with make_client(timeout=5.0) as client:
                with pytest.raises(FetchTransportError):
                    fetch_page(client, URL)

    def test_bad_body(self) -> None:
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(200, text="<html>"))
            with make_client(timeout=5.0) as client:
                with pytest.raises(FetchDecodeError):
                    fetch_page(client, URL)

    def test_sends_json_accept_header(self) -> None:
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(200, json=_DOC))
            with make_client(timeout=5.0) as client:
                fetch_page(client, URL)

        assert route.calls.last.request.headers["accept"] == "application/json"


# ---------------------------------------------------------------------------
# make_client
# ---------------------------------------------------------------------------

class TestMakeClient:
    def test_every_request_is_time_bounded(self) -> None:
        with make_client(timeout=2.5) as client:
            assert client.timeout == httpx.Timeout(2.5)

    def test_timeout_reaches_the_request(self) -> None:
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(200, json=_DOC))
            with make_client(timeout=4.0) as client:
                fetch_page(client, URL)

        timeouts = route.calls.last.request.extensions["timeout"]
        assert timeouts == httpx.Timeout(4.0).as_dict()
