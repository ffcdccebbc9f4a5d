#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the events API client."""

import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from conftest import make_event
from mcli.api import EventsClient
from mcli.models import EventSource, FetchFailure

pytest_plugins = ("pytest_asyncio",)

EVENT = {
    "id": "e1",
    "title": "Python Night",
    "dateTime": "2026-03-11T18:00:00Z",
    "venueName": "Hall",
}


def _response(payload):
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    response = MagicMock()
    response.read.return_value = body
    response.__enter__.return_value = response
    return response


@pytest.fixture
def urlopen():
    with patch("mcli.api.urllib.request.urlopen") as mock:
        yield mock


@pytest.fixture
def client():
    return EventsClient(base_url="http://api.test/", timeout=2.0)


def _requested_url(urlopen):
    request = urlopen.call_args.args[0]
    return request.full_url


class TestConstruction:
    def test_base_url_from_config(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "http://configured:9000/")
        assert EventsClient().base_url == "http://configured:9000"

    def test_timeout_passed_to_urlopen(self, client, urlopen):
        urlopen.return_value = _response([])
        client._get_json("list_all", "/events")
        assert urlopen.call_args.kwargs["timeout"] == 2.0
        assert urlopen.call_args.args[0].get_header("Accept") == "application/json"


class TestListAll:
    @pytest.mark.asyncio
    async def test_parses_events(self, client, urlopen):
        urlopen.return_value = _response([EVENT, dict(EVENT, id="e2", source="luma")])
        events = await client.list_all()
        assert _requested_url(urlopen) == "http://api.test/events"
        assert [e.id for e in events] == ["e1", "e2"]
        assert events[1].source == EventSource.SECONDARY

    @pytest.mark.asyncio
    async def test_non_list_payload(self, client, urlopen):
        urlopen.return_value = _response({"error": "nope"})
        with pytest.raises(FetchFailure, match="expected a list"):
            await client.list_all()

    @pytest.mark.asyncio
    async def test_malformed_item(self, client, urlopen):
        urlopen.return_value = _response([EVENT, {"title": "no id"}])
        with pytest.raises(FetchFailure):
            await client.list_all()

    @pytest.mark.asyncio
    async def test_http_error_keeps_status(self, client, urlopen):
        urlopen.side_effect = urllib.error.HTTPError(
            "http://api.test/events", 503, "Service Unavailable", hdrs=None, fp=None
        )
        with pytest.raises(FetchFailure) as exc_info:
            await client.list_all()
        assert exc_info.value.status == 503
        assert exc_info.value.op == "list_all"

    @pytest.mark.asyncio
    async def test_connection_error(self, client, urlopen):
        urlopen.side_effect = urllib.error.URLError("connection refused")
        with pytest.raises(FetchFailure, match="failed to reach"):
            await client.list_all()

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, urlopen):
        urlopen.return_value = _response(b"<html>")
        with pytest.raises(FetchFailure, match="invalid JSON"):
            await client.list_all()


class TestDetailEndpoints:
    @pytest.mark.asyncio
    async def test_primary_detail_keeps_list_source(self, client, urlopen):
        urlopen.return_value = _response(dict(EVENT, description="Talks"))
        detail = await client.get_by_id(make_event("e1"))
        assert _requested_url(urlopen) == "http://api.test/meetup/e1"
        assert detail.description == "Talks"
        assert detail.source == EventSource.PRIMARY

    @pytest.mark.asyncio
    async def test_secondary_detail_endpoint(self, client, urlopen):
        urlopen.return_value = _response(EVENT)
        detail = await client.get_by_id(make_event("evt/7", source="luma"))
        assert _requested_url(urlopen) == "http://api.test/luma/evt%2F7"
        assert detail.source == EventSource.SECONDARY

    @pytest.mark.asyncio
    async def test_get_by_location_encodes_query(self, client, urlopen):
        urlopen.return_value = _response(EVENT)
        event = await client.get_by_location("New York")
        assert _requested_url(urlopen) == "http://api.test/fetch?location=New+York"
        assert event.id == "e1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"null", b"{}", b"", b"  \n"])
    async def test_get_by_location_empty_body_is_no_result(self, client, urlopen, body):
        urlopen.return_value = _response(body)
        assert await client.get_by_location("Nowhere") is None

    @pytest.mark.asyncio
    async def test_get_by_id_null_body_is_failure(self, client, urlopen):
        urlopen.return_value = _response(b"null")
        with pytest.raises(FetchFailure):
            await client.get_by_id(make_event("e1"))

    @pytest.mark.asyncio
    async def test_get_by_location_not_found(self, client, urlopen):
        urlopen.side_effect = urllib.error.HTTPError(
            "http://api.test/fetch", 404, "Not Found", hdrs=None, fp=None
        )
        with pytest.raises(FetchFailure) as exc_info:
            await client.get_by_location("Atlantis")
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_refresh_by_id(self, client, urlopen):
        urlopen.return_value = _response(dict(EVENT, source="luma", description="Fresh"))
        event = await client.refresh_by_id("e1")
        assert _requested_url(urlopen) == "http://api.test/fetch/luma/e1"
        assert event.description == "Fresh"
