#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
HTTP client for the events API.

The API is a small JSON service:

    GET /events                  -> [Event]
    GET /meetup/<id>             -> Event (primary source detail)
    GET /luma/<id>               -> Event (secondary source detail)
    GET /fetch?location=<term>   -> Event
    GET /fetch/luma/<id>         -> Event (forces an upstream re-fetch)

Requests are plain blocking urllib calls pushed onto a worker thread with
asyncio.to_thread, so the coroutines never stall the UI event loop.
"""

import asyncio
import json
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import replace
from typing import Any, List, Optional

from ._version import __version__
from .config import get_api_base_url, get_request_timeout
from .debug_logger import get_logger
from .models import Event, EventSource, FetchFailure, MalformedEvent


class EventsClient:
    """Async facade over the events API."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_request_timeout()

    def _get_json(self, op: str, path: str) -> Any:
        url = self.base_url + path
        request = urllib.request.Request(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": f"mcli/{__version__}",
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            raise FetchFailure(op, f"status {e.code} from {url}", status=e.code) from e
        except (urllib.error.URLError, OSError) as e:
            raise FetchFailure(op, f"failed to reach {url}: {e}") from e

        if not body.strip():
            return None
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchFailure(op, f"invalid JSON from {url}") from e

    async def _call(self, op: str, path: str) -> Any:
        logger = get_logger()
        logger.fetch_start(op, path=path)
        started = time.monotonic()
        data = await asyncio.to_thread(self._get_json, op, path)
        if data is None:
            count = 0
        else:
            count = len(data) if isinstance(data, list) else 1
        logger.fetch_result(op, count, (time.monotonic() - started) * 1000)
        return data

    @staticmethod
    def _one(op: str, data: Any) -> Event:
        try:
            return Event.from_dict(data)
        except MalformedEvent as e:
            raise FetchFailure(op, str(e)) from e

    async def list_all(self) -> List[Event]:
        """Fetch the full event collection."""
        data = await self._call("list_all", "/events")
        if not isinstance(data, list):
            raise FetchFailure("list_all", "expected a list of events")
        try:
            return [Event.from_dict(item) for item in data]
        except MalformedEvent as e:
            raise FetchFailure("list_all", str(e)) from e

    async def get_by_id(self, event: Event) -> Event:
        """Fetch the full detail of an event from the endpoint of its source."""
        prefix = "luma" if event.source == EventSource.SECONDARY else "meetup"
        event_id = urllib.parse.quote(event.id, safe="")
        data = await self._call("get_by_id", f"/{prefix}/{event_id}")
        detail = self._one("get_by_id", data)
        if not data.get("source"):
            # Primary detail payloads omit the source field
            detail = replace(detail, source=event.source)
        return detail

    async def get_by_location(self, location: str) -> Optional[Event]:
        """Ask the API to fetch the next meetup for a location.

        Returns None when the API found nothing (a null or empty body).
        """
        query = urllib.parse.urlencode({"location": location})
        data = await self._call("get_by_location", f"/fetch?{query}")
        if not data:
            return None
        return self._one("get_by_location", data)

    async def refresh_by_id(self, event_id: str) -> Event:
        """Force an upstream re-fetch of a secondary-source event."""
        quoted = urllib.parse.quote(event_id, safe="")
        data = await self._call("refresh_by_id", f"/fetch/luma/{quoted}")
        return self._one("refresh_by_id", data)
