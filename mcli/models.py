#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for mcli.

Contains the Event record, its source enum, the error hierarchy and the
payload parsing shared by the API client and the tests.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


# =============================================================================
# Constants
# =============================================================================

ONLINE_VENUE = "Online event"


# =============================================================================
# Errors
# =============================================================================


class MCLIError(Exception):
    """Base class for mcli errors."""


class FetchFailure(MCLIError):
    """A remote operation failed (network, HTTP status or payload)."""

    def __init__(self, op: str, message: str, status: Optional[int] = None):
        super().__init__(f"{op}: {message}")
        self.op = op
        self.status = status


class MalformedEvent(MCLIError, ValueError):
    """A payload could not be turned into an Event."""


# =============================================================================
# Enums
# =============================================================================


class EventSource(str, Enum):
    """Upstream provider an event came from."""
    PRIMARY = "meetup"
    SECONDARY = "luma"

    @classmethod
    def parse(cls, value: Optional[str]) -> "EventSource":
        if value and value.lower() == cls.SECONDARY.value:
            return cls.SECONDARY
        return cls.PRIMARY


# =============================================================================
# Data Classes
# =============================================================================


def parse_date_time(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts "2025-06-01T18:00:00-04:00" and "2025-06-01T22:00:00.000Z".
    Naive timestamps are taken as UTC.
    """
    if not isinstance(value, str) or not value:
        raise MalformedEvent(f"invalid dateTime: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedEvent(f"invalid dateTime: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _str(data: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return str(value)
    return ""


def _int(data: Dict[str, Any], key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Event:
    """A single meetup as returned by the events API."""
    id: str
    title: str
    date_time: datetime
    source: EventSource = EventSource.PRIMARY
    group_name: str = ""
    city: str = ""
    venue_city: str = ""
    venue_name: str = ""
    venue_address: str = ""
    state: str = ""
    url: str = ""
    event_type: str = ""
    description: Optional[str] = None
    rsvps_count: int = 0
    ticket_count: int = 0

    @property
    def is_online(self) -> bool:
        return self.venue_name == ONLINE_VENUE

    @property
    def refreshable(self) -> bool:
        """Only secondary-source events can be re-fetched upstream."""
        return self.source == EventSource.SECONDARY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Build an Event from an API payload.

        The two upstream providers disagree on field names ("city" vs
        "venueCity", "state" vs "venueState"); both spellings are read.

        Raises:
            MalformedEvent: when id or dateTime is missing or invalid.
        """
        if not isinstance(data, dict):
            raise MalformedEvent(f"expected an object, got {type(data).__name__}")
        event_id = data.get("id")
        if event_id is None or event_id == "":
            raise MalformedEvent("event without id")
        description = data.get("description")
        return cls(
            id=str(event_id),
            title=_str(data, "title"),
            date_time=parse_date_time(data.get("dateTime", "")),
            source=EventSource.parse(data.get("source")),
            group_name=_str(data, "groupName", "organizerName"),
            city=_str(data, "city", "venueCity"),
            venue_city=_str(data, "venueCity"),
            venue_name=_str(data, "venueName"),
            venue_address=_str(data, "venueAddress"),
            state=_str(data, "state", "venueState"),
            url=_str(data, "url"),
            event_type=_str(data, "eventType"),
            description=None if description is None else str(description),
            rsvps_count=_int(data, "rsvpsCount"),
            ticket_count=_int(data, "ticketCount"),
        )
