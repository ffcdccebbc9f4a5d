# SPDX-License-Identifier: MIT
"""Search filtering and chronological ordering of the event list."""

from typing import Iterable, List

from ..models import Event


def _search_fields(event: Event) -> tuple:
    return (event.title, event.group_name, event.city, event.venue_city)


def matches(event: Event, term: str) -> bool:
    """True if any searched attribute contains term, ignoring case."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (field or "").lower() for field in _search_fields(event))


def filter_and_sort(events: Iterable[Event], term: str) -> List[Event]:
    """Return the events matching term, oldest first.

    sorted() is stable, so events sharing a start time keep their input
    order.
    """
    return sorted(
        (e for e in events if matches(e, term or "")),
        key=lambda e: e.date_time,
    )
