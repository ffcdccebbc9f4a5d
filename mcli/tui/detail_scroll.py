# SPDX-License-Identifier: MIT
"""Vertical scrolling of the detail view."""

from typing import Optional

from ..models import Event
from .window import DEFAULT_PAGE_SIZE

# Title, group, venue, RSVPs, link
DETAIL_HEADER_LINES = 5


def description_line_count(description: Optional[str]) -> int:
    if description is None:
        return 0
    return len(description.split("\n"))


def detail_total_lines(event: Event) -> int:
    """Header lines, one blank separator, then the description lines."""
    return DETAIL_HEADER_LINES + 1 + description_line_count(event.description)


class DetailScrollController:
    """Keeps the detail scroll offset within [0, max_offset]."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.event: Optional[Event] = None
        self.offset = 0
        self.total_lines = 0
        self.page_size = max(1, int(page_size))

    @property
    def max_offset(self) -> int:
        return max(0, self.total_lines - self.page_size)

    def load(self, event: Event) -> None:
        """Show a newly opened event from the top."""
        self.event = event
        self.total_lines = detail_total_lines(event)
        self.offset = 0

    def replace(self, event: Event) -> None:
        """Swap in a refreshed copy of the current event, keeping the scroll position."""
        self.event = event
        self.total_lines = detail_total_lines(event)
        self.reclamp()

    def clear(self) -> None:
        self.event = None
        self.total_lines = 0
        self.offset = 0

    def set_page_size(self, page_size: int) -> None:
        self.page_size = max(1, int(page_size))
        self.reclamp()

    def reclamp(self) -> None:
        self.offset = max(0, min(self.offset, self.max_offset))

    def scroll_up(self) -> None:
        self.offset = max(0, self.offset - 1)

    def scroll_down(self) -> None:
        self.offset = min(self.max_offset, self.offset + 1)
