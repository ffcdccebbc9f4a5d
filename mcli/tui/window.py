# SPDX-License-Identifier: MIT
"""Scrolling window over the filtered event list."""

from datetime import datetime
from typing import List, Optional, Sequence

from ..models import Event

DEFAULT_PAGE_SIZE = 18


class WindowedListController:
    """Tracks the highlighted row and the first visible row of the list.

    Invariant while the list is non-empty:
        0 <= offset <= selected < offset + page_size
        selected < len(items)
    An empty list always has selected == offset == 0.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.items: List[Event] = []
        self.selected = 0
        self.offset = 0
        self.page_size = max(1, int(page_size))

    def __len__(self) -> int:
        return len(self.items)

    @property
    def current(self) -> Optional[Event]:
        if 0 <= self.selected < len(self.items):
            return self.items[self.selected]
        return None

    @property
    def selected_in_window(self) -> int:
        return self.selected - self.offset

    def set_items(self, items: Sequence[Event]) -> None:
        """Swap in a new filtered sequence and re-clamp the window."""
        self.items = list(items)
        self._clamp()

    def set_page_size(self, page_size: int) -> bool:
        """Apply a new page size. Returns True if it changed (and the window was reset)."""
        page_size = max(1, int(page_size))
        if page_size == self.page_size:
            return False
        self.page_size = page_size
        self.reset()
        return True

    def reset(self) -> None:
        self.selected = 0
        self.offset = 0

    def skip_past(self, now: datetime) -> None:
        """Jump to the first event that has not started yet.

        Expects items in ascending start order. Leaves the window alone when
        no such event exists or it is already the first row.
        """
        for index, event in enumerate(self.items):
            if event.date_time >= now:
                if index > 0:
                    self.selected = index
                    self.offset = index
                return

    def move_up(self) -> None:
        if not self.items:
            return
        self.selected = max(0, self.selected - 1)
        self.slide()

    def move_down(self) -> None:
        if not self.items:
            return
        self.selected = min(len(self.items) - 1, self.selected + 1)
        self.slide()

    def slide(self) -> None:
        """Move the window the minimum distance needed to show selected."""
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + self.page_size:
            self.offset = self.selected - self.page_size + 1

    def visible_slice(self) -> List[Event]:
        return self.items[self.offset:self.offset + self.page_size]

    def _clamp(self) -> None:
        if not self.items:
            self.reset()
            return
        self.selected = max(0, min(self.selected, len(self.items) - 1))
        self.offset = max(0, min(self.offset, self.selected))
        self.slide()
