# SPDX-License-Identifier: MIT
"""State containers for the meetup browser.

The dataclasses group related state together semantically:

- EventStore: the last fetched raw collection
- SearchState: filter term, search mode and the location buffer
- ViewState: list or details, plus input focus while in the list
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from ..models import Event


class View(str, Enum):
    LIST = "list"
    DETAILS = "details"


class Focus(str, Enum):
    NAVIGATING = "navigating"
    TEXT_ENTRY = "text_entry"


class SearchMode(str, Enum):
    FILTER = "filter"
    FETCH_BY_LOCATION = "fetch"


@dataclass
class EventStore:
    """Owner of the raw event collection.

    The collection is only ever replaced as a whole, never merged.
    """

    events: List[Event] = field(default_factory=list)

    def replace(self, events: Iterable[Event]) -> None:
        self.events = list(events)


@dataclass
class SearchState:
    """Search bar state.

    In FILTER mode the term narrows the list as it is typed. In
    FETCH_BY_LOCATION mode the location buffer is sent to the API on submit.
    """

    term: str = ""
    mode: SearchMode = SearchMode.FILTER
    location: str = ""

    @property
    def buffer(self) -> str:
        """Text currently shown in the search bar."""
        return self.term if self.mode == SearchMode.FILTER else self.location


@dataclass(frozen=True)
class ViewState:
    """Either the list (with a focus) or the details of one event."""

    view: View = View.LIST
    focus: Focus = Focus.NAVIGATING
    event: Optional[Event] = None

    @classmethod
    def list_view(cls, focus: Focus = Focus.NAVIGATING) -> "ViewState":
        return cls(view=View.LIST, focus=focus)

    @classmethod
    def details(cls, event: Event) -> "ViewState":
        return cls(view=View.DETAILS, focus=Focus.NAVIGATING, event=event)

    @property
    def label(self) -> str:
        if self.view == View.DETAILS:
            return "details"
        return f"list/{self.focus.value}"
