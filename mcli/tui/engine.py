#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Navigation and view-state engine for the meetup browser.

BrowserEngine owns the event store, search state, view state and both
scroll controllers. Keystrokes come in through handle_key(); anything that
needs the network is returned as a coroutine for the host to schedule, so
the input loop never waits on a fetch. The coroutine applies its result
when it completes, and a failed fetch leaves every piece of state as it was.

Concurrent fetches of the same kind are neither coalesced nor cancelled:
whichever completes last wins.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Coroutine, List, Optional

from ..debug_logger import DebugLogger, get_logger
from ..models import Event
from .app_state import EventStore, Focus, SearchMode, SearchState, View, ViewState
from .detail_scroll import DetailScrollController
from .filtering import filter_and_sort
from .input_router import Action, InputRouter, Routed
from .window import DEFAULT_PAGE_SIZE, WindowedListController

Fetch = Coroutine[Any, Any, bool]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BrowserEngine:
    """State machine driving the list and detail views.

    Args:
        client: object with async list_all(), get_by_id(event),
            get_by_location(term) and refresh_by_id(id)
        open_url: callable used to open an event link externally
        on_error: called with (op, exception) when a fetch fails
        on_quit: called when the user asks to quit
        now: clock used to skip events that already started
        page_size: initial number of visible rows
    """

    def __init__(
        self,
        client: Any,
        open_url: Optional[Callable[[str], Any]] = None,
        on_error: Optional[Callable[[str, BaseException], None]] = None,
        on_quit: Optional[Callable[[], None]] = None,
        now: Optional[Callable[[], datetime]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        logger: Optional[DebugLogger] = None,
    ) -> None:
        self.client = client
        self._open_url = open_url
        self._on_error = on_error
        self._on_quit = on_quit
        self.now = now or _utcnow
        self.logger = logger or get_logger()

        self.store = EventStore()
        self.search = SearchState()
        self.view = ViewState.list_view()
        self.window = WindowedListController(page_size)
        self.detail = DetailScrollController(page_size)
        self.router = InputRouter()
        self.filtered: List[Event] = []
        self.in_flight = 0
        # Set when the page size changed while details were open
        self._rewind_on_back = False

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def page_size(self) -> int:
        return self.window.page_size

    @property
    def loading(self) -> bool:
        return self.in_flight > 0

    def on_state_changed(self, rewind: bool = False) -> None:
        """Re-derive the filtered list, then re-clamp the window, then the detail scroll.

        With rewind=True the list position is reset and moved past events
        that already started, as after a new search or a new collection.
        """
        self.filtered = filter_and_sort(self.store.events, self.search.term)
        self.window.set_items(self.filtered)
        if rewind:
            self.window.reset()
            self.window.skip_past(self.now())
        self.detail.reclamp()

    def resize(self, page_size: int) -> None:
        """Apply a new terminal-derived page size to both controllers."""
        changed = self.window.set_page_size(page_size)
        self.detail.set_page_size(page_size)
        if not changed:
            return
        if self.view.view == View.DETAILS:
            self.on_state_changed()
            self._rewind_on_back = True
        else:
            self.on_state_changed(rewind=True)

    def _set_view(self, view: ViewState) -> None:
        if view != self.view:
            self.logger.view_change(self.view.label, view.label)
        self.view = view

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> Optional[Fetch]:
        """Route one keystroke token. Returns a fetch coroutine to schedule, if any."""
        pending = None
        for routed in self.router.route(key, self.view.view, self.view.focus):
            pending = self.apply(routed)
        return pending

    def apply(self, routed: Routed) -> Optional[Fetch]:
        action = routed.action
        if action == Action.MOVE_UP:
            self.window.move_up()
        elif action == Action.MOVE_DOWN:
            self.window.move_down()
        elif action == Action.OPEN_DETAIL:
            return self.open_selected()
        elif action == Action.START_FILTER:
            self.start_filter()
        elif action == Action.START_LOCATION:
            self.start_location()
        elif action == Action.REFRESH:
            return self.refresh()
        elif action == Action.TYPE_TEXT:
            self.type_text(routed.text)
        elif action == Action.DELETE_CHAR:
            self.delete_char()
        elif action == Action.CANCEL_ENTRY:
            self.cancel_entry()
        elif action == Action.SUBMIT_ENTRY:
            return self.submit_entry()
        elif action == Action.BACK:
            self.back()
        elif action == Action.OPEN_URL:
            self.open_url()
        elif action == Action.REFRESH_DETAIL:
            return self.refresh_detail()
        elif action == Action.SCROLL_UP:
            self.detail.scroll_up()
        elif action == Action.SCROLL_DOWN:
            self.detail.scroll_down()
        elif action == Action.QUIT:
            if self._on_quit is not None:
                self._on_quit()
        return None

    # ------------------------------------------------------------------
    # Search bar
    # ------------------------------------------------------------------

    def start_filter(self) -> None:
        self.search.mode = SearchMode.FILTER
        self.search.term = ""
        self._set_view(ViewState.list_view(Focus.TEXT_ENTRY))
        self.on_state_changed(rewind=True)

    def start_location(self) -> None:
        self.search.mode = SearchMode.FETCH_BY_LOCATION
        self.search.location = ""
        self._set_view(ViewState.list_view(Focus.TEXT_ENTRY))
        self.on_state_changed(rewind=True)

    def type_text(self, text: str) -> None:
        if self.search.mode == SearchMode.FILTER:
            self.search.term += text
            self.on_state_changed(rewind=True)
        else:
            self.search.location += text

    def delete_char(self) -> None:
        if self.search.mode == SearchMode.FILTER:
            if self.search.term:
                self.search.term = self.search.term[:-1]
                self.on_state_changed(rewind=True)
        else:
            self.search.location = self.search.location[:-1]

    def cancel_entry(self) -> None:
        """Leave the search bar; whatever was typed stays in effect."""
        self._set_view(ViewState.list_view(Focus.NAVIGATING))

    def submit_entry(self) -> Optional[Fetch]:
        self._set_view(ViewState.list_view(Focus.NAVIGATING))
        if self.search.mode == SearchMode.FILTER:
            return None
        location = self.search.location.strip()
        if not location:
            return None
        return self.fetch_by_location(location)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def back(self) -> None:
        """Return to the list.

        The list position is left as it was, unless the terminal was resized
        while the details were open.
        """
        self.detail.clear()
        self._set_view(ViewState.list_view(Focus.NAVIGATING))
        if self._rewind_on_back:
            self._rewind_on_back = False
            self.on_state_changed(rewind=True)

    def open_url(self) -> None:
        event = self.view.event
        if event is None or not event.url or self._open_url is None:
            return
        self._open_url(event.url)

    # ------------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------------

    def _fetch(
        self,
        op: str,
        request: Callable[[], Awaitable[Any]],
        on_success: Callable[[Any], None],
    ) -> Fetch:
        # Counted from the moment the request is issued, not when it starts running
        self.in_flight += 1
        return self._complete(op, request, on_success)

    async def _complete(
        self,
        op: str,
        request: Callable[[], Awaitable[Any]],
        on_success: Callable[[Any], None],
    ) -> bool:
        try:
            result = await request()
        except Exception as e:
            self.logger.fetch_error(op, e)
            if self._on_error is not None:
                self._on_error(op, e)
            return False
        finally:
            self.in_flight -= 1
        on_success(result)
        return True

    def refresh(self) -> Fetch:
        """Reload the whole collection."""
        return self._fetch("list_all", self.client.list_all, self._apply_collection)

    def _apply_collection(self, events: List[Event]) -> None:
        self.store.replace(events)
        self.on_state_changed(rewind=True)

    def fetch_by_location(self, location: str) -> Fetch:
        """Replace the collection with the event found for a location.

        Nothing found is not an error: the collection becomes empty.
        """
        return self._fetch(
            "get_by_location",
            lambda: self.client.get_by_location(location),
            lambda event: self._apply_collection([] if event is None else [event]),
        )

    def open_selected(self) -> Optional[Fetch]:
        """Load the full detail of the highlighted event and switch to it."""
        selected = self.window.current
        if selected is None:
            return None
        return self._fetch("get_by_id", lambda: self.client.get_by_id(selected), self._show_detail)

    def _show_detail(self, event: Event) -> None:
        self.detail.load(event)
        self._set_view(ViewState.details(event))

    def refresh_detail(self) -> Optional[Fetch]:
        """Re-fetch the open event upstream when its description is still missing."""
        event = self.view.event
        if self.view.view != View.DETAILS or event is None:
            return None
        if event.description is not None or not event.refreshable:
            return None
        return self._fetch(
            "refresh_by_id",
            lambda: self.client.refresh_by_id(event.id),
            lambda fresh: self._replace_detail(event.id, fresh),
        )

    def _replace_detail(self, event_id: str, fresh: Event) -> None:
        current = self.view.event
        if self.view.view != View.DETAILS or current is None or current.id != event_id:
            return
        self.detail.replace(fresh)
        self.view = ViewState.details(fresh)
