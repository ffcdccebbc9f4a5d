#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for mcli.

A thin Textual front end over BrowserEngine: it turns key and resize
events into engine calls, schedules the fetch coroutines the engine hands
back as workers, and redraws the title, body, search bar and status line
from engine state after every change.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Static

from ..api import EventsClient
from .app_state import Focus, SearchMode, View
from .engine import BrowserEngine, Fetch
from .formatting import detail_lines, format_clock, format_list_row
from .input_router import normalize_key
from .system_ops import open_in_browser, page_size_for_height

FETCH_LABELS = {
    "list_all": "Loading meetups",
    "get_by_id": "Loading details",
    "get_by_location": "Fetch by location",
    "refresh_by_id": "Reloading details",
}

LIST_HELP = "↑/k ↓/j move · enter open · / filter · f fetch location · r refresh · q quit"
ENTRY_HELP = "type to edit · enter submit · esc done"
DETAIL_HELP = "↑/k ↓/j scroll · o open link · b/esc back · q quit"
DETAIL_REFRESH_HELP = " · r load description"


class MeetupBrowserApp(App):
    """
    Keyboard-driven browser for upcoming meetups.

    The list view shows a window of events sorted by start time; enter
    opens the full detail of the highlighted event.
    """

    TITLE = "mcli"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        client: Optional[Any] = None,
        opener: Optional[Callable[[str], Any]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the app.

        Args:
            client: Events API client (defaults to EventsClient from config)
            opener: Callable used to open links (defaults to the system browser)
            now: Clock override, mainly for tests
        """
        super().__init__()
        self.client = client if client is not None else EventsClient()
        self.engine = BrowserEngine(
            self.client,
            open_url=opener or open_in_browser,
            on_error=self._on_fetch_error,
            on_quit=self.exit,
            now=now,
        )
        self._mounted_ready = False

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Static(id="title")
        yield Static(id="body")
        yield Static(id="search-bar")
        with Horizontal(id="status-bar"):
            yield Static(id="status-help")
            yield Static(id="status-info")

    def on_mount(self) -> None:
        """Size the window, start the initial load and the status clock."""
        self._mounted_ready = True
        self.engine.resize(page_size_for_height(self.size.height))
        self._schedule(self.engine.refresh())
        self.set_interval(1.0, self._render_status)

    def on_resize(self, event: events.Resize) -> None:
        self.engine.resize(page_size_for_height(event.size.height))
        self._render_all()

    def on_key(self, event: events.Key) -> None:
        """Single entry point for keystrokes; bindings only cover quitting."""
        token = normalize_key(event.key, event.character)
        pending = self.engine.handle_key(token)
        event.stop()
        event.prevent_default()
        if pending is not None:
            self._schedule(pending)
        else:
            self._render_all()

    # ------------------------------------------------------------------
    # Fetch scheduling
    # ------------------------------------------------------------------

    def _schedule(self, fetch: Fetch) -> None:
        """Run a fetch as a worker; duplicates are allowed to overlap."""
        self.run_worker(self._run_fetch(fetch), group="fetch", exclusive=False)
        self._render_all()

    async def _run_fetch(self, fetch: Fetch) -> None:
        await fetch
        self._render_all()

    def _on_fetch_error(self, op: str, error: BaseException) -> None:
        label = FETCH_LABELS.get(op, op)
        self.notify(f"{label} failed: {error}", severity="error")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_all(self) -> None:
        if not self._mounted_ready:
            return
        self._render_title()
        self._render_body()
        self._render_search()
        self._render_status()

    def _render_title(self) -> None:
        if self.engine.view.view == View.DETAILS:
            text = "🔎 Meetup Details"
        else:
            text = "📅 Meetups"
        self.query_one("#title", Static).update(text)

    def _render_body(self) -> None:
        engine = self.engine
        now = engine.now()
        page_size = engine.page_size

        if engine.view.view == View.DETAILS and engine.detail.event is not None:
            lines = detail_lines(engine.detail.event, now)
            offset = engine.detail.offset
            rows = lines[offset:offset + page_size]
        else:
            window = engine.window
            rows = [
                format_list_row(event, now, selected=(i == window.selected_in_window))
                for i, event in enumerate(window.visible_slice())
            ]
            if not rows:
                rows = ["[dim]Loading meetups...[/dim]" if engine.loading else "[dim]No meetups found[/dim]"]

        # Pad so stale rows from the previous frame are overwritten
        rows += [""] * (page_size - len(rows))
        self.query_one("#body", Static).update("\n".join(rows))

    def _render_search(self) -> None:
        search = self.engine.search
        focused = self.engine.view.focus == Focus.TEXT_ENTRY
        buffer = search.buffer
        if buffer:
            text = escape(buffer)
        elif search.mode == SearchMode.FILTER:
            text = "[dim]Filter meetups…[/dim]"
        else:
            text = "[dim]Fetch location…[/dim]"
        cursor = "[reverse] [/reverse]" if focused else ""
        self.query_one("#search-bar", Static).update(f"🔍 {text}{cursor}")

    def _render_status(self) -> None:
        if not self._mounted_ready:
            return
        engine = self.engine
        if engine.view.focus == Focus.TEXT_ENTRY:
            help_text = ENTRY_HELP
        elif engine.view.view == View.DETAILS:
            help_text = DETAIL_HELP
            event = engine.view.event
            if event is not None and event.description is None and event.refreshable:
                help_text += DETAIL_REFRESH_HELP
        else:
            help_text = LIST_HELP

        info = []
        if engine.loading:
            info.append("[yellow]loading…[/yellow]")
        if engine.search.term:
            info.append(f"{len(engine.filtered)}/{len(engine.store.events)}")
        info.append(format_clock(engine.now()))

        self.query_one("#status-help", Static).update(f"[dim]{help_text}[/dim]")
        self.query_one("#status-info", Static).update(" ".join(info))
