#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Shared formatting utilities for TUI components.

Consolidates time formatting, list row rendering and detail line
rendering used by both the Textual app and the one-shot `mcli list`
output.
"""

import platform
import subprocess
from datetime import datetime, timedelta
from functools import lru_cache
from typing import List, Optional

from rich.markup import escape

from ..models import Event, EventSource


@lru_cache(maxsize=1)
def _get_time_format() -> str:
    """Get the clock format string based on system preferences.

    On macOS: checks AppleICUForce24HourTime preference
      - 1 = 24h format -> %H:%M:%S
      - 0 or unset = 12h format -> %r (with AM/PM)
    On other platforms: uses %X (locale-dependent)
    """
    if platform.system() != "Darwin":
        return "%X"

    try:
        result = subprocess.run(
            ["defaults", "read", "NSGlobalDomain", "AppleICUForce24HourTime"],
            capture_output=True,
            text=True,
            timeout=1,
        )
        if result.returncode == 0 and result.stdout.strip() == "1":
            return "%H:%M:%S"
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass

    return "%r"


def format_clock(now: datetime) -> str:
    """Status bar clock: local date plus time in the user's preferred format."""
    local = now.astimezone()
    return f"{local:%Y-%m-%d} {local.strftime(_get_time_format())}"


def format_duration(delta: timedelta) -> str:
    """Render a signed distance to an event start, e.g. "3d2h ꜛ" or "5h ago"."""
    future = delta >= timedelta(0)
    hours_total = abs(delta).total_seconds() / 3600
    days = int(hours_total / 24)
    hours = int(hours_total) % 24

    result = ""
    if days > 0:
        result += f"{days}d"
    if hours > 0 or days == 0:
        result += f"{hours}h"

    return result + (" ꜛ" if future else " ago")


def time_to_go(event: Event, now: datetime) -> str:
    """Short label for the list: "started", "today @18:30" or "3d"."""
    if event.date_time <= now:
        return "started"
    local_event = event.date_time.astimezone()
    days = (local_event.date() - now.astimezone().date()).days
    if days == 0:
        return f"today @{local_event:%H:%M}"
    return f"{days}d"


SOURCE_GLYPHS = {
    EventSource.PRIMARY: "[#f6405f]☘[/#f6405f]",
    EventSource.SECONDARY: "[#6e2fe3]✦[/#6e2fe3]",
}


def row_style(event: Event, now: datetime) -> str:
    """Past events are dimmed; upcoming online events blue, in-person green."""
    if event.date_time < now:
        return "dim"
    return "blue" if event.is_online else "green"


def format_list_row(event: Event, now: datetime, selected: bool = False) -> str:
    """
    Format one list row as Rich markup.

    Args:
        event: The event to render
        now: Reference time for the time-to-go label and colouring
        selected: Whether to draw the selection arrow

    Returns:
        Rich markup string for a single line
    """
    arrow = "[cyan]❯[/cyan] " if selected else "  "
    glyph = SOURCE_GLYPHS[event.source]
    text = f"{time_to_go(event, now)} {glyph} {escape(event.title)} | {escape(event.venue_name)}"
    style = row_style(event, now)
    if selected:
        style = f"bold {style}"
    return f"{arrow}[{style}]{text}[/{style}]"


def detail_lines(event: Event, now: Optional[datetime] = None) -> List[str]:
    """Flatten an event into the lines of the detail view.

    Five header lines, one blank line, then the description split on
    newlines. Must stay in step with detail_scroll.detail_total_lines.
    """
    local = event.date_time.astimezone()
    when = f"{local:%Y-%m-%d %H:%M}"
    if now is not None:
        when += f", {format_duration(event.date_time - now)}"

    venue = ", ".join(part for part in (event.venue_name, event.city, event.state.upper()) if part)
    counts = f"RSVPs: {event.rsvps_count}"
    if event.ticket_count:
        counts += f" | Tickets: {event.ticket_count}"

    lines = [
        f"[bold]{escape(event.title)}[/bold] ({when})",
        f"Group: {escape(event.group_name)}",
        f"Venue: {escape(venue)}",
        counts,
        f"Link: [underline]{escape(event.url)}[/underline]",
        "",
    ]
    if event.description is not None:
        lines.extend(escape(line) for line in event.description.split("\n"))
    return lines


def format_plain_row(event: Event, now: datetime) -> str:
    """Uncoloured list row for the one-shot `mcli list` output."""
    local = event.date_time.astimezone()
    source = "luma" if event.source == EventSource.SECONDARY else "meetup"
    return (
        f"{local:%Y-%m-%d %H:%M}  {time_to_go(event, now):<14} "
        f"[{source:<6}] {event.title} | {event.venue_name}"
    )
