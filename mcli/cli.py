#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command line entry point for mcli.

Usage:
    mcli                         # Full TUI (same as `mcli browse`)
    mcli --debug browse          # TUI with debug logging to debug.log
    mcli list                    # One-shot listing of upcoming meetups
    mcli list --search rust -n 5 # Filtered, limited listing
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from typing import List, Optional

from ._version import __version__
from .api import EventsClient
from .debug_logger import LEVEL_DEBUG, set_level
from .models import FetchFailure


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcli",
        description="mcli - browse upcoming meetups from the terminal",
    )
    parser.add_argument(
        "--version", action="version", version=f"mcli {__version__}"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Write debug events to the state dir debug.log"
    )
    parser.add_argument("--api-url", help="Events API base URL (overrides API_BASE_URL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("browse", help="Launch the interactive browser")

    list_parser = subparsers.add_parser("list", help="Print meetups and exit (no TUI)")
    list_parser.add_argument("--search", "-s", default="", help="Filter by title, group or city")
    list_parser.add_argument(
        "--limit", "-n", type=int, default=20, help="Maximum number of meetups to print"
    )
    list_parser.add_argument(
        "--all", "-a", action="store_true", help="Include meetups that already started"
    )
    return parser


def run_list(
    client: EventsClient,
    search: str,
    limit: int,
    include_past: bool,
    now: Optional[datetime] = None,
) -> int:
    """Fetch, filter and print meetups. Returns the process exit code."""
    from .tui.filtering import filter_and_sort
    from .tui.formatting import format_plain_row

    try:
        events = asyncio.run(client.list_all())
    except FetchFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    now = now or datetime.now(timezone.utc)
    ordered = filter_and_sort(events, search)
    if not include_past:
        ordered = [e for e in ordered if e.date_time >= now]

    if not ordered:
        print("No meetups found.")
        return 0
    for event in ordered[:max(0, limit)]:
        print(format_plain_row(event, now))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_level(LEVEL_DEBUG)

    client = EventsClient(base_url=args.api_url)

    # Default to the TUI when no subcommand given
    command = args.command or "browse"

    if command == "list":
        return run_list(client, args.search, args.limit, args.all)

    try:
        from .tui.app import MeetupBrowserApp
    except ImportError as e:
        print(f"Error: TUI requires textual package: {e}", file=sys.stderr)
        print("Install with: pip install textual", file=sys.stderr)
        return 1
    MeetupBrowserApp(client=client).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
