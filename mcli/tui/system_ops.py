# SPDX-License-Identifier: MIT
"""Process-level capabilities handed to the engine: URL opening and page sizing."""

import webbrowser

from ..debug_logger import get_logger

# Header, search bar and status line plus their borders
CHROME_ROWS = 6


def page_size_for_height(rows: int) -> int:
    """Number of list rows that fit a terminal of the given height."""
    return max(1, rows - CHROME_ROWS)


def open_in_browser(url: str) -> bool:
    """Open url in the system browser. Returns False if no browser could be launched."""
    try:
        return bool(webbrowser.open(url, new=2))
    except (webbrowser.Error, OSError) as e:
        get_logger().error("open_url", e)
        return False
