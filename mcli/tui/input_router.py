# SPDX-License-Identifier: MIT
"""
Keystroke routing for the meetup browser.

Every keystroke is reduced to a token: a single printable character
("k", "/", " ") or one of the named keys below. route() then maps the
token to at most one Action for the current view and focus.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .app_state import Focus, View

UP = "up"
DOWN = "down"
ENTER = "enter"
ESCAPE = "escape"
BACKSPACE = "backspace"

# Textual key names -> router tokens
_NAMED_KEYS = {
    "up": UP,
    "down": DOWN,
    "enter": ENTER,
    "escape": ESCAPE,
    "backspace": BACKSPACE,
    "ctrl+h": BACKSPACE,
}


class Action(str, Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    OPEN_DETAIL = "open_detail"
    START_FILTER = "start_filter"
    START_LOCATION = "start_location"
    REFRESH = "refresh"
    TYPE_TEXT = "type_text"
    DELETE_CHAR = "delete_char"
    CANCEL_ENTRY = "cancel_entry"
    SUBMIT_ENTRY = "submit_entry"
    BACK = "back"
    OPEN_URL = "open_url"
    REFRESH_DETAIL = "refresh_detail"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    QUIT = "quit"


@dataclass(frozen=True)
class Routed:
    action: Action
    text: str = ""


LIST_KEYS: Dict[str, Action] = {
    UP: Action.MOVE_UP,
    "k": Action.MOVE_UP,
    DOWN: Action.MOVE_DOWN,
    "j": Action.MOVE_DOWN,
    ENTER: Action.OPEN_DETAIL,
    "/": Action.START_FILTER,
    "f": Action.START_LOCATION,
    "r": Action.REFRESH,
    "q": Action.QUIT,
}

DETAIL_KEYS: Dict[str, Action] = {
    UP: Action.SCROLL_UP,
    "k": Action.SCROLL_UP,
    DOWN: Action.SCROLL_DOWN,
    "j": Action.SCROLL_DOWN,
    "o": Action.OPEN_URL,
    "b": Action.BACK,
    ESCAPE: Action.BACK,
    "r": Action.REFRESH_DETAIL,
    "q": Action.QUIT,
}


def normalize_key(key: str, character: Optional[str] = None) -> str:
    """Turn a Textual key event into a router token."""
    if key in _NAMED_KEYS:
        return _NAMED_KEYS[key]
    if character and len(character) == 1 and character.isprintable():
        return character
    return key


def _is_text(token: str) -> bool:
    return len(token) == 1 and token.isprintable()


class InputRouter:
    """Maps (token, view, focus) to the action it triggers."""

    def route(self, key: str, view: View, focus: Focus) -> List[Routed]:
        # Text entry swallows everything except its own two control keys.
        if focus == Focus.TEXT_ENTRY:
            if key == ESCAPE:
                return [Routed(Action.CANCEL_ENTRY)]
            if key == ENTER:
                return [Routed(Action.SUBMIT_ENTRY)]
            if key == BACKSPACE:
                return [Routed(Action.DELETE_CHAR)]
            if _is_text(key):
                return [Routed(Action.TYPE_TEXT, key)]
            return []

        table = DETAIL_KEYS if view == View.DETAILS else LIST_KEYS
        action = table.get(key)
        return [Routed(action)] if action is not None else []
