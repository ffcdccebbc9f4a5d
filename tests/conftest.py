"""
Pytest configuration and fixtures for mcli tests.
"""

import os
import sys
import time
from pathlib import Path

# Ensure project root is in sys.path for 'mcli' imports without an install
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets MCLI_STATE and resets the debug logger so it picks up the new path.
    """
    state_dir = tmp_path / ".local" / "state" / "mcli"
    state_dir.mkdir(parents=True)
    monkeypatch.setenv("MCLI_STATE", str(state_dir))
    monkeypatch.setenv("MCLI_SETTINGS", str(tmp_path / "no-settings.json"))
    monkeypatch.setenv("MCLI_CONFIG", str(tmp_path / "config"))
    monkeypatch.delenv("MCLI_DEBUG", raising=False)
    monkeypatch.delenv("API_BASE_URL", raising=False)

    from mcli.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture keeping every test away from the real ~/.local/state/mcli."""
    yield temp_state_dir

    from mcli.debug_logger import reset_logger
    reset_logger()


NOW = datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time shared by the engine tests."""
    return NOW


@pytest.fixture
def utc_local():
    """Run the test with the local timezone pinned to UTC."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available")
    original = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()
    yield
    if original is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = original
    time.tzset()


def make_event(
    event_id: str,
    hours: float = 1.0,
    title: Optional[str] = None,
    source: str = "meetup",
    description: Optional[str] = None,
    **fields,
):
    """Build an Event starting `hours` after NOW."""
    from mcli.models import Event, EventSource

    return Event(
        id=event_id,
        title=title if title is not None else f"Event {event_id}",
        date_time=NOW + timedelta(hours=hours),
        source=EventSource.parse(source),
        description=description,
        **fields,
    )


class FakeClient:
    """In-memory stand-in for EventsClient.

    Each operation records its call and either returns the configured result
    or raises the configured exception.
    """

    def __init__(self, events: Optional[List] = None):
        self.events = list(events or [])
        self.details = {}
        self.locations = {}
        self.refreshed = {}
        self.fail = {}
        self.calls = []

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise self.fail[op]

    async def list_all(self):
        self.calls.append(("list_all",))
        self._maybe_fail("list_all")
        return list(self.events)

    async def get_by_id(self, event):
        self.calls.append(("get_by_id", event.id, event.source.value))
        self._maybe_fail("get_by_id")
        return self.details.get(event.id, event)

    async def get_by_location(self, location):
        self.calls.append(("get_by_location", location))
        self._maybe_fail("get_by_location")
        return self.locations.get(location)

    async def refresh_by_id(self, event_id):
        self.calls.append(("refresh_by_id", event_id))
        self._maybe_fail("refresh_by_id")
        return self.refreshed[event_id]


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
