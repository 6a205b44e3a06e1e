"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import ReportConfig  # noqa: E402
from models.events import RawEvent  # noqa: E402

UTC = ZoneInfo("UTC")


@pytest.fixture
def config():
    """Report config pinned to UTC."""
    return ReportConfig(timezone="UTC")


@pytest.fixture
def make_event():
    """Factory for events on 2025-11-03 (UTC) given HH:MM start/end strings."""

    def _make_event(title, start="09:00", end="10:00", day=3, all_day=False):
        start_h, start_m = map(int, start.split(":"))
        end_h, end_m = map(int, end.split(":"))
        return RawEvent(
            title=title,
            start=datetime(2025, 11, day, start_h, start_m, tzinfo=UTC),
            end=datetime(2025, 11, day, end_h, end_m, tzinfo=UTC),
            all_day=all_day,
        )

    return _make_event


@pytest.fixture
def sample_events(make_event):
    """Mixed events: three qualifying, one all-day, one zero-duration."""
    return [
        make_event("#TEST1 Morning standup", "09:00", "09:30"),
        make_event("#TEST1 Afternoon review", "14:00", "15:00"),
        make_event("#TEST2 Client call", "10:00", "12:00"),
        RawEvent(
            title="#IGNORE",
            start=datetime(2025, 11, 3, tzinfo=UTC),
            end=datetime(2025, 11, 4, tzinfo=UTC),
            all_day=True,
        ),
        make_event("#ZERO x", "16:00", "16:00"),
    ]


@pytest.fixture
def sample_records():
    """Plain event dicts as found in a JSON events file or API body."""
    return [
        {"title": "#TEST1 Morning standup", "start": "2025-11-03T09:00:00Z", "end": "2025-11-03T09:30:00Z"},
        {"title": "#TEST2 Client call", "start": "2025-11-03T10:00:00Z", "end": "2025-11-03T12:00:00Z"},
        {"title": "Lunch", "start": "2025-11-03T12:00:00Z", "end": "2025-11-03T13:00:00Z"},
        {"title": "#IGNORE", "start": "2025-11-03T00:00:00Z", "end": "2025-11-04T00:00:00Z", "allDay": True},
    ]
