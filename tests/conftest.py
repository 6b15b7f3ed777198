# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- UTC and America/Los_Angeles timezones
- Event and instant builders
- Seeded random event logs for property tests
- An isolated data folder with settings pointing at it
"""

import random
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from timecard.core.models import Direction, Event
from timecard.infrastructure.repositories import CsvEventRepository
from timecard.utils.config import get_settings

LOS_ANGELES = ZoneInfo("America/Los_Angeles")


@pytest.fixture()
def utc():
    return timezone.utc


@pytest.fixture()
def la():
    """America/Los_Angeles, for DST and local-midnight tests."""
    return LOS_ANGELES


@pytest.fixture()
def at():
    """Build an aware instant on 2024-03-04 (a Monday) by default.

    Usage: ``at(8)``, ``at(23, 50, day=5, tz=LOS_ANGELES)``
    """

    def _at(hour, minute=0, day=4, month=3, tz=timezone.utc, second=0):
        return datetime(2024, month, day, hour, minute, second, tzinfo=tz)

    return _at


@pytest.fixture()
def events():
    """Build a list of events from ``("in"|"out", instant)`` pairs."""

    def _events(*pairs):
        return [Event(direction=Direction(d), timestamp=ts) for d, ts in pairs]

    return _events


@pytest.fixture()
def random_events(events):
    """Build a random event log from a seed.

    Directions are drawn at random and timestamps are scattered over two
    weeks from 2024-03-04 UTC. Some logs are fully shuffled and others only
    have a few neighbours swapped, so logs contain doubled entries, equal
    timestamps and out-of-order arrivals.
    """

    def _random_events(seed, size=None):
        rng = random.Random(seed)
        size = rng.randint(0, 24) if size is None else size
        base = datetime(2024, 3, 4, tzinfo=timezone.utc)
        minutes = sorted(rng.randrange(0, 14 * 24 * 60, 15) for _ in range(size))
        pairs = [(rng.choice(("in", "out")), base + timedelta(minutes=m)) for m in minutes]
        if rng.random() < 0.3:
            rng.shuffle(pairs)
        else:
            for _ in range(rng.randint(0, 3)):
                if len(pairs) > 1:
                    i = rng.randrange(len(pairs) - 1)
                    pairs[i], pairs[i + 1] = pairs[i + 1], pairs[i]
        return events(*pairs)

    return _random_events


@pytest.fixture()
def data_folder(tmp_path, monkeypatch):
    """A temporary data folder with settings cached against it.

    Forces UTC so CLI output does not depend on the host timezone.
    """
    folder = tmp_path / "data"
    monkeypatch.setenv("TIMECARD_DATA_FOLDER", str(folder))
    monkeypatch.setenv("TIMECARD_TIMEZONE", "UTC")
    monkeypatch.delenv("TIMECARD_REPORT_ROWS", raising=False)
    monkeypatch.delenv("TIMECARD_REPORT_WEEK_START", raising=False)
    monkeypatch.delenv("TIMECARD_REPORT_EXACT_DURATIONS", raising=False)
    get_settings.cache_clear()
    yield folder
    get_settings.cache_clear()


@pytest.fixture()
def repository(tmp_path):
    """A CsvEventRepository in a fresh temporary folder."""
    return CsvEventRepository(tmp_path / "store" / "hours.csv")
