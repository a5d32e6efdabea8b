"""Integration test configuration: a real Swiss Ephemeris engine."""

from datetime import UTC, datetime

import pytest
from cosmic_timing.engine import CosmicTimingEngine
from cosmic_timing.provider import SwissEphemerisProvider


@pytest.fixture(scope="session")
def swiss_provider() -> SwissEphemerisProvider:
    return SwissEphemerisProvider()


@pytest.fixture
def swiss_engine(swiss_provider) -> CosmicTimingEngine:
    return CosmicTimingEngine(swiss_provider)


@pytest.fixture
def new_moon_jan_2024() -> datetime:
    """Exact new moon of 2024-01-11, to the minute."""
    return datetime(2024, 1, 11, 11, 57, tzinfo=UTC)
