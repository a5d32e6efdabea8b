"""Deterministic ephemeris providers for engine tests."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, time, timedelta

import pytest
from veya.schemas.timing import GeoCoordinate, SunTimes

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)

# Mean daily motions; with both at 280 degrees at EPOCH, EPOCH is a new moon
SUN_RATE = 0.9856
MOON_RATE = 13.1764
SYNODIC_DAYS = 360.0 / (MOON_RATE - SUN_RATE)

# Oscillating body: speed = 1 - 2 cos(2 pi t / 100), retrograde for |t mod 100| < 100/6
OSCILLATION_PERIOD = 100.0
OSCILLATION_AMPLITUDE = 2.0 * OSCILLATION_PERIOD / (2.0 * math.pi)


def days_since_epoch(instant: datetime) -> float:
    return (instant - EPOCH).total_seconds() / 86400.0


class FakeProvider:
    """Linear motion for every body except Mercury, which oscillates into retrograde.

    Sunrise is ``sunrise_hour`` and sunset ``sunset_hour`` UTC every day.
    """

    def __init__(
        self,
        sunrise_hour: float = 6.0,
        sunset_hour: float = 18.0,
        rates: dict[str, float] | None = None,
        starts: dict[str, float] | None = None,
    ) -> None:
        self.sunrise_hour = sunrise_hour
        self.sunset_hour = sunset_hour
        self.rates = {
            "sun": SUN_RATE,
            "moon": MOON_RATE,
            "venus": 1.2,
            "mars": 0.5,
            "jupiter": 0.08,
            "saturn": 0.03,
            "uranus": 0.01,
            "neptune": 0.006,
            "pluto": 0.004,
        }
        self.rates.update(rates or {})
        self.starts = {body: 280.0 if body in ("sun", "moon") else 15.0 for body in self.rates}
        self.starts["mercury"] = 100.0
        self.starts.update(starts or {})
        self.longitude_calls = 0
        self.sun_calls = 0

    def longitude_of(self, body: str, instant: datetime) -> float:
        self.longitude_calls += 1
        t = days_since_epoch(instant)
        if body == "mercury":
            lon = self.starts["mercury"] + t - OSCILLATION_AMPLITUDE * math.sin(2.0 * math.pi * t / OSCILLATION_PERIOD)
        else:
            lon = self.starts[body] + self.rates[body] * t
        return lon % 360.0

    def sunrise_sunset(self, day: date, location: GeoCoordinate, utc_offset: timedelta | None = None):
        self.sun_calls += 1
        midnight = datetime.combine(day, time(0, 0), tzinfo=UTC)
        return SunTimes(
            sunrise=midnight + timedelta(hours=self.sunrise_hour),
            sunset=midnight + timedelta(hours=self.sunset_hour),
        )


class PolarProvider(FakeProvider):
    """No sunrise or sunset on any date."""

    def sunrise_sunset(self, day: date, location: GeoCoordinate, utc_offset: timedelta | None = None):
        self.sun_calls += 1
        return None


class StalledMoonProvider(FakeProvider):
    """The Moon keeps a fixed elongation from the Sun, so no lunation ever occurs."""

    def longitude_of(self, body: str, instant: datetime) -> float:
        if body == "moon":
            return (super().longitude_of("sun", instant) + 90.0) % 360.0
        return super().longitude_of(body, instant)


class BrokenProvider(FakeProvider):
    def longitude_of(self, body: str, instant: datetime) -> float:
        from cosmic_timing.errors import ProviderUnavailable

        raise ProviderUnavailable("ephemeris offline")


@pytest.fixture
def epoch() -> datetime:
    return EPOCH


@pytest.fixture
def synodic_days() -> float:
    return SYNODIC_DAYS


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_provider():
    """Factory for FakeProvider with custom sun times or rates."""
    return FakeProvider


@pytest.fixture
def polar_provider() -> PolarProvider:
    return PolarProvider()


@pytest.fixture
def stalled_moon_provider() -> StalledMoonProvider:
    return StalledMoonProvider()


@pytest.fixture
def broken_provider() -> BrokenProvider:
    return BrokenProvider()


@pytest.fixture
def mercury_stations() -> list[tuple[datetime, str]]:
    """Analytic stations of the oscillating Mercury within the first 300 days."""
    offset = OSCILLATION_PERIOD / 6.0
    stations = []
    for k in range(0, 4):
        center = k * OSCILLATION_PERIOD
        for t, direction in ((center - offset, "retrograde"), (center + offset, "direct")):
            if 0 < t < 300:
                stations.append((EPOCH + timedelta(days=t), direction))
    return stations


@pytest.fixture
def greenwich() -> GeoCoordinate:
    return GeoCoordinate(latitude=51.4779, longitude=0.0)
