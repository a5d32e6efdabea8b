"""Planetary hours: unequal day/night hours and their Chaldean rulers."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from veya.schemas.timing import GeoCoordinate, PlanetaryHour, PlanetaryHoursDay

from cosmic_timing.bodies import chaldean_successor, day_ruler
from cosmic_timing.errors import DegenerateLocation, OutOfRangeQuery, ProviderUnavailable
from cosmic_timing.instants import DAY
from cosmic_timing.meanings import hour_guidance
from cosmic_timing.provider import EphemerisProvider

logger = logging.getLogger(__name__)

HOURS_PER_HALF = 12


def _partition(start: datetime, end: datetime, *, is_day: bool, first_ruler: str) -> list[PlanetaryHour]:
    """Split [start, end) into 12 equal hours ruled in Chaldean sequence."""
    length = (end - start) / HOURS_PER_HALF
    hours = []
    for i in range(HOURS_PER_HALF):
        hour_start = start + length * i
        hour_end = end if i == HOURS_PER_HALF - 1 else start + length * (i + 1)
        ruler = chaldean_successor(first_ruler, i)
        hours.append(
            PlanetaryHour(
                hour_index=i + 1,
                is_day=is_day,
                ruler=ruler,
                guidance=hour_guidance(ruler),
                start=hour_start,
                end=hour_end,
            )
        )
    return hours


def calculate_planetary_hours(
    provider: EphemerisProvider,
    day: date,
    location: GeoCoordinate,
    utc_offset: timedelta | None = None,
) -> PlanetaryHoursDay:
    """Planetary hours from sunrise on ``day`` to sunrise on the following day.

    Raises DegenerateLocation when the sun does not rise or set on either date.
    """
    today = provider.sunrise_sunset(day, location, utc_offset)
    tomorrow = provider.sunrise_sunset(day + DAY, location, utc_offset)
    if today is None or tomorrow is None:
        raise DegenerateLocation(
            f"No sunrise/sunset at ({location.latitude}, {location.longitude}) around {day.isoformat()}"
        )

    sunrise, sunset, next_sunrise = today.sunrise, today.sunset, tomorrow.sunrise
    if not sunrise < sunset < next_sunrise:
        raise ProviderUnavailable(
            f"Inconsistent sun times for {day.isoformat()}: {sunrise}, {sunset}, {next_sunrise}"
        )

    ruler = day_ruler(day.weekday())
    hours = _partition(sunrise, sunset, is_day=True, first_ruler=ruler)
    hours += _partition(
        sunset,
        next_sunrise,
        is_day=False,
        first_ruler=chaldean_successor(ruler, HOURS_PER_HALF),
    )

    return PlanetaryHoursDay(
        day=day,
        sunrise=sunrise,
        sunset=sunset,
        next_sunrise=next_sunrise,
        day_ruler=ruler,
        hours=hours,
    )


def find_current_hour(hours_day: PlanetaryHoursDay, instant: datetime) -> PlanetaryHour:
    """The hour whose [start, end) contains ``instant``."""
    if not hours_day.sunrise <= instant < hours_day.next_sunrise:
        raise OutOfRangeQuery(
            f"{instant.isoformat()} is outside the planetary day "
            f"{hours_day.sunrise.isoformat()} - {hours_day.next_sunrise.isoformat()}"
        )
    for hour in hours_day.hours:
        if hour.contains(instant):
            return hour
    # Contiguous partition of [sunrise, next_sunrise) always matches
    raise OutOfRangeQuery(f"No planetary hour contains {instant.isoformat()}")
