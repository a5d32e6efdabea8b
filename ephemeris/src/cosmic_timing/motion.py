"""Apparent motion: speed, retrograde classification, and station finding."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from veya.schemas.timing import BodyPosition, RetrogradeWindow, Station

from cosmic_timing.bodies import (
    BODY_SYMBOLS,
    degree_and_minute,
    longitude_to_sign,
    normalize_longitude,
    signed_arc,
)
from cosmic_timing.instants import DAY, bisect_instant
from cosmic_timing.provider import EphemerisProvider

logger = logging.getLogger(__name__)

# Half-width of the centered difference used for speed
SPEED_DELTA = timedelta(hours=6)

# Stations are located to within this tolerance
STATION_TOLERANCE = timedelta(hours=1)

# Speed is sampled at this step when scanning for stations
STATION_SCAN_STEP = DAY


def speed_at(provider: EphemerisProvider, body: str, instant: datetime) -> float:
    """Apparent speed in degrees/day from a centered finite difference."""
    before = provider.longitude_of(body, instant - SPEED_DELTA)
    after = provider.longitude_of(body, instant + SPEED_DELTA)
    span_days = (2 * SPEED_DELTA) / DAY
    return signed_arc(before, after) / span_days


def classify(provider: EphemerisProvider, body: str, instant: datetime) -> BodyPosition:
    """Position, sign placement, speed, and retrograde flag of ``body``."""
    longitude = normalize_longitude(provider.longitude_of(body, instant))
    speed = speed_at(provider, body, instant)
    sign, degree = longitude_to_sign(longitude)
    _, minute = degree_and_minute(degree)

    return BodyPosition(
        body=body,
        longitude=longitude,
        sign=sign,
        degree_in_sign=degree,
        sign_minute=minute,
        speed_deg_per_day=round(speed, 6),
        retrograde=speed < 0,
        symbol=BODY_SYMBOLS.get(body, ""),
    )


def _is_retrograde(provider: EphemerisProvider, body: str):
    return lambda instant: speed_at(provider, body, instant) < 0


def _scan_stations(
    provider: EphemerisProvider,
    body: str,
    start: datetime,
    end: datetime,
) -> tuple[bool, list[Station]]:
    """Sample speed daily over [start - 1 day, end + 1 day] and refine each sign change.

    Returns whether the body was retrograde at the first sample, and the
    stations found in chronological order.
    """
    retrograde = _is_retrograde(provider, body)

    samples: list[tuple[datetime, bool]] = []
    moment = start - STATION_SCAN_STEP
    scan_end = end + STATION_SCAN_STEP
    while moment <= scan_end:
        samples.append((moment, retrograde(moment)))
        moment += STATION_SCAN_STEP

    stations: list[Station] = []
    for (t0, retro0), (t1, retro1) in zip(samples, samples[1:]):
        if retro0 == retro1:
            continue
        at = bisect_instant(retrograde, t0, t1, STATION_TOLERANCE)
        stations.append(Station(body=body, at=at, direction="retrograde" if retro1 else "direct"))

    logger.debug("%s: %d stations between %s and %s", body, len(stations), start, end)
    return (samples[0][1] if samples else False), stations


def find_station_instants(
    provider: EphemerisProvider,
    body: str,
    start: datetime,
    end: datetime,
) -> list[Station]:
    """All direction changes of ``body`` within [start - 1 day, end + 1 day]."""
    _, stations = _scan_stations(provider, body, start, end)
    return stations


def find_stations(
    provider: EphemerisProvider,
    body: str,
    start: datetime,
    end: datetime,
) -> list[RetrogradeWindow]:
    """Retrograde windows of ``body`` overlapping [start, end] (padded by a day).

    A window already open when the scan begins has ``start=None``; one still
    open when it ends has ``end=None``.
    """
    initially_retrograde, stations = _scan_stations(provider, body, start, end)

    windows: list[RetrogradeWindow] = []
    open_since: datetime | None = None
    is_open = initially_retrograde
    for station in stations:
        if station.direction == "retrograde":
            open_since = station.at
            is_open = True
        elif is_open:
            windows.append(RetrogradeWindow(body=body, start=open_since, end=station.at))
            open_since = None
            is_open = False
    if is_open:
        windows.append(RetrogradeWindow(body=body, start=open_since, end=None))

    return windows
