"""Instant and coordinate normalisation shared by every entry point."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta

from veya.schemas.timing import GeoCoordinate

from cosmic_timing.errors import InvalidInput

DAY = timedelta(days=1)

# Upper bound on every root-finding loop
MAX_BISECTIONS = 40


def to_instant(value: datetime | float | int) -> datetime:
    """Return ``value`` as an aware UTC datetime with sub-seconds dropped.

    Naive datetimes are taken to be UTC already; numbers are POSIX timestamps.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"Not an instant: {value!r}")
    if isinstance(value, datetime):
        moment = value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidInput(f"Instant must be finite, got {value!r}")
        try:
            moment = datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidInput(f"Timestamp {value!r} is out of range") from exc
    else:
        raise InvalidInput(f"Not an instant: {value!r}")
    return moment.replace(microsecond=0)


def validate_location(location: GeoCoordinate) -> GeoCoordinate:
    """Reject coordinates outside [-90, 90] x [-180, 180]."""
    if not isinstance(location, GeoCoordinate):
        raise InvalidInput(f"Not a GeoCoordinate: {location!r}")
    lat, lon, alt = location.latitude, location.longitude, location.altitude_m
    if not (math.isfinite(lat) and math.isfinite(lon) and math.isfinite(alt)):
        raise InvalidInput("Coordinates must be finite")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInput(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidInput(f"Longitude {lon} outside [-180, 180]")
    return location


def utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=UTC)


def local_offset(location: GeoCoordinate, utc_offset: timedelta | None) -> timedelta:
    """Caller-supplied offset, or local mean time derived from longitude."""
    if utc_offset is not None:
        return utc_offset
    return timedelta(hours=location.longitude / 15.0)


def days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 86400.0


def midpoint(start: datetime, end: datetime) -> datetime:
    return start + (end - start) / 2


def bisect_instant(
    predicate: Callable[[datetime], bool],
    lo: datetime,
    hi: datetime,
    tolerance: timedelta,
    max_iterations: int = MAX_BISECTIONS,
) -> datetime:
    """Narrow [lo, hi] to the instant where ``predicate`` flips.

    ``predicate(lo)`` is assumed to differ from ``predicate(hi)``. Returns the
    midpoint of the final bracket, to whole seconds.
    """
    lo_value = predicate(lo)
    for _ in range(max_iterations):
        if hi - lo <= tolerance:
            break
        mid = midpoint(lo, hi)
        if predicate(mid) == lo_value:
            lo = mid
        else:
            hi = mid
    return midpoint(lo, hi).replace(microsecond=0)
