"""Ephemeris provider interface and the Swiss Ephemeris implementation."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

import swisseph as swe
from veya.schemas.timing import GeoCoordinate, SunTimes

from cosmic_timing.bodies import BODY_IDS
from cosmic_timing.errors import InvalidInput, ProviderUnavailable
from cosmic_timing.instants import DAY, local_offset, utc_midnight

logger = logging.getLogger(__name__)

# Julian Day of 1970-01-01T00:00:00 UTC
_UNIX_EPOCH_JD = 2440587.5

# swe.rise_trans status for a body that stays above or below the horizon
_CIRCUMPOLAR = -2


class EphemerisProvider(Protocol):
    """Raw astronomical data consumed by the analyzers."""

    def longitude_of(self, body: str, instant: datetime) -> float:
        """Geocentric apparent ecliptic longitude of ``body`` in degrees."""
        ...

    def sunrise_sunset(
        self,
        day: date,
        location: GeoCoordinate,
        utc_offset: timedelta | None = None,
    ) -> SunTimes | None:
        """Sunrise and following sunset for a civil date, or None at polar day/night."""
        ...


def datetime_to_jd(dt: datetime) -> float:
    """Convert datetime to Julian Day number (UT)."""
    utc = dt.astimezone(UTC)
    return swe.julday(utc.year, utc.month, utc.day, utc.hour + utc.minute / 60.0 + utc.second / 3600.0)


def jd_to_datetime(jd: float) -> datetime:
    """Convert a Julian Day number (UT) to a UTC datetime, whole seconds."""
    seconds = round((jd - _UNIX_EPOCH_JD) * 86400.0)
    return datetime(1970, 1, 1, tzinfo=UTC) + timedelta(seconds=seconds)


class SwissEphemerisProvider:
    """EphemerisProvider backed by pyswisseph.

    Uses the Swiss ephemeris files when ``ephe_path`` points at them and
    falls back to the built-in Moshier model otherwise.
    """

    def __init__(self, ephe_path: str = "") -> None:
        ephe_path = str(ephe_path or "").strip()
        swe.set_ephe_path(ephe_path if ephe_path else None)
        self.ephe_path = ephe_path

    def longitude_of(self, body: str, instant: datetime) -> float:
        try:
            body_id = BODY_IDS[body]
        except KeyError as exc:
            raise InvalidInput(f"Unknown body '{body}'") from exc

        jd = datetime_to_jd(instant)
        try:
            result, _ = swe.calc_ut(jd, body_id, swe.FLG_SWIEPH)
        except Exception:
            # Fallback to Moshier (no external files needed)
            logger.warning("Swiss ephemeris files failed for %s, using Moshier", body)
            try:
                result, _ = swe.calc_ut(jd, body_id, swe.FLG_MOSEPH)
            except Exception as exc:
                raise ProviderUnavailable(f"swisseph failed for {body} at JD {jd:.5f}: {exc}") from exc
        return float(result[0])

    def sunrise_sunset(
        self,
        day: date,
        location: GeoCoordinate,
        utc_offset: timedelta | None = None,
    ) -> SunTimes | None:
        local_midnight = utc_midnight(day) - local_offset(location, utc_offset)
        day_end = datetime_to_jd(local_midnight + DAY)
        geopos = (location.longitude, location.latitude, location.altitude_m)

        sunrise_jd = self._next_event(datetime_to_jd(local_midnight), swe.CALC_RISE, geopos)
        if sunrise_jd is None or sunrise_jd >= day_end:
            return None
        sunset_jd = self._next_event(sunrise_jd, swe.CALC_SET, geopos)
        if sunset_jd is None or sunset_jd - sunrise_jd >= 1.0:
            return None

        return SunTimes(sunrise=jd_to_datetime(sunrise_jd), sunset=jd_to_datetime(sunset_jd))

    def _next_event(self, jd_start: float, rsmi: int, geopos: tuple[float, float, float]) -> float | None:
        try:
            status, tret = swe.rise_trans(jd_start, swe.SUN, rsmi, geopos, 0.0, 0.0, swe.FLG_SWIEPH)
        except Exception as exc:
            raise ProviderUnavailable(f"swisseph rise/set search failed: {exc}") from exc
        if status == _CIRCUMPOLAR:
            return None
        if status != 0 or not tret or not tret[0]:
            raise ProviderUnavailable(f"swisseph rise/set search returned status {status}")
        return float(tret[0])
