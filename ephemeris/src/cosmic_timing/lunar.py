"""Lunar phase, illumination, and next full/new moon calculations."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from veya.schemas.timing import MoonPhaseInfo

from cosmic_timing.bodies import longitude_to_sign, normalize_longitude
from cosmic_timing.errors import OutOfRangeQuery
from cosmic_timing.instants import bisect_instant, days_between
from cosmic_timing.meanings import phase_emoji
from cosmic_timing.provider import EphemerisProvider

logger = logging.getLogger(__name__)

NEW_MOON = "New Moon"
FULL_MOON = "Full Moon"

# Named lunar phases with their phase-angle ranges [low, high)
PHASE_NAMES = [
    (0.0, 22.5, NEW_MOON),
    (22.5, 67.5, "Waxing Crescent"),
    (67.5, 112.5, "First Quarter"),
    (112.5, 157.5, "Waxing Gibbous"),
    (157.5, 202.5, FULL_MOON),
    (202.5, 247.5, "Waning Gibbous"),
    (247.5, 292.5, "Last Quarter"),
    (292.5, 337.5, "Waning Crescent"),
    (337.5, 360.0, NEW_MOON),
]

FULL_MOON_ANGLE = 180.0
NEW_MOON_ANGLE = 0.0

# Next-phase search: coarse step, refinement tolerance, and horizon
PHASE_SEARCH_STEP = timedelta(hours=1)
PHASE_SEARCH_TOLERANCE = timedelta(minutes=1)
PHASE_SEARCH_HORIZON = timedelta(days=40)


def calculate_phase_angle(sun_longitude: float, moon_longitude: float) -> float:
    """Moon's elongation from the Sun, in [0, 360)."""
    return normalize_longitude(moon_longitude - sun_longitude)


def illuminated_fraction(phase_angle: float) -> float:
    """Fraction of the lunar disc lit, (1 - cos(angle)) / 2."""
    fraction = (1.0 - math.cos(math.radians(phase_angle))) / 2.0
    return min(1.0, max(0.0, fraction))


def phase_name(phase_angle: float) -> str:
    """Name of the 45-degree phase bucket containing ``phase_angle``."""
    angle = normalize_longitude(phase_angle)
    for low, high, name in PHASE_NAMES:
        if low <= angle < high:
            return name
    return NEW_MOON


def phase_angle_at(provider: EphemerisProvider, instant: datetime) -> float:
    sun_lon = provider.longitude_of("sun", instant)
    moon_lon = provider.longitude_of("moon", instant)
    return calculate_phase_angle(sun_lon, moon_lon)


def next_phase_instant(provider: EphemerisProvider, instant: datetime, target_angle: float) -> datetime:
    """First instant after ``instant`` at which the phase angle crosses ``target_angle``.

    Steps forward an hour at a time, then bisects the bracketing hour to the
    minute. Raises OutOfRangeQuery when no crossing occurs within 40 days.
    """

    def offset(moment: datetime) -> float:
        # Distance past the target; wraps from ~360 to ~0 at the crossing
        return normalize_longitude(phase_angle_at(provider, moment) - target_angle)

    def crossed(moment: datetime) -> bool:
        return offset(moment) < 180.0

    previous = offset(instant)
    moment = instant
    horizon = instant + PHASE_SEARCH_HORIZON
    while moment < horizon:
        step_end = moment + PHASE_SEARCH_STEP
        current = offset(step_end)
        if current < previous:
            return bisect_instant(crossed, moment, step_end, PHASE_SEARCH_TOLERANCE)
        previous = current
        moment = step_end

    raise OutOfRangeQuery(
        f"No lunar phase angle {target_angle:.0f} crossing within "
        f"{PHASE_SEARCH_HORIZON.days} days of {instant.isoformat()}"
    )


def calculate_moon_phase(provider: EphemerisProvider, instant: datetime) -> MoonPhaseInfo:
    """Full lunar phase report for ``instant``."""
    sun_lon = provider.longitude_of("sun", instant)
    moon_lon = normalize_longitude(provider.longitude_of("moon", instant))
    angle = calculate_phase_angle(sun_lon, moon_lon)
    moon_sign, moon_degree = longitude_to_sign(moon_lon)

    next_full = next_phase_instant(provider, instant, FULL_MOON_ANGLE)
    next_new = next_phase_instant(provider, instant, NEW_MOON_ANGLE)
    logger.debug("Moon at %s: angle %.2f, next full %s, next new %s", instant, angle, next_full, next_new)

    name = phase_name(angle)
    return MoonPhaseInfo(
        phase_angle=angle,
        illuminated_fraction=illuminated_fraction(angle),
        phase_name=name,
        emoji=phase_emoji(name),
        moon_sign=moon_sign,
        moon_degree_in_sign=moon_degree,
        moon_longitude=moon_lon,
        days_until_full_moon=max(0.0, round(days_between(instant, next_full), 4)),
        days_until_new_moon=max(0.0, round(days_between(instant, next_new), 4)),
        next_full_moon=next_full,
        next_new_moon=next_new,
    )
