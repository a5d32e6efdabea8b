"""Body definitions, sign data, and the Chaldean ruler tables."""

from __future__ import annotations

import math

# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: dict[str, int] = {
    "sun": 0,  # SE_SUN
    "moon": 1,  # SE_MOON
    "mercury": 2,  # SE_MERCURY
    "venus": 3,  # SE_VENUS
    "mars": 4,  # SE_MARS
    "jupiter": 5,  # SE_JUPITER
    "saturn": 6,  # SE_SATURN
    "uranus": 7,  # SE_URANUS
    "neptune": 8,  # SE_NEPTUNE
    "pluto": 9,  # SE_PLUTO
}

# Bodies reported by current_positions, in display order
ALL_BODIES = list(BODY_IDS.keys())

# Sun and Moon never move backwards as seen from Earth
RETROGRADE_BODIES = [b for b in ALL_BODIES if b not in ("sun", "moon")]

# The Moon changes sign every ~2.5 days; month calendars skip its ingresses
INGRESS_BODIES = [b for b in ALL_BODIES if b != "moon"]

BODY_SYMBOLS: dict[str, str] = {
    "sun": "☉",
    "moon": "☽",
    "mercury": "☿",
    "venus": "♀",
    "mars": "♂",
    "jupiter": "♃",
    "saturn": "♄",
    "uranus": "♅",
    "neptune": "♆",
    "pluto": "♇",
}

# Zodiac signs in order
SIGNS = [
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
]

# Traditional descending order of orbital period; planetary hours cycle through it
CHALDEAN_ORDER = ["saturn", "jupiter", "mars", "sun", "venus", "mercury", "moon"]

# Day rulers indexed by date.weekday() (Monday == 0)
WEEKDAY_RULERS = ["moon", "mars", "mercury", "jupiter", "venus", "saturn", "sun"]


def display_name(body: str) -> str:
    """Human-readable body name ("mercury" -> "Mercury")."""
    return body.replace("_", " ").title()


def normalize_longitude(longitude: float) -> float:
    """Reduce a longitude into [0, 360)."""
    normalized = longitude % 360.0
    # -1e-15 % 360 rounds to 360.0
    if normalized >= 360.0:
        normalized = 0.0
    return normalized


def signed_arc(from_longitude: float, to_longitude: float) -> float:
    """Shortest signed arc from one longitude to another, in (-180, 180]."""
    diff = (to_longitude - from_longitude) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def longitude_to_sign(longitude: float) -> tuple[str, float]:
    """Convert ecliptic longitude to sign and degree within sign."""
    longitude = normalize_longitude(longitude)
    sign_index = min(int(longitude / 30.0), 11)
    degree = longitude - (sign_index * 30.0)
    return SIGNS[sign_index], degree


def sign_index(longitude: float) -> int:
    """Zero-based sign index (Aries == 0) of a longitude."""
    return SIGNS.index(longitude_to_sign(longitude)[0])


def degree_and_minute(degree_in_sign: float) -> tuple[int, int]:
    """Split a degree within sign into whole degrees and arc-minutes."""
    whole = math.floor(degree_in_sign)
    minute = int((degree_in_sign - whole) * 60.0)
    return whole, min(minute, 59)


def day_ruler(weekday: int) -> str:
    """Planet ruling a civil weekday (Monday == 0)."""
    return WEEKDAY_RULERS[weekday]


def chaldean_successor(body: str, steps: int = 1) -> str:
    """Body ``steps`` positions after ``body`` in the Chaldean order."""
    index = CHALDEAN_ORDER.index(body)
    return CHALDEAN_ORDER[(index + steps) % len(CHALDEAN_ORDER)]
