"""Transit-to-natal aspect detection."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from veya.schemas.timing import BodyPosition, TransitAspect

from cosmic_timing.meanings import aspect_interpretation

logger = logging.getLogger(__name__)

# Aspect definitions: name -> (exact angle, base orb, nature)
ASPECTS: dict[str, tuple[float, float, str]] = {
    "conjunction": (0.0, 8.0, "neutral"),
    "sextile": (60.0, 6.0, "positive"),
    "square": (90.0, 7.0, "challenging"),
    "trine": (120.0, 8.0, "positive"),
    "opposition": (180.0, 8.0, "challenging"),
}

ASPECT_SYMBOLS: dict[str, str] = {
    "conjunction": "☌",
    "sextile": "⚹",
    "square": "□",
    "trine": "△",
    "opposition": "☍",
}

LUMINARIES = {"sun", "moon"}


def angular_distance(lon1: float, lon2: float) -> float:
    """Calculate the shortest angular distance between two longitudes."""
    diff = abs(lon1 - lon2) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def effective_orb(transit_body: str, aspect: str) -> float:
    """Base orb, one degree tighter for transits of anything but the luminaries."""
    _, base_orb, _ = ASPECTS[aspect]
    return base_orb if transit_body in LUMINARIES else base_orb - 1.0


def _is_applying(transit_lon: float, natal_lon: float, transit_speed: float, aspect_angle: float) -> bool:
    """Determine if an aspect is applying (getting tighter) or separating."""
    orb_now = abs(angular_distance(transit_lon, natal_lon) - aspect_angle)

    # Project the transiting body forward slightly; natal points are fixed
    transit_future = (transit_lon + transit_speed * 0.1) % 360.0
    orb_future = abs(angular_distance(transit_future, natal_lon) - aspect_angle)

    return orb_future < orb_now


def find_transit_aspects(
    transits: Sequence[BodyPosition],
    natal: Sequence[BodyPosition],
) -> list[TransitAspect]:
    """All aspects within orb between transiting bodies and natal placements, tightest first."""
    found = []
    for transit in transits:
        for placement in natal:
            # Moon-Moon contacts recur too often to be meaningful
            if transit.body == "moon" and placement.body == "moon":
                continue
            dist = angular_distance(transit.longitude, placement.longitude)
            for aspect_name, (angle, _, nature) in ASPECTS.items():
                orb = abs(dist - angle)
                if orb > effective_orb(transit.body, aspect_name):
                    continue
                found.append(
                    TransitAspect(
                        transit_body=transit.body,
                        natal_body=placement.body,
                        aspect_type=aspect_name,
                        orb=round(orb, 4),
                        applying=_is_applying(transit.longitude, placement.longitude, transit.speed_deg_per_day, angle),
                        nature=nature,
                        symbol=ASPECT_SYMBOLS[aspect_name],
                        interpretation=aspect_interpretation(
                            transit.body, placement.body, aspect_name, transit.sign
                        ),
                    )
                )

    found.sort(key=lambda a: a.orb)
    return found
