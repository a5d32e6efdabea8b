"""Monthly calendar of ingresses, stations, and lunations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, time, timedelta

from pydantic import BaseModel
from veya.schemas.timing import EventKind, ImpactClass, MonthEvent

from cosmic_timing.bodies import (
    INGRESS_BODIES,
    RETROGRADE_BODIES,
    longitude_to_sign,
    normalize_longitude,
    sign_index,
)
from cosmic_timing.errors import InvalidInput
from cosmic_timing.instants import DAY, bisect_instant
from cosmic_timing.lunar import (
    FULL_MOON,
    FULL_MOON_ANGLE,
    NEW_MOON,
    NEW_MOON_ANGLE,
    PHASE_SEARCH_TOLERANCE,
    phase_angle_at,
    phase_name,
)
from cosmic_timing.meanings import ingress_description, lunation_description, station_description
from cosmic_timing.motion import find_station_instants
from cosmic_timing.provider import EphemerisProvider

logger = logging.getLogger(__name__)

# Tie-break order for events sharing an instant
KIND_ORDER: dict[str, int] = {
    "ingress": 0,
    "retrograde_station": 1,
    "full_moon": 2,
    "new_moon": 3,
}

INGRESS_TOLERANCE = timedelta(minutes=1)
LUNATION_SAMPLE_TIME = time(12, 0)


class ImpactPolicy(BaseModel):
    """Impact class assigned to each event kind; override to change the calendar's tone."""

    ingress: ImpactClass = "positive"
    station_retrograde: ImpactClass = "challenging"
    station_direct: ImpactClass = "positive"
    full_moon: ImpactClass = "significant"
    new_moon: ImpactClass = "significant"

    def classify(self, kind: EventKind, direction: str | None = None) -> ImpactClass:
        if kind == "retrograde_station":
            return self.station_retrograde if direction == "retrograde" else self.station_direct
        return getattr(self, kind)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """UTC start of ``month`` and UTC start of the following month."""
    if not isinstance(year, int) or not isinstance(month, int):
        raise InvalidInput(f"Year and month must be integers, got {year!r}, {month!r}")
    if not 1 <= month <= 12:
        raise InvalidInput(f"Month {month} outside 1..12")
    if not 1 <= year <= 9998:
        raise InvalidInput(f"Year {year} outside 1..9998")
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(year + 1, 1, 1, tzinfo=UTC) if month == 12 else datetime(year, month + 1, 1, tzinfo=UTC)
    return start, end


def event_key(event: MonthEvent) -> tuple:
    """Merge key: one event per (civil UTC day, kind, body)."""
    return event.instant.date(), event.kind, event.body


def sort_key(event: MonthEvent) -> tuple:
    return event.instant, KIND_ORDER[event.kind], event.body or ""


def merge_events(events: Iterable[MonthEvent]) -> list[MonthEvent]:
    """Collapse events sharing a (day, kind, body) key onto the earliest, sorted."""
    merged: dict[tuple, MonthEvent] = {}
    for event in events:
        key = event_key(event)
        existing = merged.get(key)
        if existing is None or sort_key(event) < sort_key(existing):
            merged[key] = event
    return sorted(merged.values(), key=sort_key)


def _ingress_events(
    provider: EphemerisProvider,
    start: datetime,
    end: datetime,
    policy: ImpactPolicy,
) -> list[MonthEvent]:
    events = []
    for body in INGRESS_BODIES:

        def sign_at(moment: datetime, body: str = body) -> int:
            return sign_index(provider.longitude_of(body, moment))

        day_start = start
        previous_sign = sign_at(day_start)
        while day_start < end:
            day_end = day_start + DAY
            next_sign = sign_at(day_end)
            if next_sign != previous_sign:
                at = bisect_instant(
                    lambda moment, sign=previous_sign: sign_at(moment) != sign,
                    day_start,
                    day_end,
                    INGRESS_TOLERANCE,
                )
                sign, _ = longitude_to_sign(next_sign * 30.0)
                events.append(
                    MonthEvent(
                        instant=at,
                        kind="ingress",
                        body=body,
                        sign=sign,
                        impact=policy.classify("ingress"),
                        description=ingress_description(body, sign),
                    )
                )
            previous_sign = next_sign
            day_start = day_end
    return events


def _station_events(
    provider: EphemerisProvider,
    start: datetime,
    end: datetime,
    policy: ImpactPolicy,
) -> list[MonthEvent]:
    events = []
    for body in RETROGRADE_BODIES:
        for station in find_station_instants(provider, body, start, end):
            if not start <= station.at < end:
                continue
            sign, _ = longitude_to_sign(provider.longitude_of(body, station.at))
            events.append(
                MonthEvent(
                    instant=station.at,
                    kind="retrograde_station",
                    body=body,
                    direction=station.direction,
                    sign=sign,
                    impact=policy.classify("retrograde_station", station.direction),
                    description=station_description(body, station.direction, sign),
                )
            )
    return events


def _lunation_events(
    provider: EphemerisProvider,
    start: datetime,
    end: datetime,
    policy: ImpactPolicy,
) -> list[MonthEvent]:
    """Full and new moons whose exact instant falls in [start, end).

    Noon samples bracket each lunation; the exact instant is bisected and the
    event lands on its UTC day, whose noon sample lies in the phase bucket.
    """
    lunations = (
        ("full_moon", FULL_MOON, FULL_MOON_ANGLE),
        ("new_moon", NEW_MOON, NEW_MOON_ANGLE),
    )

    samples = []
    moment = datetime.combine((start - DAY).date(), LUNATION_SAMPLE_TIME, tzinfo=UTC)
    while moment <= end + DAY:
        samples.append((moment, phase_angle_at(provider, moment)))
        moment += DAY
    noon_phase = {t.date(): phase_name(angle) for t, angle in samples}

    events = []
    for (t0, angle0), (t1, angle1) in zip(samples, samples[1:]):
        for kind, name, target in lunations:
            offset0 = normalize_longitude(angle0 - target)
            offset1 = normalize_longitude(angle1 - target)
            if offset1 >= offset0:
                continue
            at = bisect_instant(
                lambda m, target=target: normalize_longitude(phase_angle_at(provider, m) - target) < 180.0,
                t0,
                t1,
                PHASE_SEARCH_TOLERANCE,
            )
            if not start <= at < end:
                continue
            if noon_phase.get(at.date()) != name:
                logger.debug("%s at %s outside its noon bucket", name, at)
                continue
            sign, _ = longitude_to_sign(provider.longitude_of("moon", at))
            events.append(
                MonthEvent(
                    instant=at,
                    kind=kind,
                    sign=sign,
                    impact=policy.classify(kind),
                    description=lunation_description(name, sign),
                )
            )
    return events


def generate_month_events(
    provider: EphemerisProvider,
    year: int,
    month: int,
    policy: ImpactPolicy | None = None,
) -> list[MonthEvent]:
    """All ingresses, stations, and lunations in a UTC calendar month.

    Either returns the complete month or raises; provider errors propagate.
    """
    policy = policy or ImpactPolicy()
    start, end = month_bounds(year, month)

    raw: list[MonthEvent] = []
    raw += _ingress_events(provider, start, end, policy)
    raw += _station_events(provider, start, end, policy)
    raw += _lunation_events(provider, start, end, policy)

    events = merge_events(raw)
    logger.debug("%04d-%02d: %d raw events, %d after merge", year, month, len(raw), len(events))
    return events
