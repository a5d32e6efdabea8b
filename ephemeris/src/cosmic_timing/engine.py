"""Cosmic timing engine - the public entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta
from typing import TypeVar

from veya.config import Settings, get_settings
from veya.schemas.timing import (
    BodyPosition,
    DailyTransitSummary,
    GeoCoordinate,
    MoonPhaseInfo,
    MonthEvent,
    PlanetaryHour,
    PlanetaryHoursDay,
    RetrogradeSummary,
    TransitAspect,
)

from cosmic_timing.aspects import find_transit_aspects
from cosmic_timing.bodies import ALL_BODIES, display_name
from cosmic_timing.cache import TimingCache
from cosmic_timing.errors import InvalidInput
from cosmic_timing.events import ImpactPolicy, generate_month_events
from cosmic_timing.hours import calculate_planetary_hours, find_current_hour
from cosmic_timing.instants import DAY, local_offset, to_instant, validate_location
from cosmic_timing.lunar import FULL_MOON, NEW_MOON, calculate_moon_phase
from cosmic_timing.meanings import moon_sign_energy
from cosmic_timing.motion import classify
from cosmic_timing.provider import EphemerisProvider, SwissEphemerisProvider
from cosmic_timing.retrograde import DEFAULT_LOOKAHEAD_DAYS, summarize_retrogrades

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Daily summaries keep only the tightest aspects
MAX_SUMMARY_ASPECTS = 8


class CosmicTimingEngine:
    """Positions, lunar phase, month events, planetary hours, and retrogrades.

    Every query is a pure function of its arguments and the provider; the
    optional cache only short-circuits repeated queries.
    """

    def __init__(
        self,
        provider: EphemerisProvider,
        cache: TimingCache | None = None,
        impact_policy: ImpactPolicy | None = None,
        retrograde_lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.impact_policy = impact_policy or ImpactPolicy()
        self.retrograde_lookahead_days = retrograde_lookahead_days

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        impact_policy: ImpactPolicy | None = None,
    ) -> CosmicTimingEngine:
        """Build an engine backed by Swiss Ephemeris from application settings."""
        settings = settings or get_settings()
        cache = None
        if settings.timing_cache_enabled:
            cache = TimingCache(
                max_entries=settings.timing_cache_max_entries,
                utc_offset=timedelta(minutes=settings.timing_cache_utc_offset_minutes),
            )
        return cls(
            SwissEphemerisProvider(settings.swisseph_ephe_path),
            cache=cache,
            impact_policy=impact_policy,
            retrograde_lookahead_days=settings.retrograde_lookahead_days,
        )

    def _cached(self, key: tuple, compute: Callable[[], T]) -> T:
        if self.cache is None:
            return compute()
        return self.cache.get_or_compute(key, compute)

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()

    def current_positions(self, instant: datetime | float) -> tuple[BodyPosition, ...]:
        """Positions of the Sun, Moon, and planets at ``instant``."""
        moment = to_instant(instant)
        return self._cached(
            TimingCache.make_key("positions", moment),
            lambda: tuple(classify(self.provider, body, moment) for body in ALL_BODIES),
        )

    def current_phase(self, instant: datetime | float) -> MoonPhaseInfo:
        """Lunar phase at ``instant`` with the next full and new moons."""
        moment = to_instant(instant)
        return self._cached(
            TimingCache.make_key("moon_phase", moment),
            lambda: calculate_moon_phase(self.provider, moment),
        )

    def events_for_month(self, year: int, month: int) -> tuple[MonthEvent, ...]:
        """Ingresses, stations, and lunations of a UTC calendar month, in time order."""
        return self._cached(
            TimingCache.make_key("month_events", None, None, year, month),
            lambda: tuple(generate_month_events(self.provider, year, month, self.impact_policy)),
        )

    def hours_for_day(
        self,
        day: date,
        location: GeoCoordinate,
        utc_offset: timedelta | None = None,
    ) -> PlanetaryHoursDay:
        """Planetary hours from sunrise on ``day`` until the next sunrise."""
        day = _civil_date(day)
        validate_location(location)
        offset_key = utc_offset.total_seconds() if utc_offset is not None else None
        return self._cached(
            TimingCache.make_key("planetary_hours", None, location, day, offset_key),
            lambda: calculate_planetary_hours(self.provider, day, location, utc_offset),
        )

    def current_hour(
        self,
        instant: datetime | float,
        location: GeoCoordinate,
        utc_offset: timedelta | None = None,
    ) -> PlanetaryHour:
        """The planetary hour in effect at ``instant`` for ``location``.

        Before sunrise the instant belongs to the previous civil day's night hours.
        """
        moment = to_instant(instant)
        validate_location(location)
        civil_day = (moment + local_offset(location, utc_offset)).date()
        hours_day = self.hours_for_day(civil_day, location, utc_offset)
        if moment < hours_day.sunrise:
            hours_day = self.hours_for_day(civil_day - DAY, location, utc_offset)
        return find_current_hour(hours_day, moment)

    def retrograde_summary(self, instant: datetime | float) -> RetrogradeSummary:
        """Current and upcoming retrogrades around ``instant``."""
        moment = to_instant(instant)
        return self._cached(
            TimingCache.make_key("retrograde_summary", moment, None, self.retrograde_lookahead_days),
            lambda: summarize_retrogrades(self.provider, moment, self.retrograde_lookahead_days),
        )

    def daily_summary(
        self,
        instant: datetime | float,
        natal_positions: Sequence[BodyPosition] | None = None,
    ) -> DailyTransitSummary:
        """Positions, Moon, tightest natal aspects, and a one-paragraph cosmic weather."""
        moment = to_instant(instant)
        positions = self.current_positions(moment)
        moon = self.current_phase(moment)
        aspects: tuple[TransitAspect, ...] = ()
        if natal_positions:
            aspects = tuple(find_transit_aspects(positions, natal_positions)[:MAX_SUMMARY_ASPECTS])
        weather, energy = describe_cosmic_weather(positions, moon, aspects)

        return DailyTransitSummary(
            day=moment.date(),
            positions=positions,
            moon_phase=moon,
            aspects=aspects,
            cosmic_weather=weather,
            energy_level=energy,
        )


def _civil_date(day: date) -> date:
    if isinstance(day, datetime):
        return day.date()
    if not isinstance(day, date):
        raise InvalidInput(f"Not a date: {day!r}")
    return day


def describe_cosmic_weather(
    positions: Sequence[BodyPosition],
    moon: MoonPhaseInfo,
    aspects: Sequence[TransitAspect],
) -> tuple[str, int]:
    """Cosmic weather sentence and energy level (1-10) for a day."""
    retrogrades = [display_name(p.body) for p in positions if p.retrograde]
    weather = ""
    energy = 7

    if len(retrogrades) >= 3:
        weather = (
            f"High retrograde energy ({', '.join(retrogrades)} Rx): reflection and revision "
            "over action. Patience is your superpower today."
        )
        energy = 4
    elif retrogrades:
        areas = "that area" if len(retrogrades) == 1 else "those areas"
        weather = f"{' and '.join(retrogrades)} retrograde: review and reassess in {areas} of life."
        energy = 6

    if moon.phase_name == FULL_MOON:
        weather += " Full Moon illumination: emotions and insights peak."
        energy = min(10, energy + 2)
    elif moon.phase_name == NEW_MOON:
        weather += " New Moon: ideal for setting intentions and planting seeds."
        energy = max(1, energy - 1)

    challenges = sum(1 for a in aspects if a.nature == "challenging")
    harmonies = sum(1 for a in aspects if a.nature == "positive")
    if harmonies > challenges:
        weather += " Overall supportive energy; the cosmos is working with you."
        energy = min(10, energy + 1)
    elif challenges > harmonies:
        weather += " Some tension in the air. Navigate with awareness and compassion."
        energy = max(1, energy - 1)

    if not weather.strip():
        weather = f"{moon.phase_name} in {moon.moon_sign}: {moon_sign_energy(moon.moon_sign)}."

    return weather.strip(), max(1, min(10, energy))
