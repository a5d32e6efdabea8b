"""Pydantic schemas for cosmic timing data."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EventKind = Literal["ingress", "retrograde_station", "full_moon", "new_moon"]
ImpactClass = Literal["positive", "challenging", "significant"]
StationDirection = Literal["retrograde", "direct"]


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class GeoCoordinate(_ValueObject):
    """Observer location in decimal degrees."""

    latitude: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)
    altitude_m: float = Field(default=0.0, allow_inf_nan=False)


class SunTimes(_ValueObject):
    """Sunrise and sunset for one civil date."""

    sunrise: datetime
    sunset: datetime


class BodyPosition(_ValueObject):
    """Position and apparent motion of a celestial body."""

    body: str
    longitude: float = Field(ge=0.0, lt=360.0)
    sign: str
    degree_in_sign: float = Field(ge=0.0, lt=30.0)
    sign_minute: int = Field(ge=0, le=59)
    speed_deg_per_day: float
    retrograde: bool
    symbol: str = ""


class MoonPhaseInfo(_ValueObject):
    """Lunar phase, illumination, and the next full/new moon."""

    phase_angle: float = Field(ge=0.0, lt=360.0)
    illuminated_fraction: float = Field(ge=0.0, le=1.0)
    phase_name: str
    emoji: str = ""
    moon_sign: str
    moon_degree_in_sign: float
    moon_longitude: float
    days_until_full_moon: float = Field(ge=0.0)
    days_until_new_moon: float = Field(ge=0.0)
    next_full_moon: datetime
    next_new_moon: datetime


class RetrogradeWindow(_ValueObject):
    """A retrograde period; open ends mean the window extends past the search range."""

    body: str
    start: datetime | None = None
    end: datetime | None = None

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant >= self.end:
            return False
        return True


class Station(_ValueObject):
    """A single direction change of a body's apparent motion."""

    body: str
    at: datetime
    direction: StationDirection


class MonthEvent(_ValueObject):
    """A significant celestial event within a calendar month."""

    instant: datetime
    kind: EventKind
    body: str | None = None
    direction: StationDirection | None = None
    sign: str | None = None
    impact: ImpactClass
    description: str


class PlanetaryHour(_ValueObject):
    """One of the 24 unequal hours of a day."""

    hour_index: int = Field(ge=1, le=12)
    is_day: bool
    ruler: str
    start: datetime
    end: datetime
    guidance: str = ""

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class PlanetaryHoursDay(_ValueObject):
    """Sunrise-to-sunrise partition of a civil day into planetary hours."""

    day: date
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime
    day_ruler: str
    hours: tuple[PlanetaryHour, ...] = Field(min_length=24, max_length=24)


class RetrogradeEntry(_ValueObject):
    """A body's current or upcoming retrograde period."""

    body: str
    sign: str
    start: datetime | None = None
    end: datetime | None = None


class RetrogradeSummary(_ValueObject):
    """Current and upcoming retrogrades at an instant."""

    current: tuple[RetrogradeEntry, ...] = ()
    upcoming: tuple[RetrogradeEntry, ...] = ()
    retrograde_count: int = Field(ge=0)
    message: str


class TransitAspect(_ValueObject):
    """An aspect between a transiting body and a natal placement."""

    transit_body: str
    natal_body: str
    aspect_type: str
    orb: float = Field(ge=0.0)
    applying: bool
    nature: str = "neutral"
    symbol: str = ""
    interpretation: str = ""


class DailyTransitSummary(_ValueObject):
    """Positions, lunar phase, and aspects summarised for one day."""

    day: date
    positions: tuple[BodyPosition, ...]
    moon_phase: MoonPhaseInfo
    aspects: tuple[TransitAspect, ...] = ()
    cosmic_weather: str
    energy_level: int = Field(ge=1, le=10)
