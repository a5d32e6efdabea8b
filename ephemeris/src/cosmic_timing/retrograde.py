"""Current and upcoming retrograde periods."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from veya.schemas.timing import RetrogradeEntry, RetrogradeSummary

from cosmic_timing.bodies import RETROGRADE_BODIES, longitude_to_sign
from cosmic_timing.meanings import retrograde_message
from cosmic_timing.motion import find_stations
from cosmic_timing.provider import EphemerisProvider

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 90


def summarize_retrogrades(
    provider: EphemerisProvider,
    instant: datetime,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> RetrogradeSummary:
    """Bodies retrograde at ``instant`` and the next retrograde per body within the horizon.

    Windows are searched ``lookahead_days`` either side of ``instant``; a
    current window that began earlier than that reports ``start=None``.
    """
    horizon = timedelta(days=lookahead_days)
    current: list[RetrogradeEntry] = []
    upcoming: list[RetrogradeEntry] = []

    for body in RETROGRADE_BODIES:
        windows = find_stations(provider, body, instant - horizon, instant + horizon)

        active = next((w for w in windows if w.contains(instant)), None)
        if active is not None:
            sign, _ = longitude_to_sign(provider.longitude_of(body, instant))
            current.append(RetrogradeEntry(body=body, sign=sign, start=active.start, end=active.end))

        following = next(
            (w for w in windows if w.start is not None and instant < w.start <= instant + horizon),
            None,
        )
        if following is not None:
            sign, _ = longitude_to_sign(provider.longitude_of(body, following.start))
            upcoming.append(RetrogradeEntry(body=body, sign=sign, start=following.start, end=following.end))

    upcoming.sort(key=lambda entry: entry.start)
    logger.debug("%s: %d retrograde, %d upcoming", instant, len(current), len(upcoming))

    return RetrogradeSummary(
        current=current,
        upcoming=upcoming,
        retrograde_count=len(current),
        message=retrograde_message(len(current)),
    )
