"""Error taxonomy for the timing engine."""

from __future__ import annotations


class CosmicTimingError(Exception):
    """Base class for every error raised by the timing engine."""


class ProviderUnavailable(CosmicTimingError):
    """The ephemeris provider failed to produce data."""


class DegenerateLocation(CosmicTimingError):
    """The sun does not rise or set at the location on the requested date."""


class OutOfRangeQuery(CosmicTimingError):
    """The query falls outside the window a computation can answer."""


class InvalidInput(CosmicTimingError, ValueError):
    """An instant, coordinate, or calendar argument is malformed."""
