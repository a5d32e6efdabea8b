"""Tests for timing value objects."""

import math
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError
from veya.schemas.timing import GeoCoordinate, RetrogradeWindow


def test_coordinate_accepts_boundaries():
    GeoCoordinate(latitude=90.0, longitude=-180.0)
    GeoCoordinate(latitude=-90.0, longitude=180.0)


@pytest.mark.parametrize(
    ("latitude", "longitude"),
    [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.5), (0.0, -200.0), (math.nan, 0.0), (0.0, math.inf)],
)
def test_coordinate_rejects_out_of_range(latitude, longitude):
    with pytest.raises(ValidationError):
        GeoCoordinate(latitude=latitude, longitude=longitude)


def test_value_objects_are_frozen():
    location = GeoCoordinate(latitude=51.5, longitude=0.0)
    with pytest.raises(ValidationError):
        location.latitude = 10.0


def test_window_contains_treats_missing_ends_as_open():
    window = RetrogradeWindow(body="mercury", start=None, end=datetime(2024, 4, 25, tzinfo=UTC))
    assert window.contains(datetime(2000, 1, 1, tzinfo=UTC))
    assert not window.contains(datetime(2024, 4, 25, tzinfo=UTC))
