"""Tests for aspect detection."""

from cosmic_timing.aspects import _is_applying, angular_distance, effective_orb, find_transit_aspects
from cosmic_timing.bodies import longitude_to_sign
from cosmic_timing.meanings import CONJUNCTION_MEANINGS, aspect_interpretation
from veya.schemas.timing import BodyPosition


def _position(body: str, longitude: float, speed: float = 1.0) -> BodyPosition:
    sign, degree = longitude_to_sign(longitude)
    return BodyPosition(
        body=body,
        longitude=longitude,
        sign=sign,
        degree_in_sign=degree,
        sign_minute=0,
        speed_deg_per_day=speed,
        retrograde=speed < 0,
    )


def test_angular_distance():
    """Test angular distance calculation."""
    assert angular_distance(0, 90) == 90.0
    assert angular_distance(90, 0) == 90.0
    assert angular_distance(0, 180) == 180.0
    assert angular_distance(350, 10) == 20.0
    assert angular_distance(10, 350) == 20.0
    assert abs(angular_distance(0, 0) - 0.0) < 0.001


def test_angular_distance_wraparound():
    """Test angular distance handles wraparound correctly."""
    assert abs(angular_distance(355, 5) - 10.0) < 0.001
    assert abs(angular_distance(1, 359) - 2.0) < 0.001


def test_effective_orb_tighter_for_planets():
    assert effective_orb("sun", "trine") == 8.0
    assert effective_orb("saturn", "trine") == 7.0


def test_find_transit_aspects_with_known_positions():
    """Test aspect detection with known positions."""
    transits = [_position("sun", 324.0), _position("mars", 112.0, 0.6), _position("moon", 228.0, 13.0)]
    natal = [_position("moon", 230.0), _position("venus", 26.0)]

    aspects = find_transit_aspects(transits, natal)
    found = {(a.transit_body, a.natal_body, a.aspect_type) for a in aspects}

    assert ("sun", "moon", "square") in found  # 94 degrees, orb 4
    assert ("mars", "venus", "square") in found  # 86 degrees, orb 4
    assert ("moon", "moon", "conjunction") not in found
    assert [a.orb for a in aspects] == sorted(a.orb for a in aspects)
    for a in aspects:
        assert a.orb >= 0
        assert a.nature in ("neutral", "positive", "challenging")


def test_planet_orb_excludes_wide_aspects():
    # 7.5 degrees from a trine: inside the Sun's orb, outside Saturn's
    transits = [_position("sun", 127.5), _position("saturn", 127.5, 0.03)]
    natal = [_position("mercury", 0.0)]

    aspects = find_transit_aspects(transits, natal)
    assert [(a.transit_body, a.aspect_type) for a in aspects] == [("sun", "trine")]


def test_is_applying():
    """Test applying/separating detection."""
    # Transit approaching a conjunction from behind
    assert _is_applying(100.0, 110.0, 1.0, 0.0) is True

    # Transit moving away
    assert _is_applying(100.0, 110.0, -1.0, 0.0) is False


def test_aspects_carry_symbol_and_interpretation():
    transits = [_position("sun", 324.0), _position("mars", 112.0, 0.6)]
    natal = [_position("moon", 230.0), _position("venus", 26.0)]

    aspects = {(a.transit_body, a.natal_body, a.aspect_type): a for a in find_transit_aspects(transits, natal)}

    square = aspects[("sun", "moon", "square")]
    assert square.symbol == "□"
    assert square.interpretation.startswith("Creative tension between Sun in Aquarius and your natal Moon")

    trine = aspects[("mars", "moon", "trine")]
    assert trine.symbol == "△"
    assert "Mars in Cancer" in trine.interpretation


def test_known_conjunction_pairs_have_their_own_reading():
    aspects = find_transit_aspects([_position("venus", 101.0)], [_position("mars", 100.0)])

    assert [(a.aspect_type, a.symbol) for a in aspects] == [("conjunction", "☌")]
    assert aspects[0].interpretation == CONJUNCTION_MEANINGS["venus"]["mars"]


def test_other_conjunctions_fall_back_to_template():
    assert aspect_interpretation("pluto", "sun", "conjunction", "Aquarius") == (
        "Pluto in Aquarius merges with your natal Sun; a potent new beginning"
    )
    assert aspect_interpretation("sun", "moon", "quincunx", "Leo") == "Sun in Leo quincunxs your natal Moon"
