"""Fixed text tables and renderers for positions, aspects, hours, and the Moon."""

from __future__ import annotations

from collections.abc import Sequence

from veya.schemas.timing import BodyPosition, MoonPhaseInfo

from cosmic_timing.bodies import display_name

# Summary messages keyed by retrograde-count bucket
RETROGRADE_MESSAGES: dict[str, str] = {
    "none": "Clear skies ahead! All planets moving forward.",
    "few": "A few planets are retrograde. Review and reassess in those areas of life.",
    "many": "High retrograde energy. Reflection and revision over action; patience is your superpower.",
}

# Best uses of each planet's hour
HOUR_GUIDANCE: dict[str, str] = {
    "sun": "Success, leadership, vitality. Great for important meetings, asking for raises, or health-related activities.",
    "moon": "Intuition, emotions, home. Ideal for family matters, meditation, and nurturing activities.",
    "mars": "Action, courage, competition. Perfect for physical exercise, confronting challenges, or starting projects.",
    "mercury": "Communication, intellect, travel. Best for writing, negotiations, learning, and short trips.",
    "jupiter": "Expansion, luck, abundance. Excellent for business deals, legal matters, and spiritual growth.",
    "venus": "Love, beauty, pleasure. Wonderful for dates, artistic pursuits, and self-care.",
    "saturn": "Discipline, structure, endings. Good for organization, long-term planning, and breaking bad habits.",
}

MOON_SIGN_ENERGIES: dict[str, str] = {
    "Aries": "fiery motivation and bold action",
    "Taurus": "grounded comfort and sensory pleasure",
    "Gemini": "curiosity, conversation, and mental agility",
    "Cancer": "deep nurturing and emotional sensitivity",
    "Leo": "creative expression and warm confidence",
    "Virgo": "practical refinement and attention to detail",
    "Libra": "harmony, partnership, and aesthetic beauty",
    "Scorpio": "transformative depth and emotional intensity",
    "Sagittarius": "adventure, optimism, and philosophical expansion",
    "Capricorn": "disciplined focus and ambitious drive",
    "Aquarius": "innovative thinking and humanitarian vision",
    "Pisces": "intuitive flow and spiritual connection",
}

PHASE_EMOJI: dict[str, str] = {
    "New Moon": "🌑",
    "Waxing Crescent": "🌒",
    "First Quarter": "🌓",
    "Waxing Gibbous": "🌔",
    "Full Moon": "🌕",
    "Waning Gibbous": "🌖",
    "Last Quarter": "🌗",
    "Waning Crescent": "🌘",
}

# Conjunctions read differently for each pair; keyed transit body -> natal body
CONJUNCTION_MEANINGS: dict[str, dict[str, str]] = {
    "sun": {
        "sun": "Solar return energy: a day of renewed vitality and self-expression",
        "moon": "Emotional clarity meets willpower; trust your instincts today",
        "venus": "Love and creativity are amplified; express your heart",
        "mars": "Bold energy surge; take decisive action on what matters",
        "jupiter": "Expansion and optimism; a lucky day for new beginnings",
        "saturn": "A grounding check-in where structure meets purpose",
    },
    "moon": {
        "sun": "Feelings and identity align; emotional authenticity shines",
        "venus": "Heart-centered nurturing; beauty and comfort call to you",
        "mars": "Emotional passion; channel feelings into meaningful action",
    },
    "venus": {
        "sun": "Charm and grace highlight your personality; radiate warmth",
        "moon": "Tenderness and beauty; relationships feel harmonious",
        "venus": "Venus return: love, art, and pleasure are magnified",
        "mars": "Magnetic attraction where passion meets affection",
    },
    "mars": {
        "sun": "Drive and ambition intensify; pursue goals fearlessly",
        "moon": "Emotional courage; defend what matters to you",
        "venus": "Desire meets beauty in romantic and creative fire",
        "mars": "Mars return: raw energy and determination peak",
    },
    "jupiter": {
        "sun": "Blessings and expansion; the universe opens doors",
        "moon": "Emotional generosity; joy comes from giving",
        "venus": "Love expands and relationships grow in beautiful ways",
    },
    "saturn": {
        "sun": "Discipline meets purpose; lay foundations for the long term",
        "moon": "Emotional maturity and wisdom through patience",
        "venus": "Commitment deepens; love tested and strengthened",
    },
}

# Fallback readings per aspect: {transit}, {sign}, {natal} are filled in
ASPECT_MEANINGS: dict[str, str] = {
    "conjunction": "{transit} in {sign} merges with your natal {natal}; a potent new beginning",
    "sextile": "Opportunities arise as {transit} in {sign} supports your natal {natal}; take the initiative",
    "square": "Creative tension between {transit} in {sign} and your natal {natal}; growth through challenge",
    "trine": "Flowing harmony between {transit} in {sign} and your natal {natal}; natural ease and positive energy",
    "opposition": "Awareness and balance needed as {transit} in {sign} opposes your natal {natal}; see both sides",
}


def retrograde_bucket(count: int) -> str:
    if count <= 0:
        return "none"
    if count <= 2:
        return "few"
    return "many"


def retrograde_message(count: int) -> str:
    """Summary text for the number of bodies currently retrograde."""
    return RETROGRADE_MESSAGES[retrograde_bucket(count)]


def hour_guidance(ruler: str) -> str:
    return HOUR_GUIDANCE.get(ruler, "A time for cosmic alignment.")


def moon_sign_energy(sign: str) -> str:
    return MOON_SIGN_ENERGIES.get(sign, "cosmic attunement")


def ingress_description(body: str, sign: str) -> str:
    return f"{display_name(body)} enters {sign}"


def station_description(body: str, direction: str, sign: str) -> str:
    return f"{display_name(body)} stations {direction} in {sign}"


def lunation_description(phase: str, sign: str) -> str:
    return f"{phase} in {sign}"


def phase_emoji(phase: str) -> str:
    return PHASE_EMOJI.get(phase, "🌙")


def aspect_interpretation(transit_body: str, natal_body: str, aspect: str, transit_sign: str) -> str:
    """One-line reading of a transit aspect to a natal placement.

    Conjunctions between known pairs have their own text; everything else
    falls back to the per-aspect template.
    """
    if aspect == "conjunction":
        specific = CONJUNCTION_MEANINGS.get(transit_body, {}).get(natal_body)
        if specific:
            return specific
    transit, natal = display_name(transit_body), display_name(natal_body)
    template = ASPECT_MEANINGS.get(aspect)
    if template is None:
        return f"{transit} in {transit_sign} {aspect}s your natal {natal}"
    return template.format(transit=transit, sign=transit_sign, natal=natal)


def format_positions(positions: Sequence[BodyPosition]) -> str:
    """Planetary positions as indented lines, e.g. ``☿ Mercury: Aries 27°13' (Retrograde)``."""
    lines = ["Current Planetary Positions:"]
    for p in positions:
        retro = " (Retrograde)" if p.retrograde else ""
        lines.append(f"  {p.symbol} {display_name(p.body)}: {p.sign} {int(p.degree_in_sign)}°{p.sign_minute}'{retro}")
    return "\n".join(lines)


def format_moon(moon: MoonPhaseInfo) -> str:
    return "\n".join(
        [
            f"Moon Phase: {moon.emoji} {moon.phase_name} ({round(moon.illuminated_fraction * 100)}% illuminated)",
            f"Moon Sign: {moon.moon_sign} {int(moon.moon_degree_in_sign)}°",
            f"Next Full Moon: {round(moon.days_until_full_moon)} days",
            f"Next New Moon: {round(moon.days_until_new_moon)} days",
        ]
    )
