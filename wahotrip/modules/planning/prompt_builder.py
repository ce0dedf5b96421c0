"""
modules/planning/prompt_builder.py
----------------------------------
Builds the single completion prompt requesting exactly 3 themed packages.

Budgets, by trip length (nights):
  attractions offered : 15 (<= 7), 12 (<= 15), 10 otherwise
  long trip (> 10)    : 6 hotels, 5 transport, weekly-highlights output shape
  otherwise           : 10 hotels, 8 transport, per-day output shape
  token ceiling       : 20000 (long) / 25000 (short), estimated as chars / 4

When the first prompt is over its ceiling it is rebuilt once with an ultra-reduced
attraction list (6 long / 8 short). The builder never fails: the reduced prompt is
returned even if it is still over the ceiling.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from wahotrip.llm import estimate_tokens
from wahotrip.schemas.preferences import TravelPreferences
from wahotrip.schemas.resources import AttractionRow, HotelRow, ResourceBundle, TransportRow

logger = logging.getLogger(__name__)

LONG_TRIP_THRESHOLD = 10

PACKAGE_THEMES: dict[str, list[str]] = {
    "solo":   ["Adventure Explorer", "Cultural Immersion", "Luxury Solo Experience"],
    "family": ["Family Fun Adventure", "Educational Discovery", "Beach & Resort Relaxation"],
    "group":  ["Group Adventure", "Cultural Exploration", "Entertainment & Nightlife"],
    "couple": ["Romantic Getaway", "Adventure & Excitement", "Luxury & Relaxation"],
}


@dataclass
class BuiltPrompt:
    text: str
    estimated_tokens: int
    attraction_count: int
    long_trip: bool
    reduced: bool = False


# ── Budgets ──────────────────────────────────────────────────────────────────

def attraction_budget(trip_days: int) -> int:
    if trip_days <= 7:
        return 15
    if trip_days <= 15:
        return 12
    return 10


def is_long_trip(trip_days: int) -> bool:
    return trip_days > LONG_TRIP_THRESHOLD


def token_ceiling(trip_days: int) -> int:
    return 20000 if is_long_trip(trip_days) else 25000


def reduced_attraction_budget(trip_days: int) -> int:
    return 6 if is_long_trip(trip_days) else 8


def week_count(trip_days: int) -> int:
    return math.ceil(trip_days / 7)


# ── Row selection & formatting ───────────────────────────────────────────────

def select_price_spread(rows: list[AttractionRow], max_count: int) -> list[AttractionRow]:
    """Pick up to max_count rows spread evenly across the price-sorted list."""
    if len(rows) <= max_count:
        return list(rows)
    ordered = sorted(rows, key=lambda r: r.price or 0)
    return [ordered[i * len(ordered) // max_count] for i in range(max_count)]


def _clip(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def format_attractions(rows: list[AttractionRow]) -> str:
    lines = []
    for row in rows:
        description = _clip(row.description or "Premium attraction experience", 95)
        price = f"{row.price:g} AED" if row.price else "Free"
        category = f" [{row.category}]" if row.category else ""
        lines.append(f"• {row.name} ({row.emirate}) - {price}{category} - {description}")
    return "\n".join(lines)


def format_hotels(rows: list[HotelRow]) -> str:
    lines = []
    for row in rows:
        stars = f"{row.stars} stars" if row.stars else "Premium"
        price = row.nightly_cost or 400
        description = _clip(row.description or "Quality accommodation", 60)
        lines.append(f"• {row.name} - {stars} - {price:g} AED/night - {description}")
    return "\n".join(lines)


def format_transport(rows: list[TransportRow]) -> str:
    lines = []
    for row in rows:
        price = row.cost_per_day or 150
        description = _clip(row.description or "Quality transport", 40)
        lines.append(f"• {row.label} - {price:g} AED/day - {description}")
    return "\n".join(lines)


# ── Prompt sections ──────────────────────────────────────────────────────────

def _group_line(prefs: TravelPreferences) -> str:
    line = f"{prefs.adults} adults"
    if prefs.kids:
        line += f", {prefs.kids} children"
    if prefs.infants:
        line += f", {prefs.infants} infants"
    return line


def _format_section(trip_days: int, long_trip: bool) -> str:
    if long_trip:
        return f"""LONG TRIP FORMAT ({trip_days} days - compact weekly structure):
The output is limited to 8,192 tokens, so create compact weekly summaries instead of daily plans.

"weeklyHighlights": [
  {{
    "week": 1,
    "days": "1-7",
    "theme": "Theme Name",
    "keyAttractions": ["Attraction1", "Attraction2", "Attraction3"],
    "budget": 3500
  }}
]

For {trip_days} days, create at most {week_count(trip_days)} weeks. Keep descriptions minimal."""
    return f"""SHORT TRIP FORMAT ({trip_days} days - daily structure):
Create detailed day-by-day itineraries.

"itinerary": [
  {{
    "day": 1,
    "title": "Day 1: Title",
    "attractions": [{{"name": "Attraction", "price": 149, "duration": "2h"}}],
    "hotel": "Hotel Name",
    "transport": "Transport"
  }}
]"""


def _shape_example(trip_days: int, long_trip: bool) -> str:
    if long_trip:
        body = """"weeklyStructure": true,
    "weeklyHighlights": [
      {
        "week": 1,
        "days": "1-7",
        "theme": "Theme",
        "keyAttractions": ["Attraction1", "Attraction2"],
        "budget": 3500
      }
    ]"""
    else:
        body = """"weeklyStructure": false,
    "itinerary": [
      {
        "day": 1,
        "title": "Day 1: Title",
        "attractions": [{"name": "Exact Name", "price": 149}],
        "hotel": "Hotel Name",
        "transport": "Transport"
      }
    ]"""
    return f"""[
  {{
    "id": "package_1",
    "title": "Package Name",
    "description": "Brief description",
    "theme": "adventure/cultural/luxury",
    "totalEstimatedCost": 15000,
    "duration": {trip_days},
    {body}
  }}
]"""


def _render(
    prefs: TravelPreferences,
    attractions_header: str,
    attractions_text: str,
    hotels: list[HotelRow],
    transport: list[TransportRow],
) -> str:
    trip_days = prefs.trip_duration
    long_trip = is_long_trip(trip_days)
    traveler_type = prefs.traveler_type
    themes = "\n".join(f"- {t}" for t in PACKAGE_THEMES[traveler_type])
    pacing_rule = (
        "For long trips (10+ days): create week-based sections with key highlights instead of daily details"
        if long_trip else
        "For shorter trips: create detailed daily itineraries"
    )
    closing_rule = (
        "For long trips: use the compact weekly format to fit the 8,192 token limit"
        if long_trip else
        "For short trips: provide detailed daily schedules"
    )

    return f"""You are an expert UAE travel consultant. Create exactly 3 unique {trip_days}-day travel packages for {traveler_type} travelers.

IMPORTANT: Return ONLY a valid JSON array. No markdown, no explanations, just the JSON.

TRAVELER DETAILS:
- Group: {_group_line(prefs)}
- Duration: {trip_days} days
- Emirates: {", ".join(prefs.emirates)}
- Budget: {prefs.budget}
- Month: {prefs.journey_month}

AVAILABLE DATABASE RESOURCES:

{attractions_header}
{attractions_text}

HOTELS ({len(hotels)} available):
{format_hotels(hotels)}

TRANSPORT ({len(transport)} available):
{format_transport(transport)}

CRITICAL REQUIREMENTS:
1. Create exactly 3 distinct packages with different themes
2. Each package must cover all {trip_days} days with appropriate pacing
3. {pacing_rule}
4. Use structured attraction lists with 1-3 attractions per section
5. Use ONLY attraction names from the database list above (copy exact names)
6. Use ONLY hotel names from the database list above (copy exact names)
7. Use ONLY transport from the database list above (copy exact names)
8. Keep pricing realistic and based on database costs
9. Create unique titles that reflect the package theme

PACKAGE THEMES for {traveler_type}:
{themes}

{_format_section(trip_days, long_trip)}

Return ONLY a valid JSON array using this compact structure:
{_shape_example(trip_days, long_trip)}

CRITICAL RULES:
- Return ONLY the JSON array, no other text
- Use exact names from the database lists provided above
- Ensure all JSON is properly formatted
- Calculate realistic costs based on database prices
- {closing_rule}"""


# ── Public API ───────────────────────────────────────────────────────────────

class PromptBuilder:
    """Pure string construction; no I/O."""

    def build(self, prefs: TravelPreferences, resources: ResourceBundle) -> BuiltPrompt:
        trip_days = prefs.trip_duration
        long_trip = is_long_trip(trip_days)
        hotels = resources.hotels[: 6 if long_trip else 10]
        transport = resources.transport[: 5 if long_trip else 8]

        curated = select_price_spread(resources.attractions, attraction_budget(trip_days))
        header = f"ATTRACTIONS ({len(curated)} curated from {len(resources.attractions)} total):"
        text = _render(prefs, header, format_attractions(curated), hotels, transport)
        tokens = estimate_tokens(text)

        ceiling = token_ceiling(trip_days)
        if tokens <= ceiling:
            logger.debug("Prompt built: %d attractions, ~%d tokens", len(curated), tokens)
            return BuiltPrompt(text, tokens, len(curated), long_trip)

        core = curated[: reduced_attraction_budget(trip_days)]
        logger.warning(
            "Prompt ~%d tokens exceeds %d for a %d-day trip; reducing to %d attractions",
            tokens, ceiling, trip_days, len(core),
        )
        header = f"ATTRACTIONS ({len(core)} core selections):"
        text = _render(prefs, header, format_attractions(core), hotels, transport)
        return BuiltPrompt(text, estimate_tokens(text), len(core), long_trip, reduced=True)
