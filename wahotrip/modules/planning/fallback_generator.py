"""
modules/planning/fallback_generator.py
--------------------------------------
Local package synthesis used when the completion endpoint is unavailable or its
output cannot be repaired.

Always produces exactly 3 packages, one DayPlan per trip night:
  - themes come from the traveler type (solo / couple / family / group)
  - attractions rotate through the pool, 1-2 per day:
        per_day = min(2, max(1, len(pool) // days)), row = pool[(day * per_day + i) % len(pool)]
  - the pool is the fetched rows for the selected emirates, budget-filtered when a budget
    band is set; with no rows at all the embedded attraction table is used
  - hotel / transport follow the shared day-index rotations
  - titles, descriptions, tips and meals come from fixed phrase lists indexed by day,
    so the same day number always reads the same way

Deterministic for a given seed; the seed only affects the embedded-table fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from wahotrip import config
from wahotrip.modules.planning.assembler import ItineraryAssembler
from wahotrip.modules.planning.resource_picks import (
    embedded_attraction_rows, entry_from_row, hotel_for_day, transport_for_day,
)
from wahotrip.modules.planning.seeded_random import SeededRandom
from wahotrip.schemas.itinerary import AttractionEntry, DayPlan, GenerationMethod, ItineraryPackage
from wahotrip.schemas.preferences import TravelPreferences
from wahotrip.schemas.resources import AttractionRow, ResourceBundle

logger = logging.getLogger(__name__)

MAX_ATTRACTIONS_PER_DAY = 2
SLOT_TIMINGS = ["9:00 AM - 12:00 PM", "2:00 PM - 5:00 PM"]

# Coarse per-attraction price ceiling by budget band; unknown bands use the last value
BUDGET_PRICE_CEILINGS = {"budget": 100.0, "mid-range": 300.0}
DEFAULT_PRICE_CEILING = 1000.0


@dataclass(frozen=True)
class PackageTheme:
    title: str
    theme: str
    description: str


THEME_SETS: dict[str, list[PackageTheme]] = {
    "solo": [
        PackageTheme("Solo Adventure Explorer", "adventure",
                     "Thrilling solo experiences across UAE's most exciting destinations"),
        PackageTheme("Cultural Discovery Journey", "cultural",
                     "Deep dive into UAE's rich heritage and traditional culture"),
        PackageTheme("Luxury Solo Retreat", "luxury",
                     "Premium experiences designed for the discerning solo traveler"),
    ],
    "family": [
        PackageTheme("Family Fun Adventure", "family",
                     "Exciting family-friendly activities that create lasting memories"),
        PackageTheme("Educational Discovery Tour", "educational",
                     "Learning experiences that engage and inspire all family members"),
        PackageTheme("Beach & Resort Relaxation", "relaxation",
                     "Perfect blend of fun and relaxation for the whole family"),
    ],
    "group": [
        PackageTheme("Group Adventure Experience", "adventure",
                     "High-energy adventures perfect for groups of friends"),
        PackageTheme("Cultural Group Exploration", "cultural",
                     "Shared cultural experiences that bring groups together"),
        PackageTheme("Entertainment & Nightlife", "entertainment",
                     "Vibrant nightlife and entertainment for group enjoyment"),
    ],
    "couple": [
        PackageTheme("Romantic Getaway", "romantic",
                     "Intimate experiences designed for couples in love"),
        PackageTheme("Adventure & Excitement", "adventure",
                     "Thrilling adventures to share as a couple"),
        PackageTheme("Luxury & Relaxation", "luxury",
                     "Premium relaxation and luxury experiences for two"),
    ],
}

# ── Phrase templates ─────────────────────────────────────────────────────────
# "{name}" is the day's first attraction (or the attraction being described).

DAY_TITLES = [
    "Exploring {name}",
    "Discovering {name}",
    "Adventure at {name}",
    "Journey to {name}",
    "Cultural Immersion: {name}",
    "Experiencing {name}",
    "Unveiling {name}",
    "Heritage Tour: {name}",
]

DAY_DESCRIPTIONS = [
    "Immerse yourself in {name} and discover the cultural treasures that make this destination special.",
    "Experience the thrill of {name} while exploring {extra}.",
    "Begin your adventure at {name} and uncover the hidden gems of the UAE's rich heritage.",
    "Dive deep into local culture at {name} and create unforgettable memories.",
    "Explore the iconic {name} and witness breathtaking panoramic views.",
    "Discover the magic of {name} and experience authentic Emirati hospitality.",
    "Journey through {name} and capture breathtaking moments at every turn.",
    "Embark on a cultural exploration at {name} and connect with local traditions.",
]

TRAVELER_NOTES = {
    "solo":   "Perfect for independent exploration and self-discovery.",
    "couple": "Ideal for creating romantic memories together.",
    "family": "Great for family bonding and educational experiences.",
    "group":  "Perfect for group adventures and shared experiences.",
}

EXPERT_TIPS = [
    "Start your day early at {name} to avoid crowds and enjoy the best lighting for photos.",
    "Book your tickets in advance for {name} to skip the lines and save time.",
    "Visit {name} during sunset for the most spectacular views and photo opportunities.",
    "Combine your visit to {name} with nearby attractions for a full day experience.",
    "Dress comfortably for {name} and bring a water bottle to stay hydrated.",
    "Learn about the history of {name} beforehand to enhance your experience.",
    "Allow extra time at {name} to fully appreciate its unique features.",
    "Check the opening hours of {name} and plan your visit accordingly.",
]

ATTRACTION_DESCRIPTIONS = [
    "Experience the magnificent {name} and immerse yourself in its rich cultural heritage.",
    "Discover the architectural wonders of {name} and learn about its fascinating history.",
    "Marvel at the stunning beauty of {name} and capture unforgettable memories.",
    "Explore the iconic {name} and witness breathtaking panoramic views.",
    "Journey through {name} and experience authentic local traditions.",
    "Uncover the secrets of {name} with expert guided tours and insights.",
    "Step into the world of {name} and enjoy interactive experiences.",
    "Visit the legendary {name} and understand its cultural significance.",
]

PERSONAL_TIPS = [
    "Arrive early at {name} for shorter queues and better photo opportunities.",
    "Don't forget to try the local delicacies near {name}.",
    "Bring your camera to {name} - the views are absolutely stunning!",
    "Wear comfortable shoes when visiting {name} as there's lots to explore.",
    "Check out the gift shop at {name} for unique souvenirs.",
    "Take a guided tour at {name} to learn fascinating historical facts.",
    "Visit {name} during golden hour for the most beautiful lighting.",
    "Book online tickets for {name} to save time and money.",
]

MEAL_OPTIONS = [
    {"breakfast": "Hotel Restaurant",      "lunch": "Traditional Emirati",   "dinner": "Rooftop Dining"},
    {"breakfast": "Local Café",            "lunch": "Street Food Tour",      "dinner": "Fine Dining"},
    {"breakfast": "Continental Breakfast", "lunch": "Seafood Restaurant",    "dinner": "Desert BBQ"},
    {"breakfast": "Buffet Breakfast",      "lunch": "International Cuisine", "dinner": "Cultural Experience"},
    {"breakfast": "Health Bowl Café",      "lunch": "Local Market Food",     "dinner": "Luxury Restaurant"},
    {"breakfast": "Arabian Breakfast",     "lunch": "Food Court",            "dinner": "Waterfront Dining"},
    {"breakfast": "Hotel Brunch",          "lunch": "Authentic Local",       "dinner": "Sky Lounge"},
    {"breakfast": "Organic Café",          "lunch": "Fusion Cuisine",        "dinner": "Traditional Feast"},
]


def _pick(templates: list, index: int):
    return templates[index % len(templates)]


def price_ceiling(budget: str) -> float:
    return BUDGET_PRICE_CEILINGS.get(budget.strip().lower(), DEFAULT_PRICE_CEILING)


class FallbackGenerator:
    """Never raises; returns 3 packages even with an empty resource bundle."""

    def __init__(self, resources: ResourceBundle, seed: Optional[int] = None):
        self._resources = resources
        self._rng = SeededRandom(seed)

    @property
    def seed(self) -> int:
        return self._rng.initial_seed

    def generate(self, prefs: TravelPreferences) -> list[ItineraryPackage]:
        pool = self.attraction_pool(prefs)
        traveler_type = prefs.traveler_type
        themes = THEME_SETS.get(traveler_type, THEME_SETS["couple"])
        assembler = ItineraryAssembler(self._resources, self._rng)

        packages = []
        for pkg_index, theme in enumerate(themes):
            days = [
                self._build_day(day_index, pool, prefs.trip_duration, traveler_type)
                for day_index in range(prefs.trip_duration)
            ]
            package = ItineraryPackage(
                id=f"random_package_{pkg_index + 1}",
                title=theme.title,
                description=theme.description,
                theme=theme.theme,
                generation_method=GenerationMethod.RANDOM,
                days=days,
                personal_note=(
                    f"This {theme.theme} package is perfect for {traveler_type} travelers "
                    f"seeking memorable experiences in the UAE"
                ),
            )
            packages.append(assembler.finalize(package))

        logger.info(
            "Fallback generated %d packages x %d days from %d attractions (seed=%d)",
            len(packages), prefs.trip_duration, len(pool), self.seed,
        )
        return packages

    # ── pool ────────────────────────────────────────────────────────────────

    def attraction_pool(self, prefs: TravelPreferences) -> list[AttractionRow]:
        rows = self._resources.attractions
        if not rows:
            logger.warning("No attraction rows available; using the embedded attraction table")
            return embedded_attraction_rows(self.seed, prefs.emirate_names)

        names = [n.lower() for n in prefs.emirate_names]
        if names:
            in_emirates = [r for r in rows if r.emirate.lower() in names]
            rows = in_emirates or rows

        if prefs.budget:
            ceiling = price_ceiling(prefs.budget)
            affordable = [r for r in rows if (r.price if r.price is not None else config.DEFAULT_ATTRACTION_PRICE) <= ceiling]
            rows = affordable or rows
        return rows

    # ── days ────────────────────────────────────────────────────────────────

    def _build_day(
        self,
        day_index: int,
        pool: list[AttractionRow],
        trip_days: int,
        traveler_type: str,
    ) -> DayPlan:
        per_day = min(MAX_ATTRACTIONS_PER_DAY, max(1, len(pool) // trip_days))
        attractions: list[AttractionEntry] = []
        for slot in range(per_day):
            seq = day_index * per_day + slot
            row = pool[seq % len(pool)]
            attractions.append(entry_from_row(
                row,
                duration="2-3 hours",
                time_slot=SLOT_TIMINGS[slot % len(SLOT_TIMINGS)],
                tip=_pick(PERSONAL_TIPS, seq).format(name=row.name),
                description=_pick(ATTRACTION_DESCRIPTIONS, seq).format(name=row.name),
            ))

        day_no = day_index + 1
        main = attractions[0].name
        extra = (
            f"{len(attractions) - 1} additional amazing locations"
            if len(attractions) > 1 else "the surrounding area"
        )
        description = _pick(DAY_DESCRIPTIONS, day_index).format(name=main, extra=extra)
        return DayPlan(
            day=day_no,
            title=f"Day {day_no}: " + _pick(DAY_TITLES, day_no).format(name=main),
            description=f"{description} {TRAVELER_NOTES.get(traveler_type, TRAVELER_NOTES['couple'])}",
            attractions=attractions,
            hotel=hotel_for_day(self._resources.hotels, day_index),
            transport=transport_for_day(self._resources.transport, day_index),
            meals=dict(_pick(MEAL_OPTIONS, day_index)),
            expert_tip=_pick(EXPERT_TIPS, day_index).format(name=main),
        )
