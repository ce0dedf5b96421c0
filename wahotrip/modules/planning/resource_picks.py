"""
modules/planning/resource_picks.py
----------------------------------
Selection rules shared by the assembler, the fallback generator and the manual planner.

  hotel for day index i     : hotels[floor(i / 3) % len(hotels)]
  transport for day index i : transport[i % len(transport)]
  last-resort attractions   : a small embedded table of well-known UAE sights,
                              used only when the store returned no attraction rows
"""

from __future__ import annotations

from typing import Optional

from wahotrip import config
from wahotrip.modules.planning.seeded_random import SeededRandom
from wahotrip.schemas.itinerary import AttractionEntry, HotelChoice, TransportChoice
from wahotrip.schemas.resources import AttractionRow, HotelRow, TransportRow

HOTEL_ROTATION_DAYS = 3

# (name, emirate, category, (min price, max price)), AED
EMBEDDED_ATTRACTIONS: list[tuple[str, str, str, tuple[int, int]]] = [
    ("Burj Khalifa",                "Dubai",     "Architecture",  (100, 200)),
    ("Dubai Mall",                  "Dubai",     "Shopping",      (0, 50)),
    ("Sheikh Zayed Grand Mosque",   "Abu Dhabi", "Cultural",      (0, 0)),
    ("Louvre Abu Dhabi",            "Abu Dhabi", "Museum",        (60, 150)),
    ("Dubai Marina",                "Dubai",     "Waterfront",    (50, 120)),
    ("Palm Jumeirah",               "Dubai",     "Beach",         (80, 180)),
    ("Al Fahidi Historic District", "Dubai",     "Heritage",      (20, 60)),
    ("Ferrari World",               "Abu Dhabi", "Theme Park",    (200, 400)),
    ("Sharjah Art Museum",          "Sharjah",   "Art",           (30, 80)),
    ("Ajman Beach",                 "Ajman",     "Beach",         (0, 40)),
    ("Dubai Fountain",              "Dubai",     "Entertainment", (0, 30)),
    ("Atlantis Aquaventure",        "Dubai",     "Water Park",    (250, 350)),
    ("Ski Dubai",                   "Dubai",     "Adventure",     (180, 280)),
    ("Yas Island",                  "Abu Dhabi", "Entertainment", (100, 300)),
    ("Dubai Creek",                 "Dubai",     "Heritage",      (20, 80)),
    ("Miracle Garden",              "Dubai",     "Nature",        (40, 60)),
    ("Global Village",              "Dubai",     "Cultural",      (15, 25)),
    ("IMG Worlds",                  "Dubai",     "Theme Park",    (200, 300)),
]


def _emirate_matches(row_emirate: str, selected: list[str]) -> bool:
    row_emirate = row_emirate.lower()
    return any(row_emirate in s.lower() or s.lower() in row_emirate for s in selected)


def embedded_attraction_rows(seed: int, emirates: Optional[list[str]] = None) -> list[AttractionRow]:
    """
    Shuffle the embedded table with the session seed, filter to the selected emirates
    (display names or slugs; empty / None means all), and price each row inside its range.

    When the filter leaves nothing the whole table is used, so callers always get rows.
    """
    shuffled = SeededRandom(seed).shuffled(EMBEDDED_ATTRACTIONS)
    if emirates:
        selected = [e.replace("-", " ") for e in emirates]
        filtered = [t for t in shuffled if _emirate_matches(t[1], selected)]
        shuffled = filtered or shuffled

    rows = []
    for index, (name, emirate, category, (low, high)) in enumerate(shuffled):
        rows.append(AttractionRow(
            id=f"embedded-{index + 1}",
            name=name,
            emirate=emirate,
            price=float((seed + index * 1000) % (high - low + 1) + low),
            duration="2-3 hours",
            description=f"Experience the amazing {name} - a {category.lower()} attraction in {emirate}",
            image_url=config.PLACEHOLDER_IMAGE_URL,
            category=category,
        ))
    return rows


# ── Day-index rotations ──────────────────────────────────────────────────────

def hotel_for_day(hotels: list[HotelRow], day_index: int) -> HotelChoice:
    if not hotels:
        return HotelChoice(name=config.DEFAULT_HOTEL_NAME)
    return hotel_choice(hotels[(day_index // HOTEL_ROTATION_DAYS) % len(hotels)])


def transport_for_day(transport: list[TransportRow], day_index: int) -> TransportChoice:
    if not transport:
        return TransportChoice(label=config.DEFAULT_TRANSPORT_LABEL)
    return transport_choice(transport[day_index % len(transport)])


# ── Row → reference conversions ──────────────────────────────────────────────

def hotel_choice(row: HotelRow) -> HotelChoice:
    return HotelChoice(
        name=row.name or config.DEFAULT_HOTEL_NAME,
        cost=row.nightly_cost,
        stars=row.stars,
        description=row.description,
        image=row.image_url,
    )


def transport_choice(row: TransportRow) -> TransportChoice:
    return TransportChoice(
        label=row.label or config.DEFAULT_TRANSPORT_LABEL,
        cost=row.cost_per_day,
        type=row.type,
        description=row.description,
        image=row.image_url,
    )


def entry_from_row(
    row: AttractionRow,
    duration: str = "",
    time_slot: str = "",
    tip: str = "",
    description: str = "",
) -> AttractionEntry:
    return AttractionEntry(
        name=row.name,
        emirate=row.emirate,
        price=row.price if row.price is not None else config.DEFAULT_ATTRACTION_PRICE,
        duration=duration or row.duration or config.DEFAULT_ATTRACTION_DURATION,
        description=description or row.description[:100] or f"Explore {row.name}",
        image=row.image_url or config.PLACEHOLDER_IMAGE_URL,
        category=row.category,
        time_slot=time_slot,
        tip=tip,
    )
