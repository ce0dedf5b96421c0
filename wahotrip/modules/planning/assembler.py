"""
modules/planning/assembler.py
-----------------------------
Turns parsed completion packages (or fallback packages) into fully populated
ItineraryPackage values.

Stages, per package:
  1. normalise   raw dict → typed package; weekly highlights expand into one DayPlan
                 per day of each week's "a-b" span
  2. backfill    days without attractions / hotel / transport get them from the
                 fetched rows (seeded attraction pick, hotel floor(i/3) % n, transport i % n)
  3. reconcile   attraction entries are matched to store rows by case-insensitive
                 exact-or-substring name match and take the row's name, emirate,
                 price and image
  4. cost        day breakdowns and the package total are recomputed

Nothing here raises on bad input; absent data is replaced with defaults.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

from wahotrip import config
from wahotrip.modules.planning.cost_calculator import CostCalculator
from wahotrip.modules.planning.resource_picks import (
    embedded_attraction_rows, entry_from_row, hotel_for_day, transport_for_day,
)
from wahotrip.modules.planning.seeded_random import SeededRandom
from wahotrip.schemas.itinerary import (
    AttractionEntry, DayPlan, GenerationMethod, HotelChoice, ItineraryPackage, TransportChoice,
)
from wahotrip.schemas.resources import AttractionRow, ResourceBundle

logger = logging.getLogger(__name__)

_SPAN_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_PRICE_RE = re.compile(r"(\d+(?:\.\d+)?)")

DEFAULT_WEEK_DAYS = 7
DEFAULT_WEEK_BUDGET = 3500.0
BACKFILL_DURATIONS = ["2 hours", "3 hours", "4 hours", "Half day"]
BACKFILL_TIMINGS = ["9:00 AM - 12:00 PM", "2:00 PM - 5:00 PM", "10:00 AM - 1:00 PM"]


# ── Raw value coercion ───────────────────────────────────────────────────────

def _raw_price(value: Any) -> Optional[float]:
    """AI price field: missing → default, number → number, "120 AED" → 120, other text → None."""
    if value is None or value == "":
        return config.DEFAULT_ATTRACTION_PRICE
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _PRICE_RE.search(str(value).replace(",", ""))
    return float(match.group(1)) if match else None


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _raw_meals(value: Any) -> dict[str, str]:
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items() if isinstance(v, (str, int, float))}
    if isinstance(value, str) and value.strip():
        return {"note": value.strip()}
    return {}


def week_span_days(span: Any) -> int:
    """Days covered by a week block's "a-b" span; 7 when missing or malformed."""
    if isinstance(span, str):
        match = _SPAN_RE.match(span)
        if match:
            days = int(match.group(2)) - int(match.group(1)) + 1
            if days > 0:
                return days
    return DEFAULT_WEEK_DAYS


def _raw_attraction(item: Any) -> Optional[AttractionEntry]:
    if isinstance(item, str):
        return AttractionEntry(name=item.strip()) if item.strip() else None
    if not isinstance(item, dict):
        return None
    name = _as_text(item.get("name") or item.get("attraction"))
    if not name:
        return None
    return AttractionEntry(
        name=name,
        emirate=_as_text(item.get("emirate") or item.get("emirates")),
        price=_raw_price(item.get("price")),
        duration=_as_text(item.get("duration")) or config.DEFAULT_ATTRACTION_DURATION,
        description=_as_text(item.get("description")),
        image=_as_text(item.get("imageUrl") or item.get("image")) or config.PLACEHOLDER_IMAGE_URL,
        category=_as_text(item.get("type") or item.get("category")),
        time_slot=_as_text(item.get("timing")),
        tip=_as_text(item.get("personalTip") or item.get("tip")),
    )


def _raw_hotel(value: Any) -> Optional[HotelChoice]:
    if isinstance(value, str) and value.strip():
        return HotelChoice(name=value.strip())
    if isinstance(value, dict) and _as_text(value.get("name")):
        cost = value.get("costPerNight", value.get("cost"))
        return HotelChoice(
            name=_as_text(value.get("name")),
            cost=float(cost) if isinstance(cost, (int, float)) and not isinstance(cost, bool) else None,
        )
    return None


def _raw_transport(value: Any) -> Optional[TransportChoice]:
    if isinstance(value, str) and value.strip():
        return TransportChoice(label=value.strip())
    if isinstance(value, dict):
        label = _as_text(value.get("label") or value.get("name"))
        if label:
            cost = value.get("costPerDay", value.get("cost"))
            return TransportChoice(
                label=label,
                cost=float(cost) if isinstance(cost, (int, float)) and not isinstance(cost, bool) else None,
            )
    return None


# ── Normalisation ────────────────────────────────────────────────────────────

def expand_weekly_highlights(weeks: list[Any]) -> list[DayPlan]:
    """One DayPlan per day of each week's span, cycling the week's attractions."""
    days: list[DayPlan] = []
    for week_index, week in enumerate(weeks):
        if not isinstance(week, dict):
            continue
        span = week_span_days(week.get("days"))
        theme = _as_text(week.get("theme")) or "UAE Highlights"
        week_no = week.get("week", week_index + 1)
        budget = _as_float(week.get("budget", week.get("weeklyBudget")), DEFAULT_WEEK_BUDGET)

        detailed = [a for a in (_raw_attraction(x) for x in week.get("attractions") or []) if a]
        key_names = [n.strip() for n in week.get("keyAttractions") or [] if isinstance(n, str) and n.strip()]

        hotels = week.get("recommendedHotels") or []
        hotel = _raw_hotel(hotels[0]) if hotels else None
        transport = _raw_transport(week.get("transport"))

        for offset in range(span):
            day_no = len(days) + 1
            if detailed:
                source = detailed[offset % len(detailed)]
                entry = AttractionEntry(
                    name=source.name,
                    emirate=source.emirate,
                    price=source.price,
                    duration=source.duration or "2-3 hours",
                    category=source.category,
                    tip=source.tip or "Book in advance",
                )
            elif key_names:
                entry = AttractionEntry(
                    name=key_names[offset % len(key_names)],
                    duration="2-3 hours",
                    tip="Book in advance",
                )
            else:
                entry = None
            if entry is not None:
                entry.description = f"Experience {entry.name}"
                entry.time_slot = "9:00 AM - 12:00 PM"

            days.append(DayPlan(
                day=day_no,
                title=f"Day {day_no}: {theme}",
                description=f"Week {week_no} - {theme}",
                attractions=[entry] if entry else [],
                hotel=HotelChoice(name=hotel.name, cost=hotel.cost) if hotel else HotelChoice(),
                transport=(TransportChoice(label=transport.label, cost=transport.cost)
                           if transport else TransportChoice()),
                daily_budget=math.floor(budget / span),
            ))
    return days


def _raw_day(item: Any, index: int) -> Optional[DayPlan]:
    if not isinstance(item, dict):
        return None
    day_no = item.get("day")
    day_no = day_no if isinstance(day_no, int) and day_no > 0 else index + 1
    attractions = [a for a in (_raw_attraction(x) for x in item.get("attractions") or []) if a]
    return DayPlan(
        day=day_no,
        title=_as_text(item.get("title")) or f"Day {day_no}",
        description=_as_text(item.get("description")),
        attractions=attractions,
        hotel=_raw_hotel(item.get("hotel")),
        transport=_raw_transport(item.get("transport")),
        meals=_raw_meals(item.get("meals")),
        expert_tip=_as_text(item.get("expertTip")),
        daily_budget=_as_float(item.get("dailyBudget"), 0.0),
    )


def normalize_package(raw: dict, index: int, trip_days: int) -> ItineraryPackage:
    weeks = raw.get("weeklyHighlights")
    if isinstance(weeks, list) and weeks:
        days = expand_weekly_highlights(weeks)
    else:
        days = [d for d in (_raw_day(x, i) for i, x in enumerate(raw.get("itinerary") or [])) if d]

    if not days:
        logger.info("Package %d has no usable days; creating %d empty days", index + 1, trip_days)
        days = [DayPlan(day=i + 1, title=f"Day {i + 1}") for i in range(trip_days)]

    highlights = raw.get("highlights")
    return ItineraryPackage(
        id=f"ai_package_{index + 1}",
        title=_as_text(raw.get("title")) or f"UAE Package {index + 1}",
        description=_as_text(raw.get("description")),
        theme=_as_text(raw.get("theme")),
        generation_method=GenerationMethod.AI,
        days=days,
        highlights=[h for h in highlights if isinstance(h, str)] if isinstance(highlights, list) else [],
    )


# ── Assembler ────────────────────────────────────────────────────────────────

def match_attraction(name: str, rows: list[AttractionRow]) -> Optional[AttractionRow]:
    """First row whose name equals, contains, or is contained in `name` (case-insensitive)."""
    needle = name.strip().lower()
    if not needle:
        return None
    for row in rows:
        candidate = row.name.strip().lower()
        if not candidate:
            continue
        if candidate == needle or candidate in needle or needle in candidate:
            return row
    return None


class ItineraryAssembler:
    def __init__(self, resources: ResourceBundle, rng: Optional[SeededRandom] = None):
        self._resources = resources
        self._rng = rng or SeededRandom()
        self._calculator = CostCalculator(resources)

    def assemble(self, raw_packages: list[dict], trip_days: int) -> list[ItineraryPackage]:
        packages = [normalize_package(raw, i, trip_days) for i, raw in enumerate(raw_packages)]
        return [self.finalize(p) for p in packages]

    def finalize(self, package: ItineraryPackage) -> ItineraryPackage:
        for index, day in enumerate(package.days):
            self._backfill(day, index)
            day.attractions = [self._reconcile(entry) for entry in day.attractions]
            self._pin_costs(day)
        return self._calculator.apply(package)

    # ── internals ───────────────────────────────────────────────────────────

    def _attraction_pool(self) -> list[AttractionRow]:
        if self._resources.attractions:
            return self._resources.attractions
        return embedded_attraction_rows(self._rng.initial_seed)

    def _backfill(self, day: DayPlan, index: int) -> None:
        if not day.attractions:
            pool = self._attraction_pool()
            row = pool[self._rng.randint(len(pool))]
            entry = entry_from_row(
                row,
                duration=self._rng.choice(BACKFILL_DURATIONS),
                time_slot=self._rng.choice(BACKFILL_TIMINGS),
                tip="Early visit recommended",
            )
            if row.price is None:
                entry.price = float(self._rng.randint(200) + 50)
            day.attractions = [entry]
        if day.hotel is None:
            day.hotel = hotel_for_day(self._resources.hotels, index)
        if day.transport is None:
            day.transport = transport_for_day(self._resources.transport, index)

    def _pin_costs(self, day: DayPlan) -> None:
        # resolved once here so later recomputes agree without the rows
        if day.hotel is not None and day.hotel.cost is None:
            day.hotel.cost = self._calculator.hotel_cost(day.hotel)
        if day.transport is not None and day.transport.cost is None:
            day.transport.cost = self._calculator.transport_cost(day.transport)

    def _reconcile(self, entry: AttractionEntry) -> AttractionEntry:
        row = match_attraction(entry.name, self._resources.attractions)
        if row is None:
            entry.image = entry.image or config.PLACEHOLDER_IMAGE_URL
            return entry
        entry.name = row.name
        entry.emirate = row.emirate or entry.emirate
        if row.price is not None:
            entry.price = row.price
        entry.image = row.image_url or config.PLACEHOLDER_IMAGE_URL
        entry.description = entry.description or row.description[:100]
        entry.category = entry.category or row.category
        return entry
