"""
modules/planning/cost_calculator.py
-----------------------------------
Per-day and per-package cost in AED.

  day total = sum(numeric attraction prices) + nightly hotel cost + daily transport cost

Hotel / transport costs come from the reference itself when it carries one, else
from a name lookup against the fetched rows, else the configured defaults
(300 hotel, 150 transport). A missing reference (None) contributes 0.
Never raises; malformed numbers count as zero.
"""

from __future__ import annotations

import math
from typing import Optional

from wahotrip import config
from wahotrip.schemas.itinerary import (
    CostBreakdown, DayPlan, HotelChoice, ItineraryPackage, TransportChoice,
)
from wahotrip.schemas.resources import ResourceBundle

PRICE_RANGE_LOW  = 0.8
PRICE_RANGE_HIGH = 1.3


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def price_range(total: float) -> tuple[int, int]:
    """Estimated spend band shown next to a total."""
    return round(total * PRICE_RANGE_LOW), round(total * PRICE_RANGE_HIGH)


class CostCalculator:
    def __init__(self, resources: Optional[ResourceBundle] = None):
        self._resources = resources or ResourceBundle()

    # ── resolution ──────────────────────────────────────────────────────────

    def hotel_cost(self, hotel: Optional[HotelChoice]) -> float:
        if hotel is None:
            return 0.0
        if _is_number(hotel.cost):
            return float(hotel.cost)
        row = self._resources.find_hotel(hotel.name)
        if row is not None and _is_number(row.nightly_cost):
            return float(row.nightly_cost)
        return config.DEFAULT_HOTEL_COST

    def transport_cost(self, transport: Optional[TransportChoice]) -> float:
        if transport is None:
            return 0.0
        if _is_number(transport.cost):
            return float(transport.cost)
        row = self._resources.find_transport(transport.label)
        if row is not None and _is_number(row.cost_per_day) and row.cost_per_day:
            return float(row.cost_per_day)
        return config.DEFAULT_TRANSPORT_COST

    # ── totals ──────────────────────────────────────────────────────────────

    def day_cost(self, day: DayPlan) -> CostBreakdown:
        attractions = sum(float(a.price) for a in day.attractions if _is_number(a.price))
        return CostBreakdown(
            attractions=attractions,
            hotel=self.hotel_cost(day.hotel),
            transport=self.transport_cost(day.transport),
        )

    def package_cost(self, package: ItineraryPackage) -> CostBreakdown:
        total = CostBreakdown()
        for day in package.days:
            total = total + self.day_cost(day)
        return total

    def apply(self, package: ItineraryPackage) -> ItineraryPackage:
        """Recompute every day's breakdown and the package total in place."""
        for day in package.days:
            day.cost = self.day_cost(day)
        package.total_cost = sum(day.cost.total for day in package.days)
        return package
