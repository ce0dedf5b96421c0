"""
modules/planning/manual_planner.py
----------------------------------
Escape hatch from generation: an empty package the traveler fills in through
the itinerary editor.
"""

from __future__ import annotations

from wahotrip.modules.planning.cost_calculator import CostCalculator
from wahotrip.schemas.itinerary import (
    DayPlan, GenerationMethod, HotelChoice, ItineraryPackage, TransportChoice,
)
from wahotrip.schemas.preferences import TravelPreferences
from wahotrip.schemas.resources import ResourceBundle


def build_manual_package(prefs: TravelPreferences, resources: ResourceBundle | None = None) -> ItineraryPackage:
    """One empty day per trip night with placeholder hotel and transport."""
    region = prefs.emirates_display_text()
    days = [
        DayPlan(
            day=i + 1,
            title=f"Day {i + 1}",
            description="Plan your activities for this day",
            hotel=HotelChoice(),
            transport=TransportChoice(),
        )
        for i in range(prefs.trip_duration)
    ]
    package = ItineraryPackage(
        id="manual_package",
        title=f"Custom {region} Experience",
        description=f"Your personalized {prefs.trip_duration}-day itinerary",
        theme="Custom",
        generation_method=GenerationMethod.MANUAL,
        days=days,
    )
    return CostCalculator(resources).apply(package)
