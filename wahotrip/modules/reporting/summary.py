"""
modules/reporting/summary.py
----------------------------
Trip summary for the selected package, and saving it as a booking.

Saving is idempotent per (email, package title): the first save inserts a
confirmed booking with download_count = 1, later saves bump the count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from wahotrip.db.repositories import booking_repo
from wahotrip.modules.planning.cost_calculator import CostCalculator, price_range
from wahotrip.schemas.itinerary import CostBreakdown, ItineraryPackage
from wahotrip.schemas.preferences import TravelPreferences
from wahotrip.schemas.resources import ResourceBundle

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_TITLE = "UAE Journey"
GUEST_NAME = "Guest"


@dataclass
class TripSummary:
    traveler: str
    email: str
    phone: str
    package_title: str
    package_description: str
    days: int
    destination: str
    journey_month: str
    travelers: int
    budget: str
    day_lines: list[dict] = field(default_factory=list)
    costs: CostBreakdown = field(default_factory=CostBreakdown)
    price_range: tuple[int, int] = (0, 0)

    @property
    def total_cost(self) -> float:
        return self.costs.total

    def to_dict(self) -> dict:
        return {
            "traveler": self.traveler,
            "email": self.email,
            "phone": self.phone,
            "packageTitle": self.package_title,
            "packageDescription": self.package_description,
            "days": self.days,
            "destination": self.destination,
            "journeyMonth": self.journey_month,
            "travelers": self.travelers,
            "budget": self.budget,
            "itinerary": self.day_lines,
            "costs": self.costs.to_dict(),
            "totalCost": self.total_cost,
            "priceRange": {"min": self.price_range[0], "max": self.price_range[1]},
        }

    def render_text(self, generated_on: Optional[date] = None) -> str:
        """Plain-text itinerary, the content a traveler downloads."""
        generated_on = generated_on or date.today()
        lines = [
            f"Travel Itinerary - {self.package_title}",
            "",
            f"Traveler: {self.traveler}",
            f"Email: {self.email or 'Not provided'}",
            f"Phone: {self.phone or 'Not provided'}",
            "",
            "Trip Details:",
            f"- Duration: {self.days} days",
            f"- Destination: {self.destination}",
            f"- Travel Month: {self.journey_month or 'Not specified'}",
            f"- Travelers: {self.travelers}",
            f"- Budget: {self.budget or 'Not specified'}",
            "",
            "Daily Itinerary:",
        ]
        for day in self.day_lines:
            lines += [
                "",
                f"Day {day['day']}: {day['title']}",
                day["description"],
                f"Attractions: {', '.join(day['attractions']) or 'None specified'}",
                f"Hotel: {day['hotel']}",
                f"Transport: {day['transport']}",
            ]
        lines += [
            "",
            f"Estimated Total: {self.total_cost:,.0f} AED "
            f"(range {self.price_range[0]:,} - {self.price_range[1]:,} AED)",
            "",
            f"Generated on: {generated_on.isoformat()}",
        ]
        return "\n".join(lines)


def build_summary(
    prefs: TravelPreferences,
    package: ItineraryPackage,
    resources: Optional[ResourceBundle] = None,
) -> TripSummary:
    calculator = CostCalculator(resources)
    costs = calculator.package_cost(package)
    day_lines = [
        {
            "day": plan.day,
            "title": plan.title or f"Day {plan.day}",
            "description": plan.description,
            "attractions": [a.name for a in plan.attractions],
            "hotel": plan.hotel.name if plan.hotel else "Premium Hotel",
            "transport": plan.transport.label if plan.transport else "Private Transport",
            "cost": calculator.day_cost(plan).total,
        }
        for plan in package.days
    ]
    return TripSummary(
        traveler=prefs.contact.full_name or GUEST_NAME,
        email=prefs.contact.email,
        phone=f"{prefs.contact.country_code} {prefs.contact.phone}".strip(),
        package_title=package.title or DEFAULT_PACKAGE_TITLE,
        package_description=package.description,
        days=len(package.days),
        destination=prefs.emirates_display_text(),
        journey_month=prefs.journey_month.capitalize(),
        travelers=prefs.total_travelers,
        budget=prefs.budget,
        day_lines=day_lines,
        costs=costs,
        price_range=price_range(costs.total),
    )


def booking_row(prefs: TravelPreferences, package: ItineraryPackage, summary: TripSummary) -> dict:
    return {
        "full_name": summary.traveler,
        "email": prefs.contact.email,
        "phone": prefs.contact.phone,
        "country_code": prefs.contact.country_code,
        "trip_duration": prefs.trip_duration,
        "journey_month": prefs.journey_month,
        "departure_country": prefs.departure_country,
        "emirates": list(prefs.emirates),
        "budget": prefs.budget,
        "adults": prefs.adults,
        "kids": prefs.kids,
        "infants": prefs.infants,
        "total_travelers": prefs.total_travelers,
        "package_title": summary.package_title,
        "package_description": summary.package_description,
        "itinerary_data": [d.to_dict() for d in package.days],
        "estimated_cost": summary.total_cost,
        "price_range_min": summary.price_range[0],
        "price_range_max": summary.price_range[1],
        "booking_status": "confirmed",
        "download_count": 1,
    }


@dataclass
class SaveResult:
    booking_id: object
    created: bool
    download_count: int


def save_summary(conn, prefs: TravelPreferences, package: ItineraryPackage, summary: TripSummary) -> SaveResult:
    """Insert a booking, or bump download_count of the existing one for this email + title."""
    existing = booking_repo.get_booking_by_email_and_package(conn, prefs.contact.email, summary.package_title)
    if existing:
        count = booking_repo.increment_download_count(conn, existing["id"])
        logger.info("Booking %s re-downloaded (count=%d)", existing["id"], count)
        return SaveResult(existing["id"], False, count)

    row = booking_repo.create_booking(conn, booking_row(prefs, package, summary))
    logger.info("Booking %s saved for %s", row.get("id"), summary.package_title)
    return SaveResult(row.get("id"), True, int(row.get("download_count") or 1))
