"""
schemas/preferences.py
----------------------
Traveler preferences captured by the trip form.

The persisted blob uses the form's camelCase keys (tripDuration, journeyMonth, ...);
``from_dict`` also accepts the snake_case column names used by travel_submissions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wahotrip import config

# Emirate slug (form value) → name stored in the resource tables
EMIRATE_NAMES: dict[str, str] = {
    "dubai":          "Dubai",
    "abu-dhabi":      "Abu Dhabi",
    "sharjah":        "Sharjah",
    "ajman":          "Ajman",
    "fujairah":       "Fujairah",
    "ras-al-khaimah": "Ras Al Khaimah",
    "umm-al-quwain":  "Umm Al Quwain",
}

ALL_EMIRATES = "all"


def _to_int(value: Any, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass
class ContactInfo:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    country_code: str = ""


@dataclass
class TravelPreferences:
    """Read-only input to generation; the single source of truth for re-generation."""
    adults: int = 1
    kids: int = 0
    infants: int = 0
    trip_duration: int = config.DEFAULT_TRIP_NIGHTS   # nights
    emirates: list[str] = field(default_factory=lambda: [ALL_EMIRATES])
    journey_month: str = ""
    budget: str = ""                                  # band label, e.g. "3,000 - 5,000"
    departure_country: str = ""
    contact: ContactInfo = field(default_factory=ContactInfo)

    # ── derived ───────────────────────────────────────────────────────────

    @property
    def total_travelers(self) -> int:
        return self.adults + self.kids + self.infants

    @property
    def has_children(self) -> bool:
        return self.kids > 0 or self.infants > 0

    @property
    def includes_all_emirates(self) -> bool:
        return not self.emirates or ALL_EMIRATES in self.emirates

    @property
    def traveler_type(self) -> str:
        """solo | family | group | couple"""
        if self.total_travelers == 1:
            return "solo"
        if self.has_children:
            return "family"
        if self.total_travelers >= 3:
            return "group"
        return "couple"

    @property
    def emirate_names(self) -> list[str]:
        """Stored emirate names for the selection; empty when all emirates are selected."""
        if self.includes_all_emirates:
            return []
        return [EMIRATE_NAMES.get(e, e) for e in self.emirates]

    def emirates_display_text(self) -> str:
        if self.includes_all_emirates or len(self.emirates) == len(EMIRATE_NAMES):
            return "All UAE"
        return ", ".join(self.emirate_names)

    # ── serialisation ─────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "adults": self.adults,
            "kids": self.kids,
            "infants": self.infants,
            "tripDuration": str(self.trip_duration),
            "emirates": list(self.emirates),
            "journeyMonth": self.journey_month,
            "budget": self.budget,
            "departureCountry": self.departure_country,
            "fullName": self.contact.full_name,
            "email": self.contact.email,
            "phone": self.contact.phone,
            "countryCode": self.contact.country_code,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TravelPreferences":
        emirates = data.get("emirates") or [ALL_EMIRATES]
        if isinstance(emirates, str):
            emirates = [emirates]
        duration = data.get("tripDuration", data.get("trip_duration"))
        # the form allows "0"; treat it like a missing value
        trip_duration = _to_int(duration, config.DEFAULT_TRIP_NIGHTS) or config.DEFAULT_TRIP_NIGHTS
        return cls(
            adults=max(_to_int(data.get("adults"), 1), 0),
            kids=max(_to_int(data.get("kids"), 0), 0),
            infants=max(_to_int(data.get("infants"), 0), 0),
            trip_duration=trip_duration,
            emirates=[str(e) for e in emirates],
            journey_month=data.get("journeyMonth", data.get("journey_month", "")) or "",
            budget=data.get("budget", "") or "",
            departure_country=data.get("departureCountry", data.get("departure_country", "")) or "",
            contact=ContactInfo(
                full_name=data.get("fullName", data.get("full_name", "")) or "",
                email=data.get("email", "") or "",
                phone=data.get("phone", "") or "",
                country_code=data.get("countryCode", data.get("country_code", "")) or "",
            ),
        )

    def to_submission_row(self) -> dict:
        """Row for the travel_submissions table."""
        return {
            "full_name": self.contact.full_name,
            "phone": self.contact.phone,
            "email": self.contact.email,
            "trip_duration": self.trip_duration,
            "journey_month": self.journey_month,
            "departure_country": self.departure_country,
            "emirates": list(self.emirates),
            "budget": self.budget,
            "adults": self.adults,
            "kids": self.kids,
            "infants": self.infants,
            "submission_status": "pending",
        }
