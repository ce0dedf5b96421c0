"""
schemas/resources.py
--------------------
Resource rows fetched from the hosted store: attractions, hotels, transport.

Column names follow the database tables:
  attractions(id, attraction, emirates, price, child_price, infant_price, duration,
              description, image_url, category, rating, is_active)
  hotels(id, name, stars, price_range_min, price_range_max, category, star_category,
         location, image_url, description)
  transport(id, label, cost_per_day, type, description, image_url, is_active)

Rows are immutable for the duration of one generation cycle.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

_COST_RANGE_RE  = re.compile(r"(\d+(?:\.\d+)?)\s*[–-]\s*(\d+(?:\.\d+)?)")
_COST_SINGLE_RE = re.compile(r"(\d+(?:\.\d+)?)")


def _num(value: Any) -> Optional[float]:
    """Coerce a numeric column; None / malformed values become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_cost_text(value: Any) -> Optional[float]:
    """
    Nightly cost from a number or a display string.

    "147–294 AED" → 220.5 (range average), "1,000 AED" → 1000.0, "on request" → None.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return None
    text = value.replace(",", "")
    match = _COST_RANGE_RE.search(text)
    if match:
        return (float(match.group(1)) + float(match.group(2))) / 2
    match = _COST_SINGLE_RE.search(text)
    return float(match.group(1)) if match else None


@dataclass(frozen=True)
class AttractionRow:
    id: str = ""
    name: str = ""
    emirate: str = ""
    price: Optional[float] = None       # AED, None = unknown / free entry not recorded
    duration: str = ""                  # free text, e.g. "2-3 hours"
    description: str = ""
    image_url: str = ""
    category: str = ""
    rating: Optional[float] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict) -> "AttractionRow":
        # legacy rows carry the display name in `name` instead of `attraction`
        return cls(
            id=str(row.get("id") or ""),
            name=row.get("attraction") or row.get("name") or "",
            emirate=row.get("emirates") or row.get("emirate") or "",
            price=_num(row.get("price")),
            duration=row.get("duration") or "",
            description=row.get("description") or "",
            image_url=row.get("image_url") or "",
            category=row.get("category") or "",
            rating=_num(row.get("rating")),
            is_active=row.get("is_active", True) is not False,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "emirate": self.emirate,
            "price": self.price,
            "duration": self.duration,
            "description": self.description,
            "image_url": self.image_url,
            "category": self.category,
            "rating": self.rating,
        }


@dataclass(frozen=True)
class HotelRow:
    id: str = ""
    name: str = ""
    stars: int = 0
    cost_per_night: Optional[float] = None
    price_range_min: Optional[float] = None
    price_range_max: Optional[float] = None
    category: str = ""
    location: str = ""
    description: str = ""
    image_url: str = ""

    @property
    def nightly_cost(self) -> Optional[float]:
        """Best known nightly rate: explicit rate, else bottom of the published range."""
        if self.cost_per_night is not None:
            return self.cost_per_night
        return self.price_range_min

    @classmethod
    def from_row(cls, row: dict) -> "HotelRow":
        stars = _num(row.get("stars"))
        return cls(
            id=str(row.get("id") or ""),
            name=row.get("name") or "",
            stars=int(stars) if stars is not None else 0,
            cost_per_night=parse_cost_text(row.get("cost_per_night", row.get("costPerNight"))),
            price_range_min=_num(row.get("price_range_min")),
            price_range_max=_num(row.get("price_range_max")),
            category=row.get("category") or row.get("star_category") or "",
            location=row.get("location") or "",
            description=row.get("description") or "",
            image_url=row.get("image_url") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "stars": self.stars,
            "cost_per_night": self.nightly_cost,
            "price_range_min": self.price_range_min,
            "price_range_max": self.price_range_max,
            "category": self.category,
            "location": self.location,
            "description": self.description,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class TransportRow:
    id: str = ""
    label: str = ""
    cost_per_day: Optional[float] = None
    type: str = ""
    description: str = ""
    image_url: str = ""
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict) -> "TransportRow":
        return cls(
            id=str(row.get("id") or ""),
            label=row.get("label") or row.get("name") or "",
            cost_per_day=_num(row.get("cost_per_day")),
            type=row.get("type") or "",
            description=row.get("description") or "",
            image_url=row.get("image_url") or "",
            is_active=row.get("is_active", True) is not False,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "cost_per_day": self.cost_per_day,
            "type": self.type,
            "description": self.description,
            "image_url": self.image_url,
        }


@dataclass
class ResourceBundle:
    """The three row sets fetched for one generation cycle."""
    attractions: list[AttractionRow] = field(default_factory=list)
    hotels: list[HotelRow] = field(default_factory=list)
    transport: list[TransportRow] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.attractions or self.hotels or self.transport)

    def find_hotel(self, name: str) -> Optional[HotelRow]:
        for hotel in self.hotels:
            if hotel.name == name:
                return hotel
        return None

    def find_transport(self, label: str) -> Optional[TransportRow]:
        for option in self.transport:
            if option.label == label:
                return option
        return None

    def find_attraction(self, name: str) -> Optional[AttractionRow]:
        for row in self.attractions:
            if row.name == name:
                return row
        return None
