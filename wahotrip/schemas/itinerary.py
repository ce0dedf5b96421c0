"""
schemas/itinerary.py
--------------------
Dataclass definitions for the generated itinerary structures.

Every package (AI-backed, fallback or manual) is normalised into these types
once, right after parsing / generation; downstream stages never inspect raw dicts.

All amounts in AED.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from wahotrip import config


class GenerationMethod(str, Enum):
    AI = "AI"
    RANDOM = "Random"
    MANUAL = "Manual"


def _opt_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class AttractionEntry:
    """
    Denormalised snapshot of an attraction row placed in a day.

    price is None when the source gave a non-numeric value; the cost
    calculator treats that as zero.
    """
    name: str = ""
    emirate: str = ""
    price: Optional[float] = config.DEFAULT_ATTRACTION_PRICE
    duration: str = config.DEFAULT_ATTRACTION_DURATION
    description: str = ""
    image: str = config.PLACEHOLDER_IMAGE_URL
    category: str = ""
    # ── entry-specific ────────────────────────────────────────────────────
    time_slot: str = ""     # e.g. "9:00 AM - 12:00 PM"
    tip: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "emirate": self.emirate,
            "price": self.price,
            "duration": self.duration,
            "description": self.description,
            "image": self.image,
            "category": self.category,
            "timing": self.time_slot,
            "tip": self.tip,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AttractionEntry":
        return cls(
            name=data.get("name", ""),
            emirate=data.get("emirate", ""),
            price=_opt_float(data.get("price")),
            duration=data.get("duration") or config.DEFAULT_ATTRACTION_DURATION,
            description=data.get("description", ""),
            image=data.get("image") or config.PLACEHOLDER_IMAGE_URL,
            category=data.get("category", ""),
            time_slot=data.get("timing", data.get("time_slot", "")),
            tip=data.get("tip", ""),
        )


@dataclass
class HotelChoice:
    """Hotel reference for a day. cost None means: resolve by name at costing time."""
    name: str = config.DEFAULT_HOTEL_NAME
    cost: Optional[float] = None
    stars: int = 0
    description: str = ""
    image: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "cost": self.cost,
            "stars": self.stars,
            "description": self.description,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["HotelChoice"]:
        if data is None:
            return None
        if isinstance(data, str):
            return cls(name=data)
        return cls(
            name=data.get("name", config.DEFAULT_HOTEL_NAME),
            cost=_opt_float(data.get("cost")),
            stars=int(data.get("stars") or 0),
            description=data.get("description", ""),
            image=data.get("image", ""),
        )


@dataclass
class TransportChoice:
    """Transport reference for a day. cost None means: resolve by label at costing time."""
    label: str = config.DEFAULT_TRANSPORT_LABEL
    cost: Optional[float] = None
    type: str = ""
    description: str = ""
    image: str = ""

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "cost": self.cost,
            "type": self.type,
            "description": self.description,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["TransportChoice"]:
        if data is None:
            return None
        if isinstance(data, str):
            return cls(label=data)
        return cls(
            label=data.get("label", config.DEFAULT_TRANSPORT_LABEL),
            cost=_opt_float(data.get("cost")),
            type=data.get("type", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
        )


@dataclass
class CostBreakdown:
    attractions: float = 0.0
    hotel: float = 0.0
    transport: float = 0.0

    @property
    def total(self) -> float:
        return self.attractions + self.hotel + self.transport

    def __add__(self, other: "CostBreakdown") -> "CostBreakdown":
        return CostBreakdown(
            attractions=self.attractions + other.attractions,
            hotel=self.hotel + other.hotel,
            transport=self.transport + other.transport,
        )

    def to_dict(self) -> dict:
        return {
            "attractions": self.attractions,
            "hotel": self.hotel,
            "transport": self.transport,
            "total": self.total,
        }


@dataclass
class DayPlan:
    """One day's schedule. hotel / transport may be None; costing still runs."""
    day: int = 1
    title: str = ""
    description: str = ""
    attractions: list[AttractionEntry] = field(default_factory=list)
    hotel: Optional[HotelChoice] = None
    transport: Optional[TransportChoice] = None
    cost: CostBreakdown = field(default_factory=CostBreakdown)
    meals: dict[str, str] = field(default_factory=dict)   # breakfast / lunch / dinner
    expert_tip: str = ""
    daily_budget: float = 0.0          # planned spend carried from weekly highlights / templates

    @property
    def images(self) -> list[str]:
        return [a.image for a in self.attractions if a.image]

    @property
    def image(self) -> str:
        """Day cover image: first attraction image, else the placeholder."""
        images = self.images
        return images[0] if images else config.PLACEHOLDER_IMAGE_URL

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "title": self.title,
            "description": self.description,
            "attractions": [a.to_dict() for a in self.attractions],
            "hotel": self.hotel.to_dict() if self.hotel else None,
            "transport": self.transport.to_dict() if self.transport else None,
            "cost": self.cost.to_dict(),
            "meals": dict(self.meals),
            "expertTip": self.expert_tip,
            "dailyBudget": self.daily_budget,
            "image": self.image,
            "images": self.images,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DayPlan":
        cost = data.get("cost") or {}
        return cls(
            day=int(data.get("day", 1)),
            title=data.get("title", ""),
            description=data.get("description", ""),
            attractions=[AttractionEntry.from_dict(a) for a in data.get("attractions") or []],
            hotel=HotelChoice.from_dict(data.get("hotel")),
            transport=TransportChoice.from_dict(data.get("transport")),
            cost=CostBreakdown(
                attractions=float(cost.get("attractions", 0.0)),
                hotel=float(cost.get("hotel", 0.0)),
                transport=float(cost.get("transport", 0.0)),
            ),
            meals=dict(data.get("meals") or {}),
            expert_tip=data.get("expertTip", ""),
            daily_budget=float(data.get("dailyBudget") or 0.0),
        )


@dataclass
class ItineraryPackage:
    """
    A complete proposed multi-day itinerary.
    Exactly one package per session is held as "selected".
    """
    id: str = ""
    title: str = ""
    description: str = ""
    theme: str = ""
    generation_method: GenerationMethod = GenerationMethod.AI
    total_cost: float = 0.0
    days: list[DayPlan] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)
    personal_note: str = ""

    def get_day(self, day: int) -> Optional[DayPlan]:
        for plan in self.days:
            if plan.day == day:
                return plan
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "theme": self.theme,
            "generationMethod": self.generation_method.value,
            "totalCost": self.total_cost,
            "itinerary": [d.to_dict() for d in self.days],
            "highlights": list(self.highlights),
            "personalNote": self.personal_note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ItineraryPackage":
        try:
            method = GenerationMethod(data.get("generationMethod", GenerationMethod.AI.value))
        except ValueError:
            method = GenerationMethod.AI
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            theme=data.get("theme", ""),
            generation_method=method,
            total_cost=float(data.get("totalCost", 0.0)),
            days=[DayPlan.from_dict(d) for d in data.get("itinerary") or []],
            highlights=list(data.get("highlights") or []),
            personal_note=data.get("personalNote", ""),
        )
