"""
Shared builders for the test modules: resource rows, preferences and a
resource tool that never touches the database.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Optional
from unittest.mock import MagicMock

from wahotrip.modules.tool_usage.resource_tool import ResourceTool, filter_attractions
from wahotrip.schemas.preferences import ContactInfo, TravelPreferences
from wahotrip.schemas.resources import AttractionRow, HotelRow, ResourceBundle, TransportRow


def attraction(
    name: str,
    emirate: str = "Dubai",
    price: Optional[float] = 100.0,
    duration: str = "2 hours",
    **kwargs,
) -> AttractionRow:
    return AttractionRow(
        id=kwargs.pop("id", name.lower().replace(" ", "-")),
        name=name,
        emirate=emirate,
        price=price,
        duration=duration,
        description=kwargs.pop("description", f"{name} description"),
        image_url=kwargs.pop("image_url", f"https://img.example/{name.replace(' ', '_')}.jpg"),
        category=kwargs.pop("category", "Sightseeing"),
        **kwargs,
    )


def hotel(name: str, cost: Optional[float] = 500.0, stars: int = 5) -> HotelRow:
    return HotelRow(id=name.lower(), name=name, stars=stars, cost_per_night=cost, description=f"{name} stay")


def transport(label: str, cost: Optional[float] = 200.0) -> TransportRow:
    return TransportRow(id=label.lower(), label=label, cost_per_day=cost, type="car")


def dubai_attractions(count: int = 20) -> list[AttractionRow]:
    return [attraction(f"Dubai Spot {i}", price=50.0 + i * 10) for i in range(count)]


def bundle(
    attractions: Optional[list[AttractionRow]] = None,
    hotels: Optional[list[HotelRow]] = None,
    transports: Optional[list[TransportRow]] = None,
) -> ResourceBundle:
    return ResourceBundle(
        attractions=dubai_attractions() if attractions is None else attractions,
        hotels=[hotel("Atlantis The Palm"), hotel("Jumeirah Beach Hotel", 400.0)] if hotels is None else hotels,
        transport=[transport("Private Car"), transport("Metro Pass", 30.0)] if transports is None else transports,
    )


def prefs(**overrides) -> TravelPreferences:
    values = dict(
        adults=2,
        kids=0,
        infants=0,
        trip_duration=5,
        emirates=["dubai"],
        journey_month="december",
        budget="3,000 - 5,000",
        departure_country="India",
        contact=ContactInfo(full_name="Sam Lee", email="sam@example.com", phone="5550100", country_code="+91"),
    )
    values.update(overrides)
    return TravelPreferences(**values)


class FakeResourceTool(ResourceTool):
    """Serves a fixed bundle; records the emirates each fetch asked for."""

    def __init__(self, resources: Optional[ResourceBundle] = None):
        super().__init__(conn_factory=MagicMock())
        self.resources = resources if resources is not None else bundle()
        self.requested: list = []

    def fetch_attractions(self, emirates=None):
        self.requested.append(emirates)
        return filter_attractions(self.resources.attractions, emirates)

    def fetch_hotels(self):
        return list(self.resources.hotels)

    def fetch_transport(self):
        return list(self.resources.transport)


def mock_conn_factory(conn: Optional[MagicMock] = None):
    """get_conn replacement yielding one MagicMock connection."""
    conn = conn or MagicMock()

    @contextmanager
    def factory():
        yield conn

    factory.conn = conn
    return factory
