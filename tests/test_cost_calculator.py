"""
Per-day and per-package costs, with name lookups and defaults.
"""
import unittest

from wahotrip import config
from wahotrip.modules.planning.cost_calculator import CostCalculator, price_range
from wahotrip.schemas.itinerary import (
    AttractionEntry, DayPlan, HotelChoice, ItineraryPackage, TransportChoice,
)

from tests.helpers import bundle, hotel, transport


class CostCalculatorTests(unittest.TestCase):
    def setUp(self):
        self.calc = CostCalculator(bundle(attractions=[]))

    def test_reference_cost_wins_over_lookup(self):
        self.assertEqual(self.calc.hotel_cost(HotelChoice(name="Atlantis The Palm", cost=650.0)), 650.0)
        self.assertEqual(self.calc.transport_cost(TransportChoice(label="Metro Pass", cost=45.0)), 45.0)

    def test_lookup_by_name(self):
        self.assertEqual(self.calc.hotel_cost(HotelChoice(name="Jumeirah Beach Hotel")), 400.0)
        self.assertEqual(self.calc.transport_cost(TransportChoice(label="Metro Pass")), 30.0)

    def test_defaults_for_unknown_references(self):
        self.assertEqual(self.calc.hotel_cost(HotelChoice(name="Unlisted Inn")), config.DEFAULT_HOTEL_COST)
        self.assertEqual(self.calc.transport_cost(TransportChoice(label="Camel")), config.DEFAULT_TRANSPORT_COST)
        self.assertEqual(config.DEFAULT_HOTEL_COST, 300.0)
        self.assertEqual(config.DEFAULT_TRANSPORT_COST, 150.0)

    def test_rows_without_a_rate_use_the_defaults(self):
        calc = CostCalculator(bundle(
            attractions=[],
            hotels=[hotel("Rate On Request", cost=None)],
            transports=[transport("Free Shuttle", cost=0.0)],
        ))
        self.assertEqual(calc.hotel_cost(HotelChoice(name="Rate On Request")), config.DEFAULT_HOTEL_COST)
        self.assertEqual(calc.transport_cost(TransportChoice(label="Free Shuttle")), config.DEFAULT_TRANSPORT_COST)

    def test_missing_references_cost_nothing(self):
        self.assertEqual(self.calc.hotel_cost(None), 0.0)
        self.assertEqual(self.calc.transport_cost(None), 0.0)

    def test_non_numeric_attraction_prices_are_ignored(self):
        day = DayPlan(
            attractions=[
                AttractionEntry(name="A", price=100.0),
                AttractionEntry(name="B", price=None),
                AttractionEntry(name="C", price=float("nan")),
                AttractionEntry(name="D", price=0.0),
            ],
        )
        cost = self.calc.day_cost(day)
        self.assertEqual(cost.attractions, 100.0)
        self.assertEqual(cost.hotel, 0.0)
        self.assertEqual(cost.total, 100.0)

    def test_apply_sets_day_breakdowns_and_package_total(self):
        package = ItineraryPackage(days=[
            DayPlan(day=1, attractions=[AttractionEntry(name="A", price=120.0)],
                    hotel=HotelChoice(name="Atlantis The Palm"), transport=TransportChoice(label="Private Car")),
            DayPlan(day=2, hotel=HotelChoice(name="Unlisted Inn"), transport=None),
        ])
        self.calc.apply(package)
        self.assertEqual(package.days[0].cost.total, 820.0)
        self.assertEqual(package.days[1].cost.total, 300.0)
        self.assertEqual(package.total_cost, 1120.0)
        self.assertEqual(self.calc.package_cost(package).hotel, 800.0)

    def test_price_range(self):
        self.assertEqual(price_range(1000.0), (800, 1300))
        self.assertEqual(price_range(0.0), (0, 0))


if __name__ == "__main__":
    unittest.main()
