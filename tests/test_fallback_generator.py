"""
Local package synthesis: always three packages, one day per night,
deterministic for a seed.
"""
import unittest

from wahotrip import config
from wahotrip.modules.planning.fallback_generator import FallbackGenerator, price_ceiling
from wahotrip.schemas.itinerary import GenerationMethod
from wahotrip.schemas.resources import ResourceBundle

from tests.helpers import attraction, bundle, dubai_attractions, prefs


class FallbackGeneratorTests(unittest.TestCase):
    def setUp(self):
        self.resources = bundle(
            attractions=dubai_attractions() + [
                attraction("Sharjah Fort", emirate="Sharjah", price=20.0),
                attraction("Ajman Corniche", emirate="Ajman", price=10.0),
            ],
        )

    def test_couple_five_nights_in_dubai(self):
        packages = FallbackGenerator(self.resources, seed=11).generate(prefs())
        self.assertEqual(len(packages), 3)
        self.assertEqual([p.id for p in packages], ["random_package_1", "random_package_2", "random_package_3"])
        self.assertEqual(
            [p.title for p in packages],
            ["Romantic Getaway", "Adventure & Excitement", "Luxury & Relaxation"],
        )
        for package in packages:
            self.assertEqual(package.generation_method, GenerationMethod.RANDOM)
            self.assertEqual(len(package.days), 5)
            for day in package.days:
                self.assertTrue(day.attractions)
                self.assertTrue(all(a.emirate == "Dubai" for a in day.attractions))

    def test_two_attractions_per_day_rotating_through_the_pool(self):
        days = FallbackGenerator(self.resources, seed=11).generate(prefs())[0].days
        self.assertEqual([a.name for a in days[0].attractions], ["Dubai Spot 0", "Dubai Spot 1"])
        self.assertEqual([a.name for a in days[1].attractions], ["Dubai Spot 2", "Dubai Spot 3"])
        self.assertEqual(days[0].attractions[0].time_slot, "9:00 AM - 12:00 PM")
        self.assertEqual(days[0].attractions[1].time_slot, "2:00 PM - 5:00 PM")

    def test_small_pool_gives_one_attraction_per_day(self):
        resources = bundle(attractions=dubai_attractions(3))
        days = FallbackGenerator(resources, seed=1).generate(prefs())[0].days
        self.assertEqual([len(d.attractions) for d in days], [1] * 5)
        self.assertEqual(
            [d.attractions[0].name for d in days],
            ["Dubai Spot 0", "Dubai Spot 1", "Dubai Spot 2", "Dubai Spot 0", "Dubai Spot 1"],
        )

    def test_hotel_and_transport_rotation(self):
        days = FallbackGenerator(self.resources, seed=11).generate(prefs())[0].days
        self.assertEqual(
            [d.hotel.name for d in days],
            ["Atlantis The Palm"] * 3 + ["Jumeirah Beach Hotel"] * 2,
        )
        self.assertEqual(
            [d.transport.label for d in days],
            ["Private Car", "Metro Pass", "Private Car", "Metro Pass", "Private Car"],
        )

    def test_totals(self):
        packages = FallbackGenerator(self.resources, seed=11).generate(prefs())
        # attractions 50..140, hotels 3x500 + 2x400, transport 3x200 + 2x30
        for package in packages:
            self.assertEqual(package.total_cost, 950.0 + 2300.0 + 660.0)
            self.assertEqual(package.total_cost, sum(d.cost.total for d in package.days))

    def test_day_text_is_indexed_by_day(self):
        day = FallbackGenerator(self.resources, seed=11).generate(prefs())[0].days[0]
        self.assertEqual(day.title, "Day 1: Discovering Dubai Spot 0")
        self.assertTrue(day.description.endswith("Ideal for creating romantic memories together."))
        self.assertEqual(set(day.meals), {"breakfast", "lunch", "dinner"})
        self.assertIn("Dubai Spot 0", day.expert_tip)

    def test_traveler_type_picks_the_theme_set(self):
        family = FallbackGenerator(self.resources, seed=1).generate(prefs(kids=1))
        self.assertEqual(family[0].title, "Family Fun Adventure")
        solo = FallbackGenerator(self.resources, seed=1).generate(prefs(adults=1))
        self.assertEqual(solo[0].title, "Solo Adventure Explorer")
        group = FallbackGenerator(self.resources, seed=1).generate(prefs(adults=4))
        self.assertEqual(group[2].title, "Entertainment & Nightlife")

    def test_one_day_per_night(self):
        packages = FallbackGenerator(self.resources, seed=1).generate(prefs(trip_duration=12))
        self.assertTrue(all(len(p.days) == 12 for p in packages))


class AttractionPoolTests(unittest.TestCase):
    def test_pool_is_limited_to_the_selected_emirates(self):
        resources = bundle(attractions=dubai_attractions(4) + [attraction("Sharjah Fort", emirate="Sharjah")])
        pool = FallbackGenerator(resources, seed=1).attraction_pool(prefs(emirates=["sharjah"]))
        self.assertEqual([r.name for r in pool], ["Sharjah Fort"])

    def test_all_emirates_keeps_every_row(self):
        resources = bundle(attractions=dubai_attractions(4) + [attraction("Sharjah Fort", emirate="Sharjah")])
        pool = FallbackGenerator(resources, seed=1).attraction_pool(prefs(emirates=["all"]))
        self.assertEqual(len(pool), 5)

    def test_budget_band_caps_attraction_prices(self):
        resources = bundle(attractions=dubai_attractions())
        pool = FallbackGenerator(resources, seed=1).attraction_pool(prefs(budget="budget"))
        self.assertEqual(len(pool), 6)
        self.assertTrue(all(r.price <= 100.0 for r in pool))

    def test_budget_filter_that_removes_everything_is_ignored(self):
        resources = bundle(attractions=[attraction("Gold Tour", price=900.0), attraction("Yacht", price=1500.0)])
        pool = FallbackGenerator(resources, seed=1).attraction_pool(prefs(budget="budget"))
        self.assertEqual(len(pool), 2)

    def test_price_ceilings(self):
        self.assertEqual(price_ceiling("budget"), 100.0)
        self.assertEqual(price_ceiling(" Mid-Range "), 300.0)
        self.assertEqual(price_ceiling("3,000 - 5,000"), 1000.0)


class EmptyStoreTests(unittest.TestCase):
    def test_embedded_table_is_used_without_rows(self):
        packages = FallbackGenerator(ResourceBundle(), seed=2024).generate(prefs())
        self.assertEqual(len(packages), 3)
        for package in packages:
            self.assertEqual(len(package.days), 5)
            for day in package.days:
                self.assertTrue(all(a.emirate == "Dubai" for a in day.attractions))
                self.assertEqual(day.hotel.name, config.DEFAULT_HOTEL_NAME)
                self.assertEqual(day.cost.hotel, config.DEFAULT_HOTEL_COST)
                self.assertEqual(day.cost.transport, config.DEFAULT_TRANSPORT_COST)

    def test_same_seed_same_packages(self):
        first = FallbackGenerator(ResourceBundle(), seed=99).generate(prefs(emirates=["all"]))
        second = FallbackGenerator(ResourceBundle(), seed=99).generate(prefs(emirates=["all"]))
        self.assertEqual([p.to_dict() for p in first], [p.to_dict() for p in second])

    def test_seed_is_reported(self):
        self.assertEqual(FallbackGenerator(ResourceBundle(), seed=5).seed, 5)


if __name__ == "__main__":
    unittest.main()
