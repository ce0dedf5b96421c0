"""
Resource fetching: per-table degradation, row mapping and the catalog filter.
"""
import unittest
from decimal import Decimal
from unittest.mock import patch

import psycopg2

from wahotrip.modules.tool_usage.resource_tool import (
    ResourceTool,
    emirate_names,
    filter_attractions,
)

from tests.helpers import attraction, mock_conn_factory

MODULE = "wahotrip.modules.tool_usage.resource_tool"


def _failing_factory():
    raise psycopg2.OperationalError("could not connect to server")


class ResourceToolTests(unittest.TestCase):
    def setUp(self):
        self.factory = mock_conn_factory()
        self.tool = ResourceTool(self.factory)

    def test_unreachable_store_gives_empty_tables(self):
        tool = ResourceTool(_failing_factory)
        resources = tool.fetch_all(["dubai"])
        self.assertTrue(resources.is_empty)

    @patch(f"{MODULE}.attraction_repo")
    def test_attraction_rows_are_mapped(self, repo):
        repo.list_attractions.return_value = [{
            "id": 12, "attraction": "Burj Khalifa", "emirates": "Dubai", "price": Decimal("169.00"),
            "duration": "2 hours", "image_url": None, "is_active": True,
        }]
        rows = self.tool.fetch_attractions(["dubai", "abu-dhabi"])
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].id, "12")
        self.assertEqual(rows[0].name, "Burj Khalifa")
        self.assertEqual(rows[0].price, 169.0)
        self.assertEqual(rows[0].image_url, "")
        repo.list_attractions.assert_called_once_with(
            self.factory.conn, emirates=["Dubai", "Abu Dhabi"], active_only=True,
        )

    @patch(f"{MODULE}.attraction_repo")
    def test_all_emirates_means_no_filter(self, repo):
        repo.list_attractions.return_value = []
        self.tool.fetch_attractions(["all"])
        self.assertIsNone(repo.list_attractions.call_args.kwargs["emirates"])

    @patch(f"{MODULE}.transport_repo")
    def test_inactive_transport_is_dropped(self, repo):
        repo.list_transport.return_value = [
            {"id": 1, "label": "Private Car", "cost_per_day": 200, "is_active": True},
            {"id": 2, "label": "Helicopter", "cost_per_day": 5000, "is_active": False},
            {"id": 3, "label": "Metro Pass", "cost_per_day": 30},
        ]
        labels = [t.label for t in self.tool.fetch_transport()]
        self.assertEqual(labels, ["Private Car", "Metro Pass"])

    @patch(f"{MODULE}.transport_repo")
    @patch(f"{MODULE}.hotel_repo")
    @patch(f"{MODULE}.attraction_repo")
    def test_one_failing_table_does_not_empty_the_others(self, attractions, hotels, transport):
        attractions.list_attractions.return_value = [{"id": 1, "attraction": "Dubai Frame", "emirates": "Dubai"}]
        hotels.list_hotels.side_effect = psycopg2.OperationalError("timeout")
        transport.list_transport.return_value = [{"id": 1, "label": "Taxi", "cost_per_day": 90}]

        resources = self.tool.fetch_all(["dubai"])
        self.assertEqual([a.name for a in resources.attractions], ["Dubai Frame"])
        self.assertEqual(resources.hotels, [])
        self.assertEqual([t.label for t in resources.transport], ["Taxi"])

    @patch(f"{MODULE}.hotel_repo")
    def test_hotel_cost_falls_back_to_the_range_minimum(self, repo):
        repo.list_hotels.return_value = [{"id": 1, "name": "Harbour Inn", "stars": 4, "price_range_min": 350}]
        hotel = self.tool.fetch_hotels()[0]
        self.assertEqual(hotel.nightly_cost, 350.0)


class FilterAttractionsTests(unittest.TestCase):
    def setUp(self):
        self.rows = [
            attraction("Burj Khalifa"),
            attraction("Louvre Abu Dhabi", emirate="Abu Dhabi"),
            attraction("Sharjah Fort", emirate="Sharjah"),
        ]

    def test_emirate_slugs_match_stored_names(self):
        kept = filter_attractions(self.rows, ["abu-dhabi"])
        self.assertEqual([r.name for r in kept], ["Louvre Abu Dhabi"])

    def test_all_keeps_everything(self):
        self.assertEqual(len(filter_attractions(self.rows, ["all"])), 3)
        self.assertEqual(len(filter_attractions(self.rows, None)), 3)

    def test_search_is_case_insensitive(self):
        kept = filter_attractions(self.rows, ["all"], search="BURJ")
        self.assertEqual([r.name for r in kept], ["Burj Khalifa"])

    def test_emirate_and_search_combine(self):
        self.assertEqual(filter_attractions(self.rows, ["sharjah"], search="burj"), [])


class EmirateNameTests(unittest.TestCase):
    def test_names(self):
        self.assertEqual(emirate_names(["dubai", "ras-al-khaimah"]), ["Dubai", "Ras Al Khaimah"])
        self.assertEqual(emirate_names(["all"]), [])
        self.assertEqual(emirate_names(None), [])


if __name__ == "__main__":
    unittest.main()
