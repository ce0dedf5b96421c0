"""
Admin dashboard figures from travel_submissions rows.
"""
import unittest
from datetime import datetime, timedelta, timezone

from wahotrip.modules.reporting.analytics import (
    budget_to_revenue,
    compute_analytics,
    monthly_breakdown,
    within_window,
)

NOW = datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)


def _row(days_ago, budget="3,000 - 5,000", emirates=("dubai",), country="India", status="pending"):
    return {
        "id": f"sub-{days_ago}-{country}",
        "created_at": NOW - timedelta(days=days_ago),
        "budget": budget,
        "emirates": list(emirates),
        "departure_country": country,
        "submission_status": status,
    }


class AnalyticsTests(unittest.TestCase):
    def setUp(self):
        self.rows = [
            _row(1, emirates=("dubai", "abu-dhabi"), status="completed"),
            _row(5, budget="10,000 - 20,000", emirates=("all",), country="Germany"),
            _row(40, budget="20,000+", emirates=("sharjah",), country="France"),
            _row(10, budget="", emirates=("abu-dhabi",)),
        ]

    def test_revenue_bands(self):
        self.assertEqual(budget_to_revenue("1,000 - 3,000"), 2000.0)
        self.assertEqual(budget_to_revenue("20,000+"), 25000.0)
        self.assertEqual(budget_to_revenue("whatever"), 0.0)
        self.assertEqual(budget_to_revenue(None), 0.0)

    def test_window_filters_by_created_at(self):
        kept = within_window(self.rows, 30, NOW)
        self.assertEqual(len(kept), 3)
        self.assertEqual(len(within_window(self.rows, 60, NOW)), 4)

    def test_string_and_naive_timestamps(self):
        rows = [
            {"created_at": "2025-03-30T08:00:00Z"},
            {"created_at": datetime(2025, 3, 29, 8, 0)},
            {"created_at": "not a date"},
            {},
        ]
        self.assertEqual(len(within_window(rows, 7, NOW)), 2)

    def test_totals(self):
        data = compute_analytics(self.rows, days=30, now=NOW)
        self.assertEqual(data["days"], 30)
        self.assertEqual(data["totalSubmissions"], 3)
        self.assertEqual(data["totalRevenue"], 4000.0 + 15000.0)
        self.assertAlmostEqual(data["averageBookingValue"], 19000.0 / 3)
        self.assertAlmostEqual(data["completionRate"], 100 / 3)

    def test_emirates_distribution_skips_all(self):
        data = compute_analytics(self.rows, days=30, now=NOW)
        by_name = {e["emirate"]: e for e in data["emiratesDistribution"]}
        self.assertEqual(set(by_name), {"Dubai", "Abu dhabi"})
        self.assertEqual(by_name["Abu dhabi"]["count"], 2)
        self.assertAlmostEqual(by_name["Abu dhabi"]["percentage"], 200 / 3)
        self.assertEqual(data["popularEmirates"][0], {"name": "Abu dhabi Attractions", "bookings": 2})

    def test_budget_and_country_distribution(self):
        data = compute_analytics(self.rows, days=30, now=NOW)
        self.assertEqual(
            sorted((b["range"], b["count"], b["value"]) for b in data["budgetDistribution"]),
            [("10,000 - 20,000", 1, 15000.0), ("3,000 - 5,000", 1, 4000.0)],
        )
        self.assertEqual(data["countryDistribution"][0], {"country": "India", "count": 2})

    def test_monthly_breakdown(self):
        months = monthly_breakdown([
            _row(1), _row(2, budget="1,000 - 3,000"), _row(35),
        ])
        self.assertEqual(months[0], {"month": "Mar 2025", "submissions": 2, "revenue": 6000.0})
        self.assertEqual(months[1]["month"], "Feb 2025")

    def test_no_submissions(self):
        data = compute_analytics([], days=30, now=NOW)
        self.assertEqual(data["totalSubmissions"], 0)
        self.assertEqual(data["averageBookingValue"], 0.0)
        self.assertEqual(data["completionRate"], 0.0)
        self.assertEqual(data["emiratesDistribution"], [])
        self.assertEqual(data["recentSubmissions"], [])


if __name__ == "__main__":
    unittest.main()
