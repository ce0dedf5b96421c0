"""
modules/reporting/analytics.py
------------------------------
Admin dashboard figures computed from travel_submissions rows.

Revenue is an estimate: each submission contributes the midpoint of its
budget band (BUDGET_REVENUE), unknown bands contribute 0.
"""

from __future__ import annotations

from collections import Counter, OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Optional

from wahotrip.schemas.preferences import ALL_EMIRATES

BUDGET_REVENUE: dict[str, float] = {
    "1,000 - 3,000":   2000.0,
    "3,000 - 5,000":   4000.0,
    "5,000 - 10,000":  7500.0,
    "10,000 - 20,000": 15000.0,
    "20,000+":         25000.0,
}

TOP_COUNTRIES = 10
POPULAR_EMIRATES = 5


def budget_to_revenue(budget: Optional[str]) -> float:
    return BUDGET_REVENUE.get(budget or "", 0.0)


def _created_at(row: dict) -> Optional[datetime]:
    value = row.get("created_at")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _emirate_label(slug: str) -> str:
    # "abu-dhabi" -> "Abu dhabi" mirrors the dashboard's first-hyphen formatting
    return (slug[:1].upper() + slug[1:]).replace("-", " ", 1)


def within_window(rows: list[dict], days: int, now: Optional[datetime] = None) -> list[dict]:
    now = now or datetime.now(timezone.utc)
    threshold = now - timedelta(days=days)
    kept = []
    for row in rows:
        created = _created_at(row)
        if created is not None and created >= threshold:
            kept.append(row)
    return kept


def monthly_breakdown(rows: list[dict]) -> list[dict]:
    """Submissions and revenue per calendar month ("Jan 2025"), in first-seen order."""
    months: "OrderedDict[str, dict]" = OrderedDict()
    for row in rows:
        created = _created_at(row)
        if created is None:
            continue
        key = created.strftime("%b %Y")
        bucket = months.setdefault(key, {"month": key, "submissions": 0, "revenue": 0.0})
        bucket["submissions"] += 1
        bucket["revenue"] += budget_to_revenue(row.get("budget"))
    return list(months.values())


def compute_analytics(submissions: list[dict], days: int = 30, now: Optional[datetime] = None) -> dict:
    rows = within_window(submissions, days, now)
    total = len(rows)

    revenue = sum(budget_to_revenue(r.get("budget")) for r in rows)
    completed = sum(1 for r in rows if r.get("submission_status") == "completed")

    emirate_counts: Counter = Counter()
    for row in rows:
        for emirate in row.get("emirates") or []:
            if emirate != ALL_EMIRATES:
                emirate_counts[emirate] += 1
    emirates_distribution = [
        {"emirate": _emirate_label(e), "count": c, "percentage": c / total * 100}
        for e, c in emirate_counts.items()
    ]

    budget_counts = Counter(r["budget"] for r in rows if r.get("budget"))
    budget_distribution = [
        {"range": b, "count": c, "value": budget_to_revenue(b)}
        for b, c in budget_counts.items()
    ]

    country_counts = Counter(r["departure_country"] for r in rows if r.get("departure_country"))
    country_distribution = [
        {"country": country, "count": count}
        for country, count in country_counts.most_common(TOP_COUNTRIES)
    ]

    popular = sorted(emirates_distribution, key=lambda item: item["count"], reverse=True)
    return {
        "days": days,
        "totalSubmissions": total,
        "totalRevenue": revenue,
        "averageBookingValue": revenue / total if total else 0.0,
        "completionRate": completed / total * 100 if total else 0.0,
        "monthlySubmissions": monthly_breakdown(rows),
        "emiratesDistribution": emirates_distribution,
        "budgetDistribution": budget_distribution,
        "countryDistribution": country_distribution,
        "popularEmirates": [
            {"name": f"{item['emirate']} Attractions", "bookings": item["count"]}
            for item in popular[:POPULAR_EMIRATES]
        ],
        "recentSubmissions": rows[:10],
    }
