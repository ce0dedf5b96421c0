"""
db/repositories/booking_repo.py
-------------------------------
Queries for the `bookings` table (saved trip summaries).

Columns: id, full_name, email, phone, country_code, trip_duration, journey_month,
         departure_country, emirates (text[]), budget, adults, kids, infants,
         total_travelers, package_title, package_description, itinerary_data (jsonb),
         estimated_cost, price_range_min, price_range_max, booking_status,
         download_count, special_requirements, notes, created_at, updated_at
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from psycopg2.extras import Json

from wahotrip.db.repositories import _crud

TABLE = "bookings"
STATUSES = ("confirmed", "pending", "cancelled", "completed")
WRITABLE = (
    "full_name", "email", "phone", "country_code", "trip_duration", "journey_month",
    "departure_country", "emirates", "budget", "adults", "kids", "infants",
    "total_travelers", "package_title", "package_description", "itinerary_data",
    "estimated_cost", "price_range_min", "price_range_max", "booking_status",
    "download_count", "special_requirements", "notes",
)


def _adapt(data: dict[str, Any]) -> dict[str, Any]:
    row = dict(data)
    if isinstance(row.get("itinerary_data"), (list, dict)):
        row["itinerary_data"] = Json(row["itinerary_data"])
    return row


def create_booking(conn, data: dict[str, Any]) -> dict:
    return _crud.insert(conn, TABLE, _adapt(data), WRITABLE)


def list_bookings(
    conn,
    status: Optional[str] = None,
    since: Optional[datetime] = None,
) -> list[dict]:
    filters = _crud.Filters().eq("booking_status", status).gte("created_at", since)
    return _crud.select(conn, TABLE, filters, order_by="created_at", descending=True)


def get_booking(conn, booking_id: Any) -> Optional[dict]:
    return _crud.select_one(conn, TABLE, booking_id)


def get_booking_by_email_and_package(conn, email: str, package_title: str) -> Optional[dict]:
    filters = _crud.Filters().eq("email", email).eq("package_title", package_title)
    rows = _crud.select(conn, TABLE, filters, limit=1)
    return rows[0] if rows else None


def increment_download_count(conn, booking_id: Any) -> int:
    """Atomically bump download_count; returns the new value (0 if the id is unknown)."""
    sql = """
        UPDATE bookings
        SET download_count = COALESCE(download_count, 0) + 1,
            updated_at     = NOW()
        WHERE id = %s
        RETURNING download_count
    """
    with conn.cursor() as cur:
        cur.execute(sql, (booking_id,))
        row = cur.fetchone()
        return int(row[0]) if row else 0


def update_booking(conn, booking_id: Any, data: dict[str, Any]) -> Optional[dict]:
    status = data.get("booking_status")
    if status is not None and status not in STATUSES:
        raise ValueError(f"Unknown booking status: {status!r}")
    return _crud.update(conn, TABLE, booking_id, _adapt(data), WRITABLE)


def delete_booking(conn, booking_id: Any) -> bool:
    return _crud.delete(conn, TABLE, booking_id)
