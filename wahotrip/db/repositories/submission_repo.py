"""
db/repositories/submission_repo.py
----------------------------------
Queries for the `travel_submissions` table (one row per preferences form submit).

Columns: id, full_name, phone, email, trip_duration, journey_month, departure_country,
         emirates (text[]), budget, adults, kids, infants, submission_status, notes,
         total_travelers, created_at, updated_at
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from wahotrip.db.repositories import _crud

TABLE = "travel_submissions"
STATUSES = ("pending", "processing", "completed", "cancelled")
WRITABLE = (
    "full_name", "phone", "email", "trip_duration", "journey_month", "departure_country",
    "emirates", "budget", "adults", "kids", "infants", "submission_status", "notes",
    "total_travelers",
)


def create_submission(conn, data: dict[str, Any]) -> dict:
    row = dict(data)
    row.setdefault("submission_status", "pending")
    row.setdefault(
        "total_travelers",
        int(row.get("adults") or 0) + int(row.get("kids") or 0) + int(row.get("infants") or 0),
    )
    return _crud.insert(conn, TABLE, row, WRITABLE)


def list_submissions(
    conn,
    status: Optional[str] = None,
    since: Optional[datetime] = None,
) -> list[dict]:
    filters = _crud.Filters().eq("submission_status", status).gte("created_at", since)
    return _crud.select(conn, TABLE, filters, order_by="created_at", descending=True)


def get_submission(conn, submission_id: Any) -> Optional[dict]:
    return _crud.select_one(conn, TABLE, submission_id)


def update_submission(conn, submission_id: Any, data: dict[str, Any]) -> Optional[dict]:
    status = data.get("submission_status")
    if status is not None and status not in STATUSES:
        raise ValueError(f"Unknown submission status: {status!r}")
    return _crud.update(conn, TABLE, submission_id, data, WRITABLE)


def delete_submission(conn, submission_id: Any) -> bool:
    return _crud.delete(conn, TABLE, submission_id)
