"""
db/repositories/attraction_repo.py
----------------------------------
Queries for the `attractions` table.

Columns: id, attraction, emirates, price, child_price, infant_price, duration,
         description, image_url, category, rating, is_active, created_at, updated_at
"""

from __future__ import annotations

from typing import Any, Optional

from wahotrip.db.repositories import _crud

TABLE = "attractions"
WRITABLE = (
    "attraction", "emirates", "price", "child_price", "infant_price", "duration",
    "description", "image_url", "category", "rating", "is_active",
)


def list_attractions(
    conn,
    emirates: Optional[list[str]] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    category: Optional[str] = None,
    active_only: bool = False,
) -> list[dict]:
    """
    Attraction rows, optionally filtered.

    emirates uses stored names ("Abu Dhabi"), not form slugs. Rows are ordered by
    price when filtering by emirate, else by emirate then name.
    """
    filters = (
        _crud.Filters()
        .any_of("emirates", emirates)
        .gte("price", min_price)
        .lte("price", max_price)
        .ilike("attraction", search)
        .eq("category", category)
    )
    if active_only:
        filters.eq("is_active", True)
    order = "price" if emirates else ("emirates", "attraction")
    return _crud.select(conn, TABLE, filters, order_by=order)


def list_family_friendly(conn) -> list[dict]:
    """Attractions with a child price set."""
    filters = _crud.Filters().gte("child_price", 0.01)
    return _crud.select(conn, TABLE, filters, order_by="child_price")


def get_attraction(conn, attraction_id: Any) -> Optional[dict]:
    return _crud.select_one(conn, TABLE, attraction_id)


def create_attraction(conn, data: dict[str, Any]) -> dict:
    return _crud.insert(conn, TABLE, data, WRITABLE)


def update_attraction(conn, attraction_id: Any, data: dict[str, Any]) -> Optional[dict]:
    return _crud.update(conn, TABLE, attraction_id, data, WRITABLE)


def delete_attraction(conn, attraction_id: Any) -> bool:
    return _crud.delete(conn, TABLE, attraction_id)
