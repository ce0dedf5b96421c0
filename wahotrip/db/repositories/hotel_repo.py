"""
db/repositories/hotel_repo.py
-----------------------------
Queries for the `hotels` table.

Columns: id, name, stars, price_range_min, price_range_max, category, star_category,
         location, image_url, description, created_at, updated_at
"""

from __future__ import annotations

from typing import Any, Optional

from wahotrip.db.repositories import _crud

TABLE = "hotels"
WRITABLE = (
    "name", "stars", "price_range_min", "price_range_max", "category",
    "star_category", "location", "image_url", "description",
)


def list_hotels(
    conn,
    stars: Optional[list[int]] = None,
    category: Optional[str] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
) -> list[dict]:
    filters = (
        _crud.Filters()
        .any_of("stars", stars)
        .eq("category", category)
        .lte("price_range_min", max_price)
        .ilike("name", search)
    )
    return _crud.select(conn, TABLE, filters, order_by=("stars", "name"))


def get_hotel(conn, hotel_id: Any) -> Optional[dict]:
    return _crud.select_one(conn, TABLE, hotel_id)


def create_hotel(conn, data: dict[str, Any]) -> dict:
    return _crud.insert(conn, TABLE, data, WRITABLE)


def update_hotel(conn, hotel_id: Any, data: dict[str, Any]) -> Optional[dict]:
    return _crud.update(conn, TABLE, hotel_id, data, WRITABLE)


def delete_hotel(conn, hotel_id: Any) -> bool:
    return _crud.delete(conn, TABLE, hotel_id)
