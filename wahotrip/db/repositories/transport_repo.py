"""
db/repositories/transport_repo.py
---------------------------------
Queries for the `transport` table.

Columns: id, label, cost_per_day, type, description, image_url, is_active,
         created_at, updated_at
"""

from __future__ import annotations

from typing import Any, Optional

from wahotrip.db.repositories import _crud

TABLE = "transport"
WRITABLE = ("label", "cost_per_day", "type", "description", "image_url", "is_active")


def list_transport(
    conn,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    transport_type: Optional[str] = None,
) -> list[dict]:
    filters = (
        _crud.Filters()
        .gte("cost_per_day", min_price)
        .lte("cost_per_day", max_price)
        .eq("type", transport_type)
    )
    return _crud.select(conn, TABLE, filters, order_by="cost_per_day")


def get_transport(conn, transport_id: Any) -> Optional[dict]:
    return _crud.select_one(conn, TABLE, transport_id)


def create_transport(conn, data: dict[str, Any]) -> dict:
    return _crud.insert(conn, TABLE, data, WRITABLE)


def update_transport(conn, transport_id: Any, data: dict[str, Any]) -> Optional[dict]:
    return _crud.update(conn, TABLE, transport_id, data, WRITABLE)


def delete_transport(conn, transport_id: Any) -> bool:
    return _crud.delete(conn, TABLE, transport_id)
