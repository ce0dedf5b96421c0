"""
api/routes/admin.py
-------------------
Admin CRUD over the resource tables, submissions and bookings, plus analytics.

    GET/POST           /v1/admin/{attractions|hotels|transport}
    GET/PUT/DELETE     /v1/admin/{attractions|hotels|transport}/{id}
    GET                /v1/admin/submissions?status=&days=
    GET/PATCH/DELETE   /v1/admin/submissions/{id}
    GET                /v1/admin/bookings?status=
    GET/PATCH/DELETE   /v1/admin/bookings/{id}
    GET                /v1/admin/analytics?days=30

Unknown ids answer 404, invalid status values 422. Database errors propagate
and the app maps them to 502.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from wahotrip.api.deps import get_db
from wahotrip.db.repositories import (
    attraction_repo, booking_repo, hotel_repo, submission_repo, transport_repo,
)
from wahotrip.modules.reporting.analytics import compute_analytics

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class AttractionBody(BaseModel):
    attraction: Optional[str] = None
    emirates: Optional[str] = None
    price: Optional[float] = None
    child_price: Optional[float] = None
    infant_price: Optional[float] = None
    duration: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None
    is_active: Optional[bool] = None


class HotelBody(BaseModel):
    name: Optional[str] = None
    stars: Optional[int] = None
    price_range_min: Optional[float] = None
    price_range_max: Optional[float] = None
    category: Optional[str] = None
    star_category: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class TransportBody(BaseModel):
    label: Optional[str] = None
    cost_per_day: Optional[float] = None
    type: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class SubmissionUpdate(BaseModel):
    submission_status: Optional[str] = None
    notes: Optional[str] = None


class BookingUpdate(BaseModel):
    booking_status: Optional[str] = None
    notes: Optional[str] = None
    special_requirements: Optional[str] = None


# ── Helpers ────────────────────────────────────────────────────────────────────

def _found(row: Optional[dict], kind: str, row_id: Any) -> dict:
    if row is None:
        raise HTTPException(status_code=404, detail=f"{kind} {row_id} not found")
    return row


def _deleted(ok: bool, kind: str, row_id: Any) -> dict:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{kind} {row_id} not found")
    return {"deleted": True, "id": row_id}


def _changes(body: BaseModel) -> dict:
    return body.model_dump(exclude_unset=True)


def _since(days: Optional[int]) -> Optional[datetime]:
    return datetime.now(timezone.utc) - timedelta(days=days) if days else None


# ── Attractions ────────────────────────────────────────────────────────────────

@router.get("/attractions", summary="List attractions")
def list_attractions(
    emirates: Optional[list[str]] = Query(None, description="Stored emirate names"),
    search: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    active_only: bool = False,
    conn=Depends(get_db),
) -> list[dict]:
    return attraction_repo.list_attractions(
        conn, emirates=emirates, min_price=min_price, max_price=max_price,
        search=search, category=category, active_only=active_only,
    )


@router.get("/attractions/family-friendly", summary="Attractions with a child price")
def list_family_friendly(conn=Depends(get_db)) -> list[dict]:
    return attraction_repo.list_family_friendly(conn)


@router.get("/attractions/{row_id}")
def get_attraction(row_id: str, conn=Depends(get_db)) -> dict:
    return _found(attraction_repo.get_attraction(conn, row_id), "Attraction", row_id)


@router.post("/attractions", status_code=201)
def create_attraction(body: AttractionBody, conn=Depends(get_db)) -> dict:
    try:
        return attraction_repo.create_attraction(conn, _changes(body))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.put("/attractions/{row_id}")
def update_attraction(row_id: str, body: AttractionBody, conn=Depends(get_db)) -> dict:
    return _found(attraction_repo.update_attraction(conn, row_id, _changes(body)), "Attraction", row_id)


@router.delete("/attractions/{row_id}")
def delete_attraction(row_id: str, conn=Depends(get_db)) -> dict:
    return _deleted(attraction_repo.delete_attraction(conn, row_id), "Attraction", row_id)


# ── Hotels ─────────────────────────────────────────────────────────────────────

@router.get("/hotels", summary="List hotels")
def list_hotels(
    stars: Optional[list[int]] = Query(None),
    category: Optional[str] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    conn=Depends(get_db),
) -> list[dict]:
    return hotel_repo.list_hotels(conn, stars=stars, category=category, max_price=max_price, search=search)


@router.get("/hotels/{row_id}")
def get_hotel(row_id: str, conn=Depends(get_db)) -> dict:
    return _found(hotel_repo.get_hotel(conn, row_id), "Hotel", row_id)


@router.post("/hotels", status_code=201)
def create_hotel(body: HotelBody, conn=Depends(get_db)) -> dict:
    try:
        return hotel_repo.create_hotel(conn, _changes(body))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.put("/hotels/{row_id}")
def update_hotel(row_id: str, body: HotelBody, conn=Depends(get_db)) -> dict:
    return _found(hotel_repo.update_hotel(conn, row_id, _changes(body)), "Hotel", row_id)


@router.delete("/hotels/{row_id}")
def delete_hotel(row_id: str, conn=Depends(get_db)) -> dict:
    return _deleted(hotel_repo.delete_hotel(conn, row_id), "Hotel", row_id)


# ── Transport ──────────────────────────────────────────────────────────────────

@router.get("/transport", summary="List transport options")
def list_transport(
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    type: Optional[str] = None,
    conn=Depends(get_db),
) -> list[dict]:
    return transport_repo.list_transport(conn, min_price=min_price, max_price=max_price, transport_type=type)


@router.get("/transport/{row_id}")
def get_transport(row_id: str, conn=Depends(get_db)) -> dict:
    return _found(transport_repo.get_transport(conn, row_id), "Transport", row_id)


@router.post("/transport", status_code=201)
def create_transport(body: TransportBody, conn=Depends(get_db)) -> dict:
    try:
        return transport_repo.create_transport(conn, _changes(body))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.put("/transport/{row_id}")
def update_transport(row_id: str, body: TransportBody, conn=Depends(get_db)) -> dict:
    return _found(transport_repo.update_transport(conn, row_id, _changes(body)), "Transport", row_id)


@router.delete("/transport/{row_id}")
def delete_transport(row_id: str, conn=Depends(get_db)) -> dict:
    return _deleted(transport_repo.delete_transport(conn, row_id), "Transport", row_id)


# ── Submissions ────────────────────────────────────────────────────────────────

@router.get("/submissions", summary="List travel submissions")
def list_submissions(
    status: Optional[str] = None,
    days: Optional[int] = Query(None, ge=1),
    conn=Depends(get_db),
) -> list[dict]:
    return submission_repo.list_submissions(conn, status=status, since=_since(days))


@router.get("/submissions/{row_id}")
def get_submission(row_id: str, conn=Depends(get_db)) -> dict:
    return _found(submission_repo.get_submission(conn, row_id), "Submission", row_id)


@router.patch("/submissions/{row_id}")
def update_submission(row_id: str, body: SubmissionUpdate, conn=Depends(get_db)) -> dict:
    try:
        row = submission_repo.update_submission(conn, row_id, _changes(body))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _found(row, "Submission", row_id)


@router.delete("/submissions/{row_id}")
def delete_submission(row_id: str, conn=Depends(get_db)) -> dict:
    return _deleted(submission_repo.delete_submission(conn, row_id), "Submission", row_id)


# ── Bookings ───────────────────────────────────────────────────────────────────

@router.get("/bookings", summary="List bookings")
def list_bookings(status: Optional[str] = None, conn=Depends(get_db)) -> list[dict]:
    return booking_repo.list_bookings(conn, status=status)


@router.get("/bookings/{row_id}")
def get_booking(row_id: str, conn=Depends(get_db)) -> dict:
    return _found(booking_repo.get_booking(conn, row_id), "Booking", row_id)


@router.patch("/bookings/{row_id}")
def update_booking(row_id: str, body: BookingUpdate, conn=Depends(get_db)) -> dict:
    try:
        row = booking_repo.update_booking(conn, row_id, _changes(body))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _found(row, "Booking", row_id)


@router.delete("/bookings/{row_id}")
def delete_booking(row_id: str, conn=Depends(get_db)) -> dict:
    return _deleted(booking_repo.delete_booking(conn, row_id), "Booking", row_id)


# ── Analytics ──────────────────────────────────────────────────────────────────

@router.get("/analytics", summary="Dashboard figures over the last N days")
def get_analytics(days: int = Query(30, ge=1), conn=Depends(get_db)) -> dict:
    rows = submission_repo.list_submissions(conn, since=_since(days))
    return compute_analytics(rows, days=days)
