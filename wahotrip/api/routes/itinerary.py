"""
api/routes/itinerary.py
-----------------------
Day-detail customization and the trip summary for the selected package.

    GET    /v1/itinerary/{sid}                                   package + costs
    GET    /v1/itinerary/{sid}/days/{day}/catalog?search=        attractions that can be toggled in
    PUT    /v1/itinerary/{sid}/days/{day}/hotel
    PUT    /v1/itinerary/{sid}/days/{day}/transport
    POST   /v1/itinerary/{sid}/days/{day}/attractions/toggle
    PATCH  /v1/itinerary/{sid}/days/{day}                        rename / redescribe
    GET    /v1/itinerary/{sid}/summary[?format=text]
    POST   /v1/itinerary/{sid}/summary/save                      record / re-download booking

Resources are fetched per request so edits see the current store contents.
An add that would break the daily hours cap answers 200 with accepted=false;
the package is left as it was.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from wahotrip.api.deps import get_db, get_events, get_resource_tool, get_store
from wahotrip.modules.observability.logger import MUTATION, StructuredLogger
from wahotrip.modules.planning.cost_calculator import CostCalculator, price_range
from wahotrip.modules.planning.itinerary_editor import (
    DayNotFoundError, ItineraryEditor, MutationResult,
)
from wahotrip.modules.reporting.summary import build_summary, save_summary
from wahotrip.modules.state.app_state import AppState, StateStore
from wahotrip.modules.tool_usage.resource_tool import ResourceTool, filter_attractions
from wahotrip.schemas.itinerary import ItineraryPackage
from wahotrip.schemas.resources import ResourceBundle

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class HotelRequest(BaseModel):
    name: str


class TransportRequest(BaseModel):
    label: str


class ToggleRequest(BaseModel):
    name: str


class DayUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


# ── Helpers ────────────────────────────────────────────────────────────────────

def _resources(state: AppState, tool: ResourceTool) -> ResourceBundle:
    emirates = state.preferences.emirates if state.preferences else None
    return tool.fetch_all(emirates)


def _ser_package(package: ItineraryPackage) -> dict:
    low, high = price_range(package.total_cost)
    return {**package.to_dict(), "priceRange": {"min": low, "max": high}}


def _mutate(
    sid: str,
    day: int,
    store: StateStore,
    tool: ResourceTool,
    events: StructuredLogger,
    operation,
) -> dict:
    state = store.load(sid)
    package = state.require_selected()
    editor = ItineraryEditor(_resources(state, tool))
    result: MutationResult = operation(editor, package)
    if result.accepted:
        store.save(state)
    events.log(sid, MUTATION, {
        "action": result.action,
        "day": day,
        "accepted": result.accepted,
        "message": result.message,
        "total_cost": package.total_cost,
    })
    return {
        "session_id": sid,
        "accepted": result.accepted,
        "action": result.action,
        "message": result.message,
        "dayHours": result.day_hours,
        "package": _ser_package(package),
    }


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("/{sid}", summary="Selected package with cost breakdown")
def get_itinerary(
    sid: str,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
) -> dict:
    state = store.load(sid)
    package = state.require_selected()
    costs = CostCalculator(_resources(state, tool)).package_cost(package)
    return {"session_id": sid, "package": _ser_package(package), "costs": costs.to_dict()}


@router.get("/{sid}/days/{day}/catalog", summary="Attractions available for a day")
def get_catalog(
    sid: str,
    day: int,
    search: Optional[str] = None,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
) -> dict:
    state = store.load(sid)
    package = state.require_selected()
    plan = package.get_day(day)
    if plan is None:
        raise DayNotFoundError(day)

    emirates = state.preferences.emirates if state.preferences else None
    rows = filter_attractions(tool.fetch_attractions(), emirates, search)
    editor = ItineraryEditor(ResourceBundle(attractions=rows))
    planned = {a.name for a in plan.attractions}
    return {
        "session_id": sid,
        "day": day,
        "dayHours": editor.day_hours(plan),
        "attractions": [
            {
                **row.to_dict(),
                "selected": row.name in planned,
                "wouldExceedCap": row.name not in planned and editor.would_exceed_cap(plan, row.duration),
            }
            for row in rows
        ],
    }


@router.put("/{sid}/days/{day}/hotel", summary="Replace the day's hotel")
def replace_hotel(
    sid: str,
    day: int,
    req: HotelRequest,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
    events: StructuredLogger = Depends(get_events),
) -> dict:
    return _mutate(sid, day, store, tool, events,
                   lambda editor, package: editor.replace_hotel(package, day, req.name))


@router.put("/{sid}/days/{day}/transport", summary="Replace the day's transport")
def replace_transport(
    sid: str,
    day: int,
    req: TransportRequest,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
    events: StructuredLogger = Depends(get_events),
) -> dict:
    return _mutate(sid, day, store, tool, events,
                   lambda editor, package: editor.replace_transport(package, day, req.label))


@router.post("/{sid}/days/{day}/attractions/toggle", summary="Add or remove an attraction")
def toggle_attraction(
    sid: str,
    day: int,
    req: ToggleRequest,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
    events: StructuredLogger = Depends(get_events),
) -> dict:
    return _mutate(sid, day, store, tool, events,
                   lambda editor, package: editor.toggle_attraction(package, day, req.name))


@router.patch("/{sid}/days/{day}", summary="Rename or redescribe a day")
def update_day(
    sid: str,
    day: int,
    req: DayUpdateRequest,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
    events: StructuredLogger = Depends(get_events),
) -> dict:
    return _mutate(sid, day, store, tool, events,
                   lambda editor, package: editor.update_day(package, day, req.title, req.description))


@router.get("/{sid}/summary", summary="Trip summary")
def get_summary(
    sid: str,
    format: str = "json",
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
):
    state = store.load(sid)
    prefs = state.require_preferences()
    package = state.require_selected()
    summary = build_summary(prefs, package, _resources(state, tool))
    if format == "text":
        return PlainTextResponse(summary.render_text())
    return {"session_id": sid, "summary": summary.to_dict()}


@router.post("/{sid}/summary/save", summary="Save the trip as a booking")
def save_trip(
    sid: str,
    store: StateStore = Depends(get_store),
    tool: ResourceTool = Depends(get_resource_tool),
    conn=Depends(get_db),
) -> dict:
    state = store.load(sid)
    prefs = state.require_preferences()
    package = state.require_selected()
    summary = build_summary(prefs, package, _resources(state, tool))
    result = save_summary(conn, prefs, package, summary)
    return {
        "session_id": sid,
        "booking_id": result.booking_id,
        "created": result.created,
        "downloadCount": result.download_count,
        "text": summary.render_text(),
    }
