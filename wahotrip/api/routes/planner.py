"""
api/routes/planner.py
---------------------
Form → generation → package selection.

    POST /v1/planner/{sid}/preferences   store preferences (+ travel_submissions row)
    GET  /v1/planner/{sid}/preferences
    POST /v1/planner/{sid}/generate      one generation cycle; 409 while one is in flight
    GET  /v1/planner/{sid}/packages
    POST /v1/planner/{sid}/select        choose a generated package
    POST /v1/planner/{sid}/manual        start from an empty package instead

Missing upstream state raises MissingUpstreamState, which the app answers
with 409 and a redirect_to hint.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import psycopg2
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wahotrip.api.deps import get_conn_factory, get_pipeline, get_store
from wahotrip.db.repositories import submission_repo
from wahotrip.modules.planning.generation_pipeline import GenerationPipeline
from wahotrip.modules.planning.manual_planner import build_manual_package
from wahotrip.modules.state.app_state import StateStore
from wahotrip.modules.state.session_lock import generation_lock
from wahotrip.schemas.preferences import TravelPreferences

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class PreferencesRequest(BaseModel):
    adults: int = Field(1, ge=0)
    kids: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    trip_duration: int = Field(3, ge=0, description="Nights; 0 falls back to the default")
    emirates: list[str] = Field(default_factory=lambda: ["all"], description="Form slugs, e.g. 'abu-dhabi'")
    journey_month: str = ""
    budget: str = Field("", description="Budget band, e.g. '3,000 - 5,000'")
    departure_country: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    country_code: str = ""


class GenerateRequest(BaseModel):
    seed: Optional[int] = Field(None, description="Fixed seed for reproducible fallback output")


class SelectRequest(BaseModel):
    package_id: str


# ── Helpers ────────────────────────────────────────────────────────────────────

def record_submission(prefs: TravelPreferences, conn_factory: Callable) -> Optional[dict]:
    """Insert the travel_submissions row; a store failure never blocks the form."""
    try:
        with conn_factory() as conn:
            return submission_repo.create_submission(conn, prefs.to_submission_row())
    except psycopg2.Error as exc:
        logger.warning("Travel submission not recorded: %s", exc)
        return None


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/{sid}/preferences", summary="Store travel preferences")
def save_preferences(
    sid: str,
    req: PreferencesRequest,
    store: StateStore = Depends(get_store),
    conn_factory: Callable = Depends(get_conn_factory),
) -> dict:
    prefs = TravelPreferences.from_dict(req.model_dump())
    state = store.load(sid)
    state.preferences = prefs
    # packages built for earlier preferences no longer apply
    state.generated_packages = []
    state.selected_package = None
    store.save(state)

    submission = record_submission(prefs, conn_factory)
    return {
        "session_id": sid,
        "preferences": prefs.to_dict(),
        "travelerType": prefs.traveler_type,
        "submission_id": submission.get("id") if submission else None,
    }


@router.get("/{sid}/preferences", summary="Stored travel preferences")
def get_preferences(sid: str, store: StateStore = Depends(get_store)) -> dict:
    prefs = store.load(sid).require_preferences()
    return {"session_id": sid, "preferences": prefs.to_dict()}


@router.post("/{sid}/generate", summary="Generate three itinerary packages")
def generate(
    sid: str,
    req: Optional[GenerateRequest] = None,
    store: StateStore = Depends(get_store),
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """
    Runs one generation cycle: AI-backed when the completion succeeds and
    parses, local fallback otherwise. A cycle already running for this
    session is not restarted; the second request gets 409.
    """
    state = store.load(sid)
    prefs = state.require_preferences()
    seed = req.seed if req else None

    with generation_lock(sid) as acquired:
        if not acquired:
            raise HTTPException(status_code=409, detail="Generation already in progress for this session")
        try:
            outcome = pipeline.run(sid, prefs, seed=seed)
        except Exception as exc:
            logger.exception("Session %s: generation failed", sid)
            return JSONResponse(status_code=500, content={
                "detail": f"Generation error: {exc}",
                "retry": f"/v1/planner/{sid}/generate",
                "manual_plan": f"/v1/planner/{sid}/manual",
            })

        state = store.load(sid)
        state.generated_packages = outcome.packages
        store.save(state)

    return {"session_id": sid, **outcome.to_dict()}


@router.get("/{sid}/packages", summary="Packages from the last generation")
def get_packages(sid: str, store: StateStore = Depends(get_store)) -> dict:
    packages = store.load(sid).require_packages()
    return {"session_id": sid, "packages": [p.to_dict() for p in packages]}


@router.post("/{sid}/select", summary="Select a generated package")
def select_package(sid: str, req: SelectRequest, store: StateStore = Depends(get_store)) -> dict:
    state = store.load(sid)
    try:
        package = state.select(req.package_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown package: {req.package_id}") from exc
    store.save(state)
    return {"session_id": sid, "package": package.to_dict()}


@router.post("/{sid}/manual", summary="Start a manual itinerary")
def start_manual_plan(sid: str, store: StateStore = Depends(get_store)) -> dict:
    state = store.load(sid)
    package = build_manual_package(state.require_preferences())
    state.selected_package = package
    store.save(state)
    return {"session_id": sid, "package": package.to_dict()}
