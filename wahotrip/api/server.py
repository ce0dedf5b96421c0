"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    uvicorn wahotrip.api.server:app --reload --port 8000

Routers:
    /v1/health
    /v1/planner/{sid}/...     preferences, generation, package selection, manual plan
    /v1/itinerary/{sid}/...   customization, summary, booking save
    /v1/admin/...             resource CRUD, submissions, bookings, analytics

Error mapping:
    MissingUpstreamState   409  + redirect_to (the stage that produces the missing state)
    DayNotFoundError       404
    ResourceNotFoundError  422
    psycopg2.Error         502
    redis.RedisError       503
"""
from __future__ import annotations

import logging

import psycopg2
import redis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wahotrip import __version__, config
from wahotrip.api.routes import admin, health, itinerary, planner
from wahotrip.modules.planning.itinerary_editor import DayNotFoundError, ResourceNotFoundError
from wahotrip.modules.state.app_state import MissingUpstreamState

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="WahoTrip UAE Itinerary API",
    version=__version__,
    description=(
        "UAE trip planner backend. Generates itinerary packages with Gemini, "
        "falls back to local generation, and serves customization and admin endpoints."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error mapping ──────────────────────────────────────────────────────────────

@app.exception_handler(MissingUpstreamState)
def _missing_state(request: Request, exc: MissingUpstreamState) -> JSONResponse:
    sid = request.path_params.get("sid", "")
    return JSONResponse(status_code=409, content={
        "detail": str(exc),
        "stage": exc.stage,
        "redirect_to": exc.redirect_to(sid),
    })


@app.exception_handler(DayNotFoundError)
def _day_not_found(request: Request, exc: DayNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc), "day": exc.day})


@app.exception_handler(ResourceNotFoundError)
def _resource_not_found(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=422, content={
        "detail": str(exc), "kind": exc.kind, "name": exc.name,
    })


@app.exception_handler(psycopg2.Error)
def _store_error(request: Request, exc: psycopg2.Error) -> JSONResponse:
    logger.error("Resource store error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "Resource store unavailable"})


@app.exception_handler(redis.RedisError)
def _state_error(request: Request, exc: redis.RedisError) -> JSONResponse:
    logger.error("State store error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Session state store unavailable"})


app.include_router(health.router,    prefix="/v1",           tags=["Health"])
app.include_router(planner.router,   prefix="/v1/planner",   tags=["Planner"])
app.include_router(itinerary.router, prefix="/v1/itinerary", tags=["Itinerary"])
app.include_router(admin.router,     prefix="/v1/admin",     tags=["Admin"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("wahotrip.api.server:app", host="0.0.0.0", port=8000, reload=True)
