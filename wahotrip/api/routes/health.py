"""
api/routes/health.py
--------------------
Health-check endpoint used by load balancers, Docker health probes, etc.
"""
from __future__ import annotations

from fastapi import APIRouter

from wahotrip import __version__, config

router = APIRouter()


@router.get("/health", summary="Health check")
def health() -> dict:
    """Returns 200 OK when the service is running."""
    return {
        "status": "ok",
        "service": "wahotrip-backend",
        "version": __version__,
        "llm": "stub" if config.USE_STUB_LLM else config.GEMINI_MODEL,
        "state_backend": config.STATE_BACKEND,
    }
