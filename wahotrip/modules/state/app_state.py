"""
modules/state/app_state.py
--------------------------
Explicit per-session application state, passed to every pipeline stage.

Stages and the state each one needs:
  form        → produces preferences
  generation  → needs preferences, produces generated_packages
  details     → needs selected_package (chosen from generated_packages or manual)
  summary     → needs preferences and selected_package

Persistence is a serialization boundary only: stores load an AppState at the
start of a request and save the parts that changed. Blobs are JSON documents
keyed by name and session; a malformed or missing blob loads as absent.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol

from wahotrip import config
from wahotrip.db import redis_client
from wahotrip.schemas.itinerary import ItineraryPackage
from wahotrip.schemas.preferences import TravelPreferences

logger = logging.getLogger(__name__)

PREFERENCES_BLOB = "travelFormData"
PACKAGES_BLOB    = "generatedPackages"
SELECTED_BLOB    = "selectedPackage"

# stage → the stage that can produce what it is missing
STAGE_ROUTES = {
    "form":       "/v1/planner/{sid}/preferences",
    "generation": "/v1/planner/{sid}/generate",
    "details":    "/v1/planner/{sid}/select",
}


class MissingUpstreamState(Exception):
    """Required upstream state is absent; redirect the caller to `stage`."""

    def __init__(self, stage: str, detail: str = ""):
        super().__init__(detail or f"Missing state; continue at stage '{stage}'")
        self.stage = stage
        self.detail = detail

    def redirect_to(self, session_id: str) -> str:
        return STAGE_ROUTES.get(self.stage, STAGE_ROUTES["form"]).format(sid=session_id)


@dataclass
class AppState:
    session_id: str
    preferences: Optional[TravelPreferences] = None
    generated_packages: list[ItineraryPackage] = field(default_factory=list)
    selected_package: Optional[ItineraryPackage] = None

    def require_preferences(self) -> TravelPreferences:
        if self.preferences is None:
            raise MissingUpstreamState("form", "No travel preferences found")
        return self.preferences

    def require_packages(self) -> list[ItineraryPackage]:
        if not self.generated_packages:
            raise MissingUpstreamState("generation", "No generated packages found")
        return self.generated_packages

    def require_selected(self) -> ItineraryPackage:
        if self.selected_package is None:
            raise MissingUpstreamState("details", "No package selected")
        return self.selected_package

    def select(self, package_id: str) -> ItineraryPackage:
        """Make one of the generated packages the selected one."""
        for package in self.require_packages():
            if package.id == package_id:
                self.selected_package = ItineraryPackage.from_dict(package.to_dict())
                return self.selected_package
        raise KeyError(package_id)


# ── Serialization ────────────────────────────────────────────────────────────

def _decode(raw: Optional[str], session_id: str, name: str):
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Malformed %s blob for session %s; treating as absent", name, session_id)
        return None


def _preferences_from(data, session_id: str) -> Optional[TravelPreferences]:
    if not isinstance(data, dict):
        return None
    return TravelPreferences.from_dict(data)


def _package_from(data, session_id: str) -> Optional[ItineraryPackage]:
    if not isinstance(data, dict):
        return None
    try:
        return ItineraryPackage.from_dict(data)
    except (TypeError, ValueError, AttributeError) as exc:
        logger.warning("Unreadable package blob for session %s: %s", session_id, exc)
        return None


def state_from_blobs(session_id: str, blobs: dict[str, Optional[str]]) -> AppState:
    prefs = _preferences_from(_decode(blobs.get(PREFERENCES_BLOB), session_id, PREFERENCES_BLOB), session_id)
    raw_packages = _decode(blobs.get(PACKAGES_BLOB), session_id, PACKAGES_BLOB)
    packages = []
    if isinstance(raw_packages, list):
        packages = [p for p in (_package_from(x, session_id) for x in raw_packages) if p]
    selected = _package_from(_decode(blobs.get(SELECTED_BLOB), session_id, SELECTED_BLOB), session_id)
    return AppState(session_id, prefs, packages, selected)


def state_to_blobs(state: AppState) -> dict[str, Optional[str]]:
    return {
        PREFERENCES_BLOB: json.dumps(state.preferences.to_dict()) if state.preferences else None,
        PACKAGES_BLOB: (json.dumps([p.to_dict() for p in state.generated_packages])
                        if state.generated_packages else None),
        SELECTED_BLOB: json.dumps(state.selected_package.to_dict()) if state.selected_package else None,
    }


# ── Stores ───────────────────────────────────────────────────────────────────

class StateStore(Protocol):
    def load(self, session_id: str) -> AppState: ...
    def save(self, state: AppState) -> None: ...


class RedisStateStore:
    """JSON blobs under <name>:<sid>; every write resets the blob's TTL. Last writer wins."""

    def load(self, session_id: str) -> AppState:
        blobs = {
            name: redis_client.get_blob(name, session_id)
            for name in (PREFERENCES_BLOB, PACKAGES_BLOB, SELECTED_BLOB)
        }
        return state_from_blobs(session_id, blobs)

    def save(self, state: AppState) -> None:
        for name, payload in state_to_blobs(state).items():
            if payload is None:
                redis_client.delete_blob(name, state.session_id)
            else:
                redis_client.set_blob(name, state.session_id, payload)


class InMemoryStateStore:
    """Process-local store for development and tests; same JSON boundary as redis."""

    def __init__(self) -> None:
        self._blobs: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def load(self, session_id: str) -> AppState:
        with self._lock:
            blobs = {
                name: self._blobs.get((name, session_id))
                for name in (PREFERENCES_BLOB, PACKAGES_BLOB, SELECTED_BLOB)
            }
        return state_from_blobs(session_id, blobs)

    def save(self, state: AppState) -> None:
        with self._lock:
            for name, payload in state_to_blobs(state).items():
                key = (name, state.session_id)
                if payload is None:
                    self._blobs.pop(key, None)
                else:
                    self._blobs[key] = payload

    def put_raw(self, name: str, session_id: str, payload: str) -> None:
        with self._lock:
            self._blobs[(name, session_id)] = payload


_store: Optional[StateStore] = None


def get_state_store() -> StateStore:
    """Singleton store chosen by config.STATE_BACKEND."""
    global _store
    if _store is None:
        if config.STATE_BACKEND == "in_memory":
            _store = InMemoryStateStore()
        else:
            _store = RedisStateStore()
    return _store
