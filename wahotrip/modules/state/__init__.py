"""
modules/state package: explicit per-session state, its stores, and the generation lock.
"""
from wahotrip.modules.state.app_state import (
    AppState,
    InMemoryStateStore,
    MissingUpstreamState,
    RedisStateStore,
    StateStore,
    get_state_store,
)
from wahotrip.modules.state.session_lock import generation_lock

__all__ = [
    "AppState",
    "InMemoryStateStore",
    "MissingUpstreamState",
    "RedisStateStore",
    "StateStore",
    "get_state_store",
    "generation_lock",
]
