"""
modules/state/session_lock.py
-----------------------------
Per-session, in-process, non-blocking generation guard.

A generation cycle is not re-entrant: while one runs for a session, a second
request for the same session is refused (the caller answers 409) instead of
starting a parallel cycle.

State is a single set of in-flight session ids behind one mutex; the check and
the claim happen under that mutex, so two callers can never both claim a session.
Scope is one process; several workers each keep their own set.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_in_flight: set[str] = set()
_guard = threading.Lock()


def acquire_generation_lock(session_id: str) -> bool:
    """True when the session was claimed, False when a cycle is already in flight."""
    if not session_id:
        return False
    with _guard:
        if session_id in _in_flight:
            return False
        _in_flight.add(session_id)
        return True


def release_generation_lock(session_id: str) -> None:
    if not session_id:
        return
    with _guard:
        _in_flight.discard(session_id)


def is_generation_in_flight(session_id: str) -> bool:
    with _guard:
        return session_id in _in_flight


@contextmanager
def generation_lock(session_id: str) -> Iterator[bool]:
    """Yields whether the session was claimed; releases only a claim it made."""
    acquired = acquire_generation_lock(session_id)
    try:
        yield acquired
    finally:
        if acquired:
            release_generation_lock(session_id)
