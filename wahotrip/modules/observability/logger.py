"""
Structured JSON logger: append-only, one object per line (.jsonl).

Usage:
    from wahotrip.modules.observability.logger import StructuredLogger

    events = StructuredLogger()
    events.log("sess_abc123", GENERATION_START, {"trip_days": 5})

Logs are written to  <LOGS_DIR>/<session_id>.jsonl  (config.LOGS_DIR).
"""

from __future__ import annotations

import json
import os
import re
import threading
from datetime import datetime, timezone
from pathlib import Path

from wahotrip import config

# ── event types ──────────────────────────────────────────────────────────────
GENERATION_START    = "generation_start"
RESOURCES_FETCHED   = "resources_fetched"
PROMPT_BUILT        = "prompt_built"
COMPLETION_FAILED   = "completion_failed"
PARSE_FAILED        = "parse_failed"
FALLBACK_USED       = "fallback_used"
GENERATION_COMPLETE = "generation_complete"
MUTATION            = "mutation"

# session ids come from URLs; keep file names to a safe alphabet
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def _file_stem(session_id: str) -> str:
    stem = _UNSAFE_CHARS.sub("_", session_id).lstrip(".")
    return stem or "_"


class StructuredLogger:
    """Thread-safe, append-only JSONL logger."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir) if logs_dir else Path(config.LOGS_DIR)
        self._lock = threading.Lock()
        self._handles: dict[str, object] = {}  # session_id -> file handle

    # ── public API ────────────────────────────────────────────────────────

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        """Append one structured JSON record to ``<session_id>.jsonl``."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(session_id)
            if fh is None:
                fh = self._open(session_id)
            fh.write(line)  # type: ignore[union-attr]
            fh.flush()  # type: ignore[union-attr]

    def read(self, session_id: str) -> list[dict]:
        """All records logged for a session, oldest first; [] when none exist."""
        path = self._path(session_id)
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    def close(self, session_id: str | None = None) -> None:
        """Close one or all open file handles."""
        with self._lock:
            if session_id:
                fh = self._handles.pop(session_id, None)
                if fh:
                    fh.close()  # type: ignore[union-attr]
            else:
                for fh in self._handles.values():
                    fh.close()  # type: ignore[union-attr]
                self._handles.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _path(self, session_id: str) -> Path:
        return self._logs_dir / f"{_file_stem(session_id)}.jsonl"

    def _open(self, session_id: str):  # noqa: ANN202
        os.makedirs(self._logs_dir, exist_ok=True)
        fh = open(self._path(session_id), "a", encoding="utf-8")  # noqa: SIM115
        self._handles[session_id] = fh
        return fh
