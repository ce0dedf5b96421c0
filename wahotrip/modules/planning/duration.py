"""
modules/planning/duration.py
----------------------------
Free-text duration → hours heuristic used by the per-day time cap.

Order of evaluation:
  1. "N hour(s)" / "Nh" and "N minute(s)" / "N min" patterns (summed when both appear)
  2. a bare number: >= 30 is minutes, < 30 is hours
  3. keywords: full/whole day → 8, half day → 4, morning/afternoon → 3
  4. anything else → 2
The result is clamped to a minimum of 0.5 hours; an empty string counts as 0.
"""

from __future__ import annotations

import re

from wahotrip import config

_HOURS_RE   = re.compile(r"(\d+(?:\.\d+)?)\s*h(?:our)?s?", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*m(?:in)?(?:ute)?s?", re.IGNORECASE)
_NUMBER_RE  = re.compile(r"(\d+(?:\.\d+)?)")

_KEYWORD_HOURS: list[tuple[tuple[str, ...], float]] = [
    (("full day", "whole day"), 8.0),
    (("half day",), 4.0),
    (("morning", "afternoon"), 3.0),
]

MIN_HOURS = 0.5
FALLBACK_HOURS = 2.0


def parse_duration_hours(text: str | None) -> float:
    if not text or not str(text).strip():
        return 0.0
    text = str(text).strip().lower()

    hours_match = _HOURS_RE.search(text)
    minutes_match = _MINUTES_RE.search(text)
    if hours_match or minutes_match:
        hours = float(hours_match.group(1)) if hours_match else 0.0
        if minutes_match:
            hours += float(minutes_match.group(1)) / 60.0
        return max(MIN_HOURS, hours)

    number_match = _NUMBER_RE.search(text)
    if number_match:
        value = float(number_match.group(1))
        hours = value / 60.0 if value >= 30 else value
        return max(MIN_HOURS, hours)

    for keywords, hours in _KEYWORD_HOURS:
        if any(k in text for k in keywords):
            return hours
    return FALLBACK_HOURS


def total_hours(durations: list[str]) -> float:
    """Cumulative hours for a day; entries without a duration count as the default visit length."""
    return sum(parse_duration_hours(d or config.DEFAULT_ATTRACTION_DURATION) for d in durations)
