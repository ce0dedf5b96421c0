"""
modules/planning/response_parser.py
-----------------------------------
Best-effort repair of a free-form completion into a list of package dicts.

Repair chain (a bounded sequence of text transforms, not a grammar):
  1. strip ``` / ```json fences, then any prose before the first [ or { and
     after the last ] or }
  2. structural passes, applied outside string literals only:
       trailing commas before } / ]  → removed
       bare object keys              → quoted
       bare word values              → quoted (true / false / null left alone)
     newlines and runs of whitespace collapse to one space everywhere
  3. strict parse
  4. on failure: strip non-printable / non-ASCII characters and parse once more
  5. a non-array result is searched for its first array-valued property
  6. no array with at least one object → ParseResult.error

Failure is routine: callers fall back to local generation, nothing is raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

_FENCE_JSON_RE  = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_RE       = re.compile(r"```\s*")
_LEADING_RE     = re.compile(r"^[^\[{]*")
_TRAILING_RE    = re.compile(r"[^}\]]*$")
_STRING_RE      = re.compile(r'"(?:\\.|[^"\\])*"')
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_BARE_KEY_RE    = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")
_BARE_VALUE_RE  = re.compile(r":\s*([A-Za-z_][A-Za-z0-9_]*)\s*(?=[,}\]])")
_NON_PRINTABLE  = re.compile(r"[^\x20-\x7E]")
_WHITESPACE_RE  = re.compile(r"\s+")

_JSON_LITERALS = {"true", "false", "null"}


@dataclass
class ParseResult:
    packages: Optional[list[dict]] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.packages is not None


# ── Text transforms ──────────────────────────────────────────────────────────

def strip_wrapping(text: str) -> str:
    text = _FENCE_JSON_RE.sub("", text)
    text = _FENCE_RE.sub("", text)
    text = _LEADING_RE.sub("", text, count=1)
    text = _TRAILING_RE.sub("", text, count=1)
    return text.strip()


def _quote_bare_value(match: re.Match) -> str:
    word = match.group(1)
    if word in _JSON_LITERALS:
        return match.group(0)
    return f': "{word}"'


def _repair_segment(segment: str) -> str:
    segment = _TRAILING_COMMA.sub(r"\1", segment)
    segment = _BARE_KEY_RE.sub(r'\1"\2":', segment)
    segment = _BARE_VALUE_RE.sub(_quote_bare_value, segment)
    return segment


def repair_structure(text: str) -> str:
    """Apply the structural passes to the text between string literals."""
    text = _WHITESPACE_RE.sub(" ", text)
    pieces: list[str] = []
    cursor = 0
    for match in _STRING_RE.finditer(text):
        pieces.append(_repair_segment(text[cursor:match.start()]))
        pieces.append(match.group(0))
        cursor = match.end()
    # an unterminated string literal swallows the remainder; leave it untouched
    tail = text[cursor:]
    if '"' in tail:
        quote = tail.index('"')
        pieces.append(_repair_segment(tail[:quote]))
        pieces.append(tail[quote:])
    else:
        pieces.append(_repair_segment(tail))
    return "".join(pieces).strip()


def aggressive_clean(text: str) -> str:
    text = _NON_PRINTABLE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


# ── Shape extraction ─────────────────────────────────────────────────────────

def _extract_array(value: Any) -> Optional[list]:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        for item in value.values():
            if isinstance(item, list):
                return item
    return None


def _packages_from(value: Any) -> Optional[list[dict]]:
    array = _extract_array(value)
    if array is None:
        return None
    packages = [item for item in array if isinstance(item, dict)]
    return packages or None


# ── Public API ───────────────────────────────────────────────────────────────

def parse_completion(raw: str) -> ParseResult:
    if not raw or not raw.strip():
        return ParseResult(error="Empty completion")

    cleaned = repair_structure(strip_wrapping(raw))
    if not cleaned:
        return ParseResult(error="No JSON content found in completion")

    try:
        parsed = json.loads(cleaned, strict=False)
    except json.JSONDecodeError as first_error:
        logger.debug("Strict parse failed (%s); retrying with aggressive cleaning", first_error)
        try:
            parsed = json.loads(aggressive_clean(cleaned), strict=False)
        except json.JSONDecodeError as retry_error:
            return ParseResult(error=f"JSON parsing failed: {retry_error.msg} at char {retry_error.pos}")

    packages = _packages_from(parsed)
    if packages is None:
        return ParseResult(error=f"Completion is not a package array (got {type(parsed).__name__})")
    return ParseResult(packages=packages)
