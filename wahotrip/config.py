"""
config.py
---------
Central configuration for the UAE trip planner backend.
All secrets loaded from environment variables, never hard-coded.

Values are read once at import time; tests patch the module attributes directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (if it exists) so env vars in that file
# are picked up by os.getenv() below. Won't override vars already set in the shell.
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Gemini (text completion endpoint) ────────────────────────────────────────
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com")
GEMINI_API_VERSION: str = os.getenv("GEMINI_API_VERSION", "v1beta")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192"))
GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
GEMINI_TOP_P: float = float(os.getenv("GEMINI_TOP_P", "0.8"))
GEMINI_TOP_K: int = int(os.getenv("GEMINI_TOP_K", "40"))
GEMINI_TIMEOUT_SECONDS: int = int(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))
# Prompts estimated above this many tokens (chars / 4) are refused before sending
GEMINI_MAX_INPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_INPUT_TOKENS", "30000"))

# Stub client always reports failure, so every generation takes the local fallback path.
# Defaults to true when no API key is configured.
USE_STUB_LLM: bool = _flag("USE_STUB_LLM", "false" if GEMINI_API_KEY else "true")

# ── PostgreSQL (hosted resource store) ───────────────────────────────────────
# Tables: attractions, hotels, transport, travel_submissions, bookings
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "postgres")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "postgres")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "")
POSTGRES_SSLMODE: str  = os.getenv("POSTGRES_SSLMODE",  "prefer")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Session state store ──────────────────────────────────────────────────────
STATE_BACKEND: str  = os.getenv("STATE_BACKEND", "redis")    # "redis" | "in_memory"
REDIS_HOST: str     = os.getenv("REDIS_HOST",     "localhost")
REDIS_PORT: int     = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB: int       = int(os.getenv("REDIS_DB",   "0"))
REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")
STATE_TTL: int      = int(os.getenv("STATE_TTL",  "604800"))  # 7 days, reset on every write

# ── Itinerary rules ──────────────────────────────────────────────────────────
# All amounts in AED.
DAILY_HOURS_CAP: float          = float(os.getenv("DAILY_HOURS_CAP", "8.0"))
DEFAULT_HOTEL_COST: float       = 300.0
DEFAULT_TRANSPORT_COST: float   = 150.0
DEFAULT_ATTRACTION_PRICE: float = 150.0
DEFAULT_ATTRACTION_DURATION: str = "2 hours"
DEFAULT_HOTEL_NAME: str         = "Premium Hotel"
DEFAULT_TRANSPORT_LABEL: str    = "Private Car"
PLACEHOLDER_IMAGE_URL: str = (
    "https://images.unsplash.com/photo-1512453979798-5ea266f8880c"
    "?w=400&h=250&fit=crop&crop=center"
)
DEFAULT_TRIP_NIGHTS: int = 3

# ── Observability ────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOGS_DIR: str  = os.getenv("LOGS_DIR", str(Path(__file__).resolve().parent.parent / "logs"))

# ── API ──────────────────────────────────────────────────────────────────────
ALLOWED_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]
