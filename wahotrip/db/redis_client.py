"""
db/redis_client.py
-------------------
redis-py client singleton plus JSON blob helpers for session state.

Key schema:

  {blob_name}:{session_id}
       Type : String (JSON document)
       TTL  : STATE_TTL (default 604,800 s = 7 days; reset on every write)
       Names: travelFormData, generatedPackages, selectedPackage

Environment variables (set in config.py):
    REDIS_HOST        default: localhost
    REDIS_PORT        default: 6379
    REDIS_DB          default: 0
    REDIS_PASSWORD    default: ""  (empty = no auth)
    STATE_TTL         default: 604800
"""

from __future__ import annotations

from typing import Any, Optional

import redis

from wahotrip import config

# Module-level singleton; initialised lazily on first call to get_redis()
_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Return the singleton Redis client, creating it on first call."""
    global _client
    if _client is None:
        kwargs: dict[str, Any] = {
            "host":             config.REDIS_HOST,
            "port":             config.REDIS_PORT,
            "db":               config.REDIS_DB,
            "decode_responses": True,   # return str, not bytes
        }
        if config.REDIS_PASSWORD:
            kwargs["password"] = config.REDIS_PASSWORD
        _client = redis.Redis(**kwargs)
    return _client


def blob_key(name: str, session_id: str) -> str:
    return f"{name}:{session_id}"


def set_blob(name: str, session_id: str, payload: str) -> None:
    """Write one serialized blob and reset its TTL."""
    get_redis().setex(blob_key(name, session_id), config.STATE_TTL, payload)


def get_blob(name: str, session_id: str) -> Optional[str]:
    """Return the raw blob, or None when the key is missing or expired."""
    return get_redis().get(blob_key(name, session_id))


def delete_blob(name: str, session_id: str) -> None:
    get_redis().delete(blob_key(name, session_id))
