"""
db/
----
Database access layer for the UAE trip planner.

Storage architecture:
  PostgreSQL (psycopg2): hosted resource store
    tables: attractions, hotels, transport, travel_submissions, bookings

  Redis (redis-py): per-session state blobs
    travelFormData:{sid}, generatedPackages:{sid}, selectedPackage:{sid}
    TTL = STATE_TTL (7 days, reset on write)

Public exports (import from here for convenience):
    from wahotrip.db import get_conn, get_redis
    from wahotrip.db.repositories import attraction_repo, hotel_repo, transport_repo
"""

from wahotrip.db.connection import get_conn, close_pool
from wahotrip.db.redis_client import get_redis

__all__ = ["get_conn", "close_pool", "get_redis"]
