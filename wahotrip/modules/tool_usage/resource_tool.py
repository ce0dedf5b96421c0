"""
modules/tool_usage/resource_tool.py
-----------------------------------
Fetches the three resource tables (attractions, hotels, transport) from the
hosted Postgres store for one generation cycle or one customization request.

Each table degrades independently: a database error on one table is logged and
that table comes back empty; the others are still returned. Empty data is not
fatal, the fallback generator carries its own attraction table.

Emirate selection uses the form slugs ("abu-dhabi"); "all" or an empty list
means no emirate filter.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable, Optional

import psycopg2

from wahotrip.db.connection import get_conn
from wahotrip.db.repositories import attraction_repo, hotel_repo, transport_repo
from wahotrip.schemas.preferences import ALL_EMIRATES, EMIRATE_NAMES
from wahotrip.schemas.resources import AttractionRow, HotelRow, ResourceBundle, TransportRow

logger = logging.getLogger(__name__)


def emirate_names(emirates: Optional[list[str]]) -> list[str]:
    """Form slugs → stored names; empty when every emirate is wanted."""
    if not emirates or ALL_EMIRATES in emirates:
        return []
    return [EMIRATE_NAMES.get(e, e) for e in emirates]


def _emirate_match(row_emirate: str, selected: str) -> bool:
    row = row_emirate.lower()
    name = EMIRATE_NAMES.get(selected, selected).lower()
    slug = selected.lower()
    return row in (name, slug) or name in row or slug in row


def filter_attractions(
    rows: list[AttractionRow],
    emirates: Optional[list[str]] = None,
    search: Optional[str] = None,
) -> list[AttractionRow]:
    """
    Customization catalog filter.

    A row is kept when its emirate equals or contains the selected emirate's slug or
    stored name (any selection) and, if given, its name contains the search term.
    """
    wanted = [] if not emirates or ALL_EMIRATES in emirates else emirates
    term = (search or "").strip().lower()
    kept = []
    for row in rows:
        if wanted and not any(_emirate_match(row.emirate, e) for e in wanted):
            continue
        if term and term not in row.name.lower():
            continue
        kept.append(row)
    return kept


class ResourceTool:
    def __init__(self, conn_factory: Callable[[], AbstractContextManager] = get_conn):
        self._conn_factory = conn_factory

    def fetch_attractions(self, emirates: Optional[list[str]] = None) -> list[AttractionRow]:
        try:
            with self._conn_factory() as conn:
                rows = attraction_repo.list_attractions(
                    conn, emirates=emirate_names(emirates) or None, active_only=True,
                )
        except psycopg2.Error as exc:
            logger.warning("Attractions fetch failed: %s", exc)
            return []
        return [AttractionRow.from_row(r) for r in rows]

    def fetch_hotels(self) -> list[HotelRow]:
        try:
            with self._conn_factory() as conn:
                rows = hotel_repo.list_hotels(conn)
        except psycopg2.Error as exc:
            logger.warning("Hotels fetch failed: %s", exc)
            return []
        return [HotelRow.from_row(r) for r in rows]

    def fetch_transport(self) -> list[TransportRow]:
        try:
            with self._conn_factory() as conn:
                rows = transport_repo.list_transport(conn)
        except psycopg2.Error as exc:
            logger.warning("Transport fetch failed: %s", exc)
            return []
        return [TransportRow.from_row(r) for r in rows if r.get("is_active", True) is not False]

    def fetch_all(self, emirates: Optional[list[str]] = None) -> ResourceBundle:
        bundle = ResourceBundle(
            attractions=self.fetch_attractions(emirates),
            hotels=self.fetch_hotels(),
            transport=self.fetch_transport(),
        )
        logger.info(
            "Fetched resources: %d attractions, %d hotels, %d transport (emirates=%s)",
            len(bundle.attractions), len(bundle.hotels), len(bundle.transport),
            ",".join(emirates or [ALL_EMIRATES]),
        )
        return bundle
