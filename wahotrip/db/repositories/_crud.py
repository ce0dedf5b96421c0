"""
db/repositories/_crud.py
------------------------
Shared single-table helpers for the repository modules.

Identifiers are composed with psycopg2.sql so only whitelisted column names
ever reach the statement text; values always travel as parameters.

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.connection.get_conn().
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from psycopg2 import sql


class Filters:
    """Accumulates WHERE fragments: equality, IN-list, range and ILIKE."""

    def __init__(self) -> None:
        self._parts: list[sql.Composable] = []
        self.params: list[Any] = []

    def eq(self, column: str, value: Any) -> "Filters":
        if value is not None:
            self._parts.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
            self.params.append(value)
        return self

    def any_of(self, column: str, values: Optional[Iterable[Any]]) -> "Filters":
        if values:
            self._parts.append(sql.SQL("{} = ANY(%s)").format(sql.Identifier(column)))
            self.params.append(list(values))
        return self

    def gte(self, column: str, value: Any) -> "Filters":
        if value is not None:
            self._parts.append(sql.SQL("{} >= %s").format(sql.Identifier(column)))
            self.params.append(value)
        return self

    def lte(self, column: str, value: Any) -> "Filters":
        if value is not None:
            self._parts.append(sql.SQL("{} <= %s").format(sql.Identifier(column)))
            self.params.append(value)
        return self

    def ilike(self, column: str, term: Optional[str]) -> "Filters":
        if term:
            self._parts.append(sql.SQL("{} ILIKE %s").format(sql.Identifier(column)))
            self.params.append(f"%{term}%")
        return self

    def clause(self) -> sql.Composable:
        if not self._parts:
            return sql.SQL("")
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(self._parts)


def _rows(cur) -> list[dict]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


def _pick(data: dict[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    allowed = set(allowed)
    return {k: v for k, v in data.items() if k in allowed}


def select(
    conn,
    table: str,
    filters: Optional[Filters] = None,
    order_by: str | tuple[str, ...] | None = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> list[dict]:
    filters = filters or Filters()
    query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table)) + filters.clause()
    if order_by:
        columns = (order_by,) if isinstance(order_by, str) else order_by
        direction = sql.SQL("DESC" if descending else "ASC")
        query += sql.SQL(" ORDER BY ") + sql.SQL(", ").join(
            sql.SQL("{} {}").format(sql.Identifier(c), direction) for c in columns
        )
    params = list(filters.params)
    if limit is not None:
        query += sql.SQL(" LIMIT %s")
        params.append(limit)
    with conn.cursor() as cur:
        cur.execute(query, params)
        return _rows(cur)


def select_one(conn, table: str, row_id: Any) -> Optional[dict]:
    rows = select(conn, table, Filters().eq("id", row_id), limit=1)
    return rows[0] if rows else None


def insert(conn, table: str, data: dict[str, Any], allowed: Iterable[str]) -> dict:
    """Insert the whitelisted subset of `data`; returns the stored row."""
    row = _pick(data, allowed)
    if not row:
        raise ValueError(f"No insertable columns supplied for {table}")
    columns = list(row)
    query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
        sql.Identifier(table),
        sql.SQL(", ").join(sql.Identifier(c) for c in columns),
        sql.SQL(", ").join(sql.Placeholder() for _ in columns),
    )
    with conn.cursor() as cur:
        cur.execute(query, [row[c] for c in columns])
        return _rows(cur)[0]


def update(conn, table: str, row_id: Any, data: dict[str, Any], allowed: Iterable[str]) -> Optional[dict]:
    """Update the whitelisted subset of `data`; returns the row or None if the id is unknown."""
    row = _pick(data, allowed)
    if not row:
        return select_one(conn, table, row_id)
    columns = list(row)
    query = sql.SQL("UPDATE {} SET {}, updated_at = NOW() WHERE id = %s RETURNING *").format(
        sql.Identifier(table),
        sql.SQL(", ").join(sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns),
    )
    with conn.cursor() as cur:
        cur.execute(query, [row[c] for c in columns] + [row_id])
        rows = _rows(cur)
        return rows[0] if rows else None


def delete(conn, table: str, row_id: Any) -> bool:
    query = sql.SQL("DELETE FROM {} WHERE id = %s").format(sql.Identifier(table))
    with conn.cursor() as cur:
        cur.execute(query, (row_id,))
        return cur.rowcount > 0
