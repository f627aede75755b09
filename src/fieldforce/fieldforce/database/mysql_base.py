from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Collection, Dict, List, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def like_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def report_filters(
    *,
    status: Optional[Enum] = None,
    bde_ids: Optional[Collection[int]] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    location: Optional[str] = None,
) -> Tuple[str, List[object]]:
    """WHERE clause shared by the report tables (``status``, ``bde_id``, ``created_at``).

    ``location`` is a case-insensitive substring match; only the sales and
    visit tables have that column.
    """

    clauses: List[str] = []
    params: List[object] = []

    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    if bde_ids is not None:
        ids = sorted(int(i) for i in bde_ids)
        if not ids:
            clauses.append("1=0")
        else:
            clauses.append(f"bde_id IN ({', '.join(['%s'] * len(ids))})")
            params.extend(ids)
    if start is not None:
        clauses.append("created_at >= %s")
        params.append(start)
    if end is not None:
        clauses.append("created_at < %s")
        params.append(end)
    if location is not None:
        clauses.append("LOWER(location) LIKE %s")
        params.append(f"%{like_escape(location.lower())}%")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params
