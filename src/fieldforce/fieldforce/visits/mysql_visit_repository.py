from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import ProductType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, report_filters
from .model import VisitReport
from .repository import VisitReportRepository

_COLUMNS = """
    report_id, bde_id, store_name, owner_name, location, phone_number,
    photo_url, products_interested, created_at
"""


def _to_report(r: dict) -> VisitReport:
    products = [p for p in (r.get("products_interested") or "").split(",") if p]
    return VisitReport(
        report_id=int(r["report_id"]),
        bde_id=int(r["bde_id"]),
        store_name=r["store_name"],
        owner_name=r["owner_name"],
        location=r["location"],
        phone_number=r["phone_number"],
        photo_url=r["photo_url"],
        products_interested=tuple(ProductType(p) for p in products),
        created_at=r["created_at"],
    )


class MySQLVisitReportRepository(VisitReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_report(
        self,
        *,
        bde_id: int,
        store_name: str,
        owner_name: str,
        location: str,
        phone_number: str,
        photo_url: str,
        products_interested: Sequence[ProductType],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO visit_reports(
                    bde_id, store_name, owner_name, location, phone_number,
                    photo_url, products_interested, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(bde_id),
                    store_name,
                    owner_name,
                    location,
                    phone_number,
                    photo_url,
                    ",".join(p.value for p in products_interested),
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[VisitReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM visit_reports WHERE report_id=%s", (int(report_id),))
            row = fetchone(cur)
            return _to_report(row) if row else None

    def list_reports(
        self,
        *,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[VisitReport]:
        where, params = report_filters(bde_ids=bde_ids, start=start, end=end, location=location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM visit_reports {where} ORDER BY created_at DESC, report_id DESC",
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]
