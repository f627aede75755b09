from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import PaymentMode, ReportStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int, report_filters
from .model import NewSalesReport, SalesReport
from .repository import SalesReportRepository

_COLUMNS = """
    report_id, bde_id, merchant_name, merchant_mobile, location, amount,
    transaction_id, payment_mode, product_id, points, status, created_at,
    approved_by, approved_at, rejected_by, rejected_at, rejection_reason
"""


def _to_report(r: dict) -> SalesReport:
    return SalesReport(
        report_id=int(r["report_id"]),
        bde_id=int(r["bde_id"]),
        merchant_name=r["merchant_name"],
        merchant_mobile=r["merchant_mobile"],
        location=r["location"],
        amount=float(r["amount"]),
        transaction_id=r["transaction_id"],
        payment_mode=PaymentMode(r["payment_mode"]),
        product_id=int(r["product_id"]),
        points=int(r["points"]),
        status=ReportStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=optional_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        rejected_by=optional_int(r.get("rejected_by")),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLSalesReportRepository(SalesReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_report(self, *, bde_id: int, data: NewSalesReport, points: int, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sales_reports(
                    bde_id, merchant_name, merchant_mobile, location, amount,
                    transaction_id, payment_mode, product_id, points, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(bde_id),
                    data.merchant_name,
                    data.merchant_mobile,
                    data.location,
                    data.amount,
                    data.transaction_id,
                    data.payment_mode.value,
                    int(data.product_id),
                    int(points),
                    ReportStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[SalesReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sales_reports WHERE report_id=%s", (int(report_id),))
            row = fetchone(cur)
            return _to_report(row) if row else None

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[SalesReport]:
        where, params = report_filters(status=status, bde_ids=bde_ids, start=start, end=end, location=location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sales_reports {where} ORDER BY created_at DESC, report_id DESC",
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def sum_approved_points(
        self,
        *,
        start: datetime,
        end: datetime,
        bde_ids: Optional[Collection[int]] = None,
    ) -> int:
        where, params = report_filters(status=ReportStatus.APPROVED, bde_ids=bde_ids, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COALESCE(SUM(points), 0) AS total FROM sales_reports {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def approve(self, report_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sales_reports
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE report_id=%s AND status=%s
                """,
                (
                    ReportStatus.APPROVED.value,
                    int(approved_by),
                    approved_at,
                    int(report_id),
                    ReportStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def reject(self, report_id: int, *, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sales_reports
                SET status=%s, rejected_by=%s, rejected_at=%s, rejection_reason=%s
                WHERE report_id=%s AND status=%s
                """,
                (
                    ReportStatus.REJECTED.value,
                    int(rejected_by),
                    rejected_at,
                    reason,
                    int(report_id),
                    ReportStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
