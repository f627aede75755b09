from __future__ import annotations

from dataclasses import astuple, fields
from datetime import datetime
from typing import Collection, Optional, Sequence

import mysql.connector

from ..core.enums import ReportStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int, report_filters
from .model import NewVerificationReport, VerificationReport
from .repository import VerificationReportRepository

_DETAIL_COLUMNS = [f.name for f in fields(NewVerificationReport)]

_COLUMNS = ", ".join(
    [
        "report_id",
        "bde_id",
        *_DETAIL_COLUMNS,
        "status",
        "created_at",
        "approved_by",
        "approved_at",
        "rejected_by",
        "rejected_at",
        "rejection_reason",
        "resubmitted_from",
    ]
)


def _to_report(r: dict) -> VerificationReport:
    return VerificationReport(
        report_id=int(r["report_id"]),
        bde_id=int(r["bde_id"]),
        details=NewVerificationReport(**{name: r[name] for name in _DETAIL_COLUMNS}),
        status=ReportStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=optional_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        rejected_by=optional_int(r.get("rejected_by")),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
        resubmitted_from=optional_int(r.get("resubmitted_from")),
    )


class MySQLVerificationReportRepository(VerificationReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_report(
        self,
        *,
        bde_id: int,
        details: NewVerificationReport,
        created_at: datetime,
        resubmitted_from: Optional[int] = None,
    ) -> Optional[int]:
        columns = ["bde_id", *_DETAIL_COLUMNS, "status", "created_at", "resubmitted_from"]
        values = (int(bde_id), *astuple(details), ReportStatus.PENDING.value, created_at, resubmitted_from)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO verification_reports({', '.join(columns)}) VALUES({', '.join(['%s'] * len(columns))})",
                    values,
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            # uq_verification_resubmitted_from: this rejected report already has a replacement.
            if resubmitted_from is None:
                raise
            return None

    def get_by_id(self, report_id: int) -> Optional[VerificationReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM verification_reports WHERE report_id=%s", (int(report_id),))
            row = fetchone(cur)
            return _to_report(row) if row else None

    def get_resubmission_of(self, report_id: int) -> Optional[VerificationReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM verification_reports WHERE resubmitted_from=%s", (int(report_id),))
            row = fetchone(cur)
            return _to_report(row) if row else None

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[VerificationReport]:
        where, params = report_filters(status=status, bde_ids=bde_ids, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM verification_reports {where} ORDER BY created_at DESC, report_id DESC",
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def search(self, query: str, *, bde_ids: Optional[Collection[int]] = None) -> Sequence[VerificationReport]:
        where, params = report_filters(bde_ids=bde_ids)
        like = f"%{query.lower()}%"
        match = """
            (LOWER(merchant_name) LIKE %s OR LOWER(mobile_number) LIKE %s
             OR LOWER(business_name) LIKE %s OR LOWER(full_address) LIKE %s)
        """
        where = f"{where} AND {match}" if where else f"WHERE {match}"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM verification_reports {where} ORDER BY created_at DESC, report_id DESC",
                (*params, like, like, like, like),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def approve(self, report_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE verification_reports
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
                UPDATE verification_reports
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
