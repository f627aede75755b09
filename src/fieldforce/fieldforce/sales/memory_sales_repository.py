from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import ReportStatus
from .model import NewSalesReport, SalesReport
from .repository import SalesReportRepository


class InMemorySalesReportRepository(SalesReportRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, SalesReport] = {}
        self._next_id = 1

    def create_report(self, *, bde_id: int, data: NewSalesReport, points: int, created_at: datetime) -> int:
        with self._lock:
            report_id = self._next_id
            self._next_id += 1
            self._rows[report_id] = SalesReport(
                report_id=report_id,
                bde_id=int(bde_id),
                merchant_name=data.merchant_name,
                merchant_mobile=data.merchant_mobile,
                location=data.location,
                amount=data.amount,
                transaction_id=data.transaction_id,
                payment_mode=data.payment_mode,
                product_id=data.product_id,
                points=int(points),
                status=ReportStatus.PENDING,
                created_at=created_at,
            )
            return report_id

    def get_by_id(self, report_id: int) -> Optional[SalesReport]:
        with self._lock:
            return self._rows.get(int(report_id))

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[SalesReport]:
        with self._lock:
            rows = list(self._rows.values())
        needle = location.lower() if location is not None else None
        rows = [
            r
            for r in rows
            if (status is None or r.status == status)
            and (bde_ids is None or r.bde_id in bde_ids)
            and (start is None or r.created_at >= start)
            and (end is None or r.created_at < end)
            and (needle is None or needle in r.location.lower())
        ]
        rows.sort(key=lambda r: (r.created_at, r.report_id), reverse=True)
        return rows

    def sum_approved_points(
        self,
        *,
        start: datetime,
        end: datetime,
        bde_ids: Optional[Collection[int]] = None,
    ) -> int:
        rows = self.list_reports(status=ReportStatus.APPROVED, bde_ids=bde_ids, start=start, end=end)
        return sum(r.points for r in rows)

    def _transition(self, report_id: int, **changes) -> bool:
        with self._lock:
            current = self._rows.get(int(report_id))
            if current is None or current.status != ReportStatus.PENDING:
                return False
            self._rows[current.report_id] = replace(current, **changes)
            return True

    def approve(self, report_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        return self._transition(
            report_id,
            status=ReportStatus.APPROVED,
            approved_by=int(approved_by),
            approved_at=approved_at,
        )

    def reject(self, report_id: int, *, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        return self._transition(
            report_id,
            status=ReportStatus.REJECTED,
            rejected_by=int(rejected_by),
            rejected_at=rejected_at,
            rejection_reason=reason,
        )
