from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import ReportStatus
from .model import NewVerificationReport, VerificationReport
from .repository import VerificationReportRepository


class InMemoryVerificationReportRepository(VerificationReportRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, VerificationReport] = {}
        self._next_id = 1

    def create_report(
        self,
        *,
        bde_id: int,
        details: NewVerificationReport,
        created_at: datetime,
        resubmitted_from: Optional[int] = None,
    ) -> Optional[int]:
        with self._lock:
            if resubmitted_from is not None and any(
                r.resubmitted_from == resubmitted_from for r in self._rows.values()
            ):
                return None
            report_id = self._next_id
            self._next_id += 1
            self._rows[report_id] = VerificationReport(
                report_id=report_id,
                bde_id=int(bde_id),
                details=details,
                status=ReportStatus.PENDING,
                created_at=created_at,
                resubmitted_from=resubmitted_from,
            )
            return report_id

    def get_by_id(self, report_id: int) -> Optional[VerificationReport]:
        with self._lock:
            return self._rows.get(int(report_id))

    def get_resubmission_of(self, report_id: int) -> Optional[VerificationReport]:
        with self._lock:
            return next((r for r in self._rows.values() if r.resubmitted_from == int(report_id)), None)

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[VerificationReport]:
        with self._lock:
            rows = list(self._rows.values())
        rows = [
            r
            for r in rows
            if (status is None or r.status == status)
            and (bde_ids is None or r.bde_id in bde_ids)
            and (start is None or r.created_at >= start)
            and (end is None or r.created_at < end)
        ]
        rows.sort(key=lambda r: (r.created_at, r.report_id), reverse=True)
        return rows

    def search(self, query: str, *, bde_ids: Optional[Collection[int]] = None) -> Sequence[VerificationReport]:
        q = query.lower()
        return [
            r
            for r in self.list_reports(bde_ids=bde_ids)
            if q in r.details.merchant_name.lower()
            or q in r.details.mobile_number.lower()
            or q in r.details.business_name.lower()
            or q in r.details.full_address.lower()
        ]

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
