from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import NewSalesReport, SalesReport


class SalesReportRepository(Protocol):
    def create_report(self, *, bde_id: int, data: NewSalesReport, points: int, created_at: datetime) -> int:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[SalesReport]:
        raise NotImplementedError

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[SalesReport]:
        """Newest first; ``start`` inclusive, ``end`` exclusive.

        ``location`` keeps reports whose location contains it, ignoring case.
        """

        raise NotImplementedError

    def sum_approved_points(
        self,
        *,
        start: datetime,
        end: datetime,
        bde_ids: Optional[Collection[int]] = None,
    ) -> int:
        raise NotImplementedError

    def approve(self, report_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        """Move a pending report to approved; False if it was not pending."""

        raise NotImplementedError

    def reject(self, report_id: int, *, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        """Move a pending report to rejected; False if it was not pending."""

        raise NotImplementedError
