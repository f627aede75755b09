from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import NewVerificationReport, VerificationReport


class VerificationReportRepository(Protocol):
    def create_report(
        self,
        *,
        bde_id: int,
        details: NewVerificationReport,
        created_at: datetime,
        resubmitted_from: Optional[int] = None,
    ) -> Optional[int]:
        """Insert a pending report.

        Returns None when ``resubmitted_from`` already has a replacement, so a
        rejected report is resubmitted at most once.
        """

        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[VerificationReport]:
        raise NotImplementedError

    def get_resubmission_of(self, report_id: int) -> Optional[VerificationReport]:
        raise NotImplementedError

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[VerificationReport]:
        raise NotImplementedError

    def search(self, query: str, *, bde_ids: Optional[Collection[int]] = None) -> Sequence[VerificationReport]:
        """Case-insensitive match on merchant, mobile, business name and address."""

        raise NotImplementedError

    def approve(self, report_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        raise NotImplementedError

    def reject(self, report_id: int, *, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        raise NotImplementedError
