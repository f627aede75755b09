from __future__ import annotations

import logging
from dataclasses import fields
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import date_range_bounds, now_local
from ..common.validators import require_date_range, require_min_length, require_non_empty
from ..core.constants import MIN_MOBILE_LENGTH
from ..core.enums import ReportStatus, Role
from ..core.exceptions import (
    AlreadyResubmittedError,
    ForbiddenError,
    NotFoundError,
    NotOwnerError,
    NotPendingError,
    NotRejectedError,
    UnauthorizedError,
)
from ..employees.model import Actor
from ..hierarchy.visibility import VisibilityResolver
from .model import NewVerificationReport, VerificationReport
from .repository import VerificationReportRepository

logger = logging.getLogger(__name__)

_LABELS = {
    "merchant_name": "Merchant name",
    "mobile_number": "Mobile number",
    "business_name": "Business name",
    "full_address": "Full address",
    "verification_video": "Verification video",
    "shop_photo": "Shop photo",
    "shop_owner_photo": "Shop owner photo",
    "aadhaar_card_photo": "Aadhaar card photo",
    "pan_card_photo": "PAN card photo",
    "store_outside_photo": "Store outside photo",
}


def build_details(values: dict) -> NewVerificationReport:
    """Validate a submission payload; every field is required."""
    cleaned = {}
    for f in fields(NewVerificationReport):
        raw = values.get(f.name)
        if f.name == "mobile_number":
            cleaned[f.name] = require_min_length(raw, _LABELS[f.name], MIN_MOBILE_LENGTH)
        else:
            cleaned[f.name] = require_non_empty(raw, _LABELS[f.name])
    return NewVerificationReport(**cleaned)


class VerificationReportService:
    """Use case: merchant verification workflow.

    Unlike sales, a rejection is not the end: the author may resubmit, which
    files a new pending report and leaves the rejected one as history.
    """

    def __init__(self, reports: VerificationReportRepository, visibility: VisibilityResolver):
        self._reports = reports
        self._visibility = visibility

    def create(self, actor: Actor, *, values: dict, now: Optional[datetime] = None) -> VerificationReport:
        if actor.role != Role.BDE:
            raise UnauthorizedError("Only BDEs can submit verification reports")

        details = build_details(values)
        report_id = self._reports.create_report(
            bde_id=actor.employee_id,
            details=details,
            created_at=now or now_local(),
        )
        logger.info("Verification report %s submitted by BDE %s", report_id, actor.employee_id)
        return self._get(report_id)

    def _get(self, report_id: int) -> VerificationReport:
        report = self._reports.get_by_id(int(report_id))
        if report is None:
            raise NotFoundError("Verification report not found")
        return report

    def get(self, actor: Actor, report_id: int) -> VerificationReport:
        report = self._get(report_id)
        if not self._visibility.can_view(actor, report.bde_id):
            raise ForbiddenError("This report belongs to another team")
        return report

    def approve(self, actor: Actor, report_id: int, *, now: Optional[datetime] = None) -> VerificationReport:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can approve verification reports")

        report = self._get(report_id)
        if report.status != ReportStatus.PENDING:
            raise NotPendingError("Verification report has already been processed")
        if not self._reports.approve(report.report_id, approved_by=actor.employee_id, approved_at=now or now_local()):
            raise NotPendingError("Verification report has already been processed")

        logger.info("Verification report %s approved by %s", report.report_id, actor.employee_id)
        return self._get(report.report_id)

    def reject(self, actor: Actor, report_id: int, *, reason: str, now: Optional[datetime] = None) -> VerificationReport:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can reject verification reports")

        reason = require_non_empty(reason, "Rejection reason")
        report = self._get(report_id)
        if report.status != ReportStatus.PENDING:
            raise NotPendingError("Verification report has already been processed")
        if not self._reports.reject(
            report.report_id, rejected_by=actor.employee_id, rejected_at=now or now_local(), reason=reason
        ):
            raise NotPendingError("Verification report has already been processed")

        logger.info("Verification report %s rejected by %s: %s", report.report_id, actor.employee_id, reason)
        return self._get(report.report_id)

    def resubmit(
        self,
        actor: Actor,
        report_id: int,
        *,
        values: dict,
        now: Optional[datetime] = None,
    ) -> VerificationReport:
        """File a full replacement for a rejected report as a new pending one.

        Each rejected report takes exactly one replacement; a second attempt
        raises ``AlreadyResubmittedError``. The replacement can itself be
        rejected and resubmitted.
        """
        original = self._get(report_id)
        if original.bde_id != actor.employee_id:
            raise NotOwnerError("Only the author can resubmit this report")
        if original.status != ReportStatus.REJECTED:
            raise NotRejectedError("Only rejected reports can be resubmitted")
        if self._reports.get_resubmission_of(original.report_id) is not None:
            raise AlreadyResubmittedError("This report has already been resubmitted")

        details = build_details(values)

        new_id = self._reports.create_report(
            bde_id=original.bde_id,
            details=details,
            created_at=now or now_local(),
            resubmitted_from=original.report_id,
        )
        if new_id is None:
            raise AlreadyResubmittedError("This report has already been resubmitted")

        logger.info("Verification report %s resubmitted as %s", original.report_id, new_id)
        return self._get(new_id)

    def _scope(self, actor: Actor) -> Optional[set[int]]:
        return None if actor.is_admin else self._visibility.visible_employee_ids(actor)

    def list_for(self, actor: Actor) -> list[VerificationReport]:
        return list(self._reports.list_reports(bde_ids=self._scope(actor)))

    def list_by_status(self, actor: Actor, status: ReportStatus) -> list[VerificationReport]:
        return list(self._reports.list_reports(status=status, bde_ids=self._scope(actor)))

    def list_pending(self, actor: Actor) -> list[VerificationReport]:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can review pending verification reports")
        return list(self._reports.list_reports(status=ReportStatus.PENDING))

    def search(self, actor: Actor, query: str) -> list[VerificationReport]:
        query = (query or "").strip()
        if not query:
            return self.list_for(actor)
        return list(self._reports.search(query, bde_ids=self._scope(actor)))

    def list_between(self, actor: Actor, *, start: date, end: date) -> list[VerificationReport]:
        start, end = require_date_range(start, end)
        window_start, window_end = date_range_bounds(start, end)
        return list(self._reports.list_reports(bde_ids=self._scope(actor), start=window_start, end=window_end))
