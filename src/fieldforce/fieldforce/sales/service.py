from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import date_range_bounds, day_bounds, month_bounds, now_local
from ..common.validators import (
    require_date_range,
    require_min_length,
    require_non_empty,
    require_positive_amount,
    require_positive_int,
)
from ..core.constants import MIN_MOBILE_LENGTH
from ..core.enums import PaymentMode, ReportStatus, Role
from ..core.exceptions import (
    ForbiddenError,
    NotFoundError,
    NotPendingError,
    ProductNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ..employees.model import Actor
from ..hierarchy.visibility import VisibilityResolver
from ..products.repository import ProductRepository
from .model import NewSalesReport, SalesReport
from .repository import SalesReportRepository

logger = logging.getLogger(__name__)


class SalesReportService:
    """Use case: sales report lifecycle and point totals.

    pending -> approved and pending -> rejected are the only transitions, and
    both end the workflow. Only approved reports ever count towards points.
    """

    def __init__(self, sales: SalesReportRepository, products: ProductRepository, visibility: VisibilityResolver):
        self._sales = sales
        self._products = products
        self._visibility = visibility

    def create(
        self,
        actor: Actor,
        *,
        merchant_name: str,
        merchant_mobile: str,
        location: str,
        amount,
        transaction_id: str,
        payment_mode: str,
        product_id: int,
        now: Optional[datetime] = None,
    ) -> SalesReport:
        if actor.role != Role.BDE:
            raise UnauthorizedError("Only BDEs can submit sales reports")

        try:
            mode = PaymentMode(payment_mode)
        except ValueError:
            raise ValidationError("Payment mode is not supported")

        data = NewSalesReport(
            merchant_name=require_non_empty(merchant_name, "Merchant name"),
            merchant_mobile=require_min_length(merchant_mobile, "Merchant mobile", MIN_MOBILE_LENGTH),
            location=require_non_empty(location, "Location"),
            amount=require_positive_amount(amount, "Amount"),
            transaction_id=require_non_empty(transaction_id, "Transaction ID"),
            payment_mode=mode,
            product_id=require_positive_int(product_id, "Product"),
        )

        product = self._products.get_by_id(data.product_id)
        if product is None:
            raise ProductNotFoundError("Product not found")

        report_id = self._sales.create_report(
            bde_id=actor.employee_id,
            data=data,
            points=product.points,
            created_at=now or now_local(),
        )
        logger.info("Sales report %s submitted by BDE %s (%s points)", report_id, actor.employee_id, product.points)
        return self._sales.get_by_id(report_id)

    def _get(self, report_id: int) -> SalesReport:
        report = self._sales.get_by_id(int(report_id))
        if report is None:
            raise NotFoundError("Sales report not found")
        return report

    def get(self, actor: Actor, report_id: int) -> SalesReport:
        report = self._get(report_id)
        if not self._visibility.can_view(actor, report.bde_id):
            raise ForbiddenError("This report belongs to another team")
        return report

    def approve(self, actor: Actor, report_id: int, *, now: Optional[datetime] = None) -> SalesReport:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can approve sales reports")

        report = self._get(report_id)
        if report.status != ReportStatus.PENDING:
            raise NotPendingError("Sales report has already been processed")
        if not self._sales.approve(report.report_id, approved_by=actor.employee_id, approved_at=now or now_local()):
            raise NotPendingError("Sales report has already been processed")

        logger.info("Sales report %s approved by %s", report.report_id, actor.employee_id)
        return self._get(report.report_id)

    def reject(self, actor: Actor, report_id: int, *, reason: str, now: Optional[datetime] = None) -> SalesReport:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can reject sales reports")

        reason = require_non_empty(reason, "Rejection reason")
        report = self._get(report_id)
        if report.status != ReportStatus.PENDING:
            raise NotPendingError("Sales report has already been processed")
        if not self._sales.reject(
            report.report_id, rejected_by=actor.employee_id, rejected_at=now or now_local(), reason=reason
        ):
            raise NotPendingError("Sales report has already been processed")

        logger.info("Sales report %s rejected by %s", report.report_id, actor.employee_id)
        return self._get(report.report_id)

    def _scope(self, actor: Actor) -> Optional[set[int]]:
        return None if actor.is_admin else self._visibility.visible_employee_ids(actor)

    def list_for(self, actor: Actor, *, status: Optional[ReportStatus] = None) -> list[SalesReport]:
        return list(self._sales.list_reports(status=status, bde_ids=self._scope(actor)))

    def list_pending(self, actor: Actor) -> list[SalesReport]:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can review pending sales reports")
        return list(self._sales.list_reports(status=ReportStatus.PENDING))

    def search_by_location(self, actor: Actor, location: str) -> list[SalesReport]:
        location = require_non_empty(location, "Location")
        return list(self._sales.list_reports(bde_ids=self._scope(actor), location=location))

    def list_between(self, actor: Actor, *, start: date, end: date) -> list[SalesReport]:
        """Reports created on any day from ``start`` to ``end``, both included."""
        start, end = require_date_range(start, end)
        window_start, window_end = date_range_bounds(start, end)
        return list(self._sales.list_reports(bde_ids=self._scope(actor), start=window_start, end=window_end))

    def sales_by_month(self, actor: Actor, *, year: int, month: int, bde_id: Optional[int] = None) -> list[SalesReport]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        start, end = month_bounds(int(year), int(month))
        reports = self._sales.list_reports(
            bde_ids=[int(bde_id)] if bde_id is not None else None,
            start=start,
            end=end,
        )
        return self._visibility.visible_reports_of(actor, reports)

    def today_points(self, *, bde_id: Optional[int] = None, now: Optional[datetime] = None) -> int:
        start, end = day_bounds((now or now_local()).date())
        return self._sales.sum_approved_points(
            start=start, end=end, bde_ids=[int(bde_id)] if bde_id is not None else None
        )

    def month_points(self, *, bde_id: Optional[int] = None, now: Optional[datetime] = None) -> int:
        now = now or now_local()
        start, end = month_bounds(now.year, now.month)
        return self._sales.sum_approved_points(
            start=start, end=end, bde_ids=[int(bde_id)] if bde_id is not None else None
        )

    def points_summary(self, actor: Actor, *, now: Optional[datetime] = None) -> dict:
        """Approved points for today and this month, limited to the actor's team."""
        now = now or now_local()
        scope = self._scope(actor)
        day_start, day_end = day_bounds(now.date())
        month_start, month_end = month_bounds(now.year, now.month)
        return {
            "today": self._sales.sum_approved_points(start=day_start, end=day_end, bde_ids=scope),
            "month": self._sales.sum_approved_points(start=month_start, end=month_end, bde_ids=scope),
        }
