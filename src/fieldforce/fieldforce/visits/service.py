from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import date_range_bounds, day_bounds, now_local
from ..common.validators import require_date_range, require_min_length, require_non_empty
from ..core.constants import MIN_MOBILE_LENGTH
from ..core.enums import ProductType, Role
from ..core.exceptions import UnauthorizedError, ValidationError
from ..employees.model import Actor
from ..hierarchy.visibility import VisibilityResolver
from .model import VisitReport
from .repository import VisitReportRepository

logger = logging.getLogger(__name__)


class VisitReportService:
    def __init__(self, visits: VisitReportRepository, visibility: VisibilityResolver):
        self._visits = visits
        self._visibility = visibility

    @staticmethod
    def _parse_products(values: Sequence[str]) -> tuple[ProductType, ...]:
        try:
            products = tuple(dict.fromkeys(ProductType(v) for v in values or ()))
        except ValueError:
            raise ValidationError("Unknown product type")
        if not products:
            raise ValidationError("At least one product must be selected")
        return products

    def create(
        self,
        actor: Actor,
        *,
        store_name: str,
        owner_name: str,
        location: str,
        phone_number: str,
        photo_url: str,
        products_interested: Sequence[str],
        now: Optional[datetime] = None,
    ) -> VisitReport:
        if actor.role != Role.BDE:
            raise UnauthorizedError("Only BDEs can log store visits")

        report_id = self._visits.create_report(
            bde_id=actor.employee_id,
            store_name=require_non_empty(store_name, "Store name"),
            owner_name=require_non_empty(owner_name, "Owner name"),
            location=require_non_empty(location, "Location"),
            phone_number=require_min_length(phone_number, "Phone number", MIN_MOBILE_LENGTH),
            photo_url=require_non_empty(photo_url, "Photo"),
            products_interested=self._parse_products(products_interested),
            created_at=now or now_local(),
        )
        logger.info("Visit report %s logged by BDE %s", report_id, actor.employee_id)
        return self._visits.get_by_id(report_id)

    def _scope(self, actor: Actor) -> Optional[set[int]]:
        return None if actor.is_admin else self._visibility.visible_employee_ids(actor)

    def list_for(self, actor: Actor) -> list[VisitReport]:
        return list(self._visits.list_reports(bde_ids=self._scope(actor)))

    def today_count(self, actor: Actor, *, now: Optional[datetime] = None) -> int:
        start, end = day_bounds((now or now_local()).date())
        return len(self._visits.list_reports(bde_ids=self._scope(actor), start=start, end=end))

    def search_by_location(self, actor: Actor, location: str) -> list[VisitReport]:
        location = require_non_empty(location, "Location")
        return list(self._visits.list_reports(bde_ids=self._scope(actor), location=location))

    def list_between(self, actor: Actor, *, start: date, end: date) -> list[VisitReport]:
        start, end = require_date_range(start, end)
        window_start, window_end = date_range_bounds(start, end)
        return list(self._visits.list_reports(bde_ids=self._scope(actor), start=window_start, end=window_end))
