from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import ProductType
from .model import VisitReport


class VisitReportRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[VisitReport]:
        raise NotImplementedError

    def list_reports(
        self,
        *,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[VisitReport]:
        raise NotImplementedError
