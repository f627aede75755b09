from __future__ import annotations

import threading
from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import ProductType
from .model import VisitReport
from .repository import VisitReportRepository


class InMemoryVisitReportRepository(VisitReportRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, VisitReport] = {}
        self._next_id = 1

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
        with self._lock:
            report_id = self._next_id
            self._next_id += 1
            self._rows[report_id] = VisitReport(
                report_id=report_id,
                bde_id=int(bde_id),
                store_name=store_name,
                owner_name=owner_name,
                location=location,
                phone_number=phone_number,
                photo_url=photo_url,
                products_interested=tuple(products_interested),
                created_at=created_at,
            )
            return report_id

    def get_by_id(self, report_id: int) -> Optional[VisitReport]:
        with self._lock:
            return self._rows.get(int(report_id))

    def list_reports(
        self,
        *,
        bde_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> Sequence[VisitReport]:
        with self._lock:
            rows = list(self._rows.values())
        needle = location.lower() if location is not None else None
        rows = [
            r
            for r in rows
            if (bde_ids is None or r.bde_id in bde_ids)
            and (start is None or r.created_at >= start)
            and (end is None or r.created_at < end)
            and (needle is None or needle in r.location.lower())
        ]
        rows.sort(key=lambda r: (r.created_at, r.report_id), reverse=True)
        return rows
