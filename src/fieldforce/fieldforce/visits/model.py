from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import ProductType


@dataclass(frozen=True)
class VisitReport:
    """Domain entity: a store visit logged by a BDE (no approval workflow)."""

    report_id: int
    bde_id: int
    store_name: str
    owner_name: str
    location: str
    phone_number: str
    photo_url: str
    products_interested: tuple[ProductType, ...]
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "bde_id": self.bde_id,
            "store_name": self.store_name,
            "owner_name": self.owner_name,
            "location": self.location,
            "phone_number": self.phone_number,
            "photo_url": self.photo_url,
            "products_interested": [p.value for p in self.products_interested],
            "created_at": self.created_at.isoformat(),
        }
