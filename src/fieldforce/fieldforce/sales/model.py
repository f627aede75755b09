from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PaymentMode, ReportStatus


@dataclass(frozen=True)
class SalesReport:
    """Domain entity: one sale logged by a BDE.

    ``points`` is copied from the product when the report is created and is
    never recomputed.
    """

    report_id: int
    bde_id: int
    merchant_name: str
    merchant_mobile: str
    location: str
    amount: float
    transaction_id: str
    payment_mode: PaymentMode
    product_id: int
    points: int
    status: ReportStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "bde_id": self.bde_id,
            "merchant_name": self.merchant_name,
            "merchant_mobile": self.merchant_mobile,
            "location": self.location,
            "amount": self.amount,
            "transaction_id": self.transaction_id,
            "payment_mode": self.payment_mode.value,
            "product_id": self.product_id,
            "points": self.points,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejected_by": self.rejected_by,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class NewSalesReport:
    merchant_name: str
    merchant_mobile: str
    location: str
    amount: float
    transaction_id: str
    payment_mode: PaymentMode
    product_id: int
