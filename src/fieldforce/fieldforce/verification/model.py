from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ReportStatus


@dataclass(frozen=True)
class NewVerificationReport:
    """Merchant details and media references submitted for verification.

    Media fields are opaque references (URL or storage key) produced by the
    upload layer.
    """

    merchant_name: str
    mobile_number: str
    business_name: str
    full_address: str
    verification_video: str
    shop_photo: str
    shop_owner_photo: str
    aadhaar_card_photo: str
    pan_card_photo: str
    store_outside_photo: str


@dataclass(frozen=True)
class VerificationReport:
    report_id: int
    bde_id: int
    details: NewVerificationReport
    status: ReportStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    resubmitted_from: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "bde_id": self.bde_id,
            **asdict(self.details),
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejected_by": self.rejected_by,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
            "rejection_reason": self.rejection_reason,
            "resubmitted_from": self.resubmitted_from,
        }
