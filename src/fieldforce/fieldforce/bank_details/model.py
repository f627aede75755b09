from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BankDetails:
    """Payout account of one employee; at most one row per employee."""

    bank_details_id: int
    employee_id: int
    bank_name: str
    ifsc_code: str
    account_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "bank_details_id": self.bank_details_id,
            "employee_id": self.employee_id,
            "bank_name": self.bank_name,
            "ifsc_code": self.ifsc_code,
            "account_number": self.account_number,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
